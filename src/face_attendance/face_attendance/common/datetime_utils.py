from __future__ import annotations

from datetime import date, datetime


def parse_iso_date(value: str) -> date:
    """Report range bound in ``YYYY-MM-DD`` form. Raises ValueError otherwise."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def now_local() -> datetime:
    """Default clock for check-ins. Services take a ``clock`` callable instead of calling this directly."""
    return datetime.now()
