from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional, Protocol, Sequence

from .model import AttendanceEvent, RecordResult


class AttendanceLedgerRepository(Protocol):
    """Append-only event table. There is deliberately no update or delete."""

    def append(
        self,
        *,
        identity_id: str,
        timestamp: datetime,
        match_distance: float,
        image_ref: Optional[str] = None,
    ) -> AttendanceEvent:
        raise NotImplementedError

    def append_unless_within(
        self,
        *,
        identity_id: str,
        timestamp: datetime,
        match_distance: float,
        image_ref: Optional[str] = None,
        cooldown: timedelta,
    ) -> RecordResult:
        """Append unless the identity's latest event is younger than ``cooldown``.

        The read and the append are one atomic step for the identity, across
        every process sharing the backend.
        """

        raise NotImplementedError

    def latest_for_identity(self, identity_id: str) -> Optional[AttendanceEvent]:
        raise NotImplementedError

    def recent_for_identity(self, identity_id: str, limit: int) -> Sequence[AttendanceEvent]:
        """Newest first."""

        raise NotImplementedError

    def between(self, *, start: datetime, end: datetime) -> Sequence[AttendanceEvent]:
        """Events with ``start <= timestamp < end``, oldest first."""

        raise NotImplementedError


def within_cooldown(last: Optional[AttendanceEvent], now: datetime, cooldown: timedelta) -> bool:
    """An event exactly ``cooldown`` old no longer blocks a new one."""
    return last is not None and now - last.timestamp < cooldown
