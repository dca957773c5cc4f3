from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta

from ..enrollment.repository import EnrollmentRepository
from .service import AttendanceLedger


@dataclass(frozen=True)
class ReportData:
    rows: list[dict]
    summary: list[dict]


REPORT_FIELDS = [
    "date",
    "time",
    "identity_id",
    "display_name",
    "department",
    "category",
    "distance",
    "image_ref",
]


class AttendanceReportService:
    """Flatten ledger events into rows for CSV export, joined with profile data."""

    def __init__(self, ledger: AttendanceLedger, enrollments: EnrollmentRepository):
        self._ledger = ledger
        self._enrollments = enrollments

    def build_report(self, *, start: date, end: date) -> ReportData:
        """Events from ``start`` through ``end`` inclusive."""

        events = self._ledger.events_between(
            start=datetime.combine(start, time.min),
            end=datetime.combine(end + timedelta(days=1), time.min),
        )

        profiles: dict[str, object] = {}
        summary_map: dict[str, dict] = {}
        rows: list[dict] = []

        for e in events:
            if e.identity_id not in profiles:
                profiles[e.identity_id] = self._enrollments.get(e.identity_id)
            record = profiles[e.identity_id]
            profile = record.profile if record else None

            rows.append(
                {
                    "date": e.timestamp.strftime("%Y-%m-%d"),
                    "time": e.timestamp.strftime("%H:%M:%S"),
                    "identity_id": e.identity_id,
                    "display_name": profile.display_name if profile else "-",
                    "department": (profile.department if profile else None) or "-",
                    "category": (profile.category if profile else None) or "-",
                    "distance": f"{e.match_distance:.4f}",
                    "image_ref": e.image_ref or "",
                }
            )

            s = summary_map.setdefault(
                e.identity_id,
                {
                    "identity_id": e.identity_id,
                    "display_name": profile.display_name if profile else "-",
                    "events": 0,
                    "days": set(),
                },
            )
            s["events"] += 1
            s["days"].add(e.timestamp.date())

        summary = [
            {**s, "days": len(s["days"])}
            for s in sorted(summary_map.values(), key=lambda s: s["identity_id"])
        ]
        return ReportData(rows=rows, summary=summary)
