from __future__ import annotations

from datetime import date, datetime, timedelta

from src.face_attendance.face_attendance.descriptors.model import DescriptorVector
from src.face_attendance.face_attendance.enrollment.memory_enrollment_repository import InMemoryEnrollmentRepository
from src.face_attendance.face_attendance.enrollment.model import EnrollmentProfile
from src.face_attendance.face_attendance.ledger.memory_ledger_repository import InMemoryLedgerRepository
from src.face_attendance.face_attendance.ledger.report import AttendanceReportService
from src.face_attendance.face_attendance.ledger.service import AttendanceLedger


def test_report_joins_profile_and_summarizes_days(make_vec):
    enrollments = InMemoryEnrollmentRepository(dimension=128)
    enrollments.put(
        "E001",
        EnrollmentProfile(display_name="Alice", department="HR"),
        DescriptorVector(tuple(make_vec(0.1))),
    )
    ledger = AttendanceLedger(InMemoryLedgerRepository(), cooldown_seconds=60)

    day1 = datetime(2026, 2, 2, 8, 0)
    day2 = datetime(2026, 2, 3, 8, 0)
    ledger.record("E001", 0.1234, None, day1)
    ledger.record("E001", 0.2, None, day1 + timedelta(hours=9))
    ledger.record("E001", 0.3, None, day2)
    ledger.record("E999", 0.3, None, day2)
    # outside the range
    ledger.record("E001", 0.3, None, datetime(2026, 2, 4, 0, 0))

    data = AttendanceReportService(ledger, enrollments).build_report(start=date(2026, 2, 2), end=date(2026, 2, 3))

    assert len(data.rows) == 4
    assert data.rows[0] == {
        "date": "2026-02-02",
        "time": "08:00:00",
        "identity_id": "E001",
        "display_name": "Alice",
        "department": "HR",
        "category": "-",
        "distance": "0.1234",
        "image_ref": "",
    }
    assert data.summary == [
        {"identity_id": "E001", "display_name": "Alice", "events": 3, "days": 2},
        {"identity_id": "E999", "display_name": "-", "events": 1, "days": 1},
    ]
