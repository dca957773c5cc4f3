from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from .common.datetime_utils import now_local
from .core.constants import DEFAULT_COOLDOWN_SECONDS, DEFAULT_DESCRIPTOR_DIM, DEFAULT_MATCH_THRESHOLD
from .core.enums import StorageBackend
from .core.exceptions import ValidationError
from .database.connection import DBConfig, DatabaseConnection
from .enrollment.memory_enrollment_repository import InMemoryEnrollmentRepository
from .enrollment.mysql_enrollment_repository import MySQLEnrollmentRepository
from .enrollment.repository import EnrollmentRepository
from .enrollment.service import EnrollmentService
from .identification.service import IdentificationService
from .ledger.memory_ledger_repository import InMemoryLedgerRepository
from .ledger.mysql_ledger_repository import MySQLLedgerRepository
from .ledger.report import AttendanceReportService
from .ledger.repository import AttendanceLedgerRepository
from .ledger.service import AttendanceLedger
from .matching.matcher import Matcher


@dataclass(frozen=True)
class Container:
    backend: StorageBackend
    conn: Optional[DatabaseConnection]
    dimension: int

    enrollments_repo: EnrollmentRepository
    events_repo: AttendanceLedgerRepository

    matcher: Matcher
    ledger: AttendanceLedger
    enrollment_service: EnrollmentService
    identification_service: IdentificationService
    report_service: AttendanceReportService


def build_container(
    *,
    backend: str | StorageBackend = StorageBackend.MEMORY,
    db_config: Optional[dict] = None,
    dimension: int = DEFAULT_DESCRIPTOR_DIM,
    threshold: float = DEFAULT_MATCH_THRESHOLD,
    cooldown_seconds: float = DEFAULT_COOLDOWN_SECONDS,
    clock: Callable[[], datetime] = now_local,
) -> Container:
    try:
        backend = StorageBackend(str(getattr(backend, "value", backend)).lower())
    except ValueError:
        raise ValidationError(f"Unknown storage backend: {backend!r}") from None

    dimension = int(dimension)
    if dimension < 1:
        raise ValidationError("Descriptor dimension must be at least 1")

    conn: Optional[DatabaseConnection] = None
    if backend == StorageBackend.MYSQL:
        if not db_config:
            raise ValidationError("DB_CONFIG is required for the mysql backend")
        conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
        enrollments_repo: EnrollmentRepository = MySQLEnrollmentRepository(conn, dimension=dimension, clock=clock)
        events_repo: AttendanceLedgerRepository = MySQLLedgerRepository(conn)
    else:
        enrollments_repo = InMemoryEnrollmentRepository(dimension=dimension, clock=clock)
        events_repo = InMemoryLedgerRepository()

    matcher = Matcher(enrollments_repo, threshold=threshold)
    ledger = AttendanceLedger(events_repo, cooldown_seconds=cooldown_seconds)
    enrollment_service = EnrollmentService(enrollments_repo, dimension=dimension)
    identification_service = IdentificationService(
        matcher,
        ledger,
        enrollments_repo,
        dimension=dimension,
        clock=clock,
    )
    report_service = AttendanceReportService(ledger, enrollments_repo)

    return Container(
        backend=backend,
        conn=conn,
        dimension=dimension,
        enrollments_repo=enrollments_repo,
        events_repo=events_repo,
        matcher=matcher,
        ledger=ledger,
        enrollment_service=enrollment_service,
        identification_service=identification_service,
        report_service=report_service,
    )
