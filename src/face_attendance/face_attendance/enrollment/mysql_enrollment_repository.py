from __future__ import annotations

from datetime import datetime
from typing import Callable, Dict, List, Optional, Sequence

from ..common.datetime_utils import now_local
from ..core.constants import DEFAULT_DESCRIPTOR_DIM
from ..core.exceptions import ValidationError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, descriptor_from_json, descriptor_to_json, fetchall, fetchone
from ..descriptors.model import DescriptorVector
from .model import EnrollmentProfile, EnrollmentRecord
from .repository import EnrollmentRepository, validate_enrollment


class MySQLEnrollmentRepository(EnrollmentRepository):
    """Enrollments in two tables: one row per person, one row per sample.

    Writes hold the person's row lock for the whole transaction (taken by the
    upsert in ``put`` and by SELECT ... FOR UPDATE in ``replace``), which
    serializes concurrent enrollments of one identity across processes.
    """

    def __init__(
        self,
        conn_factory: DatabaseConnection,
        *,
        dimension: int = DEFAULT_DESCRIPTOR_DIM,
        clock: Callable[[], datetime] = now_local,
    ):
        self._conn_factory = conn_factory
        self._dimension = int(dimension)
        self._clock = clock

    def put(self, identity_id: str, profile: EnrollmentProfile, descriptor: DescriptorVector) -> EnrollmentRecord:
        identity_id = validate_enrollment(identity_id, profile, descriptor, dimension=self._dimension)
        now = self._clock()
        with db_cursor(self._conn_factory) as (_, cur):
            self._upsert_person(cur, identity_id, profile, now)
            self._insert_sample(cur, identity_id, descriptor, now)
            return self._load(cur, identity_id)

    def replace(self, identity_id: str, profile: EnrollmentProfile, descriptor: DescriptorVector) -> EnrollmentRecord:
        identity_id = validate_enrollment(identity_id, profile, descriptor, dimension=self._dimension)
        now = self._clock()
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT identity_id FROM enrollments WHERE identity_id=%s FOR UPDATE", (identity_id,))
            if not fetchone(cur):
                raise ValidationError(f"Identity {identity_id} is not enrolled")
            cur.execute(
                """
                UPDATE enrollments
                SET display_name=%s, category=%s, department=%s, updated_at=%s
                WHERE identity_id=%s
                """,
                (profile.display_name, profile.category, profile.department, now, identity_id),
            )
            cur.execute("DELETE FROM enrollment_samples WHERE identity_id=%s", (identity_id,))
            self._insert_sample(cur, identity_id, descriptor, now)
            return self._load(cur, identity_id)

    def get(self, identity_id: str) -> Optional[EnrollmentRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            return self._load(cur, identity_id)

    def get_all(self) -> Sequence[EnrollmentRecord]:
        # One transaction, two reads: a consistent snapshot under InnoDB REPEATABLE READ.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT identity_id, display_name, category, department, created_at, updated_at
                FROM enrollments
                ORDER BY identity_id ASC
                """
            )
            people = fetchall(cur)
            cur.execute(
                """
                SELECT identity_id, descriptor_json
                FROM enrollment_samples
                ORDER BY identity_id ASC, sample_id ASC
                """
            )
            samples: Dict[str, List[DescriptorVector]] = {}
            for r in fetchall(cur):
                samples.setdefault(r["identity_id"], []).append(descriptor_from_json(r["descriptor_json"]))

        return [
            self._to_record(p, samples.get(p["identity_id"], []))
            for p in people
            if samples.get(p["identity_id"])
        ]

    def count(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM enrollments")
            r = fetchone(cur)
            return int(r["n"]) if r else 0

    def _upsert_person(self, cur, identity_id: str, profile: EnrollmentProfile, now: datetime) -> None:
        # A single upsert takes the row lock even when the person is new, so two
        # first enrollments of one id queue up instead of both inserting.
        cur.execute(
            """
            INSERT INTO enrollments(identity_id, display_name, category, department, created_at, updated_at)
            VALUES(%s,%s,%s,%s,%s,%s)
            ON DUPLICATE KEY UPDATE
                display_name=VALUES(display_name),
                category=VALUES(category),
                department=VALUES(department),
                updated_at=VALUES(updated_at)
            """,
            (identity_id, profile.display_name, profile.category, profile.department, now, now),
        )

    def _insert_sample(self, cur, identity_id: str, descriptor: DescriptorVector, now: datetime) -> None:
        cur.execute(
            """
            INSERT INTO enrollment_samples(identity_id, descriptor_json, created_at)
            VALUES(%s,%s,%s)
            """,
            (identity_id, descriptor_to_json(descriptor), now),
        )

    def _load(self, cur, identity_id: str) -> Optional[EnrollmentRecord]:
        cur.execute(
            """
            SELECT identity_id, display_name, category, department, created_at, updated_at
            FROM enrollments
            WHERE identity_id=%s
            """,
            (identity_id,),
        )
        person = fetchone(cur)
        if not person:
            return None
        cur.execute(
            "SELECT descriptor_json FROM enrollment_samples WHERE identity_id=%s ORDER BY sample_id ASC",
            (identity_id,),
        )
        descriptors = [descriptor_from_json(r["descriptor_json"]) for r in fetchall(cur)]
        if not descriptors:
            return None
        return self._to_record(person, descriptors)

    @staticmethod
    def _to_record(row: dict, descriptors: Sequence[DescriptorVector]) -> EnrollmentRecord:
        return EnrollmentRecord(
            identity_id=row["identity_id"],
            profile=EnrollmentProfile(
                display_name=row["display_name"],
                category=row.get("category"),
                department=row.get("department"),
            ),
            descriptors=tuple(descriptors),
            created_at=row.get("created_at"),
            updated_at=row.get("updated_at"),
        )
