from __future__ import annotations

from datetime import datetime, timedelta
from typing import Optional, Sequence

from ..core.exceptions import ValidationError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceEvent, Debounced, Recorded, RecordResult
from .repository import AttendanceLedgerRepository, within_cooldown

_COLUMNS = "event_id, identity_id, event_time, match_distance, image_ref"


class MySQLLedgerRepository(AttendanceLedgerRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def append(
        self,
        *,
        identity_id: str,
        timestamp: datetime,
        match_distance: float,
        image_ref: Optional[str] = None,
    ) -> AttendanceEvent:
        with db_cursor(self._conn_factory) as (_, cur):
            return self._insert(cur, identity_id, timestamp, match_distance, image_ref)

    def append_unless_within(
        self,
        *,
        identity_id: str,
        timestamp: datetime,
        match_distance: float,
        image_ref: Optional[str] = None,
        cooldown: timedelta,
    ) -> RecordResult:
        """Debounced append in one transaction.

        The person's enrollment row is the lock every worker process agrees
        on: it is held from before the latest-event read until commit.
        """

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT identity_id FROM enrollments WHERE identity_id=%s FOR UPDATE", (identity_id,))
            if not fetchone(cur):
                raise ValidationError(f"Identity {identity_id} is not enrolled")
            last = self._latest(cur, identity_id)
            if within_cooldown(last, timestamp, cooldown):
                return Debounced(last_event_timestamp=last.timestamp)
            return Recorded(event=self._insert(cur, identity_id, timestamp, match_distance, image_ref))

    def latest_for_identity(self, identity_id: str) -> Optional[AttendanceEvent]:
        with db_cursor(self._conn_factory) as (_, cur):
            return self._latest(cur, identity_id)

    def recent_for_identity(self, identity_id: str, limit: int) -> Sequence[AttendanceEvent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_events
                WHERE identity_id=%s
                ORDER BY event_time DESC, event_id DESC
                LIMIT %s
                """,
                (identity_id, int(limit)),
            )
            return [self._to_event(r) for r in fetchall(cur)]

    def between(self, *, start: datetime, end: datetime) -> Sequence[AttendanceEvent]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_events
                WHERE event_time >= %s AND event_time < %s
                ORDER BY event_time ASC, event_id ASC
                """,
                (start, end),
            )
            return [self._to_event(r) for r in fetchall(cur)]

    def _insert(
        self,
        cur,
        identity_id: str,
        timestamp: datetime,
        match_distance: float,
        image_ref: Optional[str],
    ) -> AttendanceEvent:
        cur.execute(
            """
            INSERT INTO attendance_events(identity_id, event_time, match_distance, image_ref)
            VALUES(%s,%s,%s,%s)
            """,
            (identity_id, timestamp, float(match_distance), image_ref),
        )
        return AttendanceEvent(
            event_id=int(cur.lastrowid),
            identity_id=identity_id,
            timestamp=timestamp,
            match_distance=float(match_distance),
            image_ref=image_ref,
        )

    def _latest(self, cur, identity_id: str) -> Optional[AttendanceEvent]:
        cur.execute(
            f"""
            SELECT {_COLUMNS}
            FROM attendance_events
            WHERE identity_id=%s
            ORDER BY event_time DESC, event_id DESC
            LIMIT 1
            """,
            (identity_id,),
        )
        r = fetchone(cur)
        return self._to_event(r) if r else None

    @staticmethod
    def _to_event(r: dict) -> AttendanceEvent:
        return AttendanceEvent(
            event_id=int(r["event_id"]),
            identity_id=r["identity_id"],
            timestamp=r["event_time"],
            match_distance=float(r["match_distance"]),
            image_ref=r.get("image_ref"),
        )
