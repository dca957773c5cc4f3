from __future__ import annotations

import threading
from datetime import datetime, timedelta
from typing import Dict, List, Optional, Sequence

from .model import AttendanceEvent, Debounced, Recorded, RecordResult
from .repository import AttendanceLedgerRepository, within_cooldown


class InMemoryLedgerRepository(AttendanceLedgerRepository):
    def __init__(self):
        self._events: List[AttendanceEvent] = []
        self._latest: Dict[str, AttendanceEvent] = {}
        self._guard = threading.Lock()
        self._id = 0

    def append(
        self,
        *,
        identity_id: str,
        timestamp: datetime,
        match_distance: float,
        image_ref: Optional[str] = None,
    ) -> AttendanceEvent:
        with self._guard:
            return self._append_locked(identity_id, timestamp, match_distance, image_ref)

    def append_unless_within(
        self,
        *,
        identity_id: str,
        timestamp: datetime,
        match_distance: float,
        image_ref: Optional[str] = None,
        cooldown: timedelta,
    ) -> RecordResult:
        with self._guard:
            last = self._latest.get(identity_id)
            if within_cooldown(last, timestamp, cooldown):
                return Debounced(last_event_timestamp=last.timestamp)
            return Recorded(event=self._append_locked(identity_id, timestamp, match_distance, image_ref))

    def latest_for_identity(self, identity_id: str) -> Optional[AttendanceEvent]:
        with self._guard:
            return self._latest.get(identity_id)

    def recent_for_identity(self, identity_id: str, limit: int) -> Sequence[AttendanceEvent]:
        with self._guard:
            items = [e for e in self._events if e.identity_id == identity_id]
        items.sort(key=lambda e: (e.timestamp, e.event_id), reverse=True)
        return items[: int(limit)]

    def between(self, *, start: datetime, end: datetime) -> Sequence[AttendanceEvent]:
        with self._guard:
            items = [e for e in self._events if start <= e.timestamp < end]
        items.sort(key=lambda e: (e.timestamp, e.event_id))
        return items

    def _append_locked(
        self,
        identity_id: str,
        timestamp: datetime,
        match_distance: float,
        image_ref: Optional[str],
    ) -> AttendanceEvent:
        self._id += 1
        event = AttendanceEvent(
            event_id=self._id,
            identity_id=identity_id,
            timestamp=timestamp,
            match_distance=float(match_distance),
            image_ref=image_ref,
        )
        self._events.append(event)
        latest = self._latest.get(identity_id)
        if latest is None or event.timestamp >= latest.timestamp:
            self._latest[identity_id] = event
        return event
