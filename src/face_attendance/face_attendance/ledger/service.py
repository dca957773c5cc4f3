from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Optional, Sequence

from ..common.locks import KeyedLock
from ..common.validators import require_non_empty
from ..core.constants import DEFAULT_COOLDOWN_SECONDS, DEFAULT_HISTORY_LIMIT
from ..core.exceptions import ValidationError
from .model import AttendanceEvent, Debounced, RecordResult
from .repository import AttendanceLedgerRepository

logger = logging.getLogger(__name__)


class AttendanceLedger:
    """Append-only attendance record with a per-identity debounce window.

    The kiosk polls every few hundred milliseconds, so one person standing in
    front of the camera produces a burst of identical identifications. Only
    the first one inside each cooldown window becomes an event.
    """

    def __init__(self, events: AttendanceLedgerRepository, *, cooldown_seconds: float = DEFAULT_COOLDOWN_SECONDS):
        if cooldown_seconds is None or cooldown_seconds < 0:
            raise ValidationError("cooldown_seconds must not be negative")
        self._events = events
        self._cooldown = timedelta(seconds=float(cooldown_seconds))
        self._identity_locks = KeyedLock()

    @property
    def cooldown(self) -> timedelta:
        return self._cooldown

    def record(
        self,
        identity_id: str,
        distance: float,
        image_ref: Optional[str],
        now: datetime,
    ) -> RecordResult:
        identity_id = require_non_empty(identity_id, "identityId")
        if now is None:
            raise ValidationError("now is required")

        # The repository makes check-then-append atomic across processes; the
        # keyed lock keeps same-process callers for one person queued in order.
        with self._identity_locks.hold(identity_id):
            result = self._events.append_unless_within(
                identity_id=identity_id,
                timestamp=now,
                match_distance=distance,
                image_ref=image_ref,
                cooldown=self._cooldown,
            )

        if isinstance(result, Debounced):
            logger.debug(
                "Debounced %s: last event at %s is within %ss",
                identity_id,
                result.last_event_timestamp.isoformat(),
                self._cooldown.total_seconds(),
            )
        else:
            logger.info("Recorded attendance for %s at %s (distance=%.4f)", identity_id, now.isoformat(), distance)
        return result

    def history(self, identity_id: str, *, limit: int = DEFAULT_HISTORY_LIMIT) -> Sequence[AttendanceEvent]:
        identity_id = require_non_empty(identity_id, "identityId")
        if limit < 1:
            raise ValidationError("limit must be at least 1")
        return self._events.recent_for_identity(identity_id, limit)

    def events_between(self, *, start: datetime, end: datetime) -> Sequence[AttendanceEvent]:
        if end <= start:
            raise ValidationError("end must be after start")
        return self._events.between(start=start, end=end)
