from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Union


@dataclass(frozen=True)
class AttendanceEvent:
    """Domain entity: one accepted check-in. Immutable once written."""

    event_id: Optional[int]
    identity_id: str
    timestamp: datetime
    match_distance: float
    image_ref: Optional[str] = None


@dataclass(frozen=True)
class Recorded:
    event: AttendanceEvent


@dataclass(frozen=True)
class Debounced:
    """The identity already checked in within the cooldown window."""

    last_event_timestamp: datetime


RecordResult = Union[Recorded, Debounced]
