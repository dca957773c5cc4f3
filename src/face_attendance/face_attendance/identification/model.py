from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple

from ..core.enums import IdentifyStatus
from ..ledger.model import AttendanceEvent


@dataclass(frozen=True)
class IdentificationOutcome:
    """Terminal state of one identification request.

    RECORDED and DEBOUNCED are both a success for the kiosk; the difference
    is kept for audit and tests. Every other status is "not found".
    """

    status: IdentifyStatus
    identity_id: Optional[str] = None
    display_name: Optional[str] = None
    distance: Optional[float] = None
    event: Optional[AttendanceEvent] = None
    last_event_timestamp: Optional[datetime] = None
    candidate_ids: Tuple[str, ...] = ()

    @property
    def found(self) -> bool:
        return self.status in (IdentifyStatus.RECORDED, IdentifyStatus.DEBOUNCED)

    def to_response(self) -> dict:
        if not self.found:
            return {"found": False}
        return {
            "found": True,
            "name": self.display_name,
            "empId": self.identity_id,
            "distance": self.distance,
        }
