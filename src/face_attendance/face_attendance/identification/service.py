from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable, Optional

from ..common.datetime_utils import now_local
from ..common.validators import optional_text
from ..core.constants import DEFAULT_DESCRIPTOR_DIM
from ..core.enums import IdentifyStatus
from ..core.exceptions import StorageFailure
from ..descriptors.model import DescriptorVector
from ..enrollment.repository import EnrollmentRepository
from ..ledger.model import Debounced, Recorded
from ..ledger.service import AttendanceLedger
from ..matching.matcher import Matcher
from ..matching.model import AmbiguousMatch, EmptyStore, Matched, NoMatch
from .model import IdentificationOutcome

logger = logging.getLogger(__name__)


class IdentificationService:
    """Use case: "who is this?" followed by an attendance check-in.

    Does not retry: a rejected capture goes back to the kiosk, which decides
    whether to capture again or offer enrollment.
    """

    def __init__(
        self,
        matcher: Matcher,
        ledger: AttendanceLedger,
        enrollments: EnrollmentRepository,
        *,
        dimension: int = DEFAULT_DESCRIPTOR_DIM,
        clock: Callable[[], datetime] = now_local,
    ):
        self._matcher = matcher
        self._ledger = ledger
        self._enrollments = enrollments
        self._dimension = int(dimension)
        self._clock = clock

    def identify(
        self,
        descriptor: Any,
        *,
        image_ref: Optional[str] = None,
        now: Optional[datetime] = None,
        threshold: Optional[float] = None,
    ) -> IdentificationOutcome:
        query = descriptor if isinstance(descriptor, DescriptorVector) else DescriptorVector.from_values(
            descriptor, dimension=self._dimension
        )
        image_ref = optional_text(image_ref)

        result = self._matcher.identify(query, threshold)

        if isinstance(result, EmptyStore):
            logger.info("Identification rejected: no enrolled identities")
            return IdentificationOutcome(status=IdentifyStatus.EMPTY_STORE)

        if isinstance(result, NoMatch):
            logger.info("Identification rejected: best distance %.4f not below threshold", result.best_distance)
            return IdentificationOutcome(status=IdentifyStatus.NO_MATCH, distance=result.best_distance)

        if isinstance(result, AmbiguousMatch):
            logger.warning(
                "Identification rejected: %d identities tie at distance %.4f (%s)",
                len(result.candidate_ids),
                result.distance,
                ", ".join(result.candidate_ids),
            )
            return IdentificationOutcome(
                status=IdentifyStatus.AMBIGUOUS,
                distance=result.distance,
                candidate_ids=result.candidate_ids,
            )

        if not isinstance(result, Matched):
            raise TypeError(f"Unexpected match result: {result!r}")
        return self._record(result, image_ref=image_ref, now=now or self._clock())

    def _record(self, match: Matched, *, image_ref: Optional[str], now: datetime) -> IdentificationOutcome:
        record = self._enrollments.get(match.identity_id)
        if record is None:
            # The matcher only returns ids from the snapshot it just read.
            raise StorageFailure(f"Enrollment {match.identity_id} disappeared during identification")

        recorded = self._ledger.record(match.identity_id, match.distance, image_ref, now)

        if isinstance(recorded, Recorded):
            return IdentificationOutcome(
                status=IdentifyStatus.RECORDED,
                identity_id=match.identity_id,
                display_name=record.display_name,
                distance=match.distance,
                event=recorded.event,
            )

        if isinstance(recorded, Debounced):
            return IdentificationOutcome(
                status=IdentifyStatus.DEBOUNCED,
                identity_id=match.identity_id,
                display_name=record.display_name,
                distance=match.distance,
                last_event_timestamp=recorded.last_event_timestamp,
            )

        raise TypeError(f"Unexpected ledger result: {recorded!r}")
