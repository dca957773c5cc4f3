from __future__ import annotations

import threading
from datetime import datetime
from typing import Callable, Dict, Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.locks import KeyedLock
from ..core.constants import DEFAULT_DESCRIPTOR_DIM
from ..core.exceptions import ValidationError
from ..descriptors.model import DescriptorVector
from .model import EnrollmentProfile, EnrollmentRecord
from .repository import EnrollmentRepository, validate_enrollment


class InMemoryEnrollmentRepository(EnrollmentRepository):
    """Process-local store. Durable only for the lifetime of the process."""

    def __init__(self, *, dimension: int = DEFAULT_DESCRIPTOR_DIM, clock: Callable[[], datetime] = now_local):
        self._dimension = int(dimension)
        self._clock = clock
        self._records: Dict[str, EnrollmentRecord] = {}
        self._guard = threading.Lock()
        self._identity_locks = KeyedLock()

    def put(self, identity_id: str, profile: EnrollmentProfile, descriptor: DescriptorVector) -> EnrollmentRecord:
        identity_id = validate_enrollment(identity_id, profile, descriptor, dimension=self._dimension)
        with self._identity_locks.hold(identity_id):
            now = self._clock()
            existing = self.get(identity_id)
            if existing:
                record = existing.with_sample(profile, descriptor, now=now)
            else:
                record = EnrollmentRecord(
                    identity_id=identity_id,
                    profile=profile,
                    descriptors=(descriptor,),
                    created_at=now,
                    updated_at=now,
                )
            with self._guard:
                self._records[identity_id] = record
            return record

    def replace(self, identity_id: str, profile: EnrollmentProfile, descriptor: DescriptorVector) -> EnrollmentRecord:
        identity_id = validate_enrollment(identity_id, profile, descriptor, dimension=self._dimension)
        with self._identity_locks.hold(identity_id):
            existing = self.get(identity_id)
            if not existing:
                raise ValidationError(f"Identity {identity_id} is not enrolled")
            record = EnrollmentRecord(
                identity_id=identity_id,
                profile=profile,
                descriptors=(descriptor,),
                created_at=existing.created_at,
                updated_at=self._clock(),
            )
            with self._guard:
                self._records[identity_id] = record
            return record

    def get(self, identity_id: str) -> Optional[EnrollmentRecord]:
        with self._guard:
            return self._records.get(identity_id)

    def get_all(self) -> Sequence[EnrollmentRecord]:
        with self._guard:
            return [self._records[k] for k in sorted(self._records)]

    def count(self) -> int:
        with self._guard:
            return len(self._records)
