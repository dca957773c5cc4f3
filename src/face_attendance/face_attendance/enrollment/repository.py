from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..common.validators import require_non_empty
from ..core.exceptions import ValidationError
from ..descriptors.model import DescriptorVector
from .model import EnrollmentProfile, EnrollmentRecord


class EnrollmentRepository(Protocol):
    """Enrolled-descriptor store.

    Implementations must serialize writes per identity so that concurrent
    enrollments for one person never lose a sample, and must never leave a
    partially written record behind (StorageFailure aborts the whole write).
    """

    def put(self, identity_id: str, profile: EnrollmentProfile, descriptor: DescriptorVector) -> EnrollmentRecord:
        """Create the record, or append one sample and refresh the profile."""

        raise NotImplementedError

    def replace(self, identity_id: str, profile: EnrollmentProfile, descriptor: DescriptorVector) -> EnrollmentRecord:
        """Explicit re-enrollment: drop previous samples, keep only ``descriptor``."""

        raise NotImplementedError

    def get(self, identity_id: str) -> Optional[EnrollmentRecord]:
        raise NotImplementedError

    def get_all(self) -> Sequence[EnrollmentRecord]:
        """Snapshot for one matching pass, ordered by identity id."""

        raise NotImplementedError

    def count(self) -> int:
        raise NotImplementedError


def validate_enrollment(
    identity_id: str,
    profile: EnrollmentProfile,
    descriptor: DescriptorVector,
    *,
    dimension: int,
) -> str:
    """Shared write-side checks for every store backend. Returns the normalized id."""

    identity_id = require_non_empty(identity_id, "identityId")
    require_non_empty(profile.display_name, "displayName")
    if descriptor.dimension != dimension:
        raise ValidationError(f"Descriptor must have {dimension} values, got {descriptor.dimension}")
    return identity_id
