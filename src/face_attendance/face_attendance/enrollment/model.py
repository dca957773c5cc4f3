from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple

from ..descriptors.model import DescriptorVector


@dataclass(frozen=True)
class EnrollmentProfile:
    """Profile metadata shown back to the kiosk. Opaque to matching."""

    display_name: str
    category: Optional[str] = None
    department: Optional[str] = None


@dataclass(frozen=True)
class EnrollmentRecord:
    """Domain entity: one enrolled person and their reference samples."""

    identity_id: str
    profile: EnrollmentProfile
    descriptors: Tuple[DescriptorVector, ...]
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def display_name(self) -> str:
        return self.profile.display_name

    @property
    def sample_count(self) -> int:
        return len(self.descriptors)

    def with_sample(self, profile: EnrollmentProfile, descriptor: DescriptorVector, *, now: datetime) -> "EnrollmentRecord":
        return EnrollmentRecord(
            identity_id=self.identity_id,
            profile=profile,
            descriptors=self.descriptors + (descriptor,),
            created_at=self.created_at,
            updated_at=now,
        )
