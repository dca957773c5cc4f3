from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

from ..common.validators import optional_text, require_non_empty
from ..core.constants import DEFAULT_DESCRIPTOR_DIM
from ..descriptors.model import DescriptorVector
from .model import EnrollmentProfile, EnrollmentRecord
from .repository import EnrollmentRepository

logger = logging.getLogger(__name__)


class EnrollmentService:
    """Use case: register a face sample for a person.

    Enrollment is additive. Enrolling the same identity again adds another
    reference sample, which helps matching under different light and pose.
    """

    def __init__(self, enrollments: EnrollmentRepository, *, dimension: int = DEFAULT_DESCRIPTOR_DIM):
        self._enrollments = enrollments
        self._dimension = int(dimension)

    def enroll(
        self,
        *,
        identity_id: str,
        display_name: str,
        descriptor: Any,
        category: Optional[str] = None,
        department: Optional[str] = None,
    ) -> EnrollmentRecord:
        identity_id, profile, vector = self._prepare(identity_id, display_name, descriptor, category, department)
        record = self._enrollments.put(identity_id, profile, vector)
        logger.info("Enrolled %s (%s), samples=%d", record.identity_id, record.display_name, record.sample_count)
        return record

    def re_enroll(
        self,
        *,
        identity_id: str,
        display_name: str,
        descriptor: Any,
        category: Optional[str] = None,
        department: Optional[str] = None,
    ) -> EnrollmentRecord:
        """Replace every stored sample of an existing identity with one new sample."""

        identity_id, profile, vector = self._prepare(identity_id, display_name, descriptor, category, department)
        record = self._enrollments.replace(identity_id, profile, vector)
        logger.info("Re-enrolled %s (%s), previous samples discarded", record.identity_id, record.display_name)
        return record

    def get(self, identity_id: str) -> Optional[EnrollmentRecord]:
        return self._enrollments.get(require_non_empty(identity_id, "identityId"))

    def list_enrollments(self) -> Sequence[EnrollmentRecord]:
        return self._enrollments.get_all()

    def count(self) -> int:
        return self._enrollments.count()

    def _prepare(self, identity_id, display_name, descriptor, category, department):
        # Cheap field checks first, then the descriptor; nothing touches the store on failure.
        identity_id = require_non_empty(identity_id, "identityId")
        display_name = require_non_empty(display_name, "displayName")
        vector = DescriptorVector.from_values(descriptor, dimension=self._dimension)
        profile = EnrollmentProfile(
            display_name=display_name,
            category=optional_text(category),
            department=optional_text(department),
        )
        return identity_id, profile, vector
