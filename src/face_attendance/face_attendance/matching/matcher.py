from __future__ import annotations

from typing import Optional, Sequence

import numpy as np

from ..common.validators import require_positive
from ..core.constants import DEFAULT_MATCH_THRESHOLD
from ..core.exceptions import ValidationError
from ..descriptors.model import DescriptorVector
from ..enrollment.model import EnrollmentRecord
from ..enrollment.repository import EnrollmentRepository
from .model import AmbiguousMatch, EmptyStore, Matched, MatchResult, NoMatch


class Matcher:
    """Exact nearest-neighbour search over every enrolled sample.

    A person's distance is the best (smallest) distance over their own
    samples. The closest person wins only when that distance is strictly
    below the threshold and nobody else shares it.
    """

    def __init__(self, enrollments: EnrollmentRepository, *, threshold: float = DEFAULT_MATCH_THRESHOLD):
        self._enrollments = enrollments
        self._threshold = float(require_positive(threshold, "threshold"))

    @property
    def threshold(self) -> float:
        return self._threshold

    def identify(self, query: DescriptorVector, threshold: Optional[float] = None) -> MatchResult:
        limit = self._threshold if threshold is None else float(require_positive(threshold, "threshold"))

        records = list(self._enrollments.get_all())
        if not records:
            return EmptyStore()

        record_distances = self._record_distances(query, records)
        best = float(record_distances.min())

        if best >= limit:
            return NoMatch(best_distance=best)

        winners = np.flatnonzero(record_distances == best)
        if len(winners) > 1:
            return AmbiguousMatch(
                candidate_ids=tuple(records[i].identity_id for i in winners),
                distance=best,
            )
        return Matched(identity_id=records[int(winners[0])].identity_id, distance=best)

    @staticmethod
    def _record_distances(query: DescriptorVector, records: Sequence[EnrollmentRecord]) -> np.ndarray:
        samples = np.asarray(
            [d.values for r in records for d in r.descriptors],
            dtype=np.float64,
        )
        if samples.ndim != 2 or samples.shape[1] != query.dimension:
            raise ValidationError(f"Descriptor must have {samples.shape[-1]} values, got {query.dimension}")

        # owners[i] is the index of the record that sample i belongs to
        owners = np.repeat(np.arange(len(records)), [r.sample_count for r in records])
        sample_distances = np.linalg.norm(samples - query.as_array(), axis=1)

        record_distances = np.full(len(records), np.inf)
        np.minimum.at(record_distances, owners, sample_distances)
        return record_distances
