from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple, Union


@dataclass(frozen=True)
class Matched:
    identity_id: str
    distance: float


@dataclass(frozen=True)
class NoMatch:
    """Closest record was not close enough. ``best_distance`` is kept for threshold tuning."""

    best_distance: float


@dataclass(frozen=True)
class AmbiguousMatch:
    """Two or more records tie at the minimum distance, below the threshold."""

    candidate_ids: Tuple[str, ...]
    distance: float


@dataclass(frozen=True)
class EmptyStore:
    """Nothing is enrolled, so no comparison was made."""


MatchResult = Union[Matched, NoMatch, AmbiguousMatch, EmptyStore]
