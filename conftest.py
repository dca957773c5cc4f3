from __future__ import annotations

from datetime import datetime

import pytest

DIM = 128


def _vec(*head: float, dim: int = DIM) -> list[float]:
    """A descriptor whose first values are ``head`` and the rest zeros.

    Distances between such vectors are exact, which keeps threshold and tie
    tests free of float noise.
    """

    values = [0.0] * dim
    for i, v in enumerate(head):
        values[i] = float(v)
    return values


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 2, 1, 8, 30, 0)


@pytest.fixture
def make_vec():
    return _vec
