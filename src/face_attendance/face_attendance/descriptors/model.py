from __future__ import annotations

import math
from dataclasses import dataclass
from numbers import Real
from typing import Any, Tuple

import numpy as np

from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class DescriptorVector:
    """Face descriptor produced by the external recognizer.

    A fixed-length tuple of finite floats. Two descriptors are only comparable
    when they come from the same recognizer configuration, which in practice
    means they have the same dimension.
    """

    values: Tuple[float, ...]

    @classmethod
    def from_values(cls, values: Any, *, dimension: int) -> "DescriptorVector":
        """Build a descriptor from raw (usually JSON-decoded) input.

        Raises ValidationError for missing, empty, non-numeric, non-finite or
        wrong-length input. A missing descriptor is what the kiosk sends when no
        face was detected.
        """

        if values is None:
            raise ValidationError("Descriptor is missing (no face detected?)")
        if isinstance(values, np.ndarray):
            values = values.tolist()
        if not isinstance(values, (list, tuple)):
            raise ValidationError("Descriptor must be an array of numbers")
        if not values:
            raise ValidationError("Descriptor is empty (no face detected?)")
        if len(values) != dimension:
            raise ValidationError(f"Descriptor must have {dimension} values, got {len(values)}")

        out = []
        for v in values:
            if isinstance(v, bool) or not isinstance(v, Real):
                raise ValidationError("Descriptor must contain only numbers")
            f = float(v)
            if not math.isfinite(f):
                raise ValidationError("Descriptor contains a non-finite value")
            out.append(f)
        return cls(tuple(out))

    @property
    def dimension(self) -> int:
        return len(self.values)

    def as_array(self) -> np.ndarray:
        return np.asarray(self.values, dtype=np.float64)

    def distance_to(self, other: "DescriptorVector") -> float:
        """Euclidean distance to another descriptor of the same dimension."""
        if other.dimension != self.dimension:
            raise ValidationError(
                f"Cannot compare descriptors of dimension {self.dimension} and {other.dimension}"
            )
        return float(np.linalg.norm(self.as_array() - other.as_array()))

    def to_list(self) -> list[float]:
        return list(self.values)
