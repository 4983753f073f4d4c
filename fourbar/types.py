from __future__ import annotations

import math
from dataclasses import dataclass
from typing import TypeAlias

import numpy as np
from numpy.typing import NDArray

FloatArray: TypeAlias = NDArray[np.float64]


@dataclass(frozen=True)
class LinkLengths:
    """Link lengths of a planar four-bar linkage (a4 is the frame)."""

    a1: float
    a2: float
    a3: float
    a4: float

    def __post_init__(self) -> None:
        for name in ("a1", "a2", "a3", "a4"):
            value = getattr(self, name)
            if not math.isfinite(value) or value <= 0.0:
                raise ValueError(f"{name} must be finite and > 0, got {value!r}")

    def as_tuple(self) -> tuple[float, float, float, float]:
        return (self.a1, self.a2, self.a3, self.a4)


__all__ = ["FloatArray", "LinkLengths"]
