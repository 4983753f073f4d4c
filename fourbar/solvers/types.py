from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Literal, Protocol, TypeAlias

from fourbar.constants import (
    ABS_TOL_DEFAULT,
    MAX_ITER_DEFAULT,
    REL_TOL_DEFAULT,
    STEP_TOL_DEFAULT,
)

RootStatus: TypeAlias = Literal[
    "converged",
    "max-iterations-exceeded",
    "not-a-number-encountered",
    "no-sign-change-in-bracket",
    "diverged",
]
RootMethod: TypeAlias = Literal["auto", "brent", "secant", "newton"]

ROOT_METHODS: tuple[RootMethod, ...] = ("auto", "brent", "secant", "newton")


class ScalarFunction(Protocol):
    """Real-valued function of one real variable."""

    def __call__(self, x: float) -> float: ...


@dataclass(frozen=True)
class RootOptions:
    absolute_tolerance: float = ABS_TOL_DEFAULT
    relative_tolerance: float = REL_TOL_DEFAULT
    step_tolerance: float = STEP_TOL_DEFAULT
    max_iterations: int = MAX_ITER_DEFAULT
    max_evaluations: int | None = None
    method: RootMethod = "auto"

    def __post_init__(self) -> None:
        for name in ("absolute_tolerance", "relative_tolerance", "step_tolerance"):
            value = getattr(self, name)
            if not math.isfinite(value) or value < 0.0:
                raise ValueError(f"{name} must be finite and >= 0, got {value!r}")
        if self.max_iterations < 1:
            raise ValueError("max_iterations must be >= 1")
        if self.max_evaluations is not None and self.max_evaluations < 1:
            raise ValueError("max_evaluations must be >= 1")
        if self.method not in ROOT_METHODS:
            raise ValueError(f"Unsupported root method: {self.method}")

    def step_tol(self, x: float) -> float:
        return self.relative_tolerance * abs(x) + self.step_tolerance


@dataclass(frozen=True)
class RootTrace:
    x: tuple[float, ...] = ()
    f: tuple[float, ...] = ()

    def __len__(self) -> int:
        return len(self.x)


@dataclass(frozen=True)
class RootResult:
    root: float
    fun: float
    iterations: int
    evaluations: int
    status: RootStatus
    message: str
    method: str
    bracket: tuple[float, float] | None = None
    trace: RootTrace = field(default_factory=RootTrace)

    @property
    def converged(self) -> bool:
        return self.status == "converged"


__all__ = [
    "ROOT_METHODS",
    "RootMethod",
    "RootOptions",
    "RootResult",
    "RootStatus",
    "RootTrace",
    "ScalarFunction",
]
