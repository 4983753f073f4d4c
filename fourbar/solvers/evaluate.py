from __future__ import annotations

import logging
import math
from collections.abc import Callable
from dataclasses import dataclass, field

from fourbar.solvers.types import RootTrace

logger = logging.getLogger(__name__)


def safe_call(fun: Callable[[float], float], x: float) -> float:
    """Evaluate ``fun(x)`` as a float, mapping arithmetic faults to NaN."""
    try:
        return float(fun(x))
    except ArithmeticError as exc:
        logger.debug("evaluation at x=%r raised %s: %s", x, type(exc).__name__, exc)
        return math.nan


@dataclass
class Evaluator:
    fun: Callable[[float], float]
    max_evaluations: int | None = None
    count: int = 0
    xs: list[float] = field(default_factory=list)
    fs: list[float] = field(default_factory=list)
    best_x: float = math.nan
    best_f: float = math.nan

    @property
    def exhausted(self) -> bool:
        return self.max_evaluations is not None and self.count >= self.max_evaluations

    @property
    def trace(self) -> RootTrace:
        """Immutable snapshot of every evaluation so far."""
        return RootTrace(x=tuple(self.xs), f=tuple(self.fs))

    def __call__(self, x: float) -> float:
        self.count += 1
        fx = safe_call(self.fun, x)
        self.xs.append(x)
        self.fs.append(fx)
        if math.isfinite(fx) and not abs(fx) >= abs(self.best_f):
            # NaN best_f compares false, so the first finite value always wins
            self.best_x = x
            self.best_f = fx
        return fx


__all__ = ["Evaluator", "safe_call"]
