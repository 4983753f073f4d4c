"""
Outward search for a sign change around a single starting guess.

The probe sequence is fixed, so a search is deterministic and costs at most
ten evaluations:

    >>> search_points(2.0)
    [1.8, 2.2, 1.0, 3.0, 1.0, 3.0, -2.0, 4.0, -20.0, 20.0]
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from fourbar.solvers.evaluate import Evaluator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Bracket:
    lo: float
    hi: float
    f_lo: float
    f_hi: float

    @property
    def width(self) -> float:
        return self.hi - self.lo


def has_sign_change(fa: float, fb: float) -> bool:
    """True when fa and fb have opposite signs or either is exactly zero."""
    if fa == 0.0 or fb == 0.0:
        return True
    return (fa > 0.0) != (fb > 0.0)


def search_points(a: float) -> list[float]:
    aa = 1.0 if a == 0.0 else a
    return [
        0.9 * aa,
        1.1 * aa,
        aa - 1.0,
        aa + 1.0,
        0.5 * aa,
        1.5 * aa,
        -aa,
        2.0 * aa,
        -10.0 * aa,
        10.0 * aa,
    ]


def make_bracket(a: float, fa: float, b: float, fb: float) -> Bracket:
    if a <= b:
        return Bracket(lo=a, hi=b, f_lo=fa, f_hi=fb)
    return Bracket(lo=b, hi=a, f_lo=fb, f_hi=fa)


def search_bracket(ev: Evaluator, a: float, fa: float) -> Bracket | None:
    """Probe around ``a`` until f changes sign; ``fa`` must be finite and nonzero.

    Non-finite probes are skipped. Returns None when no probe changes sign or
    the evaluation budget runs out.
    """
    for b in search_points(a):
        if b == a:
            continue
        if ev.exhausted:
            logger.debug("bracket search stopped: evaluation budget exhausted")
            return None
        fb = ev(b)
        if not math.isfinite(fb):
            continue
        if has_sign_change(fa, fb):
            logger.debug("bracket search found sign change between %.17g and %.17g", a, b)
            return make_bracket(a, fa, b, fb)
    logger.debug("bracket search found no sign change around %.17g", a)
    return None


__all__ = ["Bracket", "has_sign_change", "make_bracket", "search_bracket", "search_points"]
