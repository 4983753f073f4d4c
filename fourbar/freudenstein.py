"""
Freudenstein equation of a planar four-bar linkage.

For links a1 (crank), a2 (coupler), a3 (rocker) and a4 (frame), the input
angle alpha and the output angle beta satisfy

    a1/a2 cos(beta) - a1/a4 cos(alpha) - cos(beta - alpha)
        = -(a1^2 - a2^2 + a3^2 + a4^2) / (2 a2 a4)

``FreudensteinEquation`` binds the link lengths and beta, leaving a function
of alpha alone that can be handed to ``find_root``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import overload

import numpy as np

from fourbar.types import FloatArray, LinkLengths


@overload
def freudenstein(
    alpha: float, beta: float, a1: float, a2: float, a3: float, a4: float
) -> float: ...


@overload
def freudenstein(
    alpha: FloatArray, beta: float | FloatArray, a1: float, a2: float, a3: float, a4: float
) -> FloatArray: ...


def freudenstein(alpha, beta, a1, a2, a3, a4):  # type: ignore[no-untyped-def]
    k1 = a1 / a2
    k2 = a1 / a4
    k3 = (a1 * a1 - a2 * a2 + a3 * a3 + a4 * a4) / (2.0 * a2 * a4)
    return k1 * np.cos(beta) - k2 * np.cos(alpha) - np.cos(beta - alpha) + k3


def freudenstein_dalpha(
    alpha: float, beta: float, a1: float, a2: float, a3: float, a4: float
) -> float:
    """Partial derivative of the Freudenstein residual with respect to alpha."""
    return float(a1 / a4 * np.sin(alpha) - np.sin(beta - alpha))


@dataclass(frozen=True)
class FreudensteinEquation:
    links: LinkLengths
    beta: float

    def __call__(self, alpha: float) -> float:
        return float(freudenstein(alpha, self.beta, *self.links.as_tuple()))

    def derivative(self, alpha: float) -> float:
        return freudenstein_dalpha(alpha, self.beta, *self.links.as_tuple())


def bind(links: LinkLengths, beta: float) -> FreudensteinEquation:
    if not math.isfinite(beta):
        raise ValueError(f"beta must be finite, got {beta!r}")
    return FreudensteinEquation(links=links, beta=float(beta))


def closed_form_alpha(links: LinkLengths, beta: float) -> tuple[float, float]:
    """
    Both analytic solutions (alpha_plus, alpha_minus), wrapped to (-pi, pi].

    Expanding cos(beta - alpha) turns the equation into
    A cos(alpha) + B sin(alpha) = C with A = a1/a4 + cos(beta), B = sin(beta)
    and C = a1/a2 cos(beta) + k3, so alpha = atan2(B, A) +- arccos(C / hypot(A, B)).
    The pair is NaN when the linkage cannot be assembled at this beta.
    """
    a1, a2, a3, a4 = links.as_tuple()
    k3 = (a1 * a1 - a2 * a2 + a3 * a3 + a4 * a4) / (2.0 * a2 * a4)
    A = a1 / a4 + math.cos(beta)
    B = math.sin(beta)
    C = a1 / a2 * math.cos(beta) + k3
    rho = math.hypot(A, B)
    if rho == 0.0 or abs(C) > rho:
        return math.nan, math.nan
    delta = math.atan2(B, A)
    phi = math.acos(C / rho)
    return wrap_angle(delta + phi), wrap_angle(delta - phi)


def wrap_angle(x: float) -> float:
    """Map an angle into (-pi, pi]."""
    y = math.remainder(x, 2.0 * math.pi)
    if y <= -math.pi:
        y += 2.0 * math.pi
    return y


__all__ = [
    "FreudensteinEquation",
    "bind",
    "closed_form_alpha",
    "freudenstein",
    "freudenstein_dalpha",
    "wrap_angle",
]
