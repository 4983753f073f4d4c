from __future__ import annotations

import logging
import math
from collections.abc import Callable, Sequence
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from fourbar.freudenstein import bind
from fourbar.solvers.root import find_root
from fourbar.solvers.types import RootOptions, RootStatus
from fourbar.types import FloatArray, LinkLengths

logger = logging.getLogger(__name__)

Family = Callable[[float], Callable[[float], float]]


@dataclass(frozen=True)
class SweepResult:
    params: FloatArray
    roots: FloatArray
    residuals: FloatArray
    seeds: FloatArray
    statuses: tuple[RootStatus, ...]
    iterations: NDArray[np.int_]
    evaluations: NDArray[np.int_]
    jumps: tuple[int, ...]

    @property
    def converged(self) -> bool:
        return all(s == "converged" for s in self.statuses)

    @property
    def total_evaluations(self) -> int:
        return int(self.evaluations.sum())


def _as_params(params: Sequence[float] | FloatArray) -> FloatArray:
    arr = np.asarray(params, dtype=np.float64).reshape(-1)
    if arr.size == 0:
        raise ValueError("params must not be empty")
    if not np.all(np.isfinite(arr)):
        raise ValueError("params must be finite")
    return arr


def continuation_sweep(
    family: Family,
    params: Sequence[float] | FloatArray,
    x0: float,
    options: RootOptions | None = None,
    *,
    max_jump: float | None = None,
) -> SweepResult:
    """
    Track one solution branch of ``family(p)(x) = 0`` over ``params``.

    Each solve starts from the previous root; the first starts from ``x0``.
    A non-finite root keeps the previous seed. Consecutive roots further apart
    than ``max_jump`` are reported in ``jumps``.
    """
    ps = _as_params(params)
    if not math.isfinite(x0):
        raise ValueError("x0 must be finite")
    if max_jump is not None and not max_jump > 0.0:
        raise ValueError("max_jump must be > 0")

    n = ps.size
    roots = np.empty(n, dtype=np.float64)
    residuals = np.empty(n, dtype=np.float64)
    seeds = np.empty(n, dtype=np.float64)
    iterations = np.zeros(n, dtype=np.int_)
    evaluations = np.zeros(n, dtype=np.int_)
    statuses: list[RootStatus] = []
    jumps: list[int] = []

    seed = float(x0)
    for i, p in enumerate(ps):
        seeds[i] = seed
        res = find_root(family(float(p)), seed, options)
        roots[i] = res.root
        residuals[i] = res.fun
        iterations[i] = res.iterations
        evaluations[i] = res.evaluations
        statuses.append(res.status)
        if not res.converged:
            logger.warning("solve %d (p=%.6g) did not converge: %s", i, p, res.message)
        if max_jump is not None and i > 0 and abs(roots[i] - roots[i - 1]) > max_jump:
            jumps.append(i)
            logger.warning(
                "root jumped by %.3g between p=%.6g and p=%.6g",
                roots[i] - roots[i - 1],
                ps[i - 1],
                p,
            )
        if math.isfinite(res.root):
            seed = res.root

    logger.debug("sweep finished: %d solves, %d evaluations", n, int(evaluations.sum()))
    return SweepResult(
        params=ps,
        roots=roots,
        residuals=residuals,
        seeds=seeds,
        statuses=tuple(statuses),
        iterations=iterations,
        evaluations=evaluations,
        jumps=tuple(jumps),
    )


def sweep_freudenstein(
    links: LinkLengths,
    betas: Sequence[float] | FloatArray,
    x0: float,
    options: RootOptions | None = None,
    *,
    max_jump: float | None = None,
) -> SweepResult:
    return continuation_sweep(
        lambda beta: bind(links, beta), betas, x0, options, max_jump=max_jump
    )


def sweep_branches(
    links: LinkLengths,
    betas: Sequence[float] | FloatArray,
    seeds: Sequence[float],
    options: RootOptions | None = None,
    *,
    max_jump: float | None = None,
) -> list[SweepResult]:
    """One continuation sweep per seed; two seeds trace both assembly branches."""
    if len(seeds) == 0:
        raise ValueError("seeds must not be empty")
    return [
        sweep_freudenstein(links, betas, float(s), options, max_jump=max_jump) for s in seeds
    ]


__all__ = [
    "Family",
    "SweepResult",
    "continuation_sweep",
    "sweep_branches",
    "sweep_freudenstein",
]
