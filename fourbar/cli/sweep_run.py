from __future__ import annotations

import argparse
import json
import logging
import math
import sys
from collections.abc import Sequence
from dataclasses import asdict
from typing import Any, cast

import numpy as np

from fourbar.constants import ABS_TOL_DEFAULT, MAX_ITER_DEFAULT, REL_TOL_DEFAULT, STEP_TOL_DEFAULT
from fourbar.logging_utils import configure_logging
from fourbar.solvers.types import ROOT_METHODS, RootMethod, RootOptions
from fourbar.sweep import SweepResult, sweep_branches
from fourbar.types import FloatArray, LinkLengths

logger = logging.getLogger(__name__)

DEFAULT_SEEDS = (1.0, -1.0)


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(
        description="Sweep beta and solve the Freudenstein equation for alpha."
    )
    ap.add_argument("--a1", type=float, default=10.0, help="crank length")
    ap.add_argument("--a2", type=float, default=13.0, help="coupler length")
    ap.add_argument("--a3", type=float, default=8.0, help="rocker length")
    ap.add_argument("--a4", type=float, default=10.0, help="frame length")
    ap.add_argument("--beta-start", type=float, default=0.0, help="first beta [rad]")
    ap.add_argument(
        "--beta-stop", type=float, default=2.0 * math.pi / 3.0, help="last beta [rad]"
    )
    ap.add_argument("--num", type=int, default=50, help="number of beta values")
    ap.add_argument(
        "--seed",
        dest="seeds",
        type=float,
        action="append",
        default=None,
        help="initial alpha for one branch (repeatable, default: 1.0 and -1.0)",
    )
    ap.add_argument("--abs-tol", type=float, default=ABS_TOL_DEFAULT, help="|f| tolerance")
    ap.add_argument(
        "--rel-tol", type=float, default=REL_TOL_DEFAULT, help="relative step tolerance"
    )
    ap.add_argument(
        "--step-tol", type=float, default=STEP_TOL_DEFAULT, help="absolute step tolerance"
    )
    ap.add_argument("--max-iter", type=int, default=MAX_ITER_DEFAULT, help="iterations per solve")
    ap.add_argument(
        "--max-eval",
        type=int,
        default=None,
        help="function evaluations per solve (default: no cap)",
    )
    ap.add_argument("--method", choices=list(ROOT_METHODS), default="auto", help="root method")
    ap.add_argument(
        "--max-jump",
        type=float,
        default=None,
        help="flag consecutive roots further apart than this [rad]",
    )
    ap.add_argument(
        "--log-level",
        type=str,
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING"],
        help="logging level",
    )
    args = ap.parse_args(argv)
    if args.num < 1:
        ap.error("--num must be >= 1")
    try:
        args.links = LinkLengths(args.a1, args.a2, args.a3, args.a4)
        args.options = RootOptions(
            absolute_tolerance=args.abs_tol,
            relative_tolerance=args.rel_tol,
            step_tolerance=args.step_tol,
            max_iterations=args.max_iter,
            max_evaluations=args.max_eval,
            method=cast(RootMethod, args.method),
        )
    except ValueError as exc:
        ap.error(str(exc))
    if args.max_jump is not None and not args.max_jump > 0.0:
        ap.error("--max-jump must be > 0")
    return args


def _finite_or_none(values: FloatArray) -> list[float | None]:
    return [float(v) if math.isfinite(v) else None for v in values.tolist()]


def _branch_payload(seed: float, res: SweepResult) -> dict[str, Any]:
    return dict(
        seed=float(seed),
        converged=res.converged,
        alpha=_finite_or_none(res.roots),
        residual=_finite_or_none(res.residuals),
        status=list(res.statuses),
        iterations=res.iterations.tolist(),
        evaluations=res.evaluations.tolist(),
        jumps=list(res.jumps),
    )


def run(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    configure_logging(args.log_level, stream=sys.stderr)

    seeds = args.seeds if args.seeds else list(DEFAULT_SEEDS)
    betas = np.linspace(args.beta_start, args.beta_stop, args.num, dtype=np.float64)
    logger.info(
        "sweeping %d beta values over [%.6g, %.6g] from %d seed(s)",
        betas.size,
        args.beta_start,
        args.beta_stop,
        len(seeds),
    )
    results = sweep_branches(args.links, betas, seeds, args.options, max_jump=args.max_jump)

    payload = dict(
        links=asdict(args.links),
        options=asdict(args.options),
        beta=betas.tolist(),
        branches=[_branch_payload(s, r) for s, r in zip(seeds, results, strict=True)],
    )
    json.dump(payload, sys.stdout, indent=2)
    sys.stdout.write("\n")

    ok = all(r.converged for r in results)
    if not ok:
        logger.warning("some solves did not converge")
    return 0 if ok else 1


def main() -> None:
    raise SystemExit(run())


if __name__ == "__main__":
    main()
