"""
Scalar root finding.

``find_root`` accepts either a single starting guess or a bracket ``(lo, hi)``:

- bracket: Brent's method (bisection guarded secant / inverse quadratic steps);
- guess with derivative: Newton's method;
- guess without derivative: a short outward search for a sign change, then
  Brent on the bracket found, falling back to the secant method.

Numerical failures are reported through ``RootResult.status``; invalid input
raises ``ValueError`` before the function is evaluated.

Example:
    >>> res = find_root(lambda x: x * x - 2.0, (0.0, 2.0))
    >>> res.status, round(res.root, 12)
    ('converged', 1.414213562373)
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Sequence

import numpy as np

from fourbar.constants import EPS, SECANT_DELTA
from fourbar.solvers.bracket import Bracket, has_sign_change, make_bracket, search_bracket
from fourbar.solvers.evaluate import Evaluator, safe_call
from fourbar.solvers.types import (
    RootMethod,
    RootOptions,
    RootResult,
    RootStatus,
    ScalarFunction,
)

logger = logging.getLogger(__name__)

Start = float | Sequence[float]


def _parse_start(x0: Start) -> tuple[float, tuple[float, float] | None]:
    arr = np.asarray(x0, dtype=np.float64)
    if arr.ndim == 0:
        x = float(arr)
        if not math.isfinite(x):
            raise ValueError(f"initial guess must be finite, got {x!r}")
        return x, None
    if arr.shape != (2,):
        raise ValueError("x0 must be a scalar guess or a (lo, hi) bracket")
    lo, hi = sorted(float(v) for v in arr)
    if not (math.isfinite(lo) and math.isfinite(hi)):
        raise ValueError(f"bracket endpoints must be finite, got ({lo!r}, {hi!r})")
    if lo == hi:
        raise ValueError("bracket endpoints must differ")
    return 0.5 * (lo + hi), (lo, hi)


def _resolve_method(
    method: RootMethod,
    bracket: tuple[float, float] | None,
    fprime: Callable[[float], float] | None,
) -> RootMethod:
    if method == "newton" and fprime is None:
        raise ValueError("method='newton' requires fprime")
    if method != "auto":
        return method
    if bracket is not None:
        return "brent"
    if fprime is not None:
        return "newton"
    return "auto"


def _finish(
    ev: Evaluator,
    x: float,
    fx: float,
    iterations: int,
    status: RootStatus,
    message: str,
    method: str,
    bracket: tuple[float, float] | None = None,
) -> RootResult:
    logger.debug(
        "%s: status=%s root=%.17g f=%.3e iters=%d nfev=%d",
        method,
        status,
        x,
        fx,
        iterations,
        ev.count,
    )
    return RootResult(
        root=float(x),
        fun=float(fx),
        iterations=int(iterations),
        evaluations=int(ev.count),
        status=status,
        message=message,
        method=method,
        bracket=bracket,
        trace=ev.trace,
    )


def _exhausted(ev: Evaluator, iterations: int, method: str) -> RootResult:
    if ev.exhausted:
        msg = f"Evaluation budget of {ev.max_evaluations} exhausted before tolerance was met."
    else:
        msg = "Reached max_iterations before tolerance was met."
    return _finish(ev, ev.best_x, ev.best_f, iterations, "max-iterations-exceeded", msg, method)


def _non_finite(ev: Evaluator, x: float, fx: float, iterations: int, method: str) -> RootResult:
    return _finish(
        ev,
        x,
        fx,
        iterations,
        "not-a-number-encountered",
        "Function returned a non-finite value; returning the last valid iterate.",
        method,
    )


def _is_root(fx: float, options: RootOptions) -> bool:
    return fx == 0.0 or abs(fx) < options.absolute_tolerance


def brent(ev: Evaluator, bracket: Bracket, options: RootOptions) -> RootResult:
    """Brent's method on a bracket with opposite, nonzero endpoint signs."""
    a, fa = bracket.lo, bracket.f_lo
    b, fb = bracket.hi, bracket.f_hi
    c, fc = a, fa
    d = e = b - a
    f_scale = max(abs(fa), abs(fb))

    for iteration in range(options.max_iterations + 1):
        if abs(fc) < abs(fb):
            a, b, c = b, c, b
            fa, fb, fc = fb, fc, fb

        tol = 2.0 * EPS * abs(b) + 0.5 * options.step_tol(b)
        m = 0.5 * (c - b)
        if abs(m) <= tol and not _is_root(fb, options) and abs(fb) > f_scale:
            # sign change across a pole, not a zero
            return _finish(
                ev,
                b,
                fb,
                iteration,
                "not-a-number-encountered",
                f"Bracket collapsed onto a singularity near x={b!r}.",
                "brent",
                bracket=(min(b, c), max(b, c)),
            )
        if _is_root(fb, options) or abs(m) <= tol:
            return _finish(
                ev,
                b,
                fb,
                iteration,
                "converged",
                "Converged.",
                "brent",
                bracket=(min(b, c), max(b, c)),
            )
        if iteration == options.max_iterations or ev.exhausted:
            return _exhausted(ev, iteration, "brent")

        if abs(e) < tol or abs(fa) <= abs(fb):
            d = e = m
        else:
            s = fb / fa
            if a == c:
                # secant
                p = 2.0 * m * s
                q = 1.0 - s
            else:
                # inverse quadratic interpolation
                q = fa / fc
                r = fb / fc
                p = s * (2.0 * m * q * (q - r) - (b - a) * (r - 1.0))
                q = (q - 1.0) * (r - 1.0) * (s - 1.0)
            if p > 0.0:
                q = -q
            else:
                p = -p
            if 2.0 * p < 3.0 * m * q - abs(tol * q) and p < abs(0.5 * e * q):
                e = d
                d = p / q
            else:
                d = e = m

        a, fa = b, fb
        if abs(d) > tol:
            b += d
        elif m > 0.0:
            b += tol
        else:
            b -= tol

        fb = ev(b)
        if not math.isfinite(fb):
            return _non_finite(ev, a, fa, iteration + 1, "brent")
        if (fb > 0.0) == (fc > 0.0) and fb != 0.0:
            c, fc = a, fa
            d = e = b - a

    return _exhausted(ev, options.max_iterations, "brent")


def secant(ev: Evaluator, x0: float, f0: float, options: RootOptions) -> RootResult:
    """Secant iteration from ``x0`` and a second point just to its right."""
    x_prev, f_prev = x0, f0
    x = x0 + SECANT_DELTA * max(1.0, abs(x0))

    for iteration in range(1, options.max_iterations + 1):
        if ev.exhausted:
            return _exhausted(ev, iteration - 1, "secant")
        fx = ev(x)
        if not math.isfinite(fx):
            return _non_finite(ev, x_prev, f_prev, iteration, "secant")
        if _is_root(fx, options) or (
            iteration > 1 and abs(x - x_prev) <= options.step_tol(x)
        ):
            return _finish(ev, x, fx, iteration, "converged", "Converged.", "secant")

        denom = fx - f_prev
        step = -fx * (x - x_prev) / denom if denom != 0.0 else math.inf
        if not math.isfinite(step):
            return _finish(
                ev,
                ev.best_x,
                ev.best_f,
                iteration,
                "diverged",
                "Secant slope vanished; iteration cannot continue.",
                "secant",
            )
        x_prev, f_prev = x, fx
        x = x + step

    return _exhausted(ev, options.max_iterations, "secant")


def newton(
    ev: Evaluator,
    fprime: Callable[[float], float],
    x0: float,
    f0: float,
    options: RootOptions,
) -> RootResult:
    """Newton iteration; ``fprime`` calls are not counted as evaluations."""
    x, fx = x0, f0

    for iteration in range(1, options.max_iterations + 1):
        dfx = safe_call(fprime, x)
        step = -fx / dfx if dfx != 0.0 else math.inf
        if not math.isfinite(step) or not math.isfinite(x + step):
            return _finish(
                ev,
                ev.best_x,
                ev.best_f,
                iteration - 1,
                "diverged",
                f"Derivative vanished or is not finite at x={x!r}.",
                "newton",
            )
        if ev.exhausted:
            return _exhausted(ev, iteration - 1, "newton")
        x_new = x + step
        f_new = ev(x_new)
        if not math.isfinite(f_new):
            return _non_finite(ev, x, fx, iteration, "newton")
        x, fx = x_new, f_new
        if _is_root(fx, options) or abs(step) <= options.step_tol(x):
            return _finish(ev, x, fx, iteration, "converged", "Converged.", "newton")

    return _exhausted(ev, options.max_iterations, "newton")


def _solve_bracket(
    ev: Evaluator, lo: float, hi: float, options: RootOptions
) -> RootResult | Bracket:
    f_lo = ev(lo)
    if not math.isfinite(f_lo):
        return _non_finite(ev, lo, f_lo, 0, "brent")
    if _is_root(f_lo, options):
        return _finish(ev, lo, f_lo, 0, "converged", "Lower endpoint is a root.", "brent")
    if ev.exhausted:
        return _exhausted(ev, 0, "brent")
    f_hi = ev(hi)
    if not math.isfinite(f_hi):
        return _non_finite(ev, lo, f_lo, 0, "brent")
    if _is_root(f_hi, options):
        return _finish(ev, hi, f_hi, 0, "converged", "Upper endpoint is a root.", "brent")
    if not has_sign_change(f_lo, f_hi):
        return _finish(
            ev,
            ev.best_x,
            ev.best_f,
            0,
            "no-sign-change-in-bracket",
            f"f({lo!r})={f_lo!r} and f({hi!r})={f_hi!r} have the same sign.",
            "brent",
            bracket=(lo, hi),
        )
    return make_bracket(lo, f_lo, hi, f_hi)


def find_root(
    f: ScalarFunction | Callable[[float], float],
    x0: Start,
    options: RootOptions | None = None,
    *,
    fprime: Callable[[float], float] | None = None,
) -> RootResult:
    """Find x with f(x) ~= 0 from a guess ``x0`` or a bracket ``(lo, hi)``."""
    opts = RootOptions() if options is None else options
    guess, bracket = _parse_start(x0)
    method = _resolve_method(opts.method, bracket, fprime)
    ev = Evaluator(fun=f, max_evaluations=opts.max_evaluations)

    if bracket is not None and method == "brent":
        checked = _solve_bracket(ev, bracket[0], bracket[1], opts)
        if isinstance(checked, RootResult):
            return checked
        return brent(ev, checked, opts)

    f0 = ev(guess)
    if not math.isfinite(f0):
        return _non_finite(ev, guess, f0, 0, method)
    if _is_root(f0, opts):
        return _finish(ev, guess, f0, 0, "converged", "Initial guess is a root.", method)

    if method == "newton":
        assert fprime is not None
        return newton(ev, fprime, guess, f0, opts)
    if method == "secant":
        return secant(ev, guess, f0, opts)

    found = search_bracket(ev, guess, f0)
    if found is not None:
        if _is_root(found.f_lo, opts):
            return _finish(ev, found.lo, found.f_lo, 0, "converged", "Search hit a root.", "brent")
        if _is_root(found.f_hi, opts):
            return _finish(ev, found.hi, found.f_hi, 0, "converged", "Search hit a root.", "brent")
        return brent(ev, found, opts)
    if ev.exhausted:
        return _exhausted(ev, 0, method)
    if method == "brent":
        return _finish(
            ev,
            ev.best_x,
            ev.best_f,
            0,
            "no-sign-change-in-bracket",
            f"No sign change found around x0={guess!r}.",
            "brent",
        )
    logger.debug("no bracket around %.17g; falling back to secant", guess)
    return secant(ev, guess, f0, opts)


__all__ = ["brent", "find_root", "newton", "secant"]
