import math
from collections.abc import Callable
from dataclasses import FrozenInstanceError

import pytest
from scipy.optimize import brentq

from fourbar.solvers.root import find_root
from fourbar.solvers.types import RootOptions


def _cubic(x: float) -> float:
    return x**3 - 2.0 * x - 5.0


POLYNOMIALS: list[tuple[Callable[[float], float], tuple[float, float], float]] = [
    (lambda x: x * x - 2.0, (0.0, 2.0), math.sqrt(2.0)),
    (_cubic, (2.0, 3.0), 2.0945514815423265),
    (lambda x: (x - 1.5) * (x + 2.0) * (x - 4.0), (0.0, 3.0), 1.5),
    (lambda x: x**5 - 0.5, (-1.0, 1.0), 0.5**0.2),
    (lambda x: 3.0 - 0.25 * x, (0.0, 100.0), 12.0),
]


@pytest.mark.parametrize(("f", "bracket", "expected"), POLYNOMIALS)
def test_brent_converges_to_polynomial_root(
    f: Callable[[float], float], bracket: tuple[float, float], expected: float
) -> None:
    res = find_root(f, bracket)

    assert res.status == "converged"
    assert res.converged
    assert res.method == "brent"
    assert abs(res.root - expected) < 1e-9
    assert abs(res.fun) < RootOptions().absolute_tolerance
    assert res.bracket is not None
    assert res.bracket[0] <= res.root <= res.bracket[1]


@pytest.mark.parametrize(("f", "bracket", "expected"), POLYNOMIALS)
def test_brent_matches_scipy_brentq(
    f: Callable[[float], float], bracket: tuple[float, float], expected: float
) -> None:
    ref = brentq(f, bracket[0], bracket[1], xtol=1e-14)
    res = find_root(f, bracket)
    assert res.root == pytest.approx(ref, abs=1e-9)


def test_bracket_order_does_not_matter() -> None:
    a = find_root(_cubic, (2.0, 3.0))
    b = find_root(_cubic, (3.0, 2.0))
    assert a == b


def test_no_sign_change_evaluates_only_endpoints() -> None:
    calls: list[float] = []

    def f(x: float) -> float:
        calls.append(x)
        return x * x - 1.0

    res = find_root(f, (2.0, 3.0))

    assert res.status == "no-sign-change-in-bracket"
    assert not res.converged
    assert res.evaluations == 2
    assert res.iterations == 0
    assert calls == [2.0, 3.0]
    assert res.bracket == (2.0, 3.0)
    assert res.root == 2.0


def test_bracket_endpoint_root_returns_without_iterating() -> None:
    res = find_root(lambda x: x * x - 1.0, (1.0, 2.0))

    assert res.status == "converged"
    assert res.root == 1.0
    assert res.evaluations == 1
    assert res.iterations == 0


def test_pole_inside_bracket_reports_non_finite_value() -> None:
    res = find_root(lambda x: 1.0 / x, (-1.0, 1.0))

    assert res.status == "not-a-number-encountered"
    assert math.isfinite(res.root)
    assert math.isfinite(res.fun)
    assert math.isnan(res.trace.f[-1])


def test_pole_inside_asymmetric_bracket_is_not_a_root() -> None:
    res = find_root(lambda x: 1.0 / x, (-1.0, 3.0))

    assert res.status == "not-a-number-encountered"
    assert not res.converged
    assert math.isfinite(res.root)


def test_guess_next_to_pole_is_not_a_root() -> None:
    res = find_root(lambda x: 1.0 / x, 0.1)

    assert res.status == "not-a-number-encountered"
    assert not res.converged
    assert res.method == "brent"


def test_steep_root_still_converges() -> None:
    res = find_root(lambda x: 1e6 * (x - 0.3), (-1.0, 3.0))

    assert res.status == "converged"
    assert res.root == pytest.approx(0.3, abs=1e-9)


def test_non_finite_endpoint_is_reported() -> None:
    res = find_root(lambda x: math.inf if x > 0.0 else x - 1.0, (-1.0, 1.0))

    assert res.status == "not-a-number-encountered"
    assert res.root == -1.0
    assert res.evaluations == 2


def test_brent_stops_at_max_iterations_with_best_iterate() -> None:
    res = find_root(_cubic, (2.0, 3.0), RootOptions(max_iterations=2))

    assert res.status == "max-iterations-exceeded"
    assert res.iterations == 2
    assert res.evaluations == 4
    assert abs(res.fun) == min(abs(v) for v in res.trace.f)
    assert "max_iterations" in res.message


def test_brent_respects_evaluation_budget() -> None:
    res = find_root(_cubic, (2.0, 3.0), RootOptions(max_evaluations=5))

    assert res.status == "max-iterations-exceeded"
    assert res.evaluations == 5
    assert len(res.trace) == 5
    assert "budget" in res.message


def test_find_root_is_deterministic() -> None:
    opts = RootOptions(absolute_tolerance=1e-13)
    first = find_root(_cubic, (2.0, 3.0), opts)
    second = find_root(_cubic, (2.0, 3.0), opts)

    assert first == second
    assert first.trace.x == second.trace.x


def test_result_trace_is_immutable() -> None:
    res = find_root(_cubic, (2.0, 3.0))

    assert isinstance(res.trace.x, tuple)
    assert isinstance(res.trace.f, tuple)
    with pytest.raises(FrozenInstanceError):
        res.trace.x = ()  # type: ignore[misc]
