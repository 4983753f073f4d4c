import logging
import math
from collections.abc import Callable

import numpy as np
import pytest

from fourbar.freudenstein import closed_form_alpha
from fourbar.sweep import continuation_sweep, sweep_branches, sweep_freudenstein
from fourbar.types import LinkLengths

LINKS = LinkLengths(10.0, 13.0, 8.0, 10.0)
BETAS = np.linspace(0.0, 2.0 * math.pi / 3.0, 41)


def test_each_solve_is_seeded_with_previous_root() -> None:
    res = sweep_freudenstein(LINKS, BETAS, 1.0)

    assert res.converged
    assert res.seeds[0] == 1.0
    np.testing.assert_array_equal(res.seeds[1:], res.roots[:-1])


def test_sweep_tracks_smooth_branch() -> None:
    res = sweep_freudenstein(LINKS, BETAS, 1.0, max_jump=0.1)

    assert res.converged
    assert res.jumps == ()
    assert float(np.max(np.abs(np.diff(res.roots)))) < 0.1
    expected = np.array([closed_form_alpha(LINKS, float(b))[0] for b in BETAS])
    np.testing.assert_allclose(res.roots, expected, atol=1e-8)
    assert np.all(np.abs(res.residuals) < 1e-10)


def test_two_seeds_trace_both_branches() -> None:
    plus, minus = sweep_branches(LINKS, BETAS, [1.0, -1.0], max_jump=0.1)

    closed = np.array([closed_form_alpha(LINKS, float(b)) for b in BETAS])
    np.testing.assert_allclose(plus.roots, closed[:, 0], atol=1e-8)
    np.testing.assert_allclose(minus.roots, closed[:, 1], atol=1e-8)
    assert plus.total_evaluations > 0
    assert minus.jumps == ()


def _step_family(p: float) -> Callable[[float], float]:
    offset = 0.0 if p < 0.5 else 10.0
    return lambda x: x - offset


def test_jumps_are_reported_and_logged(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="fourbar.sweep"):
        res = continuation_sweep(_step_family, [0.0, 0.25, 0.75, 1.0], 0.0, max_jump=1.0)

    assert res.converged
    np.testing.assert_allclose(res.roots, [0.0, 0.0, 10.0, 10.0])
    assert res.jumps == (2,)
    assert "jumped" in caplog.text


def test_failed_solves_are_reported_not_raised(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="fourbar.sweep"):
        res = continuation_sweep(lambda p: (lambda x: math.nan), [0.0, 1.0], 2.0)

    assert not res.converged
    assert res.statuses == ("not-a-number-encountered", "not-a-number-encountered")
    np.testing.assert_array_equal(res.seeds, [2.0, 2.0])
    assert "did not converge" in caplog.text


def test_empty_params_raise() -> None:
    with pytest.raises(ValueError):
        sweep_freudenstein(LINKS, [], 1.0)


def test_invalid_max_jump_raises() -> None:
    with pytest.raises(ValueError):
        sweep_freudenstein(LINKS, BETAS, 1.0, max_jump=0.0)


def test_empty_seeds_raise() -> None:
    with pytest.raises(ValueError):
        sweep_branches(LINKS, BETAS, [])
