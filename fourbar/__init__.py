"""Scalar root finding and the Freudenstein four-bar equation."""

from fourbar.freudenstein import FreudensteinEquation, bind, closed_form_alpha, freudenstein
from fourbar.solvers.root import find_root
from fourbar.solvers.types import RootOptions, RootResult
from fourbar.sweep import SweepResult, continuation_sweep, sweep_branches, sweep_freudenstein
from fourbar.types import LinkLengths

__all__ = [
    "FreudensteinEquation",
    "LinkLengths",
    "RootOptions",
    "RootResult",
    "SweepResult",
    "bind",
    "closed_form_alpha",
    "continuation_sweep",
    "find_root",
    "freudenstein",
    "sweep_branches",
    "sweep_freudenstein",
]
