from __future__ import annotations

import numpy as np

EPS = float(np.finfo(np.float64).eps)

ABS_TOL_DEFAULT = 1e-10
REL_TOL_DEFAULT = 4.0 * EPS
STEP_TOL_DEFAULT = 2e-12
MAX_ITER_DEFAULT = 100

# offset of the second secant point, relative to max(1, |x0|)
SECANT_DELTA = 1e-4

__all__ = [
    "EPS",
    "ABS_TOL_DEFAULT",
    "REL_TOL_DEFAULT",
    "STEP_TOL_DEFAULT",
    "MAX_ITER_DEFAULT",
    "SECANT_DELTA",
]
