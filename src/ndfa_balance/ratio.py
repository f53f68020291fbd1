from __future__ import annotations

from typing import Any

import numpy as np

from .errors import DivisionByZeroError
from .regression import LinearFit

# |beta1| at or below this is treated as a horizontal line.
SLOPE_TOL = 1e-12
# Same, relative to LinearFit.slope_scale; a fitted slope this small is
# round-off of a flat response.
REL_SLOPE_TOL = 1e-10


def theta_from_coefficients(beta0: float, beta1: float, tol: float = SLOPE_TOL) -> float:
    """Ndfa at which beta0 + beta1 * x crosses zero: theta = -beta0 / beta1."""
    beta0 = float(beta0)
    beta1 = float(beta1)
    if not abs(beta1) > tol:
        raise DivisionByZeroError(
            f"theta is undefined for slope {beta1!r} (|beta1| <= {tol:g})."
        )
    return -beta0 / beta1


def fit_slope_tol(fit: LinearFit, tol: float = SLOPE_TOL, rel_tol: float = REL_SLOPE_TOL) -> float:
    """Zero-slope tolerance for ``fit``: ``tol`` or ``rel_tol`` of its slope scale, whichever is larger."""
    return max(float(tol), float(rel_tol) * float(fit.slope_scale))


def theta_from_fit(fit: LinearFit, tol: float = SLOPE_TOL, rel_tol: float = REL_SLOPE_TOL) -> float:
    return theta_from_coefficients(fit.beta0, fit.beta1, tol=fit_slope_tol(fit, tol, rel_tol))


def theta_array(beta0: Any, beta1: Any, tol: float = SLOPE_TOL) -> np.ndarray:
    """Vectorised theta for arrays of coefficient pairs."""
    b0 = np.asarray(beta0, dtype=float)
    b1 = np.asarray(beta1, dtype=float)
    zero = ~(np.abs(b1) > tol)
    if np.any(zero):
        first = int(np.flatnonzero(zero.ravel())[0])
        raise DivisionByZeroError(
            f"theta is undefined: {int(zero.sum())} slope(s) with |beta1| <= {tol:g} "
            f"(first at index {first})."
        )
    return -b0 / b1
