"""Delta-method standard error and normal interval for theta = -beta0/beta1.

The gradient of theta with respect to (beta0, beta1) is

    g = (-1 / beta1, beta0 / beta1**2)

and Var(theta) ~= g' Sigma g. This is a first-order local linearisation: it
is exact only asymptotically and can be poorly calibrated for small samples
or when beta1 is close to zero (the ratio then has heavy tails and the
symmetric interval understates the uncertainty). The bootstrap and Bayesian
estimators exist to cross-check it.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import ClassVar, Tuple

import numpy as np
from scipy.stats import norm

from .ratio import SLOPE_TOL, theta_from_fit
from .regression import LinearFit


@dataclass(frozen=True)
class DeltaEstimate:
    theta: float
    stderr: float
    low: float
    high: float
    alpha: float = 0.05

    method: ClassVar[str] = "delta"

    @property
    def interval(self) -> Tuple[float, float]:
        return (self.low, self.high)

    @property
    def z(self) -> float:
        return float(norm.ppf(1.0 - self.alpha / 2.0))


def check_alpha(alpha: float) -> float:
    alpha = float(alpha)
    if not 0.0 < alpha < 1.0:
        raise ValueError(f"alpha must lie in (0, 1); got {alpha!r}.")
    return alpha


def theta_gradient(beta0: float, beta1: float) -> np.ndarray:
    """Analytic gradient of -beta0/beta1 with respect to (beta0, beta1)."""
    return np.array([-1.0 / beta1, beta0 / beta1**2], dtype=float)


def delta_method(fit: LinearFit, alpha: float = 0.05, tol: float = SLOPE_TOL) -> DeltaEstimate:
    """Two-sided (1 - alpha) normal-approximation interval for theta.

    Raises DivisionByZeroError when the fitted slope is numerically zero,
    absolutely (``tol``) or relative to the scale of the data.
    """
    alpha = check_alpha(alpha)
    theta = theta_from_fit(fit, tol=tol)

    g = theta_gradient(fit.beta0, fit.beta1)
    var = float(g @ np.asarray(fit.cov, dtype=float) @ g)
    # Sigma is PSD; tiny negative values are round-off.
    se = math.sqrt(max(var, 0.0))

    z = float(norm.ppf(1.0 - alpha / 2.0))
    return DeltaEstimate(
        theta=theta,
        stderr=se,
        low=theta - z * se,
        high=theta + z * se,
        alpha=alpha,
    )
