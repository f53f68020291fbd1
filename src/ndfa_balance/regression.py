"""Ordinary least-squares straight-line fit of balance on Ndfa."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Optional, Tuple

import numpy as np
import uncertainties

from .errors import DegenerateInputError
from .inputs import Observations

MIN_POINTS = 3

# X'X with a condition number beyond this is treated as singular.
_MAX_CONDITION = 1.0 / np.finfo(float).eps


@dataclass(frozen=True)
class LinearFit:
    """Coefficients of y = beta0 + beta1 * x and their covariance.

    ``cov`` is sigma2 * (X'X)^-1 with sigma2 = RSS / (n - 2), i.e. the usual
    homoscedastic Gaussian-error estimate.
    """

    beta0: float
    beta1: float
    cov: np.ndarray  # (2, 2), order (beta0, beta1)
    sigma2: float
    n: int
    r2: float = math.nan
    # max|y| / ptp(x): slope that spans the whole response over the Ndfa range
    slope_scale: float = 1.0

    @property
    def dof(self) -> int:
        return self.n - 2

    @property
    def coef(self) -> np.ndarray:
        return np.array([self.beta0, self.beta1], dtype=float)

    @property
    def stderr(self) -> Tuple[float, float]:
        """Standard errors of (beta0, beta1)."""
        d = np.sqrt(np.clip(np.diag(self.cov), 0.0, None))
        return float(d[0]), float(d[1])

    @property
    def params(self) -> Tuple[Any, Any]:
        """(beta0, beta1) as correlated ``uncertainties`` values."""
        b0, b1 = uncertainties.correlated_values(
            [self.beta0, self.beta1], np.asarray(self.cov, dtype=float)
        )
        return b0, b1

    def predict(self, x: Any) -> np.ndarray:
        """Evaluate the fitted line at ``x``."""
        return self.beta0 + self.beta1 * np.asarray(x, dtype=float)

    def summary(self, digits: int = 4) -> str:
        se0, se1 = self.stderr
        return "\n".join(
            [
                f"LinearFit(n={self.n}, dof={self.dof})",
                f"  {'beta0':>8s}: {self.beta0:.{digits}g} ± {se0:.{digits}g}",
                f"  {'beta1':>8s}: {self.beta1:.{digits}g} ± {se1:.{digits}g}",
                f"  {'sigma':>8s}: {math.sqrt(self.sigma2):.{digits}g}",
                f"  {'r2':>8s}: {self.r2:.{digits}g}",
            ]
        )


def fit_linear(obs: Observations | Tuple[Any, Any], y: Optional[Any] = None) -> LinearFit:
    """Fit y = beta0 + beta1 * x by ordinary least squares.

    Accepts an :class:`Observations` or raw ``(x, y)`` arrays, either as
    ``fit_linear(obs)``, ``fit_linear((x, y))`` or ``fit_linear(x, y)``.

    Raises
    ------
    DegenerateInputError
        Fewer than three observations, or X'X singular (e.g. all x equal).
    """
    if isinstance(obs, Observations):
        if y is not None:
            raise TypeError("If obs is Observations, do not also pass y=...")
        x_arr, y_arr = obs.x, obs.y
    elif y is not None:
        x_arr = np.asarray(obs, dtype=float)
        y_arr = np.asarray(y, dtype=float)
    else:
        x_arr, y_arr = (np.asarray(a, dtype=float) for a in obs)

    n = int(x_arr.size)
    if n < MIN_POINTS:
        raise DegenerateInputError(
            f"Linear fit needs at least {MIN_POINTS} observations; got {n}."
        )
    if y_arr.shape != x_arr.shape:
        raise ValueError("x and y must have the same shape.")

    X = np.column_stack([np.ones(n), x_arr])
    if np.ptp(x_arr) == 0.0 or np.linalg.cond(X.T @ X) > _MAX_CONDITION:
        raise DegenerateInputError(
            "Design matrix is singular: Ndfa values do not vary."
        )

    # Centred sums: a flat response gives a slope at round-off of y - mean(y),
    # not of |y| times the conditioning of X'X.
    x_mean = float(x_arr.mean())
    y_mean = float(y_arr.mean())
    xc = x_arr - x_mean
    yc = y_arr - y_mean
    sxx = float(xc @ xc)
    beta1 = float(xc @ yc) / sxx
    beta0 = y_mean - beta1 * x_mean

    resid = yc - beta1 * xc
    rss = float(resid @ resid)
    sigma2 = rss / (n - 2)
    # sigma2 * (X'X)^-1 written out for the two-column design.
    cov = sigma2 * np.array(
        [
            [1.0 / n + x_mean**2 / sxx, -x_mean / sxx],
            [-x_mean / sxx, 1.0 / sxx],
        ]
    )

    sst = float(yc @ yc)
    r2 = 1.0 - rss / sst if sst > 0 else math.nan

    return LinearFit(
        beta0=float(beta0),
        beta1=float(beta1),
        cov=cov,
        sigma2=float(sigma2),
        n=n,
        r2=float(r2),
        slope_scale=float(np.max(np.abs(y_arr)) / np.ptp(x_arr)),
    )
