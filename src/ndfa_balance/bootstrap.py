# Nonparametric (percentile) bootstrap for theta = -beta0/beta1.

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import ClassVar, Literal, Tuple

import numpy as np

from .delta import check_alpha
from .errors import DegenerateInputError, DivisionByZeroError
from .inputs import Observations
from .ratio import SLOPE_TOL, theta_from_fit
from .regression import fit_linear

logger = logging.getLogger(__name__)

FailurePolicy = Literal["raise", "redraw"]


@dataclass(frozen=True)
class BootstrapOptions:
    """Bootstrap configuration.

    on_failure:
      - "raise": the first degenerate resample (singular fit or zero slope)
        aborts the run with its error.
      - "redraw": a degenerate resample is discarded and redrawn from the
        same random stream, at most ``max_redraws`` times per resample.
    """

    n_resamples: int = 10_000
    seed: int = 79
    alpha: float = 0.05
    on_failure: FailurePolicy = "raise"
    max_redraws: int = 100

    def __post_init__(self) -> None:
        if int(self.n_resamples) < 1:
            raise ValueError("n_resamples must be >= 1.")
        if self.on_failure not in ("raise", "redraw"):
            raise ValueError(
                f"on_failure must be 'raise' or 'redraw'; got {self.on_failure!r}."
            )
        if int(self.max_redraws) < 0:
            raise ValueError("max_redraws must be >= 0.")
        check_alpha(self.alpha)


@dataclass(frozen=True)
class BootstrapEstimate:
    theta: float  # median of the bootstrap distribution
    low: float
    median: float
    high: float
    samples: np.ndarray = field(repr=False)
    n_resamples: int = 0
    seed: int = 0
    alpha: float = 0.05
    n_redrawn: int = 0
    runtime_seconds: float = 0.0

    method: ClassVar[str] = "bootstrap"

    @property
    def interval(self) -> Tuple[float, float]:
        return (self.low, self.high)


def _theta_for(obs: Observations, idx: np.ndarray, tol: float) -> float:
    return theta_from_fit(fit_linear(obs.take(idx)), tol=tol)


def bootstrap_theta(
    obs: Observations,
    options: BootstrapOptions = BootstrapOptions(),
    tol: float = SLOPE_TOL,
) -> BootstrapEstimate:
    """Percentile bootstrap interval for theta.

    Each of the B resamples draws N rows with replacement, refits the line
    and recomputes theta. The interval is the (alpha/2, 1 - alpha/2)
    empirical quantile pair of the B thetas; no bias correction or
    acceleration is applied. Results are reproducible for a fixed seed and B.
    """
    n = obs.n
    if n < 3:
        raise DegenerateInputError(f"Bootstrap needs at least 3 observations; got {n}.")
    B = int(options.n_resamples)
    rng = np.random.default_rng(options.seed)

    start = time.time()
    thetas = np.empty(B, dtype=float)
    n_redrawn = 0

    for b in range(B):
        idx = rng.integers(0, n, size=n)
        redraws = 0
        while True:
            try:
                thetas[b] = _theta_for(obs, idx, tol)
                break
            except (DegenerateInputError, DivisionByZeroError) as e:
                if options.on_failure == "raise" or redraws >= options.max_redraws:
                    e.args = (f"bootstrap resample {b}: {e}",)
                    raise
                redraws += 1
                n_redrawn += 1
                logger.debug("bootstrap resample %d degenerate (%s); redrawing", b, e)
                idx = rng.integers(0, n, size=n)

    if n_redrawn:
        logger.info("bootstrap redrew %d degenerate resample(s)", n_redrawn)

    alpha = float(options.alpha)
    lo, med, hi = np.quantile(thetas, [alpha / 2.0, 0.5, 1.0 - alpha / 2.0])
    return BootstrapEstimate(
        theta=float(med),
        low=float(lo),
        median=float(med),
        high=float(hi),
        samples=thetas,
        n_resamples=B,
        seed=int(options.seed),
        alpha=alpha,
        n_redrawn=n_redrawn,
        runtime_seconds=float(time.time() - start),
    )
