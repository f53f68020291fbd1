"""Bayesian estimate of theta via the reparameterised balance model.

Rather than placing priors on (beta0, beta1) and forming -beta0/beta1 from
their draws (a ratio of two unbounded quantities, unstable when beta1 is
near zero), theta itself is a model parameter:

    theta2 ~ Beta(a, b)                    theta = 100 * theta2
    beta1  ~ Gamma(1.6, rate=0.8)          beta0 = -beta1 * theta
    sigma  ~ Gamma(2.5, rate=0.05)
    y_i    ~ Normal(beta1 * (x_i - theta), sigma)

Every quantity reported for theta comes from its own posterior draws.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, Optional, Tuple
from warnings import warn

import numpy as np

from .backends import get_sampler
from .delta import check_alpha
from .diagnostics import MIN_ESS, RHAT_THRESHOLD, Diagnostics, compute_diagnostics
from .errors import DegenerateInputError, FailedConvergenceWarning
from .inference import balance_mean
from .inputs import Observations
from .priors import PriorSpec

logger = logging.getLogger(__name__)

# Variables whose convergence is checked.
CHECKED = ("theta", "beta1", "sigma")


@dataclass(frozen=True)
class SamplerOptions:
    """MCMC configuration.

    ``iterations`` counts every step of a chain including the ``warmup``
    steps, which are discarded; the rest are thinned by ``thin``.
    """

    chains: int = 4
    iterations: int = 20_000
    warmup: int = 10_000
    thin: int = 5
    target_accept: float = 0.8
    seed: Optional[int] = 79
    alpha: float = 0.05
    cores: Optional[int] = None
    rhat_threshold: float = RHAT_THRESHOLD
    min_ess: float = MIN_ESS
    backend_options: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if int(self.chains) < 1:
            raise ValueError("chains must be >= 1.")
        if not 0 <= int(self.warmup) < int(self.iterations):
            raise ValueError(
                f"Need 0 <= warmup < iterations; got warmup={self.warmup}, iterations={self.iterations}."
            )
        if int(self.thin) < 1:
            raise ValueError("thin must be >= 1.")
        if not 0.0 < float(self.target_accept) < 1.0:
            raise ValueError("target_accept must lie in (0, 1).")
        check_alpha(self.alpha)

    @property
    def draws_per_chain(self) -> int:
        """Draws kept per chain after warmup and thinning."""
        return int(math.ceil((int(self.iterations) - int(self.warmup)) / int(self.thin)))


@dataclass(frozen=True)
class BayesianEstimate:
    theta: float  # posterior mean
    mean: float
    median: float
    low: float
    high: float
    # name -> draws, shape (chain, draw); includes theta, theta2, beta0, beta1, sigma
    samples: Dict[str, np.ndarray] = field(repr=False)
    diagnostics: Diagnostics = field(repr=False)
    backend: str = "pymc"
    alpha: float = 0.05
    stats: Dict[str, Any] = field(default_factory=dict, repr=False)

    method: ClassVar[str] = "bayes"

    @property
    def interval(self) -> Tuple[float, float]:
        return (self.low, self.high)

    @property
    def converged(self) -> bool:
        return self.diagnostics.converged

    def flat(self, name: str) -> np.ndarray:
        """All chains of ``name`` concatenated into one 1D array."""
        return np.asarray(self.samples[name]).reshape(-1)

    def predictive(
        self,
        x: Any,
        *,
        nsamples: Optional[int] = None,
        rng: Optional[np.random.Generator] = None,
    ) -> np.ndarray:
        """Posterior predictive balance replicates at ``x``, shape (S, len(x))."""
        if rng is None:
            rng = np.random.default_rng()
        x = np.atleast_1d(np.asarray(x, dtype=float))

        theta = self.flat("theta")
        beta1 = self.flat("beta1")
        sigma = self.flat("sigma")
        S = theta.size
        if nsamples is not None:
            take = int(nsamples)
            if take <= 0:
                raise ValueError("nsamples must be >= 1.")
            if take < S:
                idx = rng.choice(S, size=take, replace=False)
                theta, beta1, sigma = theta[idx], beta1[idx], sigma[idx]

        mu = balance_mean(x[None, :], beta1[:, None], theta[:, None])
        return mu + sigma[:, None] * rng.normal(size=mu.shape)


def bayesian_theta(
    obs: Observations,
    prior: PriorSpec,
    options: SamplerOptions = SamplerOptions(),
    backend: str = "pymc",
) -> BayesianEstimate:
    """Posterior mean, median and central (1 - alpha) credible interval for theta.

    Emits FailedConvergenceWarning (non-fatal) when any R-hat exceeds
    ``options.rhat_threshold`` or any bulk ESS falls below ``options.min_ess``.
    """
    if obs.n < 3:
        raise DegenerateInputError(
            f"Bayesian fit needs at least 3 observations; got {obs.n}."
        )
    sampler = get_sampler(backend)

    logger.info(
        "sampling %s posterior with %s: chains=%d iterations=%d warmup=%d thin=%d",
        prior.name,
        backend,
        options.chains,
        options.iterations,
        options.warmup,
        options.thin,
    )
    result = sampler.sample(
        x=obs.x,
        y=obs.y,
        prior=prior,
        chains=int(options.chains),
        iterations=int(options.iterations),
        warmup=int(options.warmup),
        thin=int(options.thin),
        target_accept=float(options.target_accept),
        seed=options.seed,
        cores=options.cores,
        options=dict(options.backend_options),
    )

    samples = {k: np.asarray(v, dtype=float) for k, v in result.samples.items()}
    samples["theta"] = prior.theta_scale * samples["theta2"]
    samples["beta0"] = -samples["beta1"] * samples["theta"]

    diag = compute_diagnostics(
        {k: samples[k] for k in CHECKED},
        rhat_threshold=options.rhat_threshold,
        min_ess=options.min_ess,
        divergences=int(result.stats.get("divergences", 0)),
    )
    if not diag.converged:
        warn(
            f"{prior.name}: posterior samples may be unreliable: " + "; ".join(diag.problems),
            FailedConvergenceWarning,
            stacklevel=2,
        )

    alpha = float(options.alpha)
    theta = samples["theta"].reshape(-1)
    lo, med, hi = np.quantile(theta, [alpha / 2.0, 0.5, 1.0 - alpha / 2.0])
    mean = float(np.mean(theta))

    return BayesianEstimate(
        theta=mean,
        mean=mean,
        median=float(med),
        low=float(lo),
        high=float(hi),
        samples=samples,
        diagnostics=diag,
        backend=backend,
        alpha=alpha,
        stats=dict(result.stats),
    )
