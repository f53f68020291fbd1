from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

from .bayes import BayesianEstimate, SamplerOptions, bayesian_theta
from .bootstrap import BootstrapEstimate, BootstrapOptions, bootstrap_theta
from .delta import DeltaEstimate, check_alpha, delta_method
from .inputs import NDFA, PARTIAL_BALANCE, TOTAL_BALANCE, Observations
from .priors import PriorSpec
from .regression import LinearFit, fit_linear
from .util import format_interval, format_uncertainty

logger = logging.getLogger(__name__)

METHODS: Tuple[str, ...] = ("delta", "bootstrap", "bayes")

# balance name -> response column
BALANCE_COLUMNS: Dict[str, str] = {
    "partial": PARTIAL_BALANCE,
    "total": TOTAL_BALANCE,
}


@dataclass(frozen=True)
class BalanceResult:
    name: str
    fit: LinearFit
    prior: PriorSpec
    delta: Optional[DeltaEstimate] = None
    bootstrap: Optional[BootstrapEstimate] = None
    bayes: Optional[BayesianEstimate] = None
    observations: Optional[Observations] = field(default=None, repr=False)

    @property
    def estimates(self) -> Dict[str, Any]:
        """Computed estimates keyed by method name."""
        out: Dict[str, Any] = {}
        for m in METHODS:
            est = getattr(self, m)
            if est is not None:
                out[m] = est
        return out

    def as_dict(self) -> Dict[str, Any]:
        """Plain-number view: coefficients plus point estimate and bounds per method."""
        se0, se1 = self.fit.stderr
        out: Dict[str, Any] = {
            "name": self.name,
            "prior": self.prior.name,
            "n": self.fit.n,
            "beta0": self.fit.beta0,
            "beta1": self.fit.beta1,
            "beta0_stderr": se0,
            "beta1_stderr": se1,
        }
        for m, est in self.estimates.items():
            out[m] = {"theta": est.theta, "low": est.low, "high": est.high}
        if self.delta is not None:
            out["delta"]["stderr"] = self.delta.stderr
        if self.bootstrap is not None:
            out["bootstrap"]["median"] = self.bootstrap.median
        if self.bayes is not None:
            out["bayes"]["median"] = self.bayes.median
            out["bayes"]["converged"] = self.bayes.converged
        return out

    def summary(self, digits: int = 4) -> str:
        """Return a human-readable summary string for the three theta estimates."""
        lines = [f"BalanceResult(name={self.name!r}, prior={self.prior.name!r}, n={self.fit.n})"]
        se0, se1 = self.fit.stderr
        lines.append(f"  {'beta0':>10s}: {format_uncertainty(self.fit.beta0, se0)}")
        lines.append(f"  {'beta1':>10s}: {format_uncertainty(self.fit.beta1, se1)}")

        for m, est in self.estimates.items():
            level = 100.0 * (1.0 - est.alpha)
            ci = format_interval(est.interval, digits)
            if m == "delta":
                point = format_uncertainty(est.theta, est.stderr)
            else:
                point = f"{est.theta:.{digits}g}"
            tag = ""
            if m == "bayes" and not est.converged:
                tag = "  (not converged)"
            lines.append(f"  {'theta/' + m:>10s}: {point}  {level:g}% {ci}{tag}")
        return "\n".join(lines)


def run_balance(
    obs: Observations,
    prior: PriorSpec,
    *,
    name: Optional[str] = None,
    alpha: float = 0.05,
    bootstrap: BootstrapOptions = BootstrapOptions(),
    sampler: SamplerOptions = SamplerOptions(),
    backend: str = "pymc",
    methods: Sequence[str] = METHODS,
) -> BalanceResult:
    """Fit the balance line and estimate theta with each requested method.

    ``alpha`` sets the level of every method, overriding the alpha carried
    by ``bootstrap`` and ``sampler``. Errors from any stage
    (DegenerateInputError, DivisionByZeroError) propagate.
    """
    methods = tuple(methods)
    unknown = [m for m in methods if m not in METHODS]
    if unknown:
        raise ValueError(f"Unknown method(s) {unknown}. Available: {METHODS}")
    alpha = check_alpha(alpha)
    bootstrap = replace(bootstrap, alpha=alpha)
    sampler = replace(sampler, alpha=alpha)
    name = name or obs.label or prior.name

    fit = fit_linear(obs)
    logger.info(
        "%s: n=%d beta0=%.4g beta1=%.4g", name, fit.n, fit.beta0, fit.beta1
    )

    delta = None
    if "delta" in methods:
        delta = delta_method(fit, alpha=alpha)
        logger.info("%s: delta theta=%.4g se=%.4g", name, delta.theta, delta.stderr)

    boot = None
    if "bootstrap" in methods:
        boot = bootstrap_theta(obs, bootstrap)
        logger.info(
            "%s: bootstrap median=%.4g interval=%s (B=%d)",
            name,
            boot.median,
            format_interval(boot.interval),
            boot.n_resamples,
        )

    bayes = None
    if "bayes" in methods:
        bayes = bayesian_theta(obs, prior, sampler, backend=backend)
        logger.info(
            "%s: posterior mean=%.4g interval=%s",
            name,
            bayes.mean,
            format_interval(bayes.interval),
        )

    return BalanceResult(
        name=name,
        fit=fit,
        prior=prior,
        delta=delta,
        bootstrap=boot,
        bayes=bayes,
        observations=obs,
    )


@dataclass(frozen=True)
class BalancePipeline:
    """One response column + one prior; ``run(table)`` does the rest."""

    name: str
    response: str
    prior: PriorSpec
    predictor: str = NDFA
    alpha: float = 0.05
    bootstrap: BootstrapOptions = BootstrapOptions()
    sampler: SamplerOptions = SamplerOptions()
    backend: str = "pymc"
    methods: Tuple[str, ...] = METHODS

    def observations(self, table: Any) -> Observations:
        return Observations.from_table(table, y=self.response, x=self.predictor, label=self.name)

    def run(self, table: Any) -> BalanceResult:
        return run_balance(
            self.observations(table),
            self.prior,
            name=self.name,
            alpha=self.alpha,
            bootstrap=self.bootstrap,
            sampler=self.sampler,
            backend=self.backend,
            methods=self.methods,
        )


def analyse_balances(
    table: Any,
    priors: Mapping[str, PriorSpec],
    *,
    parallel: bool = False,
    **kwargs: Any,
) -> Dict[str, BalanceResult]:
    """Run one pipeline per entry of ``priors`` (keys "partial" and/or "total").

    Extra keyword arguments become BalancePipeline fields. With
    ``parallel=True`` the pipelines run in a thread pool; they share no
    mutable state.
    """
    pipelines = []
    for name, prior in priors.items():
        try:
            column = BALANCE_COLUMNS[name]
        except KeyError as e:
            raise ValueError(
                f"Unknown balance {name!r}. Available: {tuple(BALANCE_COLUMNS.keys())}"
            ) from e
        pipelines.append(BalancePipeline(name=name, response=column, prior=prior, **kwargs))

    if not parallel or len(pipelines) < 2:
        return {p.name: p.run(table) for p in pipelines}

    with ThreadPoolExecutor(max_workers=len(pipelines)) as pool:
        futures = {p.name: pool.submit(p.run, table) for p in pipelines}
        return {name: fut.result() for name, fut in futures.items()}
