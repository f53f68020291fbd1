"""NUTS sampling of the reparameterised balance model with PyMC."""

from __future__ import annotations

from typing import Any, Dict, Optional

import numpy as np

from ..inference import FREE_NAMES
from .common import SamplerResult


def _require_pymc():
    try:
        import pymc as pm  # type: ignore
    except ImportError as e:
        raise ImportError(
            "PyMC is required for the 'pymc' backend. Install with: pip install pymc"
        ) from e
    return pm


def build_model(pm: Any, *, x: np.ndarray, y: np.ndarray, prior: Any) -> Any:
    """Return the PyMC model; theta is sampled directly through theta2 ~ Beta."""
    with pm.Model() as model:
        theta2 = pm.Beta("theta2", alpha=prior.theta_a, beta=prior.theta_b)
        beta1 = pm.Gamma("beta1", alpha=prior.slope_shape, beta=prior.slope_rate)
        sigma = pm.Gamma("sigma", alpha=prior.sigma_shape, beta=prior.sigma_rate)

        theta = pm.Deterministic("theta", prior.theta_scale * theta2)
        pm.Deterministic("beta0", -beta1 * theta)

        pm.Normal("y", mu=beta1 * (x - theta), sigma=sigma, observed=y)
    return model


class PyMCSampler:
    name = "pymc"

    def sample(
        self,
        *,
        x: np.ndarray,
        y: np.ndarray,
        prior: Any,
        chains: int,
        iterations: int,
        warmup: int,
        thin: int,
        target_accept: float,
        seed: Optional[int],
        cores: Optional[int],
        options: dict[str, Any],
    ) -> SamplerResult:
        """Run NUTS with ``chains`` chains of ``iterations`` steps each.

        The first ``warmup`` steps of every chain are tuning steps and are
        discarded; every ``thin``-th remaining draw is kept.

        Backend options:
        - sample_kwargs: dict forwarded to pymc.sample (overrides nothing set here)
        - keep_inference_data: store the arviz InferenceData in stats (default: True)
        """
        pm = _require_pymc()

        backend_options = dict(options or {})
        sample_kwargs = dict(backend_options.pop("sample_kwargs", {}) or {})
        keep_idata = bool(backend_options.pop("keep_inference_data", True))
        # Leftover keys are treated as pymc.sample kwargs.
        for k, v in list(backend_options.items()):
            sample_kwargs.setdefault(k, v)

        sample_kwargs.setdefault("progressbar", False)
        sample_kwargs.setdefault("compute_convergence_checks", False)

        model = build_model(pm, x=np.asarray(x, dtype=float), y=np.asarray(y, dtype=float), prior=prior)
        with model:
            idata = pm.sample(
                draws=int(iterations) - int(warmup),
                tune=int(warmup),
                chains=int(chains),
                cores=cores,
                target_accept=float(target_accept),
                random_seed=seed,
                **sample_kwargs,
            )

        posterior = idata.posterior
        samples: Dict[str, np.ndarray] = {
            name: np.asarray(posterior[name].values, dtype=float)[:, :: int(thin)]
            for name in FREE_NAMES
        }

        stats: Dict[str, Any] = {
            "backend": "pymc",
            "free_names": FREE_NAMES,
        }
        sample_stats = getattr(idata, "sample_stats", None)
        if sample_stats is not None and "diverging" in sample_stats:
            stats["divergences"] = int(np.asarray(sample_stats["diverging"].values).sum())
        if keep_idata:
            stats["inference_data"] = idata

        return SamplerResult(samples=samples, stats=stats)
