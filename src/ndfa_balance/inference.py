from __future__ import annotations

from typing import Any, Callable, Dict, Sequence, Tuple

import numpy as np

from .priors import PriorSpec

# Sampled (free) parameters of the reparameterised model, in cube order.
FREE_NAMES: Tuple[str, ...] = ("theta2", "beta1", "sigma")


def balance_mean(x: Any, beta1: Any, theta: Any) -> np.ndarray:
    """Expected balance beta1 * (x - theta); equals beta0 + beta1 * x with beta0 = -beta1 * theta."""
    return np.asarray(beta1) * (np.asarray(x, dtype=float) - np.asarray(theta))


def build_gaussian_loglike(
    *,
    x: np.ndarray,
    y: np.ndarray,
    prior: PriorSpec,
    vectorized: bool = False,
) -> Callable[[np.ndarray], Any]:
    """
    Gaussian log-likelihood of the reparameterised model in (theta2, beta1, sigma):
      log L = -1/2 Σ ((y - β1 (x - θ)) / σ)^2 - N log σ - (N/2) log(2π),  θ = scale·θ2
    """
    x = np.asarray(x, dtype=float)
    y = np.asarray(y, dtype=float)
    n = float(y.size)
    log_2pi = float(np.log(2.0 * np.pi))
    scale = float(prior.theta_scale)

    def _one(p: np.ndarray) -> float:
        theta2, beta1, sigma = (float(v) for v in p)
        if not sigma > 0:
            return -np.inf
        r = (y - balance_mean(x, beta1, scale * theta2)) / sigma
        return float(-0.5 * np.sum(r**2) - n * np.log(sigma) - 0.5 * n * log_2pi)

    if not vectorized:
        return _one

    def _many(ps: np.ndarray) -> np.ndarray:
        ps = np.asarray(ps, dtype=float)
        if ps.ndim == 1:
            return np.asarray(_one(ps), dtype=float)
        theta = scale * ps[:, 0:1]
        beta1 = ps[:, 1:2]
        sigma = ps[:, 2]
        r = (y[None, :] - beta1 * (x[None, :] - theta)) / sigma[:, None]
        with np.errstate(divide="ignore", invalid="ignore"):
            out = -0.5 * np.sum(r**2, axis=1) - n * np.log(sigma) - 0.5 * n * log_2pi
        return np.where(sigma > 0, out, -np.inf)

    return _many


def _ppf_for(kind: str, args: Sequence[float], name: str) -> Callable[[Any], Any]:
    import scipy.stats

    kind = str(kind).lower()
    if kind == "beta":
        a, b = (float(v) for v in args)
        return scipy.stats.beta(a, b).ppf
    if kind == "gamma":
        shape, rate = (float(v) for v in args)
        return scipy.stats.gamma(shape, scale=1.0 / rate).ppf
    raise NotImplementedError(
        f"Unsupported prior kind {kind!r} for {name!r} (supported: beta, gamma)."
    )


def build_prior_transform(prior: PriorSpec) -> Callable[[np.ndarray], np.ndarray]:
    """
    Build an UltraNest-style prior transform: cube in [0,1]^3 -> (theta2, beta1, sigma).

    Each coordinate is mapped through the quantile function of its prior:
      - theta2: Beta(theta_a, theta_b)
      - beta1:  Gamma(slope_shape, rate=slope_rate)
      - sigma:  Gamma(sigma_shape, rate=sigma_rate)
    """
    kinds: Dict[str, Tuple[str, Tuple[float, ...]]] = prior.as_prior_tuples()
    transforms = [_ppf_for(*kinds[name], name=name) for name in FREE_NAMES]

    def transform(cube: np.ndarray):
        cube = np.asarray(cube, dtype=float)
        if cube.ndim == 1:
            out = np.empty((len(transforms),), dtype=float)
            for j, fn in enumerate(transforms):
                out[j] = float(fn(float(cube[j])))
            return out
        if cube.ndim == 2:
            out = np.empty_like(cube, dtype=float)
            for j, fn in enumerate(transforms):
                out[:, j] = fn(cube[:, j])
            return out
        raise ValueError("cube must have shape (P,) or (N,P).")

    return transform

