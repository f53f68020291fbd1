from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Dict, Tuple

__all__ = [
    "PriorSpec",
    "SLOPE_PRIOR",
    "SIGMA_PRIOR",
    "SPECIES_PRIORS",
    "get_priors",
]

# Gamma(shape, rate) priors shared by every balance type.
SLOPE_PRIOR: Tuple[float, float] = (1.6, 0.8)
SIGMA_PRIOR: Tuple[float, float] = (2.5, 0.05)


@dataclass(frozen=True)
class PriorSpec:
    """Hyperparameters of the reparameterised balance model.

    theta2 = theta / theta_scale ~ Beta(theta_a, theta_b)
    beta1 ~ Gamma(slope_shape, rate=slope_rate)
    sigma ~ Gamma(sigma_shape, rate=sigma_rate)
    """

    name: str
    theta_a: float
    theta_b: float
    slope_shape: float = SLOPE_PRIOR[0]
    slope_rate: float = SLOPE_PRIOR[1]
    sigma_shape: float = SIGMA_PRIOR[0]
    sigma_rate: float = SIGMA_PRIOR[1]
    # Ndfa is expressed in percent, so theta lives on [0, 100].
    theta_scale: float = 100.0

    def __post_init__(self) -> None:
        for attr in (
            "theta_a",
            "theta_b",
            "slope_shape",
            "slope_rate",
            "sigma_shape",
            "sigma_rate",
            "theta_scale",
        ):
            v = float(getattr(self, attr))
            if not v > 0:
                raise ValueError(f"PriorSpec.{attr} must be > 0; got {v!r}.")

    @property
    def theta_prior_mean(self) -> float:
        """Prior mean of theta on the Ndfa scale."""
        return self.theta_scale * self.theta_a / (self.theta_a + self.theta_b)

    def with_theta(self, a: float, b: float) -> "PriorSpec":
        """Return a new PriorSpec with a different Beta(a, b) prior on theta2."""
        return replace(self, theta_a=float(a), theta_b=float(b))

    def as_prior_tuples(self) -> Dict[str, Tuple[str, Tuple[float, ...]]]:
        """Prior kinds + args keyed by sampled parameter name."""
        return {
            "theta2": ("beta", (self.theta_a, self.theta_b)),
            "beta1": ("gamma", (self.slope_shape, self.slope_rate)),
            "sigma": ("gamma", (self.sigma_shape, self.sigma_rate)),
        }


# Illustrative species records: one prior per (species, balance) pair.
SPECIES_PRIORS: Dict[str, Dict[str, PriorSpec]] = {
    "faba_bean": {
        "partial": PriorSpec(name="faba_bean/partial", theta_a=6.0, theta_b=4.0),
        "total": PriorSpec(name="faba_bean/total", theta_a=3.0, theta_b=5.0),
    },
    "pea": {
        "partial": PriorSpec(name="pea/partial", theta_a=5.0, theta_b=5.0),
        "total": PriorSpec(name="pea/total", theta_a=2.5, theta_b=5.0),
    },
}


def get_priors(species: str) -> Dict[str, PriorSpec]:
    """Return the ``{"partial": ..., "total": ...}`` priors for a species."""
    try:
        return SPECIES_PRIORS[species]
    except KeyError as e:
        raise ValueError(
            f"Unknown species {species!r}. Available: {tuple(SPECIES_PRIORS.keys())}"
        ) from e
