from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Protocol

import numpy as np


@dataclass(frozen=True)
class SamplerResult:
    """Normalized result returned by any posterior sampler backend."""

    # free parameter name -> draws, shape (chain, draw)
    samples: Dict[str, np.ndarray]
    stats: Dict[str, Any] = field(default_factory=dict)

    @property
    def n_chains(self) -> int:
        first = next(iter(self.samples.values()))
        return int(first.shape[0])

    @property
    def n_draws(self) -> int:
        first = next(iter(self.samples.values()))
        return int(first.shape[1])


class Sampler(Protocol):
    """Sampler protocol: draw from the reparameterised balance posterior."""

    name: str

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
    ) -> SamplerResult: ...
