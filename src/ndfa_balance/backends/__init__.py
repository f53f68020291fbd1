"""Posterior sampler implementations + registry."""

from __future__ import annotations

from typing import Dict

from .common import Sampler, SamplerResult
from .pymc_backend import PyMCSampler
from .ultranest_backend import UltraNestSampler

_SAMPLERS: Dict[str, Sampler] = {
    "pymc": PyMCSampler(),
    "ultranest": UltraNestSampler(),
}


def get_sampler(name: str) -> Sampler:
    """Return a sampler implementation by name."""
    try:
        return _SAMPLERS[name]
    except KeyError as e:
        raise ValueError(
            f"Unknown backend {name!r}. Available: {tuple(_SAMPLERS.keys())}"
        ) from e


AVAILABLE_BACKENDS = tuple(_SAMPLERS.keys())

__all__ = ["AVAILABLE_BACKENDS", "Sampler", "SamplerResult", "get_sampler"]
