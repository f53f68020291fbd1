import numpy as np
import pytest

from ndfa_balance import backends
from ndfa_balance.backends.common import SamplerResult
from ndfa_balance.inputs import Observations


def simulate_balance(n, *, theta=30.0, beta1=2.0, sigma=5.0, seed=0, x_range=(0.0, 100.0)):
    """Draw observations from y = beta1 * (x - theta) + Normal(0, sigma)."""
    rng = np.random.default_rng(seed)
    x = rng.uniform(*x_range, size=n)
    y = beta1 * (x - theta) + rng.normal(0.0, sigma, size=n)
    return Observations(x=x, y=y, y_label="balance", label="simulated")


class FakeSampler:
    """Returns i.i.d. draws around fixed parameter values (no MCMC)."""

    name = "fake"

    def __init__(self, theta2=0.3, beta1=2.0, sigma=5.0, spread=0.01, chain_offsets=None, divergences=None):
        self.center = {"theta2": theta2, "beta1": beta1, "sigma": sigma}
        self.spread = spread
        self.chain_offsets = chain_offsets
        self.divergences = divergences
        self.calls = []

    def sample(self, *, x, y, prior, chains, iterations, warmup, thin, target_accept, seed, cores, options):
        self.calls.append(dict(chains=chains, iterations=iterations, warmup=warmup, thin=thin, seed=seed))
        rng = np.random.default_rng(seed)
        draws = int(np.ceil((iterations - warmup) / thin))
        samples = {}
        for name, c in self.center.items():
            s = c + self.spread * abs(c) * rng.normal(size=(chains, draws))
            if self.chain_offsets is not None:
                s = s + abs(c) * np.asarray(self.chain_offsets, dtype=float)[:, None]
            samples[name] = s
        stats = {"backend": "fake"}
        if self.divergences is not None:
            stats["divergences"] = self.divergences
        return SamplerResult(samples=samples, stats=stats)


@pytest.fixture
def fake_sampler(monkeypatch):
    sampler = FakeSampler()
    monkeypatch.setitem(backends._SAMPLERS, "fake", sampler)
    return sampler


@pytest.fixture
def simulated():
    return simulate_balance(60, seed=3)


@pytest.fixture
def simulate():
    return simulate_balance


@pytest.fixture
def stuck_sampler(monkeypatch):
    """Chains that never meet: half of them sit far from the others."""
    sampler = FakeSampler(chain_offsets=[0.0, 0.0, 0.5, 0.5])
    monkeypatch.setitem(backends._SAMPLERS, "stuck", sampler)
    return sampler


@pytest.fixture
def divergent_sampler(monkeypatch):
    """Well-mixed draws, but reports divergent transitions."""
    sampler = FakeSampler(divergences=7)
    monkeypatch.setitem(backends._SAMPLERS, "divergent", sampler)
    return sampler
