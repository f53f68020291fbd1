"""MCMC convergence diagnostics (rank-normalised split R-hat, bulk ESS)."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Dict, List, Mapping

import numpy as np

RHAT_THRESHOLD = 1.01
MIN_ESS = 400.0


@dataclass(frozen=True)
class Diagnostics:
    rhat: Dict[str, float]
    ess: Dict[str, float]
    rhat_threshold: float = RHAT_THRESHOLD
    min_ess: float = MIN_ESS
    n_chains: int = 0
    n_draws: int = 0
    divergences: int = 0
    problems: List[str] = field(default_factory=list)

    @property
    def converged(self) -> bool:
        return not self.problems

    def summary(self, digits: int = 4) -> str:
        lines = [
            f"Diagnostics(chains={self.n_chains}, draws/chain={self.n_draws}, converged={self.converged})"
        ]
        for name in self.rhat:
            lines.append(
                f"  {name:>8s}: R-hat={self.rhat[name]:.{digits}g}  ESS={self.ess[name]:.{digits}g}"
            )
        lines.extend(f"  ! {p}" for p in self.problems)
        return "\n".join(lines)


def compute_diagnostics(
    samples: Mapping[str, np.ndarray],
    *,
    rhat_threshold: float = RHAT_THRESHOLD,
    min_ess: float = MIN_ESS,
    divergences: int = 0,
) -> Diagnostics:
    """R-hat and ESS for each (chain, draw) array in ``samples``.

    R-hat needs at least two chains; with a single chain it is reported as
    NaN and only the ESS threshold is checked. Any ``divergences`` (divergent
    NUTS transitions after warmup) also count as a problem.
    """
    import arviz as az

    rhat: Dict[str, float] = {}
    ess: Dict[str, float] = {}
    problems: List[str] = []
    n_chains = n_draws = 0

    for name, draws in samples.items():
        ary = np.asarray(draws, dtype=float)
        if ary.ndim != 2:
            raise ValueError(f"samples[{name!r}] must have shape (chain, draw).")
        n_chains, n_draws = ary.shape

        r = float(az.rhat(ary)) if n_chains >= 2 else math.nan
        e = float(az.ess(ary, method="bulk"))
        rhat[name] = r
        ess[name] = e

        if n_chains >= 2 and not (r <= rhat_threshold):
            problems.append(f"R-hat for {name!r} is {r:.4g} (> {rhat_threshold:g})")
        if not (e >= min_ess):
            problems.append(f"ESS for {name!r} is {e:.4g} (< {min_ess:g})")

    divergences = int(divergences)
    if divergences > 0:
        problems.append(f"{divergences} divergent transition(s) after warmup")

    return Diagnostics(
        rhat=rhat,
        ess=ess,
        rhat_threshold=float(rhat_threshold),
        min_ess=float(min_ess),
        n_chains=int(n_chains),
        n_draws=int(n_draws),
        divergences=divergences,
        problems=problems,
    )
