from typing import Any, Dict, Optional
import tempfile

import numpy as np

from ..inference import FREE_NAMES, build_gaussian_loglike, build_prior_transform
from .common import SamplerResult


class UltraNestSampler:
    """Nested sampling of the same posterior via a unit-cube prior transform.

    The equally-weighted posterior samples are reported as a single chain;
    chains/iterations/warmup/thin/target_accept have no meaning here.
    """

    name = "ultranest"

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
        # backend_options keys understood by this sampler; the rest go to run().
        backend_options = dict(options or {})
        vectorized = bool(backend_options.pop("vectorized", True))
        log_dir = backend_options.pop("log_dir", None)
        resume = backend_options.pop("resume", "overwrite")
        sampler_kwargs = dict(backend_options.pop("sampler_kwargs", {}) or {})
        run_kwargs = dict(backend_options.pop("run_kwargs", {}) or {})

        for k, v in list(backend_options.items()):
            run_kwargs.setdefault(k, v)

        sampler_kwargs.setdefault("vectorized", vectorized)
        run_kwargs.setdefault("show_status", False)
        run_kwargs.setdefault("viz_callback", False)

        transform = build_prior_transform(prior)
        loglike = build_gaussian_loglike(x=x, y=y, prior=prior, vectorized=vectorized)

        try:
            import ultranest  # local import (optional dependency)
        except ImportError as e:
            raise ImportError(
                "UltraNest is required for the 'ultranest' backend. "
                "Install with: pip install ultranest"
            ) from e

        if seed is not None:
            # UltraNest draws from the global numpy stream.
            np.random.seed(int(seed))

        temp_dir = None
        if log_dir is None:
            temp_dir = tempfile.TemporaryDirectory(prefix="ultranest_")
            log_dir = temp_dir.name

        try:
            sampler = ultranest.ReactiveNestedSampler(
                list(FREE_NAMES),
                loglike,
                transform=transform,
                log_dir=log_dir,
                resume=resume,
                **sampler_kwargs,
            )
            result = sampler.run(**run_kwargs)
        finally:
            if temp_dir is not None:
                temp_dir.cleanup()

        draws = np.asarray(result.get("samples", []), dtype=float)
        if draws.ndim != 2 or draws.shape[1] != len(FREE_NAMES) or draws.shape[0] == 0:
            raise RuntimeError("UltraNest returned no posterior samples.")

        samples: Dict[str, np.ndarray] = {
            name: draws[None, :, j] for j, name in enumerate(FREE_NAMES)
        }
        stats: Dict[str, Any] = {
            "backend": "ultranest",
            "free_names": FREE_NAMES,
            "logz": float(result.get("logz", np.nan)),
            "logzerr": float(result.get("logzerr", np.nan)),
            "ultranest_result": result,
        }
        return SamplerResult(samples=samples, stats=stats)
