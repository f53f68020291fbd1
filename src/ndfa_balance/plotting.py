from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence, Tuple

import numpy as np

from .util import format_uncertainty

# Matplotlib colour cycle slot per method.
_METHOD_COLORS = {"delta": "C1", "bootstrap": "C2", "bayes": "C3"}


def _require_pyplot():
    try:
        import matplotlib.pyplot as plt
    except ImportError as e:
        raise ImportError(
            "matplotlib is required for plotting. Install with: pip install matplotlib"
        ) from e
    return plt


def plot_balance(
    result: Any,
    *,
    ax: Optional[Any] = None,
    xg: Optional[np.ndarray] = None,
    data_kwargs: Optional[Mapping[str, Any]] = None,
    line_kwargs: Optional[Mapping[str, Any]] = None,
    span_kwargs: Optional[Mapping[str, Any]] = None,
    show_params: bool = True,
    text_kwargs: Optional[Mapping[str, Any]] = None,
) -> Tuple[Any, Any]:
    """Plot balance vs Ndfa with the fitted line and each theta interval.

    Parameters
    ----------
    result : BalanceResult
        Output of ``run_balance`` / ``BalancePipeline.run``; must carry its
        observations.
    ax : matplotlib.axes.Axes, optional
        If None, a new figure/axes is created.
    xg : ndarray, optional
        Grid for the fit line. Defaults to 400 points over the x range,
        widened to include every theta interval.
    data_kwargs, line_kwargs, span_kwargs, text_kwargs : dict, optional
        Styling kwargs for the data points, fit line, interval spans and
        parameter box.
    show_params : bool
        If True, annotate theta estimates on the plot.
    """
    plt = _require_pyplot()

    obs = result.observations
    if obs is None:
        raise ValueError("plot_balance requires a result that carries its observations.")

    if ax is None:
        fig, ax = plt.subplots()
    else:
        fig = ax.figure

    data_kwargs = dict(data_kwargs or {})
    line_kwargs = dict(line_kwargs or {})
    span_kwargs = dict(span_kwargs or {})
    text_kwargs = dict(text_kwargs or {})

    data_kwargs.setdefault("marker", "o")
    data_kwargs.setdefault("linestyle", "none")
    data_kwargs.setdefault("label", obs.label or "data")
    ax.plot(obs.x, obs.y, **data_kwargs)

    estimates = result.estimates
    if xg is None:
        lo = min([float(np.min(obs.x))] + [e.low for e in estimates.values()])
        hi = max([float(np.max(obs.x))] + [e.high for e in estimates.values()])
        xg = np.linspace(lo, hi, 400)

    line_kwargs.setdefault("color", "C0")
    line_kwargs.setdefault("label", "OLS fit")
    ax.plot(xg, result.fit.predict(xg), **line_kwargs)
    ax.axhline(0.0, color="k", lw=0.8, ls=":")

    span_kwargs.setdefault("alpha", 0.15)
    for name, est in estimates.items():
        color = _METHOD_COLORS.get(name, "C4")
        ax.axvspan(est.low, est.high, color=color, **span_kwargs)
        ax.axvline(est.theta, color=color, lw=1.2, label=f"theta ({name})")

    if show_params and estimates:
        lines = []
        for name, est in estimates.items():
            if name == "delta":
                lines.append(f"{name}: {format_uncertainty(est.theta, est.stderr)}")
            else:
                lines.append(f"{name}: {est.theta:.4g} [{est.low:.4g}, {est.high:.4g}]")
        text_kwargs.setdefault("ha", "left")
        text_kwargs.setdefault("va", "top")
        text_kwargs.setdefault("fontsize", 9)
        text_kwargs.setdefault("transform", ax.transAxes)
        text_kwargs.setdefault(
            "bbox",
            {"boxstyle": "round", "facecolor": "white", "alpha": 0.7, "edgecolor": "none"},
        )
        ax.text(0.02, 0.98, "\n".join(lines), **text_kwargs)

    ax.set_xlabel(obs.x_label or "Ndfa")
    ax.set_ylabel(obs.y_label or "N balance")
    ax.set_title(result.name)
    ax.legend(loc="lower right", fontsize=8)
    return fig, ax


def plot_trace(
    estimate: Any,
    *,
    var_names: Sequence[str] = ("theta", "beta1", "sigma"),
    axs: Optional[Any] = None,
    bins: int = 50,
) -> Tuple[Any, Any]:
    """Per-chain trace (left) and marginal histogram (right) for each variable."""
    plt = _require_pyplot()

    var_names = list(var_names)
    if axs is None:
        fig, axs = plt.subplots(
            len(var_names), 2, figsize=(9, 2.2 * len(var_names)), squeeze=False
        )
    else:
        axs = np.asarray(axs).reshape(len(var_names), 2)
        fig = axs[0, 0].figure

    for row, name in enumerate(var_names):
        draws = np.asarray(estimate.samples[name])
        ax_t, ax_h = axs[row, 0], axs[row, 1]
        for c in range(draws.shape[0]):
            ax_t.plot(draws[c], lw=0.5, alpha=0.8, label=f"chain {c}")
            ax_h.hist(draws[c], bins=bins, histtype="step", density=True)
        ax_t.set_ylabel(name)
        rhat = estimate.diagnostics.rhat.get(name)
        ess = estimate.diagnostics.ess.get(name)
        if rhat is not None:
            ax_h.set_title(f"R-hat={rhat:.3f}  ESS={ess:.0f}", fontsize=9)
    axs[-1, 0].set_xlabel("draw")
    return fig, axs
