import numpy as np

from ndfa_balance import (
    BootstrapOptions,
    Observations,
    bootstrap_theta,
    delta_method,
    fit_linear,
)

# Synthetic partial N balance: crosses zero at Ndfa = 55 %.
rng = np.random.default_rng(0)
ndfa = rng.uniform(20.0, 95.0, size=24)
pnb = 1.4 * (ndfa - 55.0) + rng.normal(0.0, 12.0, size=ndfa.size)

obs = Observations(x=ndfa, y=pnb, y_label="PNB (kg N/ha)", label="partial")
fit = fit_linear(obs)
print(fit.summary())

delta = delta_method(fit)
print(f"delta:     theta = {delta.theta:.2f} ± {delta.stderr:.2f}  95% [{delta.low:.2f}, {delta.high:.2f}]")

boot = bootstrap_theta(obs, BootstrapOptions(n_resamples=2000, seed=79))
print(f"bootstrap: median = {boot.median:.2f}  95% [{boot.low:.2f}, {boot.high:.2f}]")
