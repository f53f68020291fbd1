import logging

import numpy as np
import matplotlib.pyplot as plt

from ndfa_balance import (
    NDFA,
    PARTIAL_BALANCE,
    TOTAL_BALANCE,
    BootstrapOptions,
    SamplerOptions,
    analyse_balances,
    get_priors,
)
from ndfa_balance.log import setup_logger
from ndfa_balance.plotting import plot_balance

setup_logger(level=logging.INFO)

# Any column mapping works (dict, pandas.DataFrame, ...).
rng = np.random.default_rng(2)
ndfa = rng.uniform(15.0, 90.0, size=36)
table = {
    NDFA: ndfa,
    PARTIAL_BALANCE: 1.3 * (ndfa - 58.0) + rng.normal(0.0, 10.0, size=ndfa.size),
    TOTAL_BALANCE: 1.1 * (ndfa - 32.0) + rng.normal(0.0, 10.0, size=ndfa.size),
}

results = analyse_balances(
    table,
    get_priors("faba_bean"),
    bootstrap=BootstrapOptions(n_resamples=2000),
    sampler=SamplerOptions(chains=2, iterations=3000, warmup=1500, thin=1, cores=1),
)

for res in results.values():
    print(res.summary())

fig, axs = plt.subplots(1, 2, figsize=(10, 4))
for ax, res in zip(axs, results.values()):
    plot_balance(res, ax=ax)
fig.tight_layout()
plt.show()
