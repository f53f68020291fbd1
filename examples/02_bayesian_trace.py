import numpy as np
import matplotlib.pyplot as plt

from ndfa_balance import Observations, PriorSpec, SamplerOptions, bayesian_theta
from ndfa_balance.plotting import plot_trace

rng = np.random.default_rng(1)
ndfa = rng.uniform(0.0, 100.0, size=50)
balance = 2.0 * (ndfa - 30.0) + rng.normal(0.0, 5.0, size=ndfa.size)
obs = Observations(x=ndfa, y=balance, label="simulated")

prior = PriorSpec(name="demo", theta_a=2.0, theta_b=4.0)
opts = SamplerOptions(chains=2, iterations=2000, warmup=1000, thin=1, cores=1)

est = bayesian_theta(obs, prior, opts)
print(f"posterior mean theta = {est.mean:.2f}, 95% [{est.low:.2f}, {est.high:.2f}]")
print(est.diagnostics.summary())

fig, axs = plot_trace(est)
fig.tight_layout()
plt.show()
