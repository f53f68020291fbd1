import numpy as np
import pytest

from ndfa_balance import (
    BootstrapOptions,
    DegenerateInputError,
    DivisionByZeroError,
    Observations,
    bootstrap_theta,
)


def _fragile():
    # Only one distinct x on one side: about a third of resamples are degenerate.
    return Observations(x=np.array([0.0, 0.0, 0.0, 10.0]), y=np.array([-4.0, -5.0, -6.0, 15.0]))


def test_reproducible_with_fixed_seed(simulated):
    opts = BootstrapOptions(n_resamples=500, seed=79)
    a = bootstrap_theta(simulated, opts)
    b = bootstrap_theta(simulated, opts)

    np.testing.assert_array_equal(a.samples, b.samples)
    assert (a.low, a.median, a.high) == (b.low, b.median, b.high)


def test_seed_changes_distribution(simulated):
    a = bootstrap_theta(simulated, BootstrapOptions(n_resamples=300, seed=1))
    b = bootstrap_theta(simulated, BootstrapOptions(n_resamples=300, seed=2))
    assert not np.array_equal(a.samples, b.samples)


def test_default_options():
    opts = BootstrapOptions()
    assert opts.n_resamples == 10_000
    assert opts.seed == 79
    assert opts.on_failure == "raise"


@pytest.mark.parametrize("seed", range(5))
def test_interval_is_ordered(simulate, seed):
    obs = simulate(12, sigma=20.0, seed=seed)
    est = bootstrap_theta(obs, BootstrapOptions(n_resamples=400, seed=seed))
    assert est.low <= est.median <= est.high
    assert est.theta == est.median
    assert est.samples.shape == (400,)


def test_quantiles_of_samples(simulated):
    est = bootstrap_theta(simulated, BootstrapOptions(n_resamples=1000, alpha=0.1))
    lo, hi = np.quantile(est.samples, [0.05, 0.95])
    assert est.low == pytest.approx(lo)
    assert est.high == pytest.approx(hi)


def test_median_converges_to_true_theta(simulate):
    obs = simulate(1000, theta=40.0, beta1=1.5, sigma=10.0, seed=11)
    est = bootstrap_theta(obs, BootstrapOptions(n_resamples=1000))
    assert est.median == pytest.approx(40.0, rel=0.05)
    assert est.low < 40.0 < est.high


def test_degenerate_resample_aborts_by_default():
    with pytest.raises(DegenerateInputError, match="bootstrap resample"):
        bootstrap_theta(_fragile(), BootstrapOptions(n_resamples=200))


def test_redraw_policy_recovers():
    est = bootstrap_theta(_fragile(), BootstrapOptions(n_resamples=200, on_failure="redraw"))
    assert est.n_redrawn > 0
    assert np.all(np.isfinite(est.samples))
    assert est.low <= est.median <= est.high


def test_redraw_budget_exhausted_raises():
    with pytest.raises(DegenerateInputError):
        bootstrap_theta(
            _fragile(),
            BootstrapOptions(n_resamples=200, on_failure="redraw", max_redraws=0),
        )


@pytest.mark.parametrize(
    "kwargs",
    [
        {"n_resamples": 0},
        {"on_failure": "skip"},
        {"max_redraws": -1},
        {"alpha": 1.5},
    ],
)
def test_invalid_options(kwargs):
    with pytest.raises(ValueError):
        BootstrapOptions(**kwargs)


def test_too_few_observations():
    obs = Observations(x=np.array([1.0, 2.0]), y=np.array([-1.0, 1.0]))
    with pytest.raises(DegenerateInputError, match="at least 3"):
        bootstrap_theta(obs, BootstrapOptions(n_resamples=10, on_failure="redraw"))


def test_flat_large_balance_is_undefined_in_every_resample():
    obs = Observations(x=np.linspace(10.0, 90.0, 8), y=np.full(8, 1000000.3))
    with pytest.raises(DivisionByZeroError, match="bootstrap resample 0"):
        bootstrap_theta(obs, BootstrapOptions(n_resamples=20))
