import numpy as np
import pytest

from ndfa_balance import DivisionByZeroError, delta_method, fit_linear
from ndfa_balance.delta import theta_gradient

uncertainties = pytest.importorskip("uncertainties")


def _fit(n, seed=0, beta0=-60.0, beta1=1.5, sigma=10.0):
    rng = np.random.default_rng(seed)
    x = rng.uniform(0.0, 100.0, size=n)
    y = beta0 + beta1 * x + rng.normal(0.0, sigma, size=n)
    return fit_linear(x, y)


def test_gradient():
    np.testing.assert_allclose(theta_gradient(2.0, 4.0), [-0.25, 0.125])


def test_stderr_matches_linear_error_propagation():
    fit = _fit(30, seed=2)
    est = delta_method(fit)

    b0, b1 = fit.params
    theta_u = -b0 / b1
    assert est.theta == pytest.approx(theta_u.nominal_value)
    assert est.stderr == pytest.approx(theta_u.std_dev, rel=1e-9)


def test_interval_is_symmetric_normal_interval():
    est = delta_method(_fit(50, seed=4), alpha=0.05)
    assert est.z == pytest.approx(1.959964, abs=1e-6)
    assert est.low < est.theta < est.high
    assert est.theta - est.low == pytest.approx(est.high - est.theta)
    assert est.high - est.low == pytest.approx(2.0 * est.z * est.stderr)
    assert est.interval == (est.low, est.high)


def test_wider_interval_for_smaller_alpha():
    fit = _fit(50, seed=5)
    assert delta_method(fit, alpha=0.01).stderr == pytest.approx(delta_method(fit).stderr)
    w99 = np.diff(delta_method(fit, alpha=0.01).interval)[0]
    w95 = np.diff(delta_method(fit, alpha=0.05).interval)[0]
    assert w99 > w95


def test_converges_to_true_theta():
    est = delta_method(_fit(1000, seed=6))
    assert est.theta == pytest.approx(40.0, rel=0.05)


def test_width_scales_as_inverse_sqrt_n():
    w_small = np.diff(delta_method(_fit(400, seed=7)).interval)[0]
    w_large = np.diff(delta_method(_fit(1600, seed=8)).interval)[0]
    assert w_small / w_large == pytest.approx(2.0, rel=0.2)


def test_zero_slope_raises():
    x = np.array([0.0, 1.0, 2.0, 3.0])
    y = np.array([5.0, 5.0, 5.0, 5.0])
    with pytest.raises(DivisionByZeroError):
        delta_method(fit_linear(x, y))


@pytest.mark.parametrize("alpha", [0.0, 1.0, -0.1, 2.0])
def test_invalid_alpha(alpha):
    with pytest.raises(ValueError, match="alpha"):
        delta_method(_fit(10), alpha=alpha)
