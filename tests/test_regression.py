import numpy as np
import pytest

from ndfa_balance import DegenerateInputError, Observations, fit_linear

uncertainties = pytest.importorskip("uncertainties")


def test_noiseless_line_through_origin():
    x = np.array([1.0, 2.0, 3.0, 4.0, 5.0])
    fit = fit_linear(Observations(x=x, y=5.0 * x))

    assert fit.beta0 == pytest.approx(0.0, abs=1e-10)
    assert fit.beta1 == pytest.approx(5.0)
    assert fit.sigma2 == pytest.approx(0.0, abs=1e-18)
    assert fit.n == 5
    assert fit.dof == 3
    assert fit.r2 == pytest.approx(1.0)


def test_accepts_raw_arrays():
    x = np.arange(6, dtype=float)
    y = 2.0 + 0.5 * x
    a = fit_linear(x, y)
    b = fit_linear((x, y))
    assert a.beta0 == pytest.approx(2.0)
    assert b.beta1 == pytest.approx(0.5)


def test_covariance_matches_textbook_formulas():
    rng = np.random.default_rng(0)
    x = rng.uniform(0.0, 100.0, size=40)
    y = -30.0 + 0.8 * x + rng.normal(0.0, 4.0, size=x.size)
    fit = fit_linear(x, y)

    resid = y - (fit.beta0 + fit.beta1 * x)
    mse = np.sum(resid**2) / (x.size - 2)
    ssxx = np.sum((x - x.mean()) ** 2)
    se_b1 = np.sqrt(mse / ssxx)
    se_b0 = np.sqrt(mse * (1.0 / x.size + x.mean() ** 2 / ssxx))

    assert fit.sigma2 == pytest.approx(mse)
    assert fit.stderr[1] == pytest.approx(se_b1)
    assert fit.stderr[0] == pytest.approx(se_b0)
    np.testing.assert_allclose(fit.cov, fit.cov.T)
    assert np.all(np.linalg.eigvalsh(fit.cov) >= 0.0)

    slope, intercept = np.polyfit(x, y, 1)
    assert fit.beta1 == pytest.approx(slope)
    assert fit.beta0 == pytest.approx(intercept)


def test_params_use_covariance():
    rng = np.random.default_rng(1)
    x = np.linspace(0.0, 80.0, 25)
    y = 10.0 - 0.3 * x + rng.normal(0.0, 2.0, size=x.size)
    fit = fit_linear(x, y)

    b0, b1 = fit.params
    cov = np.array(uncertainties.covariance_matrix([b0, b1]), dtype=float)
    np.testing.assert_allclose(cov, fit.cov, rtol=1e-6, atol=1e-12)


def test_too_few_points_raises():
    with pytest.raises(DegenerateInputError, match="at least 3"):
        fit_linear(np.array([1.0, 2.0]), np.array([1.0, 2.0]))


def test_constant_x_raises():
    x = np.full(5, 42.0)
    y = np.arange(5, dtype=float)
    with pytest.raises(DegenerateInputError, match="singular"):
        fit_linear(x, y)


def test_degenerate_is_value_error():
    with pytest.raises(ValueError):
        fit_linear(np.zeros(4), np.arange(4.0))


def test_predict():
    fit = fit_linear(np.arange(5.0), 1.0 + 2.0 * np.arange(5.0))
    np.testing.assert_allclose(fit.predict([10.0, 20.0]), [21.0, 41.0])


def test_flat_response_has_round_off_slope():
    x = np.linspace(10.0, 90.0, 6)
    fit = fit_linear(x, np.full(x.size, 54321.987))

    assert abs(fit.beta1) * np.ptp(x) <= 1e-10 * 54321.987
    assert fit.slope_scale == pytest.approx(54321.987 / 80.0)
