import numpy as np
import pytest

from ndfa_balance import NDFA, PARTIAL_BALANCE, Observations


def test_arrays_are_normalised():
    obs = Observations(x=[1, 2, 3], y=[4, 5, 6])
    assert obs.x.dtype == float
    assert obs.n == len(obs) == 3
    assert obs.x_label == NDFA


def test_length_mismatch():
    with pytest.raises(ValueError, match="same length"):
        Observations(x=[1.0, 2.0, 3.0], y=[1.0, 2.0])


def test_non_finite_rejected():
    with pytest.raises(ValueError, match="rows \\[1\\]"):
        Observations(x=[1.0, np.nan, 3.0], y=[1.0, 2.0, 3.0])


def test_not_1d():
    with pytest.raises(ValueError, match="1D"):
        Observations(x=np.zeros((2, 2)), y=np.zeros((2, 2)))


def test_from_table():
    table = {NDFA: [10.0, 50.0, 90.0], PARTIAL_BALANCE: [-20.0, 0.0, 20.0], "other": [0, 0, 0]}
    obs = Observations.from_table(table, y=PARTIAL_BALANCE)
    np.testing.assert_array_equal(obs.y, [-20.0, 0.0, 20.0])
    assert obs.label == PARTIAL_BALANCE

    with pytest.raises(KeyError, match="TotalNBalance"):
        Observations.from_table(table, y="TotalNBalance")


def test_take_and_labels():
    obs = Observations(x=[1.0, 2.0, 3.0], y=[4.0, 5.0, 6.0], label="a")
    sub = obs.take([2, 2, 0])
    np.testing.assert_array_equal(sub.x, [3.0, 3.0, 1.0])
    np.testing.assert_array_equal(sub.y, [6.0, 6.0, 4.0])
    assert sub.label == "a"
    assert obs.with_labels(label="b").label == "b"
    assert obs.with_labels(y_label="kg/ha").label == "a"
