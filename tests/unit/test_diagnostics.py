"""Unit tests for sample diagnostics."""

import numpy as np
import pytest
from rvkit.diagnostics.goodness_of_fit import (
    check_binomial_fit,
    check_binomial_table,
    check_moments,
    check_range,
    check_uniform_fit,
)
from rvkit.distributions.binomial import BinomialIntegerRV
from rvkit.distributions.gaussian import GaussianRV


# ===========================
# Range Check Tests
# ===========================


def test_range_valid():
    result = check_range([0.0, 0.5, 1.0], 0.0, 1.0)
    assert result.is_valid
    assert result.details["observed_max"] == 1.0


def test_range_open_ends():
    result = check_range([0.0, 0.5, 1.0], 0.0, 1.0, minimum_closed=False, maximum_closed=False)
    assert not result.is_valid
    assert result.details["out_of_range"] == 2.0


def test_range_unbounded_end():
    assert check_range([-1e9, 3.0], maximum=3.0).is_valid


def test_range_empty_samples():
    assert check_range([], 0.0, 1.0).is_valid


# ===========================
# Moment Check Tests
# ===========================


def test_moments_detect_shifted_mean():
    values = GaussianRV(0.2, 1.0).to_array(20000)
    result = check_moments(values, 0.0, 1.0)
    assert not result.is_valid
    assert "mean" in result.violations[0]


def test_moments_detect_wrong_variance():
    values = GaussianRV(0.0, 1.5).to_array(20000)
    result = check_moments(values, 0.0, 1.0)
    assert not result.is_valid


def test_moments_zero_variance():
    assert check_moments([2.0, 2.0, 2.0], 2.0, 0.0).is_valid


def test_moments_need_two_samples():
    with pytest.raises(ValueError):
        check_moments([1.0], 1.0, 1.0)


# ===========================
# Goodness-of-Fit Tests
# ===========================


def test_binomial_fit_detects_wrong_probability():
    values = BinomialIntegerRV(0.55, 20).to_array(20000)
    result = check_binomial_fit(values, 0.5, 20)
    assert not result.is_valid
    assert result.details["p_value"] < 0.001


def test_binomial_fit_rejects_out_of_range_values():
    result = check_binomial_fit(np.array([0, 3, 11]), 0.5, 10)
    assert not result.is_valid
    assert "outside" in result.violations[0]


def test_binomial_fit_point_mass():
    result = check_binomial_fit(np.zeros(100, dtype=int), 0.0, 10)
    assert result.is_valid


def test_uniform_fit_detects_gaussian_samples():
    values = GaussianRV(0.5, 0.15).to_array(5000)
    assert not check_uniform_fit(values, 0.0, 1.0).is_valid


def test_uniform_fit_requires_interval():
    with pytest.raises(ValueError):
        check_uniform_fit([0.5], 1.0, 1.0)


# ===========================
# Table Check Tests
# ===========================


def test_table_check_detects_decrease():
    result = check_binomial_table([0.0, 0.5, 0.4, 1.0])
    assert not result.is_valid
    assert "decreases at index 2" in result.violations[0]


def test_table_check_detects_bad_ends():
    result = check_binomial_table([0.1, 0.5, 0.999])
    assert len(result.violations) == 2


def test_table_check_too_short():
    assert not check_binomial_table([1.0]).is_valid
