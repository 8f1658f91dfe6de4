"""
Statistical diagnostics for generated samples.

This module validates the output of random variables:
- Range membership, honoring open and closed bounds
- Sample mean and variance against expected moments
- Chi-square goodness of fit against the exact binomial distribution
- Kolmogorov-Smirnov fit against a continuous uniform distribution
- Structure of binomial cumulative tables
"""

import math
from typing import Optional, Sequence

import numpy as np
from scipy import stats

from rvkit.utils.constants import (
    MEAN_TOLERANCE_SIGMAS,
    MIN_EXPECTED_COUNT,
    SIGNIFICANCE_LEVEL,
    VARIANCE_RTOL,
)
from rvkit.utils.types import SampleCheck


def check_range(
    samples,
    minimum: Optional[float] = None,
    maximum: Optional[float] = None,
    minimum_closed: bool = True,
    maximum_closed: bool = True,
) -> SampleCheck:
    """
    Check that every sample lies within a range.

    Args:
        samples: Generated values
        minimum, maximum: Range ends; None for an unbounded end
        minimum_closed, maximum_closed: Whether each end is included

    Returns:
        SampleCheck with the observed extremes and out-of-range count
    """
    values = np.asarray(samples, dtype=np.float64)
    violations = []
    details = {"count": float(values.size)}

    if values.size == 0:
        return SampleCheck(is_valid=True, violations=violations, details=details)

    details["observed_min"] = float(values.min())
    details["observed_max"] = float(values.max())

    outside = np.zeros(values.size, dtype=bool)
    if minimum is not None:
        outside |= values < minimum if minimum_closed else values <= minimum
    if maximum is not None:
        outside |= values > maximum if maximum_closed else values >= maximum

    n_outside = int(outside.sum())
    details["out_of_range"] = float(n_outside)
    if n_outside:
        low = "[" if minimum_closed else "("
        high = "]" if maximum_closed else ")"
        violations.append(
            f"{n_outside} samples outside {low}{minimum}, {maximum}{high}, "
            f"first offender {values[outside][0]}"
        )

    return SampleCheck(is_valid=not violations, violations=violations, details=details)


def check_moments(
    samples,
    mean: float,
    variance: float,
    sigmas: float = MEAN_TOLERANCE_SIGMAS,
    variance_rtol: float = VARIANCE_RTOL,
) -> SampleCheck:
    """
    Compare the sample mean and variance with expected values.

    The mean passes if it lies within `sigmas` standard errors,
    √(variance/N), of the expected mean. The variance passes if its
    relative error is at most variance_rtol.

    Args:
        samples: Generated values
        mean: Expected mean
        variance: Expected variance
        sigmas: Tolerance for the mean, in standard errors
        variance_rtol: Relative tolerance for the variance

    Returns:
        SampleCheck with the sample moments
    """
    values = np.asarray(samples, dtype=np.float64)
    if values.size < 2:
        raise ValueError(f"at least two samples are needed, got {values.size}")

    sample_mean = float(values.mean())
    sample_var = float(values.var(ddof=1))
    std_error = math.sqrt(variance / values.size)

    violations = []
    details = {
        "sample_mean": sample_mean,
        "expected_mean": mean,
        "sample_variance": sample_var,
        "expected_variance": variance,
        "standard_error": std_error,
    }

    if abs(sample_mean - mean) > sigmas * std_error:
        violations.append(
            f"Sample mean {sample_mean:.6f} differs from {mean:.6f} "
            f"by more than {sigmas} standard errors ({std_error:.6f})"
        )

    if variance == 0.0:
        variance_ok = sample_var == 0.0
    else:
        variance_ok = abs(sample_var - variance) <= variance_rtol * variance
    if not variance_ok:
        violations.append(
            f"Sample variance {sample_var:.6f} differs from {variance:.6f} "
            f"by more than {variance_rtol:.1%}"
        )

    return SampleCheck(is_valid=not violations, violations=violations, details=details)


def check_binomial_fit(
    samples, prob: float, n: int, alpha: float = SIGNIFICANCE_LEVEL
) -> SampleCheck:
    """
    Chi-square test of samples against the exact binomial distribution.

    Cells expecting fewer than MIN_EXPECTED_COUNT samples are pooled into
    one cell so that the chi-square approximation holds.

    Args:
        samples: Generated counts
        prob: Probability of success per trial
        n: Number of trials
        alpha: Significance level; the check fails if the p-value is
            below it

    Returns:
        SampleCheck with the chi-square statistic and p-value
    """
    values = np.asarray(samples)
    violations = []
    details = {"count": float(values.size)}

    if values.size == 0:
        raise ValueError("no samples to test")

    outside = (values < 0) | (values > n)
    if outside.any():
        violations.append(f"{int(outside.sum())} samples outside [0, {n}]")
        return SampleCheck(is_valid=False, violations=violations, details=details)

    observed = np.bincount(values.astype(np.int64), minlength=n + 1).astype(np.float64)
    expected = stats.binom.pmf(np.arange(n + 1), n, prob) * values.size

    large = expected >= MIN_EXPECTED_COUNT
    obs_cells = list(observed[large])
    exp_cells = list(expected[large])
    pooled_obs = observed[~large].sum()
    pooled_exp = expected[~large].sum()
    if pooled_exp > 0.0:
        obs_cells.append(pooled_obs)
        exp_cells.append(pooled_exp)
    elif pooled_obs > 0.0:
        violations.append(f"{int(pooled_obs)} samples have zero probability")
        return SampleCheck(is_valid=False, violations=violations, details=details)

    if len(obs_cells) < 2:
        # A single cell: the distribution is (nearly) a point mass
        details["cells"] = float(len(obs_cells))
        return SampleCheck(is_valid=True, violations=violations, details=details)

    exp_cells = np.asarray(exp_cells)
    exp_cells *= values.size / exp_cells.sum()
    statistic, p_value = stats.chisquare(obs_cells, exp_cells)

    details["cells"] = float(len(obs_cells))
    details["chi_square"] = float(statistic)
    details["p_value"] = float(p_value)

    if p_value < alpha:
        violations.append(
            f"Chi-square {statistic:.3f} with {len(obs_cells) - 1} degrees of freedom "
            f"rejects Binomial(p={prob}, n={n}) (p-value {p_value:.2e} < {alpha})"
        )

    return SampleCheck(is_valid=not violations, violations=violations, details=details)


def check_uniform_fit(
    samples, lower: float, upper: float, alpha: float = SIGNIFICANCE_LEVEL
) -> SampleCheck:
    """
    Kolmogorov-Smirnov test of samples against Uniform(lower, upper).

    Args:
        samples: Generated values
        lower, upper: Interval ends
        alpha: Significance level

    Returns:
        SampleCheck with the KS statistic and p-value
    """
    if not upper > lower:
        raise ValueError(f"upper ({upper}) must exceed lower ({lower})")

    values = np.asarray(samples, dtype=np.float64)
    result = stats.kstest(values, stats.uniform(loc=lower, scale=upper - lower).cdf)

    violations = []
    details = {"ks_statistic": float(result.statistic), "p_value": float(result.pvalue)}
    if result.pvalue < alpha:
        violations.append(
            f"KS statistic {result.statistic:.5f} rejects Uniform({lower}, {upper}) "
            f"(p-value {result.pvalue:.2e} < {alpha})"
        )
    return SampleCheck(is_valid=not violations, violations=violations, details=details)


def check_binomial_table(table: Sequence[float]) -> SampleCheck:
    """
    Validate a binomial cumulative probability table.

    Checks:
    1. The first entry is 0.0
    2. Entries never decrease
    3. The last entry is exactly 1.0

    Returns:
        SampleCheck with the table length and largest decrease
    """
    values = np.asarray(table, dtype=np.float64)
    violations = []
    details = {"length": float(values.size)}

    if values.size < 2:
        violations.append(f"Table has {values.size} entries, at least 2 are required")
        return SampleCheck(is_valid=False, violations=violations, details=details)

    if values[0] != 0.0:
        violations.append(f"First entry is {values[0]}, expected 0.0")

    steps = np.diff(values)
    details["largest_decrease"] = float(max(0.0, -steps.min()))
    decreasing = np.nonzero(steps < 0.0)[0]
    if decreasing.size:
        i = int(decreasing[0])
        violations.append(
            f"Table decreases at index {i + 1}: {values[i]} -> {values[i + 1]}"
        )

    if values[-1] != 1.0:
        violations.append(f"Last entry is {values[-1]!r}, expected 1.0")

    return SampleCheck(is_valid=not violations, violations=violations, details=details)
