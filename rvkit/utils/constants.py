"""
Numerical constants and thresholds for random-variable generation.

This module collects the limits that select between sampling algorithms
and the integer ranges the Integer and Long variable families accept.
Changing the binomial thresholds changes which algorithm produces a
given distribution, so they are kept identical to the published values.
"""

# Integer families
INT_MIN = -(2**31)
INT_MAX = 2**31 - 1
LONG_MIN = -(2**63)
LONG_MAX = 2**63 - 1  # Also the size estimate of an unbounded spliterator

# Binomial regime selection
BINOMIAL_TABLE_LIMIT = 61  # n below this uses an exact cumulative table
BINOMIAL_POISSON_MAX_PROB = 0.05  # p <= this (with n >= 20) uses Poisson
BINOMIAL_POISSON_MIN_N = 20
BINOMIAL_POISSON_LARGE_N = 100  # n >= this (with n·p <= 10) uses Poisson
BINOMIAL_POISSON_MAX_MEAN = 10.0

# Poisson samplers: largest mean whose draws still fit the integer family
MAX_LAMBDA_INT = round(INT_MAX - 10.0 * INT_MAX**0.5)
MAX_LAMBDA_LONG = round(LONG_MAX - 10.0 * LONG_MAX**0.5)
POISSON_GAUSSIAN_LIMIT = 1.0e18  # Above this, Poisson draws use N(λ, λ)

# Uniform doubles on a closed interval draw k/2^53 with k in [0, 2^53]
DOUBLE_GRID = 2**53

# Parallel streams
PARALLEL_BATCH = 1024  # Draws per task for unbounded parallel streams

# Diagnostics
SIGNIFICANCE_LEVEL = 0.001  # Goodness-of-fit tests fail below this p-value
MEAN_TOLERANCE_SIGMAS = 4.0  # Allowed distance of a sample mean, in standard errors
VARIANCE_RTOL = 0.05  # Allowed relative error of a sample variance
MIN_EXPECTED_COUNT = 5.0  # Chi-square cells expecting fewer samples are pooled
