"""
Gaussian and log-normal random variables.

Values outside a variable's range are handled by rejection sampling:
a draw that fails the range test is discarded and another is made. This
is efficient when the range keeps most of the distribution's mass. A
range the distribution can (almost) never reach makes next() loop
indefinitely.

GaussianRVs generates vectors of correlated Gaussian values from a
covariance matrix.
"""

import math
from typing import Iterator, Optional

import numpy as np

from rvkit.core import static_random
from rvkit.core.ranges import to_double
from rvkit.core.rvrv import DoubleRandomVariableRV, InterarrivalTimeRVRV
from rvkit.core.typed import DoubleRandomVariable, InterarrivalTimeRV


def _check_sdev(sdev: float, name: str = "sdev") -> float:
    sdev = to_double(sdev)
    if not sdev >= 0.0:
        raise ValueError(f"{name} must be non-negative, got {sdev}")
    return sdev


class GaussianRV(DoubleRandomVariable):
    """
    Normally distributed float.

    Args:
        mean: Mean of the distribution
        sdev: Standard deviation (non-negative)

    Raises:
        ValueError: If sdev is negative
    """

    def __init__(self, mean: float, sdev: float):
        super().__init__()
        self._mean = to_double(mean)
        self._sdev = _check_sdev(sdev)

    @property
    def mean(self) -> float:
        return self._mean

    @property
    def sdev(self) -> float:
        return self._sdev

    def next(self, n: int = 1) -> float:
        """
        Generate a value, or the sum of n independent values.

        The sum of n Gaussian values is itself Gaussian with mean n·mean
        and standard deviation √n·sdev, so it is drawn in one step. The
        range test is applied to the per-draw average, sum/n.

        Args:
            n: Number of values summed

        Raises:
            ValueError: If n is not positive
        """
        if n <= 0:
            raise ValueError(f"n must be positive, got {n}")
        mean = self._mean * n
        sdev = self._sdev * math.sqrt(n)
        while True:
            value = mean + sdev * static_random.next_gaussian()
            if not self.range_test_needed() or not self.range_test_failed(value / n):
                return value


class GaussianIATimeRV(InterarrivalTimeRV):
    """
    Interarrival time drawn from a Gaussian distribution.

    Values are rounded to the nearest integer; negative values are
    rejected.

    Args:
        mean: Mean interarrival time
        sdev: Standard deviation (non-negative)
    """

    def __init__(self, mean: float, sdev: float):
        super().__init__()
        self._mean = to_double(mean)
        self._sdev = _check_sdev(sdev)

    @property
    def mean(self) -> float:
        return self._mean

    @property
    def sdev(self) -> float:
        return self._sdev

    def next(self) -> int:
        while True:
            value = int(round(self._mean + self._sdev * static_random.next_gaussian()))
            if not self.range_test_failed(value):
                return value


class LogNormalRV(DoubleRandomVariable):
    """
    Log-normally distributed float.

    A value is exp(mu + sigma·Z) where Z is a standard normal deviate.
    Use get_mu() and get_sigma() to construct a variable from the mean
    and standard deviation of its values instead.

    Args:
        mu: Mean of the value's logarithm
        sigma: Standard deviation of the value's logarithm

    Examples:
        >>> mu = LogNormalRV.get_mu(1.0, 2.0)
        >>> sigma = LogNormalRV.get_sigma(1.0, 2.0)
        >>> rv = LogNormalRV(mu, sigma)
        >>> abs(rv.mean - 1.0) < 1e-12 and abs(rv.sdev - 2.0) < 1e-12
        True
    """

    def __init__(self, mu: float, sigma: float):
        super().__init__()
        self._mu = to_double(mu)
        self._sigma = _check_sdev(sigma, "sigma")

    @staticmethod
    def get_mu(mean: float, sdev: float) -> float:
        """Return mu for a log-normal distribution with the given moments."""
        if mean <= 0.0:
            raise ValueError(f"log-normal mean must be positive, got {mean}")
        sigma2 = math.log1p((sdev * sdev) / (mean * mean))
        return math.log(mean) - sigma2 / 2.0

    @staticmethod
    def get_sigma(mean: float, sdev: float) -> float:
        """Return sigma for a log-normal distribution with the given moments."""
        if mean <= 0.0:
            raise ValueError(f"log-normal mean must be positive, got {mean}")
        return math.sqrt(math.log1p((sdev * sdev) / (mean * mean)))

    @property
    def mu(self) -> float:
        return self._mu

    @property
    def sigma(self) -> float:
        return self._sigma

    @property
    def mean(self) -> float:
        """Mean of the generated values, exp(mu + sigma²/2)."""
        return math.exp(self._mu + self._sigma * self._sigma / 2.0)

    @property
    def sdev(self) -> float:
        """Standard deviation of the generated values."""
        sigma2 = self._sigma * self._sigma
        return math.sqrt(math.expm1(sigma2) * math.exp(2.0 * self._mu + sigma2))

    def log_next(self) -> float:
        """
        Generate the logarithm of a value.

        The exponential is computed only when a range constraint must be
        tested against it.
        """
        while True:
            value = self._mu + self._sigma * static_random.next_gaussian()
            if not self.range_test_needed() or not self.range_test_failed(math.exp(value)):
                return value

    def next(self) -> float:
        while True:
            value = math.exp(self._mu + self._sigma * static_random.next_gaussian())
            if not self.range_test_needed() or not self.range_test_failed(value):
                return value


# ===========================
# Random variables of Gaussian random variables
# ===========================


class _GaussianRVRV:

    _gaussian_class = GaussianRV

    def _init_moments(self, mean_rv: DoubleRandomVariable, sdev_rv: DoubleRandomVariable) -> None:
        self._mean_rv = self._clone_parameter(mean_rv)
        self._sdev_rv = self._clone_parameter(sdev_rv)
        self._sdev_rv.tighten_minimum(0.0, True)
        self._determine_if_ordered(mean_rv, sdev_rv)

    def _do_next(self):
        return self._gaussian_class(self._mean_rv.next(), self._sdev_rv.next())


class GaussianRVRV(_GaussianRVRV, DoubleRandomVariableRV[GaussianRV]):
    """
    RV-of-RV generating GaussianRV instances.

    Args:
        mean_rv: Random variable giving each mean
        sdev_rv: Random variable giving each standard deviation; its
            clone is restricted to non-negative values
    """

    _gaussian_class = GaussianRV

    def __init__(self, mean_rv: DoubleRandomVariable, sdev_rv: DoubleRandomVariable):
        super().__init__()
        self._init_moments(mean_rv, sdev_rv)


class GaussianIATimeRVRV(_GaussianRVRV, InterarrivalTimeRVRV[GaussianIATimeRV]):
    """RV-of-RV generating GaussianIATimeRV instances."""

    _gaussian_class = GaussianIATimeRV

    def __init__(self, mean_rv: DoubleRandomVariable, sdev_rv: DoubleRandomVariable):
        super().__init__()
        self._init_moments(mean_rv, sdev_rv)


class LogNormalRVRV(DoubleRandomVariableRV[LogNormalRV]):
    """
    RV-of-RV generating LogNormalRV instances.

    Args:
        mu_rv: Random variable giving each mu
        sigma_rv: Random variable giving each sigma; its clone is
            restricted to non-negative values
    """

    def __init__(self, mu_rv: DoubleRandomVariable, sigma_rv: DoubleRandomVariable):
        super().__init__()
        self._mu_rv = self._clone_parameter(mu_rv)
        self._sigma_rv = self._clone_parameter(sigma_rv)
        self._sigma_rv.tighten_minimum(0.0, True)
        self._determine_if_ordered(mu_rv, sigma_rv)

    def _do_next(self) -> LogNormalRV:
        return LogNormalRV(self._mu_rv.next(), self._sigma_rv.next())


# ===========================
# Correlated Gaussian vectors
# ===========================


class GaussianRVs:
    """
    Generator of vectors of correlated Gaussian values.

    With L the lower-triangular Cholesky factor of the covariance
    matrix (cov = L·Lᵀ), a vector is means + L·z where z holds
    independent standard normal deviates.

    Args:
        cov: Symmetric positive-definite covariance matrix
        means: Mean of each component
        n: If given, use only the leading n×n block of cov and the
            first n means

    Raises:
        ValueError: If the arguments are inconsistent or cov is not
            positive definite
    """

    def __init__(self, cov, means, n: Optional[int] = None):
        cov = np.asarray(cov, dtype=np.float64)
        means = np.asarray(means, dtype=np.float64)
        if n is None:
            n = len(means)
        if n < 0 or n > len(means):
            raise ValueError(f"invalid dimension {n} for {len(means)} means")
        if cov.ndim != 2 or cov.shape[0] < n or cov.shape[1] < n:
            raise ValueError(f"covariance matrix shape {cov.shape} too small for n={n}")
        cov = cov[:n, :n]
        if not np.allclose(cov, cov.T):
            raise ValueError("covariance matrix is not symmetric")
        try:
            self._factor = np.linalg.cholesky(cov)
        except np.linalg.LinAlgError as e:
            raise ValueError(f"covariance matrix is not positive definite: {e}") from e
        self._means = means[:n].copy()
        self._n = n

    def __len__(self) -> int:
        return self._n

    def next_into(self, values: np.ndarray) -> None:
        """Store the next vector in values, which must hold len(self) floats."""
        z = static_random.gaussian_vector(self._n)
        values[: self._n] = self._means + self._factor @ z

    def next(self) -> np.ndarray:
        values = np.empty(self._n)
        self.next_into(values)
        return values

    def stream(self, size: Optional[int] = None) -> Iterator[np.ndarray]:
        """Iterate over size vectors, or forever if size is None."""
        count = 0
        while size is None or count < size:
            count += 1
            yield self.next()
