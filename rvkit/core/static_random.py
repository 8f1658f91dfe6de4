"""
Process-wide random number source.

Every random variable in this library draws from the single generator
held by this module, so seeding it once makes a whole simulation
reproducible. The generator is a numpy.random.Generator; calls are
serialized with a lock because parallel streams drive random variables
from several worker threads.

Two quality levels are available. The default uses the PCG64 bit
generator. maximize_quality() switches to PCG64DXSM seeded from the
operating system's entropy pool; minimize_quality() switches back to the
previous generator without losing its state.
"""

import logging
import math
import secrets
import threading
from typing import Optional

import numpy as np

from rvkit.core.random_variable import RandomVariable
from rvkit.utils.constants import (
    INT_MAX,
    INT_MIN,
    LONG_MAX,
    LONG_MIN,
    MAX_LAMBDA_INT,
    MAX_LAMBDA_LONG,
    POISSON_GAUSSIAN_LIMIT,
)

logger = logging.getLogger(__name__)

_lock = threading.RLock()
_generator: np.random.Generator = np.random.default_rng()
_saved: Optional[np.random.Generator] = None
_high_quality = False


def is_high_quality() -> bool:
    """Return True if the high-quality generator is in use."""
    return _high_quality


def maximize_quality() -> None:
    """Switch to the high-quality generator."""
    global _generator, _saved, _high_quality
    with _lock:
        if _high_quality:
            return
        if _saved is None:
            seed = np.random.SeedSequence(secrets.randbits(128))
            _saved = np.random.Generator(np.random.PCG64DXSM(seed))
        _generator, _saved = _saved, _generator
        _high_quality = True
    logger.debug("random source switched to high quality")


def minimize_quality() -> None:
    """Switch back to the default generator, if it was replaced."""
    global _generator, _saved, _high_quality
    with _lock:
        if not _high_quality:
            return
        _generator, _saved = _saved, _generator
        _high_quality = False
    logger.debug("random source switched to default quality")


def set_seed(seed: int) -> None:
    """
    Reseed the generator currently in use.

    The bit generator type is kept, so a seeded high-quality generator
    remains a PCG64DXSM generator.

    Args:
        seed: Non-negative integer seed
    """
    global _generator
    with _lock:
        bit_generator = type(_generator.bit_generator)
        _generator = np.random.Generator(bit_generator(seed))
    logger.debug("random source reseeded with %d", seed)


def next_double() -> float:
    """Return a uniformly distributed value in [0.0, 1.0)."""
    with _lock:
        return float(_generator.random())


def next_gaussian() -> float:
    """Return a standard normal deviate."""
    with _lock:
        return float(_generator.standard_normal())


def gaussian_vector(n: int) -> np.ndarray:
    """Return n independent standard normal deviates."""
    with _lock:
        return _generator.standard_normal(n)


def next_boolean() -> bool:
    """Return True or False with equal probability."""
    with _lock:
        return bool(_generator.integers(0, 2))


def next_int(bound: Optional[int] = None) -> int:
    """
    Return a uniformly distributed integer.

    Args:
        bound: If given, the result lies in [0, bound); otherwise it
            spans the full signed 32-bit range

    Raises:
        ValueError: If bound is not positive
    """
    if bound is None:
        with _lock:
            return int(_generator.integers(INT_MIN, INT_MAX, endpoint=True))
    if bound <= 0:
        raise ValueError(f"bound must be positive, got {bound}")
    with _lock:
        return int(_generator.integers(0, bound))


def next_long(bound: Optional[int] = None) -> int:
    """
    Return a uniformly distributed integer in the signed 64-bit range.

    Args:
        bound: If given, the result lies in [0, bound)

    Raises:
        ValueError: If bound is not positive
    """
    if bound is None:
        with _lock:
            return int(_generator.integers(LONG_MIN, LONG_MAX, endpoint=True))
    if bound <= 0:
        raise ValueError(f"bound must be positive, got {bound}")
    with _lock:
        return int(_generator.integers(0, bound, dtype=np.uint64))


def next_double_exp_distr(mean: float, n: int = 1) -> float:
    """
    Return the sum of n exponentially distributed values.

    The sum of n independent exponential deviates with the same mean
    follows a Gamma(n, mean) distribution, which is sampled directly.

    Args:
        mean: Mean of each exponential deviate
        n: Number of deviates summed

    Raises:
        ValueError: If mean is negative or n is not positive
    """
    if mean < 0.0:
        raise ValueError(f"mean must be non-negative, got {mean}")
    if n <= 0:
        raise ValueError(f"n must be positive, got {n}")
    if mean == 0.0:
        return 0.0
    with _lock:
        if n == 1:
            return mean * float(_generator.standard_exponential())
        return float(_generator.gamma(n, mean))


def next_poisson_ia_time(mean: float, n: int = 1) -> int:
    """
    Return the sum of n interarrival times of a Poisson process.

    Interarrival times are exponentially distributed with the given mean
    and rounded to the nearest integer time unit.

    Args:
        mean: Mean interarrival time
        n: Number of interarrival times summed
    """
    return int(round(next_double_exp_distr(mean, n)))


def _poisson(mean: float) -> float:
    if mean < 0.0:
        raise ValueError(f"Poisson mean must be non-negative, got {mean}")
    with _lock:
        if mean > POISSON_GAUSSIAN_LIMIT:
            # numpy's Poisson sampler is limited to about 9.2e18
            value = mean + float(_generator.standard_normal()) * math.sqrt(mean)
            return float(round(max(value, 0.0)))
        return float(_generator.poisson(mean))


def poisson_int(mean: float) -> int:
    """
    Return a Poisson-distributed value in the 32-bit integer range.

    Raises:
        ValueError: If mean is negative or too large for 32-bit results
    """
    if mean > MAX_LAMBDA_INT:
        raise ValueError(f"Poisson mean too large for an int value: {mean}")
    while True:
        value = _poisson(mean)
        if value <= INT_MAX:
            return int(value)


def poisson_long(mean: float) -> int:
    """
    Return a Poisson-distributed value in the 64-bit integer range.

    Raises:
        ValueError: If mean is negative or too large for 64-bit results
    """
    if mean > MAX_LAMBDA_LONG:
        raise ValueError(f"Poisson mean too large for a long value: {mean}")
    while True:
        value = _poisson(mean)
        if value <= LONG_MAX:
            return int(value)


def poisson_double(mean: float) -> float:
    """Return a Poisson-distributed value as a float."""
    return _poisson(mean)


def new_random_variable(cls, *args, **kwargs):
    """
    Create an instance of a random-variable class.

    Args:
        cls: A subclass of RandomVariable
        *args, **kwargs: Constructor arguments

    Returns:
        The new random variable

    Raises:
        ValueError: If cls is not a random-variable class or the
            arguments are invalid for it
    """
    if not (isinstance(cls, type) and issubclass(cls, RandomVariable)):
        raise ValueError(f"{cls!r} is not a random-variable class")
    try:
        return cls(*args, **kwargs)
    except TypeError as e:
        raise ValueError(f"cannot create {cls.__name__}: {e}") from e
