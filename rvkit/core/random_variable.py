"""
Base class for random variables and the sequences they generate.

A random variable is a stateful generator: each call to next() returns
a new value. Sequences of values are produced by spliterators, which
can be split so that several threads generate values concurrently, and
by the stream() and parallel_stream() iterators built on them.

A random variable whose sequence depends on the order of the draws
(a deterministic sequence, or a random variable of random variables
with such a parameter) reports the ORDERED characteristic. Spliterators
for these variables never split, since interleaving draws across
threads would corrupt the sequence.
"""

import copy
import logging
import math
import os
from abc import ABC, abstractmethod
from concurrent.futures import FIRST_COMPLETED, ThreadPoolExecutor, as_completed, wait
from typing import Callable, Generic, Iterator, Optional, TypeVar

from rvkit.utils.constants import LONG_MAX, PARALLEL_BATCH
from rvkit.utils.errors import CloneNotSupportedError, UnsupportedOperationError
from rvkit.utils.types import Characteristics

logger = logging.getLogger(__name__)

T = TypeVar("T")

_SIZE_FLAGS = Characteristics.SIZED | Characteristics.SUBSIZED


def max_split_depth() -> int:
    """Number of times a spliterator may be split: log2 of the CPU count."""
    return int(round(math.log2(os.cpu_count() or 1)))


class RandomVariable(ABC, Generic[T]):
    """
    Abstract random variable producing values of type T.

    Subclasses implement next(). Variables with ordered values override
    the bound methods; the defaults raise UnsupportedOperationError.

    Attributes:
        cloneable: False for variables that cannot be duplicated
    """

    cloneable = True

    def set_minimum(self, minimum: Optional[T], closed: bool = True) -> None:
        """Replace the lower bound; None removes it."""
        raise UnsupportedOperationError(
            f"{type(self).__name__} does not support a minimum"
        )

    def _set_required_minimum(self, minimum: Optional[T], closed: bool = True) -> None:
        raise UnsupportedOperationError(
            f"{type(self).__name__} does not support a minimum"
        )

    def tighten_minimum(self, minimum: Optional[T], closed: bool = True) -> None:
        """Raise the lower bound if the new bound is higher."""
        raise UnsupportedOperationError(
            f"{type(self).__name__} does not support a minimum"
        )

    @abstractmethod
    def tighten_minimum_s(self, minimum: str, closed: bool = True) -> None:
        """Tighten the lower bound given as a string."""

    def set_maximum(self, maximum: Optional[T], closed: bool = True) -> None:
        """Replace the upper bound; None removes it."""
        raise UnsupportedOperationError(
            f"{type(self).__name__} does not support a maximum"
        )

    def _set_required_maximum(self, maximum: Optional[T], closed: bool = True) -> None:
        raise UnsupportedOperationError(
            f"{type(self).__name__} does not support a maximum"
        )

    def tighten_maximum(self, maximum: Optional[T], closed: bool = True) -> None:
        """Lower the upper bound if the new bound is lower."""
        raise UnsupportedOperationError(
            f"{type(self).__name__} does not support a maximum"
        )

    @abstractmethod
    def tighten_maximum_s(self, maximum: str, closed: bool = True) -> None:
        """Tighten the upper bound given as a string."""

    @abstractmethod
    def next(self) -> T:
        """Generate the next value."""

    @property
    def minimum(self) -> Optional[T]:
        """The effective lower bound, or None if unbounded."""
        return None

    @property
    def minimum_closed(self) -> Optional[bool]:
        return None

    @property
    def maximum(self) -> Optional[T]:
        """The effective upper bound, or None if unbounded."""
        return None

    @property
    def maximum_closed(self) -> Optional[bool]:
        return None

    def clone(self) -> "RandomVariable[T]":
        """
        Return an independent copy of this random variable.

        Changing the bounds of the copy never affects the original.

        Raises:
            CloneNotSupportedError: If the variable cannot be duplicated
        """
        if not self.cloneable:
            raise CloneNotSupportedError(f"{type(self).__name__} cannot be cloned")
        try:
            return copy.deepcopy(self)
        except (TypeError, copy.Error) as e:
            raise CloneNotSupportedError(
                f"{type(self).__name__} cannot be cloned: {e}"
            ) from e

    def characteristics(self) -> Characteristics:
        """Characteristics of the sequences this variable generates."""
        return Characteristics.IMMUTABLE | Characteristics.NONNULL

    @property
    def ordered(self) -> bool:
        """True if the order of generated values matters."""
        return Characteristics.ORDERED in self.characteristics()

    def spliterator(self, size: Optional[int] = None) -> "Spliterator[T]":
        """
        Return a spliterator over generated values.

        Args:
            size: Number of values to generate; None for an unbounded
                sequence
        """
        if size is not None and size < 0:
            raise ValueError(f"size must be non-negative, got {size}")
        return Spliterator(self, size, max_split_depth())

    def stream(self, size: Optional[int] = None) -> Iterator[T]:
        """Iterate over size generated values, or forever if size is None."""
        return iter(self.spliterator(size))

    def parallel_stream(self, size: Optional[int] = None) -> Iterator[T]:
        """
        Iterate over generated values produced by worker threads.

        The spliterator is split as far as it allows and each part is
        driven by its own thread. Values arrive in completion order. An
        ordered variable does not split, so its values are produced
        sequentially in order.

        Args:
            size: Number of values to generate; None for an unbounded
                sequence
        """
        return _parallel_values(self.spliterator(size), size)

    def __iter__(self) -> Iterator[T]:
        return self.stream()


class Spliterator(Generic[T]):
    """
    Source of generated values that can be partitioned.

    A sized spliterator produces a fixed number of values and reports
    SIZED and SUBSIZED; try_split() hands half of the remaining values to
    a new spliterator. An unbounded spliterator produces values forever
    and estimates its size as LONG_MAX.

    Each spliterator must be driven by one thread at a time.
    """

    def __init__(self, rv: RandomVariable[T], size: Optional[int], max_depth: int):
        self._rv = rv
        self._size = size
        self._count = 0
        self._max_depth = max_depth
        if size is None:
            self._characteristics = rv.characteristics() & ~_SIZE_FLAGS
        else:
            self._characteristics = rv.characteristics() | _SIZE_FLAGS

    def characteristics(self) -> Characteristics:
        return self._characteristics

    def has_characteristics(self, flags: Characteristics) -> bool:
        return (self._characteristics & flags) == flags

    def estimate_size(self) -> int:
        """Number of values remaining, or LONG_MAX if unbounded."""
        if self._size is None:
            return LONG_MAX
        return self._size - self._count

    def try_advance(self, action: Callable[[T], None]) -> bool:
        """
        Generate one value and pass it to action.

        Returns:
            False if a sized spliterator is exhausted, True otherwise
        """
        if self._size is not None:
            if self._count >= self._size:
                return False
            self._count += 1
        action(self._rv.next())
        return True

    def for_each_remaining(self, action: Callable[[T], None]) -> None:
        """Pass every remaining value to action (forever if unbounded)."""
        while self.try_advance(action):
            pass

    def try_split(self) -> Optional["Spliterator[T]"]:
        """
        Split off part of this spliterator's values.

        Returns:
            A new spliterator, or None if this one cannot split: it is
            ORDERED, it reached the split depth limit, or fewer than two
            values remain
        """
        if Characteristics.ORDERED in self._characteristics:
            return None
        if self._max_depth <= 0:
            return None
        if self._size is None:
            self._max_depth -= 1
            return Spliterator(self._rv, None, self._max_depth)
        new_size = (self._size - self._count) // 2
        if new_size <= 0:
            return None
        self._count += new_size
        self._max_depth -= 1
        logger.debug("split off %d of %d values", new_size, self._size)
        return Spliterator(self._rv, new_size, self._max_depth)

    def __iter__(self) -> "Spliterator[T]":
        return self

    def __next__(self) -> T:
        if self._size is not None:
            if self._count >= self._size:
                raise StopIteration
            self._count += 1
        return self._rv.next()


def split_all(spliterator: Spliterator[T]) -> list[Spliterator[T]]:
    """Split a spliterator recursively until no part splits further."""
    parts = [spliterator]
    i = 0
    while i < len(parts):
        part = parts[i].try_split()
        if part is None:
            i += 1
        else:
            parts.append(part)
    return parts


def _drain(spliterator: Spliterator[T]) -> list[T]:
    return list(spliterator)


def _take(spliterator: Spliterator[T], count: int) -> list[T]:
    return [next(spliterator) for _ in range(count)]


def _parallel_values(root: Spliterator[T], size: Optional[int]) -> Iterator[T]:
    parts = split_all(root)
    if len(parts) == 1:
        yield from root
        return
    with ThreadPoolExecutor(max_workers=len(parts)) as pool:
        if size is not None:
            futures = [pool.submit(_drain, part) for part in parts]
            for future in as_completed(futures):
                yield from future.result()
            return
        pending = {pool.submit(_take, part, PARALLEL_BATCH): part for part in parts}
        try:
            while True:
                done, _ = wait(pending, return_when=FIRST_COMPLETED)
                for future in done:
                    part = pending.pop(future)
                    yield from future.result()
                    pending[pool.submit(_take, part, PARALLEL_BATCH)] = part
        finally:
            for future in pending:
                future.cancel()
