"""
Holder for a random variable installed by a configuration layer.

Named simulation objects and their factories do not subclass the
random-variable classes. They hold one and reach it through exactly two
operations: set_rv() installs a constructed random variable, and
get_random_variable() returns it so that values, spliterators and
streams can be obtained from it.
"""

from typing import Generic, Iterator, Optional, TypeVar

from rvkit.core.random_variable import RandomVariable, Spliterator

T = TypeVar("T")


class RandomVariableHolder(Generic[T]):
    """Object that delegates value generation to an installed random variable."""

    def __init__(self, rv: Optional[RandomVariable[T]] = None):
        self._rv = rv

    def set_rv(self, rv: RandomVariable[T]) -> None:
        """
        Install the random variable this holder delegates to.

        Raises:
            ValueError: If rv is not a random variable
        """
        if not isinstance(rv, RandomVariable):
            raise ValueError(f"not a random variable: {rv!r}")
        self._rv = rv

    def get_random_variable(self) -> RandomVariable[T]:
        """
        Return the installed random variable.

        Raises:
            ValueError: If no random variable has been installed
        """
        if self._rv is None:
            raise ValueError("no random variable has been installed")
        return self._rv

    def next(self) -> T:
        return self.get_random_variable().next()

    def spliterator(self, size: Optional[int] = None) -> Spliterator[T]:
        return self.get_random_variable().spliterator(size)

    def stream(self, size: Optional[int] = None) -> Iterator[T]:
        return self.get_random_variable().stream(size)

    def parallel_stream(self, size: Optional[int] = None) -> Iterator[T]:
        return self.get_random_variable().parallel_stream(size)


def set_rv(target: RandomVariableHolder[T], rv: RandomVariable[T]) -> None:
    """Install rv into target."""
    target.set_rv(rv)
