"""Exception types raised by random variables."""


class RandomVariableException(Exception):
    """
    A random variable could not be generated or configured.

    Raised when a parameter random variable cannot be cloned and when a
    random variable of random variables cannot install its bounds on a
    newly generated child.
    """


class CloneNotSupportedError(Exception):
    """A random variable does not support duplication."""


class UnsupportedOperationError(Exception):
    """The operation is not defined for this kind of random variable."""
