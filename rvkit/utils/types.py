"""
Data types shared across the random-variable library.

This module defines the spliterator characteristic flags, the binomial
sampling regimes, and the result container used by the diagnostics.
"""

from dataclasses import dataclass
from enum import Enum, IntFlag


class Characteristics(IntFlag):
    """
    Properties of a sequence of generated values.

    Attributes:
        ORDERED: Encounter order matters; the sequence must not be split
        SIZED: The number of values is known
        SUBSIZED: Splits of a sized sequence are sized as well
        IMMUTABLE: The source cannot be structurally modified
        NONNULL: No generated value is None
    """
    ORDERED = 0x00000010
    SIZED = 0x00000040
    NONNULL = 0x00000100
    IMMUTABLE = 0x00000400
    SUBSIZED = 0x00004000


class BinomialMode(str, Enum):
    """Algorithm a binomial random variable uses to draw values."""
    TABLE = "table"
    POISSON = "poisson"
    GAUSSIAN = "gaussian"


@dataclass
class SampleCheck:
    """
    Result from a statistical validation of generated samples.

    Attributes:
        is_valid: Whether the samples passed every check
        violations: List of specific failures detected
        details: Dictionary with the computed statistics
    """
    is_valid: bool
    violations: list[str]
    details: dict[str, float]
