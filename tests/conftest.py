"""
Pytest configuration and shared fixtures.
"""

import pytest

from rvkit.core import random_variable, static_random


@pytest.fixture(autouse=True)
def seeded_random():
    """Seed the shared random source so every test is reproducible."""
    static_random.minimize_quality()
    static_random.set_seed(12345)
    yield
    static_random.minimize_quality()


@pytest.fixture
def split_depth(monkeypatch):
    """Allow three levels of spliterator splitting regardless of CPU count."""
    monkeypatch.setattr(random_variable, "max_split_depth", lambda: 3)
    return 3


@pytest.fixture
def sample_size():
    """Number of draws used by the statistical tests."""
    return 100000
