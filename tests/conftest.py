"""Shared fixtures and random sources for the test suite."""

import pytest


class ConstantSource:
    """Random source returning the same value for every draw."""

    def __init__(self, value=0.0):
        self.value = value
        self.calls = []

    def uniform(self, low, high):
        self.calls.append((low, high))
        return self.value


class SequenceSource:
    """Returns queued values first, then the midpoint of each requested range."""

    def __init__(self, values):
        self.values = list(values)
        self.calls = []

    def uniform(self, low, high):
        self.calls.append((low, high))
        if self.values:
            return self.values.pop(0)
        return (low + high) / 2


@pytest.fixture
def zero_source():
    return ConstantSource(0.0)


@pytest.fixture
def corner_source():
    """Corners 1, 2, 3, 4 in draw order, no perturbation afterwards."""
    return SequenceSource([1.0, 2.0, 3.0, 4.0])


class UnitOnlySource:
    """Random source with only a ``random()`` method."""

    def __init__(self, value=0.0):
        self.value = value
        self.calls = 0

    def random(self):
        self.calls += 1
        return self.value
