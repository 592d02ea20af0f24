"""
Random source utilities.

Generation code never calls a module-level PRNG. Callers hand a random
source to the generator explicitly. Two kinds of source work:

* anything with a ``uniform(low, high)`` method, such as ``random.Random``,
  ``numpy.random.Generator`` or ``AleaPRNG``;
* anything with a ``random()`` method returning floats in [0, 1).

Use an ``AleaPRNG`` with a fixed seed when the output has to be
reproducible.
"""

import uuid
from typing import TYPE_CHECKING, Optional, Protocol, Union, runtime_checkable

if TYPE_CHECKING:
    from ..core.alea_prng import AleaPRNG, Seed


@runtime_checkable
class UniformSource(Protocol):
    """Anything drawing uniformly distributed floats from [low, high)."""

    def uniform(self, low: float, high: float) -> float:
        ...


@runtime_checkable
class UnitSource(Protocol):
    """Anything producing uniformly distributed floats in [0, 1)."""

    def random(self) -> float:
        ...


RandomSource = Union[UniformSource, UnitSource]


def is_random_source(source) -> bool:
    return isinstance(source, (UniformSource, UnitSource))


def uniform(source: RandomSource, low: float, high: float) -> float:
    """
    Draw a value from [low, high) using ``source``.

    Sources with their own ``uniform`` method are asked directly; otherwise
    a unit draw from ``random()`` is scaled onto the range.

    Raises:
        TypeError: If ``source`` has neither method
    """
    if isinstance(source, UniformSource):
        return source.uniform(low, high)
    if isinstance(source, UnitSource):
        return low + source.random() * (high - low)
    raise TypeError(
        f"{type(source).__name__} is not a random source: "
        "expected a uniform(low, high) or random() method"
    )


def create_random_source(seed: Optional["Seed"] = None) -> "AleaPRNG":
    """
    Create a new random source.

    Args:
        seed: Seed for reproducible output. When None a random seed is
            drawn, so every call yields an independent sequence.

    Returns:
        A fresh AleaPRNG instance
    """
    from ..core.alea_prng import AleaPRNG

    if seed is None:
        seed = uuid.uuid4().hex
    return AleaPRNG(seed)
