"""Random number capability used by physics, paddle AI and the rally controller.

Every random decision in the engine goes through an ``RngSource`` so a
scripted source can replace it in tests.
"""

import itertools
import random
from typing import Iterable, Optional, Protocol


class RngSource(Protocol):
    """Uniform floats in ``[lo, hi)`` and Bernoulli trials."""

    def uniform_float(self, lo: float, hi: float) -> float:
        ...

    def bernoulli(self, p: float) -> bool:
        ...


class RandomSource:
    """RngSource backed by :class:`random.Random`."""

    def __init__(self, seed: Optional[int] = None):
        self._random = random.Random(seed)

    def uniform_float(self, lo: float, hi: float) -> float:
        if hi <= lo:
            return lo
        return lo + (hi - lo) * self._random.random()

    def bernoulli(self, p: float) -> bool:
        return self._random.random() < p


class SequenceSource:
    """Deterministic RngSource cycling through fixed unit draws.

    Each call consumes the next value ``u`` in ``[0, 1)``:
    ``uniform_float`` maps it to ``lo + u * (hi - lo)`` and ``bernoulli``
    returns ``u < p``. ``SequenceSource([0.5])`` always answers mid-range
    and never fires an event with ``p <= 0.5``.
    """

    def __init__(self, values: Iterable[float]):
        values = list(values)
        if not values:
            raise ValueError("SequenceSource needs at least one value")
        for v in values:
            if not 0.0 <= v < 1.0:
                raise ValueError(f"draw {v} is outside [0, 1)")
        self.values = values
        self._cycle = itertools.cycle(values)
        self.calls = 0

    def _next(self) -> float:
        self.calls += 1
        return next(self._cycle)

    def uniform_float(self, lo: float, hi: float) -> float:
        return lo + (hi - lo) * self._next()

    def bernoulli(self, p: float) -> bool:
        return self._next() < p
