"""Random source for the ``random`` pseudo-condition.

A condition named ``random`` never reads the caller's mapping: each time
it is tested it draws a fresh integer in [0, 100). Draws are only
replayable when the source is seeded, either through ``seed()`` on the
shared default or by passing an explicit source to ``ConditionSet.test``.
"""

from __future__ import annotations

import random
from typing import Protocol, runtime_checkable


@runtime_checkable
class RandomSource(Protocol):
    """Anything that can produce a uniform integer in [0, upper)."""

    def int(self, upper: int) -> int: ...


class StdRandom:
    """RandomSource backed by the standard library's Mersenne Twister."""

    def __init__(self, seed: int | None = None) -> None:
        self._rng = random.Random(seed)

    def int(self, upper: int) -> int:
        return self._rng.randrange(upper)  # noqa: S311

    def seed(self, value: int | None) -> None:
        self._rng.seed(value)


_default = StdRandom()


def default_source() -> StdRandom:
    """The shared source used when ``test`` is not given one."""
    return _default


def seed(value: int | None) -> None:
    """Reseed the shared source. ``None`` reseeds from system entropy."""
    _default.seed(value)
