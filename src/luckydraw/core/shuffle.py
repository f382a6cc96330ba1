"""Unbiased shuffling helpers shared by the sequence builder and the host.

The shuffle walks a list of remaining indices, picks one uniformly, and swaps
it out of the live range.  Each step draws from ``randrange(n)`` so every
permutation has probability ``1/len(items)!`` provided the RNG is uniform.
"""

from __future__ import annotations

import secrets
from collections.abc import Callable, Sequence
from typing import Protocol, TypeVar

__all__ = ["RandomSource", "Shuffler", "random_pick", "seeded_shuffler", "shuffle"]

T = TypeVar("T")


class RandomSource(Protocol):
    def randrange(self, stop: int) -> int: ...


Shuffler = Callable[[Sequence[T]], list[T]]

_SYSTEM_RNG = secrets.SystemRandom()


def shuffle(items: Sequence[T], rng: RandomSource | None = None) -> list[T]:
    """Return a uniformly random permutation of *items* as a new list."""

    source = rng or _SYSTEM_RNG
    keys = list(range(len(items)))
    result: list[T] = []
    n = len(keys)
    while n > 0:
        i = source.randrange(n)
        key = keys[i]
        result.append(items[key])
        n -= 1
        keys[i], keys[n] = keys[n], key
    return result


def random_pick(items: Sequence[T], rng: RandomSource | None = None) -> T | None:
    if not items:
        return None
    source = rng or _SYSTEM_RNG
    return items[source.randrange(len(items))]


def seeded_shuffler(rng: RandomSource) -> Shuffler:
    """Bind *rng* so callers can inject a reproducible shuffle."""

    def _shuffle(items: Sequence[T]) -> list[T]:
        return shuffle(items, rng)

    return _shuffle
