from __future__ import annotations

from collections.abc import Sequence
from itertools import islice
from typing import TypeVar

from .errors import EmptyPoolError
from .shuffle import Shuffler, shuffle

__all__ = ["build_sequence", "sequence_length"]

T = TypeVar("T")


def sequence_length(target_length: int, prior_draw_occurred: bool) -> int:
    """Length of the reel for the next draw.

    After the first draw one slot is reserved so the reel continues from the
    previously settled label instead of jumping.  The reel never drops below a
    single slot, since the last slot is the winner.
    """

    if target_length < 1:
        raise ValueError("target_length must be at least 1")
    if prior_draw_occurred:
        return max(1, target_length - 1)
    return target_length


def build_sequence(
    pool: Sequence[T],
    target_length: int,
    prior_draw_occurred: bool,
    *,
    shuffler: Shuffler | None = None,
) -> list[T]:
    """Shuffle *pool* once and pad it by repetition to the reel length.

    Only the final element decides the draw, so repeating labels inside the
    padded reel does not bias the outcome.
    """

    if not pool:
        raise EmptyPoolError()
    length = sequence_length(target_length, prior_draw_occurred)
    shuffled = (shuffler or shuffle)(pool)
    padded = list(shuffled)
    while len(padded) < length:
        padded = padded + padded
    return list(islice(padded, length))
