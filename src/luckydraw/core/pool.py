from __future__ import annotations

from collections.abc import Hashable, Iterable, Iterator

__all__ = ["CandidatePool", "clean_labels"]


def clean_labels(labels: Iterable[Hashable], *, deduplicate: bool = True) -> list[Hashable]:
    """Drop falsy labels and, optionally, repeated ones (first seen wins)."""

    cleaned: list[Hashable] = []
    seen: set[Hashable] = set()
    for label in labels or ():
        if not label:
            continue
        if deduplicate:
            if label in seen:
                continue
            seen.add(label)
        cleaned.append(label)
    return cleaned


class CandidatePool:
    """Ordered working list of candidates for one reel.

    The pool is owned by a single :class:`~luckydraw.core.controller.DrawController`
    and only shrinks through :meth:`remove_first_matching` during a draw.
    """

    def __init__(self, labels: Iterable[Hashable] = (), *, deduplicate: bool = True) -> None:
        self._items: list[Hashable] = clean_labels(labels, deduplicate=deduplicate)

    def set_candidates(self, labels: Iterable[Hashable], *, deduplicate: bool = True) -> None:
        self._items = clean_labels(labels, deduplicate=deduplicate)

    def is_empty(self) -> bool:
        return not self._items

    def remove_first_matching(self, label: Hashable) -> bool:
        try:
            self._items.remove(label)
        except ValueError:
            return False
        return True

    def count(self, label: Hashable) -> int:
        return self._items.count(label)

    def snapshot(self) -> list[Hashable]:
        return list(self._items)

    @property
    def candidates(self) -> tuple[Hashable, ...]:
        return tuple(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[Hashable]:
        return iter(tuple(self._items))

    def __contains__(self, label: object) -> bool:
        return label in self._items

    def __repr__(self) -> str:
        return f"CandidatePool({self._items!r})"
