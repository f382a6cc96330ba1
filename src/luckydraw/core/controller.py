"""Draw controller: the Idle -> Spinning -> Idle state machine behind a reel.

One controller owns one :class:`~luckydraw.core.pool.CandidatePool` and one
presentation adapter.  A draw builds a padded, shuffled sequence, waits for
the presenter to settle, and takes the winner from the last element of that
sequence.  The winner is never recovered by comparing the pool before and
after the draw; that comparison breaks as soon as removal is off or the pool
holds the same label twice.

Settlements are tagged with the generation that was current when the draw
started.  ``set_candidates``, ``reset`` and ``discard`` bump the generation, so
a settlement that lands after any of them is dropped without touching the
pool, the last winner or the callbacks.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Hashable, Iterable, Sequence
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any

from .errors import ConcurrentDrawError, EmptyPoolError, PresentationTargetUnavailableError
from .pool import CandidatePool
from .ports import PresentationPort
from .sequence import build_sequence
from .shuffle import Shuffler

__all__ = [
    "DEFAULT_PRESENTATION_LENGTH",
    "DrawConfig",
    "DrawController",
    "DrawEvent",
    "DrawResult",
    "DrawState",
]

logger = logging.getLogger(__name__)

DEFAULT_PRESENTATION_LENGTH = 30

Callback = Callable[[], Any]
Listener = Callable[["DrawEvent"], Any]


class DrawState(str, Enum):
    IDLE = "idle"
    SPINNING = "spinning"


@dataclass(frozen=True)
class DrawConfig:
    """Per-controller draw settings.

    ``reserve_continuity_slot`` shortens every reel after the first by one
    item so the animation can start from the label it last settled on.  Hosts
    without positional continuity can turn it off for a constant length.
    """

    presentation_length: int = DEFAULT_PRESENTATION_LENGTH
    remove_winner: bool = True
    reserve_continuity_slot: bool = True

    def __post_init__(self) -> None:
        if isinstance(self.presentation_length, bool) or not isinstance(self.presentation_length, int):
            raise ValueError("presentation_length must be an integer")
        if self.presentation_length < 1:
            raise ValueError("presentation_length must be at least 1")


@dataclass(frozen=True)
class DrawResult:
    sequence: tuple[Hashable, ...]
    winner: Hashable
    generation: int = 0

    @classmethod
    def from_sequence(cls, sequence: Sequence[Hashable], *, generation: int = 0) -> DrawResult:
        if not sequence:
            raise ValueError("draw sequence cannot be empty")
        frozen = tuple(sequence)
        return cls(sequence=frozen, winner=frozen[-1], generation=generation)


@dataclass(frozen=True)
class DrawEvent:
    kind: str
    pool_size: int
    winner: Hashable | None = None
    meta: dict[str, Any] = field(default_factory=dict)


class DrawController:
    """Runs serialized draws against a candidate pool and a presenter."""

    def __init__(
        self,
        presenter: PresentationPort,
        *,
        config: DrawConfig | None = None,
        shuffler: Shuffler | None = None,
        on_spin_start: Callback | None = None,
        on_spin_end: Callback | None = None,
        on_pool_changed: Callback | None = None,
    ) -> None:
        self._presenter = presenter
        self._config = config or DrawConfig()
        self._shuffler = shuffler
        self._on_spin_start = on_spin_start
        self._on_spin_end = on_spin_end
        self._on_pool_changed = on_pool_changed
        self._listeners: list[Listener] = []
        self._pool = CandidatePool()
        self._source: tuple[Hashable, ...] = ()
        self._source_deduplicated = True
        self._state = DrawState.IDLE
        self._generation = 0
        self._prior_draw = False
        self._last_result: DrawResult | None = None
        self._closed = False

    # ------------------------------------------------------------------ accessors
    @property
    def config(self) -> DrawConfig:
        return self._config

    @property
    def state(self) -> DrawState:
        return self._state

    @property
    def is_spinning(self) -> bool:
        return self._state is DrawState.SPINNING

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def prior_draw_occurred(self) -> bool:
        return self._prior_draw

    @property
    def last_result(self) -> DrawResult | None:
        return self._last_result

    @property
    def last_winner(self) -> Hashable | None:
        return self._last_result.winner if self._last_result is not None else None

    def get_candidates(self) -> list[Hashable]:
        return self._pool.snapshot()

    # ------------------------------------------------------------------ mutators
    def set_candidates(self, labels: Iterable[Hashable], *, deduplicate: bool = True) -> None:
        """Replace the pool and forget the previous winner.

        Calling this while a draw is spinning invalidates that draw: its
        settlement is discarded when it arrives.
        """

        self._generation += 1
        self._source = tuple(labels or ())
        self._source_deduplicated = deduplicate
        self._pool.set_candidates(self._source, deduplicate=deduplicate)
        self._prior_draw = False
        self._last_result = None
        logger.debug(
            "candidates replaced",
            extra={"generation": self._generation, "pool_size": len(self._pool), "spinning": self.is_spinning},
        )
        self._notify_pool_changed()

    def set_remove_winner(self, remove_winner: bool) -> None:
        """Takes effect from the next draw; a spinning draw keeps its setting."""

        self._config = replace(self._config, remove_winner=bool(remove_winner))

    def reconfigure(self, **changes: Any) -> DrawConfig:
        if self.is_spinning:
            raise ConcurrentDrawError("cannot reconfigure while a draw is in progress")
        self._config = replace(self._config, **changes)
        return self._config

    def reset(self) -> None:
        """Restore the candidate list last passed to :meth:`set_candidates`."""

        self._generation += 1
        self._pool.set_candidates(self._source, deduplicate=self._source_deduplicated)
        self._prior_draw = False
        self._last_result = None
        self._notify_pool_changed()

    def discard(self) -> None:
        """Detach the controller from its host; pending settlements become no-ops."""

        self._generation += 1
        self._closed = True
        self._listeners.clear()
        logger.debug("controller discarded", extra={"generation": self._generation})

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    # ------------------------------------------------------------------ draw
    async def draw(self) -> bool:
        """Run one draw.

        Returns ``True`` once the winner has been recorded, or ``False`` when
        the settlement turned out to be stale.  Raises
        :class:`ConcurrentDrawError`, :class:`EmptyPoolError`,
        :class:`PresentationTargetUnavailableError`, or whatever the presenter
        raised; in every failure case the pool and the last winner are left
        untouched and the controller is back in ``IDLE``.
        """

        if self._closed:
            raise PresentationTargetUnavailableError("draw controller has been discarded")
        if self.is_spinning:
            logger.warning("draw rejected: already spinning", extra={"generation": self._generation})
            raise ConcurrentDrawError()
        if self._pool.is_empty():
            logger.warning("draw rejected: empty pool", extra={"generation": self._generation})
            raise EmptyPoolError()

        config = self._config
        token = self._generation
        self._state = DrawState.SPINNING
        try:
            self._fire(self._on_spin_start, "spin_start")
            sequence = build_sequence(
                self._pool.snapshot(),
                config.presentation_length,
                self._prior_draw and config.reserve_continuity_slot,
                shuffler=self._shuffler,
            )
            result = DrawResult.from_sequence(sequence, generation=token)
            logger.debug(
                "draw spinning",
                extra={"generation": token, "sequence_length": len(result.sequence)},
            )
            await self._presenter.present(result.sequence)
            if token != self._generation:
                logger.info(
                    "discarding stale settlement",
                    extra={"draw_generation": token, "current_generation": self._generation},
                )
                return False
            self._settle(result, config)
            return True
        finally:
            self._state = DrawState.IDLE

    def _settle(self, result: DrawResult, config: DrawConfig) -> None:
        self._last_result = result
        if config.remove_winner and self._pool.remove_first_matching(result.winner):
            self._notify_pool_changed()
        self._prior_draw = True
        logger.debug(
            "draw settled",
            extra={"generation": result.generation, "winner": result.winner, "pool_size": len(self._pool)},
        )
        self._fire(self._on_spin_end, "spin_end", winner=result.winner)

    # ------------------------------------------------------------------ notifications
    def _notify_pool_changed(self) -> None:
        self._fire(self._on_pool_changed, "pool_changed")

    def _fire(self, callback: Callback | None, kind: str, *, winner: Hashable | None = None) -> None:
        if callback is not None:
            try:
                callback()
            except Exception:
                logger.exception("%s callback failed", kind)
        if not self._listeners:
            return
        event = DrawEvent(kind=kind, pool_size=len(self._pool), winner=winner)
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception("%s listener failed", kind)
