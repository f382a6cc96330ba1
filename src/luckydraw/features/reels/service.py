from __future__ import annotations

import logging
import random
import secrets
import string
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from datetime import datetime, timezone

from ...core.controller import DrawConfig, DrawController
from ...core.errors import LuckyDrawError
from ...core.pool import clean_labels
from ...core.ports import InstantPresenter, PresentationPort, TimedPresenter
from ...core.settings import Settings
from ...core.shuffle import seeded_shuffler
from .schemas import DrawOutcome, ReelPayload, WinnerRecord

__all__ = [
    "ReelConfig",
    "ReelManager",
    "ReelState",
    "default_presenter",
]

logger = logging.getLogger(__name__)

STALE_DRAW = "stale_draw"


@dataclass(frozen=True)
class ReelConfig:
    """Configuration for a single reel."""

    presentation_length: int = 30
    remove_winner: bool = True
    step_seconds: float = 0.0
    seed: int | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> ReelConfig:
        return cls(
            presentation_length=settings.presentation_length,
            remove_winner=settings.remove_winner,
            step_seconds=settings.step_seconds,
            seed=settings.seed,
        )


PresenterFactory = Callable[[ReelConfig], PresentationPort]


def default_presenter(config: ReelConfig) -> PresentationPort:
    if config.step_seconds > 0:
        return TimedPresenter(config.step_seconds)
    return InstantPresenter()


@dataclass
class ReelState:
    config: ReelConfig
    controller: DrawController
    presenter: PresentationPort
    eligible: int = 0
    winners: list[WinnerRecord] = field(default_factory=list)


class ReelManager:
    """Owns the reels of a host process, one per task or session.

    Draw failures come back as ``DrawOutcome(ok=False, error=...)`` rather
    than exceptions.  Unknown reel ids raise ``KeyError``.
    """

    def __init__(self, presenter_factory: PresenterFactory | None = None) -> None:
        self._reels: dict[str, ReelState] = {}
        self._presenter_factory = presenter_factory or default_presenter

    def create_reel(self, config: ReelConfig, candidates: Iterable[str] = (), *, deduplicate: bool = True) -> str:
        shuffler = seeded_shuffler(random.Random(config.seed)) if config.seed is not None else None
        presenter = self._presenter_factory(config)
        controller = DrawController(
            presenter,
            config=DrawConfig(presentation_length=max(1, config.presentation_length), remove_winner=config.remove_winner),
            shuffler=shuffler,
        )
        reel_id = _rid()
        state = ReelState(config=config, controller=controller, presenter=presenter)
        self._reels[reel_id] = state
        self._apply_candidates(state, candidates, deduplicate=deduplicate)
        logger.debug("reel created", extra={"reel_id": reel_id, "eligible": state.eligible})
        return reel_id

    def set_candidates(self, reel_id: str, candidates: Iterable[str], *, deduplicate: bool = True) -> ReelPayload:
        state = self._require_reel(reel_id)
        self._apply_candidates(state, candidates, deduplicate=deduplicate)
        return _reel_payload(reel_id, state)

    def set_removal(self, reel_id: str, remove_winner: bool) -> ReelPayload:
        state = self._require_reel(reel_id)
        state.controller.set_remove_winner(remove_winner)
        return _reel_payload(reel_id, state)

    async def draw(self, reel_id: str) -> DrawOutcome:
        state = self._require_reel(reel_id)
        try:
            ok = await state.controller.draw()
        except LuckyDrawError as exc:
            logger.warning("draw failed", extra={"reel_id": reel_id, "error": exc.code})
            return DrawOutcome(ok=False, error=exc.code, message=str(exc), reel=_reel_payload(reel_id, state))
        if not ok:
            return DrawOutcome(
                ok=False,
                error=STALE_DRAW,
                message="candidates changed while the reel was spinning",
                reel=_reel_payload(reel_id, state),
            )
        result = state.controller.last_result
        if result is None:
            raise RuntimeError(f"reel '{reel_id}' settled without a draw result")
        state.winners.append(
            WinnerRecord(
                draw_no=len(state.winners) + 1,
                winner=str(result.winner),
                drawn_at=datetime.now(timezone.utc),
            )
        )
        return DrawOutcome(
            ok=True,
            winner=str(result.winner),
            sequence=[str(label) for label in result.sequence],
            reel=_reel_payload(reel_id, state),
        )

    def reset(self, reel_id: str) -> ReelPayload:
        state = self._require_reel(reel_id)
        state.controller.reset()
        state.winners.clear()
        return _reel_payload(reel_id, state)

    def discard(self, reel_id: str) -> None:
        state = self._reels.pop(reel_id, None)
        if state is None:
            raise KeyError(f"reel '{reel_id}' not found")
        state.controller.discard()
        detach = getattr(state.presenter, "detach", None)
        if callable(detach):
            detach()
        logger.debug("reel discarded", extra={"reel_id": reel_id})

    def snapshot(self, reel_id: str) -> ReelPayload:
        return _reel_payload(reel_id, self._require_reel(reel_id))

    def reel_ids(self) -> list[str]:
        return list(self._reels)

    def _apply_candidates(self, state: ReelState, candidates: Iterable[str], *, deduplicate: bool) -> None:
        labels = [str(label).strip() for label in candidates or () if label is not None]
        state.controller.set_candidates(labels, deduplicate=deduplicate)
        state.eligible = len(clean_labels(labels, deduplicate=deduplicate))
        state.winners.clear()

    def _require_reel(self, reel_id: str) -> ReelState:
        state = self._reels.get(reel_id)
        if state is None:
            raise KeyError(f"reel '{reel_id}' not found")
        return state


def _rid(length: int = 10) -> str:
    alphabet = string.ascii_lowercase + string.digits
    return "".join(secrets.choice(alphabet) for _ in range(length))


def _reel_payload(reel_id: str, state: ReelState) -> ReelPayload:
    controller = state.controller
    last = controller.last_winner
    return ReelPayload(
        reel_id=reel_id,
        state=controller.state.value,
        candidates=[str(label) for label in controller.get_candidates()],
        eligible=state.eligible,
        remaining=len(controller.get_candidates()),
        remove_winner=controller.config.remove_winner,
        presentation_length=controller.config.presentation_length,
        last_winner=str(last) if last is not None else None,
        winners=list(state.winners),
    )
