"""Draw engine: candidate pool, shuffling, reel sequences and the draw controller."""

from .controller import (
    DEFAULT_PRESENTATION_LENGTH,
    DrawConfig,
    DrawController,
    DrawEvent,
    DrawResult,
    DrawState,
)
from .errors import (
    ConcurrentDrawError,
    EmptyPoolError,
    LuckyDrawError,
    PresentationTargetUnavailableError,
)
from .pool import CandidatePool, clean_labels
from .ports import DEFAULT_STEP_SECONDS, InstantPresenter, PresentationPort, TimedPresenter
from .sequence import build_sequence, sequence_length
from .shuffle import RandomSource, Shuffler, random_pick, seeded_shuffler, shuffle

__all__ = [
    "CandidatePool",
    "ConcurrentDrawError",
    "DEFAULT_PRESENTATION_LENGTH",
    "DEFAULT_STEP_SECONDS",
    "DrawConfig",
    "DrawController",
    "DrawEvent",
    "DrawResult",
    "DrawState",
    "EmptyPoolError",
    "InstantPresenter",
    "LuckyDrawError",
    "PresentationPort",
    "PresentationTargetUnavailableError",
    "RandomSource",
    "Shuffler",
    "TimedPresenter",
    "build_sequence",
    "clean_labels",
    "random_pick",
    "seeded_shuffler",
    "sequence_length",
    "shuffle",
]
