"""Presentation adapters the draw controller awaits.

The controller never knows what a reel looks like.  It hands the generated
sequence to a :class:`PresentationPort` and waits for the visual to settle on
the last label.  Hosts supply their own adapter (see :mod:`luckydraw.ui`);
the two adapters here cover headless use: one settles immediately, the other
sleeps for as long as the host animation would run.
"""

from __future__ import annotations

import asyncio
from collections.abc import Hashable, Sequence
from typing import Protocol, runtime_checkable

from .errors import PresentationTargetUnavailableError

__all__ = [
    "DEFAULT_STEP_SECONDS",
    "InstantPresenter",
    "PresentationPort",
    "TimedPresenter",
]

# The host reel advances one item every 100 ms.
DEFAULT_STEP_SECONDS = 0.1


@runtime_checkable
class PresentationPort(Protocol):
    async def present(self, sequence: Sequence[Hashable]) -> None:
        """Render *sequence* and return once it settles on ``sequence[-1]``."""


class _DetachablePresenter:
    def __init__(self) -> None:
        self._attached = True

    @property
    def attached(self) -> bool:
        return self._attached

    def detach(self) -> None:
        self._attached = False

    def _ensure_attached(self) -> None:
        if not self._attached:
            raise PresentationTargetUnavailableError()


class InstantPresenter(_DetachablePresenter):
    """Settles as soon as it is awaited."""

    async def present(self, sequence: Sequence[Hashable]) -> None:
        self._ensure_attached()
        await asyncio.sleep(0)


class TimedPresenter(_DetachablePresenter):
    """Settles after ``len(sequence) * step_seconds`` without rendering anything."""

    def __init__(self, step_seconds: float = DEFAULT_STEP_SECONDS) -> None:
        super().__init__()
        if step_seconds < 0:
            raise ValueError("step_seconds must be non-negative")
        self.step_seconds = step_seconds

    def duration_for(self, sequence: Sequence[Hashable]) -> float:
        return len(sequence) * self.step_seconds

    async def present(self, sequence: Sequence[Hashable]) -> None:
        self._ensure_attached()
        await asyncio.sleep(self.duration_for(sequence))
        self._ensure_attached()
