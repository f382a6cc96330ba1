from __future__ import annotations

import asyncio
from collections.abc import Hashable, Sequence


class RecordingPresenter:
    """Settles immediately and keeps every sequence it was asked to show."""

    def __init__(self) -> None:
        self.sequences: list[list[Hashable]] = []

    async def present(self, sequence: Sequence[Hashable]) -> None:
        self.sequences.append(list(sequence))
        await asyncio.sleep(0)


class GatedPresenter(RecordingPresenter):
    """Holds every draw in the spinning state until ``release`` is set."""

    def __init__(self) -> None:
        super().__init__()
        self.started = asyncio.Event()
        self.release = asyncio.Event()

    async def present(self, sequence: Sequence[Hashable]) -> None:
        self.sequences.append(list(sequence))
        self.started.set()
        await self.release.wait()


class FailingPresenter:
    def __init__(self, exc: BaseException) -> None:
        self.exc = exc
        self.calls = 0

    async def present(self, sequence: Sequence[Hashable]) -> None:
        self.calls += 1
        raise self.exc
