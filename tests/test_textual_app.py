from __future__ import annotations

import asyncio
import random

import pytest

pytest.importorskip("textual")

from textual.widgets import Button, Checkbox

from luckydraw.core.controller import DrawConfig
from luckydraw.core.shuffle import seeded_shuffler
from luckydraw.ui.textual_app import LuckyDrawApp


def _app(candidates) -> LuckyDrawApp:
    return LuckyDrawApp(
        candidates,
        config=DrawConfig(presentation_length=6),
        step_seconds=0.0,
        shuffler=seeded_shuffler(random.Random(3)),
    )


def test_draws_until_pool_is_empty():
    app = _app(["Alice", "Bob"])

    async def scenario() -> None:
        async with app.run_test() as pilot:
            for _ in range(2):
                app.action_draw()
                await app.workers.wait_for_complete()
                await pilot.pause()
            assert sorted(app.winners) == ["Alice", "Bob"]
            assert app.controller is not None
            assert app.controller.get_candidates() == []
            assert app.query_one("#btn-draw", Button).disabled

            # Empty pool: the action is a no-op.
            app.action_draw()
            await app.workers.wait_for_complete()
            assert len(app.winners) == 2

            app.action_reset()
            await pilot.pause()
            assert app.controller.get_candidates() == ["Alice", "Bob"]
            assert app.winners == []
            assert not app.query_one("#btn-draw", Button).disabled

    asyncio.run(scenario())


def test_removal_checkbox_keeps_winners():
    app = _app(["Alice", "Bob", "Carol"])

    async def scenario() -> None:
        async with app.run_test() as pilot:
            app.query_one("#removal", Checkbox).value = False
            await pilot.pause()
            assert app.controller is not None
            assert app.controller.config.remove_winner is False

            app.action_draw()
            await app.workers.wait_for_complete()
            await pilot.pause()
            assert len(app.winners) == 1
            assert len(app.controller.get_candidates()) == 3

    asyncio.run(scenario())
