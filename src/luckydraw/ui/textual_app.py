from __future__ import annotations

import asyncio
from collections.abc import Hashable, Sequence

from textual.app import App, ComposeResult
from textual.containers import Container, Horizontal
from textual.widgets import Button, Checkbox, Footer, Header, Label, Static

from ..core.controller import DrawConfig, DrawController
from ..core.errors import LuckyDrawError, PresentationTargetUnavailableError
from ..core.ports import DEFAULT_STEP_SECONDS
from ..core.shuffle import Shuffler
from .presenters import ease_in_out_delays

__all__ = ["LuckyDrawApp", "TextualReelPresenter"]

_CSS = """
    Screen {
        layout: vertical;
        background: #f4f6fb;
        color: #1b233d;
    }
    .section {
        padding: 1 2;
        background: #ffffff;
        border: round #d9e2f5;
        margin: 0 0 1 0;
    }
    #counts { color: #6b3fa0; }
    #reel {
        height: 5;
        content-align: center middle;
        text-style: bold;
        background: #fdf4ff;
        border: heavy #f0abfc;
    }
    #winner { text-align: center; width: 100%; }
    #controls { height: auto; }
    #btn-draw { background: #a855f7; color: #ffffff; }
"""


class TextualReelPresenter:
    """Animates a reel inside a mounted ``Static`` widget."""

    def __init__(self, reel: Static, *, step_seconds: float = DEFAULT_STEP_SECONDS) -> None:
        self.reel = reel
        self.step_seconds = max(0.0, step_seconds)

    async def present(self, sequence: Sequence[Hashable]) -> None:
        labels = [str(label) for label in sequence]
        for label, delay in zip(labels, ease_in_out_delays(len(labels), len(labels) * self.step_seconds)):
            self._ensure_target()
            self.reel.update(label)
            await asyncio.sleep(delay)
        self._ensure_target()
        if labels:
            self.reel.update(f"🎉 {labels[-1]} 🎉")

    def _ensure_target(self) -> None:
        if not self.reel.is_attached:
            raise PresentationTargetUnavailableError("reel widget is not mounted")


class LuckyDrawApp(App[None]):
    TITLE = "Lucky Draw"
    SUB_TITLE = "Slot-style random winner picker"
    BINDINGS = [
        ("space", "draw", "Lucky Draw"),
        ("r", "reset", "Reset"),
        ("ctrl+q", "quit", "Quit"),
    ]
    CSS = _CSS

    controller: DrawController | None = None

    def __init__(
        self,
        candidates: Sequence[Hashable],
        *,
        config: DrawConfig | None = None,
        step_seconds: float = DEFAULT_STEP_SECONDS,
        shuffler: Shuffler | None = None,
        deduplicate: bool = True,
    ) -> None:
        super().__init__()
        self._candidates = list(candidates)
        self._config = config or DrawConfig()
        self._step_seconds = step_seconds
        self._shuffler = shuffler
        self._deduplicate = deduplicate
        self._eligible = 0
        self.winners: list[Hashable] = []

    def compose(self) -> ComposeResult:  # type: ignore[override]
        yield Header(show_clock=False)
        with Container(classes="section"):
            yield Label("", id="counts")
            yield Checkbox("Remove winner", value=self._config.remove_winner, id="removal")
            yield Static("", id="reel")
            yield Label("", id="winner")
        with Container(classes="section", id="controls"):
            yield Horizontal(
                Button("🎲 Lucky Draw", id="btn-draw", variant="success"),
                Button("Reset", id="btn-reset", variant="warning"),
            )
        yield Footer()

    def on_mount(self) -> None:  # type: ignore[override]
        self._reel = self.query_one("#reel", Static)
        self._counts = self.query_one("#counts", Label)
        self._winner = self.query_one("#winner", Label)
        self._draw_button = self.query_one("#btn-draw", Button)
        self.controller = DrawController(
            TextualReelPresenter(self._reel, step_seconds=self._step_seconds),
            config=self._config,
            shuffler=self._shuffler,
            on_spin_start=self._on_spin_start,
            on_spin_end=self._on_spin_end,
            on_pool_changed=self._on_pool_changed,
        )
        self.controller.set_candidates(self._candidates, deduplicate=self._deduplicate)
        self._eligible = len(self.controller.get_candidates())
        self._on_pool_changed()

    def on_unmount(self) -> None:
        if self.controller is not None:
            self.controller.discard()

    # --- controller callbacks ---
    def _on_spin_start(self) -> None:
        self._draw_button.disabled = True
        self._winner.update("[dim]Spinning…[/]")

    def _on_spin_end(self) -> None:
        assert self.controller is not None
        winner = self.controller.last_winner
        self.winners.append(winner)
        self._winner.update(f"🏆 [b]WINNER:[/] [b #6b3fa0]{winner}[/]")

    def _on_pool_changed(self) -> None:
        if self.controller is None:
            return
        remaining = len(self.controller.get_candidates())
        self._counts.update(f"🎯 Eligible: {self._eligible} • 🎪 Remaining: {remaining}")
        self._draw_button.disabled = self.controller.is_spinning or remaining == 0

    # --- actions ---
    def action_draw(self) -> None:
        controller = self.controller
        if controller is None or controller.is_spinning or not controller.get_candidates():
            return
        self.run_worker(self._draw(), group="draw")

    def action_reset(self) -> None:
        if self.controller is None or self.controller.is_spinning:
            return
        self.controller.reset()
        self.winners.clear()
        self._reel.update("")
        self._winner.update("")

    async def _draw(self) -> None:
        assert self.controller is not None
        try:
            await self.controller.draw()
        except LuckyDrawError as exc:
            self._winner.update(f"[red]{exc}[/]")
        finally:
            if self._draw_button.is_attached:
                self._draw_button.disabled = not self.controller.get_candidates()

    # --- widget events ---
    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "btn-draw":
            self.action_draw()
        elif event.button.id == "btn-reset":
            self.action_reset()

    def on_checkbox_changed(self, event: Checkbox.Changed) -> None:
        if self.controller is not None and event.checkbox.id == "removal":
            self.controller.set_remove_winner(event.value)
