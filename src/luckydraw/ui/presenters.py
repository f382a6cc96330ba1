from __future__ import annotations

import asyncio
import math
from collections.abc import Hashable, Sequence

from rich import box
from rich.align import Align
from rich.console import Console, Group
from rich.live import Live
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..analysis.fairness import FairnessReport
from ..core.errors import PresentationTargetUnavailableError
from ..core.ports import DEFAULT_STEP_SECONDS

__all__ = ["RichReelPresenter", "ease_in_out_delays"]


def ease_in_out_delays(frames: int, total_seconds: float) -> list[float]:
    """Split *total_seconds* over *frames* so the reel speeds up then slows down."""

    if frames <= 0:
        return []
    total = max(0.0, total_seconds)
    if frames == 1:
        return [total]
    if total == 0.0:
        return [0.0] * frames
    # Slow frames at both ends, fast in the middle.
    weights = [1.0 / (math.sin(math.pi * (i + 0.5) / frames) + 0.25) for i in range(frames)]
    scale = total / sum(weights)
    return [w * scale for w in weights]


class RichReelPresenter:
    """Console reel rendered with ``rich.live``.

    Implements the presentation port: :meth:`present` animates the sequence
    and returns once the reel rests on the final label.  After :meth:`close`
    the target is gone and :meth:`present` raises
    :class:`PresentationTargetUnavailableError`.
    """

    def __init__(
        self,
        *,
        console: Console | None = None,
        no_color: bool = False,
        step_seconds: float = DEFAULT_STEP_SECONDS,
    ) -> None:
        if console is not None:
            self.console = console
        elif no_color:
            self.console = Console(force_terminal=False, color_system=None)
        else:
            self.console = Console(force_terminal=True, color_system="auto")
        self.step_seconds = max(0.0, step_seconds)
        self._closed = False

    # --- presentation port ---
    async def present(self, sequence: Sequence[Hashable]) -> None:
        self._ensure_target()
        if not sequence:
            return
        labels = [str(label) for label in sequence]
        delays = ease_in_out_delays(len(labels), len(labels) * self.step_seconds)
        with Live(self._frame(labels, 0), console=self.console, auto_refresh=False, transient=True) as live:
            for index, delay in enumerate(delays):
                self._ensure_target()
                live.update(self._frame(labels, index), refresh=True)
                await asyncio.sleep(delay)
        self._ensure_target()
        self.console.print(self._settled_frame(labels[-1]))

    def close(self) -> None:
        self._closed = True

    @property
    def closed(self) -> bool:
        return self._closed

    # --- host output ---
    def start_session(self, candidates: Sequence[Hashable], *, draws: int, remove_winner: bool) -> None:
        policy = "winners leave the pool" if remove_winner else "winners stay in the pool"
        guide = (
            f"[bold]{len(candidates)}[/] eligible • [bold]{draws}[/] draw{'s' if draws != 1 else ''} • {policy}"
        )
        self.console.print(Panel(guide, title="Lucky Draw", border_style="green", expand=False))

    def show_winner(self, draw_no: int, winner: Hashable, remaining: int) -> None:
        self.console.print(f"[bold cyan]Draw {draw_no}[/]: [bold yellow]{winner}[/] [dim]({remaining} remaining)[/]")

    def show_error(self, message: str) -> None:
        self.console.print(f"[red]{message}[/]")

    def summary(self, winners: Sequence[Hashable]) -> None:
        if not winners:
            self.console.print("No winners drawn.")
            return
        table = Table(title="Winners", show_header=True, header_style="bold blue", box=box.SIMPLE_HEAVY)
        table.add_column("#", justify="right", style="cyan", no_wrap=True)
        table.add_column("Winner", style="bold")
        for i, winner in enumerate(winners, 1):
            table.add_row(str(i), str(winner))
        self.console.print(table)

    def show_audit(self, report: FairnessReport) -> None:
        table = Table(title=f"Fairness audit ({report.draws} draws)", show_header=True, header_style="bold blue")
        table.add_column("Candidate")
        table.add_column("Wins", justify="right")
        table.add_column("Share", justify="right")
        for candidate, count in zip(report.candidates, report.counts):
            table.add_row(str(candidate), str(count), f"{100.0 * count / report.draws:.2f}%")
        self.console.print(table)
        verdict = "[green]uniform[/]" if report.passed else "[red]NOT uniform[/]"
        self.console.print(
            f"χ² = {report.chi_squared:.3f} (df {report.degrees_of_freedom}, "
            f"critical {report.critical_value:.3f} at α={report.alpha}) → {verdict}"
        )

    # --- rendering helpers ---
    def _ensure_target(self) -> None:
        if self._closed or getattr(self.console.file, "closed", False):
            raise PresentationTargetUnavailableError("console reel is closed")

    def _frame(self, labels: list[str], index: int) -> Panel:
        before = labels[index - 1] if index > 0 else ""
        after = labels[index + 1] if index + 1 < len(labels) else ""
        body = Group(
            Align.center(Text(before, style="dim")),
            Align.center(Text(labels[index], style="bold magenta")),
            Align.center(Text(after, style="dim")),
        )
        return Panel(body, title="Spinning…", border_style="cyan", width=40)

    def _settled_frame(self, winner: str) -> Panel:
        return Panel(
            Align.center(Text(f"🎉 {winner} 🎉", style="bold yellow")),
            title="Winner",
            border_style="bold yellow",
            width=40,
        )
