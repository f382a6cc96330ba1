from __future__ import annotations

import argparse
import asyncio
import logging
import random
import sys
from collections.abc import Hashable, Sequence
from pathlib import Path

from .analysis.fairness import run_fairness_audit
from .core.controller import DrawConfig, DrawController
from .core.errors import LuckyDrawError
from .core.settings import Settings, load_settings
from .core.shuffle import seeded_shuffler
from .ui.presenters import RichReelPresenter


def _add_draw_args(p: argparse.ArgumentParser, settings: Settings) -> None:
    p.add_argument("names", nargs="*", help="Candidate names")
    p.add_argument("--file", type=Path, default=None, help="Read candidate names from a file, one per line")
    p.add_argument("--draws", type=int, default=1, help="Number of winners to draw")
    p.add_argument("--keep", action="store_true", help="Keep winners in the pool (draw with replacement)")
    p.add_argument(
        "--length",
        type=int,
        default=settings.presentation_length,
        metavar="ITEMS",
        help="Number of items on the reel",
    )
    p.add_argument(
        "--step",
        type=float,
        default=settings.step_seconds,
        metavar="SECONDS",
        help="Seconds per reel item (0 disables the animation delay)",
    )
    # If omitted, draws with system randomness. Pass an int to reproduce.
    p.add_argument("--seed", type=int, default=settings.seed, help="RNG seed (system randomness if omitted)")
    p.add_argument("--allow-duplicates", action="store_true", help="Keep repeated names as separate entries")
    p.add_argument("--no-color", action="store_true", help="Disable colored output (default is colored)")
    p.add_argument("--audit", type=int, default=None, metavar="DRAWS", help="Run a fairness audit instead of drawing")
    p.add_argument("--tui", action="store_true", help="Open the interactive terminal reel")
    p.add_argument("--verbose", action="store_true", help="Log draw lifecycle events to stderr")


def _read_names(args: argparse.Namespace) -> list[str]:
    names = list(args.names)
    if args.file is not None:
        text = args.file.read_text(encoding="utf-8")
        names.extend(line.strip() for line in text.splitlines())
    return [name for name in names if name]


async def run_draws(
    names: Sequence[Hashable],
    presenter: RichReelPresenter,
    *,
    draws: int,
    config: DrawConfig,
    seed: int | None = None,
    deduplicate: bool = True,
) -> list[Hashable]:
    shuffler = seeded_shuffler(random.Random(seed)) if seed is not None else None
    controller = DrawController(presenter, config=config, shuffler=shuffler)
    controller.set_candidates(names, deduplicate=deduplicate)
    presenter.start_session(controller.get_candidates(), draws=draws, remove_winner=config.remove_winner)

    winners: list[Hashable] = []
    for draw_no in range(1, draws + 1):
        try:
            await controller.draw()
        except LuckyDrawError as exc:
            presenter.show_error(f"Draw {draw_no} failed: {exc}")
            break
        winners.append(controller.last_winner)
        presenter.show_winner(draw_no, controller.last_winner, len(controller.get_candidates()))
    presenter.summary(winners)
    return winners


def main(argv: Sequence[str] | None = None) -> None:
    settings = load_settings()
    parser = argparse.ArgumentParser(prog="luckydraw", description="Slot-style lucky draw (CLI)")
    _add_draw_args(parser, settings)
    args = parser.parse_args(list(sys.argv[1:] if argv is None else argv))

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    names = _read_names(args)
    if not names:
        parser.error("no candidate names given")
    if args.draws < 1:
        parser.error("--draws must be at least 1")
    if args.length < 1:
        parser.error("--length must be at least 1")

    remove_winner = settings.remove_winner and not args.keep
    config = DrawConfig(presentation_length=args.length, remove_winner=remove_winner)

    if args.tui:
        from .ui.textual_app import LuckyDrawApp

        shuffler = seeded_shuffler(random.Random(args.seed)) if args.seed is not None else None
        LuckyDrawApp(
            names,
            config=config,
            step_seconds=args.step,
            shuffler=shuffler,
            deduplicate=not args.allow_duplicates,
        ).run()
        return

    presenter = RichReelPresenter(no_color=args.no_color, step_seconds=args.step)
    if args.audit is not None:
        if args.audit < 1:
            parser.error("--audit must be at least 1")
        if args.allow_duplicates:
            parser.error("--audit expects distinct names; drop --allow-duplicates")
        report = run_fairness_audit(names, args.audit, seed=args.seed, presentation_length=args.length)
        presenter.show_audit(report)
        if not report.passed:
            raise SystemExit(1)
        return

    winners = asyncio.run(
        run_draws(
            names,
            presenter,
            draws=args.draws,
            config=config,
            seed=args.seed,
            deduplicate=not args.allow_duplicates,
        )
    )
    if len(winners) < args.draws:
        raise SystemExit(1)


if __name__ == "__main__":
    main()
