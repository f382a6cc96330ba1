"""Environment-driven defaults for reels.

Hosts usually pass explicit values, but the CLI and the web app read their
defaults from the environment so a deployment can tune the reel without code
changes:

``LUCKYDRAW_PRESENTATION_LENGTH``
    Number of items on the reel (default 30).
``LUCKYDRAW_REMOVE_WINNER``
    ``1``/``true``/``yes`` to draw without replacement (default), ``0``/``false``/``no`` to keep winners.
``LUCKYDRAW_STEP_SECONDS``
    Seconds per reel item for time-based presenters (default 0.1).
``LUCKYDRAW_SEED``
    Optional integer seed for reproducible shuffles.

Tests can pin values temporarily with :func:`override`.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Final

from .controller import DEFAULT_PRESENTATION_LENGTH, DrawConfig
from .ports import DEFAULT_STEP_SECONDS

__all__ = ["ENV_PREFIX", "Settings", "load_settings", "override"]

logger = logging.getLogger(__name__)

ENV_PREFIX: Final = "LUCKYDRAW_"

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class Settings:
    presentation_length: int = DEFAULT_PRESENTATION_LENGTH
    remove_winner: bool = True
    step_seconds: float = DEFAULT_STEP_SECONDS
    seed: int | None = None

    def draw_config(self) -> DrawConfig:
        return DrawConfig(presentation_length=self.presentation_length, remove_winner=self.remove_winner)


_OVERRIDE_STACK: list[dict[str, Any]] = []


def _env(name: str, environ: Mapping[str, str]) -> str | None:
    raw = environ.get(ENV_PREFIX + name)
    if raw is None or not raw.strip():
        return None
    return raw.strip()


def _parse_int(name: str, raw: str | None, default: int | None, *, minimum: int | None = None) -> int | None:
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("ignoring invalid %s%s=%r", ENV_PREFIX, name, raw)
        return default
    if minimum is not None and value < minimum:
        logger.warning("ignoring out-of-range %s%s=%r", ENV_PREFIX, name, raw)
        return default
    return value


def _parse_float(name: str, raw: str | None, default: float) -> float:
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("ignoring invalid %s%s=%r", ENV_PREFIX, name, raw)
        return default
    if value < 0.0 or value != value:
        logger.warning("ignoring out-of-range %s%s=%r", ENV_PREFIX, name, raw)
        return default
    return value


def _parse_bool(name: str, raw: str | None, default: bool) -> bool:
    if raw is None:
        return default
    key = raw.lower()
    if key in _TRUTHY:
        return True
    if key in _FALSY:
        return False
    logger.warning("ignoring invalid %s%s=%r", ENV_PREFIX, name, raw)
    return default


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Read settings from *environ* (``os.environ`` by default) plus active overrides."""

    env = os.environ if environ is None else environ
    defaults = Settings()
    values: dict[str, Any] = {
        "presentation_length": _parse_int(
            "PRESENTATION_LENGTH",
            _env("PRESENTATION_LENGTH", env),
            defaults.presentation_length,
            minimum=1,
        ),
        "remove_winner": _parse_bool("REMOVE_WINNER", _env("REMOVE_WINNER", env), defaults.remove_winner),
        "step_seconds": _parse_float("STEP_SECONDS", _env("STEP_SECONDS", env), defaults.step_seconds),
        "seed": _parse_int("SEED", _env("SEED", env), None),
    }
    for layer in _OVERRIDE_STACK:
        values.update(layer)
    return Settings(**values)


@contextmanager
def override(**values: Any):
    """Temporarily pin settings within the context.

    Unknown keys raise ``TypeError`` so typos do not silently pass.
    """

    unknown = set(values) - set(Settings.__dataclass_fields__)
    if unknown:
        raise TypeError(f"unknown settings: {', '.join(sorted(unknown))}")
    _OVERRIDE_STACK.append(dict(values))
    try:
        yield
    finally:
        _OVERRIDE_STACK.pop()
