"""Failure taxonomy for the draw engine.

Every error is local and recoverable: the host retries ``draw()`` once the
precondition that failed is satisfied again.
"""

from __future__ import annotations

__all__ = [
    "ConcurrentDrawError",
    "EmptyPoolError",
    "LuckyDrawError",
    "PresentationTargetUnavailableError",
]


class LuckyDrawError(Exception):
    code: str = "draw_failed"


class EmptyPoolError(LuckyDrawError):
    """Raised when a draw is requested with no candidates left."""

    code = "empty_pool"

    def __init__(self, message: str = "candidate pool is empty") -> None:
        super().__init__(message)


class ConcurrentDrawError(LuckyDrawError):
    """Raised when a draw is requested while another one is still spinning."""

    code = "concurrent_draw"

    def __init__(self, message: str = "a draw is already in progress") -> None:
        super().__init__(message)


class PresentationTargetUnavailableError(LuckyDrawError):
    """Raised by presenters whose render target is missing or destroyed."""

    code = "presentation_unavailable"

    def __init__(self, message: str = "presentation target is unavailable") -> None:
        super().__init__(message)
