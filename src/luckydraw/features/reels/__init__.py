"""Reels feature: host service, schemas, and API router."""

from .router import create_reel_router
from .schemas import DrawOutcome, ReelPayload, WinnerRecord
from .service import ReelConfig, ReelManager

__all__ = [
    "DrawOutcome",
    "ReelConfig",
    "ReelManager",
    "ReelPayload",
    "WinnerRecord",
    "create_reel_router",
]
