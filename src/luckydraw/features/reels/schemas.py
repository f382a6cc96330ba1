from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict

__all__ = [
    "DrawOutcome",
    "ReelPayload",
    "WinnerRecord",
]


class _APIModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class WinnerRecord(_APIModel):
    draw_no: int
    winner: str
    drawn_at: datetime


class ReelPayload(_APIModel):
    reel_id: str
    state: str
    candidates: list[str]
    eligible: int
    remaining: int
    remove_winner: bool
    presentation_length: int
    last_winner: str | None = None
    winners: list[WinnerRecord]


class DrawOutcome(_APIModel):
    ok: bool
    winner: str | None = None
    sequence: list[str] | None = None
    error: str | None = None
    message: str | None = None
    reel: ReelPayload
