from __future__ import annotations

from fastapi import APIRouter, HTTPException
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel, Field, model_validator

from ...core.errors import ConcurrentDrawError, EmptyPoolError, PresentationTargetUnavailableError
from ...core.settings import Settings, load_settings
from .schemas import DrawOutcome
from .service import STALE_DRAW, ReelConfig, ReelManager

__all__ = [
    "MAX_PRESENTATION_LENGTH",
    "CandidatesRequest",
    "CreateReelRequest",
    "RemovalRequest",
    "create_reel_router",
]

# Every draw materialises the whole reel and returns it in the response body.
MAX_PRESENTATION_LENGTH = 1_000

_DRAW_STATUS = {
    EmptyPoolError.code: 422,
    ConcurrentDrawError.code: 409,
    STALE_DRAW: 409,
    PresentationTargetUnavailableError.code: 503,
}


class CreateReelRequest(BaseModel):
    candidates: list[str] | None = None
    presentation_length: int | None = Field(default=None, ge=1, le=MAX_PRESENTATION_LENGTH)
    remove_winner: bool | None = None
    step_seconds: float | None = Field(default=None, ge=0.0)
    seed: int | None = None
    allow_duplicates: bool = False

    @model_validator(mode="before")
    @classmethod
    def _coerce(cls, data: dict[str, object]) -> dict[str, object]:
        if not isinstance(data, dict):
            return data
        cleaned: dict[str, object] = dict(data)
        for field in ("presentation_length", "seed"):
            value = cleaned.get(field)
            if value in (None, ""):
                cleaned[field] = None
                continue
            if isinstance(value, str):
                try:
                    cleaned[field] = int(value)
                except ValueError:
                    cleaned[field] = None
        return cleaned

    def to_config(self, settings: Settings) -> ReelConfig:
        length = self.presentation_length if self.presentation_length is not None else settings.presentation_length
        step = self.step_seconds if self.step_seconds is not None else settings.step_seconds
        return ReelConfig(
            presentation_length=length,
            remove_winner=self.remove_winner if self.remove_winner is not None else settings.remove_winner,
            step_seconds=step,
            seed=self.seed if self.seed is not None else settings.seed,
        )


class CandidatesRequest(BaseModel):
    candidates: list[str]
    allow_duplicates: bool = False


class RemovalRequest(BaseModel):
    remove_winner: bool


class _ReelController:
    def __init__(self, manager: ReelManager, settings: Settings) -> None:
        self.manager = manager
        self.settings = settings

    def _outcome_response(self, outcome: DrawOutcome) -> Response:
        status = 200 if outcome.ok else _DRAW_STATUS.get(outcome.error or "", 400)
        return JSONResponse(outcome.to_dict(), status_code=status)

    async def create(self, body: CreateReelRequest) -> Response:
        reel_id = self.manager.create_reel(
            body.to_config(self.settings),
            body.candidates or (),
            deduplicate=not body.allow_duplicates,
        )
        return JSONResponse(self.manager.snapshot(reel_id).to_dict(), status_code=201)

    async def get(self, rid: str) -> Response:
        try:
            payload = self.manager.snapshot(rid)
        except KeyError as exc:
            raise HTTPException(404, str(exc)) from exc
        return JSONResponse(payload.to_dict())

    async def candidates(self, rid: str, body: CandidatesRequest) -> Response:
        try:
            payload = self.manager.set_candidates(rid, body.candidates, deduplicate=not body.allow_duplicates)
        except KeyError as exc:
            raise HTTPException(404, str(exc)) from exc
        return JSONResponse(payload.to_dict())

    async def removal(self, rid: str, body: RemovalRequest) -> Response:
        try:
            payload = self.manager.set_removal(rid, body.remove_winner)
        except KeyError as exc:
            raise HTTPException(404, str(exc)) from exc
        return JSONResponse(payload.to_dict())

    async def draw(self, rid: str) -> Response:
        try:
            outcome = await self.manager.draw(rid)
        except KeyError as exc:
            raise HTTPException(404, str(exc)) from exc
        return self._outcome_response(outcome)

    async def reset(self, rid: str) -> Response:
        try:
            payload = self.manager.reset(rid)
        except KeyError as exc:
            raise HTTPException(404, str(exc)) from exc
        return JSONResponse(payload.to_dict())

    async def discard(self, rid: str) -> Response:
        try:
            self.manager.discard(rid)
        except KeyError as exc:
            raise HTTPException(404, str(exc)) from exc
        return Response(status_code=204)


def create_reel_router(manager: ReelManager, settings: Settings | None = None) -> APIRouter:
    controller = _ReelController(manager, settings or load_settings())

    router = APIRouter(prefix="/api/v1/reels", tags=["reels"])

    @router.post("")
    async def create_reel(body: CreateReelRequest) -> Response:
        return await controller.create(body)

    @router.get("/{rid}")
    async def get_reel(rid: str) -> Response:
        return await controller.get(rid)

    @router.put("/{rid}/candidates")
    async def put_candidates(rid: str, body: CandidatesRequest) -> Response:
        return await controller.candidates(rid, body)

    @router.put("/{rid}/removal")
    async def put_removal(rid: str, body: RemovalRequest) -> Response:
        return await controller.removal(rid, body)

    @router.post("/{rid}/draw")
    async def post_draw(rid: str) -> Response:
        return await controller.draw(rid)

    @router.post("/{rid}/reset")
    async def post_reset(rid: str) -> Response:
        return await controller.reset(rid)

    @router.delete("/{rid}")
    async def delete_reel(rid: str) -> Response:
        return await controller.discard(rid)

    return router
