from __future__ import annotations

import os

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from ..core.settings import Settings, load_settings
from ..features.reels import ReelManager, create_reel_router


def create_app(settings: Settings | None = None, manager: ReelManager | None = None) -> FastAPI:
    resolved = settings or load_settings()
    application = FastAPI(title="Lucky Draw")
    application.state.reels = manager or ReelManager()
    application.include_router(create_reel_router(application.state.reels, resolved))

    @application.get("/healthz")
    async def healthz() -> JSONResponse:
        return JSONResponse({"status": "ok"})

    return application


app = create_app()


def main() -> None:
    import uvicorn

    host = os.environ.get("HOST", "127.0.0.1")
    port = int(os.environ.get("PORT", "8000"))
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    main()
