from __future__ import annotations

import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .. import __version__
from ..core.settings import Settings, load_settings
from ..features.rooms import RoomService, create_room_router
from ..features.rooms.concurrency import shutdown_workers


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    yield
    shutdown_workers()


def create_app(settings: Settings | None = None, service: RoomService | None = None) -> FastAPI:
    settings = settings or load_settings()
    service = service or RoomService.from_settings(settings)

    application = FastAPI(title="Secret Santa Rooms", version=__version__, lifespan=lifespan)
    application.state.settings = settings
    application.state.room_service = service

    if settings.cors_origins:
        application.add_middleware(
            CORSMiddleware,
            allow_origins=list(settings.cors_origins),
            allow_methods=["GET", "POST", "DELETE"],
            allow_headers=["*"],
        )

    @application.get("/healthz")
    def healthz() -> dict[str, str]:
        return {"status": "ok"}

    application.include_router(create_room_router(service, settings))
    return application


app = create_app()


def main() -> None:  # pragma: no cover - runner
    import uvicorn

    settings: Settings = app.state.settings
    host = os.environ.get("BIND", "0.0.0.0")
    port = int(os.environ.get("PORT", "8000"))
    uvicorn.run(app, host=host, port=port, log_level=settings.log_level)


if __name__ == "__main__":  # pragma: no cover
    main()
