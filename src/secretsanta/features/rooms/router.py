from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from ...core.errors import (
    InvalidParticipantsError,
    ParticipantNotFoundError,
    RoomBusyError,
    RoomNotFoundError,
    RoomServiceError,
)
from ...core.settings import Settings
from .schemas import CreateRoomRequest
from .service import RoomService

__all__ = ["API_PREFIX", "create_room_router"]

logger = logging.getLogger(__name__)

API_PREFIX = "/api/secret-santa"

_ROOM_ROUTE = "get_room"
_MAX_PARTICIPANT_KEY_DIGITS = 9


def _http_error(exc: RoomServiceError) -> HTTPException:
    if isinstance(exc, RoomNotFoundError):
        return HTTPException(404, exc.detail)
    if isinstance(exc, RoomBusyError):
        return HTTPException(409, exc.detail)
    if isinstance(exc, InvalidParticipantsError):
        return HTTPException(400, exc.detail)
    logger.error("room service failure", extra={"detail": exc.detail})
    return HTTPException(500, exc.detail)


def _participant_key(room_id: str, raw: str) -> int:
    # participant ids are small positive integers; anything else names nobody
    if len(raw) > _MAX_PARTICIPANT_KEY_DIGITS or not (raw.isascii() and raw.isdecimal()):
        raise ParticipantNotFoundError(room_id, raw[:_MAX_PARTICIPANT_KEY_DIGITS])
    return int(raw)


class _RoomController:
    def __init__(self, service: RoomService, settings: Settings) -> None:
        self.service = service
        self.settings = settings

    def _room_url(self, request: Request, room_id: str) -> str:
        if self.settings.public_url:
            return f"{self.settings.public_url}{API_PREFIX}/room/{room_id}"
        return str(request.url_for(_ROOM_ROUTE, room_id=room_id))

    async def create(self, request: Request, body: CreateRoomRequest) -> Response:
        try:
            room = await self.service.create_room_async(body.participants)
        except RoomServiceError as exc:
            raise _http_error(exc) from exc
        url = self._room_url(request, room.id)
        return PlainTextResponse(url, status_code=201, headers={"Location": url})

    async def list(self) -> Response:
        summaries = await self.service.list_rooms_async()
        return JSONResponse([summary.to_dict() for summary in summaries])

    async def get(self, room_id: str) -> Response:
        try:
            payload = await self.service.get_room_async(room_id)
        except RoomServiceError as exc:
            raise _http_error(exc) from exc
        return JSONResponse(payload.to_dict())

    async def reveal(self, room_id: str, participant_id: str) -> Response:
        try:
            name = await self.service.reveal_assignee_async(room_id, _participant_key(room_id, participant_id))
        except RoomServiceError as exc:
            raise _http_error(exc) from exc
        return PlainTextResponse(name)

    async def shuffle(self, room_id: str) -> Response:
        try:
            await self.service.shuffle_async(room_id)
        except RoomServiceError as exc:
            raise _http_error(exc) from exc
        return Response(status_code=204)

    async def delete(self, room_id: str) -> Response:
        try:
            await self.service.delete_room_async(room_id)
        except RoomServiceError as exc:
            raise _http_error(exc) from exc
        return Response(status_code=204)


def create_room_router(service: RoomService, settings: Settings | None = None) -> APIRouter:
    controller = _RoomController(service, settings or Settings())

    router = APIRouter(prefix=API_PREFIX, tags=["secret-santa"])

    @router.post("/room", status_code=201, response_class=PlainTextResponse)
    async def create_room(request: Request, body: CreateRoomRequest) -> Response:
        return await controller.create(request, body)

    @router.get("/rooms")
    async def list_rooms() -> Response:
        return await controller.list()

    @router.get("/room")
    async def list_rooms_fallback() -> Response:
        return await controller.list()

    @router.get("/room/{room_id}", name=_ROOM_ROUTE)
    async def get_room(room_id: str) -> Response:
        return await controller.get(room_id)

    @router.get("/room/{room_id}/participant/{participant_id}", response_class=PlainTextResponse)
    async def reveal_assignee(room_id: str, participant_id: str) -> Response:
        return await controller.reveal(room_id, participant_id)

    @router.post("/room/{room_id}/shuffle", status_code=204)
    async def shuffle_room(room_id: str) -> Response:
        return await controller.shuffle(room_id)

    @router.delete("/room/{room_id}", status_code=204)
    async def delete_room(room_id: str) -> Response:
        return await controller.delete(room_id)

    return router
