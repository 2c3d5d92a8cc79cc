"""Rooms feature: store, service layer, schemas, and API router."""

from .router import API_PREFIX, create_room_router
from .schemas import CreateRoomRequest, ParticipantPayload, RoomPayload, RoomSummaryPayload
from .service import RoomService, normalize_names
from .store import RoomStore

__all__ = [
    "API_PREFIX",
    "CreateRoomRequest",
    "ParticipantPayload",
    "RoomPayload",
    "RoomService",
    "RoomStore",
    "RoomSummaryPayload",
    "create_room_router",
    "normalize_names",
]
