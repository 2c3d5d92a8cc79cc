from __future__ import annotations

__all__ = [
    "InvalidAssignmentError",
    "InvalidParticipantsError",
    "ParticipantNotFoundError",
    "RoomBusyError",
    "RoomNotFoundError",
    "RoomServiceError",
]


class RoomServiceError(Exception):
    """Base class for every failure reported by the room service."""

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail

    def __str__(self) -> str:
        return self.detail


class InvalidParticipantsError(RoomServiceError, ValueError):
    """Participant data is malformed or insufficient; the caller must fix it."""


class RoomNotFoundError(RoomServiceError, LookupError):
    def __init__(self, room_id: str, detail: str | None = None) -> None:
        super().__init__(detail or f"room '{room_id}' not found")
        self.room_id = room_id


class ParticipantNotFoundError(RoomNotFoundError):
    def __init__(self, room_id: str, participant_id: object) -> None:
        super().__init__(room_id, f"participant '{participant_id}' not found in room '{room_id}'")
        self.participant_id = participant_id


class RoomBusyError(RoomServiceError, RuntimeError):
    """The room lock could not be taken in time. Re-issuing the request is safe."""

    def __init__(self, room_id: str) -> None:
        super().__init__(f"room '{room_id}' is busy; try again")
        self.room_id = room_id


class InvalidAssignmentError(RoomServiceError, ValueError):
    """A replacement assignment is not a derangement over the room's participants."""
