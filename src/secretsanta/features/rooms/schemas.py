from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ...core.models import Room, RoomSummary

__all__ = [
    "CreateRoomRequest",
    "ParticipantPayload",
    "RoomPayload",
    "RoomSummaryPayload",
]


class _APIModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class ParticipantPayload(_APIModel):
    id: int
    name: str


class RoomPayload(_APIModel):
    """Public view of a room. Deliberately has no assignment field."""

    id: str
    participants: list[ParticipantPayload]

    @classmethod
    def from_room(cls, room: Room) -> RoomPayload:
        return cls(
            id=room.id,
            participants=[ParticipantPayload(id=p.id, name=p.name) for p in room.participants],
        )


class RoomSummaryPayload(_APIModel):
    id: str
    participant_count: int = Field(..., alias="participantCount")

    @classmethod
    def from_summary(cls, summary: RoomSummary) -> RoomSummaryPayload:
        return cls(id=summary.id, participant_count=summary.participant_count)


class CreateRoomRequest(BaseModel):
    participants: list[str]

    @model_validator(mode="before")
    @classmethod
    def _coerce(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        cleaned: dict[str, Any] = dict(data)
        raw = cleaned.get("participants")
        if isinstance(raw, list):
            # empty form rows arrive as null
            cleaned["participants"] = ["" if entry is None else entry for entry in raw]
        return cleaned
