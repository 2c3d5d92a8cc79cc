from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Participant:
    id: int
    name: str
    room_id: str


@dataclass(frozen=True)
class RoomSummary:
    id: str
    participant_count: int


@dataclass(frozen=True)
class Room:
    """Immutable snapshot of a room as stored at one point in time.

    ``assignment`` maps giver id to receiver id.  It is read-only and is only
    ever replaced as a whole, together with ``revision`` and ``shuffled_at``.
    """

    id: str
    participants: tuple[Participant, ...]
    assignment: Mapping[int, int]
    created_at: datetime
    shuffled_at: datetime | None = None
    revision: int = 0

    @property
    def participant_ids(self) -> list[int]:
        return [participant.id for participant in self.participants]

    def participant(self, participant_id: int) -> Participant | None:
        for participant in self.participants:
            if participant.id == participant_id:
                return participant
        return None

    def summary(self) -> RoomSummary:
        return RoomSummary(id=self.id, participant_count=len(self.participants))
