from __future__ import annotations

import logging
from collections.abc import Iterable

from ...core.derangement import single_cycle
from ...core.errors import InvalidParticipantsError, ParticipantNotFoundError
from ...core.models import Room
from ...core.settings import Settings
from .concurrency import run_blocking
from .schemas import RoomPayload, RoomSummaryPayload
from .store import Deranger, RoomStore

__all__ = ["RoomService", "normalize_names"]

logger = logging.getLogger(__name__)


def normalize_names(raw: Iterable[object], *, max_participants: int, max_name_length: int) -> list[str]:
    """Trim names, drop blank ones and enforce the room size limits.

    Duplicates are kept: two people may share a first name and still get
    distinct participant ids.
    """

    names: list[str] = []
    for entry in raw:
        if not isinstance(entry, str):
            raise InvalidParticipantsError("participant names must be strings")
        name = entry.strip()
        if not name:
            continue
        if len(name) > max_name_length:
            raise InvalidParticipantsError(f"participant names are limited to {max_name_length} characters")
        names.append(name)
    if len(names) < 2:
        raise InvalidParticipantsError("at least 2 participants are required")
    if len(names) > max_participants:
        raise InvalidParticipantsError(f"a room holds at most {max_participants} participants")
    return names


class RoomService:
    """Room lifecycle and assignment policy, independent of the HTTP layer.

    The only way assignment data leaves this class is :meth:`reveal_assignee`,
    which answers for one participant at a time.
    """

    def __init__(
        self,
        store: RoomStore | None = None,
        *,
        max_participants: int = 200,
        max_name_length: int = 64,
        derange: Deranger | None = None,
    ) -> None:
        if store is not None and derange is not None:
            raise ValueError("pass derange to the RoomStore, not alongside it")
        self._store = store if store is not None else RoomStore(derange=derange or single_cycle)
        self.max_participants = max_participants
        self.max_name_length = max_name_length

    @classmethod
    def from_settings(cls, settings: Settings) -> RoomService:
        return cls(
            RoomStore(lock_timeout=settings.lock_timeout),
            max_participants=settings.max_participants,
            max_name_length=settings.max_name_length,
        )

    @property
    def store(self) -> RoomStore:
        return self._store

    def create_room(self, raw_names: Iterable[object]) -> Room:
        names = normalize_names(
            raw_names,
            max_participants=self.max_participants,
            max_name_length=self.max_name_length,
        )
        room = self._store.create(names)
        logger.info("room created", extra={"room_id": room.id, "participants": len(room.participants)})
        return room

    async def create_room_async(self, raw_names: Iterable[object]) -> Room:
        return await run_blocking(self.create_room, list(raw_names))

    def get_room(self, room_id: str) -> RoomPayload:
        return RoomPayload.from_room(self._store.get(room_id))

    async def get_room_async(self, room_id: str) -> RoomPayload:
        return await run_blocking(self.get_room, room_id)

    def reveal_assignee(self, room_id: str, participant_id: int) -> str:
        # one snapshot for the whole lookup so a concurrent shuffle cannot tear it
        room = self._store.get(room_id)
        receiver_id = room.assignment.get(participant_id)
        if receiver_id is None:
            raise ParticipantNotFoundError(room_id, participant_id)
        receiver = room.participant(receiver_id)
        if receiver is None:  # pragma: no cover - store validates every assignment
            raise ParticipantNotFoundError(room_id, receiver_id)
        return receiver.name

    async def reveal_assignee_async(self, room_id: str, participant_id: int) -> str:
        return await run_blocking(self.reveal_assignee, room_id, participant_id)

    def shuffle(self, room_id: str) -> Room:
        current = self._store.get(room_id)
        updated = self._store.replace_assignment(room_id, self._store.derange(current.participant_ids))
        logger.info("room reshuffled", extra={"room_id": room_id, "revision": updated.revision})
        return updated

    async def shuffle_async(self, room_id: str) -> Room:
        return await run_blocking(self.shuffle, room_id)

    def delete_room(self, room_id: str) -> None:
        self._store.delete(room_id)
        logger.info("room deleted", extra={"room_id": room_id})

    async def delete_room_async(self, room_id: str) -> None:
        await run_blocking(self.delete_room, room_id)

    def list_rooms(self) -> list[RoomSummaryPayload]:
        return [RoomSummaryPayload.from_summary(summary) for summary in self._store.list()]

    async def list_rooms_async(self) -> list[RoomSummaryPayload]:
        return await run_blocking(self.list_rooms)
