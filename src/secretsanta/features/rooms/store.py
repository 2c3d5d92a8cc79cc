from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterator, Mapping, Sequence
from contextlib import contextmanager
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from types import MappingProxyType

from ...core.derangement import is_derangement, single_cycle
from ...core.errors import (
    InvalidAssignmentError,
    InvalidParticipantsError,
    RoomBusyError,
    RoomNotFoundError,
)
from ...core.ids import ParticipantSequence, new_room_id
from ...core.models import Participant, Room, RoomSummary

__all__ = ["Deranger", "RoomStore"]

logger = logging.getLogger(__name__)

Deranger = Callable[[Sequence[int]], Mapping[int, int]]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class _RoomRecord:
    snapshot: Room
    lock: threading.Lock = field(default_factory=threading.Lock)
    alive: bool = True


class RoomStore:
    """In-memory room table with one lock per room.

    ``_lock`` only guards membership of the table and is held for a dict
    operation at a time.  Mutations of a room (assignment swap, deletion) are
    serialised by that room's own lock, so busy rooms never hold up others.
    Readers take no room lock: every record points at an immutable
    :class:`Room` snapshot and a swap replaces that pointer in one step.
    Lock order is room lock, then table lock.
    """

    def __init__(
        self,
        *,
        derange: Deranger = single_cycle,
        lock_timeout: float = 5.0,
        clock: Callable[[], datetime] = _utcnow,
        id_factory: Callable[[], str] = new_room_id,
    ) -> None:
        self._rooms: dict[str, _RoomRecord] = {}
        self._lock = threading.Lock()
        self._derange = derange
        self._lock_timeout = lock_timeout
        self._clock = clock
        self._id_factory = id_factory

    @property
    def derange(self) -> Deranger:
        """The engine used for the first assignment and every shuffle."""
        return self._derange

    def __len__(self) -> int:
        with self._lock:
            return len(self._rooms)

    def __contains__(self, room_id: object) -> bool:
        with self._lock:
            return room_id in self._rooms

    def create(self, names: Sequence[str]) -> Room:
        names = list(names)
        if len(names) < 2:
            raise InvalidParticipantsError("at least 2 participants are required")
        if any(not isinstance(name, str) or not name for name in names):
            raise InvalidParticipantsError("participant names must be non-empty strings")

        participant_ids = ParticipantSequence().take(len(names))
        assignment = self._checked(participant_ids, self._derange(participant_ids))
        created_at = self._clock()

        with self._lock:
            room_id = self._fresh_id()
            room = Room(
                id=room_id,
                participants=tuple(
                    Participant(id=pid, name=name, room_id=room_id) for pid, name in zip(participant_ids, names)
                ),
                assignment=assignment,
                created_at=created_at,
            )
            self._rooms[room_id] = _RoomRecord(snapshot=room)
        logger.debug("room stored", extra={"room_id": room_id, "participants": len(names)})
        return room

    def get(self, room_id: str) -> Room:
        return self._require(room_id).snapshot

    def list(self) -> list[RoomSummary]:
        with self._lock:
            records = list(self._rooms.values())
        return [record.snapshot.summary() for record in records]

    def delete(self, room_id: str) -> None:
        record = self._require(room_id)
        with self._locked(room_id, record):
            if not record.alive:
                raise RoomNotFoundError(room_id)
            record.alive = False
            with self._lock:
                self._rooms.pop(room_id, None)
        logger.debug("room removed", extra={"room_id": room_id})

    def replace_assignment(self, room_id: str, assignment: Mapping[int, int]) -> Room:
        """Swap the room's whole assignment, or leave it untouched and raise."""

        record = self._require(room_id)
        with self._locked(room_id, record):
            if not record.alive:
                raise RoomNotFoundError(room_id)
            current = record.snapshot
            updated = replace(
                current,
                assignment=self._checked(current.participant_ids, assignment),
                shuffled_at=self._clock(),
                revision=current.revision + 1,
            )
            record.snapshot = updated
        logger.debug("assignment replaced", extra={"room_id": room_id, "revision": updated.revision})
        return updated

    def _require(self, room_id: str) -> _RoomRecord:
        with self._lock:
            record = self._rooms.get(room_id)
        if record is None:
            raise RoomNotFoundError(room_id)
        return record

    @contextmanager
    def _locked(self, room_id: str, record: _RoomRecord) -> Iterator[None]:
        if not record.lock.acquire(timeout=self._lock_timeout):
            logger.warning("room lock timed out", extra={"room_id": room_id, "timeout": self._lock_timeout})
            raise RoomBusyError(room_id)
        try:
            yield
        finally:
            record.lock.release()

    def _fresh_id(self) -> str:
        # caller holds self._lock
        while True:
            room_id = self._id_factory()
            if room_id not in self._rooms:
                return room_id
            logger.warning("room id collision; drawing again")

    @staticmethod
    def _checked(participant_ids: Sequence[int], assignment: Mapping[int, int]) -> Mapping[int, int]:
        frozen = dict(assignment)
        if not is_derangement(participant_ids, frozen):
            raise InvalidAssignmentError("assignment must be a derangement over the room's participants")
        return MappingProxyType(frozen)
