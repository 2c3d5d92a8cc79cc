"""Identifier helpers for rooms and participants.

Room ids double as capabilities: whoever holds one can list the room's
participants and reveal any of their assignees.  They are therefore drawn
from the OS CSPRNG and carry no ordering or relationship to each other.
Participant ids only need to be unique inside their room, so they are small
integers handed out in list order.
"""

from __future__ import annotations

import secrets
import string
from typing import Final

__all__ = ["PARTICIPANT_ID_START", "ROOM_ID_LENGTH", "ParticipantSequence", "new_room_id"]

ROOM_ID_LENGTH: Final = 22
PARTICIPANT_ID_START: Final = 1

_ALPHABET: Final = string.ascii_lowercase + string.digits


def new_room_id(length: int = ROOM_ID_LENGTH) -> str:
    if length < 8:
        raise ValueError("room ids shorter than 8 characters are too guessable")
    return "".join(secrets.choice(_ALPHABET) for _ in range(length))


class ParticipantSequence:
    """Monotonic per-room participant id counter."""

    def __init__(self, start: int = PARTICIPANT_ID_START) -> None:
        self._next = start

    def take(self, count: int) -> list[int]:
        if count < 0:
            raise ValueError("count must be non-negative")
        first = self._next
        self._next += count
        return list(range(first, first + count))
