from __future__ import annotations

import string

import pytest

from secretsanta.core.ids import ROOM_ID_LENGTH, ParticipantSequence, new_room_id


def test_room_ids_are_opaque_and_unique() -> None:
    ids = {new_room_id() for _ in range(2000)}
    assert len(ids) == 2000
    allowed = set(string.ascii_lowercase + string.digits)
    for room_id in ids:
        assert len(room_id) == ROOM_ID_LENGTH
        assert set(room_id) <= allowed


def test_short_room_ids_are_refused() -> None:
    with pytest.raises(ValueError):
        new_room_id(4)


def test_participant_sequence_starts_at_one_and_continues() -> None:
    seq = ParticipantSequence()
    assert seq.take(3) == [1, 2, 3]
    assert seq.take(2) == [4, 5]
    assert seq.take(0) == []
    assert ParticipantSequence(start=10).take(2) == [10, 11]
