from __future__ import annotations

import threading
from datetime import datetime, timezone

import pytest

from secretsanta.core.derangement import is_derangement
from secretsanta.core.errors import (
    InvalidAssignmentError,
    InvalidParticipantsError,
    RoomBusyError,
    RoomNotFoundError,
)
from secretsanta.features.rooms import RoomStore


def test_create_assigns_ids_in_order_and_a_derangement() -> None:
    store = RoomStore()
    room = store.create(["Alice", "Bob", "Cara"])

    assert [(p.id, p.name) for p in room.participants] == [(1, "Alice"), (2, "Bob"), (3, "Cara")]
    assert all(p.room_id == room.id for p in room.participants)
    assert is_derangement(room.participant_ids, room.assignment)
    assert room.revision == 0
    assert room.shuffled_at is None
    assert room.created_at.tzinfo is not None
    assert store.get(room.id) == room
    assert room.id in store
    assert len(store) == 1


@pytest.mark.parametrize("names", [[], ["OnlyOne"], ["Alice", ""]])
def test_create_rejects_insufficient_names(names: list[str]) -> None:
    store = RoomStore()
    with pytest.raises(InvalidParticipantsError):
        store.create(names)
    assert len(store) == 0


def test_assignment_snapshot_is_read_only() -> None:
    room = RoomStore().create(["Alice", "Bob"])
    with pytest.raises(TypeError):
        room.assignment[1] = 1  # type: ignore[index]


def test_get_unknown_room() -> None:
    with pytest.raises(RoomNotFoundError) as info:
        RoomStore().get("missing")
    assert "missing" in info.value.detail


def test_list_exposes_only_id_and_count() -> None:
    store = RoomStore()
    first = store.create(["A", "B"])
    second = store.create(["C", "D", "E"])
    summaries = store.list()
    assert [(s.id, s.participant_count) for s in summaries] == [(first.id, 2), (second.id, 3)]


def test_delete_removes_room_and_second_delete_fails() -> None:
    store = RoomStore()
    room = store.create(["A", "B"])
    store.delete(room.id)
    assert room.id not in store
    assert store.list() == []
    with pytest.raises(RoomNotFoundError):
        store.get(room.id)
    with pytest.raises(RoomNotFoundError):
        store.delete(room.id)
    with pytest.raises(RoomNotFoundError):
        store.replace_assignment(room.id, {1: 2, 2: 1})


def test_replace_assignment_swaps_whole_mapping() -> None:
    stamps = iter(
        [
            datetime(2024, 12, 1, tzinfo=timezone.utc),
            datetime(2024, 12, 2, tzinfo=timezone.utc),
        ]
    )
    store = RoomStore(clock=lambda: next(stamps), derange=lambda ids: {1: 2, 2: 3, 3: 1})
    room = store.create(["A", "B", "C"])

    updated = store.replace_assignment(room.id, {1: 3, 3: 2, 2: 1})
    assert dict(updated.assignment) == {1: 3, 3: 2, 2: 1}
    assert updated.revision == 1
    assert updated.shuffled_at == datetime(2024, 12, 2, tzinfo=timezone.utc)
    assert updated.created_at == room.created_at
    assert store.get(room.id) == updated
    # the old snapshot is untouched
    assert dict(room.assignment) == {1: 2, 2: 3, 3: 1}


@pytest.mark.parametrize(
    "bad",
    [
        {1: 1, 2: 3, 3: 2},
        {1: 2, 2: 1},
        {1: 2, 2: 3, 3: 4},
    ],
)
def test_invalid_replacement_keeps_previous_assignment(bad: dict[int, int]) -> None:
    store = RoomStore()
    room = store.create(["A", "B", "C"])
    with pytest.raises(InvalidAssignmentError):
        store.replace_assignment(room.id, bad)
    assert store.get(room.id) == room


def test_broken_deranger_never_creates_a_room() -> None:
    store = RoomStore(derange=lambda ids: {pid: pid for pid in ids})
    with pytest.raises(InvalidAssignmentError):
        store.create(["A", "B"])
    assert len(store) == 0


def test_room_id_collision_draws_again() -> None:
    ids = iter(["dup", "dup", "fresh"])
    store = RoomStore(id_factory=lambda: next(ids))
    assert store.create(["A", "B"]).id == "dup"
    assert store.create(["C", "D"]).id == "fresh"


def test_busy_room_reports_conflict_and_keeps_assignment() -> None:
    store = RoomStore(lock_timeout=0.05)
    room = store.create(["A", "B", "C"])
    record = store._rooms[room.id]

    with record.lock:
        with pytest.raises(RoomBusyError):
            store.replace_assignment(room.id, {1: 3, 3: 2, 2: 1})
        with pytest.raises(RoomBusyError):
            store.delete(room.id)
        # reads never wait on the room lock
        assert store.get(room.id) == room

    assert store.get(room.id) == room


def test_busy_room_does_not_block_other_rooms() -> None:
    store = RoomStore(lock_timeout=0.05)
    busy = store.create(["A", "B"])
    other = store.create(["C", "D", "E"])
    done = threading.Event()

    with store._rooms[busy.id].lock:
        worker = threading.Thread(target=lambda: (store.replace_assignment(other.id, {1: 3, 3: 2, 2: 1}), done.set()))
        worker.start()
        worker.join(timeout=2.0)
        assert done.is_set()

    assert store.get(other.id).revision == 1
