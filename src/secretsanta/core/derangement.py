"""Fixed-point-free assignments built as a single random cycle.

Shuffling all ``n`` ids and retrying until nobody draws themselves works, but
the number of retries is unbounded and the result can split into several
disjoint cycles.  Instead we keep the first id in place, shuffle the other
``n - 1`` ids behind it, and let every id give to the one that follows it
(the last one wraps around to the first).  Every single cycle is reached
by exactly one ordering of the tail, so all ``(n - 1)!`` are equally likely,
the draw is linear, and a cycle of length two or more never maps an id to
itself.

For two participants the only possible outcome is the mutual swap.
"""

from __future__ import annotations

import random
import secrets
from collections.abc import Hashable, Mapping, Sequence
from typing import TypeVar

from .errors import InvalidParticipantsError

__all__ = ["is_derangement", "single_cycle"]

T = TypeVar("T", bound=Hashable)


def single_cycle(ids: Sequence[T], rng: random.Random | None = None) -> dict[T, T]:
    """Return a uniformly random single-cycle assignment over ``ids``.

    ``rng`` defaults to a fresh :class:`secrets.SystemRandom`; pass a seeded
    :class:`random.Random` only for reproducible tests or analysis scripts.
    """

    order = list(ids)
    if len(order) < 2:
        raise InvalidParticipantsError("at least 2 participants are required")
    if len(set(order)) != len(order):
        raise InvalidParticipantsError("participant ids must be distinct")

    generator = rng if rng is not None else secrets.SystemRandom()
    tail = order[1:]
    generator.shuffle(tail)
    order[1:] = tail

    size = len(order)
    return {order[i]: order[(i + 1) % size] for i in range(size)}


def is_derangement(ids: Sequence[Hashable], assignment: Mapping[Hashable, Hashable]) -> bool:
    """True when ``assignment`` is a bijection on ``ids`` with no fixed point."""

    expected = set(ids)
    if len(expected) != len(ids) or len(expected) < 2:
        return False
    if set(assignment.keys()) != expected:
        return False
    receivers = list(assignment.values())
    if len(set(receivers)) != len(receivers) or set(receivers) != expected:
        return False
    return all(giver != receiver for giver, receiver in assignment.items())
