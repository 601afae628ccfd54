from __future__ import annotations

import random

import pytest

from tetracore.board import Coords
from tetracore.randomizer import BAG_SIZE, HoldRejected, NextQueue, spawn_coords
from tetracore.tetromino import SHAPES, Shape


def test_each_bag_is_a_permutation() -> None:
    queue = NextQueue(random.Random(7))
    draws = [queue.draw_advancing() for _ in range(BAG_SIZE * 5)]
    for start in range(0, len(draws), BAG_SIZE):
        assert sorted(draws[start:start + BAG_SIZE]) == sorted(SHAPES)


def test_peek_matches_following_pops() -> None:
    queue = NextQueue(random.Random(1))
    for _ in range(BAG_SIZE * 2):
        upcoming = queue.peek(4)
        assert len(upcoming) == 4
        assert queue.pop().shape is upcoming[0]


def test_peek_rejects_oversized_window() -> None:
    queue = NextQueue(random.Random(1))
    assert queue.peek(0) == ()
    with pytest.raises(ValueError):
        queue.peek(5)


def test_spawn_position_depends_on_shape() -> None:
    assert spawn_coords(Shape.O) == Coords(20, 3)
    assert spawn_coords(Shape.I) == Coords(20, 3)
    assert spawn_coords(Shape.T) == Coords(21, 3)
    assert spawn_coords(Shape.L) == Coords(21, 3)


def test_second_swap_is_rejected_until_next_pop() -> None:
    queue = NextQueue(random.Random(3))
    front = queue.peek(1)[0]
    swapped = queue.swap(Shape.I)
    assert swapped.shape is front
    assert swapped.coords == spawn_coords(front)
    assert queue.peek(1) == (Shape.I,)

    with pytest.raises(HoldRejected):
        queue.swap(Shape.O)
    assert queue.peek(1) == (Shape.I,)

    assert queue.pop().shape is Shape.I
    queue.swap(Shape.Z)
    assert queue.peek(1) == (Shape.Z,)


def test_swap_on_last_slot_does_not_reshuffle() -> None:
    queue = NextQueue(random.Random(11))
    for _ in range(BAG_SIZE - 1):
        queue.pop()
    next_bag = queue.peek(4)[1:]
    queue.swap(Shape.O)
    assert queue.peek(4) == (Shape.O,) + next_bag
    assert queue.pop().shape is Shape.O
    assert queue.peek(3) == next_bag


def test_same_seed_same_sequence() -> None:
    first = NextQueue(random.Random(42))
    second = NextQueue(random.Random(42))
    assert [first.pop().shape for _ in range(20)] == [second.pop().shape for _ in range(20)]
