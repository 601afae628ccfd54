from __future__ import annotations

import logging
import random

import numpy as np

from tetracore.__main__ import scripted_events
from tetracore.board import PIECE_VALUES, Board, Coords, FieldPiece
from tetracore.config import GameConfig, Mode
from tetracore.engine import ANIMATION_FRAMES, Engine, Event, Phase
from tetracore.randomizer import spawn_coords
from tetracore.render import AsciiSink
from tetracore.score import score_for
from tetracore.tetromino import Shape, Tetromino


def _started(**config) -> Engine:
    config.setdefault("seed", 0)
    engine = Engine(GameConfig(**config))
    engine.drive(Event.TIMEOUT)
    return engine


def _replace_active(engine: Engine, shape: Shape, row: int, col: int) -> None:
    assert engine.controller.spawn(FieldPiece(Tetromino.new(shape), Coords(row, col)))


def _prepare_single_line(engine: Engine) -> None:
    """Leave row 0 two cells short and put an O above the gap."""

    engine.board.place(Tetromino.new(Shape.I), Coords(2, 0))
    engine.board.place(Tetromino.new(Shape.I), Coords(2, 4))
    _replace_active(engine, Shape.O, 20, 7)


def test_first_event_spawns_front_of_queue() -> None:
    engine = Engine(GameConfig(seed=0))
    assert engine.phase is Phase.COMPLETION
    upcoming = engine.queue.peek(1)[0]
    assert engine.drive(Event.TIMEOUT) is Phase.FALLING
    assert engine.controller.active.shape is upcoming
    assert engine.controller.active.coords == spawn_coords(upcoming)


def test_gravity_moves_piece_after_level_interval() -> None:
    engine = _started()
    start = engine.controller.active.coords
    for _ in range(47):
        engine.drive(Event.TIMEOUT)
    assert engine.controller.active.coords == start
    engine.drive(Event.TIMEOUT)
    assert engine.controller.active.coords == start.shifted(-1, 0)


def test_lock_delay_survives_slide_and_then_locks() -> None:
    engine = _started()
    _replace_active(engine, Shape.O, 2, 3)
    engine.drive(Event.MOVE_DOWN)
    assert engine.phase is Phase.LOCKED

    engine.drive(Event.TIMEOUT)
    engine.drive(Event.MOVE_LEFT)
    assert engine.controller.active.coords == Coords(2, 2)
    assert engine.phase is Phase.LOCKED

    # the very next tick does not lock
    engine.drive(Event.TIMEOUT)
    assert engine.phase is Phase.LOCKED
    for _ in range(28):
        engine.drive(Event.TIMEOUT)
    assert engine.phase is Phase.LOCKED

    engine.drive(Event.TIMEOUT)
    assert engine.phase is Phase.FALLING
    for row, col in ((0, 3), (0, 4), (1, 3), (1, 4)):
        assert engine.board.get_cell(row, col) is Shape.O


def test_slide_off_ledge_escapes_lock() -> None:
    engine = _started()
    engine.board.grid[0, 5] = PIECE_VALUES[Shape.I]
    _replace_active(engine, Shape.O, 3, 4)
    engine.drive(Event.MOVE_DOWN)
    assert engine.phase is Phase.LOCKED
    engine.drive(Event.MOVE_RIGHT)
    assert engine.phase is Phase.FALLING
    engine.drive(Event.MOVE_DOWN)
    assert engine.controller.active.coords == Coords(2, 5)


def test_hard_drop_chain_reschedules_until_spawn() -> None:
    engine = _started()
    _replace_active(engine, Shape.O, 20, 3)
    assert engine.process(Event.HARD_DROP) is True
    assert engine.phase is Phase.PATTERN
    assert engine.process(Event.HARD_DROP) is True
    assert engine.phase is Phase.ANIMATION
    assert engine.process(Event.HARD_DROP) is True
    assert engine.phase is Phase.COMPLETION
    assert engine.process(Event.HARD_DROP) is False
    assert engine.phase is Phase.FALLING
    assert engine.board.get_cell(0, 4) is Shape.O
    assert engine.board.get_cell(1, 5) is Shape.O
    assert engine.score.score == 0


def test_single_line_clear_scores_and_shifts() -> None:
    engine = _started()
    _prepare_single_line(engine)
    engine.drive(Event.HARD_DROP)
    assert engine.phase is Phase.ANIMATION
    assert engine.highlighted_rows() == (0,)

    for _ in range(20):
        engine.drive(Event.TIMEOUT)
    assert engine.phase is Phase.ANIMATION
    assert engine.highlighted_rows() == ()

    for _ in range(ANIMATION_FRAMES - 20):
        engine.drive(Event.TIMEOUT)
    assert engine.phase is Phase.FALLING
    assert engine.score.score == score_for(0, 1)
    assert engine.score.lines_cleared == 1
    assert engine.score.clear_counts == [1, 0, 0, 0]
    assert engine.board.get_cell(0, 8) is Shape.O
    assert engine.board.get_cell(0, 9) is Shape.O
    assert not engine.board.grid[0, :8].any()
    assert not engine.board.grid[1].any()


def test_hold_once_per_piece() -> None:
    engine = _started(seed=5)
    first = engine.controller.active.shape
    front = engine.queue.peek(1)[0]

    engine.drive(Event.HOLD)
    assert not engine.hold_rejected
    assert engine.controller.active.shape is front
    assert engine.queue.peek(1)[0] is first

    engine.drive(Event.HOLD)
    assert engine.hold_rejected
    assert engine.controller.active.shape is front

    engine.drive(Event.HARD_DROP)
    assert engine.controller.active.shape is first
    engine.drive(Event.HOLD)
    assert not engine.hold_rejected
    assert engine.queue.pushed


def test_spawn_collision_is_game_over(caplog) -> None:
    board = Board()
    board.grid[15:, :] = PIECE_VALUES[Shape.Z]
    engine = Engine(GameConfig(seed=0), board=board)
    with caplog.at_level(logging.INFO, logger="tetracore.engine"):
        engine.drive(Event.TIMEOUT)
    assert engine.finished
    assert not engine.goal_reached
    assert "Game over" in caplog.text

    frames = engine.playtime.frames
    grid = engine.board.grid.copy()
    engine.drive(Event.TIMEOUT)
    engine.drive(Event.HARD_DROP)
    assert engine.phase is Phase.GAME_OVER
    assert engine.playtime.frames == frames
    assert np.array_equal(engine.board.grid, grid)


def test_sprint_finishes_at_line_goal() -> None:
    engine = _started(mode=Mode.SPRINT)
    engine.score.lines_cleared = 39
    _prepare_single_line(engine)
    engine.drive(Event.HARD_DROP)
    for _ in range(ANIMATION_FRAMES):
        engine.drive(Event.TIMEOUT)
    assert engine.finished
    assert engine.goal_reached
    assert engine.endgame_snapshot().goal_reached


def test_run_stops_after_exit() -> None:
    engine = Engine(GameConfig(seed=0))
    engine.run([Event.TIMEOUT, Event.EXIT, Event.TIMEOUT, Event.TIMEOUT])
    assert engine.exit_requested
    assert engine.playtime.frames == 1


def test_render_pushes_only_changed_fragments() -> None:
    engine = Engine(GameConfig(seed=0, preview_size=2))
    sink = AsciiSink()
    engine.render(sink)
    assert sink.updates == ["playfield", "preview", "score", "playtime"]
    sink.updates.clear()
    engine.render(sink)
    assert sink.updates == []

    engine.drive(Event.TIMEOUT)
    engine.render(sink)
    assert sink.updates == ["playfield", "preview"]
    sink.updates.clear()

    for _ in range(6):
        engine.drive(Event.TIMEOUT)
    engine.render(sink)
    assert sink.updates == ["playtime"]


def test_ascii_frame_shows_active_and_ghost() -> None:
    engine = _started(preview_size=1)
    _replace_active(engine, Shape.O, 20, 3)
    sink = AsciiSink()
    engine.render(sink, force=True)
    lines = sink.frame().splitlines()
    assert lines[0] == "+----------+"
    assert lines[1] == "|    OO    |"
    assert lines[2] == "|    OO    |"
    assert lines[19] == "|    ++    |"
    assert lines[20] == "|    ++    |"
    assert lines[21] == "+----------+"
    assert lines[22] == f"Next: {engine.queue.peek(1)[0].value}"
    assert lines[23].startswith("Level: 0")


def test_same_seed_same_game() -> None:
    results = []
    for _ in range(2):
        engine = Engine(GameConfig(seed=9))
        engine.run(scripted_events(2000, random.Random(9), input_rate=0.3))
        results.append((engine.board.grid.copy(), engine.score.score, engine.phase))
    assert np.array_equal(results[0][0], results[1][0])
    assert results[0][1:] == results[1][1:]
