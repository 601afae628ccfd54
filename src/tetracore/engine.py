"""Phase machine driving one game from discrete events.

The engine consumes one :class:`Event` at a time.  Each phase handler either
finishes the work for that event or asks to be driven again straight away;
:meth:`Engine.drive` loops on that request a bounded number of times so the
machine never recurses and never spins forever.

Phase cycle::

    COMPLETION -> FALLING <-> LOCKED -> PATTERN -> ANIMATION -> COMPLETION
                                                        ...  -> GAME_OVER

``GAME_OVER`` is absorbing: every later event is ignored.
"""

from __future__ import annotations

from enum import Enum
from typing import Callable, Dict, Iterable, Optional, Tuple
import logging
import random

from .board import Board, Coords
from .config import GameConfig
from .controller import Direction, PieceController
from .randomizer import HoldRejected, NextQueue, spawn_piece
from .render import (
    EndgameSnapshot,
    PlayfieldSnapshot,
    PlaytimeSnapshot,
    RenderSink,
    ScoreSnapshot,
)
from .score import ScoreBoard
from .tetromino import Shape
from .timing import FRAME_RATE, GravityTimer, PlayTime


LOGGER = logging.getLogger(__name__)

ANIMATION_FRAMES = 60
FLASH_PERIOD = FRAME_RATE // 2
# Upper bound on re-processing a single external event.
MAX_CHAIN = 5
PLAYTIME_REFRESH_FRAMES = 7

PLAYFIELD = "playfield"
PREVIEW = "preview"
SCORE = "score"
PLAYTIME = "playtime"
ENDGAME = "endgame"


class Event(Enum):
    TIMEOUT = "timeout"
    MOVE_LEFT = "move_left"
    MOVE_RIGHT = "move_right"
    MOVE_DOWN = "move_down"
    ROTATE = "rotate"
    HARD_DROP = "hard_drop"
    HOLD = "hold"
    EXIT = "exit"


class Phase(Enum):
    COMPLETION = "completion"
    FALLING = "falling"
    LOCKED = "locked"
    PATTERN = "pattern"
    ANIMATION = "animation"
    GAME_OVER = "game_over"


_SHIFTS = {
    Event.MOVE_LEFT: Direction.LEFT,
    Event.MOVE_RIGHT: Direction.RIGHT,
}


class Engine:
    """Own every game component and sequence them per event."""

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        *,
        rng: Optional[random.Random] = None,
        board: Optional[Board] = None,
    ) -> None:
        self.config = config or GameConfig()
        if rng is None:
            rng = random.Random(self.config.seed)
        self.controller = PieceController(board, ghost_enabled=self.config.ghost_enabled)
        self.queue = NextQueue(rng)
        self.score = ScoreBoard(level=self.config.starting_level, mode=self.config.mode)
        self.timer = GravityTimer()
        self.playtime = PlayTime()
        self.phase = Phase.COMPLETION
        self.animation_frame = 0
        self.goal_reached = False
        self.exit_requested = False
        self.hold_rejected = False
        self._dirty = {PLAYFIELD, PREVIEW, SCORE, PLAYTIME}
        self._handlers: Dict[Phase, Callable[[Event], bool]] = {
            Phase.COMPLETION: self._completion,
            Phase.FALLING: self._falling,
            Phase.LOCKED: self._locked,
            Phase.PATTERN: self._pattern,
            Phase.ANIMATION: self._animation,
        }
        LOGGER.info(
            "New %s game at level %d", self.config.mode.value, self.score.level
        )

    # Properties --------------------------------------------------------
    @property
    def board(self) -> Board:
        return self.controller.board

    @property
    def finished(self) -> bool:
        return self.phase is Phase.GAME_OVER

    # Event processing --------------------------------------------------
    def process(self, event: Event) -> bool:
        """Run one step for ``event`` in the current phase.

        Returns ``True`` when the machine should be driven again with the same
        event before the next external one is accepted.
        """

        if event is Event.EXIT:
            self.exit_requested = True
            return False
        if self.phase is Phase.GAME_OVER:
            return False
        return self._handlers[self.phase](event)

    def drive(self, event: Event) -> Phase:
        """Feed one external event, following any self-rescheduling."""

        self.hold_rejected = False
        if event is Event.TIMEOUT and not self.finished:
            self.playtime.tick()
            if self.playtime.frames % PLAYTIME_REFRESH_FRAMES == 0:
                self._dirty.add(PLAYTIME)
        for _ in range(MAX_CHAIN):
            if not self.process(event):
                break
        else:
            LOGGER.warning("Event %s still pending after %d steps", event.name, MAX_CHAIN)
        return self.phase

    def run(self, events: Iterable[Event]) -> Phase:
        """Drive events in order until an ``EXIT`` is seen or the game ends."""

        for event in events:
            self.drive(event)
            if self.exit_requested or self.finished:
                break
        return self.phase

    # Phase handlers ----------------------------------------------------
    def _completion(self, event: Event) -> bool:
        removed = self.controller.remove_filled()
        if removed:
            points = self.score.update(removed)
            LOGGER.debug("Cleared %d line(s) for %d points", removed, points)
            self._dirty.update((PLAYFIELD, SCORE))
        if self.score.goal_complete():
            self.goal_reached = True
            self._game_over("goal reached")
            return False

        piece = self.queue.pop()
        self.timer.reset()
        self._dirty.update((PLAYFIELD, PREVIEW))
        if not self.controller.spawn(piece):
            self._game_over("spawn blocked")
            return False
        self._set_phase(Phase.FALLING)
        return False

    def _falling(self, event: Event) -> bool:
        if event is Event.TIMEOUT:
            if self.timer.tick(self.score.level):
                self._step_down()
            return False
        return self._handle_input(event)

    def _locked(self, event: Event) -> bool:
        if event is not Event.TIMEOUT:
            return self._handle_input(event)
        if not self.timer.tick(self.score.level):
            return False
        if self.controller.has_fall_space():
            self._step_down()
            return False
        self._set_phase(Phase.PATTERN)
        return True

    def _pattern(self, event: Event) -> bool:
        self.controller.lock()
        rows = self.controller.find_filled()
        if rows:
            LOGGER.debug("Filled rows %s", rows)
        self.animation_frame = 0
        self._dirty.add(PLAYFIELD)
        self._set_phase(Phase.ANIMATION)
        return True

    def _animation(self, event: Event) -> bool:
        if not len(self.controller.pending):
            self._set_phase(Phase.COMPLETION)
            return True
        if event is not Event.TIMEOUT:
            return False
        self.animation_frame += 1
        if self.animation_frame >= ANIMATION_FRAMES:
            self._set_phase(Phase.COMPLETION)
            return True
        return False

    # Helpers -----------------------------------------------------------
    def _handle_input(self, event: Event) -> bool:
        if event is Event.HARD_DROP:
            self.controller.hard_drop()
            self._dirty.add(PLAYFIELD)
            self._set_phase(Phase.PATTERN)
            return True
        if event is Event.MOVE_DOWN:
            self._step_down()
        elif event is Event.HOLD:
            self._hold()
        elif event is Event.ROTATE:
            self._reposition(self.controller.rotate())
        elif event in _SHIFTS:
            self._reposition(self.controller.move(_SHIFTS[event]))
        return False

    def _step_down(self) -> None:
        if self.controller.move(Direction.DOWN):
            self._dirty.add(PLAYFIELD)
            if self.phase is Phase.LOCKED:
                self.timer.reset()
                self._set_phase(Phase.FALLING)
        elif self.phase is Phase.FALLING:
            self.timer.lock_delay()
            self._set_phase(Phase.LOCKED)

    def _reposition(self, moved: bool) -> None:
        if not moved:
            return
        self._dirty.add(PLAYFIELD)
        if self.phase is Phase.LOCKED and self.controller.has_fall_space():
            self.timer.reset()
            self._set_phase(Phase.FALLING)

    def _hold(self) -> None:
        incoming = spawn_piece(self.queue.peek(1)[0])
        if not self.board.can_place(incoming.tetromino, incoming.coords):
            LOGGER.debug("Hold ignored: %s does not fit", incoming.shape.name)
            return
        try:
            piece = self.queue.swap(self.controller.active.shape)
        except HoldRejected as exc:
            self.hold_rejected = True
            LOGGER.debug("Hold rejected: %s", exc)
            return
        self.controller.spawn(piece)
        self.timer.reset()
        self._dirty.update((PLAYFIELD, PREVIEW))
        self._set_phase(Phase.FALLING)

    def _set_phase(self, phase: Phase) -> None:
        if phase is not self.phase:
            LOGGER.debug("Phase %s -> %s", self.phase.name, phase.name)
        self.phase = phase

    def _game_over(self, reason: str) -> None:
        self._set_phase(Phase.GAME_OVER)
        self._dirty.update((PLAYFIELD, ENDGAME))
        LOGGER.info(
            "Game over (%s): score=%d lines=%d level=%d",
            reason,
            self.score.score,
            self.score.lines_cleared,
            self.score.level,
        )

    # Snapshots ---------------------------------------------------------
    def highlighted_rows(self) -> Tuple[int, ...]:
        """Return the pending rows when the flash is in its visible half."""

        if self.phase is not Phase.ANIMATION:
            return ()
        if self.animation_frame % FLASH_PERIOD > FLASH_PERIOD // 2:
            return ()
        return tuple(r for r in self.controller.pending.rows() if r < self.board.height)

    def playfield_snapshot(self) -> PlayfieldSnapshot:
        active = self.controller.active if self.controller.alive else None
        ghost = self.controller.ghost()
        board = self.board
        rows = tuple(
            tuple(board.shape_at(Coords(r, c), active, ghost) for c in range(board.width))
            for r in range(board.height)
        )
        return PlayfieldSnapshot(rows=rows, highlighted_rows=self.highlighted_rows())

    def preview(self) -> Tuple[Shape, ...]:
        return self.queue.peek(self.config.preview_size)

    def score_snapshot(self) -> ScoreSnapshot:
        s = self.score
        return ScoreSnapshot(s.level, s.score, s.lines_cleared, tuple(s.clear_counts))

    def playtime_snapshot(self) -> PlaytimeSnapshot:
        return PlaytimeSnapshot(*self.playtime.split())

    def endgame_snapshot(self) -> EndgameSnapshot:
        return EndgameSnapshot(finished=self.finished, goal_reached=self.goal_reached)

    def render(self, sink: RenderSink, *, force: bool = False) -> None:
        """Push the fragments changed since the last call to ``sink``."""

        if force or PLAYFIELD in self._dirty or self.phase is Phase.ANIMATION:
            sink.show_playfield(self.playfield_snapshot())
        if force or PREVIEW in self._dirty:
            sink.show_preview(self.preview())
        if force or SCORE in self._dirty:
            sink.show_score(self.score_snapshot())
        if force or PLAYTIME in self._dirty:
            sink.show_playtime(self.playtime_snapshot())
        if force or ENDGAME in self._dirty:
            sink.show_endgame(self.endgame_snapshot())
        self._dirty.clear()
