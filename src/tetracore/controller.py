"""Active piece handling on top of :class:`~tetracore.board.Board`.

The controller owns the board and the falling piece.  Every mutation of the
piece is tested against the grid first and silently dropped when it does not
fit: bumping into a wall is a normal game event, so the methods report a
``bool`` instead of raising.
"""

from __future__ import annotations

from enum import Enum
from typing import List, Optional, Tuple
import logging

from .board import Board, FieldPiece
from .tetromino import Shape


LOGGER = logging.getLogger(__name__)

# A single tetromino spans at most four rows.
LINE_BUFFER_CAPACITY = 4


class Direction(Enum):
    """Translation directions as ``(drow, dcol)``."""

    DOWN = (-1, 0)
    LEFT = (0, -1)
    RIGHT = (0, 1)


class LineBuffer:
    """Fixed-capacity list of rows waiting to be deleted."""

    capacity: int = LINE_BUFFER_CAPACITY

    def __init__(self) -> None:
        self._rows: List[int] = []

    def store(self, row: int) -> None:
        assert len(self._rows) < self.capacity, "line buffer overflow"
        self._rows.append(row)

    def rows(self) -> Tuple[int, ...]:
        return tuple(self._rows)

    def reset(self) -> None:
        self._rows.clear()

    def __len__(self) -> int:
        return len(self._rows)


class PieceController:
    """Mediate every change of the active piece against the board."""

    def __init__(self, board: Optional[Board] = None, *, ghost_enabled: bool = True) -> None:
        self.board = board if board is not None else Board()
        self.ghost_enabled = ghost_enabled
        self.active: FieldPiece = FieldPiece.none()
        self.pending = LineBuffer()

    @property
    def alive(self) -> bool:
        return self.active.shape is not Shape.NONE

    def _try(self, candidate: FieldPiece) -> bool:
        if not self.alive:
            return False
        if not self.board.can_place(candidate.tetromino, candidate.coords):
            return False
        self.active = candidate
        return True

    def spawn(self, piece: FieldPiece) -> bool:
        """Make ``piece`` the active piece.

        Returns ``False`` when the piece overlaps the stack, which the caller
        treats as a top-out.  The piece is installed either way so it can be
        displayed.
        """

        self.active = piece
        return self.board.can_place(piece.tetromino, piece.coords)

    def move(self, direction: Direction) -> bool:
        drow, dcol = direction.value
        return self._try(self.active.moved(drow, dcol))

    def rotate(self) -> bool:
        return self._try(self.active.rotated())

    def has_fall_space(self) -> bool:
        if not self.alive:
            return False
        below = self.active.moved(*Direction.DOWN.value)
        return self.board.can_place(below.tetromino, below.coords)

    def hard_drop(self) -> int:
        """Drop the piece as far as it goes and return the rows travelled."""

        rows = 0
        while self.move(Direction.DOWN):
            rows += 1
        return rows

    def ghost(self) -> Optional[FieldPiece]:
        """Return the active piece dropped to its resting row, for display."""

        if not self.ghost_enabled or not self.alive:
            return None
        ghost = self.active
        while True:
            below = ghost.moved(*Direction.DOWN.value)
            if not self.board.can_place(below.tetromino, below.coords):
                return ghost
            ghost = below

    def lock(self) -> None:
        """Commit the active piece into the grid and mark it dead."""

        if not self.alive:
            return
        self.board.place(self.active.tetromino, self.active.coords)
        LOGGER.debug(
            "Locked %s at (%d, %d)",
            self.active.shape.name,
            self.active.coords.row,
            self.active.coords.col,
        )
        self.active = FieldPiece.none()

    def find_filled(self) -> Tuple[int, ...]:
        """Record every filled row, highest first, in the pending buffer."""

        self.pending.reset()
        for row in range(self.board.total_height - 1, -1, -1):
            if self.board.row_filled(row):
                self.pending.store(row)
        return self.pending.rows()

    def remove_filled(self) -> int:
        """Delete the pending rows and return how many were removed."""

        rows = self.pending.rows()
        for row in rows:
            self.board.delete_row(row)
        self.pending.reset()
        return len(rows)
