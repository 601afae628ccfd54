"""Board representation for the playfield.

Rows are counted from the floor upwards: row ``0`` is the bottom row and
``TOTAL_HEIGHT - 1`` the top of the hidden spawn buffer.  Only the lower
``VISIBLE_HEIGHT`` rows are shown to the player.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple

import numpy as np
from numpy.typing import NDArray

from .tetromino import SHAPES, Shape, Tetromino


# Dimensions of the playfield.
WIDTH = 10
VISIBLE_HEIGHT = 20
TOTAL_HEIGHT = 30

Grid = NDArray[np.uint8]

# Mapping from ``Shape`` to the integer stored in the grid.  ``0`` is an empty
# cell.
PIECE_VALUES: Dict[Shape, int] = {Shape.NONE: 0}
PIECE_VALUES.update({s: i + 1 for i, s in enumerate(SHAPES)})
VALUE_SHAPES: Dict[int, Shape] = {v: s for s, v in PIECE_VALUES.items()}


class CollisionError(Exception):
    """Raised when a piece is placed where it does not fit."""


class Layer(Enum):
    """Display layer a cell was resolved from."""

    FIELD = "field"
    GHOST = "ghost"
    ACTIVE = "active"


@dataclass(frozen=True)
class Coords:
    """Grid position as ``(row, col)``."""

    row: int
    col: int

    def shifted(self, drow: int, dcol: int) -> "Coords":
        return Coords(self.row + drow, self.col + dcol)


def piece_cells(tetromino: Tetromino, coords: Coords) -> List[Tuple[int, int]]:
    """Return the grid cells covered by ``tetromino`` anchored at ``coords``.

    ``coords`` is the layout's top-left origin; layout rows grow downwards so
    they are subtracted from the anchor row.
    """

    return [(coords.row - r, coords.col + c) for r, c in tetromino.offsets()]


@dataclass(frozen=True)
class FieldPiece:
    """A tetromino anchored on the board."""

    tetromino: Tetromino
    coords: Coords

    @classmethod
    def none(cls) -> "FieldPiece":
        """Return the placeholder for "no active piece"."""

        return cls(Tetromino.new(Shape.NONE), Coords(0, 0))

    @property
    def shape(self) -> Shape:
        return self.tetromino.shape

    def cells(self) -> List[Tuple[int, int]]:
        return piece_cells(self.tetromino, self.coords)

    def moved(self, drow: int, dcol: int) -> "FieldPiece":
        return FieldPiece(self.tetromino, self.coords.shifted(drow, dcol))

    def rotated(self) -> "FieldPiece":
        return FieldPiece(self.tetromino.rotated(), self.coords)


def create_empty_grid() -> Grid:
    """Return a new empty board grid filled with zeros."""

    return np.zeros((TOTAL_HEIGHT, WIDTH), dtype=np.uint8)


class Board:
    """Playfield holding the locked cells."""

    width: int = WIDTH
    height: int = VISIBLE_HEIGHT
    total_height: int = TOTAL_HEIGHT

    def __init__(self) -> None:
        self.grid: Grid = create_empty_grid()

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.total_height and 0 <= col < self.width

    def get_cell(self, row: int, col: int) -> Shape:
        """Return the shape locked at ``(row, col)``.

        Raises:
            IndexError: If the coordinates are outside the board.
        """
        if self.in_bounds(row, col):
            return VALUE_SHAPES[int(self.grid[row, col])]
        raise IndexError("Cell out of bounds")

    def can_place(self, tetromino: Tetromino, coords: Coords) -> bool:
        """Return ``True`` if every cell of the piece is on the board and empty."""

        for row, col in piece_cells(tetromino, coords):
            if not self.in_bounds(row, col):
                return False
            if self.grid[row, col] != 0:
                return False
        return True

    def place(self, tetromino: Tetromino, coords: Coords) -> None:
        """Lock ``tetromino`` into the grid.

        Raises:
            CollisionError: If :meth:`can_place` is false for the same
                arguments.  Nothing is written in that case.
        """

        if not self.can_place(tetromino, coords):
            raise CollisionError(
                f"{tetromino.shape.name} does not fit at ({coords.row}, {coords.col})"
            )
        value = np.uint8(PIECE_VALUES[tetromino.shape])
        for row, col in piece_cells(tetromino, coords):
            self.grid[row, col] = value

    def shape_at(
        self,
        coords: Coords,
        active: Optional[FieldPiece] = None,
        ghost: Optional[FieldPiece] = None,
    ) -> Tuple[Shape, Layer]:
        """Resolve what is displayed at ``coords``.

        The active piece wins over the ghost, which wins over locked cells.
        Positions outside the board resolve to ``Shape.NONE``.
        """

        if not self.in_bounds(coords.row, coords.col):
            return Shape.NONE, Layer.FIELD
        cell = (coords.row, coords.col)
        if active is not None and cell in active.cells():
            return active.shape, Layer.ACTIVE
        if ghost is not None and cell in ghost.cells():
            return ghost.shape, Layer.GHOST
        return VALUE_SHAPES[int(self.grid[coords.row, coords.col])], Layer.FIELD

    def row_filled(self, row: int) -> bool:
        """Return ``True`` if every column of ``row`` is occupied."""

        return bool(np.all(self.grid[row] != 0))

    def delete_row(self, row: int) -> None:
        """Remove ``row`` and drop everything above it by one.

        Rows below ``row`` are untouched and the top working row becomes empty.
        When deleting several rows, delete them from the highest index down.
        """

        self.grid[row:-1] = self.grid[row + 1:].copy()
        self.grid[-1] = 0

    def visible_rows(self) -> Grid:
        """Return a copy of the visible part of the grid (row 0 first)."""

        return self.grid[: self.height].copy()

