"""Seven-bag randomizer with preview window and hold swap.

The bag is two shuffled permutations of the seven shapes laid end to end.
Draws read from the first half; once all seven are consumed the second half
moves forward and a fresh permutation fills the back.  Keeping a full second
bag behind the draw pointer means a preview of up to four shapes never runs
dry.
"""

from __future__ import annotations

from typing import List, Optional, Tuple
import logging
import random

from .board import VISIBLE_HEIGHT, WIDTH, Coords, FieldPiece
from .config import MAX_PREVIEW
from .tetromino import POINTED_SHAPES, SHAPES, Shape, Tetromino


LOGGER = logging.getLogger(__name__)

BAG_SIZE = len(SHAPES)

SPAWN_COLUMN = WIDTH // 2 - 2
SPAWN_ROW = VISIBLE_HEIGHT


class HoldRejected(Exception):
    """Raised when a second hold is attempted before the next piece is drawn."""


def spawn_coords(shape: Shape) -> Coords:
    """Return where a fresh ``shape`` enters the board."""

    row = SPAWN_ROW + 1 if shape in POINTED_SHAPES else SPAWN_ROW
    return Coords(row, SPAWN_COLUMN)


def spawn_piece(shape: Shape) -> FieldPiece:
    return FieldPiece(Tetromino.new(shape), spawn_coords(shape))


class NextQueue:
    """Upcoming pieces drawn from a double seven-bag."""

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self._rng = rng or random.Random()
        self._bag: List[Shape] = self._shuffled() + self._shuffled()
        self._index = 0
        self.pushed = False

    def _shuffled(self) -> List[Shape]:
        bag = list(SHAPES)
        self._rng.shuffle(bag)
        return bag

    def _refill(self) -> None:
        self._bag[:BAG_SIZE] = self._bag[BAG_SIZE:]
        self._bag[BAG_SIZE:] = self._shuffled()
        self._index = 0
        LOGGER.debug("Bag refilled: %s", "".join(s.value for s in self._bag[BAG_SIZE:]))

    def peek(self, n: int) -> Tuple[Shape, ...]:
        """Return the next ``n`` shapes without consuming them."""

        if not 0 <= n <= MAX_PREVIEW:
            raise ValueError(f"Preview size must be between 0 and {MAX_PREVIEW}")
        return tuple(self._bag[self._index:self._index + n])

    def draw_advancing(self) -> Shape:
        """Consume the front shape, refilling the bag at its boundary."""

        shape = self._bag[self._index]
        self._index += 1
        if self._index == BAG_SIZE:
            self._refill()
        return shape

    def draw_non_advancing(self) -> Shape:
        """Return the front shape while leaving the draw pointer in place.

        Used by :meth:`swap`, which immediately refills the slot, so holding
        the last shape of a bag never triggers a reshuffle.
        """

        return self._bag[self._index]

    def pop(self) -> FieldPiece:
        """Draw the next piece at its spawn position and re-enable holding."""

        shape = self.draw_advancing()
        self.pushed = False
        return spawn_piece(shape)

    def swap(self, shape: Shape) -> FieldPiece:
        """Exchange ``shape`` with the front of the queue.

        Raises:
            HoldRejected: If a swap already succeeded since the last
                :meth:`pop`.
        """

        if self.pushed:
            raise HoldRejected("Hold already used for this piece")
        front = self.draw_non_advancing()
        self._bag[self._index] = shape
        self.pushed = True
        return spawn_piece(front)
