"""Tetromino definitions and rotation rules.

Every piece lives in a 4x4 occupancy layout.  Row ``0`` of a layout is the top
of the bounding box, column ``0`` is its left edge.  Rotation is deliberately
simple and shape specific:

* ``O`` never changes.
* ``I`` transposes its layout (two states).
* ``S`` and ``Z`` toggle between two hard-coded layouts.
* ``T``, ``J`` and ``L`` cycle the corner ring and the edge ring of the upper
  left 3x3 block one step clockwise (four states).

There are no wall kicks; callers test the rotated layout and keep the old one
when it does not fit.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Tuple

Layout = Tuple[Tuple[int, ...], ...]

LAYOUT_SIZE = 4


class Shape(str, Enum):
    """The seven tetromino kinds plus ``NONE`` for an absent piece."""

    NONE = "."
    O = "O"
    I = "I"
    T = "T"
    J = "J"
    L = "L"
    S = "S"
    Z = "Z"


# Playable shapes in catalog order.
SHAPES: Tuple[Shape, ...] = tuple(s for s in Shape if s is not Shape.NONE)

# Shapes three cells wide with a single pointed cell; they spawn one row higher.
POINTED_SHAPES = frozenset({Shape.T, Shape.J, Shape.L})


def _layout(rows: List[List[int]]) -> Layout:
    return tuple(tuple(row) for row in rows)


BASE_LAYOUTS: Dict[Shape, Layout] = {
    Shape.NONE: _layout([[0, 0, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0]]),
    Shape.O: _layout([[0, 0, 0, 0], [0, 1, 1, 0], [0, 1, 1, 0], [0, 0, 0, 0]]),
    Shape.I: _layout([[0, 0, 0, 0], [0, 0, 0, 0], [1, 1, 1, 1], [0, 0, 0, 0]]),
    Shape.T: _layout([[0, 0, 0, 0], [1, 1, 1, 0], [0, 1, 0, 0], [0, 0, 0, 0]]),
    Shape.J: _layout([[0, 0, 0, 0], [1, 1, 1, 0], [0, 0, 1, 0], [0, 0, 0, 0]]),
    Shape.L: _layout([[0, 0, 0, 0], [1, 1, 1, 0], [1, 0, 0, 0], [0, 0, 0, 0]]),
    Shape.S: _layout([[0, 0, 0, 0], [0, 1, 1, 0], [1, 1, 0, 0], [0, 0, 0, 0]]),
    Shape.Z: _layout([[0, 0, 0, 0], [1, 1, 0, 0], [0, 1, 1, 0], [0, 0, 0, 0]]),
}

# Second state of the two-state skew shapes.
TURNED_LAYOUTS: Dict[Shape, Layout] = {
    Shape.S: _layout([[0, 1, 0, 0], [0, 1, 1, 0], [0, 0, 1, 0], [0, 0, 0, 0]]),
    Shape.Z: _layout([[0, 0, 1, 0], [0, 1, 1, 0], [0, 1, 0, 0], [0, 0, 0, 0]]),
}

# Clockwise rings inside the 3x3 block: each cell receives the value of the
# cell listed after it.
_CORNER_RING = ((0, 2), (0, 0), (2, 0), (2, 2))
_EDGE_RING = ((0, 1), (1, 0), (2, 1), (1, 2))


def _transpose(layout: Layout) -> Layout:
    return tuple(zip(*layout))


def _toggle(shape: Shape, layout: Layout) -> Layout:
    base = BASE_LAYOUTS[shape]
    return TURNED_LAYOUTS[shape] if layout == base else base


def _cycle_rings(layout: Layout) -> Layout:
    rows = [list(row) for row in layout]
    for ring in (_CORNER_RING, _EDGE_RING):
        for (dst_r, dst_c), (src_r, src_c) in zip(ring, ring[1:] + ring[:1]):
            rows[dst_r][dst_c] = layout[src_r][src_c]
    return _layout(rows)


def rotate_layout(shape: Shape, layout: Layout) -> Layout:
    """Return ``layout`` rotated one step according to ``shape``'s rule."""

    if shape in (Shape.NONE, Shape.O):
        return layout
    if shape is Shape.I:
        return _transpose(layout)
    if shape in TURNED_LAYOUTS:
        return _toggle(shape, layout)
    return _cycle_rings(layout)


# Number of rotations after which a layout returns to itself.
ROTATION_PERIOD: Dict[Shape, int] = {
    Shape.NONE: 1,
    Shape.O: 1,
    Shape.I: 2,
    Shape.S: 2,
    Shape.Z: 2,
    Shape.T: 4,
    Shape.J: 4,
    Shape.L: 4,
}


@dataclass(frozen=True)
class Tetromino:
    """Immutable pairing of a shape and its current rotation layout."""

    shape: Shape
    layout: Layout

    @classmethod
    def new(cls, shape: Shape) -> "Tetromino":
        """Return ``shape`` in its spawn orientation."""

        return cls(shape, BASE_LAYOUTS[shape])

    def rotated(self) -> "Tetromino":
        return Tetromino(self.shape, rotate_layout(self.shape, self.layout))

    def offsets(self) -> List[Tuple[int, int]]:
        """Return ``(layout_row, layout_col)`` for every occupied cell."""

        return [
            (r, c)
            for r, row in enumerate(self.layout)
            for c, value in enumerate(row)
            if value
        ]
