"""Read-only snapshots and the render sink interface.

The engine never draws anything itself.  :meth:`Engine.render
<tetracore.engine.Engine.render>` hands snapshots of the fragments that changed
to any object implementing :class:`RenderSink`.  :class:`AsciiSink` is the
text implementation used by ``python -m tetracore`` and the tests.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Protocol, Sequence, Tuple

from .board import Layer
from .tetromino import Shape

Cell = Tuple[Shape, Layer]


@dataclass(frozen=True)
class PlayfieldSnapshot:
    """Visible rows (row ``0`` is the floor) and the rows flashing for a clear."""

    rows: Tuple[Tuple[Cell, ...], ...]
    highlighted_rows: Tuple[int, ...] = ()


@dataclass(frozen=True)
class ScoreSnapshot:
    level: int
    score: int
    lines: int
    clear_counts: Tuple[int, int, int, int]


@dataclass(frozen=True)
class PlaytimeSnapshot:
    minutes: int
    seconds: int
    centis: int


@dataclass(frozen=True)
class EndgameSnapshot:
    finished: bool
    goal_reached: bool


class RenderSink(Protocol):
    """Anything able to display the engine's fragments."""

    def show_playfield(self, snapshot: PlayfieldSnapshot) -> None: ...

    def show_preview(self, shapes: Sequence[Shape]) -> None: ...

    def show_score(self, snapshot: ScoreSnapshot) -> None: ...

    def show_playtime(self, snapshot: PlaytimeSnapshot) -> None: ...

    def show_endgame(self, snapshot: EndgameSnapshot) -> None: ...


GHOST_CHAR = "+"
HIGHLIGHT_CHAR = "="


def cell_char(cell: Cell) -> str:
    """Return the text glyph for a resolved cell."""

    shape, layer = cell
    if shape is Shape.NONE:
        return " "
    if layer is Layer.ACTIVE:
        return shape.value.upper()
    if layer is Layer.GHOST:
        return GHOST_CHAR
    return shape.value.lower()


def playfield_lines(snapshot: PlayfieldSnapshot) -> List[str]:
    """Return the playfield as bordered text, top row first."""

    width = len(snapshot.rows[0]) if snapshot.rows else 0
    border = "+" + "-" * width + "+"
    lines = [border]
    for index in range(len(snapshot.rows) - 1, -1, -1):
        if index in snapshot.highlighted_rows:
            body = HIGHLIGHT_CHAR * width
        else:
            body = "".join(cell_char(cell) for cell in snapshot.rows[index])
        lines.append("|" + body + "|")
    lines.append(border)
    return lines


class AsciiSink:
    """Keep the latest text rendering of every fragment."""

    def __init__(self) -> None:
        self.playfield: List[str] = []
        self.preview = ""
        self.score = ""
        self.playtime = ""
        self.endgame = ""
        self.updates: List[str] = []

    def show_playfield(self, snapshot: PlayfieldSnapshot) -> None:
        self.playfield = playfield_lines(snapshot)
        self.updates.append("playfield")

    def show_preview(self, shapes: Sequence[Shape]) -> None:
        self.preview = "Next: " + " ".join(s.value for s in shapes)
        self.updates.append("preview")

    def show_score(self, snapshot: ScoreSnapshot) -> None:
        singles, doubles, triples, tetrises = snapshot.clear_counts
        self.score = (
            f"Level: {snapshot.level}  Score: {snapshot.score}  Lines: {snapshot.lines}"
            f"  [{singles}/{doubles}/{triples}/{tetrises}]"
        )
        self.updates.append("score")

    def show_playtime(self, snapshot: PlaytimeSnapshot) -> None:
        self.playtime = f"Time: {snapshot.minutes:02d}:{snapshot.seconds:02d}.{snapshot.centis:02d}"
        self.updates.append("playtime")

    def show_endgame(self, snapshot: EndgameSnapshot) -> None:
        if not snapshot.finished:
            self.endgame = ""
        elif snapshot.goal_reached:
            self.endgame = "FINISHED"
        else:
            self.endgame = "GAME OVER"
        self.updates.append("endgame")

    def frame(self) -> str:
        """Compose all fragments into one text frame."""

        parts = list(self.playfield)
        parts.extend(p for p in (self.preview, self.score, self.playtime, self.endgame) if p)
        return "\n".join(parts)
