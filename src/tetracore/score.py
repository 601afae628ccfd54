"""Score, level and line statistics."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from .config import MAX_LEVEL, Mode


SPRINT_LINE_GOAL = 40

# Points per simultaneous clear at level 0; four or more lines score as four.
LINE_SCORES = {1: 40, 2: 100, 3: 300, 4: 1200}


def score_for(level: int, lines: int) -> int:
    """Return the points for clearing ``lines`` rows at once on ``level``."""

    if lines <= 0:
        return 0
    return LINE_SCORES[min(lines, 4)] * (level + 1)


@dataclass
class ScoreBoard:
    """Mutable scoring state for a game session."""

    level: int = 0
    mode: Mode = Mode.MARATHON
    score: int = 0
    lines_cleared: int = 0
    clear_counts: List[int] = field(default_factory=lambda: [0, 0, 0, 0])

    def __post_init__(self) -> None:
        self.level = max(0, min(MAX_LEVEL, self.level))

    def update(self, lines: int) -> int:
        """Account for ``lines`` rows cleared by one piece.

        The level never drops below the starting level and otherwise follows
        ``lines_cleared // 10``.  Returns the points awarded.
        """

        if lines <= 0:
            return 0
        self.lines_cleared += lines
        self.level = max(self.level, self.lines_cleared // 10)
        points = score_for(self.level, lines)
        self.score += points
        self.clear_counts[min(lines, 4) - 1] += 1
        return points

    def goal_complete(self) -> bool:
        if self.mode is Mode.SPRINT:
            return self.lines_cleared >= SPRINT_LINE_GOAL
        return False
