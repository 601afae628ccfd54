"""Simple pygame front-end for the engine.

The window is a :class:`~tetracore.render.RenderSink`; the loop turns key
presses into engine events, adds one ``TIMEOUT`` per frame and feeds them in
arrival order.  Run with ``python -m tetracore.run_pygame``.
"""

from __future__ import annotations

from collections import deque
from typing import Deque, Dict, Optional, Sequence
import logging

import pygame

from .board import VISIBLE_HEIGHT, WIDTH, Layer
from .config import GameConfig
from .engine import Engine, Event
from .render import (
    EndgameSnapshot,
    PlayfieldSnapshot,
    PlaytimeSnapshot,
    ScoreSnapshot,
)
from .tetromino import Shape
from .timing import FRAME_RATE


LOGGER = logging.getLogger(__name__)

# Size of a single board cell in pixels
CELL_SIZE = 30
# Width of the side panel holding preview and score
PANEL_WIDTH = 6 * CELL_SIZE

SHAPE_COLORS = {
    Shape.I: (0, 255, 255),
    Shape.O: (255, 255, 0),
    Shape.T: (128, 0, 128),
    Shape.S: (0, 255, 0),
    Shape.Z: (255, 0, 0),
    Shape.J: (0, 0, 255),
    Shape.L: (255, 165, 0),
}
BACKGROUND = (0, 0, 0)
GRID_LINE = (50, 50, 50)
GHOST_COLOR = (90, 90, 90)
FLASH_COLOR = (255, 255, 255)
TEXT_COLOR = (230, 230, 240)

KEY_EVENTS: Dict[int, Event] = {
    pygame.K_LEFT: Event.MOVE_LEFT,
    pygame.K_RIGHT: Event.MOVE_RIGHT,
    pygame.K_DOWN: Event.MOVE_DOWN,
    pygame.K_UP: Event.ROTATE,
    pygame.K_SPACE: Event.HARD_DROP,
    pygame.K_c: Event.HOLD,
    pygame.K_LSHIFT: Event.HOLD,
    pygame.K_ESCAPE: Event.EXIT,
}


class PygameSink:
    """Draw engine fragments onto a pygame surface."""

    def __init__(self, screen: pygame.Surface) -> None:
        self.screen = screen
        self.font = pygame.font.Font(None, 24)
        self._panel_x = WIDTH * CELL_SIZE

    def _cell_rect(self, row: int, col: int) -> pygame.Rect:
        top = (VISIBLE_HEIGHT - 1 - row) * CELL_SIZE
        return pygame.Rect(col * CELL_SIZE, top, CELL_SIZE, CELL_SIZE)

    def _text(self, text: str, line: int) -> None:
        area = pygame.Rect(self._panel_x, line * CELL_SIZE, PANEL_WIDTH, CELL_SIZE)
        pygame.draw.rect(self.screen, BACKGROUND, area)
        surface = self.font.render(text, True, TEXT_COLOR)
        self.screen.blit(surface, (self._panel_x + 8, line * CELL_SIZE + 6))

    def show_playfield(self, snapshot: PlayfieldSnapshot) -> None:
        for row, cells in enumerate(snapshot.rows):
            for col, (shape, layer) in enumerate(cells):
                rect = self._cell_rect(row, col)
                if row in snapshot.highlighted_rows:
                    color = FLASH_COLOR
                elif shape is Shape.NONE:
                    color = BACKGROUND
                elif layer is Layer.GHOST:
                    color = GHOST_COLOR
                else:
                    color = SHAPE_COLORS[shape]
                pygame.draw.rect(self.screen, color, rect)
                pygame.draw.rect(self.screen, GRID_LINE, rect, 1)

    def show_preview(self, shapes: Sequence[Shape]) -> None:
        self._text("Next: " + " ".join(s.value for s in shapes), 0)

    def show_score(self, snapshot: ScoreSnapshot) -> None:
        self._text(f"Level: {snapshot.level}", 2)
        self._text(f"Score: {snapshot.score}", 3)
        self._text(f"Lines: {snapshot.lines}", 4)
        for size, count in enumerate(snapshot.clear_counts, start=1):
            self._text(f"x{size}: {count}", 4 + size)

    def show_playtime(self, snapshot: PlaytimeSnapshot) -> None:
        self._text(
            f"Time: {snapshot.minutes:02d}:{snapshot.seconds:02d}.{snapshot.centis:02d}", 10
        )

    def show_endgame(self, snapshot: EndgameSnapshot) -> None:
        if snapshot.finished:
            self._text("FINISHED" if snapshot.goal_reached else "GAME OVER", 12)


class GameRunner:
    """Run one game in a pygame window until exit."""

    def __init__(self, config: Optional[GameConfig] = None) -> None:
        self.config = config or GameConfig()
        self.engine: Optional[Engine] = None
        self.events: Deque[Event] = deque()

    def _collect_input(self) -> None:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.events.append(Event.EXIT)
            elif event.type == pygame.KEYDOWN and event.key in KEY_EVENTS:
                self.events.append(KEY_EVENTS[event.key])

    def run(self) -> None:
        pygame.init()
        screen = pygame.display.set_mode(
            (WIDTH * CELL_SIZE + PANEL_WIDTH, VISIBLE_HEIGHT * CELL_SIZE)
        )
        pygame.display.set_caption("tetracore")
        clock = pygame.time.Clock()
        sink = PygameSink(screen)
        self.engine = Engine(self.config)
        self.engine.render(sink, force=True)
        LOGGER.info("Game started")

        while not self.engine.exit_requested:
            clock.tick(FRAME_RATE)
            self._collect_input()
            self.events.append(Event.TIMEOUT)
            while self.events and not self.engine.exit_requested:
                self.engine.drive(self.events.popleft())
            self.engine.render(sink)
            pygame.display.flip()

        pygame.quit()
        LOGGER.info("Game stopped")


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(message)s")
    GameRunner().run()


if __name__ == "__main__":  # pragma: no cover - manual execution only
    main()
