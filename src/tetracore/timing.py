"""Frame based gravity, lock delay and play time.

All durations are counted in engine ticks, one tick per ``Timeout`` event.
Drivers emit ``FRAME_RATE`` ticks per second.
"""

from __future__ import annotations

from typing import Tuple


FRAME_RATE = 60
LOCK_DELAY_TICKS = FRAME_RATE // 2


def gravity_ticks(level: int) -> int:
    """Return how many ticks the piece waits per row at ``level``.

    The table follows the classic NES speed curve and reaches one row per
    tick from level 29 onwards.
    """

    if level <= 8:
        return 48 - 5 * max(level, 0)
    if level == 9:
        return 6
    if level <= 12:
        return 5
    if level <= 15:
        return 4
    if level <= 18:
        return 3
    if level <= 28:
        return 2
    return 1


class GravityTimer:
    """Count ticks until the next gravity drop."""

    def __init__(self) -> None:
        self.frame_counter = 0
        self._lock_delay_armed = False

    def tick(self, level: int) -> bool:
        """Advance one tick and return ``True`` when a drop is due.

        The first tick after :meth:`lock_delay` only rewinds the counter so
        that ``LOCK_DELAY_TICKS`` more ticks pass before the next drop.
        """

        if self._lock_delay_armed:
            self._lock_delay_armed = False
            self.frame_counter = gravity_ticks(level) - LOCK_DELAY_TICKS
            return False

        self.frame_counter += 1
        if self.frame_counter >= gravity_ticks(level):
            self.frame_counter = 0
            return True
        return False

    def lock_delay(self) -> None:
        self._lock_delay_armed = True

    def reset(self) -> None:
        self.frame_counter = 0
        self._lock_delay_armed = False


class PlayTime:
    """Elapsed play time in ticks."""

    def __init__(self) -> None:
        self.frames = 0

    def tick(self) -> None:
        self.frames += 1

    def split(self) -> Tuple[int, int, int]:
        """Return ``(minutes, seconds, centiseconds)``."""

        minutes = self.frames // FRAME_RATE // 60
        seconds = self.frames // FRAME_RATE % 60
        centis = (self.frames % FRAME_RATE) * 100 // FRAME_RATE
        return minutes, seconds, centis
