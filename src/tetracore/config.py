"""Construction-time game settings."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


MAX_LEVEL = 29
MAX_PREVIEW = 4


class Mode(str, Enum):
    """Game modes.

    ``MARATHON`` runs until the stack tops out, ``SPRINT`` ends once the line
    goal is reached.
    """

    MARATHON = "marathon"
    SPRINT = "sprint"


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, int(value)))


@dataclass(frozen=True)
class GameConfig:
    """Settings fixed for the lifetime of one game.

    ``starting_level`` and ``preview_size`` are clamped into their valid
    ranges instead of being rejected.
    """

    starting_level: int = 0
    ghost_enabled: bool = True
    preview_size: int = 1
    mode: Mode = Mode.MARATHON
    seed: Optional[int] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "starting_level", _clamp(self.starting_level, 0, MAX_LEVEL))
        object.__setattr__(self, "preview_size", _clamp(self.preview_size, 0, MAX_PREVIEW))
        object.__setattr__(self, "mode", Mode(self.mode))
