"""Gymnasium-compatible wrapper around the frame engine.

Each action is one engine event (every :class:`~tetracore.engine.Event` except
``EXIT``) followed by ``frames_per_step`` gravity ticks.  The observation is a
flat vector suitable for an MLP policy:

  - visible occupancy (20x10=200)
  - active piece one-hot (7)
  - preview one-hots (4x7=28), zero-padded when the preview is shorter

The reward is the score gained during the step.  The episode terminates when
the engine reaches game over.
"""

from __future__ import annotations

from typing import Dict, Optional
import random

import gymnasium as gym
import numpy as np
from gymnasium import spaces

from .board import VISIBLE_HEIGHT, WIDTH
from .config import MAX_PREVIEW, GameConfig
from .engine import Engine, Event
from .render import playfield_lines
from .tetromino import SHAPES

ACTIONS = tuple(e for e in Event if e is not Event.EXIT)
_SHAPE_INDEX = {s: i for i, s in enumerate(SHAPES)}
OBS_SIZE = VISIBLE_HEIGHT * WIDTH + len(SHAPES) * (1 + MAX_PREVIEW)


class TetrisEngineEnv(gym.Env):
    metadata = {
        "render_modes": ["ansi"],
        "render_fps": 60,
    }

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        *,
        frames_per_step: int = 1,
        max_steps: Optional[int] = None,
    ) -> None:
        super().__init__()
        self.config = config or GameConfig(preview_size=MAX_PREVIEW)
        self.frames_per_step = frames_per_step
        self.action_space = spaces.Discrete(len(ACTIONS))
        self.observation_space = spaces.Box(
            low=0.0, high=1.0, shape=(OBS_SIZE,), dtype=np.float32
        )
        self._engine = Engine(self.config)
        self._steps = 0
        self._max_steps = max_steps

    @property
    def engine(self) -> Engine:
        return self._engine

    # ----------------------- Env API -----------------------
    def reset(self, *, seed: Optional[int] = None, options: Optional[Dict] = None):
        super().reset(seed=seed)
        self._engine = Engine(self.config, rng=self._rng_for(seed))
        # The first tick spawns the opening piece.
        self._engine.drive(Event.TIMEOUT)
        self._steps = 0
        return self._observe(), self._info()

    def step(self, action: int):
        before = self._engine.score.score
        self._engine.drive(ACTIONS[int(action)])
        for _ in range(self.frames_per_step):
            self._engine.drive(Event.TIMEOUT)
        self._steps += 1
        reward = float(self._engine.score.score - before)
        terminated = self._engine.finished
        truncated = self._max_steps is not None and self._steps >= self._max_steps
        return self._observe(), reward, terminated, truncated, self._info()

    def render(self):
        snapshot = self._engine.playfield_snapshot()
        return "\n".join(playfield_lines(snapshot))

    def close(self):
        return None

    # -------------------- Helpers -------------------------
    def _rng_for(self, seed: Optional[int]) -> random.Random:
        if seed is not None:
            return random.Random(seed)
        return random.Random(int(self.np_random.integers(0, 2**31 - 1)))

    def _observe(self) -> np.ndarray:
        board = (self._engine.board.visible_rows() != 0).astype(np.float32).reshape(-1)
        active = np.zeros((len(SHAPES),), dtype=np.float32)
        shape = self._engine.controller.active.shape
        if shape in _SHAPE_INDEX:
            active[_SHAPE_INDEX[shape]] = 1.0
        preview = np.zeros((MAX_PREVIEW, len(SHAPES)), dtype=np.float32)
        for slot, upcoming in enumerate(self._engine.preview()):
            preview[slot, _SHAPE_INDEX[upcoming]] = 1.0
        return np.concatenate([board, active, preview.reshape(-1)], dtype=np.float32)

    def _info(self) -> Dict:
        score = self._engine.score
        return {
            "phase": self._engine.phase.value,
            "score": score.score,
            "lines": score.lines_cleared,
            "level": score.level,
        }
