"""Rules engine for a falling-block puzzle game."""

from .board import Board, CollisionError, Coords, FieldPiece, Layer
from .config import GameConfig, Mode
from .controller import Direction, LineBuffer, PieceController
from .engine import Engine, Event, Phase
from .randomizer import HoldRejected, NextQueue
from .render import AsciiSink, RenderSink
from .score import ScoreBoard, score_for
from .tetromino import Shape, Tetromino, rotate_layout
from .timing import GravityTimer, PlayTime, gravity_ticks

__all__ = [
    "Board",
    "CollisionError",
    "Coords",
    "FieldPiece",
    "Layer",
    "GameConfig",
    "Mode",
    "Direction",
    "LineBuffer",
    "PieceController",
    "Engine",
    "Event",
    "Phase",
    "HoldRejected",
    "NextQueue",
    "AsciiSink",
    "RenderSink",
    "ScoreBoard",
    "score_for",
    "Shape",
    "Tetromino",
    "rotate_layout",
    "GravityTimer",
    "PlayTime",
    "gravity_ticks",
]
