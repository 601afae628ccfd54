"""Headless ASCII demo for the engine.

Run with: ``python -m tetracore``

A seeded stream of random inputs is fed to the engine, one gravity tick per
frame, and the final frame is printed.  Useful as a smoke test that the whole
phase cycle runs without a display.  ``--pygame`` opens the window instead.
"""

from __future__ import annotations

from typing import Iterator, List, Optional
import argparse
import logging
import random

from .config import GameConfig, Mode
from .engine import Engine, Event
from .render import AsciiSink


LOGGER = logging.getLogger(__name__)

INPUT_EVENTS = (
    Event.MOVE_LEFT,
    Event.MOVE_RIGHT,
    Event.MOVE_DOWN,
    Event.ROTATE,
    Event.HARD_DROP,
    Event.HOLD,
)


def scripted_events(frames: int, rng: random.Random, input_rate: float = 0.1) -> Iterator[Event]:
    """Yield ``frames`` timeouts with random inputs sprinkled in, then ``EXIT``."""

    for _ in range(frames):
        if rng.random() < input_rate:
            yield rng.choice(INPUT_EVENTS)
        yield Event.TIMEOUT
    yield Event.EXIT


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--level", type=int, default=0, help="Starting level (0-29).")
    parser.add_argument("--preview", type=int, default=1, help="Upcoming pieces shown (0-4).")
    parser.add_argument(
        "--mode",
        choices=[m.value for m in Mode],
        default=Mode.MARATHON.value,
        help="Marathon runs until top-out, sprint ends after 40 lines.",
    )
    parser.add_argument("--no-ghost", dest="ghost", action="store_false", help="Hide the ghost piece.")
    parser.set_defaults(ghost=True)
    parser.add_argument("--seed", type=int, default=None, help="Seed for pieces and scripted input.")
    parser.add_argument("--frames", type=int, default=3600, help="Frames to simulate.")
    parser.add_argument("--pygame", action="store_true", help="Play in a pygame window instead.")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        help="Logging level (e.g. DEBUG, INFO, WARNING).",
    )
    return parser.parse_args(argv)


def config_from_args(args: argparse.Namespace) -> GameConfig:
    return GameConfig(
        starting_level=args.level,
        ghost_enabled=args.ghost,
        preview_size=args.preview,
        mode=Mode(args.mode),
        seed=args.seed,
    )


def run_demo(config: GameConfig, frames: int) -> str:
    """Play ``frames`` scripted frames and return the final text frame."""

    engine = Engine(config)
    engine.run(scripted_events(frames, random.Random(config.seed)))
    sink = AsciiSink()
    engine.render(sink, force=True)
    return sink.frame()


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.WARNING), format="%(message)s")
    config = config_from_args(args)
    if args.pygame:
        from .run_pygame import GameRunner

        GameRunner(config).run()
        return
    print(run_demo(config, args.frames))


if __name__ == "__main__":
    main()
