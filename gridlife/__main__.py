"""Main entry point for gridlife.

This script parses command-line overrides of GameConfig and runs the
Game of Life engine.
"""

import argparse
import logging
import sys
from typing import List, Optional

from gridlife.config import GameConfig
from gridlife.core.engine import Engine
from gridlife.errors import GridLifeError

LOG = logging.getLogger("gridlife")

def build_parser() -> argparse.ArgumentParser:
    defaults = GameConfig()
    parser = argparse.ArgumentParser(prog="gridlife", description="Conway's Game of Life on a fixed-size board.")
    parser.add_argument('--board-width', type=int, default=defaults.board_width, help="Board width in cells")
    parser.add_argument('--board-height', type=int, default=defaults.board_height, help="Board height in cells")
    parser.add_argument('--screen-width', type=int, default=defaults.screen_width, help="Window width in pixels")
    parser.add_argument('--screen-height', type=int, default=defaults.screen_height, help="Window height in pixels")
    parser.add_argument('--chance', type=int, default=defaults.randomize_chance, help="Percent chance of a cell starting alive")
    parser.add_argument('--fps', type=float, default=defaults.target_fps, help="Target frames per second")
    parser.add_argument('--seed', type=int, default=None, help="Seed for the initial randomization")
    parser.add_argument('--generations', type=int, default=None, help="Stop after this many generations")
    parser.add_argument('--headless', action='store_true', help="Run without a window")
    parser.add_argument('--console', action='store_true', help="Print each generation to stdout (implies --headless)")
    parser.add_argument('--log-level', default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    return parser

def config_from_args(args: argparse.Namespace) -> GameConfig:
    return GameConfig(
        screen_width=args.screen_width,
        screen_height=args.screen_height,
        board_width=args.board_width,
        board_height=args.board_height,
        randomize_chance=args.chance,
        seed=args.seed,
        target_fps=args.fps,
        max_generations=args.generations,
        headless_mode=args.headless,
        console_mode=args.console,
    )

def main(argv: Optional[List[str]] = None) -> int:
    """Initializes and runs the Game of Life engine."""
    args = build_parser().parse_args(argv)
    # Logs go to stderr so console-mode boards on stdout stay clean.
    logging.basicConfig(level=args.log_level, format='%(levelname)s %(name)s: %(message)s')

    try:
        engine = Engine(config_from_args(args))
    except GridLifeError as e:
        LOG.error("%s", e)
        return 1

    try:
        engine.run()
    except KeyboardInterrupt:
        LOG.info("Interrupted.")
    finally:
        engine.shutdown()
    return 0

if __name__ == "__main__":
    sys.exit(main())
