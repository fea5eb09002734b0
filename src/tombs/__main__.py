from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from . import __version__
from .app import run_auto, run_gui, run_headless
from .config import GameConfig
from .save import SaveManager

logger = logging.getLogger(__name__)


def _setup_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(
        level=level,
        format="[%(asctime)s] %(levelname)s %(name)s: %(message)s",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tombs",
        description="Tombs of the Ancient Kings - a turn-based dungeon crawler",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--gui", action="store_true", help="Force GUI mode (Arcade)")
    mode.add_argument("--headless", action="store_true", help="Force headless mode (console)")
    parser.add_argument("--seed", type=int, default=None, help="Seed the dungeon generator")
    parser.add_argument("--config", type=Path, default=None, help="JSON or YAML config file")
    parser.add_argument("--save-dir", type=Path, default=None, help="Directory holding savegame.json")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Increase log verbosity (-v, -vv)")
    return parser


def load_config(args: argparse.Namespace) -> GameConfig:
    """File settings first, then TOMBS_* environment, then command-line flags."""
    config = GameConfig.from_file(args.config) if args.config else GameConfig()
    config.apply_env()
    if args.seed is not None:
        config.seed = args.seed
    return config


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _setup_logging(args.verbose)

    try:
        config = load_config(args)
    except (OSError, ValueError) as exc:
        logger.error("Invalid configuration: %s", exc)
        return 2
    saves = SaveManager(args.save_dir)
    logger.debug("Save file: %s", saves.path)

    # Honor CLI over env vars
    if args.gui:
        os.environ["TOMBS_GUI"] = "1"
        os.environ.pop("TOMBS_HEADLESS", None)
        return run_gui(config, saves)

    if args.headless:
        os.environ["TOMBS_HEADLESS"] = "1"
        os.environ.pop("TOMBS_GUI", None)
        return run_headless(config, saves)

    return run_auto(config, saves)


if __name__ == "__main__":
    sys.exit(main())
