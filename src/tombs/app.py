from __future__ import annotations

import logging
import os
from typing import Optional, TextIO

from .config import GameConfig
from .engine import TurnController, new_game
from .exceptions import SaveError
from .interfaces import Frontend, VisibilityOracle
from .save import SaveManager
from .world import GameContext

logger = logging.getLogger(__name__)

MAIN_MENU_OPTIONS = ["Play a new game", "Continue last game", "Quit"]
MAIN_MENU_WIDTH = 24


def _arcade_available() -> bool:
    try:
        import arcade  # noqa: F401
        return True
    except Exception:
        return False


def play_game(
    frontend: Frontend,
    config: GameConfig,
    saves: Optional[SaveManager],
    ctx: Optional[GameContext] = None,
    fov: Optional[VisibilityOracle] = None,
    max_ticks: Optional[int] = None,
) -> TurnController:
    """Run one game (new unless ctx is given) until the player exits."""
    if ctx is None:
        ctx = new_game(config)
    controller = TurnController(ctx, frontend, fov=fov, saves=saves)
    controller.play(max_ticks=max_ticks)
    return controller


def main_menu(
    frontend: Frontend,
    config: GameConfig,
    saves: Optional[SaveManager] = None,
    fov: Optional[VisibilityOracle] = None,
) -> None:
    """Loop over the title menu until the player picks Quit (or dismisses it).

    A failed "Continue" shows a message box and returns to the menu.
    """
    saves = saves or SaveManager()
    while True:
        choice = frontend.choose("", MAIN_MENU_OPTIONS, MAIN_MENU_WIDTH)
        if choice == 0:
            logger.info("Starting a new game")
            play_game(frontend, config, saves, fov=fov)
        elif choice == 1:
            try:
                ctx = saves.load(config)
            except SaveError as exc:
                logger.warning("Could not continue: %s", exc)
                frontend.message_box("No saved game to load.", MAIN_MENU_WIDTH)
                continue
            play_game(frontend, config, saves, ctx=ctx, fov=fov)
        else:
            logger.info("Leaving main menu")
            return


def run_headless(
    config: Optional[GameConfig] = None,
    saves: Optional[SaveManager] = None,
    stdin: Optional[TextIO] = None,
    stdout: Optional[TextIO] = None,
) -> int:
    """Play in the terminal through the console frontend.

    Returns:
        Process exit code (0 on success).
    """
    from .frontends.console import ConsoleFrontend

    config = config or GameConfig()
    frontend = ConsoleFrontend(stdin=stdin, stdout=stdout)
    try:
        main_menu(frontend, config, saves)
        return 0
    except EOFError:
        logger.info("Input closed; exiting")
        return 0
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except Exception:
        logger.exception("Unhandled exception in headless loop")
        return 1


def run_gui(config: Optional[GameConfig] = None, saves: Optional[SaveManager] = None) -> int:  # pragma: no cover - needs a display
    """Play in an arcade window if arcade is installed, otherwise fall back to headless."""
    if not _arcade_available():
        logger.warning("Arcade not available; falling back to headless mode")
        return run_headless(config, saves)

    from .frontends.arcade_window import ArcadeFrontend

    config = config or GameConfig()
    frontend = ArcadeFrontend(config.generation.width, config.generation.height)
    try:
        logger.info("Launching Arcade window")
        main_menu(frontend, config, saves)
        return 0
    except EOFError:
        logger.info("Window closed")
        return 0
    except Exception:
        logger.exception("Unhandled exception in GUI loop; exiting with code 1")
        return 1
    finally:
        frontend.window.close()


def run_auto(config: Optional[GameConfig] = None, saves: Optional[SaveManager] = None) -> int:
    """Run GUI if available and not explicitly overridden, else headless.

    Honors environment overrides:
      - TOMBS_HEADLESS=1 forces headless.
      - TOMBS_GUI=1 forces GUI (if arcade importable).
    """
    if os.getenv("TOMBS_HEADLESS") == "1":
        return run_headless(config, saves)
    if os.getenv("TOMBS_GUI") == "1":
        return run_gui(config, saves)
    if _arcade_available():
        return run_gui(config, saves)
    return run_headless(config, saves)
