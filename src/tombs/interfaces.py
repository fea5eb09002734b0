"""Collaborator contracts between the game core and its frontends.

The core never draws, reads devices or computes line of sight itself; it talks
to these protocols. Concrete implementations live in :mod:`tombs.fov` and
:mod:`tombs.frontends`.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Optional, Protocol, Sequence, Union

if TYPE_CHECKING:  # pragma: no cover
    from .dungeon.tiles import GameMap
    from .world import GameContext


class Key(str, Enum):
    """Logical keys the core understands; printable keys arrive as TEXT."""

    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    ENTER = "enter"
    ESCAPE = "escape"
    TEXT = "text"


@dataclass(frozen=True)
class NoEvent:
    """Nothing happened since the last poll."""


@dataclass(frozen=True)
class PointerEvent:
    """Pointer state in map cells; left/right flag a button press this poll."""

    x: int
    y: int
    left: bool = False
    right: bool = False


@dataclass(frozen=True)
class KeyEvent:
    key: Key
    text: str = ""
    alt: bool = False


InputEvent = Union[NoEvent, PointerEvent, KeyEvent]


def text_key(ch: str) -> KeyEvent:
    return KeyEvent(Key.TEXT, ch)


class VisibilityOracle(Protocol):
    def compute(self, game_map: "GameMap", x: int, y: int, radius: int, light_walls: bool = True) -> None:
        """Recompute the visible set from (x, y)."""

    def is_visible(self, x: int, y: int) -> bool:
        """Whether (x, y) was visible at the last compute()."""


class Renderer(Protocol):
    def render(self, ctx: "GameContext", fov: VisibilityOracle) -> None:
        """Draw map, entities, HP bar and message log."""

    def toggle_fullscreen(self) -> None:
        """Switch between windowed and fullscreen display (Alt+Enter)."""


class InputSource(Protocol):
    def poll(self) -> InputEvent:
        """Return at most one pending event, NoEvent if none."""


class Menu(Protocol):
    def choose(self, header: str, options: Sequence[str], width: int = 50) -> Optional[int]:
        """Show options and return the chosen index, or None when dismissed."""

    def message_box(self, text: str, width: int = 30) -> None:
        """Show text until acknowledged."""


class Frontend(Renderer, InputSource, Menu, Protocol):
    """Everything the turn controller needs from the presentation layer."""


__all__ = [
    "Frontend",
    "InputEvent",
    "InputSource",
    "Key",
    "KeyEvent",
    "Menu",
    "NoEvent",
    "PointerEvent",
    "Renderer",
    "VisibilityOracle",
    "text_key",
]
