"""Line-oriented terminal frontend.

Every poll reads one command line. Recognised commands::

    up / down / left / right     move (also the vi-keys h j k l y u b n)
    esc, quit                    exit to the main menu (saves)
    alt+enter                    toggle fullscreen (no-op in a terminal)
    click X Y / rclick           pointer press on map cell (X, Y) / cancel
    look X Y                     pointer hover over map cell (X, Y)
    any single character         that key (g, i, d, v, <, c, ...)

An empty line is a no-op event; end of input behaves like Escape.
"""
from __future__ import annotations

import logging
import sys
from typing import List, Optional, Sequence, TextIO

from ..dungeon.tiles import GameMap
from ..engine import names_at
from ..interfaces import InputEvent, Key, KeyEvent, NoEvent, PointerEvent, VisibilityOracle, text_key
from ..world import GameContext

logger = logging.getLogger(__name__)

BAR_WIDTH = 20
MSG_LINES = 7

_WORD_KEYS = {
    "up": Key.UP,
    "down": Key.DOWN,
    "left": Key.LEFT,
    "right": Key.RIGHT,
    "enter": Key.ENTER,
    "esc": Key.ESCAPE,
    "escape": Key.ESCAPE,
    "quit": Key.ESCAPE,
}


def parse_command(line: str) -> InputEvent:
    cmd = line.strip()
    if not cmd:
        return NoEvent()
    if len(cmd) == 1:
        return text_key(cmd)
    parts = cmd.lower().split()
    head = parts[0]
    if head == "alt+enter" and len(parts) == 1:
        return KeyEvent(Key.ENTER, alt=True)
    if head in _WORD_KEYS and len(parts) == 1:
        return KeyEvent(_WORD_KEYS[head])
    if head == "rclick":
        return PointerEvent(-1, -1, right=True)
    if head in ("click", "look") and len(parts) == 3:
        try:
            x, y = int(parts[1]), int(parts[2])
        except ValueError:
            return NoEvent()
        return PointerEvent(x, y, left=head == "click")
    logger.debug("Unrecognised console command %r", cmd)
    return NoEvent()


def render_map(game_map: GameMap, ctx: GameContext, fov: VisibilityOracle) -> List[str]:
    """ASCII rows: visible and remembered walls as '#', visible floor as '.'."""
    rows: List[List[str]] = []
    for y in range(game_map.height):
        row = []
        for x in range(game_map.width):
            tile = game_map.tile(x, y)
            visible = fov.is_visible(x, y)
            if not visible and not tile.explored:
                row.append(" ")
            elif tile.block_sight:
                row.append("#")
            else:
                row.append("." if visible else " ")
        rows.append(row)

    # draw order: items and corpses, then monsters, the player last
    ordered = sorted(range(len(ctx.entities)), key=lambda i: (ctx.entities[i].blocks, i == 0))
    for idx in ordered:
        e = ctx.entities[idx]
        if not game_map.in_bounds(e.x, e.y):
            continue
        seen = fov.is_visible(e.x, e.y) or (e.always_visible and game_map.tile(e.x, e.y).explored)
        if seen:
            rows[e.y][e.x] = e.char
    return ["".join(r) for r in rows]


def hp_bar(hp: int, max_hp: int, width: int = BAR_WIDTH) -> str:
    filled = 0 if max_hp <= 0 else max(0, min(width, hp * width // max_hp))
    return f"HP [{'=' * filled}{' ' * (width - filled)}] {hp}/{max_hp}"


class ConsoleFrontend:
    """Renderer, input source and menu over a pair of text streams."""

    def __init__(self, stdin: Optional[TextIO] = None, stdout: Optional[TextIO] = None) -> None:
        self.stdin = stdin if stdin is not None else sys.stdin
        self.stdout = stdout if stdout is not None else sys.stdout
        self.pointer: Optional[PointerEvent] = None
        self.closed = False

    def _write(self, text: str = "") -> None:
        self.stdout.write(text + "\n")

    def _readline(self) -> Optional[str]:
        line = self.stdin.readline()
        if line == "":
            self.closed = True
            return None
        return line.rstrip("\n")

    # ---- InputSource -----------------------------------------------------
    def poll(self) -> InputEvent:
        self.stdout.write("> ")
        self.stdout.flush()
        line = self._readline()
        if line is None:
            return KeyEvent(Key.ESCAPE)
        event = parse_command(line)
        if isinstance(event, PointerEvent):
            self.pointer = event
        return event

    # ---- Renderer --------------------------------------------------------
    def render(self, ctx: GameContext, fov: VisibilityOracle) -> None:
        for row in render_map(ctx.game_map, ctx, fov):
            self._write(row.rstrip())
        fighter = ctx.player.fighter
        if fighter is not None:
            self._write(hp_bar(fighter.hp, fighter.max_hp))
        self._write(f"Dungeon level {ctx.dungeon_level}")
        if self.pointer is not None:
            names = names_at(ctx, fov, self.pointer.x, self.pointer.y)
            if names:
                self._write(names)
        for message in ctx.messages.get_recent(MSG_LINES):
            self._write(message.text)

    def toggle_fullscreen(self) -> None:
        logger.debug("Fullscreen has no meaning in a terminal; ignoring")

    # ---- Menu ------------------------------------------------------------
    def choose(self, header: str, options: Sequence[str], width: int = 50) -> Optional[int]:
        if len(options) > 26:
            raise ValueError("Cannot have a menu with more than 26 options.")
        self._write(header.rstrip("\n"))
        for i, text in enumerate(options):
            self._write(f"({chr(ord('a') + i)}) {text}")
        self.stdout.write("? ")
        self.stdout.flush()
        line = self._readline()
        if line is None:
            raise EOFError("input closed while a menu was open")
        choice = line.strip().lower()
        if not choice:
            return None
        index = ord(choice[0]) - ord("a")
        if 0 <= index < len(options):
            return index
        return None

    def message_box(self, text: str, width: int = 30) -> None:
        self.choose(text, [], width)
