"""Arcade window frontend.

The turn controller pulls input, so instead of ``arcade.run()`` this frontend
pumps the window itself: ``poll`` dispatches pending window events and hands
back one queued InputEvent, ``render`` draws and flips the back buffer.
"""
from __future__ import annotations

import logging
import time
from collections import deque
from typing import Deque, Optional, Sequence

from .. import colors
from ..engine import names_at
from ..interfaces import InputEvent, Key, KeyEvent, NoEvent, PointerEvent, VisibilityOracle, text_key
from ..world import GameContext

logger = logging.getLogger(__name__)

CELL = 12
PANEL_ROWS = 7
BAR_WIDTH = 20
MSG_X = BAR_WIDTH + 2
FONT_SIZE = 9
POLL_SLEEP = 1 / 60


def create_window(map_width: int = 80, map_height: int = 43, title: str = "Tombs of the Ancient Kings"):  # pragma: no cover - needs a display
    import arcade

    class TombsWindow(arcade.Window):
        def __init__(self) -> None:
            super().__init__(map_width * CELL, (map_height + PANEL_ROWS) * CELL, title=title)
            arcade.set_background_color(arcade.color.BLACK)
            self.map_height = map_height
            self.events: Deque[InputEvent] = deque()
            self.closed = False

        def to_cell(self, x: float, y: float):
            cx = int(x // CELL)
            cy = self.map_height - 1 - int((y - PANEL_ROWS * CELL) // CELL)
            return cx, cy

        def on_key_press(self, symbol: int, modifiers: int):
            keys = {
                arcade.key.UP: Key.UP,
                arcade.key.DOWN: Key.DOWN,
                arcade.key.LEFT: Key.LEFT,
                arcade.key.RIGHT: Key.RIGHT,
                arcade.key.ENTER: Key.ENTER,
                arcade.key.ESCAPE: Key.ESCAPE,
            }
            if symbol in keys:
                self.events.append(KeyEvent(keys[symbol], alt=bool(modifiers & arcade.key.MOD_ALT)))

        def on_text(self, text: str):
            if text.isprintable() and not text.isspace():
                self.events.append(text_key(text))

        def on_mouse_motion(self, x: float, y: float, dx: float, dy: float):
            self.events.append(PointerEvent(*self.to_cell(x, y)))

        def on_mouse_press(self, x: float, y: float, button: int, modifiers: int):
            cx, cy = self.to_cell(x, y)
            self.events.append(
                PointerEvent(
                    cx,
                    cy,
                    left=button == arcade.MOUSE_BUTTON_LEFT,
                    right=button == arcade.MOUSE_BUTTON_RIGHT,
                )
            )

        def on_close(self):
            self.closed = True
            self.events.append(KeyEvent(Key.ESCAPE))

    return TombsWindow()


class ArcadeFrontend:  # pragma: no cover - needs a display
    """Renderer, input source and menus drawn into an arcade window."""

    def __init__(self, map_width: int = 80, map_height: int = 43) -> None:
        import arcade

        self._arcade = arcade
        self.window = create_window(map_width, map_height)
        self.pointer: Optional[PointerEvent] = None
        self._last_frame: Optional[GameContext] = None
        self._last_fov: Optional[VisibilityOracle] = None

    # ---- InputSource -----------------------------------------------------
    def _pump(self) -> None:
        if not self.window.closed:
            self.window.dispatch_events()

    def poll(self) -> InputEvent:
        self._pump()
        if not self.window.events and self.window.closed:
            return KeyEvent(Key.ESCAPE)
        if not self.window.events:
            time.sleep(POLL_SLEEP)
            return NoEvent()
        event = self.window.events.popleft()
        if isinstance(event, PointerEvent):
            self.pointer = event
        return event

    def wait_key(self) -> KeyEvent:
        while True:
            if self.window.closed and not self.window.events:
                raise EOFError("window closed while a menu was open")
            event = self.poll()
            if isinstance(event, KeyEvent):
                return event

    # ---- Renderer --------------------------------------------------------
    def _cell_rect(self, x: int, y: int, color) -> None:
        left = x * CELL
        top = (self.window.map_height - y + PANEL_ROWS) * CELL
        self._arcade.draw_lrtb_rectangle_filled(left, left + CELL, top, top - CELL, color)

    def _text(self, text: str, col: int, row: int, color=colors.WHITE) -> None:
        # row counts down from the top of the window
        y = self.window.height - (row + 1) * CELL
        self._arcade.draw_text(text, col * CELL, y, color, FONT_SIZE)

    def _draw_world(self, ctx: GameContext, fov: VisibilityOracle) -> None:
        game_map = ctx.game_map
        for y in range(game_map.height):
            for x in range(game_map.width):
                tile = game_map.tile(x, y)
                visible = fov.is_visible(x, y)
                if visible:
                    color = colors.LIGHT_WALL if tile.block_sight else colors.LIGHT_GROUND
                elif tile.explored:
                    color = colors.DARK_WALL if tile.block_sight else colors.DARK_GROUND
                else:
                    continue
                self._cell_rect(x, y, color)

        ordered = sorted(range(len(ctx.entities)), key=lambda i: (ctx.entities[i].blocks, i == 0))
        for idx in ordered:
            e = ctx.entities[idx]
            if not game_map.in_bounds(e.x, e.y):
                continue
            if fov.is_visible(e.x, e.y) or (e.always_visible and game_map.tile(e.x, e.y).explored):
                self._text(e.char, e.x, e.y, e.color)

        panel_top = game_map.height + 1
        fighter = ctx.player.fighter
        if fighter is not None:
            self._bar(1, panel_top, fighter.hp, fighter.max_hp)
        self._text(f"Dungeon level {ctx.dungeon_level}", 1, panel_top + 2, colors.LIGHT_GREY)
        if self.pointer is not None:
            self._text(names_at(ctx, fov, self.pointer.x, self.pointer.y), 1, panel_top - 1, colors.LIGHT_GREY)
        for i, message in enumerate(ctx.messages.get_recent(PANEL_ROWS - 1)):
            self._text(message.text, MSG_X, panel_top + i, message.color)

    def _bar(self, col: int, row: int, value: int, maximum: int) -> None:
        filled = 0 if maximum <= 0 else max(0, min(BAR_WIDTH, value * BAR_WIDTH // maximum))
        left = col * CELL
        top = self.window.height - row * CELL
        self._arcade.draw_lrtb_rectangle_filled(left, left + BAR_WIDTH * CELL, top, top - CELL, colors.DARKER_RED)
        if filled:
            self._arcade.draw_lrtb_rectangle_filled(left, left + filled * CELL, top, top - CELL, colors.LIGHT_RED)
        self._text(f"HP: {value}/{maximum}", col + 1, row, colors.WHITE)

    def render(self, ctx: GameContext, fov: VisibilityOracle) -> None:
        self._last_frame, self._last_fov = ctx, fov
        self.window.switch_to()
        self.window.clear()
        self._draw_world(ctx, fov)
        self.window.flip()

    def toggle_fullscreen(self) -> None:
        self.window.set_fullscreen(not self.window.fullscreen)
        logger.info("Fullscreen %s", "on" if self.window.fullscreen else "off")

    # ---- Menu ------------------------------------------------------------
    def choose(self, header: str, options: Sequence[str], width: int = 50) -> Optional[int]:
        if len(options) > 26:
            raise ValueError("Cannot have a menu with more than 26 options.")
        lines = header.rstrip("\n").split("\n") + [f"({chr(ord('a') + i)}) {t}" for i, t in enumerate(options)]
        self.window.switch_to()
        self.window.clear()
        if self._last_frame is not None and self._last_fov is not None:
            self._draw_world(self._last_frame, self._last_fov)
        cols = self.window.width // CELL
        left = max(0, (cols - width) // 2)
        top_row = max(0, (self.window.height // CELL - len(lines)) // 2)
        self._arcade.draw_lrtb_rectangle_filled(
            left * CELL,
            (left + width) * CELL,
            self.window.height - top_row * CELL,
            self.window.height - (top_row + len(lines)) * CELL,
            (*colors.BLACK, 180),
        )
        for i, line in enumerate(lines):
            self._text(line[:width], left, top_row + i)
        self.window.flip()

        event = self.wait_key()
        if event.key is Key.ENTER and event.alt:
            self.toggle_fullscreen()
            return None
        if event.key is not Key.TEXT:
            return None
        index = ord(event.text.lower()) - ord("a")
        if 0 <= index < len(options):
            return index
        return None

    def message_box(self, text: str, width: int = 30) -> None:
        self.choose(text, [], width)
