from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING, Dict, List, Optional, Tuple

from . import colors
from .ai import take_turn
from .combat import attack, character_sheet, check_level_up, heal
from .config import GameConfig
from .dungeon.generator import DungeonGenerator
from .entity import make_player
from .fov import FieldOfView
from .interfaces import Frontend, InputEvent, Key, KeyEvent, PointerEvent, VisibilityOracle
from .items import drop_item, item_under_player, pick_up, use_item
from .messages import MessageLog
from .rng import RandomSource
from .world import GameContext

if TYPE_CHECKING:  # pragma: no cover
    from .save import SaveManager

logger = logging.getLogger(__name__)

INVENTORY_WIDTH = 50
LEVEL_SCREEN_WIDTH = 40
CHARACTER_SCREEN_WIDTH = 30

WELCOME = "Welcome stranger! Prepare to perish in the Tombs of the Ancient Kings."

MOVE_KEYS: Dict[Key, Tuple[int, int]] = {
    Key.UP: (0, -1),
    Key.DOWN: (0, 1),
    Key.LEFT: (-1, 0),
    Key.RIGHT: (1, 0),
}

# vi-keys, including diagonals
MOVE_TEXT: Dict[str, Tuple[int, int]] = {
    "k": (0, -1),
    "j": (0, 1),
    "h": (-1, 0),
    "l": (1, 0),
    "y": (-1, -1),
    "u": (1, -1),
    "b": (-1, 1),
    "n": (1, 1),
}


class PlayerAction(Enum):
    TOOK_TURN = "took_turn"
    DIDNT_TAKE_TURN = "didnt_take_turn"
    EXIT = "exit"


def new_game(config: Optional[GameConfig] = None, rng: Optional[RandomSource] = None) -> GameContext:
    """Create the player, generate dungeon level 1 and greet the player."""
    config = config or GameConfig()
    rng = rng or RandomSource(config.seed)
    player = make_player()
    game_map, entities = DungeonGenerator(config.generation, rng).build(player)
    ctx = GameContext(
        config=config,
        game_map=game_map,
        entities=entities,
        messages=MessageLog(),
        inventory=[],
        dungeon_level=1,
        rng=rng,
    )
    ctx.messages.add(WELCOME, colors.RED)
    logger.info("New game started (%d entities on level 1)", len(entities))
    return ctx


def next_level(ctx: GameContext) -> None:
    """Rest, then replace the map and every non-player entity with a fresh level."""
    ctx.messages.add("You take a moment to rest, and recover your strength.", colors.VIOLET)
    fighter = ctx.player.fighter
    heal(ctx.player, fighter.max_hp // 2 if fighter else 0)
    ctx.messages.add(
        "After a rare moment of peace, you descend deeper into the heart of the dungeon...",
        colors.RED,
    )
    ctx.dungeon_level += 1
    ctx.game_map, ctx.entities = DungeonGenerator(ctx.config.generation, ctx.rng).build(ctx.player)
    logger.info("Descended to dungeon level %d", ctx.dungeon_level)


def names_at(ctx: GameContext, fov: VisibilityOracle, x: int, y: int) -> str:
    """Comma-separated names of visible entities on (x, y), for mouse-over text."""
    names = [e.name for e in ctx.entities if e.pos == (x, y) and fov.is_visible(x, y)]
    return ", ".join(names)


def player_move_or_attack(ctx: GameContext, dx: int, dy: int) -> None:
    player = ctx.player
    x, y = player.x + dx, player.y + dy
    target_id = ctx.fighter_at(x, y)
    if target_id is not None:
        attack(player, ctx.entities[target_id], ctx.messages)
    else:
        ctx.move_by(0, dx, dy)


class TurnController:
    """Drives the game one tick at a time.

    A tick polls one input event, refreshes visibility when the player moved,
    renders, resolves a pending level-up, dispatches the player's action and,
    if that action took a turn, lets every AI act in entity order.
    """

    def __init__(
        self,
        ctx: GameContext,
        ui: Frontend,
        fov: Optional[VisibilityOracle] = None,
        saves: Optional["SaveManager"] = None,
    ) -> None:
        self.ctx = ctx
        self.ui = ui
        self.fov: VisibilityOracle = fov or FieldOfView()
        self.saves = saves
        self.running = False
        self.pointer: Optional[Tuple[int, int]] = None
        self._previous_pos: Optional[Tuple[int, int]] = None

    # ---- Visibility ------------------------------------------------------
    def force_fov_recompute(self) -> None:
        self._previous_pos = None

    def update_fov(self) -> bool:
        """Recompute visibility iff the player moved since the last call."""
        ctx = self.ctx
        pos = ctx.player.pos
        if pos == self._previous_pos:
            return False
        cfg = ctx.config
        self.fov.compute(ctx.game_map, pos[0], pos[1], cfg.torch_radius, cfg.fov_light_walls)
        ctx.game_map.mark_explored(
            (x, y) for y in range(ctx.game_map.height) for x in range(ctx.game_map.width) if self.fov.is_visible(x, y)
        )
        self._previous_pos = pos
        return True

    # ---- Loop ------------------------------------------------------------
    def tick(self) -> PlayerAction:
        ctx = self.ctx
        event = self.ui.poll()
        self.update_fov()
        self.ui.render(ctx, self.fov)

        check_level_up(
            ctx.player,
            ctx.config,
            ctx.messages,
            lambda header, options: self.ui.choose(header, options, LEVEL_SCREEN_WIDTH),
        )

        action = self.handle_event(event)
        if action is PlayerAction.EXIT:
            self.running = False
            if self.saves is not None:
                self.saves.save(ctx)
            return action

        if ctx.player.alive and action is PlayerAction.TOOK_TURN:
            for idx in range(len(ctx.entities)):
                if ctx.entities[idx].ai is not None:
                    take_turn(ctx, idx, self.fov)
        return action

    def play(self, max_ticks: Optional[int] = None) -> None:
        """Tick until the player exits (or max_ticks elapse)."""
        self.running = True
        self.force_fov_recompute()
        ticks = 0
        while self.running:
            self.tick()
            ticks += 1
            if max_ticks is not None and ticks >= max_ticks:
                logger.debug("play() stopping after %d ticks", ticks)
                self.running = False

    # ---- Player actions --------------------------------------------------
    def handle_event(self, event: InputEvent) -> PlayerAction:
        if isinstance(event, PointerEvent):
            self.pointer = (event.x, event.y)
            return PlayerAction.DIDNT_TAKE_TURN
        if not isinstance(event, KeyEvent):
            return PlayerAction.DIDNT_TAKE_TURN

        if event.key is Key.ESCAPE:
            return PlayerAction.EXIT
        if event.key is Key.ENTER and event.alt:
            self.ui.toggle_fullscreen()
            return PlayerAction.DIDNT_TAKE_TURN
        if not self.ctx.player.alive:
            return PlayerAction.DIDNT_TAKE_TURN

        if event.key in MOVE_KEYS:
            player_move_or_attack(self.ctx, *MOVE_KEYS[event.key])
            return PlayerAction.TOOK_TURN
        if event.key is not Key.TEXT:
            return PlayerAction.DIDNT_TAKE_TURN

        text = event.text
        if text in MOVE_TEXT:
            player_move_or_attack(self.ctx, *MOVE_TEXT[text])
            return PlayerAction.TOOK_TURN
        handler = {
            "g": self.pick_up,
            "i": self.use_from_inventory,
            "d": self.drop_from_inventory,
            "v": self.descend,
            "<": self.descend,
            "c": self.show_character,
        }.get(text)
        if handler is not None:
            handler()
        return PlayerAction.DIDNT_TAKE_TURN

    def pick_up(self) -> None:
        item_id = item_under_player(self.ctx)
        if item_id is None:
            self.ctx.messages.add("There is nothing here to pick up.", colors.WHITE)
            return
        pick_up(self.ctx, item_id)

    def inventory_menu(self, header: str) -> Optional[int]:
        inventory = self.ctx.inventory
        if not inventory:
            self.ctx.messages.add("Your inventory is empty.", colors.WHITE)
            return None
        options: List[str] = [item.name for item in inventory]
        choice = self.ui.choose(header, options, INVENTORY_WIDTH)
        if choice is None or not 0 <= choice < len(inventory):
            return None
        return choice

    def use_from_inventory(self) -> None:
        idx = self.inventory_menu("Press the key next to an item to use it, or any other to cancel.\n")
        if idx is not None:
            use_item(self.ctx, idx, self.ui, self.fov)

    def drop_from_inventory(self) -> None:
        idx = self.inventory_menu("Press the key next to an item to drop it, or any other to cancel.\n")
        if idx is not None:
            drop_item(self.ctx, idx)

    def descend(self) -> None:
        ctx = self.ctx
        on_stairs = any(e.name == "stairs" and e.pos == ctx.player.pos for e in ctx.entities)
        if not on_stairs:
            ctx.messages.add("There are no stairs here.", colors.WHITE)
            return
        next_level(ctx)
        self.force_fov_recompute()
        self.update_fov()

    def show_character(self) -> None:
        self.ui.message_box(character_sheet(self.ctx.player, self.ctx.config), CHARACTER_SCREEN_WIDTH)
