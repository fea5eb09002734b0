from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Dict, Optional, Tuple

from . import colors
from .ai import confuse
from .combat import heal, take_damage
from .entity import PLAYER, ItemKind
from .interfaces import Frontend, KeyEvent, Key, PointerEvent, VisibilityOracle
from .world import GameContext

logger = logging.getLogger(__name__)


class UseResult(Enum):
    USED_UP = "used_up"
    CANCELLED = "cancelled"


# ---- Inventory --------------------------------------------------------------


def item_under_player(ctx: GameContext) -> Optional[int]:
    px, py = ctx.player.pos
    for idx, e in enumerate(ctx.entities):
        if e.item is not None and e.x == px and e.y == py:
            return idx
    return None


def pick_up(ctx: GameContext, entity_id: int) -> bool:
    """Move a floor item into the inventory unless the inventory is full."""
    item = ctx.entities[entity_id]
    if len(ctx.inventory) >= ctx.config.inventory_capacity:
        ctx.messages.add(f"Your inventory is full, cannot pick up {item.name}.", colors.RED)
        return False
    ctx.remove_entity(entity_id)
    ctx.inventory.append(item)
    ctx.messages.add(f"You picked up a {item.name}!", colors.GREEN)
    logger.debug("Picked up %s (%d/%d)", item.name, len(ctx.inventory), ctx.config.inventory_capacity)
    return True


def drop_item(ctx: GameContext, inventory_index: int) -> None:
    item = ctx.inventory.pop(inventory_index)
    item.set_pos(*ctx.player.pos)
    ctx.entities.append(item)
    ctx.messages.add(f"You dropped a {item.name}.", colors.YELLOW)


# ---- Use --------------------------------------------------------------------


def use_item(ctx: GameContext, inventory_index: int, ui: Frontend, fov: VisibilityOracle) -> UseResult:
    """Apply the item's effect; consumed only when the effect went through."""
    item = ctx.inventory[inventory_index]
    if item.item is None:
        ctx.messages.add(f"The {item.name} cannot be used.", colors.WHITE)
        return UseResult.CANCELLED

    effect = ITEM_EFFECTS[item.item]
    result = effect(ctx, ui, fov)
    if result is UseResult.USED_UP:
        ctx.inventory.pop(inventory_index)
        logger.debug("Used up %s", item.name)
    else:
        ctx.messages.add("Cancelled", colors.WHITE)
    return result


def cast_heal(ctx: GameContext, ui: Frontend, fov: VisibilityOracle) -> UseResult:
    fighter = ctx.player.fighter
    if fighter is None:
        return UseResult.CANCELLED
    if fighter.hp >= fighter.max_hp:
        ctx.messages.add("You are already at full health.", colors.RED)
        return UseResult.CANCELLED
    ctx.messages.add("Your wounds start to feel better!", colors.LIGHT_VIOLET)
    heal(ctx.player, ctx.config.heal_amount)
    return UseResult.USED_UP


def cast_lightning(ctx: GameContext, ui: Frontend, fov: VisibilityOracle) -> UseResult:
    monster_id = closest_monster(ctx, fov, ctx.config.lightning_range)
    if monster_id is None:
        ctx.messages.add("No enemy is close enough to strike.", colors.RED)
        return UseResult.CANCELLED

    monster = ctx.entities[monster_id]
    damage = ctx.config.lightning_damage
    ctx.messages.add(
        f"A lightning bolt strikes the {monster.name} with a loud thunder! "
        f"The damage is {damage} hit points.",
        colors.LIGHT_BLUE,
    )
    xp = take_damage(monster, damage, ctx.messages)
    if xp is not None and ctx.player.fighter is not None:
        ctx.player.fighter.xp += xp
    return UseResult.USED_UP


def cast_confuse(ctx: GameContext, ui: Frontend, fov: VisibilityOracle) -> UseResult:
    ctx.messages.add("Left-click an enemy to confuse it, or right-click to cancel.", colors.LIGHT_CYAN)
    monster_id = target_monster(ctx, ui, fov, float(ctx.config.confuse_range))
    if monster_id is None:
        ctx.messages.add("No enemy is close enough to strike.", colors.RED)
        return UseResult.CANCELLED

    monster = ctx.entities[monster_id]
    confuse(monster, ctx.config.confuse_num_turns)
    ctx.messages.add(
        f"The eyes of the {monster.name} look vacant, as it starts to stumble around!",
        colors.LIGHT_GREEN,
    )
    return UseResult.USED_UP


ITEM_EFFECTS: Dict[ItemKind, Callable[[GameContext, Frontend, VisibilityOracle], UseResult]] = {
    ItemKind.HEAL: cast_heal,
    ItemKind.LIGHTNING: cast_lightning,
    ItemKind.CONFUSE: cast_confuse,
}


# ---- Targeting --------------------------------------------------------------


def closest_monster(ctx: GameContext, fov: VisibilityOracle, max_range: int) -> Optional[int]:
    """Nearest visible entity with both a fighter and an AI.

    The reach is any distance strictly below max_range + 1, so with range 5 a
    monster 5.83 tiles away is still struck while one 6 tiles away is not.
    """
    player = ctx.player
    closest: Optional[int] = None
    closest_dist = float(max_range + 1)
    for idx, e in enumerate(ctx.entities):
        if idx == PLAYER or e.fighter is None or e.ai is None:
            continue
        if not fov.is_visible(e.x, e.y):
            continue
        dist = player.distance_to(e)
        if dist < closest_dist:
            closest = idx
            closest_dist = dist
    return closest


def target_tile(
    ctx: GameContext,
    ui: Frontend,
    fov: VisibilityOracle,
    max_range: Optional[float] = None,
) -> Optional[Tuple[int, int]]:
    """Block until a visible, in-range cell is left-clicked (returned) or the
    player right-clicks / presses Escape (None)."""
    while True:
        ui.render(ctx, fov)
        event = ui.poll()
        if isinstance(event, KeyEvent) and event.key is Key.ESCAPE:
            return None
        if not isinstance(event, PointerEvent):
            continue
        if event.right:
            return None
        x, y = event.x, event.y
        in_fov = ctx.game_map.in_bounds(x, y) and fov.is_visible(x, y)
        in_range = max_range is None or ctx.player.distance(x, y) <= max_range
        if event.left and in_fov and in_range:
            return (x, y)


def target_monster(
    ctx: GameContext,
    ui: Frontend,
    fov: VisibilityOracle,
    max_range: Optional[float] = None,
) -> Optional[int]:
    """Like target_tile, but keeps asking until the cell holds a non-player fighter."""
    while True:
        tile = target_tile(ctx, ui, fov, max_range)
        if tile is None:
            return None
        for idx, e in enumerate(ctx.entities):
            if idx != PLAYER and e.fighter is not None and e.pos == tile:
                return idx
