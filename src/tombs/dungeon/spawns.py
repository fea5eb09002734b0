"""Monster and item factories backed by weighted random tables."""
from __future__ import annotations

import logging
from typing import Callable, Dict

from .. import colors
from ..entity import BasicAI, DeathPolicy, Entity, Fighter, ItemKind
from ..rng import RandomSource

logger = logging.getLogger(__name__)


def make_orc(x: int, y: int) -> Entity:
    return Entity(
        x,
        y,
        "o",
        "orc",
        colors.DESATURATED_GREEN,
        blocks=True,
        alive=True,
        fighter=Fighter(max_hp=10, hp=10, defense=0, power=3, xp=35, on_death=DeathPolicy.MONSTER),
        ai=BasicAI(),
    )


def make_troll(x: int, y: int) -> Entity:
    return Entity(
        x,
        y,
        "T",
        "troll",
        colors.DARKER_GREEN,
        blocks=True,
        alive=True,
        fighter=Fighter(max_hp=16, hp=16, defense=1, power=4, xp=100, on_death=DeathPolicy.MONSTER),
        ai=BasicAI(),
    )


MONSTER_FACTORIES: Dict[str, Callable[[int, int], Entity]] = {
    "orc": make_orc,
    "troll": make_troll,
}

ITEM_APPEARANCE = {
    ItemKind.HEAL: ("!", "healing potion", colors.VIOLET),
    ItemKind.LIGHTNING: ("#", "scroll of lightning bolt", colors.LIGHT_YELLOW),
    ItemKind.CONFUSE: ("#", "scroll of confusion", colors.LIGHT_YELLOW),
}


def make_item(kind: ItemKind, x: int, y: int) -> Entity:
    char, name, color = ITEM_APPEARANCE[kind]
    return Entity(x, y, char, name, color, blocks=False, always_visible=True, item=kind)


def create_monster(x: int, y: int, rng: RandomSource, weights: Dict[str, int]) -> Entity:
    species = rng.weighted_choice(weights)
    try:
        factory = MONSTER_FACTORIES[species]
    except KeyError:
        raise ValueError(f"Unknown monster species in spawn table: {species!r}") from None
    return factory(x, y)


def create_item(x: int, y: int, rng: RandomSource, weights: Dict[str, int]) -> Entity:
    kind = rng.weighted_choice(weights)
    try:
        item_kind = ItemKind(kind)
    except ValueError:
        raise ValueError(f"Unknown item kind in spawn table: {kind!r}") from None
    return make_item(item_kind, x, y)


def make_stairs(x: int, y: int) -> Entity:
    return Entity(x, y, "<", "stairs", colors.WHITE, blocks=False, always_visible=True)
