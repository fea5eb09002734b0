from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple, Union

from .colors import WHITE, Color, as_color

logger = logging.getLogger(__name__)

# The player is always the first entity of the world's entity list.
PLAYER = 0


class DeathPolicy(str, Enum):
    PLAYER = "player"
    MONSTER = "monster"


class ItemKind(str, Enum):
    HEAL = "heal"
    LIGHTNING = "lightning"
    CONFUSE = "confuse"


@dataclass
class Fighter:
    """Combat-related properties of the player and monsters."""

    max_hp: int
    hp: int
    defense: int
    power: int
    xp: int = 0
    on_death: DeathPolicy = DeathPolicy.MONSTER

    def to_dict(self) -> Dict[str, Any]:
        return {
            "max_hp": self.max_hp,
            "hp": self.hp,
            "defense": self.defense,
            "power": self.power,
            "xp": self.xp,
            "on_death": self.on_death.value,
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "Fighter":
        return Fighter(
            max_hp=int(data["max_hp"]),
            hp=int(data["hp"]),
            defense=int(data["defense"]),
            power=int(data["power"]),
            xp=int(data["xp"]),
            on_death=DeathPolicy(data["on_death"]),
        )


@dataclass(frozen=True)
class BasicAI:
    """Chase the player when visible, attack when adjacent."""


@dataclass(frozen=True)
class ConfusedAI:
    """Stumble around for num_turns more turns, then restore previous."""

    previous: "AI"
    num_turns: int


AI = Union[BasicAI, ConfusedAI]


def ai_to_dict(ai: AI) -> Dict[str, Any]:
    if isinstance(ai, ConfusedAI):
        return {"kind": "confused", "num_turns": ai.num_turns, "previous": ai_to_dict(ai.previous)}
    return {"kind": "basic"}


def ai_from_dict(data: Dict[str, Any]) -> AI:
    kind = data.get("kind")
    if kind == "basic":
        return BasicAI()
    if kind == "confused":
        return ConfusedAI(previous=ai_from_dict(data["previous"]), num_turns=int(data["num_turns"]))
    raise ValueError(f"Unknown AI kind: {kind!r}")


@dataclass
class Entity:
    """A generic object on the map: the player, a monster, an item, the stairs.

    Capabilities are optional blocks: a fighter can attack and be attacked, an
    AI takes turns, an item kind can be picked up and used.
    """

    x: int
    y: int
    char: str
    name: str
    color: Color = WHITE
    blocks: bool = False
    alive: bool = False
    always_visible: bool = False
    level: int = 1
    fighter: Optional[Fighter] = None
    ai: Optional[AI] = None
    item: Optional[ItemKind] = None

    @property
    def pos(self) -> Tuple[int, int]:
        return (self.x, self.y)

    def set_pos(self, x: int, y: int) -> None:
        self.x = x
        self.y = y

    def distance(self, x: int, y: int) -> float:
        return math.sqrt((x - self.x) ** 2 + (y - self.y) ** 2)

    def distance_to(self, other: "Entity") -> float:
        return self.distance(other.x, other.y)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "x": self.x,
            "y": self.y,
            "char": self.char,
            "name": self.name,
            "color": list(self.color),
            "blocks": self.blocks,
            "alive": self.alive,
            "always_visible": self.always_visible,
            "level": self.level,
            "fighter": self.fighter.to_dict() if self.fighter else None,
            "ai": ai_to_dict(self.ai) if self.ai is not None else None,
            "item": self.item.value if self.item else None,
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "Entity":
        return Entity(
            x=int(data["x"]),
            y=int(data["y"]),
            char=str(data["char"]),
            name=str(data["name"]),
            color=as_color(data["color"]),
            blocks=bool(data["blocks"]),
            alive=bool(data["alive"]),
            always_visible=bool(data["always_visible"]),
            level=int(data["level"]),
            fighter=Fighter.from_dict(data["fighter"]) if data.get("fighter") else None,
            ai=ai_from_dict(data["ai"]) if data.get("ai") else None,
            item=ItemKind(data["item"]) if data.get("item") else None,
        )

    def __repr__(self) -> str:
        return f"Entity({self.name!r}@{self.x},{self.y})"


def make_player(name: str = "player") -> Entity:
    """Fresh level-1 player, positioned later by the dungeon generator."""
    return Entity(
        0,
        0,
        "@",
        name,
        WHITE,
        blocks=True,
        alive=True,
        fighter=Fighter(max_hp=30, hp=30, defense=2, power=5, xp=0, on_death=DeathPolicy.PLAYER),
    )


__all__ = [
    "PLAYER",
    "AI",
    "BasicAI",
    "ConfusedAI",
    "DeathPolicy",
    "Entity",
    "Fighter",
    "ItemKind",
    "ai_from_dict",
    "ai_to_dict",
    "make_player",
]
