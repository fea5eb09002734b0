from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from .config import GameConfig, GenerationSettings
from .dungeon.spawns import MONSTER_FACTORIES
from .dungeon.tiles import GameMap
from .entity import PLAYER, Entity, ItemKind
from .messages import MessageLog
from .rng import RandomSource

logger = logging.getLogger(__name__)


def is_blocked(game_map: GameMap, entities: Sequence[Entity], x: int, y: int) -> bool:
    """True if the tile is a wall (or off-map) or a blocking entity stands on it."""
    if game_map.is_wall(x, y):
        return True
    return any(e.blocks and e.x == x and e.y == y for e in entities)


@dataclass
class GameContext:
    """Everything a running game mutates, passed explicitly to each subsystem.

    ``entities[PLAYER]`` is the player; code that removes or rebuilds entities
    must keep it at index 0.
    """

    config: GameConfig
    game_map: GameMap
    entities: List[Entity]
    messages: MessageLog = field(default_factory=MessageLog)
    inventory: List[Entity] = field(default_factory=list)
    dungeon_level: int = 1
    rng: RandomSource = field(default_factory=RandomSource)

    @property
    def player(self) -> Entity:
        return self.entities[PLAYER]

    # ---- Spatial queries -------------------------------------------------
    def is_blocked(self, x: int, y: int) -> bool:
        return is_blocked(self.game_map, self.entities, x, y)

    def move_by(self, entity_id: int, dx: int, dy: int) -> bool:
        """Move if the destination is free; bumping into something is a silent no-op."""
        entity = self.entities[entity_id]
        nx, ny = entity.x + dx, entity.y + dy
        if self.is_blocked(nx, ny):
            return False
        entity.set_pos(nx, ny)
        return True

    def move_towards(self, entity_id: int, target_x: int, target_y: int) -> bool:
        """Step one cell along the 8-way direction closest to the target."""
        entity = self.entities[entity_id]
        dx = target_x - entity.x
        dy = target_y - entity.y
        distance = entity.distance(target_x, target_y)
        if distance == 0:
            return False
        # halves round away from zero
        step_x = int(_round_half_away(dx / distance))
        step_y = int(_round_half_away(dy / distance))
        return self.move_by(entity_id, step_x, step_y)

    def fighter_at(self, x: int, y: int) -> Optional[int]:
        for idx, e in enumerate(self.entities):
            if e.fighter is not None and e.x == x and e.y == y:
                return idx
        return None

    def remove_entity(self, entity_id: int) -> Entity:
        assert entity_id != PLAYER, "the player entity can never be removed"
        return self.entities.pop(entity_id)

    # ---- Persistence -----------------------------------------------------
    def to_dict(self) -> Dict[str, Any]:
        return {
            "map": self.game_map.to_dict(),
            "messages": self.messages.to_dict(),
            "inventory": [e.to_dict() for e in self.inventory],
            "dungeon_level": self.dungeon_level,
            "entities": [e.to_dict() for e in self.entities],
            "generation": self.config.generation.to_dict(),
        }

    @classmethod
    def from_dict(
        cls,
        data: Dict[str, Any],
        config: Optional[GameConfig] = None,
        rng: Optional[RandomSource] = None,
    ) -> "GameContext":
        """Rebuild a snapshot, rejecting ones that could not be played on.

        Raises ValueError when an entity stands off the map or a spawn table
        names a monster or item no factory can build.
        """
        generation = GenerationSettings.from_dict(data["generation"])
        _check_spawn_tables(generation)
        game_map = GameMap.from_dict(data["map"])
        entities = [Entity.from_dict(e) for e in data["entities"]]
        if not entities:
            raise ValueError("snapshot contains no entities; the player is missing")
        for e in entities:
            if not game_map.in_bounds(e.x, e.y):
                raise ValueError(f"{e.name} at ({e.x},{e.y}) is outside the {game_map.width}x{game_map.height} map")
        config = config or GameConfig()
        config.generation = generation
        return cls(
            config=config,
            game_map=game_map,
            entities=entities,
            messages=MessageLog.from_dict(data["messages"]),
            inventory=[Entity.from_dict(e) for e in data["inventory"]],
            dungeon_level=int(data["dungeon_level"]),
            rng=rng or RandomSource(config.seed),
        )


def _check_spawn_tables(generation: GenerationSettings) -> None:
    unknown_monsters = sorted(set(generation.monster_weights) - set(MONSTER_FACTORIES))
    if unknown_monsters:
        raise ValueError(f"unknown monster species in spawn table: {', '.join(unknown_monsters)}")
    unknown_items = sorted(set(generation.item_weights) - {kind.value for kind in ItemKind})
    if unknown_items:
        raise ValueError(f"unknown item kinds in spawn table: {', '.join(unknown_items)}")


def _round_half_away(value: float) -> float:
    if value >= 0:
        return float(int(value + 0.5))
    return -float(int(-value + 0.5))
