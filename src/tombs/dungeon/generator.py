from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from ..config import GenerationSettings
from ..entity import Entity
from ..exceptions import GenerationError
from ..rng import RandomSource
from ..world import is_blocked
from .spawns import create_item, create_monster, make_stairs
from .tiles import GameMap, Rect

logger = logging.getLogger(__name__)


class DungeonGenerator:
    """Rooms + tunnels generator.

    Tries ``max_rooms`` random rectangles, keeps those that do not touch an
    earlier room, carves them and links each to the previous accepted room
    with an L-shaped tunnel through both centers. The player starts in the
    first room and the stairs go in the last one.
    """

    def __init__(self, settings: Optional[GenerationSettings] = None, rng: Optional[RandomSource] = None) -> None:
        self.settings = settings or GenerationSettings()
        self.rng = rng or RandomSource()
        self.rooms: List[Rect] = []

    def build(self, player: Entity) -> Tuple[GameMap, List[Entity]]:
        """Generate a fresh level around ``player``.

        Returns the map and a new entity list whose first element is the player.
        """
        s = self.settings
        rng = self.rng
        game_map = GameMap(s.width, s.height)
        entities: List[Entity] = [player]
        rooms: List[Rect] = []

        for _ in range(s.max_rooms):
            w = rng.randint(s.room_min_size, s.room_max_size)
            h = rng.randint(s.room_min_size, s.room_max_size)
            x = rng.randrange(0, s.width - w)
            y = rng.randrange(0, s.height - h)
            new_room = Rect.from_size(x, y, w, h)

            if any(new_room.intersects(other) for other in rooms):
                continue

            game_map.carve_room(new_room)
            new_x, new_y = new_room.center()

            if not rooms:
                player.set_pos(new_x, new_y)
            else:
                prev_x, prev_y = rooms[-1].center()
                if rng.coin_flip():
                    game_map.carve_h_tunnel(prev_x, new_x, prev_y)
                    game_map.carve_v_tunnel(prev_y, new_y, new_x)
                else:
                    game_map.carve_v_tunnel(prev_y, new_y, prev_x)
                    game_map.carve_h_tunnel(prev_x, new_x, new_y)

            self._place_objects(new_room, game_map, entities)
            rooms.append(new_room)

        if not rooms:
            raise GenerationError(f"no room could be placed on a {s.width}x{s.height} map")

        last_x, last_y = rooms[-1].center()
        entities.append(make_stairs(last_x, last_y))

        self.rooms = rooms
        logger.debug("DungeonGenerator: %d rooms, %d entities", len(rooms), len(entities))
        return game_map, entities

    def _place_objects(self, room: Rect, game_map: GameMap, entities: List[Entity]) -> None:
        s = self.settings
        rng = self.rng

        for _ in range(rng.randint(0, s.max_room_monsters)):
            x, y = self._random_interior_point(room)
            if self._occupied(game_map, entities, x, y):
                continue
            entities.append(create_monster(x, y, rng, s.monster_weights))

        for _ in range(rng.randint(0, s.max_room_items)):
            x, y = self._random_interior_point(room)
            if self._occupied(game_map, entities, x, y):
                continue
            entities.append(create_item(x, y, rng, s.item_weights))

    def _random_interior_point(self, room: Rect) -> Tuple[int, int]:
        return (
            self.rng.randint(room.x1 + 1, room.x2 - 1),
            self.rng.randint(room.y1 + 1, room.y2 - 1),
        )

    @staticmethod
    def _occupied(game_map: GameMap, entities: List[Entity], x: int, y: int) -> bool:
        if is_blocked(game_map, entities, x, y):
            return True
        return any(e.x == x and e.y == y for e in entities)
