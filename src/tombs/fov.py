from __future__ import annotations

import logging
from typing import List, Set, Tuple

from .dungeon.tiles import GameMap

logger = logging.getLogger(__name__)

Coord = Tuple[int, int]


def bresenham_line(x0: int, y0: int, x1: int, y1: int) -> List[Coord]:
    """
    Bresenham's line algorithm. Returns the list of points from (x0, y0) to (x1, y1) inclusive.
    """
    points: List[Coord] = []

    dx = abs(x1 - x0)
    dy = -abs(y1 - y0)
    sx = 1 if x0 < x1 else -1
    sy = 1 if y0 < y1 else -1
    err = dx + dy

    x, y = x0, y0
    while True:
        points.append((x, y))
        if x == x1 and y == y1:
            break
        e2 = 2 * err
        if e2 >= dy:
            err += dy
            x += sx
        if e2 <= dx:
            err += dx
            y += sy

    return points


def has_line_of_sight(game_map: GameMap, x0: int, y0: int, x1: int, y1: int, *, light_walls: bool = True) -> bool:
    """
    All intermediate cells between origin and target must be transparent.
    With light_walls the target itself may be opaque (walls are lit).
    """
    if not game_map.in_bounds(x0, y0) or not game_map.in_bounds(x1, y1):
        return False
    line = bresenham_line(x0, y0, x1, y1)
    for x, y in line[1:-1]:
        if not game_map.is_transparent(x, y):
            return False
    if not light_walls and len(line) > 1:
        return game_map.is_transparent(x1, y1)
    return True


def compute_fov(game_map: GameMap, origin: Coord, radius: int, *, light_walls: bool = True) -> Set[Coord]:
    """
    Compute the set of visible cells from origin within a circular radius using line of sight.

    A radius of 0 means unlimited (the whole map is considered). The origin is always visible.
    """
    ox, oy = origin
    if not game_map.in_bounds(ox, oy):
        raise ValueError("Origin out of bounds")
    if radius < 0:
        raise ValueError("radius must be >= 0")

    if radius == 0:
        min_x, max_x, min_y, max_y = 0, game_map.width - 1, 0, game_map.height - 1
    else:
        min_x = max(0, ox - radius)
        max_x = min(game_map.width - 1, ox + radius)
        min_y = max(0, oy - radius)
        max_y = min(game_map.height - 1, oy + radius)

    visible: Set[Coord] = {(ox, oy)}
    r2 = radius * radius
    for y in range(min_y, max_y + 1):
        for x in range(min_x, max_x + 1):
            if (x, y) == (ox, oy):
                continue
            if radius and (x - ox) ** 2 + (y - oy) ** 2 > r2:
                continue
            if has_line_of_sight(game_map, ox, oy, x, y, light_walls=light_walls):
                visible.add((x, y))

    logger.debug("FOV from (%d,%d) radius %d -> %d visible tiles", ox, oy, radius, len(visible))
    return visible


class FieldOfView:
    """Default visibility oracle: remembers the set from the last compute()."""

    def __init__(self) -> None:
        self._visible: Set[Coord] = set()

    def compute(self, game_map: GameMap, x: int, y: int, radius: int, light_walls: bool = True) -> None:
        self._visible = compute_fov(game_map, (x, y), radius, light_walls=light_walls)

    def is_visible(self, x: int, y: int) -> bool:
        return (x, y) in self._visible
