from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Set, Tuple

logger = logging.getLogger(__name__)

Point = Tuple[int, int]


@dataclass
class Tile:
    """A map cell. Walls block movement and sight; explored is set once seen."""

    blocked: bool
    block_sight: bool
    explored: bool = False

    @classmethod
    def wall(cls) -> "Tile":
        return cls(blocked=True, block_sight=True)

    @classmethod
    def empty(cls) -> "Tile":
        return cls(blocked=False, block_sight=False)


@dataclass
class Rect:
    """Axis-aligned room rectangle; (x2, y2) is exclusive of the interior."""

    x1: int
    y1: int
    x2: int
    y2: int

    @classmethod
    def from_size(cls, x: int, y: int, w: int, h: int) -> "Rect":
        return cls(x, y, x + w, y + h)

    def center(self) -> Point:
        return ((self.x1 + self.x2) // 2, (self.y1 + self.y2) // 2)

    def intersects(self, other: "Rect") -> bool:
        return self.x1 <= other.x2 and self.x2 >= other.x1 and self.y1 <= other.y2 and self.y2 >= other.y1

    def interior(self) -> Iterable[Point]:
        for y in range(self.y1 + 1, self.y2):
            for x in range(self.x1 + 1, self.x2):
                yield (x, y)


class GameMap:
    """
    The dungeon tile grid. Coordinates are (x, y) with (0, 0) at top-left;
    storage is row-major, ``tiles[y][x]``.

    Provides carving helpers for the generator, bounds-checked queries for
    movement and line of sight, and a BFS reachability search.
    """

    def __init__(self, width: int, height: int, tiles: Optional[List[List[Tile]]] = None) -> None:
        if width <= 0 or height <= 0:
            raise ValueError("GameMap width/height must be > 0")
        self.width = width
        self.height = height
        if tiles is None:
            tiles = [[Tile.wall() for _ in range(width)] for _ in range(height)]
        if len(tiles) != height or any(len(row) != width for row in tiles):
            raise ValueError("tiles must be a height x width grid")
        self.tiles = tiles

    def __repr__(self) -> str:
        return f"GameMap({self.width}x{self.height})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GameMap):
            return NotImplemented
        return self.width == other.width and self.height == other.height and self.tiles == other.tiles

    # ---- Query -----------------------------------------------------------
    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def tile(self, x: int, y: int) -> Tile:
        if not self.in_bounds(x, y):
            raise IndexError(f"Tile out of bounds: ({x},{y}) not in [0,{self.width})x[0,{self.height})")
        return self.tiles[y][x]

    def is_wall(self, x: int, y: int) -> bool:
        if not self.in_bounds(x, y):
            return True
        return self.tiles[y][x].blocked

    def is_transparent(self, x: int, y: int) -> bool:
        if not self.in_bounds(x, y):
            return False
        return not self.tiles[y][x].block_sight

    def mark_explored(self, points: Iterable[Point]) -> int:
        """Flag the given cells as explored; returns how many were new."""
        count = 0
        for x, y in points:
            if self.in_bounds(x, y) and not self.tiles[y][x].explored:
                self.tiles[y][x].explored = True
                count += 1
        return count

    # ---- Carving helpers -------------------------------------------------
    def carve(self, x: int, y: int) -> None:
        tile = self.tile(x, y)
        tile.blocked = False
        tile.block_sight = False

    def carve_room(self, room: Rect) -> None:
        for x, y in room.interior():
            self.carve(x, y)

    def carve_h_tunnel(self, x1: int, x2: int, y: int) -> None:
        for x in range(min(x1, x2), max(x1, x2) + 1):
            self.carve(x, y)

    def carve_v_tunnel(self, y1: int, y2: int, x: int) -> None:
        for y in range(min(y1, y2), max(y1, y2) + 1):
            self.carve(x, y)

    # ---- Search ----------------------------------------------------------
    def neighbors_4(self, x: int, y: int) -> Iterable[Point]:
        for dx, dy in ((0, -1), (1, 0), (0, 1), (-1, 0)):
            nx, ny = x + dx, y + dy
            if self.in_bounds(nx, ny):
                yield (nx, ny)

    def reachable_from(self, start: Point) -> Set[Point]:
        """All walkable cells reachable from start by 4-way steps."""
        if self.is_wall(*start):
            return set()
        seen: Set[Point] = {start}
        dq = deque([start])
        while dq:
            x, y = dq.popleft()
            for n in self.neighbors_4(x, y):
                if n in seen or self.is_wall(*n):
                    continue
                seen.add(n)
                dq.append(n)
        return seen

    # ---- Export ----------------------------------------------------------
    def to_dict(self) -> Dict[str, Any]:
        return {
            "width": self.width,
            "height": self.height,
            "tiles": [[[t.blocked, t.block_sight, t.explored] for t in row] for row in self.tiles],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GameMap":
        tiles = [
            [Tile(blocked=bool(b), block_sight=bool(s), explored=bool(e)) for b, s, e in row]
            for row in data["tiles"]
        ]
        return cls(int(data["width"]), int(data["height"]), tiles)

    @classmethod
    def from_ascii(cls, rows: List[str], wall_chars: Iterable[str] = ("#",)) -> "GameMap":
        """
        Build a map from ASCII rows for tests/tools.
        Any char in wall_chars is a wall; everything else is open floor.
        """
        if not rows:
            raise ValueError("rows must not be empty")
        width = len(rows[0])
        if any(len(r) != width for r in rows):
            raise ValueError("All rows must be same width")
        walls = set(wall_chars)
        tiles = [[Tile.wall() if ch in walls else Tile.empty() for ch in row] for row in rows]
        return cls(width, len(rows), tiles)
