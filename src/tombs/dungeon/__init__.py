from .tiles import GameMap, Rect, Tile

__all__ = ["GameMap", "Rect", "Tile"]
