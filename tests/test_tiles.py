import pytest

from tombs.dungeon.tiles import GameMap, Rect, Tile


def test_rect_center_and_interior():
    room = Rect.from_size(1, 1, 4, 4)
    assert (room.x2, room.y2) == (5, 5)
    assert room.center() == (3, 3)
    interior = list(room.interior())
    assert len(interior) == 9
    assert (1, 1) not in interior
    assert (2, 2) in interior and (4, 4) in interior


def test_rects_sharing_an_edge_intersect():
    a = Rect(0, 0, 4, 4)
    assert a.intersects(Rect(4, 0, 8, 4))
    assert not a.intersects(Rect(5, 0, 9, 4))


def test_new_map_is_solid_and_off_map_is_wall():
    m = GameMap(5, 4)
    assert all(m.is_wall(x, y) for y in range(4) for x in range(5))
    assert m.is_wall(-1, 0)
    assert m.is_wall(5, 3)
    assert not m.is_transparent(0, 10)
    with pytest.raises(IndexError):
        m.tile(-1, 0)


def test_carving_rooms_and_tunnels():
    m = GameMap(8, 4)
    m.carve_room(Rect(0, 0, 4, 3))
    floors = {(x, y) for y in range(4) for x in range(8) if not m.is_wall(x, y)}
    assert floors == {(1, 1), (2, 1), (3, 1), (1, 2), (2, 2), (3, 2)}

    m.carve_h_tunnel(6, 3, 1)
    assert all(not m.is_wall(x, 1) for x in range(3, 7))
    m.carve_v_tunnel(3, 0, 6)
    assert all(not m.is_wall(6, y) for y in range(0, 4))


def test_reachable_from_stops_at_walls():
    m = GameMap.from_ascii(
        [
            "#######",
            "#..#..#",
            "#..#..#",
            "#######",
        ]
    )
    left = m.reachable_from((1, 1))
    assert left == {(1, 1), (2, 1), (1, 2), (2, 2)}
    assert m.reachable_from((0, 0)) == set()


def test_mark_explored_counts_only_new_cells():
    m = GameMap(3, 3)
    assert m.mark_explored([(0, 0), (1, 1)]) == 2
    assert m.mark_explored([(1, 1), (2, 2), (9, 9)]) == 1
    assert m.tile(2, 2).explored


def test_map_dict_keeps_tiles_and_explored_flags():
    m = GameMap.from_ascii(["###", "#.#", "###"])
    m.mark_explored([(1, 1)])
    restored = GameMap.from_dict(m.to_dict())
    assert restored == m
    assert restored.tile(1, 1) == Tile(blocked=False, block_sight=False, explored=True)


def test_from_ascii_rejects_ragged_rows():
    with pytest.raises(ValueError):
        GameMap.from_ascii(["###", "##"])
