import itertools

import pytest

from tombs.config import GenerationSettings
from tombs.dungeon.generator import DungeonGenerator
from tombs.dungeon.spawns import create_item, create_monster
from tombs.entity import PLAYER, ItemKind, make_player
from tombs.exceptions import GenerationError
from tombs.rng import RandomSource


def build(seed=7, **overrides):
    generator = DungeonGenerator(GenerationSettings(**overrides), RandomSource(seed))
    player = make_player()
    game_map, entities = generator.build(player)
    return generator, game_map, entities, player


@pytest.mark.parametrize("seed", [1, 2, 3, 42, 1234])
def test_rooms_never_overlap(seed):
    generator, _, _, _ = build(seed)
    assert generator.rooms
    for a, b in itertools.combinations(generator.rooms, 2):
        assert not a.intersects(b)


@pytest.mark.parametrize("seed", [1, 2, 3, 42, 1234])
def test_every_room_reachable_from_the_first(seed):
    generator, game_map, _, _ = build(seed)
    reachable = game_map.reachable_from(generator.rooms[0].center())
    for room in generator.rooms:
        assert room.center() in reachable


def test_player_starts_in_first_room_and_stairs_in_last():
    generator, game_map, entities, player = build(99)
    assert entities[PLAYER] is player
    assert player.pos == generator.rooms[0].center()
    stairs = entities[-1]
    assert stairs.name == "stairs"
    assert stairs.char == "<"
    assert stairs.always_visible
    assert stairs.pos == generator.rooms[-1].center()


@pytest.mark.parametrize("seed", [5, 6, 7])
def test_spawned_entities_stand_on_free_floor(seed):
    _, game_map, entities, _ = build(seed)
    spawned = entities[:-1]
    positions = [e.pos for e in spawned]
    assert len(positions) == len(set(positions))
    for e in entities[1:]:
        assert not game_map.is_wall(e.x, e.y)


def test_spawn_tables_are_respected():
    _, _, entities, _ = build(11, monster_weights={"troll": 1}, item_weights={"confuse": 1})
    monsters = [e for e in entities if e.ai is not None]
    items = [e for e in entities if e.item is not None]
    assert monsters and items
    assert {m.name for m in monsters} == {"troll"}
    assert {i.item for i in items} == {ItemKind.CONFUSE}


def test_without_spawns_only_player_and_stairs_remain():
    _, _, entities, _ = build(3, max_room_monsters=0, max_room_items=0)
    assert [e.name for e in entities] == ["player", "stairs"]


def test_same_seed_same_level():
    _, map_a, entities_a, _ = build(2024)
    _, map_b, entities_b, _ = build(2024)
    assert map_a == map_b
    assert [e.to_dict() for e in entities_a] == [e.to_dict() for e in entities_b]


def test_small_map_still_gets_a_room():
    generator, _, _, _ = build(8, width=12, height=12, room_min_size=3, room_max_size=6, max_rooms=5)
    assert len(generator.rooms) >= 1


def test_no_rooms_is_a_generation_error():
    settings = GenerationSettings()
    settings.max_rooms = 0
    with pytest.raises(GenerationError):
        DungeonGenerator(settings, RandomSource(1)).build(make_player())


def test_settings_validation():
    with pytest.raises(ValueError):
        GenerationSettings(room_min_size=8, room_max_size=6)
    with pytest.raises(ValueError):
        GenerationSettings(width=10, room_max_size=10)


def test_unknown_spawn_keys_are_rejected():
    rng = RandomSource(1)
    with pytest.raises(ValueError):
        create_monster(0, 0, rng, {"dragon": 1})
    with pytest.raises(ValueError):
        create_item(0, 0, rng, {"fireball": 1})
