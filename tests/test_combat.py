import pytest

from tombs.combat import attack, heal, take_damage
from tombs.dungeon.spawns import make_orc, make_troll
from tombs.entity import DeathPolicy, Entity, Fighter, make_player
from tombs.messages import MessageLog


def test_attack_deals_power_minus_defense():
    log = MessageLog()
    player, orc = make_player(), make_orc(1, 0)
    assert attack(player, orc, log) is None
    assert orc.fighter.hp == 5
    assert log.last() == "player attacks orc for 5 hit points."


def test_attack_without_damage_has_no_effect():
    log = MessageLog()
    orc = make_orc(0, 0)
    wall_of_iron = Entity(
        1, 0, "X", "golem", blocks=True, alive=True,
        fighter=Fighter(max_hp=10, hp=10, defense=3, power=0, on_death=DeathPolicy.MONSTER),
    )
    assert attack(orc, wall_of_iron, log) is None
    assert wall_of_iron.fighter.hp == 10
    assert log.last() == "orc attacks golem but it has no effect!"


def test_killing_a_monster_credits_xp_and_leaves_a_corpse():
    log = MessageLog()
    player, troll = make_player(), make_troll(1, 0)
    troll.fighter.hp = 3
    assert attack(player, troll, log) == 100
    assert player.fighter.xp == 100
    assert troll.name == "remains of troll"
    assert troll.char == "%"
    assert not troll.blocks
    assert troll.fighter is None and troll.ai is None
    assert not troll.alive
    assert "troll is dead! You gain 100 experience points." in log.texts()


def test_death_is_idempotent():
    log = MessageLog()
    player = make_player()
    assert take_damage(player, 100, log) is None
    assert not player.alive
    assert player.char == "%"
    count = len(log)
    assert take_damage(player, 5, log) is None
    assert len(log) == count
    assert log.texts().count("You died!") == 1


def test_dead_monster_cannot_die_twice():
    log = MessageLog()
    orc = make_orc(0, 0)
    assert take_damage(orc, 50, log) == 35
    assert take_damage(orc, 50, log) is None
    assert len([t for t in log.texts() if "is dead!" in t]) == 1


def test_self_attack_is_rejected():
    player = make_player()
    with pytest.raises(ValueError):
        attack(player, player, MessageLog())


def test_heal_is_clamped_to_max_hp():
    player = make_player()
    player.fighter.hp = 28
    assert heal(player, 4) == 2
    assert player.fighter.hp == 30
    assert heal(player, 4) == 0
