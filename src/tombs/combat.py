from __future__ import annotations

import logging
from enum import IntEnum
from typing import Callable, Dict, List, Optional, Sequence

from . import colors
from .config import GameConfig
from .entity import DeathPolicy, Entity
from .messages import MessageLog

logger = logging.getLogger(__name__)

ChooseFn = Callable[[str, Sequence[str]], Optional[int]]


def attack(attacker: Entity, defender: Entity, log: MessageLog) -> Optional[int]:
    """Melee attack: damage is attacker power minus defender defense.

    The damage is worked out from both fighters first and then applied to the
    defender alone. When the blow kills a monster its xp is credited to the
    attacker and also returned.
    """
    if attacker is defender:
        raise ValueError(f"{attacker.name} cannot attack itself")
    if attacker.fighter is None or defender.fighter is None:
        raise ValueError("both attacker and defender need a fighter component")

    damage = attacker.fighter.power - defender.fighter.defense
    if damage <= 0:
        log.add(f"{attacker.name} attacks {defender.name} but it has no effect!", colors.WHITE)
        return None

    log.add(f"{attacker.name} attacks {defender.name} for {damage} hit points.", colors.WHITE)
    xp = take_damage(defender, damage, log)
    if xp is not None:
        attacker.fighter.xp += xp
    return xp


def take_damage(entity: Entity, amount: int, log: MessageLog) -> Optional[int]:
    """Apply damage; runs the death policy once, when hp first drops to 0 or below.

    Returns the dead monster's xp for the caller to credit, otherwise None.
    """
    fighter = entity.fighter
    if fighter is None:
        return None
    if amount > 0:
        fighter.hp -= amount
        logger.debug("%s takes %d damage (hp=%d)", entity.name, amount, fighter.hp)
    if fighter.hp > 0 or not entity.alive:
        return None

    entity.alive = False
    xp = fighter.xp
    policy = fighter.on_death
    DEATH_HANDLERS[policy](entity, log)
    logger.info("%s died (policy=%s)", entity.name, policy.value)
    return xp if policy is DeathPolicy.MONSTER else None


def heal(entity: Entity, amount: int) -> int:
    """Heal up to max_hp; returns the hp actually restored."""
    fighter = entity.fighter
    if fighter is None or amount <= 0:
        return 0
    before = fighter.hp
    fighter.hp = min(fighter.max_hp, fighter.hp + amount)
    return fighter.hp - before


def player_death(player: Entity, log: MessageLog) -> None:
    log.add("You died!", colors.RED)
    player.char = "%"
    player.color = colors.DARK_RED


def monster_death(monster: Entity, log: MessageLog) -> None:
    # inert corpse
    xp = monster.fighter.xp if monster.fighter else 0
    log.add(f"{monster.name} is dead! You gain {xp} experience points.", colors.ORANGE)
    monster.char = "%"
    monster.color = colors.DARK_RED
    monster.blocks = False
    monster.fighter = None
    monster.ai = None
    monster.name = f"remains of {monster.name}"


DEATH_HANDLERS: Dict[DeathPolicy, Callable[[Entity, MessageLog], None]] = {
    DeathPolicy.PLAYER: player_death,
    DeathPolicy.MONSTER: monster_death,
}


# ---- Leveling ---------------------------------------------------------------


class LevelUpChoice(IntEnum):
    CONSTITUTION = 0
    STRENGTH = 1
    AGILITY = 2


def level_up_options(player: Entity) -> List[str]:
    f = player.fighter
    assert f is not None
    return [
        f"Constitution (+20 HP, from {f.max_hp})",
        f"Strength (+1 attack, from {f.power})",
        f"Agility (+1 defense, from {f.defense})",
    ]


def apply_level_up_choice(player: Entity, choice: LevelUpChoice) -> None:
    f = player.fighter
    assert f is not None
    if choice is LevelUpChoice.CONSTITUTION:
        f.max_hp += 20
        f.hp += 20
    elif choice is LevelUpChoice.STRENGTH:
        f.power += 1
    elif choice is LevelUpChoice.AGILITY:
        f.defense += 1


def check_level_up(player: Entity, config: GameConfig, log: MessageLog, choose: ChooseFn) -> bool:
    """Level the player up once if their xp reached the threshold.

    Blocks on ``choose`` until one of the three upgrades is picked; there is no
    way to cancel. The threshold is subtracted from xp, so any excess carries over.
    """
    fighter = player.fighter
    if fighter is None:
        return False
    threshold = config.level_up_threshold(player.level)
    if fighter.xp < threshold:
        return False

    player.level += 1
    log.add(f"Your battle skills grow stronger! You reached level {player.level}!", colors.YELLOW)
    options = level_up_options(player)
    choice: Optional[int] = None
    while choice not in (0, 1, 2):
        choice = choose("Level up! Choose a stat to raise:\n", options)
    fighter.xp -= threshold
    apply_level_up_choice(player, LevelUpChoice(choice))
    logger.info("Player reached level %d (choice=%s, xp left=%d)", player.level, LevelUpChoice(choice).name, fighter.xp)
    return True


def character_sheet(player: Entity, config: GameConfig) -> str:
    f = player.fighter
    assert f is not None
    return "\n".join(
        [
            "Character information",
            "",
            f"Level: {player.level}",
            f"Experience: {f.xp}",
            f"Experience to level up: {config.level_up_threshold(player.level)}",
            "",
            f"Maximum HP: {f.max_hp}",
            f"Attack: {f.power}",
            f"Defense: {f.defense}",
        ]
    )
