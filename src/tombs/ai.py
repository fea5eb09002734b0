from __future__ import annotations

import logging

from . import colors
from .combat import attack
from .entity import AI, BasicAI, ConfusedAI, Entity
from .interfaces import VisibilityOracle
from .world import GameContext

logger = logging.getLogger(__name__)


def take_turn(ctx: GameContext, entity_id: int, fov: VisibilityOracle) -> None:
    """Run one turn of the entity's AI and store the state it hands back."""
    entity = ctx.entities[entity_id]
    ai = entity.ai
    if ai is None:
        return
    if isinstance(ai, ConfusedAI):
        new_ai = confused_turn(ctx, entity_id, ai)
    else:
        new_ai = basic_turn(ctx, entity_id, fov, ai)
    if entity.alive:
        entity.ai = new_ai


def basic_turn(ctx: GameContext, entity_id: int, fov: VisibilityOracle, ai: BasicAI) -> AI:
    # if you can see it, it can see you
    monster = ctx.entities[entity_id]
    if not fov.is_visible(monster.x, monster.y):
        return ai
    player = ctx.player
    if monster.distance_to(player) >= 2.0:
        ctx.move_towards(entity_id, player.x, player.y)
    elif player.fighter is not None and player.fighter.hp > 0:
        attack(monster, player, ctx.messages)
    return ai


def confused_turn(ctx: GameContext, entity_id: int, ai: ConfusedAI) -> AI:
    monster = ctx.entities[entity_id]
    if ai.num_turns >= 0:
        ctx.move_by(entity_id, ctx.rng.randint(-1, 1), ctx.rng.randint(-1, 1))
        return ConfusedAI(previous=ai.previous, num_turns=ai.num_turns - 1)
    ctx.messages.add(f"The {monster.name} is no longer confused!", colors.RED)
    logger.debug("%s recovers from confusion", monster.name)
    return ai.previous


def confuse(entity: Entity, num_turns: int) -> None:
    """Wrap the current AI (whatever it is) in a confusion timer."""
    previous = entity.ai if entity.ai is not None else BasicAI()
    entity.ai = ConfusedAI(previous=previous, num_turns=num_turns)
