from tombs.dungeon.spawns import make_item, make_orc, make_troll
from tombs.entity import BasicAI, ConfusedAI, ItemKind
from tombs.interfaces import Key, KeyEvent, PointerEvent
from tombs.items import (
    UseResult,
    closest_monster,
    drop_item,
    item_under_player,
    pick_up,
    target_monster,
    target_tile,
    use_item,
)


def potion(x=0, y=0):
    return make_item(ItemKind.HEAL, x, y)


def test_pick_up_moves_item_into_inventory(make_ctx):
    ctx = make_ctx(5, 5, others=[make_orc(1, 1), potion(5, 5)])
    idx = item_under_player(ctx)
    assert idx == 2
    assert pick_up(ctx, idx)
    assert [e.name for e in ctx.inventory] == ["healing potion"]
    assert len(ctx.entities) == 2
    assert ctx.messages.last() == "You picked up a healing potion!"


def test_twenty_seventh_item_stays_on_the_floor(make_ctx):
    ctx = make_ctx(5, 5, others=[potion(5, 5), potion(5, 5)])
    ctx.inventory.extend(potion() for _ in range(25))
    assert pick_up(ctx, 1)
    assert len(ctx.inventory) == 26
    assert not pick_up(ctx, 1)
    assert len(ctx.inventory) == 26
    assert ctx.entities[1].pos == (5, 5)
    assert ctx.messages.last() == "Your inventory is full, cannot pick up healing potion."


def test_drop_puts_item_under_player(make_ctx):
    ctx = make_ctx(4, 3)
    ctx.inventory.append(potion())
    drop_item(ctx, 0)
    assert ctx.inventory == []
    assert ctx.entities[-1].pos == (4, 3)
    assert ctx.messages.last() == "You dropped a healing potion."


def test_heal_at_full_health_is_cancelled(make_ctx, frontend, all_visible):
    ctx = make_ctx()
    ctx.inventory.append(potion())
    assert use_item(ctx, 0, frontend, all_visible) is UseResult.CANCELLED
    assert len(ctx.inventory) == 1
    assert ctx.messages.texts()[-2:] == ["You are already at full health.", "Cancelled"]


def test_heal_restores_and_clamps(make_ctx, frontend, all_visible):
    ctx = make_ctx()
    ctx.inventory.extend([potion(), potion()])
    ctx.player.fighter.hp = 20
    assert use_item(ctx, 0, frontend, all_visible) is UseResult.USED_UP
    assert ctx.player.fighter.hp == 24
    ctx.player.fighter.hp = 28
    use_item(ctx, 0, frontend, all_visible)
    assert ctx.player.fighter.hp == 30
    assert ctx.inventory == []


def test_lightning_strikes_the_nearer_monster(make_ctx, frontend, all_visible):
    far, near = make_troll(10, 5), make_orc(8, 5)
    ctx = make_ctx(5, 5, others=[far, near])
    ctx.inventory.append(make_item(ItemKind.LIGHTNING, 0, 0))
    assert closest_monster(ctx, all_visible, 5) == 2
    assert use_item(ctx, 0, frontend, all_visible) is UseResult.USED_UP
    assert not near.alive
    assert far.fighter.hp == 16
    assert ctx.player.fighter.xp == 35
    assert any(t.startswith("A lightning bolt strikes the orc") for t in ctx.messages.texts())


def test_lightning_needs_a_visible_monster_in_range(make_ctx, frontend, all_visible, fixed_visibility):
    ctx = make_ctx(5, 5, others=[make_orc(11, 5)])
    ctx.inventory.append(make_item(ItemKind.LIGHTNING, 0, 0))
    assert use_item(ctx, 0, frontend, all_visible) is UseResult.CANCELLED
    assert "No enemy is close enough to strike." in ctx.messages.texts()

    ctx.entities[1].set_pos(7, 5)
    assert use_item(ctx, 0, frontend, fixed_visibility({(5, 5)})) is UseResult.CANCELLED
    assert len(ctx.inventory) == 1


def test_closest_monster_ties_keep_the_first(make_ctx, all_visible):
    ctx = make_ctx(5, 5, others=[make_orc(7, 5), make_orc(3, 5)])
    assert closest_monster(ctx, all_visible, 5) == 1


def test_confuse_targets_the_clicked_monster(make_ctx, frontend, all_visible):
    ctx = make_ctx(5, 5, others=[make_orc(7, 5)])
    ctx.inventory.append(make_item(ItemKind.CONFUSE, 0, 0))
    frontend.events.extend([PointerEvent(7, 5), PointerEvent(6, 5, left=True), PointerEvent(7, 5, left=True)])
    assert use_item(ctx, 0, frontend, all_visible) is UseResult.USED_UP
    assert ctx.entities[1].ai == ConfusedAI(previous=BasicAI(), num_turns=10)
    assert ctx.inventory == []


def test_confuse_cancelled_by_right_click(make_ctx, frontend, all_visible):
    ctx = make_ctx(5, 5, others=[make_orc(7, 5)])
    ctx.inventory.append(make_item(ItemKind.CONFUSE, 0, 0))
    frontend.events.append(PointerEvent(7, 5, right=True))
    assert use_item(ctx, 0, frontend, all_visible) is UseResult.CANCELLED
    assert ctx.entities[1].ai == BasicAI()
    assert len(ctx.inventory) == 1
    assert ctx.messages.last() == "Cancelled"


def test_target_tile_ignores_cells_out_of_range_or_sight(make_ctx, frontend, fixed_visibility):
    ctx = make_ctx(5, 5)
    fov = fixed_visibility({(5, 5), (6, 5), (15, 5)})
    frontend.events.extend(
        [
            PointerEvent(15, 5, left=True),
            PointerEvent(7, 5, left=True),
            PointerEvent(6, 5, left=True),
        ]
    )
    assert target_tile(ctx, frontend, fov, 8) == (6, 5)
    assert frontend.frames == 3


def test_target_tile_escape_cancels(make_ctx, frontend, all_visible):
    ctx = make_ctx()
    frontend.events.append(KeyEvent(Key.ESCAPE))
    assert target_tile(ctx, frontend, all_visible) is None


def test_target_monster_skips_the_player(make_ctx, frontend, all_visible):
    ctx = make_ctx(5, 5, others=[make_orc(8, 8)])
    frontend.events.extend([PointerEvent(5, 5, left=True), PointerEvent(8, 8, left=True)])
    assert target_monster(ctx, frontend, all_visible) == 1


def test_closest_monster_reaches_just_past_the_nominal_range(make_ctx, all_visible):
    ctx = make_ctx(5, 5, others=[make_orc(10, 8)])
    assert 5 < ctx.player.distance_to(ctx.entities[1]) < 6
    assert closest_monster(ctx, all_visible, 5) == 1

    ctx = make_ctx(5, 5, others=[make_orc(11, 5)])
    assert closest_monster(ctx, all_visible, 5) is None
