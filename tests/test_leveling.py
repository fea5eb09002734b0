from tombs.combat import character_sheet, check_level_up
from tombs.config import GameConfig
from tombs.entity import make_player
from tombs.messages import MessageLog


class Chooser:
    def __init__(self, *answers):
        self.answers = list(answers)
        self.calls = 0

    def __call__(self, header, options):
        self.calls += 1
        assert len(options) == 3
        return self.answers.pop(0)


def test_threshold_grows_with_level():
    cfg = GameConfig()
    assert cfg.level_up_threshold(1) == 350
    assert cfg.level_up_threshold(2) == 500


def test_exact_threshold_leaves_no_remainder():
    cfg, log, player = GameConfig(), MessageLog(), make_player()
    player.fighter.xp = 350
    assert check_level_up(player, cfg, log, Chooser(0))
    assert player.level == 2
    assert player.fighter.xp == 0
    assert player.fighter.max_hp == 50
    assert player.fighter.hp == 50
    assert log.last() == "Your battle skills grow stronger! You reached level 2!"


def test_excess_xp_carries_over():
    cfg, log, player = GameConfig(), MessageLog(), make_player()
    player.fighter.xp = 400
    assert check_level_up(player, cfg, log, Chooser(1))
    assert player.fighter.xp == 50
    assert player.fighter.power == 6


def test_below_threshold_does_not_prompt():
    cfg, log, player = GameConfig(), MessageLog(), make_player()
    player.fighter.xp = 349
    chooser = Chooser()
    assert not check_level_up(player, cfg, log, chooser)
    assert chooser.calls == 0
    assert player.level == 1


def test_prompt_repeats_until_a_stat_is_chosen():
    cfg, log, player = GameConfig(), MessageLog(), make_player()
    player.fighter.xp = 350
    chooser = Chooser(None, 7, 2)
    check_level_up(player, cfg, log, chooser)
    assert chooser.calls == 3
    assert player.fighter.defense == 3


def test_character_sheet_lists_progress():
    sheet = character_sheet(make_player(), GameConfig())
    assert "Level: 1" in sheet
    assert "Experience to level up: 350" in sheet
    assert "Maximum HP: 30" in sheet
