import pytest

from tombs import colors
from tombs.messages import MessageLog


def test_messages_keep_order_and_color():
    log = MessageLog()
    log.add("hello", colors.RED)
    log.add("world")
    assert log.texts() == ["hello", "world"]
    assert [m.color for m in log] == [colors.RED, colors.WHITE]
    assert log.last() == "world"


def test_capacity_drops_oldest():
    log = MessageLog(capacity=3)
    for i in range(5):
        log.add(f"m{i}")
    assert log.texts() == ["m2", "m3", "m4"]
    assert [m.text for m in log.get_recent(2)] == ["m3", "m4"]
    assert log.get_recent(0) == []


def test_dict_round_trip_restores_color_tuples():
    log = MessageLog()
    log.add("You died!", colors.RED)
    restored = MessageLog.from_dict(log.to_dict())
    assert restored == log
    assert restored.get_recent(1)[0].color == (255, 0, 0)


def test_capacity_must_be_positive():
    with pytest.raises(ValueError):
        MessageLog(capacity=0)
