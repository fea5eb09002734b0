import sys
from collections import deque
from pathlib import Path

import pytest

# Ensure 'src' is on sys.path for test imports without installing the package
ROOT = Path(__file__).resolve().parents[1]
src = ROOT / "src"
if str(src) not in sys.path:
    sys.path.insert(0, str(src))

from tombs.config import GameConfig  # noqa: E402
from tombs.dungeon.tiles import GameMap  # noqa: E402
from tombs.entity import make_player  # noqa: E402
from tombs.interfaces import NoEvent  # noqa: E402
from tombs.messages import MessageLog  # noqa: E402
from tombs.rng import RandomSource  # noqa: E402
from tombs.world import GameContext  # noqa: E402


OPEN_ROOM = [
    "####################",
    "#..................#",
    "#..................#",
    "#..................#",
    "#..................#",
    "#..................#",
    "#..................#",
    "#..................#",
    "#..................#",
    "####################",
]


class ScriptedInput:
    """Hands out queued events, then NoEvent forever."""

    def __init__(self, events=()):
        self.events = deque(events)
        self.polls = 0

    def poll(self):
        self.polls += 1
        if self.events:
            return self.events.popleft()
        return NoEvent()


class ScriptedMenu:
    """Answers menus from a queue of choices (None once exhausted)."""

    def __init__(self, choices=()):
        self.choices = deque(choices)
        self.prompts = []
        self.boxes = []

    def choose(self, header, options, width=50):
        self.prompts.append((header, list(options)))
        if self.choices:
            return self.choices.popleft()
        return None

    def message_box(self, text, width=30):
        self.boxes.append(text)


class NullRenderer:
    def __init__(self):
        self.frames = 0
        self.fullscreen_toggles = 0

    def render(self, ctx, fov):
        self.frames += 1

    def toggle_fullscreen(self):
        self.fullscreen_toggles += 1


class ScriptedFrontend(ScriptedInput, ScriptedMenu, NullRenderer):
    def __init__(self, events=(), choices=()):
        ScriptedInput.__init__(self, events)
        ScriptedMenu.__init__(self, choices)
        NullRenderer.__init__(self)


class FixedVisibility:
    """Visibility oracle with a hand-picked visible set (or everything)."""

    def __init__(self, visible=None):
        self.visible = None if visible is None else set(visible)
        self.computed = []

    def compute(self, game_map, x, y, radius, light_walls=True):
        self.computed.append((x, y, radius))

    def is_visible(self, x, y):
        return self.visible is None or (x, y) in self.visible


@pytest.fixture
def rng():
    return RandomSource(1234)


@pytest.fixture
def open_map():
    return GameMap.from_ascii(OPEN_ROOM)


@pytest.fixture
def frontend():
    return ScriptedFrontend()


@pytest.fixture
def all_visible():
    return FixedVisibility()


@pytest.fixture
def fixed_visibility():
    return FixedVisibility


@pytest.fixture
def make_ctx(rng):
    """Factory: a context on the open room with the player at (x, y)."""

    def _make(x=5, y=5, others=(), config=None):
        player = make_player()
        player.set_pos(x, y)
        return GameContext(
            config=config or GameConfig(),
            game_map=GameMap.from_ascii(OPEN_ROOM),
            entities=[player, *others],
            messages=MessageLog(),
            inventory=[],
            dungeon_level=1,
            rng=rng,
        )

    return _make


@pytest.fixture
def scripted_frontend():
    return ScriptedFrontend
