"""RGB colors shared by the core (message severities, glyphs) and frontends."""
from __future__ import annotations

from typing import Tuple

Color = Tuple[int, int, int]

BLACK: Color = (0, 0, 0)
WHITE: Color = (255, 255, 255)
LIGHT_GREY: Color = (159, 159, 159)
RED: Color = (255, 0, 0)
LIGHT_RED: Color = (255, 115, 115)
DARK_RED: Color = (191, 0, 0)
DARKER_RED: Color = (127, 0, 0)
ORANGE: Color = (255, 127, 0)
YELLOW: Color = (255, 255, 0)
LIGHT_YELLOW: Color = (255, 255, 115)
GREEN: Color = (0, 255, 0)
LIGHT_GREEN: Color = (115, 255, 115)
DESATURATED_GREEN: Color = (63, 127, 63)
DARKER_GREEN: Color = (0, 127, 0)
LIGHT_CYAN: Color = (115, 255, 255)
LIGHT_BLUE: Color = (115, 115, 255)
VIOLET: Color = (127, 0, 255)
LIGHT_VIOLET: Color = (185, 115, 255)

# Map backgrounds
DARK_WALL: Color = (0, 0, 100)
LIGHT_WALL: Color = (130, 110, 50)
DARK_GROUND: Color = (50, 50, 150)
LIGHT_GROUND: Color = (200, 180, 50)


def as_color(value) -> Color:
    """Coerce a JSON list (or any 3-sequence) back into a color tuple."""
    r, g, b = value
    return (int(r), int(g), int(b))
