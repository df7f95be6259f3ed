"""Common constants, type aliases and enumerations.

The level geometry and bitmap resolution are fixed external contracts: every
level is a 32x18 grid and every rendered frame is a 1920x1080 RGBA image, so
one cell always covers a 60x60 pixel box.
"""

from enum import StrEnum, auto
from typing import Tuple, Union

from PIL import Image


LEVEL_WIDTH = 32
LEVEL_HEIGHT = 18
LEVEL_SIZE = LEVEL_WIDTH * LEVEL_HEIGHT

IMAGE_WIDTH = 1920
IMAGE_HEIGHT = 1080
BOX_SIZE = IMAGE_WIDTH // LEVEL_WIDTH

EMPTY_ID = "null"

Bitmap = Image.Image
Color = Tuple[int, int, int]

# AS3 level slot: ``lvlArray[3]`` or ``lvlArray["bonus"]``
LevelNumber = Union[int, str]


class BackgroundType(StrEnum):
    """Background artwork drawn beneath the block layer."""

    COBBLE = auto()
