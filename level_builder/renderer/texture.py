import logging
import os
from typing import Dict, Optional, Protocol, Tuple

from PIL import Image

from level_builder.config import RenderConfig
from level_builder.grid import BlockGrid, position_of
from level_builder.types import BOX_SIZE, IMAGE_HEIGHT, IMAGE_WIDTH, Bitmap
from level_builder.utils.image import darken_image

logger = logging.getLogger(__name__)

IMAGE_SIZE: Tuple[int, int] = (IMAGE_WIDTH, IMAGE_HEIGHT)
TEXTURE_DIR = "images"
BACKGROUND_DIR = "backgrounds"

TextureKey = Tuple[str, Tuple[int, int]]


class Rasterizer(Protocol):
    """Turns a grid into a 1920x1080 RGBA bitmap.

    Implementations must be pure in the grid's cells and dark flag; the render
    cache relies on that to skip redundant work.
    """

    def render(self, grid: BlockGrid) -> Bitmap: ...


def load_texture(path: str, size: Tuple[int, int]) -> Optional[Image.Image]:
    try:
        with Image.open(path) as img:
            return img.convert("RGBA").resize(size, Image.Resampling.NEAREST)
    except OSError:
        return None


def texture_path(asset_root: str, asset_name: str) -> str:
    return os.path.join(asset_root, TEXTURE_DIR, f"{asset_name}.png")


def background_path(asset_root: str, background: str) -> str:
    return os.path.join(asset_root, BACKGROUND_DIR, f"{background}.png")


def render(
    grid: BlockGrid,
    config: RenderConfig,
    cache: Dict[TextureKey, Optional[Image.Image]],
) -> Bitmap:
    """
    Renders a grid as a PIL Image: background, then one texture per non-empty
    cell, then dark shading if the grid is dark. Cells whose texture is missing
    are skipped.
    """
    background = _lookup(
        cache, background_path(config.asset_root, config.background), IMAGE_SIZE
    )
    if background is None:
        img = Image.new("RGBA", IMAGE_SIZE, (*config.background_color, 255))
    else:
        img = background.copy()

    missing = set()
    for i, block in enumerate(grid.blocks()):
        if block.is_empty:
            continue
        tex = _lookup(
            cache,
            texture_path(config.asset_root, block.asset_name),
            (BOX_SIZE, BOX_SIZE),
        )
        if tex is None:
            missing.add(block.asset_name)
            continue
        x, y = position_of(i)
        img.alpha_composite(tex, (x * BOX_SIZE, y * BOX_SIZE))

    if missing:
        logger.debug("Skipped blocks with missing textures: %s", sorted(missing))

    if grid.dark:
        img = darken_image(img, config.dark_factor)
    return img


def _lookup(
    cache: Dict[TextureKey, Optional[Image.Image]],
    path: str,
    size: Tuple[int, int],
) -> Optional[Image.Image]:
    key = (path, size)
    if key not in cache:
        cache[key] = load_texture(path, size)
    return cache[key]


class TextureRasterizer:
    """Reference rasterizer backed by PNG assets on disk.

    Each instance keeps its own texture cache, so two editing sessions never
    share loaded images.
    """

    config: RenderConfig

    def __init__(self, config: Optional[RenderConfig] = None):
        self.config = config or RenderConfig()
        self._textures: Dict[TextureKey, Optional[Image.Image]] = {}

    def render(self, grid: BlockGrid) -> Bitmap:
        return render(grid, self.config, self._textures)

    def clear_textures(self) -> None:
        self._textures.clear()
