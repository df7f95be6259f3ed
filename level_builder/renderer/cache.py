"""Bitmap cache keyed on grid staleness.

``RenderCache`` owns at most one bitmap. Grid mutations call
:meth:`RenderCache.invalidate`; the next :meth:`RenderCache.request_bitmap`
re-rasterizes exactly once and every later request is served from the cache
until the next invalidation. A new bitmap replaces the old one in a single
assignment, so callers only ever see whole images.
"""

import logging
from typing import Optional

from level_builder.grid import BlockGrid
from level_builder.renderer.texture import IMAGE_SIZE, Rasterizer
from level_builder.types import Bitmap

logger = logging.getLogger(__name__)


def check_bitmap(bitmap: Bitmap) -> None:
    """Enforce the rasterizer output contract (RGBA, 1920x1080)."""
    if bitmap.mode != "RGBA" or bitmap.size != IMAGE_SIZE:
        raise ValueError(
            f"Rasterizer must return an RGBA {IMAGE_SIZE[0]}x{IMAGE_SIZE[1]} image, "
            f"got {bitmap.mode} {bitmap.size[0]}x{bitmap.size[1]}"
        )


class RenderCache:
    bitmap: Optional[Bitmap]
    stale: bool
    render_count: int

    def __init__(self) -> None:
        self.bitmap = None
        self.stale = True
        self.render_count = 0

    def invalidate(self) -> None:
        self.stale = True

    def clear(self) -> None:
        self.bitmap = None
        self.stale = True

    def request_bitmap(self, grid: BlockGrid, rasterizer: Rasterizer) -> Bitmap:
        """Return the cached bitmap, rasterizing first if it is stale.

        Raises:
            ValueError: the rasterizer broke its output contract. The previous
                bitmap and the stale flag are left as they were.
        """
        if not self.stale and self.bitmap is not None:
            logger.debug("Serving cached bitmap")
            return self.bitmap

        bitmap = rasterizer.render(grid)
        check_bitmap(bitmap)
        self.bitmap = bitmap
        self.stale = False
        self.render_count += 1
        logger.debug("Rasterized level (render #%d)", self.render_count)
        return bitmap
