"""Level builder façade.

:class:`LevelBuilder` is the composition root of an editing session. It owns
one :class:`~level_builder.grid.BlockGrid`, one
:class:`~level_builder.renderer.cache.RenderCache` and one rasterizer, and
exposes the editor-facing API on top of them.

Two dirty flags are tracked:

* ``RenderCache.stale`` - the cached bitmap no longer matches the grid.
* ``LevelBuilder.is_dirty()`` - the surrounding UI should redraw.

Every cell mutation sets both. Toggling the grid overlay sets only the redraw
flag, since the bitmap does not include the overlay. Dark-mode changes always
set the redraw flag and set staleness when
``BuilderConfig.dark_invalidates_cache`` is on. So staleness implies
redraw, but not the other way round. :meth:`LevelBuilder.get_frame` is the
UI's draw call and clears the redraw flag.

All public methods run under one re-entrant lock, which is the only
synchronisation needed when a host drives a builder from several threads.
"""

from __future__ import annotations

import logging
import threading
from typing import Iterable, Optional, Union

from pyrsistent import PVector

from level_builder.codec import FileFormat, decode, encode, to_patch
from level_builder.codec.lbl import encode_lbl
from level_builder.config import BuilderConfig
from level_builder.errors import LevelError
from level_builder.grid import BlockGrid, BlockLike
from level_builder.renderer.cache import RenderCache
from level_builder.renderer.texture import Rasterizer, TextureRasterizer
from level_builder.types import Bitmap, LevelNumber
from level_builder.utils.image import UInt8Array, draw_grid_overlay, to_rgba_array

logger = logging.getLogger(__name__)

ImportData = Union[str, bytes, bytearray, memoryview, Iterable[BlockLike]]

DEFAULT_LEVEL: LevelNumber = 0


class LevelBuilder:
    config: BuilderConfig
    grid: BlockGrid
    cache: RenderCache
    rasterizer: Rasterizer
    level: Optional[LevelNumber]

    def __init__(
        self,
        rasterizer: Optional[Rasterizer] = None,
        config: Optional[BuilderConfig] = None,
    ):
        self.config = config or BuilderConfig()
        self.grid = BlockGrid()
        self.cache = RenderCache()
        self.rasterizer = rasterizer or TextureRasterizer(self.config.render)
        self.level = None

        self._grid_overlay = self.config.grid
        self._dirty = True
        self._lock = threading.RLock()

        self.grid.subscribe(self._on_grid_change)

    def _on_grid_change(self) -> None:
        self.cache.invalidate()
        self._dirty = True

    # -------- Cells --------

    def add_block(self, index: int, block: BlockLike) -> None:
        with self._lock:
            self.grid.set(index, block)

    def get_level_data(self) -> PVector[str]:
        with self._lock:
            return self.grid.level_data()

    def clear(self) -> None:
        with self._lock:
            self.grid.clear()

    # -------- Export / import --------

    def export_level(self) -> PVector[str]:
        """Current level as a 1D patch of builder ids."""
        with self._lock:
            return to_patch(self.grid)

    def export(self, fmt: Union[str, FileFormat] = FileFormat.LBL) -> str:
        """Current level as LBL or AS3 text.

        Raises:
            ValueError: unknown format name.
            EncodeError: the grid holds an unknown block.
        """
        with self._lock:
            level = self.level if self.level is not None else DEFAULT_LEVEL
            return encode(self.grid, fmt, level)

    def export_lbl(self) -> bytes:
        with self._lock:
            return encode_lbl(self.grid)

    def import_level(self, data: ImportData) -> None:
        """
        Replace every cell from an exported representation: LBL bytes, LBL or
        AS3 text, or a 1D patch sequence. AS3 text also sets the level slot.
        A rejected payload leaves the builder exactly as it was.

        Raises:
            InvalidLevelData: wrong length or structure (``DecodeError`` for
                undecodable text/bytes).
        """
        with self._lock:
            try:
                if isinstance(data, (str, bytes, bytearray, memoryview)):
                    level, decoded = decode(data)
                    self.grid.replace(decoded.blocks())
                    if level is not None:
                        self.level = level
                else:
                    self.grid.replace(data)
            except LevelError as e:
                logger.warning("Rejected level import: %s", e)
                raise
            logger.info("Imported level (slot %r)", self.level)

    # -------- Level slot --------

    def set_level(self, level: Optional[LevelNumber]) -> None:
        with self._lock:
            if level is not None and (
                isinstance(level, bool) or not isinstance(level, (int, str))
            ):
                raise TypeError(f"Level must be int or str, got {level!r}")
            if isinstance(level, int) and level < 0:
                raise ValueError(f"Level number must be non-negative, got {level}")
            self.level = level

    def get_level(self) -> Optional[LevelNumber]:
        with self._lock:
            return self.level

    # -------- Dark mode --------

    def set_dark(self, value: bool) -> None:
        with self._lock:
            self.grid.set_dark(value)
            if self.config.dark_invalidates_cache:
                self.cache.invalidate()
            self._dirty = True

    def get_dark(self) -> bool:
        with self._lock:
            return self.grid.get_dark()

    # -------- Grid overlay --------

    def set_grid(self, value: bool) -> None:
        with self._lock:
            self._grid_overlay = bool(value)
            self._dirty = True

    def enable_grid(self) -> None:
        self.set_grid(True)

    def disable_grid(self) -> None:
        self.set_grid(False)

    def has_grid(self) -> bool:
        with self._lock:
            return self._grid_overlay

    # -------- Rendering --------

    def is_dirty(self) -> bool:
        with self._lock:
            return self._dirty

    def _bitmap(self) -> Bitmap:
        return self.cache.request_bitmap(self.grid, self.rasterizer)

    def get_image(self) -> Bitmap:
        """
        Level bitmap, rasterized first if stale. Returns a copy, so drawing on
        it never reaches the cached bitmap.
        """
        with self._lock:
            return self._bitmap().copy()

    def get_raw_image(self) -> UInt8Array:
        """Level bitmap as a ``(1080, 1920, 4)`` uint8 array."""
        with self._lock:
            return to_rgba_array(self._bitmap())

    def get_frame(self) -> Bitmap:
        """
        Compose the frame the editor shows: the level bitmap plus the grid
        overlay when enabled. Clears the redraw flag.
        """
        with self._lock:
            frame = self._bitmap().copy()
            if self._grid_overlay:
                render = self.config.render
                draw_grid_overlay(frame, render.grid_color, render.grid_width)
            self._dirty = False
            return frame
