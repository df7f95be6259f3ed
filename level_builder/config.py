"""Builder and renderer configuration.

Configuration objects are frozen dataclasses passed explicitly to the objects
that need them; nothing here is process-wide state.
"""

from dataclasses import dataclass, field

from level_builder.types import BackgroundType, Color

DEFAULT_ASSET_ROOT = "assets"
DEFAULT_DARK_FACTOR = 0.45
DEFAULT_BACKGROUND_COLOR: Color = (96, 96, 104)
DEFAULT_GRID_COLOR: Color = (0, 0, 0)
DEFAULT_GRID_WIDTH = 4


@dataclass(frozen=True)
class RenderConfig:
    """Reference rasterizer settings.

    Attributes:
        asset_root: Directory holding ``images/<asset>.png`` block textures and
            ``backgrounds/<background>.png``.
        background: Background artwork drawn beneath the blocks.
        background_color: Flat fill used when the background image is missing.
        dark_factor: RGB multiplier applied when the grid is in dark mode.
        grid_color: Stroke colour of the editor grid overlay.
        grid_width: Stroke width of the editor grid overlay, in pixels.
    """

    asset_root: str = DEFAULT_ASSET_ROOT
    background: BackgroundType = BackgroundType.COBBLE
    background_color: Color = DEFAULT_BACKGROUND_COLOR
    dark_factor: float = DEFAULT_DARK_FACTOR
    grid_color: Color = DEFAULT_GRID_COLOR
    grid_width: int = DEFAULT_GRID_WIDTH


@dataclass(frozen=True)
class BuilderConfig:
    """Editing session settings.

    Attributes:
        dark_invalidates_cache: If True, toggling dark mode forces the next
            image request to re-rasterize. If False, dark mode only marks the
            editor for redraw and the cached bitmap is reused.
        grid: Initial state of the editor grid overlay.
        render: Settings for the default rasterizer and the grid overlay.
    """

    dark_invalidates_cache: bool = True
    grid: bool = True
    render: RenderConfig = field(default_factory=RenderConfig)
