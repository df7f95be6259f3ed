"""Block catalog package.

Re-exports the closed set of block kinds and the :class:`Block` value type so
callers can write::

    from level_builder.blocks import Block, BlockKind

``Block`` instances are immutable; grids store them directly and convert to
builder ids or LBL codes only at the export boundary.
"""

from .block import (
    CATALOG,
    EMPTY,
    NOTE_ASSET,
    NOTE_BUILDER_PREFIX,
    NOTE_LBL_PREFIX,
    PAYLOAD_KINDS,
    Block,
    BlockKind,
    Direction,
    escape_note,
    unescape_note,
)

__all__ = [
    "CATALOG",
    "EMPTY",
    "NOTE_ASSET",
    "NOTE_BUILDER_PREFIX",
    "NOTE_LBL_PREFIX",
    "PAYLOAD_KINDS",
    "Block",
    "BlockKind",
    "Direction",
    "escape_note",
    "unescape_note",
]
