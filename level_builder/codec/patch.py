"""1D patch export.

A patch is the flat, order-preserving list of builder ids for a grid: entry
``i`` is the block at ``(i % 32, i // 32)``. Patches are what the editor hands
to transport and logging layers, so every function here is pure.
"""

from __future__ import annotations

from typing import Iterable, Sequence

from pyrsistent import PVector, pvector

from level_builder.errors import InvalidLevelData
from level_builder.grid import BlockGrid
from level_builder.types import LEVEL_SIZE


def to_patch(grid: BlockGrid) -> PVector[str]:
    """Return the grid's cells as builder ids, in cell order."""
    return grid.level_data()


def from_patch(patch: Sequence[str]) -> BlockGrid:
    """Build a fresh grid from a patch.

    Raises:
        InvalidLevelData: wrong length or a non-string entry.
    """
    items = list(patch)
    if len(items) != LEVEL_SIZE:
        raise InvalidLevelData(
            f"Patch must hold {LEVEL_SIZE} entries, got {len(items)}"
        )
    for i, item in enumerate(items):
        if not isinstance(item, str):
            raise InvalidLevelData(
                f"Patch entry {i} is {type(item).__name__}, expected str"
            )
    return BlockGrid(cells=pvector(items))


def export_1d_patch(cells: Iterable[str]) -> str:
    """Comma-joined string form of a patch, for transport or log lines."""
    return ",".join(cells)
