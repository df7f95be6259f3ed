from __future__ import annotations

import logging
import operator
from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Tuple, Union

from pyrsistent import PVector, pvector

from level_builder.blocks import EMPTY, Block
from level_builder.errors import InvalidIndex, InvalidLevelData
from level_builder.types import LEVEL_HEIGHT, LEVEL_SIZE, LEVEL_WIDTH

logger = logging.getLogger(__name__)

# Grid coordinate alias (x, y)
Position = Tuple[int, int]

BlockLike = Union[Block, str]
ChangeFn = Callable[[], None]


def position_of(index: int) -> Position:
    """Linear cell index -> ``(x, y)``."""
    return index % LEVEL_WIDTH, index // LEVEL_WIDTH


def index_of(x: int, y: int) -> int:
    """``(x, y)`` -> linear cell index."""
    return y * LEVEL_WIDTH + x


def to_block(value: BlockLike) -> Block:
    if isinstance(value, Block):
        return value
    if isinstance(value, str):
        return Block.parse(value)
    raise TypeError(f"Expected Block or builder id, got {type(value).__name__}")


def empty_cells() -> PVector[Block]:
    return pvector([EMPTY] * LEVEL_SIZE)


@dataclass(eq=True)
class BlockGrid:
    """
    Fixed 32x18 store of level cells; the single source of truth for a level.
    - `cells[i]` is the block at `(i % 32, i // 32)`.
    - Cells live in a persistent vector, so read views handed out by
      `blocks()` / `level_data()` never change under the caller.
    - Every cell mutation notifies subscribers, even when the value is unchanged.
      The dark flag is plain state and does not notify.
    """

    width: int = field(default=LEVEL_WIDTH, init=False)
    height: int = field(default=LEVEL_HEIGHT, init=False)
    cells: PVector[Block] = field(default_factory=empty_cells)
    dark: bool = False

    _observers: List[ChangeFn] = field(
        default_factory=list, init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        if len(self.cells) != LEVEL_SIZE:
            raise InvalidLevelData(
                f"Level data must hold {LEVEL_SIZE} cells, got {len(self.cells)}"
            )
        self.cells = pvector(to_block(cell) for cell in self.cells)

    # -------- Cell access --------

    def set(self, index: int, block: BlockLike) -> None:
        """
        Place a block at a linear index. Unrecognized builder ids are stored
        as UNKNOWN blocks; asset lookup is the rasterizer's concern.
        """
        index = self._check_index(index)
        value = to_block(block)
        if not value.is_known:
            logger.warning("Unknown block id %r placed at %d", value.builder_id, index)
        self.cells = self.cells.set(index, value)
        self._notify()

    def get(self, index: int) -> Block:
        return self.cells[self._check_index(index)]

    def at(self, x: int, y: int) -> Block:
        self._check_bounds(x, y)
        return self.cells[index_of(x, y)]

    def blocks(self) -> PVector[Block]:
        return self.cells

    def level_data(self) -> PVector[str]:
        """Read-only ordered view of the cells as builder ids."""
        return pvector(block.builder_id for block in self.cells)

    def replace(self, cells: Iterable[BlockLike]) -> None:
        """
        Swap in a whole new cell list. Validation happens before any state
        changes, so a rejected payload leaves the grid untouched.
        """
        try:
            items = list(cells)
        except TypeError as e:
            raise InvalidLevelData(f"Level data is not a sequence: {e}") from e
        if len(items) != LEVEL_SIZE:
            raise InvalidLevelData(
                f"Level data must hold {LEVEL_SIZE} cells, got {len(items)}"
            )
        try:
            blocks = [to_block(item) for item in items]
        except TypeError as e:
            raise InvalidLevelData(str(e)) from e
        self.cells = pvector(blocks)
        self._notify()

    def clear(self) -> None:
        self.cells = empty_cells()
        self._notify()

    # -------- Dark flag --------

    def set_dark(self, value: bool) -> None:
        self.dark = bool(value)

    def get_dark(self) -> bool:
        return self.dark

    # -------- Observers --------

    def subscribe(self, callback: ChangeFn) -> None:
        self._observers.append(callback)

    def unsubscribe(self, callback: ChangeFn) -> None:
        self._observers.remove(callback)

    def copy(self) -> BlockGrid:
        """Detached snapshot without subscribers."""
        return BlockGrid(cells=self.cells, dark=self.dark)

    # -------- Internal helpers --------

    def _notify(self) -> None:
        for callback in list(self._observers):
            callback()

    def _check_index(self, index: int) -> int:
        if isinstance(index, bool):
            raise InvalidIndex(f"Cell index must be an int, got {index!r}")
        try:
            i = operator.index(index)
        except TypeError as e:
            raise InvalidIndex(f"Cell index must be an int, got {index!r}") from e
        if not 0 <= i < LEVEL_SIZE:
            raise InvalidIndex(f"Out of bounds: {i} for grid of {LEVEL_SIZE}")
        return i

    def _check_bounds(self, x: int, y: int) -> None:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise InvalidIndex(
                f"Out of bounds: {(x, y)} for grid {self.width}x{self.height}"
            )
