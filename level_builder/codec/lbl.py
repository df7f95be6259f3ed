"""LBL level file codec.

Layout: UTF-8 text with one LBL code per line, in cell order, ``\\n``
separated. Exactly ``LEVEL_SIZE`` lines; a single trailing newline is
accepted on decode and always written on encode. Note payloads are escaped
(see :func:`level_builder.blocks.escape_note`) so each block stays on one line.

The format carries cells only: decoded grids have ``dark=False``.
"""

import logging
from typing import List, Union

from level_builder.blocks import Block
from level_builder.errors import DecodeError, EncodeError
from level_builder.grid import BlockGrid
from level_builder.types import LEVEL_SIZE

logger = logging.getLogger(__name__)

LBL_ENCODING = "utf-8"


def encode_lbl_lines(grid: BlockGrid) -> List[str]:
    lines: List[str] = []
    for i, block in enumerate(grid.blocks()):
        code = block.lbl
        if code is None:
            raise EncodeError(
                f"Block {block.builder_id!r} at {i} has no LBL code"
            )
        lines.append(code)
    return lines


def encode_lbl_text(grid: BlockGrid) -> str:
    return "\n".join(encode_lbl_lines(grid)) + "\n"


def encode_lbl(grid: BlockGrid) -> bytes:
    """Encode a grid to LBL bytes.

    Raises:
        EncodeError: the grid holds an ``UNKNOWN`` block.
    """
    return encode_lbl_text(grid).encode(LBL_ENCODING)


def decode_lbl_text(text: str) -> BlockGrid:
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    if len(lines) != LEVEL_SIZE:
        raise DecodeError(f"LBL data must hold {LEVEL_SIZE} lines, got {len(lines)}")

    cells: List[Block] = []
    for i, line in enumerate(lines):
        block = Block.from_lbl(line.rstrip("\r"))
        if block is None:
            raise DecodeError(f"Unknown LBL code {line!r} on line {i + 1}")
        cells.append(block)
    return BlockGrid(cells=cells)


def decode_lbl(data: Union[bytes, bytearray, memoryview]) -> BlockGrid:
    """Decode LBL bytes into a fresh grid.

    Raises:
        DecodeError: invalid UTF-8, wrong line count, or an unknown code.
    """
    try:
        text = bytes(data).decode(LBL_ENCODING)
    except UnicodeDecodeError as e:
        raise DecodeError(f"LBL data is not valid {LBL_ENCODING}: {e}") from e
    grid = decode_lbl_text(text)
    logger.debug("Decoded LBL level (%d bytes)", len(data))
    return grid
