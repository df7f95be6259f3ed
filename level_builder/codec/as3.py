"""AS3 ``lvlArray`` source codec.

Levels are also exchanged as ActionScript snippets, one assignment per row::

    lvlArray[3][0] = [B0, A1, 00, ..., "N0:hello"];
    lvlArray[3][1] = [...];

The first subscript is the level slot (an int, or a quoted name), the second
the row index. Note codes are written as double-quoted string literals; all
other codes are bare tokens. Blank lines and ``//`` comments are ignored.
"""

import json
import re
from typing import List, Optional, Tuple

from level_builder.blocks import Block, BlockKind
from level_builder.errors import DecodeError, EncodeError
from level_builder.grid import BlockGrid
from level_builder.types import LEVEL_HEIGHT, LEVEL_WIDTH, LevelNumber

ARRAY_NAME = "lvlArray"

_STRING = r'"(?:[^"\\\n]|\\.)*"'
_SKIP = re.compile(r"(?:\s+|//[^\n]*)*")
_HEADER = re.compile(
    ARRAY_NAME
    + r"\s*\[\s*(?P<level>\d+|"
    + _STRING
    + r")\s*\]\s*\[\s*(?P<row>\d+)\s*\]\s*=\s*\["
)
_ITEM = re.compile(r"\s*(?P<item>" + _STRING + r'|[^\s,\];"]+)\s*(?P<sep>[,\]])')
_END = re.compile(r"\s*;?")


def format_level(level: LevelNumber) -> str:
    if isinstance(level, int):
        if level < 0:
            raise EncodeError(f"Level number must be non-negative, got {level}")
        return str(level)
    return json.dumps(level)


def _format_item(block: Block, index: int) -> str:
    code = block.lbl
    if code is None:
        raise EncodeError(f"Block {block.builder_id!r} at {index} has no LBL code")
    if block.kind is BlockKind.NOTE:
        return json.dumps(code)
    return code


def encode_as3(grid: BlockGrid, level: LevelNumber = 0) -> str:
    """Encode a grid as ``lvlArray`` assignments for ``level``.

    Raises:
        EncodeError: the grid holds an ``UNKNOWN`` block, or ``level`` is a
            negative int.
    """
    head = format_level(level)
    blocks = grid.blocks()
    out: List[str] = []
    for row in range(LEVEL_HEIGHT):
        items = [
            _format_item(blocks[i], i)
            for i in range(row * LEVEL_WIDTH, (row + 1) * LEVEL_WIDTH)
        ]
        out.append(f"{ARRAY_NAME}[{head}][{row}] = [{', '.join(items)}];\n")
    return "".join(out)


def _parse_string(token: str) -> str:
    try:
        value = json.loads(token)
    except json.JSONDecodeError as e:
        raise DecodeError(f"Invalid string literal {token}: {e}") from e
    if not isinstance(value, str):
        raise DecodeError(f"Invalid string literal {token}")
    return value


def _parse_level(token: str) -> LevelNumber:
    if token.startswith('"'):
        return _parse_string(token)
    return int(token)


def _parse_item(token: str) -> Block:
    code = _parse_string(token) if token.startswith('"') else token
    block = Block.from_lbl(code)
    if block is None:
        raise DecodeError(f"Unknown LBL code {code!r}")
    return block


def decode_as3(text: str) -> Tuple[Optional[LevelNumber], BlockGrid]:
    """Decode ``lvlArray`` source into ``(level, grid)``.

    Rows must appear in order, hold exactly ``LEVEL_WIDTH`` entries, and all
    name the same level slot.

    Raises:
        DecodeError: malformed statements, out-of-order rows, wrong row or
            column counts, or unknown codes.
    """
    pos = 0
    level: Optional[LevelNumber] = None
    rows: List[List[Block]] = []
    while True:
        pos = _SKIP.match(text, pos).end()  # type: ignore[union-attr]
        if pos >= len(text):
            break
        header = _HEADER.match(text, pos)
        if header is None:
            raise DecodeError(f"Expected {ARRAY_NAME} assignment at offset {pos}")

        row_level = _parse_level(header["level"])
        if level is None:
            level = row_level
        elif row_level != level:
            raise DecodeError(f"Mixed level slots {level!r} and {row_level!r}")

        row = int(header["row"])
        if row != len(rows):
            raise DecodeError(f"Expected row {len(rows)}, got row {row}")

        pos = header.end()
        items: List[Block] = []
        while True:
            item = _ITEM.match(text, pos)
            if item is None:
                raise DecodeError(f"Malformed array entry in row {row} at offset {pos}")
            items.append(_parse_item(item["item"]))
            pos = item.end()
            if item["sep"] == "]":
                break
        pos = _END.match(text, pos).end()  # type: ignore[union-attr]

        if len(items) != LEVEL_WIDTH:
            raise DecodeError(
                f"Row {row} must hold {LEVEL_WIDTH} entries, got {len(items)}"
            )
        rows.append(items)

    if len(rows) != LEVEL_HEIGHT:
        raise DecodeError(f"Expected {LEVEL_HEIGHT} rows, got {len(rows)}")
    return level, BlockGrid(cells=[block for row in rows for block in row])
