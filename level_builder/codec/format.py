"""File format detection and dispatch."""

from enum import StrEnum, auto
from typing import Optional, Tuple, Union

from level_builder.blocks import Block
from level_builder.codec.as3 import ARRAY_NAME, decode_as3, encode_as3
from level_builder.codec.lbl import LBL_ENCODING, decode_lbl_text, encode_lbl_text
from level_builder.errors import DecodeError
from level_builder.grid import BlockGrid
from level_builder.types import LevelNumber


class FileFormat(StrEnum):
    LBL = auto()
    AS3 = auto()


def parse_format(name: Union[str, FileFormat]) -> FileFormat:
    try:
        return FileFormat(str(name).lower())
    except ValueError:
        raise ValueError(f"Unknown format: {name}") from None


def guess_format(text: str) -> Optional[FileFormat]:
    """Guess a level file's format from its first line.

    Leading blank lines and ``//`` comments are skipped; LBL files never
    contain either.
    """
    for line in text.split("\n"):
        line = line.rstrip("\r")
        stripped = line.strip()
        if not stripped or stripped.startswith("//"):
            continue
        if Block.from_lbl(line) is not None:
            return FileFormat.LBL
        if stripped.startswith(ARRAY_NAME):
            return FileFormat.AS3
        return None
    return None


def decode(data: Union[str, bytes]) -> Tuple[Optional[LevelNumber], BlockGrid]:
    """Decode level text or bytes in any supported format.

    Returns ``(level, grid)``; ``level`` is ``None`` for formats without a
    level slot.
    """
    if isinstance(data, (bytes, bytearray, memoryview)):
        try:
            text = bytes(data).decode(LBL_ENCODING)
        except UnicodeDecodeError as e:
            raise DecodeError(f"Level data is not valid {LBL_ENCODING}: {e}") from e
    else:
        text = data

    fmt = guess_format(text)
    if fmt is FileFormat.LBL:
        return None, decode_lbl_text(text)
    if fmt is FileFormat.AS3:
        return decode_as3(text)
    raise DecodeError("Unrecognized level format")


def encode(
    grid: BlockGrid,
    fmt: Union[str, FileFormat] = FileFormat.LBL,
    level: LevelNumber = 0,
) -> str:
    fmt = parse_format(fmt)
    if fmt is FileFormat.AS3:
        return encode_as3(grid, level)
    return encode_lbl_text(grid)
