# tests/unit/test_format.py

import pytest

from level_builder.codec import (
    FileFormat,
    decode,
    encode,
    encode_as3,
    encode_lbl,
    guess_format,
    parse_format,
)
from level_builder.errors import DecodeError
from level_builder.grid import BlockGrid
from tests.test_utils import make_catalog_grid


def test_guess_format() -> None:
    grid = make_catalog_grid()
    assert guess_format(encode_lbl(grid).decode()) is FileFormat.LBL
    assert guess_format(encode_as3(grid, 2)) is FileFormat.AS3
    assert guess_format("hello world") is None
    assert guess_format("") is None


def test_decode_dispatch() -> None:
    grid = make_catalog_grid()
    assert decode(encode_lbl(grid)) == (None, grid)
    assert decode(encode_lbl(grid).decode()) == (None, grid)
    assert decode(encode_as3(grid, "x")) == ("x", grid)
    assert decode(encode_as3(grid, 5).encode()) == (5, grid)


def test_decode_unrecognized() -> None:
    with pytest.raises(DecodeError):
        decode("nonsense\n")
    with pytest.raises(DecodeError):
        decode(b"\xff\xff")


@pytest.mark.parametrize("name", ["lbl", "LBL", FileFormat.LBL])
def test_parse_format_lbl(name: str) -> None:
    assert parse_format(name) is FileFormat.LBL


def test_parse_format_unknown() -> None:
    with pytest.raises(ValueError, match="Unknown format"):
        parse_format("json")


def test_encode_dispatch() -> None:
    grid = make_catalog_grid()
    assert encode(grid) == encode_lbl(grid).decode()
    assert encode(grid, "as3", 9) == encode_as3(grid, 9)
    with pytest.raises(ValueError):
        encode(BlockGrid(), "png")


def test_guess_format_skips_leading_comments() -> None:
    text = "\n// level 2\n  \r\n" + encode_as3(make_catalog_grid(), 2)
    assert guess_format(text) is FileFormat.AS3
    assert decode(text) == (2, make_catalog_grid())
    assert guess_format("// only a comment\n") is None
