# tests/integration/test_builder.py

import threading
from pathlib import Path

import numpy as np
import pytest

from level_builder.builder import LevelBuilder
from level_builder.codec import encode_as3, encode_lbl
from level_builder.config import BuilderConfig
from level_builder.errors import DecodeError, EncodeError, InvalidIndex, InvalidLevelData
from level_builder.renderer.texture import TextureRasterizer
from level_builder.types import IMAGE_HEIGHT, IMAGE_WIDTH, LEVEL_SIZE
from tests.test_utils import CountingRasterizer, make_catalog_grid


def make_builder(**config_kwargs: object) -> tuple[LevelBuilder, CountingRasterizer]:
    raster = CountingRasterizer()
    builder = LevelBuilder(rasterizer=raster, config=BuilderConfig(**config_kwargs))  # type: ignore[arg-type]
    return builder, raster


def test_concrete_scenario() -> None:
    builder, _ = make_builder()
    builder.add_block(0, "b0")
    builder.add_block(1, "a1")
    assert list(builder.export_level()) == ["b0", "a1"] + ["null"] * 574
    assert builder.get_level_data()[0] == "b0"
    assert builder.get_level_data()[1] == "a1"


def test_add_block_out_of_range() -> None:
    builder, _ = make_builder()
    before = builder.get_level_data()
    for index in (-1, LEVEL_SIZE):
        with pytest.raises(InvalidIndex):
            builder.add_block(index, "b0")
    assert builder.get_level_data() == before


def test_dirty_before_render() -> None:
    builder, raster = make_builder()
    builder.get_image()
    builder.get_image()
    assert raster.calls == 1

    builder.add_block(10, "b0")
    builder.get_image()
    builder.get_image()
    assert raster.calls == 2


def test_same_value_still_invalidates() -> None:
    builder, raster = make_builder()
    builder.add_block(3, "b0")
    builder.get_image()
    builder.add_block(3, "b0")
    builder.get_image()
    assert raster.calls == 2


def test_get_image_served_from_cache() -> None:
    builder, raster = make_builder()
    first = builder.get_image()
    second = builder.get_image()
    assert raster.calls == 1
    assert first is not second
    assert first is not builder.cache.bitmap


def test_drawing_on_image_leaves_cache_intact() -> None:
    builder, _ = make_builder()
    image = builder.get_image()
    before = image.getpixel((5, 5))
    image.putpixel((5, 5), (1, 2, 3, 4))
    assert builder.get_image().getpixel((5, 5)) == before
    assert builder.cache.bitmap.getpixel((5, 5)) == before


def test_raw_image_shape() -> None:
    builder, _ = make_builder()
    raw = builder.get_raw_image()
    assert raw.shape == (IMAGE_HEIGHT, IMAGE_WIDTH, 4)
    assert raw.dtype == np.uint8


def test_import_patch() -> None:
    builder, raster = make_builder()
    builder.get_image()
    patch = ["x0"] * LEVEL_SIZE
    builder.import_level(patch)
    assert list(builder.get_level_data()) == patch
    builder.get_image()
    assert raster.calls == 2


@pytest.mark.parametrize("length", [0, 575, 577])
def test_import_rejects_wrong_length(length: int) -> None:
    builder, raster = make_builder()
    builder.add_block(7, "k0")
    builder.get_frame()
    before = builder.get_level_data()
    with pytest.raises(InvalidLevelData):
        builder.import_level(["b0"] * length)
    assert builder.get_level_data() == before
    assert not builder.is_dirty()
    assert not builder.cache.stale
    assert raster.calls == 1


def test_import_lbl_bytes_and_text() -> None:
    grid = make_catalog_grid()
    builder, _ = make_builder()
    builder.import_level(encode_lbl(grid))
    assert builder.grid.blocks() == grid.blocks()

    other, _ = make_builder()
    other.import_level(encode_lbl(grid).decode())
    assert other.get_level_data() == builder.get_level_data()


def test_import_as3_sets_level_slot() -> None:
    grid = make_catalog_grid()
    builder, _ = make_builder()
    builder.import_level(encode_as3(grid, "secret"))
    assert builder.get_level() == "secret"
    assert builder.grid.blocks() == grid.blocks()


def test_import_lbl_keeps_level_slot_and_dark() -> None:
    builder, _ = make_builder()
    builder.set_level(4)
    builder.set_dark(True)
    builder.import_level(encode_lbl(make_catalog_grid()))
    assert builder.get_level() == 4
    assert builder.get_dark() is True


def test_import_garbage_is_rejected_whole() -> None:
    builder, _ = make_builder()
    builder.add_block(0, "b0")
    builder.set_level(2)
    before = builder.get_level_data()
    bad = encode_as3(make_catalog_grid(), 9).replace("[00,", "[ZZ,", 1)
    with pytest.raises(DecodeError):
        builder.import_level(bad)
    with pytest.raises(InvalidLevelData):
        builder.import_level(b"B0\n" * 100)
    assert builder.get_level_data() == before
    assert builder.get_level() == 2


def test_export_formats() -> None:
    builder, _ = make_builder()
    builder.add_block(0, "Note:D5")
    assert builder.export().splitlines()[0] == "N0:D5"
    assert builder.export("lbl").encode() == builder.export_lbl()
    assert builder.export("as3").startswith('lvlArray[0][0] = ["N0:D5", ')
    builder.set_level(6)
    assert builder.export("as3").startswith("lvlArray[6][0]")
    with pytest.raises(ValueError):
        builder.export("xml")


def test_export_round_trip_through_builder() -> None:
    source, _ = make_builder()
    source.import_level(list(make_catalog_grid().level_data()))
    source.set_level("lvl")
    target, _ = make_builder()
    target.import_level(source.export("as3"))
    assert target.get_level_data() == source.get_level_data()
    assert target.get_level() == "lvl"


def test_export_unknown_block() -> None:
    builder, _ = make_builder()
    builder.add_block(0, "unheard-of")
    assert builder.get_level_data()[0] == "unheard-of"
    with pytest.raises(EncodeError):
        builder.export()


def test_set_level_type_check() -> None:
    builder, _ = make_builder()
    with pytest.raises(TypeError):
        builder.set_level(1.5)  # type: ignore[arg-type]
    builder.set_level(None)
    assert builder.get_level() is None


@pytest.mark.parametrize("level", [-1, -42])
def test_set_level_rejects_negative(level: int) -> None:
    builder, _ = make_builder()
    builder.set_level(3)
    with pytest.raises(ValueError, match="non-negative"):
        builder.set_level(level)
    assert builder.get_level() == 3


def test_as3_export_with_level_imports_back() -> None:
    builder, _ = make_builder()
    builder.add_block(7, "b0")
    builder.set_level(0)
    other, _ = make_builder()
    other.import_level(builder.export("as3"))
    assert other.get_level() == 0
    assert other.get_level_data() == builder.get_level_data()


def test_dark_invalidates_by_default() -> None:
    builder, raster = make_builder()
    builder.get_image()
    builder.set_dark(True)
    assert builder.get_dark() is True
    assert builder.is_dirty()
    builder.get_image()
    assert raster.calls == 2
    assert raster.seen[-1][1] is True


def test_dark_without_invalidation_policy() -> None:
    builder, raster = make_builder(dark_invalidates_cache=False)
    builder.get_frame()
    builder.set_dark(True)
    assert builder.is_dirty()
    assert not builder.cache.stale
    builder.get_image()
    assert raster.calls == 1
    builder.add_block(0, "b0")
    builder.get_image()
    assert raster.calls == 2
    assert raster.seen[-1][1] is True


def test_dark_flag_isolation() -> None:
    builder, _ = make_builder()
    builder.add_block(12, "s3")
    before = builder.get_level_data()
    for _ in range(2):
        builder.set_dark(True)
        builder.set_dark(False)
    assert builder.get_level_data() == before


def test_grid_overlay_sets_redraw_only() -> None:
    builder, raster = make_builder()
    assert builder.has_grid()
    builder.get_frame()
    assert not builder.is_dirty()

    builder.disable_grid()
    assert builder.is_dirty()
    assert not builder.cache.stale
    builder.get_frame()
    assert raster.calls == 1
    assert not builder.is_dirty()

    builder.enable_grid()
    assert builder.has_grid()
    assert builder.is_dirty()


def test_frame_overlay_does_not_touch_cached_bitmap() -> None:
    builder, _ = make_builder(grid=True)
    frame = builder.get_frame()
    image = builder.get_image()
    assert frame is not image
    assert frame.getpixel((0, 0)) == (0, 0, 0, 255)
    assert image.getpixel((0, 0)) != (0, 0, 0, 255)


def test_frame_without_overlay_matches_image() -> None:
    builder, _ = make_builder(grid=False)
    frame = builder.get_frame()
    assert np.array_equal(np.array(frame), builder.get_raw_image())


def test_staleness_implies_redraw() -> None:
    builder, _ = make_builder()
    builder.get_frame()
    builder.add_block(0, "b0")
    assert builder.cache.stale
    assert builder.is_dirty()


def test_clear() -> None:
    builder, _ = make_builder()
    builder.add_block(0, "b0")
    builder.clear()
    assert set(builder.get_level_data()) == {"null"}


def test_sessions_are_independent() -> None:
    a, _ = make_builder()
    b, _ = make_builder()
    a.add_block(0, "b0")
    assert b.get_level_data()[0] == "null"


def test_concurrent_edits_serialise() -> None:
    builder, _ = make_builder()

    def worker(offset: int) -> None:
        for i in range(offset, LEVEL_SIZE, 4):
            builder.add_block(i, "b0")
            builder.get_image()

    threads = [threading.Thread(target=worker, args=(k,)) for k in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert set(builder.get_level_data()) == {"b0"}


def test_default_rasterizer(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    builder = LevelBuilder()
    assert isinstance(builder.rasterizer, TextureRasterizer)
    image = builder.get_image()
    assert image.size == (IMAGE_WIDTH, IMAGE_HEIGHT)
