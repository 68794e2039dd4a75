#!/usr/bin/env python3
"""
End-to-end tests: pack sprite files into atlas PNGs and extract them again.
"""

import sys
from pathlib import Path

import numpy as np
import pytest
from PIL import Image, PngImagePlugin

sys.path.insert(0, str(Path(__file__).parent))

from create_test_files import create_test_scenario, write_sprite
from spriteatlas.core import AtlasOptions, SpriteAtlasPacker, extract_atlases
from spriteatlas.errors import AtlasIOError, MetadataFormatError, SpriteTooLargeError, UnsupportedImageError
from spriteatlas.metadata import CHUNK_TYPE, encode_record
from spriteatlas.render import decode_png
from spriteatlas.sprites import Sprite

SIZES = [(16, 16), (32, 8), (8, 32), (24, 24), (10, 40), (40, 10), (12, 12), (20, 30)]


def _pixels(path) -> np.ndarray:
    with Image.open(path) as img:
        return np.asarray(img.convert("RGBA"))


def test_atlas_carries_one_chunk_per_sprite(tmp_path):
    inputs = create_test_scenario(tmp_path / "in", SIZES)
    out = tmp_path / "atlas.png"
    pages = SpriteAtlasPacker(AtlasOptions(padding=1)).build(inputs, out)

    decoded = decode_png(out)
    assert decoded.image.mode == "RGBA"
    assert decoded.image.size == (pages[0].size, pages[0].size)
    assert [r.name for r in decoded.records] == [s.name for s in pages[0].sprites]
    for record, sprite in zip(decoded.records, pages[0].sprites):
        assert (record.x, record.y, record.width, record.height) == \
               (sprite.x, sprite.y, sprite.width, sprite.height)


def test_pages_release_pixels(tmp_path):
    inputs = create_test_scenario(tmp_path / "in", SIZES[:3])
    pages = SpriteAtlasPacker().build(inputs, tmp_path / "atlas.png")
    assert all(s.image is None for s in pages[0].sprites)
    assert pages[0].image is None


@pytest.mark.parametrize("trim", [False, True])
def test_extract_round_trip(tmp_path, trim):
    inputs = create_test_scenario(tmp_path / "in", SIZES, trimmed=True)
    out = tmp_path / "atlas.png"
    SpriteAtlasPacker(AtlasOptions(trim=trim, padding=2)).build(inputs, out)

    written = extract_atlases([out], tmp_path / "out")
    assert sorted(p.name for p in written) == sorted(p.name for p in inputs)
    for src in inputs:
        assert np.array_equal(_pixels(tmp_path / "out" / src.name), _pixels(src))


def test_trimmed_atlas_is_smaller(tmp_path):
    inputs = [write_sprite(tmp_path, "ring", 64, 64, border=(24, 24, 24, 24))]
    untrimmed = SpriteAtlasPacker().build(inputs, tmp_path / "a.png")
    trimmed = SpriteAtlasPacker(AtlasOptions(trim=True)).build(inputs, tmp_path / "b.png")
    assert untrimmed[0].size == 64
    assert trimmed[0].size == 16


def test_atlas_pixels_match_trimmed_sprite(tmp_path):
    src = write_sprite(tmp_path, "icon", 12, 10, color="green", border=(2, 1, 3, 4))
    out = tmp_path / "atlas.png"
    SpriteAtlasPacker(AtlasOptions(trim=True)).build([src], out)

    record = decode_png(out).records[0]
    assert (record.trim_left, record.trim_top, record.trim_right, record.trim_bottom) == (2, 1, 3, 4)
    atlas = _pixels(out)
    sprite = atlas[record.y:record.y + record.height, record.x:record.x + record.width]
    assert np.array_equal(sprite, _pixels(src)[1:6, 2:9])


def test_repack_existing_atlas(tmp_path):
    inputs = create_test_scenario(tmp_path / "in", SIZES[:4], trimmed=True)
    first = tmp_path / "first.png"
    SpriteAtlasPacker(AtlasOptions(trim=True)).build(inputs[:2], first)

    merged = tmp_path / "merged.png"
    SpriteAtlasPacker(AtlasOptions(trim=True, padding=1)).build([first] + inputs[2:], merged)

    records = decode_png(merged).records
    assert sorted(r.name for r in records) == sorted(p.stem for p in inputs)
    extract_atlases([merged], tmp_path / "out")
    for src in inputs:
        assert np.array_equal(_pixels(tmp_path / "out" / src.name), _pixels(src))


def test_fixed_size_writes_numbered_pages(tmp_path):
    paths = [write_sprite(tmp_path / "in", name, w, h)
             for name, (w, h) in zip(["a", "b", "c"], [(10, 10), (10, 10), (15, 15)])]
    out = tmp_path / "sheet.png"
    pages = SpriteAtlasPacker(AtlasOptions(size=20)).build(paths, out)

    assert len(pages) == 2
    assert not out.exists()
    first = decode_png(tmp_path / "sheet00001.png")
    second = decode_png(tmp_path / "sheet00002.png")
    assert first.image.size == (20, 20)
    assert [r.name for r in first.records] == ["c"]
    assert [r.name for r in second.records] == ["a", "b"]


def test_oversized_sprite_rejected_before_packing(tmp_path):
    paths = [write_sprite(tmp_path, "small", 4, 4), write_sprite(tmp_path, "big", 15, 3)]
    packer = SpriteAtlasPacker(AtlasOptions(size=20, padding=6))
    with pytest.raises(SpriteTooLargeError):
        packer.build(paths, tmp_path / "atlas.png")
    assert not list(tmp_path.glob("atlas*.png"))


def test_palette_with_transparency_is_expanded(tmp_path):
    path = tmp_path / "pal.png"
    Image.new("P", (6, 6), 0).save(path, transparency=0)
    decoded = decode_png(path)
    assert decoded.image.mode == "RGBA"
    assert decoded.image.getpixel((0, 0))[3] == 0


def test_rgb_without_alpha_is_rejected(tmp_path):
    path = tmp_path / "rgb.png"
    Image.new("RGB", (4, 4), "red").save(path)
    with pytest.raises(UnsupportedImageError):
        decode_png(path)


def test_missing_file_is_io_error(tmp_path):
    with pytest.raises(AtlasIOError):
        decode_png(tmp_path / "nope.png")


def test_chunk_outside_image_is_rejected(tmp_path):
    info = PngImagePlugin.PngInfo()
    info.add(CHUNK_TYPE, encode_record(Sprite("oob", 8, 8, x=4, y=0)))
    path = tmp_path / "bad.png"
    Image.new("RGBA", (10, 10)).save(path, pnginfo=info)

    with pytest.raises(MetadataFormatError):
        SpriteAtlasPacker().load([path])


def test_pixel_cap_lifted_for_large_pages():
    assert Image.MAX_IMAGE_PIXELS is None


def test_pixel_cap_overrun_is_io_error(tmp_path, monkeypatch):
    src = write_sprite(tmp_path, "big", 40, 40)
    out = tmp_path / "atlas.png"
    SpriteAtlasPacker().build([src], out)

    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 1000)
    with pytest.raises(AtlasIOError):
        extract_atlases([out], tmp_path / "out")
