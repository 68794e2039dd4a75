from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, List

from PIL import Image, PngImagePlugin, UnidentifiedImageError

from .errors import AtlasIOError, UnsupportedImageError
from .layout import AtlasPage
from .metadata import CHUNK_TYPE, SpriteRecord, decode_record, encode_record
from .sprites import Sprite

# Modes Pillow can expand to RGBA without inventing an alpha channel
_ALPHA_MODES = {"LA", "PA"}
_TRNS_MODES = {"L", "RGB", "P"}

PNG_COMPRESS_LEVEL = 9

# Fixed-size pages can exceed Pillow's default decompression-bomb cap
Image.MAX_IMAGE_PIXELS = None


@dataclass
class DecodedImage:
    """An input file decoded to RGBA plus the atLS records it carries."""
    image: Image.Image
    records: List[SpriteRecord] = field(default_factory=list)


def _expand_to_rgba(img: Image.Image, path) -> Image.Image:
    mode = img.mode
    if mode == "RGBA":
        return img
    if mode in _ALPHA_MODES:
        return img.convert("RGBA")
    if mode in _TRNS_MODES and "transparency" in img.info:
        return img.convert("RGBA")
    raise UnsupportedImageError(f"{path}: color type {mode} has no alpha channel "
                                f"or is deeper than 8 bits per channel")


def decode_png(path) -> DecodedImage:
    """
    Decode a PNG to RGBA and collect its atLS chunks.

    The image is fully loaded so chunks stored after the pixel data are
    seen too. Records keep file order.

    Raises:
        AtlasIOError: the file cannot be opened or decoded
        UnsupportedImageError: pixels cannot be expanded to 8-bit RGBA
        MetadataFormatError: an atLS chunk is malformed
    """
    logging.debug(f"Reading {path}")
    try:
        with Image.open(path) as img:
            img.load()
            chunks = getattr(img, "private_chunks", [])
            records = [decode_record(chunk[1]) for chunk in chunks if chunk[0] == CHUNK_TYPE]
            rgba = _expand_to_rgba(img, path)
            if rgba is img:
                rgba = img.copy()
    except (OSError, SyntaxError, UnidentifiedImageError, Image.DecompressionBombError) as e:
        raise AtlasIOError(f"can't read file: {path}: {e}") from e

    logging.debug(f"{path}: {rgba.width}x{rgba.height}, {len(records)} atLS chunk(s)")
    return DecodedImage(rgba, records)


def compose_page(page: AtlasPage) -> Image.Image:
    """Paste every placed sprite onto a transparent size x size canvas."""
    logging.debug(f"Composing {page.size}x{page.size} page with {len(page.sprites)} sprites")
    try:
        base = Image.new("RGBA", (page.size, page.size), (0, 0, 0, 0))
    except (MemoryError, ValueError) as e:
        raise AtlasIOError(f"can't allocate {page.size}x{page.size} page: {e}") from e
    for sprite in page.sprites:
        base.paste(sprite.image, (sprite.x, sprite.y))
    page.image = base
    return base


def _write_png(img: Image.Image, path, chunks: Iterable[bytes] = ()) -> None:
    info = PngImagePlugin.PngInfo()
    for payload in chunks:
        info.add(CHUNK_TYPE, payload)
    try:
        img.save(path, format="PNG", pnginfo=info, compress_level=PNG_COMPRESS_LEVEL)
    except OSError as e:
        raise AtlasIOError(f"can't write file: {path}: {e}") from e


def save_atlas_png(page: AtlasPage, path) -> None:
    """Write a composed page with one atLS chunk per sprite, in placement order."""
    img = page.image if page.image is not None else compose_page(page)
    _write_png(img, path, (encode_record(s) for s in page.sprites))
    logging.info(f"Wrote {path} ({page.size}x{page.size}, {len(page.sprites)} sprites)")


def restore_sprite(sprite: Sprite) -> Image.Image:
    """Rebuild the untrimmed frame: sprite pixels framed by transparent margins."""
    frame = Image.new("RGBA", (sprite.source_width, sprite.source_height), (0, 0, 0, 0))
    frame.paste(sprite.image, (sprite.trim_left, sprite.trim_top))
    return frame


def save_sprite_png(sprite: Sprite, path) -> None:
    """Write one sprite as a standalone PNG at its original, untrimmed size."""
    img = restore_sprite(sprite)
    _write_png(img, path)
    logging.debug(f"Wrote {path} ({img.width}x{img.height})")
