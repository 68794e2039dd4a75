"""
Sprite model and transparent-border trimming.

A sprite starts out as a rectangle of a decoded source image: either the
whole image or a sub-rectangle named by an atLS chunk. Trimming shrinks the
rectangle while recording the removed margins so the original frame can be
rebuilt. The pixel buffer is cut out after trimming and owned by the sprite
until its page has been written.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

import numpy as np
from PIL import Image

from .errors import MetadataFormatError
from .metadata import SpriteRecord


@dataclass
class Sprite:
    """One image (or named sub-image) to be placed in an atlas."""
    name: str
    width: int
    height: int
    x: int = 0
    y: int = 0
    trim_left: int = 0
    trim_top: int = 0
    trim_right: int = 0
    trim_bottom: int = 0
    image: Optional[Image.Image] = field(default=None, repr=False)
    packed: bool = False

    @property
    def trimmed(self) -> bool:
        return bool(self.trim_left or self.trim_top or self.trim_right or self.trim_bottom)

    @property
    def source_width(self) -> int:
        return self.width + self.trim_left + self.trim_right

    @property
    def source_height(self) -> int:
        return self.height + self.trim_top + self.trim_bottom

    def release(self) -> None:
        """Drop the pixel buffer once the sprite's page is on disk."""
        if self.image is not None:
            self.image.close()
            self.image = None

    @classmethod
    def from_record(cls, record: SpriteRecord) -> Sprite:
        return cls(
            name=record.name,
            width=record.width,
            height=record.height,
            x=record.x,
            y=record.y,
            trim_left=record.trim_left,
            trim_top=record.trim_top,
            trim_right=record.trim_right,
            trim_bottom=record.trim_bottom,
        )


def _row_clear(alpha: np.ndarray, sprite: Sprite, row: int) -> bool:
    y = sprite.y + row
    return not alpha[y, sprite.x:sprite.x + sprite.width].any()


def _col_clear(alpha: np.ndarray, sprite: Sprite, col: int) -> bool:
    x = sprite.x + col
    return not alpha[sprite.y:sprite.y + sprite.height, x].any()


def trim_sprite(sprite: Sprite, alpha: np.ndarray) -> bool:
    """
    Remove fully transparent outer rows and columns from a sprite.

    Edges are trimmed bottom, top, right, left. At least one pixel is kept in
    each dimension. The sprite's origin within the source image moves with
    top/left removals.

    Args:
        sprite: Sprite whose x/y/width/height describe a rectangle of the source
        alpha: Alpha plane of the source image, indexed [y, x]

    Returns:
        True if any row or column was removed
    """
    before = (sprite.width, sprite.height)

    while sprite.height > 1 and _row_clear(alpha, sprite, sprite.height - 1):
        sprite.height -= 1
        sprite.trim_bottom += 1
    while sprite.height > 1 and _row_clear(alpha, sprite, 0):
        sprite.height -= 1
        sprite.trim_top += 1
        sprite.y += 1
    while sprite.width > 1 and _col_clear(alpha, sprite, sprite.width - 1):
        sprite.width -= 1
        sprite.trim_right += 1
    while sprite.width > 1 and _col_clear(alpha, sprite, 0):
        sprite.width -= 1
        sprite.trim_left += 1
        sprite.x += 1

    changed = before != (sprite.width, sprite.height)
    if changed:
        logging.debug(f"Trimmed {sprite.name}: {before[0]}x{before[1]} -> "
                      f"{sprite.width}x{sprite.height} "
                      f"(l={sprite.trim_left} t={sprite.trim_top} "
                      f"r={sprite.trim_right} b={sprite.trim_bottom})")
    return changed


def filename_stem(path) -> str:
    """Sprite name for a whole-image input: base name without a .png suffix."""
    p = Path(path)
    return p.stem if p.suffix.lower() == ".png" else p.name


def sprites_from_image(image: Image.Image, records: List[SpriteRecord], path,
                       trim: bool = False) -> List[Sprite]:
    """
    Cut sprites out of a decoded RGBA image.

    An image without atLS records yields a single sprite named after the file.
    Otherwise each record yields one sprite covering its sub-rectangle and
    keeping any trim margins it already carries.

    Args:
        image: Decoded RGBA source image
        records: atLS records found in the source file
        path: Source file path, used for naming and diagnostics
        trim: Whether to strip transparent borders

    Returns:
        Sprites in record order, each owning a copy of its pixels
    """
    width, height = image.size
    if records:
        sprites = [Sprite.from_record(r) for r in records]
    else:
        sprites = [Sprite(name=filename_stem(path), width=width, height=height)]

    alpha = np.asarray(image.getchannel("A")) if trim else None

    for sprite in sprites:
        if (sprite.x > width or sprite.width == 0 or sprite.width > width - sprite.x or
                sprite.y > height or sprite.height == 0 or sprite.height > height - sprite.y):
            raise MetadataFormatError(
                f"invalid atLS chunk in {path}: {sprite.name} "
                f"({sprite.width}x{sprite.height} at {sprite.x},{sprite.y}) "
                f"outside {width}x{height} image")
        if trim:
            trim_sprite(sprite, alpha)
        sprite.image = image.crop((sprite.x, sprite.y,
                                   sprite.x + sprite.width, sprite.y + sprite.height))

    logging.debug(f"Loaded {len(sprites)} sprite(s) from {path}")
    return sprites
