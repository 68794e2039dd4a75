from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, List, Optional, Sequence, Tuple

from PIL import Image

from .errors import AtlasError, AtlasOverflowError, SpriteTooLargeError
from .metadata import MAX_COORDINATE
from .packer import PackingSession
from .sprites import Sprite


@dataclass
class AtlasPage:
    """One output atlas image and the sprites placed on it, in placement order."""
    size: int
    sprites: List[Sprite] = field(default_factory=list)
    sequence: int = 0
    image: Optional[Image.Image] = field(default=None, repr=False)

    @property
    def fill_ratio(self) -> float:
        used = sum(s.width * s.height for s in self.sprites)
        return used / (self.size * self.size) if self.size else 0.0

    def release(self) -> None:
        for sprite in self.sprites:
            sprite.release()
        if self.image is not None:
            self.image.close()
            self.image = None


def minimum_dimensions(sprites: Sequence[Sprite]) -> Tuple[int, int]:
    """Smallest sprite width and height, used to discard useless free space."""
    if not sprites:
        return 0, 0
    return min(s.width for s in sprites), min(s.height for s in sprites)


def validate_sprite_size(sprite: Sprite, size: int, padding: int) -> None:
    """
    Reject a sprite that cannot fit on an empty page.

    This guarantees every fixed-size pass places at least one sprite.
    """
    if sprite.width > size - padding or sprite.height > size - padding:
        raise SpriteTooLargeError(f"image too big: {sprite.name} ({sprite.width}x{sprite.height}) "
                                  f"for {size}x{size} page with padding {padding}")


def pack_auto(sprites: Sequence[Sprite], padding: int = 0,
              min_size: Optional[Tuple[int, int]] = None) -> AtlasPage:
    """
    Pack all sprites onto one square page with the smallest power-of-two side.

    The side starts at 1 and doubles; every attempt repacks all sprites from
    scratch.

    Args:
        sprites: Loaded (and optionally trimmed) sprites
        padding: Empty margin right of and below every sprite
        min_size: Minimum sprite (width, height); computed from sprites if omitted

    Returns:
        The single page holding every sprite

    Raises:
        AtlasOverflowError: the page would outgrow the coordinate range
    """
    min_w, min_h = min_size if min_size is not None else minimum_dimensions(sprites)
    size = 1
    while True:
        placed = PackingSession(size, padding, min_w, min_h).run(sprites)
        if len(placed) == len(sprites):
            break
        logging.debug(f"{size}x{size} holds {len(placed)}/{len(sprites)} sprites, growing")
        if size >= MAX_COORDINATE // 2:
            raise AtlasOverflowError(f"atlas too big: {len(sprites)} sprites do not fit "
                                     f"in {size}x{size}")
        size *= 2

    page = AtlasPage(size=size, sprites=placed)
    logging.info(f"Packed {len(placed)} sprites into {size}x{size} "
                 f"({page.fill_ratio:.1%} filled)")
    return page


def pack_fixed(sprites: Sequence[Sprite], size: int, padding: int = 0,
               min_size: Optional[Tuple[int, int]] = None) -> Iterator[AtlasPage]:
    """
    Pack sprites onto as many size x size pages as needed.

    Pages are produced lazily: the caller writes and releases each page
    before asking for the next one. Only the unplaced remainder carries over.

    Args:
        sprites: Loaded sprites, each already checked with validate_sprite_size
        size: Page side in pixels
        padding: Empty margin right of and below every sprite
        min_size: Minimum sprite (width, height); computed from sprites if omitted

    Yields:
        Pages numbered from 1
    """
    min_w, min_h = min_size if min_size is not None else minimum_dimensions(sprites)
    remaining = list(sprites)
    sequence = 0
    while remaining:
        sequence += 1
        placed = PackingSession(size, padding, min_w, min_h).run(remaining)
        if not placed:
            raise AtlasError(f"page {sequence}: none of {len(remaining)} remaining sprites fit "
                             f"in {size}x{size}")
        remaining = [s for s in remaining if not s.packed]
        page = AtlasPage(size=size, sprites=placed, sequence=sequence)
        logging.info(f"Page {sequence}: {len(placed)} sprites "
                     f"({page.fill_ratio:.1%} filled), {len(remaining)} remaining")
        yield page


def sequence_path(path, sequence: int) -> str:
    """Insert a zero-padded page number before the file extension."""
    p = Path(path)
    return str(p.with_name(f"{p.stem}{sequence:05d}{p.suffix}"))
