"""
Atlas building and extraction for spriteatlas.

Ties the pieces together: decode inputs, trim and validate sprites, drive
the packer, write pages and sidecars, and release pixels page by page.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional

from .errors import AtlasConfigError
from .layout import AtlasPage, minimum_dimensions, pack_auto, pack_fixed, sequence_path, validate_sprite_size
from .logger import log_load_results, log_page_summary
from .metadata import MAX_COORDINATE
from .render import compose_page, decode_png, save_atlas_png, save_sprite_png
from .sidecars import write_json, write_xml
from .sprites import Sprite, sprites_from_image


@dataclass
class AtlasOptions:
    """Packing options."""
    trim: bool = False
    padding: int = 0
    size: Optional[int] = None  # None selects auto-size mode
    xml_path: Optional[str] = None
    json_path: Optional[str] = None

    @property
    def page_limit(self) -> int:
        return self.size if self.size is not None else MAX_COORDINATE

    def validate(self) -> None:
        if self.padding < 0:
            raise AtlasConfigError(f"padding must not be negative: {self.padding}")
        if self.size is not None and self.size <= 0:
            raise AtlasConfigError(f"page size must be positive: {self.size}")
        if self.padding > MAX_COORDINATE or self.page_limit > MAX_COORDINATE:
            raise AtlasConfigError("padding and size must fit in 32 bits")
        if self.padding >= self.page_limit:
            raise AtlasConfigError(f"padding >= size ({self.padding} >= {self.page_limit})")


class SpriteAtlasPacker:
    """Builds PNG atlases from sprite files and extracts sprites back out."""

    def __init__(self, options: Optional[AtlasOptions] = None):
        self.options = options or AtlasOptions()
        self.options.validate()
        self.logger = logging.getLogger(__name__)

    def load(self, paths: Iterable) -> List[Sprite]:
        """
        Decode input files into sprites, trimming and size-checking each.

        Args:
            paths: PNG files; atlases contribute one sprite per atLS chunk

        Returns:
            Sprites in input order

        Raises:
            SpriteTooLargeError: a sprite cannot fit on one page
        """
        sprites: List[Sprite] = []
        paths = list(paths)
        for path in paths:
            decoded = decode_png(path)
            loaded = sprites_from_image(decoded.image, decoded.records, path, trim=self.options.trim)
            decoded.image.close()
            for sprite in loaded:
                validate_sprite_size(sprite, self.options.page_limit, self.options.padding)
            sprites.extend(loaded)
        log_load_results(len(paths), sprites, self.options.trim)
        return sprites

    def _write_page(self, page: AtlasPage, image_path: str, xml_path: Optional[str],
                    json_path: Optional[str]) -> None:
        compose_page(page)
        save_atlas_png(page, image_path)
        if xml_path:
            write_xml(xml_path, page, image_path)
        if json_path:
            write_json(json_path, page, image_path)
        log_page_summary(page, self.options.padding)
        page.release()

    def pack(self, sprites: List[Sprite], output) -> List[AtlasPage]:
        """
        Pack loaded sprites and write the page file(s).

        Auto-size mode writes one page to ``output``. Fixed-size mode writes
        ``output`` with a page number before the extension for every page;
        pages written before a failure stay on disk.

        Returns:
            Written pages (pixel buffers already released)
        """
        opts = self.options
        min_size = minimum_dimensions(sprites)
        output = str(output)

        if opts.size is None:
            page = pack_auto(sprites, opts.padding, min_size)
            self._write_page(page, output, opts.xml_path, opts.json_path)
            return [page]

        pages = []
        for page in pack_fixed(sprites, opts.size, opts.padding, min_size):
            self._write_page(
                page,
                sequence_path(output, page.sequence),
                sequence_path(opts.xml_path, page.sequence) if opts.xml_path else None,
                sequence_path(opts.json_path, page.sequence) if opts.json_path else None,
            )
            pages.append(page)
        self.logger.info(f"Wrote {len(pages)} page(s) of {opts.size}x{opts.size}")
        return pages

    def build(self, inputs: Iterable, output) -> List[AtlasPage]:
        """Load inputs and pack them into output page(s)."""
        return self.pack(self.load(inputs), output)


def extract_atlases(paths: Iterable, output_dir=".") -> List[Path]:
    """
    Write every sprite embedded in the given atlases as a standalone PNG.

    Each file is named after the sprite's identifier (base name only) and
    restored to its untrimmed size. A PNG without atLS chunks is written
    back whole.

    Returns:
        Paths of the written files
    """
    logger = logging.getLogger(__name__)
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    written = []
    for path in paths:
        decoded = decode_png(path)
        sprites = sprites_from_image(decoded.image, decoded.records, path)
        decoded.image.close()
        logger.info(f"Extracting {len(sprites)} sprite(s) from {path}")
        for sprite in sprites:
            target = output_dir / f"{Path(sprite.name).name}.png"
            save_sprite_png(sprite, target)
            sprite.release()
            written.append(target)
    return written
