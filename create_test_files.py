#!/usr/bin/env python3
"""
Create sprite PNGs for spriteatlas tests and manual experiments.

Sprites are filled with a solid color and can carry a fully transparent
border so trimming has something to remove.
"""

import sys
from pathlib import Path
from typing import Tuple

from PIL import Image, ImageDraw

COLORS = ['red', 'blue', 'green', 'yellow', 'purple', 'orange', 'pink', 'cyan',
          'brown', 'gray', 'navy', 'maroon', 'olive', 'teal', 'silver']


def make_sprite(width: int, height: int, color="red",
                border: Tuple[int, int, int, int] = (0, 0, 0, 0)) -> Image.Image:
    """
    Build an RGBA sprite.

    Args:
        width: Total image width including border
        height: Total image height including border
        color: Fill color of the opaque part
        border: Transparent (left, top, right, bottom) margins
    """
    left, top, right, bottom = border
    img = Image.new('RGBA', (width, height), (0, 0, 0, 0))
    draw = ImageDraw.Draw(img)
    draw.rectangle([left, top, width - right - 1, height - bottom - 1], fill=color)
    # Mark the top-left opaque pixel so placement mistakes show up in comparisons
    img.putpixel((left, top), (255, 255, 255, 255))
    return img


def write_sprite(directory: Path, name: str, width: int, height: int, color="red",
                 border: Tuple[int, int, int, int] = (0, 0, 0, 0)) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / f"{name}.png"
    make_sprite(width, height, color, border).save(path)
    return path


def create_test_scenario(directory: Path, sizes, trimmed: bool = False):
    """Write one sprite per (width, height) in sizes and return their paths."""
    paths = []
    for i, (width, height) in enumerate(sizes):
        border = (i % 3, (i + 1) % 3, (i + 2) % 3, i % 2) if trimmed else (0, 0, 0, 0)
        paths.append(write_sprite(directory, f"sprite_{i:03d}", width, height,
                                  COLORS[i % len(COLORS)], border))
    return paths


def main():
    out = Path(sys.argv[1]) if len(sys.argv) > 1 else Path("test_sprites")
    sizes = [(16, 16), (32, 8), (8, 32), (24, 24), (10, 40), (40, 10), (12, 12), (20, 30)]
    paths = create_test_scenario(out, sizes, trimmed=True)
    print(f"Created {len(paths)} sprites in {out}")


if __name__ == "__main__":
    main()
