"""
Logging utilities for spriteatlas.

Console output carries progress; an optional debug log file records every
trim and placement.
"""

import logging
import sys
from pathlib import Path
from typing import Optional


def setup_logging(log_file: Optional[Path] = None, verbose: bool = False) -> None:
    """Setup logging to console and, optionally, a debug log file."""
    logger = logging.getLogger()
    logger.setLevel(logging.DEBUG)

    # Clear existing handlers
    logger.handlers.clear()

    # Console handler - important messages only unless verbose
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
    console_handler.setFormatter(logging.Formatter('%(levelname)s: %(message)s'))
    logger.addHandler(console_handler)

    # File handler - detailed logs
    if log_file is not None:
        file_handler = logging.FileHandler(log_file, mode='w')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(levelname)s - %(module)s:%(lineno)d - %(message)s'))
        logger.addHandler(file_handler)
        logging.debug(f"Logging initialized. Debug log: {log_file}")


def log_load_results(num_files: int, sprites: list, trim: bool) -> None:
    """
    Log what was loaded before packing starts.

    Args:
        num_files: Number of input files read
        sprites: Sprites cut from those files
        trim: Whether transparent borders were trimmed
    """
    logger = logging.getLogger(__name__)

    logger.info(f"Loaded {len(sprites)} sprite(s) from {num_files} file(s)")
    if trim:
        trimmed = [s for s in sprites if s.trimmed]
        saved = sum(s.source_width * s.source_height - s.width * s.height for s in sprites)
        logger.info(f"  Trimmed: {len(trimmed)} sprite(s), {saved:,} transparent pixels removed")
    if sprites:
        largest = max(sprites, key=lambda s: (max(s.width, s.height), s.width * s.height))
        logger.debug(f"  Largest sprite: {largest.name} ({largest.width}x{largest.height})")


def log_page_summary(page, padding: int) -> None:
    """
    Log the outcome of packing one page.

    Args:
        page: AtlasPage that was packed
        padding: Padding used for the page
    """
    logger = logging.getLogger(__name__)

    label = f"page {page.sequence}" if page.sequence else "atlas"
    logger.debug(f"Packing summary for {label}:")
    logger.debug(f"  Size: {page.size}x{page.size} pixels, padding {padding}")
    logger.debug(f"  Sprites placed: {len(page.sprites)}")
    logger.debug(f"  Fill ratio: {page.fill_ratio:.1%}")
    for s in page.sprites:
        logger.debug(f"  - {s.name}: {s.width}x{s.height} at ({s.x}, {s.y})")
