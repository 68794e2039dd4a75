"""
Maximal Rectangles packing (MAXRECTS-BSSF-GLOBAL).

Each step scores every (unplaced sprite, free rectangle) pair with Best Short
Side Fit and commits the single best pair across the whole cross-product.
Extra tie-breaking rules make the result independent of the order in which
sprites and free rectangles are enumerated.

Reference: Jukka Jylanki, "A Thousand Ways to Pack the Bin".
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

from .free_space import FreeRect, FreeSpaceSet
from .sprites import Sprite


@dataclass
class Candidate:
    """A hypothetical flush placement of a sprite in a free rectangle's low corner."""
    sprite: Sprite
    rect: FreeRect
    short_side: int
    long_side: int
    far_x: int
    far_y: int


def score_candidate(sprite: Sprite, rect: FreeRect, padding: int) -> Optional[Candidate]:
    """Score a sprite in a free rectangle, or None if it does not fit."""
    if rect.width < sprite.width + padding or rect.height < sprite.height + padding:
        return None
    far_x = rect.x0 + sprite.width + padding
    far_y = rect.y0 + sprite.height + padding
    leftover_x = rect.x1 - far_x
    leftover_y = rect.y1 - far_y
    return Candidate(sprite, rect,
                     short_side=min(leftover_x, leftover_y),
                     long_side=max(leftover_x, leftover_y),
                     far_x=far_x, far_y=far_y)


def is_better(candidate: Candidate, best: Optional[Candidate]) -> bool:
    """
    Whether candidate should replace the current best.

    Ordering: smaller short-side leftover, then smaller long-side leftover,
    then the far corner nearer the origin (larger coordinate first, then
    smaller), then the fixed rule on whether the far corner is wider than
    tall. A full tie keeps the current best.
    """
    if best is None:
        return True
    if candidate.short_side != best.short_side:
        return candidate.short_side < best.short_side
    if candidate.long_side != best.long_side:
        return candidate.long_side < best.long_side
    c_max, b_max = max(candidate.far_x, candidate.far_y), max(best.far_x, best.far_y)
    if c_max != b_max:
        return c_max < b_max
    c_min, b_min = min(candidate.far_x, candidate.far_y), min(best.far_x, best.far_y)
    if c_min != b_min:
        return c_min < b_min
    return (best.far_x < best.far_y) > (candidate.far_x < candidate.far_y)


def find_best(sprites: Sequence[Sprite], free_space: FreeSpaceSet, padding: int) -> Optional[Candidate]:
    best = None
    for sprite in sprites:
        if sprite.packed:
            continue
        for rect in free_space:
            candidate = score_candidate(sprite, rect, padding)
            if candidate is not None and is_better(candidate, best):
                best = candidate
    return best


def pack(sprites: Sequence[Sprite], free_space: FreeSpaceSet, padding: int = 0) -> List[Sprite]:
    """
    Place as many sprites as fit into the free space.

    Previous placements are discarded first. Sprites left unplaced are not an
    error; the caller treats them as overflow for a bigger or later page.

    Args:
        sprites: Sprites to place; ``x``, ``y`` and ``packed`` are updated
        free_space: Free space of the page, consumed as sprites are placed
        padding: Empty margin reserved right of and below every sprite

    Returns:
        Placed sprites in placement order
    """
    for sprite in sprites:
        sprite.packed = False

    placed: List[Sprite] = []
    while True:
        best = find_best(sprites, free_space, padding)
        if best is None:
            break
        sprite = best.sprite
        sprite.x = best.rect.x0
        sprite.y = best.rect.y0
        sprite.packed = True
        free_space.place(sprite.x, sprite.y, sprite.width, sprite.height)
        placed.append(sprite)
        logging.debug(f"Placed {sprite.name} ({sprite.width}x{sprite.height}) at "
                      f"({sprite.x}, {sprite.y}), ssf={best.short_side} lsf={best.long_side}")
    return placed


class PackingSession:
    """
    One packing pass over a square page.

    Owns the page's free space; nothing is shared between sessions.
    """

    def __init__(self, size: int, padding: int, min_width: int, min_height: int):
        self.size = size
        self.padding = padding
        self.free_space = FreeSpaceSet(min_width, min_height, padding)
        self.logger = logging.getLogger(__name__)

    def run(self, sprites: Sequence[Sprite]) -> List[Sprite]:
        self.free_space.reset(self.size)
        placed = pack(sprites, self.free_space, self.padding)
        self.logger.debug(f"Session {self.size}x{self.size}: placed {len(placed)}/{len(sprites)}, "
                          f"{len(self.free_space)} free rectangles left")
        return placed
