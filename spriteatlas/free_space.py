"""
Free-space bookkeeping for the Maximal Rectangles packer.

The set holds maximal unallocated rectangles of one page. Members may
overlap, but none is contained in another, and every position where a
sprite could still be placed lies inside at least one member.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator, List


@dataclass(frozen=True)
class FreeRect:
    """Half-open rectangle [x0, x1) x [y0, y1) of unallocated page area."""
    x0: int
    y0: int
    x1: int
    y1: int

    @property
    def width(self) -> int:
        return self.x1 - self.x0

    @property
    def height(self) -> int:
        return self.y1 - self.y0

    def contains(self, other: FreeRect) -> bool:
        return (other.x0 >= self.x0 and other.x1 <= self.x1 and
                other.y0 >= self.y0 and other.y1 <= self.y1)


class FreeSpaceSet:
    """Maximal free rectangles of a single page."""

    def __init__(self, min_width: int, min_height: int, padding: int = 0):
        """
        Args:
            min_width: Width of the narrowest sprite that may still be placed
            min_height: Height of the shortest sprite that may still be placed
            padding: Empty margin reserved right of and below every sprite
        """
        self.min_width = min_width
        self.min_height = min_height
        self.padding = padding
        self._rects: List[FreeRect] = []

    def __len__(self) -> int:
        return len(self._rects)

    def __iter__(self) -> Iterator[FreeRect]:
        return iter(self._rects)

    @property
    def rects(self) -> List[FreeRect]:
        return list(self._rects)

    def reset(self, size: int) -> None:
        """Forget all free space and start over with one empty size x size page."""
        self._rects = []
        self.insert(0, 0, size, size)

    def insert(self, x0: int, y0: int, x1: int, y1: int) -> bool:
        """
        Add a free rectangle unless it is useless or already covered.

        Rectangles too small to hold the smallest sprite plus padding are
        dropped. Existing members contained in the new rectangle are removed.

        Returns:
            True if the rectangle was added
        """
        if (x1 <= x0 or x1 - x0 < self.min_width + self.padding or
                y1 <= y0 or y1 - y0 < self.min_height + self.padding):
            return False
        candidate = FreeRect(x0, y0, x1, y1)
        rects = self._rects
        i = 0
        while i < len(rects):
            existing = rects[i]
            if existing.contains(candidate):
                return False
            if candidate.contains(existing):
                # swap-and-truncate
                rects[i] = rects[-1]
                rects.pop()
            else:
                i += 1
        rects.append(candidate)
        return True

    def place(self, x: int, y: int, width: int, height: int) -> None:
        """
        Carve a placed sprite's padded box out of the free space.

        Every prior rectangle is split into the parts right of, below, left
        of and above the box. The pieces are pruned on insertion into a new
        collection which then replaces the old one.
        """
        far_x = x + width + self.padding
        far_y = y + height + self.padding
        previous = self._rects
        self._rects = []
        for f in previous:
            self.insert(max(f.x0, far_x), f.y0, f.x1, f.y1)
            self.insert(f.x0, max(f.y0, far_y), f.x1, f.y1)
            self.insert(f.x0, f.y0, min(f.x1, x), f.y1)
            self.insert(f.x0, f.y0, f.x1, min(f.y1, y))
        logging.debug(f"Free space after placing {width}x{height} at ({x}, {y}): "
                      f"{len(previous)} -> {len(self._rects)} rectangles")
