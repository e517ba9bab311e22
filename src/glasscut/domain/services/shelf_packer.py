"""Single-pass shelf packing of cut instances onto one stock unit.

The packer lays cuts left to right along horizontal shelves. When a cut
does not fit at the cursor it opens a new shelf below the current one.
It never backtracks or reorders, so a cut that would fit elsewhere on
the stock may be deferred to the next stock unit.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from glasscut.domain.value_objects import CutInstance, PlacedCut

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ShelfPackResult:
    """Outcome of packing one stock unit.

    Attributes:
        placed: Cuts placed, in placement order.
        remaining: Candidates left unplaced, in their original order.
    """

    placed: tuple[PlacedCut, ...]
    remaining: tuple[CutInstance, ...]

    @property
    def placed_count(self) -> int:
        return len(self.placed)


@dataclass
class _Cursor:
    """Packing cursor: next free position and current shelf height."""

    x: int = 0
    y: int = 0
    shelf_height: int = 0


class ShelfPacker:
    """Greedy shelf (row) packer for a single rectangle.

    Candidates are expected tallest-first so the first cut on a shelf
    fixes a height the following cuts can share.
    """

    def pack(
        self,
        width: int,
        height: int,
        candidates: Sequence[CutInstance],
    ) -> ShelfPackResult:
        """Place as many candidates as the shelf heuristic allows.

        Args:
            width: Stock width in millimeters.
            height: Stock height in millimeters.
            candidates: Pending cut instances, tallest first.

        Returns:
            ShelfPackResult with the placements and the leftover candidates.
        """
        cursor = _Cursor()
        placed: list[PlacedCut] = []
        remaining: list[CutInstance] = []

        for cut in candidates:
            w, h = cut.width_mm, cut.height_mm

            if cursor.x + w <= width and cursor.y + h <= height:
                placed.append(PlacedCut(instance=cut, x=cursor.x, y=cursor.y))
                cursor.x += w
                cursor.shelf_height = max(cursor.shelf_height, h)
                continue

            if cursor.y + cursor.shelf_height + h <= height:
                # Open a new shelf; it keeps its height even if this cut
                # turns out too wide to sit on it.
                cursor.y += cursor.shelf_height
                cursor.x = 0
                cursor.shelf_height = h
                if w <= width:
                    placed.append(PlacedCut(instance=cut, x=0, y=cursor.y))
                    cursor.x = w
                    continue

            remaining.append(cut)

        logger.debug(
            "Packed %d of %d cuts on %dx%d", len(placed), len(candidates), width, height
        )
        return ShelfPackResult(placed=tuple(placed), remaining=tuple(remaining))
