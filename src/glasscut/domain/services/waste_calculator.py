"""Derivation and default classification of waste regions on a piece."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Sequence

from glasscut.domain.entities import WasteRegion
from glasscut.domain.value_objects import OptimizerSettings, PlacedCut, WasteEdge

logger = logging.getLogger(__name__)


@dataclass
class _ShelfBand:
    """Placed cuts sharing (approximately) the same top edge."""

    y: int
    cuts: list[PlacedCut] = field(default_factory=list)

    @property
    def height(self) -> int:
        return max(c.height for c in self.cuts)

    @property
    def bottom(self) -> int:
        return self.y + self.height

    @property
    def right_edge(self) -> int:
        return max(c.right_edge for c in self.cuts)


class WasteCalculator:
    """Finds the rectangles of a piece not covered by any cut.

    Regions are derived shelf by shelf: the leftover above each cut that is
    shorter than its shelf, the strip right of the last cut on a shelf, any
    full-width band between shelves, and finally the band below the last
    shelf. Slivers at or under ``min_waste_mm`` in either dimension are not
    registered. Only the bottom band defaults to being saved, and only when
    it is taller than ``reusable_min_height_mm``.
    """

    def __init__(self, settings: OptimizerSettings | None = None) -> None:
        self.settings = settings or OptimizerSettings()

    def calculate(
        self,
        placements: Sequence[PlacedCut],
        width: int,
        height: int,
        next_id: Callable[[], str],
    ) -> list[WasteRegion]:
        """Compute waste regions for one packed piece.

        Args:
            placements: Cuts placed on the piece.
            width: Piece width in millimeters.
            height: Piece height in millimeters.
            next_id: Source of run-scoped region identifiers.

        Returns:
            Waste regions ordered top to bottom, left to right.
        """
        regions: list[WasteRegion] = []

        def register(x: int, y: int, w: int, h: int, edge: WasteEdge) -> None:
            if w <= self.settings.min_waste_mm or h <= self.settings.min_waste_mm:
                return
            saved = (
                edge == WasteEdge.BOTTOM and h > self.settings.reusable_min_height_mm
            )
            regions.append(
                WasteRegion(
                    id=next_id(), x=x, y=y, width=w, height=h, edge=edge, saved=saved
                )
            )

        previous_bottom = 0
        for band in self._group_shelves(placements):
            if band.y > previous_bottom:
                gap = band.y - previous_bottom
                register(0, previous_bottom, width, gap, WasteEdge.GAP)

            shelf_height = band.height
            for cut in sorted(band.cuts, key=lambda c: c.x):
                register(
                    cut.x,
                    cut.y + cut.height,
                    cut.width,
                    shelf_height - cut.height,
                    WasteEdge.TOP,
                )
            register(
                band.right_edge,
                band.y,
                width - band.right_edge,
                shelf_height,
                WasteEdge.RIGHT,
            )
            previous_bottom = max(previous_bottom, band.bottom)

        register(0, previous_bottom, width, height - previous_bottom, WasteEdge.BOTTOM)

        logger.debug(
            "Registered %d waste regions on %dx%d", len(regions), width, height
        )
        return regions

    def _group_shelves(self, placements: Sequence[PlacedCut]) -> list[_ShelfBand]:
        """Cluster placements into shelves by their top edge."""
        bands: list[_ShelfBand] = []
        tolerance = self.settings.shelf_tolerance_mm
        for cut in sorted(placements, key=lambda c: (c.y, c.x)):
            if bands and abs(cut.y - bands[-1].y) <= tolerance:
                bands[-1].cuts.append(cut)
            else:
                bands.append(_ShelfBand(y=cut.y, cuts=[cut]))
        return bands
