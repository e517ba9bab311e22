"""Allocation of cut instances to remnants and sheets of one material type.

Stock is consumed in two passes. Remnants go first, visited by area
(smallest first by default) so small leftovers are used before larger,
more versatile stock. Sheets follow, one unit at a time, until every
instance is either placed or excluded.

Quantities are tracked in local counters; the stock objects passed in are
never modified.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence, TypeVar

from glasscut.domain.entities import ExcludedCut, Piece
from glasscut.domain.value_objects import (
    AreaOrder,
    CutInstance,
    ExclusionReason,
    OptimizerSettings,
    PieceOrigin,
    PlacedCut,
    StockRemnant,
    StockSheet,
)

from .identifiers import RunIdentifiers
from .shelf_packer import ShelfPacker
from .waste_calculator import WasteCalculator

logger = logging.getLogger(__name__)

_Stock = TypeVar("_Stock", StockSheet, StockRemnant)


@dataclass(frozen=True)
class AllocationResult:
    """Pieces produced for one material type and the cuts left out."""

    pieces: tuple[Piece, ...]
    excluded: tuple[ExcludedCut, ...]


def order_by_area(stock: Sequence[_Stock], order: AreaOrder) -> list[_Stock]:
    """Sort stock by area, keeping input order among equal areas."""
    return sorted(stock, key=lambda s: s.area, reverse=order == AreaOrder.DESCENDING)


class StockAllocator:
    """Drives the shelf packer across the stock of one material type.

    Attributes:
        settings: Optimizer settings (stock orderings, waste thresholds).
        packer: Packer used for each stock unit.
        waste_calculator: Derives waste regions for each emitted piece.
    """

    def __init__(
        self,
        settings: OptimizerSettings | None = None,
        packer: ShelfPacker | None = None,
        waste_calculator: WasteCalculator | None = None,
    ) -> None:
        self.settings = settings or OptimizerSettings()
        self.packer = packer or ShelfPacker()
        self.waste_calculator = waste_calculator or WasteCalculator(self.settings)

    def allocate(
        self,
        material_type_id: str,
        instances: Sequence[CutInstance],
        sheets: Sequence[StockSheet],
        remnants: Sequence[StockRemnant],
        ids: RunIdentifiers | None = None,
    ) -> AllocationResult:
        """Allocate pre-filtered instances of one material type to stock.

        Args:
            material_type_id: Material type being planned.
            instances: Feasible cut instances, tallest first.
            sheets: Sheet stock of this material type.
            remnants: Remnant stock of this material type.
            ids: Identifier sources for the run.

        Returns:
            AllocationResult with emitted pieces and excluded instances.
        """
        ids = ids or RunIdentifiers()
        pieces: list[Piece] = []
        excluded: list[ExcludedCut] = []
        pending = list(instances)

        pending = self._remnant_pass(material_type_id, pending, remnants, pieces, ids)
        self._sheet_pass(material_type_id, pending, sheets, pieces, excluded, ids)

        logger.info(
            "Material %s: %d pieces, %d cuts excluded",
            material_type_id,
            len(pieces),
            len(excluded),
        )
        return AllocationResult(pieces=tuple(pieces), excluded=tuple(excluded))

    def _remnant_pass(
        self,
        material_type_id: str,
        pending: list[CutInstance],
        remnants: Sequence[StockRemnant],
        pieces: list[Piece],
        ids: RunIdentifiers,
    ) -> list[CutInstance]:
        """Pack remnants in area order; return the instances still pending."""
        for remnant in order_by_area(remnants, self.settings.remnant_order):
            available = remnant.quantity
            while pending and available > 0:
                result = self.packer.pack(remnant.width_mm, remnant.height_mm, pending)
                if not result.placed:
                    # Identical units of this remnant would fail the same way
                    break
                available -= 1
                pieces.append(
                    self._build_piece(
                        ids,
                        PieceOrigin.REMNANT,
                        remnant.id,
                        material_type_id,
                        remnant.width_mm,
                        remnant.height_mm,
                        result.placed,
                        location=remnant.location,
                    )
                )
                pending = list(result.remaining)
            if not pending:
                break
        return pending

    def _sheet_pass(
        self,
        material_type_id: str,
        pending: list[CutInstance],
        sheets: Sequence[StockSheet],
        pieces: list[Piece],
        excluded: list[ExcludedCut],
        ids: RunIdentifiers,
    ) -> None:
        """Pack sheets until no instance is pending."""
        candidates = order_by_area(sheets, self.settings.sheet_order)
        available = {sheet.id: sheet.quantity for sheet in candidates}

        while pending:
            head = pending[0]
            sheet = next(
                (
                    s
                    for s in candidates
                    if available[s.id] > 0
                    and s.accommodates(head.width_mm, head.height_mm)
                ),
                None,
            )
            if sheet is None:
                logger.warning(
                    "No sheet of material %s fits cut %s (%sx%s); "
                    "excluding %d remaining cuts",
                    material_type_id,
                    head.label,
                    head.width_mm,
                    head.height_mm,
                    len(pending),
                )
                excluded.extend(
                    ExcludedCut(i, ExclusionReason.STOCK_EXHAUSTED) for i in pending
                )
                return

            result = self.packer.pack(sheet.width_mm, sheet.height_mm, pending)
            if not result.placed:
                # The coarse fit check passed but the shelf heuristic could
                # not use the space; drop the blocking cut so the loop ends.
                logger.warning(
                    "Cut %s (%sx%s) could not be packed on sheet %s; excluding it",
                    head.label,
                    head.width_mm,
                    head.height_mm,
                    sheet.id,
                )
                excluded.append(ExcludedCut(head, ExclusionReason.PACKING_STALL))
                pending = pending[1:]
                continue

            available[sheet.id] -= 1
            pieces.append(
                self._build_piece(
                    ids,
                    PieceOrigin.SHEET,
                    sheet.id,
                    material_type_id,
                    sheet.width_mm,
                    sheet.height_mm,
                    result.placed,
                )
            )
            pending = list(result.remaining)

    def _build_piece(
        self,
        ids: RunIdentifiers,
        origin: PieceOrigin,
        source_id: str,
        material_type_id: str,
        width: int,
        height: int,
        placed: Sequence[PlacedCut],
        location: str | None = None,
    ) -> Piece:
        piece = Piece(
            id=ids.next_piece_id(),
            origin=origin,
            source_id=source_id,
            material_type_id=material_type_id,
            width=width,
            height=height,
            placements=list(placed),
            location=location,
        )
        piece.waste = self.waste_calculator.calculate(
            piece.placements, width, height, ids.next_region_id
        )
        logger.debug(
            "Piece %s from %s %s (%s): %d cuts, %.1f%% used",
            piece.id,
            origin.value,
            source_id,
            piece.dimensions_label,
            piece.cut_count,
            piece.efficiency,
        )
        return piece
