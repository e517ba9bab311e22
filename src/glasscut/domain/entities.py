"""Plan entities produced by the cutting optimizer.

Pieces and plans are plain (non-frozen) dataclasses because the review
step edits them: a reviewer toggles whether each waste region is kept as a
remnant and may give it a storage location before the plan is committed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from .exceptions import StaleWasteRegionError
from .value_objects import (
    CutInstance,
    ExclusionReason,
    PieceOrigin,
    PlacedCut,
    WasteClassification,
    WasteEdge,
)


@dataclass
class WasteRegion:
    """Unused rectangle on a piece.

    The classification is derived from ``saved``: a saved region goes back
    to inventory as a remnant, an unsaved one is scrap. Reviewers change
    ``saved`` and ``location`` only; the geometry never changes.

    Attributes:
        id: Run-scoped identifier (``W1``, ``W2``, ...).
        x: Left edge in millimeters.
        y: Top edge in millimeters.
        width: Region width in millimeters.
        height: Region height in millimeters.
        edge: Where on the piece the region was found.
        saved: Whether the region is returned to stock on commit.
        location: Storage location for the new remnant.
    """

    id: str
    x: int
    y: int
    width: int
    height: int
    edge: WasteEdge
    saved: bool = False
    location: str | None = None

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError("Waste region dimensions must be positive")
        if self.x < 0 or self.y < 0:
            raise ValueError("Position coordinates must be non-negative")

    @property
    def classification(self) -> WasteClassification:
        if self.saved:
            return WasteClassification.REUSABLE_REMNANT
        return WasteClassification.SCRAP

    @property
    def area(self) -> int:
        return self.width * self.height

    def toggle(self) -> None:
        """Flip between scrap and reusable remnant."""
        self.saved = not self.saved


@dataclass(frozen=True)
class ExcludedCut:
    """A cut instance left out of the plan and the reason it was."""

    instance: CutInstance
    reason: ExclusionReason


@dataclass
class Piece:
    """One stock unit after packing.

    Attributes:
        id: Run-scoped identifier (``P1``, ``P2``, ...).
        origin: Whether a full sheet or a remnant was used.
        source_id: Identifier of the sheet or remnant record consumed.
        material_type_id: Glass type of the stock unit.
        width: Stock unit width in millimeters.
        height: Stock unit height in millimeters.
        placements: Cuts in placement order.
        waste: Unused regions derived from the placements.
        location: Where the source remnant was stored, if known.
    """

    id: str
    origin: PieceOrigin
    source_id: str
    material_type_id: str
    width: int
    height: int
    placements: list[PlacedCut] = field(default_factory=list)
    waste: list[WasteRegion] = field(default_factory=list)
    location: str | None = None

    @property
    def area(self) -> int:
        return self.width * self.height

    @property
    def used_area(self) -> int:
        return sum(p.area for p in self.placements)

    @property
    def waste_area(self) -> int:
        """Area of the piece not covered by any cut."""
        return self.area - self.used_area

    @property
    def efficiency(self) -> float:
        """Percentage of the piece covered by cuts."""
        if self.area == 0:
            return 0.0
        return self.used_area / self.area * 100

    @property
    def cut_count(self) -> int:
        return len(self.placements)

    @property
    def cut_request_ids(self) -> tuple[str, ...]:
        """Distinct requests fulfilled by this piece, in placement order."""
        return tuple(dict.fromkeys(p.instance.request_id for p in self.placements))

    @property
    def saved_remnants(self) -> list[WasteRegion]:
        return [
            w
            for w in self.waste
            if w.classification == WasteClassification.REUSABLE_REMNANT
        ]

    @property
    def dimensions_label(self) -> str:
        return f"{self.width}x{self.height}"


@dataclass(frozen=True)
class PlanSummary:
    """Resource and efficiency figures for a plan.

    Areas are in square millimeters.
    """

    total_pieces: int
    sheets_used: int
    remnants_used: int
    total_cuts: int
    excluded_cuts: int
    total_area: int
    used_area: int
    saved_remnants: int

    @property
    def waste_area(self) -> int:
        return self.total_area - self.used_area

    @property
    def efficiency(self) -> float:
        if self.total_area == 0:
            return 0.0
        return self.used_area / self.total_area * 100

    def as_metadata(self) -> dict[str, int | float]:
        """Flat mapping suitable for an optimization log entry."""
        return {
            "total_pieces": self.total_pieces,
            "sheets_used": self.sheets_used,
            "remnants_used": self.remnants_used,
            "total_cuts": self.total_cuts,
            "excluded_cuts": self.excluded_cuts,
            "total_area_mm2": self.total_area,
            "used_area_mm2": self.used_area,
            "waste_area_mm2": self.waste_area,
            "efficiency": round(self.efficiency, 2),
            "saved_remnants": self.saved_remnants,
        }

    @classmethod
    def from_metadata(cls, metadata: Mapping[str, Any]) -> PlanSummary:
        """Rebuild a summary from the mapping produced by ``as_metadata``."""
        return cls(
            total_pieces=int(metadata["total_pieces"]),
            sheets_used=int(metadata["sheets_used"]),
            remnants_used=int(metadata["remnants_used"]),
            total_cuts=int(metadata["total_cuts"]),
            excluded_cuts=int(metadata["excluded_cuts"]),
            total_area=int(metadata["total_area_mm2"]),
            used_area=int(metadata["used_area_mm2"]),
            saved_remnants=int(metadata["saved_remnants"]),
        )


@dataclass
class Plan:
    """Full optimizer output: pieces to cut plus the cuts left out.

    Attributes:
        pieces: Packed stock units, grouped by material type in the order
            the types were first requested.
        excluded: Cut instances that could not be placed, with reasons.
        dropped_request_ids: Malformed requests that produced no
            instances at all.
    """

    pieces: list[Piece] = field(default_factory=list)
    excluded: list[ExcludedCut] = field(default_factory=list)
    dropped_request_ids: tuple[str, ...] = ()

    @property
    def excluded_cuts(self) -> list[CutInstance]:
        return [e.instance for e in self.excluded]

    @property
    def placed_instances(self) -> list[CutInstance]:
        return [p.instance for piece in self.pieces for p in piece.placements]

    @property
    def waste_regions(self) -> list[WasteRegion]:
        return [w for piece in self.pieces for w in piece.waste]

    @property
    def material_type_ids(self) -> tuple[str, ...]:
        """Material types touched by the plan, in first-seen order."""
        ids = [p.material_type_id for p in self.pieces]
        ids.extend(e.instance.material_type_id for e in self.excluded)
        return tuple(dict.fromkeys(ids))

    @property
    def partially_placed_request_ids(self) -> tuple[str, ...]:
        """Requests with some units placed and some excluded."""
        placed = {i.request_id for i in self.placed_instances}
        return tuple(
            dict.fromkeys(
                e.instance.request_id
                for e in self.excluded
                if e.instance.request_id in placed
            )
        )

    @property
    def is_empty(self) -> bool:
        return not self.pieces and not self.excluded

    def waste_region(self, region_id: str) -> WasteRegion:
        """Look up a waste region by its run-scoped identifier.

        Raises:
            StaleWasteRegionError: If no piece carries that region.
        """
        for region in self.waste_regions:
            if region.id == region_id:
                return region
        raise StaleWasteRegionError(region_id)

    def set_saved(
        self, region_id: str, saved: bool, location: str | None = None
    ) -> WasteRegion:
        """Mark a waste region as kept or discarded before commit."""
        region = self.waste_region(region_id)
        region.saved = saved
        if location is not None:
            region.location = location
        return region

    def for_material(self, material_type_id: str) -> Plan:
        """Sub-plan restricted to one material type.

        The returned plan shares piece objects with this one.
        """
        return Plan(
            pieces=[p for p in self.pieces if p.material_type_id == material_type_id],
            excluded=[
                e
                for e in self.excluded
                if e.instance.material_type_id == material_type_id
            ],
            dropped_request_ids=(),
        )

    def summary(self) -> PlanSummary:
        return PlanSummary(
            total_pieces=len(self.pieces),
            sheets_used=sum(1 for p in self.pieces if p.origin == PieceOrigin.SHEET),
            remnants_used=sum(
                1 for p in self.pieces if p.origin == PieceOrigin.REMNANT
            ),
            total_cuts=sum(p.cut_count for p in self.pieces),
            excluded_cuts=len(self.excluded),
            total_area=sum(p.area for p in self.pieces),
            used_area=sum(p.used_area for p in self.pieces),
            saved_remnants=sum(len(p.saved_remnants) for p in self.pieces),
        )
