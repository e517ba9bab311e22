"""Value objects for the glass cutting domain.

All measurements are integer millimeters. Coordinates use a top-left
origin: ``x`` grows to the right and ``y`` grows downward across the
stock piece.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping


class CutStatus(str, Enum):
    """Lifecycle of a cut request."""

    PENDING = "pending"
    CUT = "cut"


class PieceOrigin(str, Enum):
    """Kind of stock unit a piece was cut from."""

    SHEET = "sheet"
    REMNANT = "remnant"


class WasteClassification(str, Enum):
    """Classification of an unused region on a piece."""

    SCRAP = "scrap"
    REUSABLE_REMNANT = "reusable_remnant"


class WasteEdge(str, Enum):
    """Where on a piece a waste region was found.

    TOP is the leftover inside a shelf above a cut shorter than the
    shelf, RIGHT the strip after the last cut of a shelf, GAP a full-width
    band between two shelves and BOTTOM the band below the last shelf.
    """

    TOP = "top"
    RIGHT = "right"
    GAP = "gap"
    BOTTOM = "bottom"


class AreaOrder(str, Enum):
    """Ordering of stock by area."""

    ASCENDING = "ascending"
    DESCENDING = "descending"


class ExclusionReason(str, Enum):
    """Why a cut instance could not be placed in a plan."""

    INFEASIBLE = "infeasible"
    PACKING_STALL = "packing_stall"
    STOCK_EXHAUSTED = "stock_exhausted"


@dataclass(frozen=True)
class MaterialType:
    """A glass type (thickness/colour combination) stock is tracked by."""

    id: str
    code: str
    thickness_mm: float | None = None
    color: str | None = None
    description: str | None = None

    @property
    def display_name(self) -> str:
        parts = [self.code]
        if self.thickness_mm is not None:
            parts.append(f"{self.thickness_mm:g}mm")
        if self.color:
            parts.append(self.color)
        return " ".join(parts)


@dataclass(frozen=True)
class CutRequest:
    """A customer-ordered rectangle of glass.

    Requests are not validated on construction: a malformed request
    (non-positive dimensions or quantity) is a normal input that the
    optimizer drops without affecting the others.

    Attributes:
        id: Identifier of the request in the order system.
        material_type_id: Glass type the cut must come from.
        width_mm: Requested width.
        height_mm: Requested height.
        quantity: Number of identical pieces requested.
        order_id: Owning order, if any.
        client_name: Client the order belongs to.
        order_number: Human-facing order number.
        notes: Free-form notes from the order.
        status: Pending until a commit marks the request as cut.
    """

    id: str
    material_type_id: str
    width_mm: int
    height_mm: int
    quantity: int = 1
    order_id: str | None = None
    client_name: str | None = None
    order_number: str | None = None
    notes: str | None = None
    status: CutStatus = CutStatus.PENDING

    @property
    def is_well_formed(self) -> bool:
        """True when dimensions and quantity are all positive."""
        return self.width_mm > 0 and self.height_mm > 0 and self.quantity > 0

    @property
    def is_pending(self) -> bool:
        return self.status == CutStatus.PENDING


@dataclass(frozen=True)
class CutInstance:
    """One physical unit of a cut request.

    Attributes:
        request: The cut request this unit belongs to.
        instance: 1-based index of this unit within the request quantity.
    """

    request: CutRequest
    instance: int

    def __post_init__(self) -> None:
        if self.instance < 1:
            raise ValueError("Instance number must be at least 1")

    @property
    def request_id(self) -> str:
        return self.request.id

    @property
    def material_type_id(self) -> str:
        return self.request.material_type_id

    @property
    def width_mm(self) -> int:
        return self.request.width_mm

    @property
    def height_mm(self) -> int:
        return self.request.height_mm

    @property
    def area(self) -> int:
        return self.width_mm * self.height_mm

    @property
    def label(self) -> str:
        """Identifier of this unit, e.g. ``cut-7#2``."""
        return f"{self.request.id}#{self.instance}"


@dataclass(frozen=True)
class StockSheet:
    """Full sheets of one nominal size available for a glass type."""

    id: str
    material_type_id: str
    width_mm: int
    height_mm: int
    quantity: int

    def __post_init__(self) -> None:
        if self.width_mm <= 0 or self.height_mm <= 0:
            raise ValueError("Sheet dimensions must be positive")
        if self.quantity < 0:
            raise ValueError("Sheet quantity must be non-negative")

    @property
    def area(self) -> int:
        return self.width_mm * self.height_mm

    def accommodates(self, width_mm: int, height_mm: int) -> bool:
        """Whether a rectangle fits in either orientation."""
        return _fits_either_way(width_mm, height_mm, self.width_mm, self.height_mm)


@dataclass(frozen=True)
class StockRemnant:
    """Leftover pieces from previous jobs, tracked by size and location."""

    id: str
    material_type_id: str
    width_mm: int
    height_mm: int
    quantity: int = 1
    location: str | None = None

    def __post_init__(self) -> None:
        if self.width_mm <= 0 or self.height_mm <= 0:
            raise ValueError("Remnant dimensions must be positive")
        if self.quantity < 0:
            raise ValueError("Remnant quantity must be non-negative")

    @property
    def area(self) -> int:
        return self.width_mm * self.height_mm

    def accommodates(self, width_mm: int, height_mm: int) -> bool:
        """Whether a rectangle fits in either orientation."""
        return _fits_either_way(width_mm, height_mm, self.width_mm, self.height_mm)


def _fits_either_way(width: int, height: int, bound_w: int, bound_h: int) -> bool:
    return (width <= bound_w and height <= bound_h) or (
        height <= bound_w and width <= bound_h
    )


@dataclass(frozen=True)
class PlacedCut:
    """A cut instance placed on a piece at its top-left corner ``(x, y)``."""

    instance: CutInstance
    x: int
    y: int

    def __post_init__(self) -> None:
        if self.x < 0 or self.y < 0:
            raise ValueError("Position coordinates must be non-negative")

    @property
    def width(self) -> int:
        return self.instance.width_mm

    @property
    def height(self) -> int:
        return self.instance.height_mm

    @property
    def right_edge(self) -> int:
        return self.x + self.width

    @property
    def bottom_edge(self) -> int:
        return self.y + self.height

    @property
    def area(self) -> int:
        return self.width * self.height

    def overlaps(self, other: PlacedCut) -> bool:
        """True if the two rectangles share any interior area."""
        return (
            self.x < other.right_edge
            and other.x < self.right_edge
            and self.y < other.bottom_edge
            and other.y < self.bottom_edge
        )


@dataclass(frozen=True)
class StockSnapshot:
    """Point-in-time copy of the inventory the optimizer plans against.

    The optimizer never mutates a snapshot; stock consumed during a run is
    tracked in local counters.
    """

    sheets: tuple[StockSheet, ...] = ()
    remnants: tuple[StockRemnant, ...] = ()
    material_types: tuple[MaterialType, ...] = ()

    def sheets_for(self, material_type_id: str) -> tuple[StockSheet, ...]:
        return tuple(s for s in self.sheets if s.material_type_id == material_type_id)

    def remnants_for(self, material_type_id: str) -> tuple[StockRemnant, ...]:
        return tuple(
            r for r in self.remnants if r.material_type_id == material_type_id
        )

    def material_type(self, material_type_id: str) -> MaterialType | None:
        for material in self.material_types:
            if material.id == material_type_id:
                return material
        return None


@dataclass(frozen=True)
class OptimizationLog:
    """A committed optimization, as recorded by the inventory store.

    Attributes:
        material_type_id: Glass type the optimization was for.
        created_at: ISO 8601 timestamp of the commit.
        metadata: Plan figures (pieces, cuts, areas, efficiency).
        report: Rendered cut plan kept with the log, if any.
    """

    material_type_id: str
    created_at: str
    metadata: Mapping[str, Any] = field(default_factory=dict)
    report: str | None = None

    @property
    def total_cuts(self) -> int | None:
        value = self.metadata.get("total_cuts")
        return None if value is None else int(value)


@dataclass(frozen=True)
class OptimizerSettings:
    """Tunable thresholds and orderings for the cutting optimizer.

    Attributes:
        min_waste_mm: Waste regions at or under this size in either
            dimension are not registered.
        shelf_tolerance_mm: Cuts whose ``y`` differ by at most this much
            belong to the same shelf when deriving waste.
        reusable_min_height_mm: Bottom waste taller than this is saved as
            a reusable remnant by default.
        default_location: Location given to new remnants left without one.
        remnant_order: Area order in which remnants are consumed.
        sheet_order: Area order of the sheet sizes tried for each piece.
    """

    min_waste_mm: int = 5
    shelf_tolerance_mm: int = 1
    reusable_min_height_mm: int = 50
    default_location: str = "Auto-Optimizer"
    remnant_order: AreaOrder = AreaOrder.ASCENDING
    sheet_order: AreaOrder = AreaOrder.DESCENDING

    def __post_init__(self) -> None:
        if self.min_waste_mm < 0:
            raise ValueError("Minimum waste size must be non-negative")
        if self.shelf_tolerance_mm < 0:
            raise ValueError("Shelf tolerance must be non-negative")
        if self.reusable_min_height_mm < 0:
            raise ValueError("Reusable remnant height must be non-negative")
