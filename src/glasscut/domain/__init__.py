"""Domain layer - cutting plan optimization core."""

from .entities import ExcludedCut, Piece, Plan, PlanSummary, WasteRegion
from .exceptions import (
    CommitConflictError,
    CommitError,
    InventoryStoreError,
    StaleWasteRegionError,
)
from .services import CuttingOptimizer, PlanCommitter
from .value_objects import (
    AreaOrder,
    CutInstance,
    CutRequest,
    CutStatus,
    ExclusionReason,
    MaterialType,
    OptimizationLog,
    OptimizerSettings,
    PieceOrigin,
    PlacedCut,
    StockRemnant,
    StockSheet,
    StockSnapshot,
    WasteClassification,
    WasteEdge,
)

__all__ = [
    "AreaOrder",
    "CommitConflictError",
    "CommitError",
    "CutInstance",
    "CutRequest",
    "CutStatus",
    "CuttingOptimizer",
    "ExcludedCut",
    "ExclusionReason",
    "InventoryStoreError",
    "MaterialType",
    "OptimizationLog",
    "OptimizerSettings",
    "Piece",
    "PieceOrigin",
    "PlacedCut",
    "Plan",
    "PlanCommitter",
    "PlanSummary",
    "StaleWasteRegionError",
    "StockRemnant",
    "StockSheet",
    "StockSnapshot",
    "WasteClassification",
    "WasteEdge",
    "WasteRegion",
]
