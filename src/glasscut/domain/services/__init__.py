"""Domain services for cutting plan optimization and commit."""

from .allocator import AllocationResult, StockAllocator, order_by_area
from .commit import (
    CommitReport,
    CommitStatus,
    CutConfirmation,
    NewRemnant,
    PieceCommitOutcome,
    PlanCommitter,
    build_confirmation,
)
from .expander import expand_cut_requests, malformed_request_ids
from .identifiers import RunIdentifiers
from .optimizer import CuttingOptimizer
from .shelf_packer import ShelfPacker, ShelfPackResult
from .stock_filter import (
    StockBounds,
    compute_stock_bounds,
    sort_tallest_first,
    split_feasible,
)
from .waste_calculator import WasteCalculator

__all__ = [
    "AllocationResult",
    "CommitReport",
    "CommitStatus",
    "CutConfirmation",
    "CuttingOptimizer",
    "NewRemnant",
    "PieceCommitOutcome",
    "PlanCommitter",
    "RunIdentifiers",
    "ShelfPackResult",
    "ShelfPacker",
    "StockAllocator",
    "StockBounds",
    "WasteCalculator",
    "build_confirmation",
    "compute_stock_bounds",
    "expand_cut_requests",
    "malformed_request_ids",
    "order_by_area",
    "sort_tallest_first",
    "split_feasible",
]
