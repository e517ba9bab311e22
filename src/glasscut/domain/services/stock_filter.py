"""Coarse feasibility filtering of cut instances against stock.

The bound used here is the largest width and the largest height found
across all available sheets and remnants of a material type, tracked
independently. Passing the filter is necessary but not sufficient for a
cut to be placed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence

from glasscut.domain.value_objects import CutInstance, StockRemnant, StockSheet

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StockBounds:
    """Largest stock width and height available for a material type."""

    max_width: int
    max_height: int

    def admits(self, instance: CutInstance) -> bool:
        """Whether the instance fits the bounds in either orientation."""
        w, h = instance.width_mm, instance.height_mm
        standard = w <= self.max_width and h <= self.max_height
        rotated = h <= self.max_width and w <= self.max_height
        return standard or rotated


def compute_stock_bounds(
    sheets: Sequence[StockSheet],
    remnants: Sequence[StockRemnant],
) -> StockBounds | None:
    """Compute the stock bounds from units with quantity left.

    Returns:
        The bounds, or None when no stock unit is available at all.
    """
    available = [s for s in sheets if s.quantity > 0]
    available_remnants = [r for r in remnants if r.quantity > 0]
    widths = [s.width_mm for s in available] + [r.width_mm for r in available_remnants]
    heights = [s.height_mm for s in available] + [
        r.height_mm for r in available_remnants
    ]
    if not widths:
        return None
    return StockBounds(max_width=max(widths), max_height=max(heights))


def split_feasible(
    instances: Sequence[CutInstance],
    bounds: StockBounds | None,
) -> tuple[list[CutInstance], list[CutInstance]]:
    """Separate instances that may fit the stock from those that cannot.

    Args:
        instances: Cut instances of a single material type.
        bounds: Stock bounds for that type, None if there is no stock.

    Returns:
        Tuple of (feasible, infeasible) instances, each in input order.
    """
    feasible: list[CutInstance] = []
    infeasible: list[CutInstance] = []
    for instance in instances:
        if bounds is not None and bounds.admits(instance):
            feasible.append(instance)
        else:
            infeasible.append(instance)
            logger.warning(
                "Cut %s (%sx%s) exceeds all available stock",
                instance.label,
                instance.width_mm,
                instance.height_mm,
            )
    return feasible, infeasible


def sort_tallest_first(instances: Sequence[CutInstance]) -> list[CutInstance]:
    """Sort by height descending, keeping input order among equal heights."""
    return sorted(instances, key=lambda i: i.height_mm, reverse=True)
