"""Cutting plan optimizer.

Ties the stages together: requests are expanded into unit cuts, filtered
against each material type's stock bounds, sorted tallest first and
allocated to remnants and sheets. Each material type is planned on its
own and the per-type results are concatenated into one plan.

The optimizer is a pure function of its inputs. It performs no I/O and
never mutates the stock snapshot, so it can be called from any thread.
"""

from __future__ import annotations

import logging
from typing import Sequence

from glasscut.domain.entities import ExcludedCut, Plan
from glasscut.domain.value_objects import (
    CutInstance,
    CutRequest,
    ExclusionReason,
    OptimizerSettings,
    StockSnapshot,
)

from .allocator import StockAllocator
from .expander import expand_cut_requests, malformed_request_ids
from .identifiers import RunIdentifiers
from .stock_filter import compute_stock_bounds, sort_tallest_first, split_feasible

logger = logging.getLogger(__name__)


class CuttingOptimizer:
    """Plans which stock units to cut and where each cut goes.

    Attributes:
        settings: Optimizer settings shared with the allocator.
        allocator: Allocator used for each material type.
    """

    def __init__(
        self,
        settings: OptimizerSettings | None = None,
        allocator: StockAllocator | None = None,
    ) -> None:
        self.settings = settings or OptimizerSettings()
        self.allocator = allocator or StockAllocator(self.settings)

    def optimize(
        self,
        requests: Sequence[CutRequest],
        snapshot: StockSnapshot,
    ) -> Plan:
        """Produce a cutting plan for the selected requests.

        Args:
            requests: Cut requests to plan (any mix of material types).
            snapshot: Stock available when the run started.

        Returns:
            Plan with the packed pieces and every instance that could not
            be placed.
        """
        ids = RunIdentifiers()
        plan = Plan(dropped_request_ids=malformed_request_ids(requests))
        instances = expand_cut_requests(requests)

        for material_type_id, type_instances in _group_by_material(instances):
            sheets = snapshot.sheets_for(material_type_id)
            remnants = snapshot.remnants_for(material_type_id)

            bounds = compute_stock_bounds(sheets, remnants)
            feasible, infeasible = split_feasible(type_instances, bounds)
            plan.excluded.extend(
                ExcludedCut(i, ExclusionReason.INFEASIBLE) for i in infeasible
            )

            allocation = self.allocator.allocate(
                material_type_id,
                sort_tallest_first(feasible),
                sheets,
                remnants,
                ids,
            )
            plan.pieces.extend(allocation.pieces)
            plan.excluded.extend(allocation.excluded)

        logger.info(
            "Planned %d cuts: %d pieces, %d excluded, %d requests dropped",
            len(instances),
            len(plan.pieces),
            len(plan.excluded),
            len(plan.dropped_request_ids),
        )
        return plan


def _group_by_material(
    instances: Sequence[CutInstance],
) -> list[tuple[str, list[CutInstance]]]:
    """Group instances by material type in first-seen order."""
    groups: dict[str, list[CutInstance]] = {}
    for instance in instances:
        groups.setdefault(instance.material_type_id, []).append(instance)
    return list(groups.items())
