"""Service protocols for dependency injection.

The optimizer core depends only on these protocols for anything that
touches persisted data, so stores can be swapped (in-memory for tests, a
JSON file for the CLI, a database behind the REST API) without changing
the engine.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, Protocol, Sequence, runtime_checkable

if TYPE_CHECKING:
    from glasscut.domain.entities import Plan, PlanSummary
    from glasscut.domain.services.commit import CutConfirmation
    from glasscut.domain.value_objects import (
        CutRequest,
        OptimizationLog,
        StockSnapshot,
    )


@runtime_checkable
class InventoryStoreProtocol(Protocol):
    """Protocol for the persisted store of cut requests and stock.

    Implementations must apply each confirmation atomically: either the
    stock decrement, the remnant inserts and the status updates all
    happen, or none of them do.
    """

    def list_pending_cuts(
        self, material_type_ids: Iterable[str] | None = None
    ) -> list[CutRequest]:
        """Return pending cut requests, optionally for some material types."""
        ...

    def snapshot(
        self, material_type_ids: Iterable[str] | None = None
    ) -> StockSnapshot:
        """Return a copy of the available stock."""
        ...

    def apply_cut_confirmation(self, confirmation: CutConfirmation) -> None:
        """Apply one piece's inventory transaction.

        Raises:
            CommitConflictError: If the source stock unit is no longer
                available.
            InventoryStoreError: If the store cannot apply the change.
        """
        ...

    def record_optimization(
        self,
        material_type_id: str,
        summary: PlanSummary,
        report: str | None = None,
    ) -> None:
        """Store a log entry for a committed optimization.

        Args:
            material_type_id: Glass type the optimization was for.
            summary: Figures of the committed plan for that type.
            report: Rendered cut plan to keep with the entry.
        """
        ...

    def list_optimization_logs(
        self, material_type_ids: Iterable[str] | None = None
    ) -> list[OptimizationLog]:
        """Return recorded optimization logs, newest first."""
        ...


class OptimizerProtocol(Protocol):
    """Protocol for cutting plan optimizers."""

    def optimize(
        self,
        requests: Sequence[CutRequest],
        snapshot: StockSnapshot,
    ) -> Plan:
        """Produce a plan for the requests against the stock snapshot."""
        ...
