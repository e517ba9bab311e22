"""Application commands (use cases) for cutting optimization."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterable, Sequence

from glasscut.domain import CuttingOptimizer, OptimizationLog, Plan, PlanCommitter
from glasscut.domain.services import CommitReport, CutConfirmation

from .dtos import CommitOutput, HistoryOutput, OptimizationLogEntry, OptimizationOutput

if TYPE_CHECKING:
    from glasscut.contracts.protocols import InventoryStoreProtocol, OptimizerProtocol
    from glasscut.infrastructure.formatters import PlanFormatter

logger = logging.getLogger(__name__)


class RunOptimizationCommand:
    """Command to plan the pending cuts held by an inventory store.

    Reads pending requests and a stock snapshot from the store and runs
    the optimizer on them. Nothing is written back; the returned plan is
    meant to be reviewed and then committed with ``CommitPlanCommand``.
    """

    def __init__(
        self,
        store: "InventoryStoreProtocol",
        optimizer: "OptimizerProtocol | None" = None,
    ) -> None:
        self.store = store
        self.optimizer = optimizer or CuttingOptimizer()

    def execute(
        self,
        material_type_ids: Iterable[str] | None = None,
        request_ids: Iterable[str] | None = None,
    ) -> OptimizationOutput:
        """Execute the optimization.

        Args:
            material_type_ids: Restrict the run to these material types.
                All types with pending cuts are planned when None.
            request_ids: Restrict the run to these cut requests.

        Returns:
            OptimizationOutput with the plan and the inputs it was built
            from.
        """
        material_filter = (
            None if material_type_ids is None else list(material_type_ids)
        )
        requests = self.store.list_pending_cuts(material_filter)
        if request_ids is not None:
            wanted = set(request_ids)
            requests = [r for r in requests if r.id in wanted]

        involved = list(dict.fromkeys(r.material_type_id for r in requests))
        snapshot = self.store.snapshot(involved)
        logger.info(
            "Optimizing %d pending requests across %d material types",
            len(requests),
            len(involved),
        )
        plan = self.optimizer.optimize(requests, snapshot)
        return OptimizationOutput(plan=plan, requests=requests, snapshot=snapshot)


def build_log_entries(
    plan: Plan, report_formatter: "PlanFormatter | None" = None
) -> list[OptimizationLogEntry]:
    """Build one pending log entry per material type with pieces."""
    entries = []
    for material_type_id in plan.material_type_ids:
        sub_plan = plan.for_material(material_type_id)
        if not sub_plan.pieces:
            continue
        report = (
            report_formatter.format(sub_plan) if report_formatter is not None else None
        )
        entries.append(
            OptimizationLogEntry(
                material_type_id=material_type_id,
                piece_ids=tuple(p.id for p in sub_plan.pieces),
                summary=sub_plan.summary(),
                report=report,
            )
        )
    return entries


def record_optimization_logs(
    store: "InventoryStoreProtocol",
    report: CommitReport,
    entries: Iterable[OptimizationLogEntry],
) -> list[str]:
    """Record the log entries whose pieces were all committed.

    Returns:
        Material type ids that were logged.
    """
    committed = set(report.committed_piece_ids)
    logged: list[str] = []
    for entry in entries:
        if not entry.piece_ids:
            continue
        if not committed.issuperset(entry.piece_ids):
            logger.warning(
                "Not logging optimization for %s: not every piece was committed",
                entry.material_type_id,
            )
            continue
        store.record_optimization(entry.material_type_id, entry.summary, entry.report)
        logged.append(entry.material_type_id)
    return logged


class CommitPlanCommand:
    """Command to commit a reviewed plan and log the optimization.

    An optimization log entry is recorded for each material type whose
    pieces were all committed. When a report formatter is given, the
    rendered plan of that material is kept with the entry.
    """

    def __init__(
        self,
        store: "InventoryStoreProtocol",
        committer: PlanCommitter | None = None,
        report_formatter: "PlanFormatter | None" = None,
    ) -> None:
        self.store = store
        self.committer = committer or PlanCommitter(store)
        self.report_formatter = report_formatter

    def execute(self, plan: Plan) -> CommitOutput:
        """Execute the commit.

        Raises:
            CommitError: If the store fails for a reason other than a
                stock conflict.
            InventoryStoreError: If the pieces were committed but an
                optimization log could not be written.
        """
        entries = build_log_entries(plan, self.report_formatter)
        report = self.committer.commit(plan)
        logged = record_optimization_logs(self.store, report, entries)
        return CommitOutput(report=report, logged_material_type_ids=logged)


class CommitConfirmationsCommand:
    """Command to commit prepared piece transactions and log them.

    Used where the plan itself is not available, such as a REST client
    sending back the confirmations of a plan it received earlier. The
    pending log entries travel with the confirmations; a material
    committed without one is not logged.
    """

    def __init__(
        self,
        store: "InventoryStoreProtocol",
        committer: PlanCommitter | None = None,
    ) -> None:
        self.store = store
        self.committer = committer or PlanCommitter(store)

    def execute(
        self,
        confirmations: Sequence[CutConfirmation],
        log_entries: Iterable[OptimizationLogEntry] = (),
    ) -> CommitOutput:
        """Execute the commit.

        Args:
            confirmations: One transaction per piece, in plan order.
            log_entries: Pending log entry per material type of the plan.

        Raises:
            CommitError: If the store fails for a reason other than a
                stock conflict.
            InventoryStoreError: If the pieces were committed but an
                optimization log could not be written.
        """
        entries = list(log_entries)
        described = {entry.material_type_id for entry in entries}
        for material_type_id in dict.fromkeys(
            c.material_type_id for c in confirmations
        ):
            if material_type_id not in described:
                logger.warning(
                    "No log entry supplied for %s; it will not be logged",
                    material_type_id,
                )

        report = self.committer.commit_confirmations(confirmations)
        logged = record_optimization_logs(self.store, report, entries)
        return CommitOutput(report=report, logged_material_type_ids=logged)


class OptimizationHistoryCommand:
    """Command to list committed optimizations held by a store."""

    def __init__(self, store: "InventoryStoreProtocol") -> None:
        self.store = store

    def execute(
        self,
        material_type_ids: Iterable[str] | None = None,
        search: str | None = None,
    ) -> HistoryOutput:
        """List optimization logs, newest first.

        Args:
            material_type_ids: Restrict to these material types.
            search: Case-insensitive term matched against the material
                type id, code and name, and against the number of cuts.
        """
        material_filter = (
            None if material_type_ids is None else list(material_type_ids)
        )
        logs = self.store.list_optimization_logs(material_filter)
        material_types = self.store.snapshot().material_types
        output = HistoryOutput(logs=logs, material_types=material_types)
        if search:
            term = search.strip().lower()
            output.logs = [
                log for log in logs if term in _search_text(output, log).lower()
            ]
        return output


def _search_text(output: HistoryOutput, log: OptimizationLog) -> str:
    parts = [log.material_type_id, output.material_name(log.material_type_id)]
    if log.total_cuts is not None:
        parts.append(str(log.total_cuts))
    return " ".join(parts)
