"""Service factory for dependency injection."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Mapping

from glasscut.domain import OptimizerSettings

if TYPE_CHECKING:
    from glasscut.application.commands import (
        CommitConfirmationsCommand,
        CommitPlanCommand,
        OptimizationHistoryCommand,
        RunOptimizationCommand,
    )
    from glasscut.contracts.protocols import InventoryStoreProtocol, OptimizerProtocol
    from glasscut.domain.services import PlanCommitter
    from glasscut.infrastructure.cut_diagram_renderer import CutDiagramRenderer
    from glasscut.infrastructure.formatters import PlanFormatter, PlanJsonExporter


@dataclass
class ServiceFactory:
    """Factory for creating service instances.

    Centralizes service instantiation so that the CLI, the REST API and
    tests build the optimizer and its collaborators the same way from one
    set of settings.

    Example:
        ```python
        factory = ServiceFactory(settings=config_to_settings(config))
        command = factory.create_run_optimization_command(store)
        output = command.execute(material_type_ids=["float-4mm"])
        ```
    """

    settings: OptimizerSettings = field(default_factory=OptimizerSettings)

    _optimizer: "OptimizerProtocol | None" = field(
        default=None, init=False, repr=False
    )

    def get_optimizer(self) -> "OptimizerProtocol":
        """Get or create the cutting optimizer."""
        if self._optimizer is None:
            from glasscut.domain.services import CuttingOptimizer

            self._optimizer = CuttingOptimizer(self.settings)
        return self._optimizer

    def create_committer(
        self, store: "InventoryStoreProtocol", stop_on_conflict: bool = False
    ) -> "PlanCommitter":
        """Create a plan committer bound to a store."""
        from glasscut.domain.services import PlanCommitter

        return PlanCommitter(store, self.settings, stop_on_conflict=stop_on_conflict)

    def create_run_optimization_command(
        self, store: "InventoryStoreProtocol"
    ) -> "RunOptimizationCommand":
        """Create an optimization command reading from a store."""
        from glasscut.application.commands import RunOptimizationCommand

        return RunOptimizationCommand(store, self.get_optimizer())

    def create_commit_command(
        self,
        store: "InventoryStoreProtocol",
        stop_on_conflict: bool = False,
        material_names: Mapping[str, str] | None = None,
    ) -> "CommitPlanCommand":
        """Create a commit command writing to a store.

        The text rendering of each committed material's plan is kept with
        its optimization log.
        """
        from glasscut.application.commands import CommitPlanCommand

        return CommitPlanCommand(
            store,
            self.create_committer(store, stop_on_conflict=stop_on_conflict),
            report_formatter=self.get_plan_formatter(material_names),
        )

    def create_commit_confirmations_command(
        self, store: "InventoryStoreProtocol", stop_on_conflict: bool = False
    ) -> "CommitConfirmationsCommand":
        """Create a command committing prepared piece transactions."""
        from glasscut.application.commands import CommitConfirmationsCommand

        return CommitConfirmationsCommand(
            store, self.create_committer(store, stop_on_conflict=stop_on_conflict)
        )

    def create_history_command(
        self, store: "InventoryStoreProtocol"
    ) -> "OptimizationHistoryCommand":
        """Create a command listing the store's optimization logs."""
        from glasscut.application.commands import OptimizationHistoryCommand

        return OptimizationHistoryCommand(store)

    def get_plan_formatter(
        self, material_names: Mapping[str, str] | None = None
    ) -> "PlanFormatter":
        """Create plan text formatter instance."""
        from glasscut.infrastructure.formatters import PlanFormatter

        return PlanFormatter(material_names=material_names)

    def get_json_exporter(self) -> "PlanJsonExporter":
        """Create plan JSON exporter instance."""
        from glasscut.infrastructure.formatters import PlanJsonExporter

        return PlanJsonExporter()

    def get_cut_diagram_renderer(
        self, material_names: Mapping[str, str] | None = None
    ) -> "CutDiagramRenderer":
        """Create cut diagram renderer instance."""
        from glasscut.infrastructure.cut_diagram_renderer import CutDiagramRenderer

        return CutDiagramRenderer(material_names=material_names)


_default_factory: ServiceFactory | None = None


def get_factory() -> ServiceFactory:
    """Get the default service factory."""
    global _default_factory
    if _default_factory is None:
        _default_factory = ServiceFactory()
    return _default_factory


def set_factory(factory: ServiceFactory | None) -> None:
    """Set a custom factory (for testing)."""
    global _default_factory
    _default_factory = factory


def reset_factory() -> None:
    """Reset the factory to default (for testing cleanup)."""
    global _default_factory
    _default_factory = None
