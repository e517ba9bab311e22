"""Data Transfer Objects for the application layer."""

from __future__ import annotations

from dataclasses import dataclass, field

from glasscut.domain import (
    CutRequest,
    MaterialType,
    OptimizationLog,
    Plan,
    PlanSummary,
    StockSnapshot,
)
from glasscut.domain.services import CommitReport


@dataclass
class OptimizationOutput:
    """Output DTO of an optimization run.

    Attributes:
        plan: The reviewable cutting plan.
        requests: Cut requests the plan was built from.
        snapshot: Stock the plan was built against.
    """

    plan: Plan
    requests: list[CutRequest] = field(default_factory=list)
    snapshot: StockSnapshot = field(default_factory=StockSnapshot)

    def material_name(self, material_type_id: str) -> str:
        """Display name of a material type, falling back to its id."""
        material = self.snapshot.material_type(material_type_id)
        return material.display_name if material else material_type_id


@dataclass
class CommitOutput:
    """Output DTO of a commit.

    Attributes:
        report: Per-piece outcomes.
        logged_material_type_ids: Material types for which an optimization
            log entry was recorded.
    """

    report: CommitReport
    logged_material_type_ids: list[str] = field(default_factory=list)

    @property
    def is_complete(self) -> bool:
        return self.report.is_complete


@dataclass(frozen=True)
class OptimizationLogEntry:
    """Log entry to record once every piece of a material is committed.

    Attributes:
        material_type_id: Glass type the entry is for.
        piece_ids: Pieces of that type in the committed plan.
        summary: Figures of the plan restricted to that type.
        report: Rendered cut plan for that type.
    """

    material_type_id: str
    piece_ids: tuple[str, ...]
    summary: PlanSummary
    report: str | None = None


@dataclass
class HistoryOutput:
    """Output DTO of an optimization history query."""

    logs: list[OptimizationLog] = field(default_factory=list)
    material_types: tuple[MaterialType, ...] = ()

    def material_name(self, material_type_id: str) -> str:
        for material in self.material_types:
            if material.id == material_type_id:
                return material.display_name
        return material_type_id
