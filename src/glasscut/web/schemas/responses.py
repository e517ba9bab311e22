"""Pydantic response schemas for the REST API."""

from typing import Any

from pydantic import BaseModel, Field

from glasscut.web.schemas.common import OptimizationLogDraftSchema, PlanSummarySchema
from glasscut.web.schemas.requests import CutConfirmationSchema


class PlacementSchema(BaseModel):
    """A cut placed on a piece."""

    request_id: str
    instance: int = Field(..., description="1-based unit index within the request")
    label: str
    x: int = Field(..., description="Left edge in mm")
    y: int = Field(..., description="Top edge in mm")
    width_mm: int
    height_mm: int


class WasteRegionSchema(BaseModel):
    """Unused region of a piece."""

    id: str
    x: int
    y: int
    width_mm: int
    height_mm: int
    edge: str
    classification: str = Field(..., description="scrap or reusable_remnant")
    saved: bool
    location: str | None = None


class PieceSchema(BaseModel):
    """A stock unit with its cuts and waste."""

    id: str
    origin: str = Field(..., description="sheet or remnant")
    source_id: str
    material_type_id: str
    width_mm: int
    height_mm: int
    location: str | None = None
    efficiency: float = Field(..., description="Percentage of the area used")
    placements: list[PlacementSchema] = Field(default_factory=list)
    waste: list[WasteRegionSchema] = Field(default_factory=list)


class ExcludedCutSchema(BaseModel):
    """A cut unit left out of the plan."""

    request_id: str
    instance: int
    label: str
    material_type_id: str
    width_mm: int
    height_mm: int
    reason: str


class PlanResponse(BaseModel):
    """Response for an optimization run."""

    pieces: list[PieceSchema] = Field(default_factory=list)
    excluded: list[ExcludedCutSchema] = Field(default_factory=list)
    dropped_request_ids: list[str] = Field(default_factory=list)
    partially_placed_request_ids: list[str] = Field(default_factory=list)
    summary: PlanSummarySchema
    confirmations: list[CutConfirmationSchema] = Field(
        default_factory=list,
        description="Commit transactions for the plan as reviewed",
    )
    optimization_logs: list[OptimizationLogDraftSchema] = Field(
        default_factory=list,
        description="Log entries to send back with the commit request",
    )


class PieceOutcomeSchema(BaseModel):
    """Commit outcome of one piece."""

    piece_id: str | None
    status: str = Field(..., description="committed or conflict")
    message: str = ""


class CommitResponse(BaseModel):
    """Response for a commit batch."""

    outcomes: list[PieceOutcomeSchema] = Field(default_factory=list)
    committed: int = Field(..., description="Number of committed pieces")
    conflicts: int = Field(..., description="Number of stale pieces")
    needs_reoptimization: bool
    logged_material_type_ids: list[str] = Field(
        default_factory=list,
        description="Material types whose optimization was logged",
    )


class ErrorResponseSchema(BaseModel):
    """Standard error response."""

    error: str = Field(..., description="Error message")
    error_type: str = Field(..., description="Error type identifier")
    details: list[dict[str, Any]] | dict[str, Any] | None = Field(
        default=None, description="Additional error details"
    )


class OptimizationRecordSchema(BaseModel):
    """A committed optimization from the store's history."""

    material_type_id: str
    material_name: str
    created_at: str = Field(..., description="ISO 8601 commit timestamp")
    metadata: dict[str, Any] = Field(default_factory=dict)
    report: str | None = Field(
        default=None, description="Stored cut plan, when requested"
    )


class HistoryResponse(BaseModel):
    """Response for an optimization history query."""

    logs: list[OptimizationRecordSchema] = Field(default_factory=list)
    total: int
