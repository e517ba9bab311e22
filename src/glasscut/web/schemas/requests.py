"""Pydantic request schemas for the REST API."""

from typing import Any

from pydantic import BaseModel, Field

from glasscut.application.config import (
    CutRequestSchema,
    MaterialTypeSchema,
    StockRemnantSchema,
    StockSheetSchema,
)
from glasscut.domain import PieceOrigin
from glasscut.web.schemas.common import OptimizationLogDraftSchema


class WasteOverrideSchema(BaseModel):
    """Reviewer decision for one waste region."""

    region_id: str = Field(..., description="Waste region id (W1, W2, ...)")
    saved: bool = Field(..., description="Keep the region as a remnant")
    location: str | None = Field(default=None, description="Remnant storage location")


class OptimizeRequest(BaseModel):
    """Request for planning cuts against an inline stock snapshot."""

    cut_requests: list[CutRequestSchema] = Field(
        default_factory=list, description="Cut requests to plan"
    )
    sheets: list[StockSheetSchema] = Field(
        default_factory=list, description="Sheet stock"
    )
    remnants: list[StockRemnantSchema] = Field(
        default_factory=list, description="Remnant stock"
    )
    material_types: list[MaterialTypeSchema] = Field(
        default_factory=list, description="Glass types, for display names"
    )
    config: dict[str, Any] | None = Field(
        default=None, description="Optional optimizer configuration JSON"
    )
    waste_overrides: list[WasteOverrideSchema] = Field(
        default_factory=list, description="Review decisions applied to the plan"
    )


class StoredOptimizeRequest(BaseModel):
    """Request for planning the pending cuts held by the inventory store."""

    material_type_ids: list[str] | None = Field(
        default=None, description="Material types to plan (all when omitted)"
    )
    request_ids: list[str] | None = Field(
        default=None, description="Cut requests to plan (all pending when omitted)"
    )
    config: dict[str, Any] | None = Field(
        default=None, description="Optional optimizer configuration JSON"
    )
    waste_overrides: list[WasteOverrideSchema] = Field(default_factory=list)


class NewRemnantSchema(BaseModel):
    """Remnant to insert into inventory."""

    width_mm: int = Field(..., gt=0)
    height_mm: int = Field(..., gt=0)
    quantity: int = Field(default=1, ge=1)
    location: str = Field(..., min_length=1)


class CutConfirmationSchema(BaseModel):
    """Inventory transaction for one piece of an accepted plan."""

    material_type_id: str = Field(..., min_length=1)
    source_kind: PieceOrigin = Field(..., description="sheet or remnant")
    source_id: str = Field(..., min_length=1)
    cut_request_ids: list[str] = Field(default_factory=list)
    new_remnants: list[NewRemnantSchema] = Field(default_factory=list)
    piece_id: str | None = Field(default=None, description="Plan piece id")


class CommitRequest(BaseModel):
    """Request for committing an accepted plan."""

    confirmations: list[CutConfirmationSchema] = Field(
        ..., description="One confirmation per piece, in plan order"
    )
    stop_on_conflict: bool = Field(
        default=False, description="Stop at the first stale piece"
    )
    optimization_logs: list[OptimizationLogDraftSchema] = Field(
        default_factory=list,
        description="Log entries from the plan response, one per material type",
    )
