"""Pydantic models for inventory snapshot files.

The same document is the CLI input and the on-disk format of the JSON
inventory store: it lists glass types, pending and fulfilled cut
requests, sheet and remnant stock, and a log of committed optimizations.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from glasscut.domain.value_objects import CutStatus


class MaterialTypeSchema(BaseModel):
    """A glass type."""

    model_config = ConfigDict(extra="forbid")

    id: str = Field(..., min_length=1)
    code: str = Field(..., min_length=1)
    thickness_mm: float | None = Field(default=None, gt=0)
    color: str | None = None
    description: str | None = None


class CutRequestSchema(BaseModel):
    """A requested cut line.

    Dimensions and quantity are not range-checked here: malformed lines
    are dropped by the optimizer without failing the whole file.
    """

    model_config = ConfigDict(extra="forbid")

    id: str = Field(..., min_length=1)
    material_type_id: str = Field(..., min_length=1)
    width_mm: int = Field(..., description="Requested width in mm")
    height_mm: int = Field(..., description="Requested height in mm")
    quantity: int = Field(default=1, description="Number of identical pieces")
    order_id: str | None = None
    client_name: str | None = None
    order_number: str | None = None
    notes: str | None = None
    status: CutStatus = CutStatus.PENDING


class StockSheetSchema(BaseModel):
    """Full sheets of one size."""

    model_config = ConfigDict(extra="forbid")

    id: str = Field(..., min_length=1)
    material_type_id: str = Field(..., min_length=1)
    width_mm: int = Field(..., gt=0)
    height_mm: int = Field(..., gt=0)
    quantity: int = Field(default=0, ge=0)


class StockRemnantSchema(BaseModel):
    """Remnant stock."""

    model_config = ConfigDict(extra="forbid")

    id: str = Field(..., min_length=1)
    material_type_id: str = Field(..., min_length=1)
    width_mm: int = Field(..., gt=0)
    height_mm: int = Field(..., gt=0)
    quantity: int = Field(default=1, ge=0)
    location: str | None = None


class OptimizationLogSchema(BaseModel):
    """Record of a committed optimization."""

    model_config = ConfigDict(extra="forbid")

    material_type_id: str
    created_at: str
    metadata: dict[str, Any] = Field(default_factory=dict)
    report: str | None = Field(
        default=None, description="Rendered cut plan kept with the log"
    )


class InventoryFile(BaseModel):
    """Root model of an inventory snapshot file."""

    model_config = ConfigDict(extra="forbid")

    schema_version: str = Field(default="1.0")
    material_types: list[MaterialTypeSchema] = Field(default_factory=list)
    cut_requests: list[CutRequestSchema] = Field(default_factory=list)
    sheets: list[StockSheetSchema] = Field(default_factory=list)
    remnants: list[StockRemnantSchema] = Field(default_factory=list)
    optimization_logs: list[OptimizationLogSchema] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_unique_ids(self) -> "InventoryFile":
        for name in ("cut_requests", "sheets", "remnants"):
            seen: set[str] = set()
            for item in getattr(self, name):
                if item.id in seen:
                    raise ValueError(f"Duplicate id '{item.id}' in {name}")
                seen.add(item.id)
        return self
