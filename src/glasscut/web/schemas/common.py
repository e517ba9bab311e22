"""Common Pydantic schemas shared across requests and responses."""

from pydantic import BaseModel, Field


class PlanSummarySchema(BaseModel):
    """Resource and efficiency figures of a plan."""

    total_pieces: int = Field(..., ge=0)
    sheets_used: int = Field(..., ge=0)
    remnants_used: int = Field(..., ge=0)
    total_cuts: int = Field(..., ge=0)
    excluded_cuts: int = Field(..., ge=0)
    total_area_mm2: int = Field(..., ge=0)
    used_area_mm2: int = Field(..., ge=0)
    waste_area_mm2: int
    efficiency: float
    saved_remnants: int = Field(..., ge=0)


class OptimizationLogDraftSchema(BaseModel):
    """Optimization log entry recorded when a material is fully committed.

    Returned with each plan, one per material type with pieces, and sent
    back unchanged with the commit request.
    """

    material_type_id: str = Field(..., min_length=1)
    piece_ids: list[str] = Field(
        ..., min_length=1, description="Pieces that must all commit for the log"
    )
    summary: PlanSummarySchema
    report: str | None = Field(
        default=None, description="Text rendering of the material's cut plan"
    )
