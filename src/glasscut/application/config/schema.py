"""Pydantic models for optimizer configuration files.

Example:
    ```json
    {
        "schema_version": "1.0",
        "waste": {"min_waste_mm": 5, "reusable_min_height_mm": 50},
        "allocation": {"remnant_order": "ascending"}
    }
    ```
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from glasscut.domain.value_objects import AreaOrder

# Version 1.0: Initial schema with waste thresholds and stock orderings
SUPPORTED_VERSIONS: frozenset[str] = frozenset({"1.0"})


class WasteConfigSchema(BaseModel):
    """Thresholds used when deriving and classifying waste regions.

    Attributes:
        min_waste_mm: Regions at or under this size in either dimension
            are not registered.
        shelf_tolerance_mm: Cuts whose top edges differ by at most this
            much belong to the same shelf.
        reusable_min_height_mm: Bottom waste taller than this is saved as
            a remnant by default.
        default_location: Location for new remnants left without one.
    """

    model_config = ConfigDict(extra="forbid")

    min_waste_mm: int = Field(
        default=5, ge=0, le=100, description="Minimum registered waste size in mm"
    )
    shelf_tolerance_mm: int = Field(
        default=1, ge=0, le=50, description="Shelf clustering tolerance in mm"
    )
    reusable_min_height_mm: int = Field(
        default=50, ge=0, description="Minimum height of a reusable remnant in mm"
    )
    default_location: str = Field(
        default="Auto-Optimizer",
        min_length=1,
        description="Location label for new remnants",
    )


class AllocationConfigSchema(BaseModel):
    """Stock orderings used by the allocator.

    Attributes:
        remnant_order: Area order in which remnants are consumed.
        sheet_order: Area order of the sheet sizes tried for each piece.
    """

    model_config = ConfigDict(extra="forbid")

    remnant_order: AreaOrder = Field(
        default=AreaOrder.ASCENDING, description="Remnant consumption order"
    )
    sheet_order: AreaOrder = Field(
        default=AreaOrder.DESCENDING, description="Sheet size preference order"
    )


class OptimizerConfiguration(BaseModel):
    """Root model of an optimizer configuration file."""

    model_config = ConfigDict(extra="forbid")

    schema_version: str = Field(default="1.0", description="Configuration version")
    waste: WasteConfigSchema = Field(default_factory=WasteConfigSchema)
    allocation: AllocationConfigSchema = Field(default_factory=AllocationConfigSchema)

    @field_validator("schema_version")
    @classmethod
    def validate_version(cls, v: str) -> str:
        if v not in SUPPORTED_VERSIONS:
            supported = ", ".join(sorted(SUPPORTED_VERSIONS))
            raise ValueError(
                f"Unsupported schema version '{v}'. Supported: {supported}"
            )
        return v
