"""Conversion between configuration schemas and domain objects."""

from __future__ import annotations

from typing import Any, Iterable

from glasscut.application.config.inventory_schema import (
    CutRequestSchema,
    InventoryFile,
    MaterialTypeSchema,
    OptimizationLogSchema,
    StockRemnantSchema,
    StockSheetSchema,
)
from glasscut.application.config.schema import OptimizerConfiguration
from glasscut.domain.value_objects import (
    CutRequest,
    MaterialType,
    OptimizerSettings,
    StockRemnant,
    StockSheet,
    StockSnapshot,
)


def config_to_settings(config: OptimizerConfiguration | None) -> OptimizerSettings:
    """Build optimizer settings from a configuration (defaults if None)."""
    if config is None:
        return OptimizerSettings()
    return OptimizerSettings(
        min_waste_mm=config.waste.min_waste_mm,
        shelf_tolerance_mm=config.waste.shelf_tolerance_mm,
        reusable_min_height_mm=config.waste.reusable_min_height_mm,
        default_location=config.waste.default_location,
        remnant_order=config.allocation.remnant_order,
        sheet_order=config.allocation.sheet_order,
    )


def _wanted(material_type_ids: Iterable[str] | None) -> set[str] | None:
    return None if material_type_ids is None else set(material_type_ids)


def cut_request_from_schema(item: CutRequestSchema) -> CutRequest:
    return CutRequest(**item.model_dump())


def sheet_from_schema(item: StockSheetSchema) -> StockSheet:
    return StockSheet(**item.model_dump())


def remnant_from_schema(item: StockRemnantSchema) -> StockRemnant:
    return StockRemnant(**item.model_dump())


def material_type_from_schema(item: MaterialTypeSchema) -> MaterialType:
    return MaterialType(**item.model_dump())


def inventory_to_cut_requests(
    inventory: InventoryFile,
    material_type_ids: Iterable[str] | None = None,
    pending_only: bool = True,
) -> list[CutRequest]:
    """Cut requests of an inventory, optionally filtered by material type."""
    wanted = _wanted(material_type_ids)
    requests = [cut_request_from_schema(c) for c in inventory.cut_requests]
    return [
        r
        for r in requests
        if (wanted is None or r.material_type_id in wanted)
        and (r.is_pending or not pending_only)
    ]


def inventory_to_snapshot(
    inventory: InventoryFile,
    material_type_ids: Iterable[str] | None = None,
) -> StockSnapshot:
    """Stock snapshot of an inventory, optionally filtered by material type."""
    wanted = _wanted(material_type_ids)

    def keep(material_type_id: str) -> bool:
        return wanted is None or material_type_id in wanted

    return StockSnapshot(
        sheets=tuple(
            sheet_from_schema(s) for s in inventory.sheets if keep(s.material_type_id)
        ),
        remnants=tuple(
            remnant_from_schema(r)
            for r in inventory.remnants
            if keep(r.material_type_id)
        ),
        material_types=tuple(
            material_type_from_schema(m)
            for m in inventory.material_types
            if keep(m.id)
        ),
    )


def domain_to_inventory(
    cut_requests: Iterable[CutRequest],
    snapshot: StockSnapshot,
    optimization_logs: Iterable[dict[str, Any]] = (),
) -> InventoryFile:
    """Build an inventory document from domain objects."""
    return InventoryFile(
        material_types=[
            MaterialTypeSchema(
                id=m.id,
                code=m.code,
                thickness_mm=m.thickness_mm,
                color=m.color,
                description=m.description,
            )
            for m in snapshot.material_types
        ],
        cut_requests=[
            CutRequestSchema(
                id=r.id,
                material_type_id=r.material_type_id,
                width_mm=r.width_mm,
                height_mm=r.height_mm,
                quantity=r.quantity,
                order_id=r.order_id,
                client_name=r.client_name,
                order_number=r.order_number,
                notes=r.notes,
                status=r.status,
            )
            for r in cut_requests
        ],
        sheets=[
            StockSheetSchema(
                id=s.id,
                material_type_id=s.material_type_id,
                width_mm=s.width_mm,
                height_mm=s.height_mm,
                quantity=s.quantity,
            )
            for s in snapshot.sheets
        ],
        remnants=[
            StockRemnantSchema(
                id=r.id,
                material_type_id=r.material_type_id,
                width_mm=r.width_mm,
                height_mm=r.height_mm,
                quantity=r.quantity,
                location=r.location,
            )
            for r in snapshot.remnants
        ],
        optimization_logs=[
            OptimizationLogSchema.model_validate(log) for log in optimization_logs
        ],
    )
