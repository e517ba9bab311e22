"""Optimization endpoints."""

from typing import Mapping

from fastapi import APIRouter

from glasscut.application import ServiceFactory, build_log_entries
from glasscut.application.config import (
    config_to_settings,
    cut_request_from_schema,
    load_config_from_dict,
    material_type_from_schema,
    remnant_from_schema,
    sheet_from_schema,
)
from glasscut.domain import OptimizerSettings, Plan, StockSnapshot
from glasscut.domain.services import build_confirmation
from glasscut.web.dependencies import InventoryStoreDep, ServiceFactoryDep
from glasscut.web.schemas.common import OptimizationLogDraftSchema, PlanSummarySchema
from glasscut.web.schemas.requests import (
    CutConfirmationSchema,
    NewRemnantSchema,
    OptimizeRequest,
    StoredOptimizeRequest,
    WasteOverrideSchema,
)
from glasscut.web.schemas.responses import PlanResponse

router = APIRouter(prefix="/optimize", tags=["optimize"])


def _resolve_factory(config: dict | None, default: ServiceFactory) -> ServiceFactory:
    """Use a request-scoped factory when the request carries a config."""
    if config is None:
        return default
    return ServiceFactory(settings=config_to_settings(load_config_from_dict(config)))


def _apply_overrides(plan: Plan, overrides: list[WasteOverrideSchema]) -> None:
    for override in overrides:
        plan.set_saved(override.region_id, override.saved, override.location)


def _plan_to_schema(
    factory: ServiceFactory,
    plan: Plan,
    settings: OptimizerSettings,
    material_names: Mapping[str, str] | None = None,
) -> PlanResponse:
    """Convert a plan to the response schema.

    The response carries the commit transaction of each piece and the
    optimization log entry of each material, both to be sent back on
    commit.
    """
    data = factory.get_json_exporter().to_dict(plan)
    confirmations = []
    for piece in plan.pieces:
        confirmation = build_confirmation(piece, settings)
        confirmations.append(
            CutConfirmationSchema(
                material_type_id=confirmation.material_type_id,
                source_kind=confirmation.source_kind,
                source_id=confirmation.source_id,
                cut_request_ids=list(confirmation.cut_request_ids),
                new_remnants=[
                    NewRemnantSchema(
                        width_mm=r.width_mm,
                        height_mm=r.height_mm,
                        quantity=r.quantity,
                        location=r.location,
                    )
                    for r in confirmation.new_remnants
                ],
                piece_id=confirmation.piece_id,
            )
        )
    formatter = factory.get_plan_formatter(material_names)
    logs = [
        OptimizationLogDraftSchema(
            material_type_id=entry.material_type_id,
            piece_ids=list(entry.piece_ids),
            summary=PlanSummarySchema.model_validate(entry.summary.as_metadata()),
            report=entry.report,
        )
        for entry in build_log_entries(plan, formatter)
    ]
    return PlanResponse.model_validate(
        {**data, "confirmations": confirmations, "optimization_logs": logs}
    )


@router.post("", response_model=PlanResponse)
async def optimize(
    request: OptimizeRequest,
    default_factory: ServiceFactoryDep,
) -> PlanResponse:
    """Plan cuts against the stock given in the request.

    Args:
        request: Cut requests, stock and optional configuration.

    Returns:
        The plan, after applying any waste overrides, with one commit
        transaction per piece.
    """
    factory = _resolve_factory(request.config, default_factory)
    snapshot = StockSnapshot(
        sheets=tuple(sheet_from_schema(s) for s in request.sheets),
        remnants=tuple(remnant_from_schema(r) for r in request.remnants),
        material_types=tuple(
            material_type_from_schema(m) for m in request.material_types
        ),
    )
    requests = [cut_request_from_schema(c) for c in request.cut_requests]

    plan = factory.get_optimizer().optimize(requests, snapshot)
    _apply_overrides(plan, request.waste_overrides)
    names = {m.id: m.display_name for m in snapshot.material_types}
    return _plan_to_schema(factory, plan, factory.settings, names)


@router.post("/pending", response_model=PlanResponse)
def optimize_pending(
    request: StoredOptimizeRequest,
    default_factory: ServiceFactoryDep,
    store: InventoryStoreDep,
) -> PlanResponse:
    """Plan the pending cuts held by the inventory store.

    Nothing is written; commit the returned confirmations to apply the
    plan.
    """
    factory = _resolve_factory(request.config, default_factory)
    output = factory.create_run_optimization_command(store).execute(
        material_type_ids=request.material_type_ids,
        request_ids=request.request_ids,
    )
    _apply_overrides(output.plan, request.waste_overrides)
    names = {m: output.material_name(m) for m in output.plan.material_type_ids}
    return _plan_to_schema(factory, output.plan, factory.settings, names)
