"""Optimization history endpoint."""

from typing import Annotated

from fastapi import APIRouter, Query

from glasscut.web.dependencies import InventoryStoreDep, ServiceFactoryDep
from glasscut.web.schemas.responses import HistoryResponse, OptimizationRecordSchema

router = APIRouter(prefix="/optimizations", tags=["history"])


@router.get("", response_model=HistoryResponse)
def list_optimizations(
    factory: ServiceFactoryDep,
    store: InventoryStoreDep,
    material_type_id: Annotated[
        list[str] | None, Query(description="Material types to list")
    ] = None,
    search: Annotated[
        str | None, Query(description="Material code or number of cuts")
    ] = None,
    include_report: Annotated[
        bool, Query(description="Include the stored cut plan")
    ] = False,
) -> HistoryResponse:
    """List committed optimizations, newest first."""
    output = factory.create_history_command(store).execute(
        material_type_ids=material_type_id, search=search
    )
    return HistoryResponse(
        logs=[
            OptimizationRecordSchema(
                material_type_id=log.material_type_id,
                material_name=output.material_name(log.material_type_id),
                created_at=log.created_at,
                metadata=dict(log.metadata),
                report=log.report if include_report else None,
            )
            for log in output.logs
        ],
        total=len(output.logs),
    )
