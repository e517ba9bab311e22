"""Commit endpoint."""

from fastapi import APIRouter, Response

from glasscut.application import OptimizationLogEntry
from glasscut.domain import PlanSummary
from glasscut.domain.services import CutConfirmation, NewRemnant
from glasscut.web.dependencies import InventoryStoreDep, ServiceFactoryDep
from glasscut.web.schemas.requests import CommitRequest, CutConfirmationSchema
from glasscut.web.schemas.responses import CommitResponse, PieceOutcomeSchema

router = APIRouter(prefix="/commit", tags=["commit"])


def _to_confirmation(item: CutConfirmationSchema) -> CutConfirmation:
    return CutConfirmation(
        material_type_id=item.material_type_id,
        source_kind=item.source_kind,
        source_id=item.source_id,
        cut_request_ids=tuple(item.cut_request_ids),
        new_remnants=tuple(
            NewRemnant(
                width_mm=r.width_mm,
                height_mm=r.height_mm,
                location=r.location,
                quantity=r.quantity,
            )
            for r in item.new_remnants
        ),
        piece_id=item.piece_id,
    )


@router.post(
    "",
    response_model=CommitResponse,
    responses={409: {"model": CommitResponse}},
)
def commit(
    request: CommitRequest,
    response: Response,
    factory: ServiceFactoryDep,
    store: InventoryStoreDep,
) -> CommitResponse:
    """Apply an accepted plan to the inventory store, one piece at a time.

    Pieces whose stock unit is gone are reported as conflicts and the
    response status is 409; the pieces committed before and after them
    stay committed. Each material whose pieces were all committed is
    logged with the entry sent in ``optimization_logs``.
    """
    log_entries = [
        OptimizationLogEntry(
            material_type_id=log.material_type_id,
            piece_ids=tuple(log.piece_ids),
            summary=PlanSummary.from_metadata(log.summary.model_dump()),
            report=log.report,
        )
        for log in request.optimization_logs
    ]
    command = factory.create_commit_confirmations_command(
        store, stop_on_conflict=request.stop_on_conflict
    )
    result = command.execute(
        [_to_confirmation(c) for c in request.confirmations], log_entries
    )
    report = result.report
    if report.conflicts:
        response.status_code = 409
    return CommitResponse(
        outcomes=[
            PieceOutcomeSchema(
                piece_id=o.piece_id, status=o.status.value, message=o.message
            )
            for o in report.outcomes
        ],
        committed=len(report.committed_piece_ids),
        conflicts=len(report.conflicts),
        needs_reoptimization=report.needs_reoptimization,
        logged_material_type_ids=result.logged_material_type_ids,
    )
