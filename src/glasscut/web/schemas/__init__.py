"""Pydantic schemas for the REST API."""

from glasscut.web.schemas.common import OptimizationLogDraftSchema, PlanSummarySchema
from glasscut.web.schemas.requests import (
    CommitRequest,
    CutConfirmationSchema,
    NewRemnantSchema,
    OptimizeRequest,
    StoredOptimizeRequest,
    WasteOverrideSchema,
)
from glasscut.web.schemas.responses import (
    CommitResponse,
    ErrorResponseSchema,
    ExcludedCutSchema,
    HistoryResponse,
    OptimizationRecordSchema,
    PieceOutcomeSchema,
    PieceSchema,
    PlacementSchema,
    PlanResponse,
    WasteRegionSchema,
)

__all__ = [
    # Common
    "OptimizationLogDraftSchema",
    "PlanSummarySchema",
    # Requests
    "CommitRequest",
    "CutConfirmationSchema",
    "NewRemnantSchema",
    "OptimizeRequest",
    "StoredOptimizeRequest",
    "WasteOverrideSchema",
    # Responses
    "CommitResponse",
    "ErrorResponseSchema",
    "ExcludedCutSchema",
    "HistoryResponse",
    "OptimizationRecordSchema",
    "PieceOutcomeSchema",
    "PieceSchema",
    "PlacementSchema",
    "PlanResponse",
    "WasteRegionSchema",
]
