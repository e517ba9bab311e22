"""Error handlers for the REST API."""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from glasscut.application.config import ConfigError
from glasscut.domain import (
    CommitConflictError,
    CommitError,
    InventoryStoreError,
    StaleWasteRegionError,
)


def register_exception_handlers(app: FastAPI) -> None:
    """Register custom exception handlers with the FastAPI app."""

    @app.exception_handler(ConfigError)
    async def config_error_handler(request: Request, exc: ConfigError) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={
                "error": exc.message,
                "error_type": exc.error_type,
                "details": exc.details or None,
            },
        )

    @app.exception_handler(StaleWasteRegionError)
    async def stale_region_handler(
        request: Request, exc: StaleWasteRegionError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={
                "error": str(exc),
                "error_type": "unknown_waste_region",
                "details": {"region_id": exc.region_id},
            },
        )

    @app.exception_handler(CommitConflictError)
    async def commit_conflict_handler(
        request: Request, exc: CommitConflictError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=409,
            content={
                "error": str(exc),
                "error_type": "conflict",
                "details": {"source_id": exc.source_id, "available": exc.available},
            },
        )

    @app.exception_handler(CommitError)
    async def commit_error_handler(request: Request, exc: CommitError) -> JSONResponse:
        return JSONResponse(
            status_code=503,
            content={
                "error": exc.message,
                "error_type": "commit_aborted",
                "details": {
                    "committed_piece_ids": list(exc.report.committed_piece_ids),
                },
            },
        )

    @app.exception_handler(InventoryStoreError)
    async def store_error_handler(
        request: Request, exc: InventoryStoreError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=503,
            content={
                "error": str(exc),
                "error_type": "inventory_store",
                "details": None,
            },
        )
