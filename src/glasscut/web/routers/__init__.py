"""API routers for the REST API."""

from glasscut.web.routers.commit import router as commit_router
from glasscut.web.routers.history import router as history_router
from glasscut.web.routers.optimize import router as optimize_router

__all__ = [
    "commit_router",
    "history_router",
    "optimize_router",
]
