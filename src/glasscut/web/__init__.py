"""FastAPI REST API for glass cutting optimization.

This module provides a REST API for planning cuts against a stock
snapshot and committing accepted plans to the inventory store.

Usage:
    uvicorn glasscut.web:app --reload
"""

from glasscut.web.app import app, create_app

__all__ = ["app", "create_app"]
