"""Application layer - use cases and orchestration."""

from .commands import (
    CommitConfirmationsCommand,
    CommitPlanCommand,
    OptimizationHistoryCommand,
    RunOptimizationCommand,
    build_log_entries,
)
from .dtos import CommitOutput, HistoryOutput, OptimizationLogEntry, OptimizationOutput
from .factory import ServiceFactory, get_factory, reset_factory, set_factory

__all__ = [
    "CommitConfirmationsCommand",
    "CommitOutput",
    "CommitPlanCommand",
    "HistoryOutput",
    "OptimizationHistoryCommand",
    "OptimizationLogEntry",
    "OptimizationOutput",
    "RunOptimizationCommand",
    "ServiceFactory",
    "build_log_entries",
    "get_factory",
    "reset_factory",
    "set_factory",
]
