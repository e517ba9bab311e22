"""Contracts module - protocols for cross-layer communication."""

from .protocols import (
    InventoryStoreProtocol as InventoryStoreProtocol,
    OptimizerProtocol as OptimizerProtocol,
)

__all__ = [
    "InventoryStoreProtocol",
    "OptimizerProtocol",
]
