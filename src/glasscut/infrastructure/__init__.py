"""Infrastructure layer - inventory stores, formatters and diagrams."""

from .cut_diagram_renderer import CutDiagramRenderer
from .formatters import PlanFormatter, PlanJsonExporter
from .inventory_store import InMemoryInventoryStore, JsonInventoryStore

__all__ = [
    "CutDiagramRenderer",
    "InMemoryInventoryStore",
    "JsonInventoryStore",
    "PlanFormatter",
    "PlanJsonExporter",
]
