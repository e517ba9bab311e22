"""Configuration loading, validation and adaptation."""

from .adapter import (
    config_to_settings,
    cut_request_from_schema,
    domain_to_inventory,
    inventory_to_cut_requests,
    inventory_to_snapshot,
    material_type_from_schema,
    remnant_from_schema,
    sheet_from_schema,
)
from .inventory_schema import (
    CutRequestSchema,
    InventoryFile,
    MaterialTypeSchema,
    OptimizationLogSchema,
    StockRemnantSchema,
    StockSheetSchema,
)
from .loader import (
    ConfigError,
    load_config,
    load_config_from_dict,
    load_inventory,
    load_inventory_from_dict,
)
from .schema import (
    SUPPORTED_VERSIONS,
    AllocationConfigSchema,
    OptimizerConfiguration,
    WasteConfigSchema,
)

__all__ = [
    "AllocationConfigSchema",
    "ConfigError",
    "CutRequestSchema",
    "InventoryFile",
    "MaterialTypeSchema",
    "OptimizationLogSchema",
    "OptimizerConfiguration",
    "SUPPORTED_VERSIONS",
    "StockRemnantSchema",
    "StockSheetSchema",
    "WasteConfigSchema",
    "config_to_settings",
    "cut_request_from_schema",
    "domain_to_inventory",
    "inventory_to_cut_requests",
    "inventory_to_snapshot",
    "load_config",
    "load_config_from_dict",
    "load_inventory",
    "load_inventory_from_dict",
    "material_type_from_schema",
    "remnant_from_schema",
    "sheet_from_schema",
]
