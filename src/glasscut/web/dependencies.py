"""FastAPI dependency injection for glasscut services."""

import os
from functools import lru_cache
from pathlib import Path
from typing import Annotated

from fastapi import Depends

from glasscut.application.factory import ServiceFactory, get_factory
from glasscut.contracts import InventoryStoreProtocol
from glasscut.infrastructure import InMemoryInventoryStore, JsonInventoryStore

# Path of the inventory JSON file served by the API
INVENTORY_ENV_VAR = "GLASSCUT_INVENTORY"


@lru_cache(maxsize=1)
def get_service_factory() -> ServiceFactory:
    """Get cached ServiceFactory instance."""
    return get_factory()


@lru_cache(maxsize=1)
def get_inventory_store() -> InventoryStoreProtocol:
    """Get the inventory store selected by the environment.

    A JSON inventory file when ``GLASSCUT_INVENTORY`` is set, otherwise an
    empty in-memory store.
    """
    path = os.environ.get(INVENTORY_ENV_VAR)
    if path:
        return JsonInventoryStore(Path(path))
    return InMemoryInventoryStore()


# Type aliases for cleaner endpoint signatures
ServiceFactoryDep = Annotated[ServiceFactory, Depends(get_service_factory)]
InventoryStoreDep = Annotated[InventoryStoreProtocol, Depends(get_inventory_store)]
