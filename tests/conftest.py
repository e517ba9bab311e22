"""Pytest configuration and shared fixtures for glasscut tests."""

from __future__ import annotations

import shutil
from pathlib import Path
from typing import Callable

import pytest

from glasscut.domain import CutRequest, OptimizerSettings, StockRemnant, StockSheet
from glasscut.domain.services import CuttingOptimizer

MATERIAL = "float-4mm"
FIXTURES_DIR = Path(__file__).parent / "fixtures"


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "slow: tests that take a long time to run")


# =============================================================================
# Domain object builders
# =============================================================================


@pytest.fixture
def make_request() -> Callable[..., CutRequest]:
    """Build cut requests of the default material with sequential ids."""
    counter = iter(range(1, 10_000))

    def _make(
        width: int,
        height: int,
        quantity: int = 1,
        material_type_id: str = MATERIAL,
        request_id: str | None = None,
        **kwargs: object,
    ) -> CutRequest:
        return CutRequest(
            id=request_id or f"cut-{next(counter)}",
            material_type_id=material_type_id,
            width_mm=width,
            height_mm=height,
            quantity=quantity,
            **kwargs,
        )

    return _make


@pytest.fixture
def standard_sheet() -> StockSheet:
    """Jumbo float glass sheet, five in stock."""
    return StockSheet(
        id="sheet-jumbo",
        material_type_id=MATERIAL,
        width_mm=2400,
        height_mm=3210,
        quantity=5,
    )


@pytest.fixture
def small_remnant() -> StockRemnant:
    return StockRemnant(
        id="rem-1",
        material_type_id=MATERIAL,
        width_mm=1200,
        height_mm=800,
        quantity=1,
        location="Rack A",
    )


# =============================================================================
# Services
# =============================================================================


@pytest.fixture
def settings() -> OptimizerSettings:
    return OptimizerSettings()


@pytest.fixture
def optimizer(settings: OptimizerSettings) -> CuttingOptimizer:
    return CuttingOptimizer(settings)


# =============================================================================
# Inventory files
# =============================================================================


@pytest.fixture
def shop_inventory(tmp_path: Path) -> Path:
    """Writable copy of the sample shop inventory file."""
    target = tmp_path / "shop.json"
    shutil.copy(FIXTURES_DIR / "inventory" / "shop.json", target)
    return target
