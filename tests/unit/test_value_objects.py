"""Unit tests for glass cutting value objects."""

from __future__ import annotations

import pytest

from glasscut.domain import (
    CutInstance,
    CutRequest,
    CutStatus,
    MaterialType,
    OptimizerSettings,
    PlacedCut,
    StockRemnant,
    StockSheet,
    StockSnapshot,
)


@pytest.fixture
def request_1000x500() -> CutRequest:
    return CutRequest(
        id="cut-7", material_type_id="float-4mm", width_mm=1000, height_mm=500
    )


class TestCutRequest:
    """Tests for CutRequest."""

    def test_defaults(self, request_1000x500: CutRequest) -> None:
        assert request_1000x500.quantity == 1
        assert request_1000x500.status == CutStatus.PENDING
        assert request_1000x500.is_pending

    @pytest.mark.parametrize(
        "width,height,quantity",
        [(0, 500, 1), (1000, -1, 1), (1000, 500, 0), (1000, 500, -2)],
    )
    def test_malformed_requests_are_constructible(
        self, width: int, height: int, quantity: int
    ) -> None:
        """Malformed requests are data, not errors."""
        request = CutRequest(
            id="bad",
            material_type_id="float-4mm",
            width_mm=width,
            height_mm=height,
            quantity=quantity,
        )
        assert not request.is_well_formed

    def test_cut_request_is_not_pending(self) -> None:
        request = CutRequest(
            id="done",
            material_type_id="float-4mm",
            width_mm=10,
            height_mm=10,
            status=CutStatus.CUT,
        )
        assert not request.is_pending


class TestCutInstance:
    """Tests for CutInstance."""

    def test_delegates_to_request(self, request_1000x500: CutRequest) -> None:
        instance = CutInstance(request=request_1000x500, instance=2)
        assert instance.request_id == "cut-7"
        assert instance.material_type_id == "float-4mm"
        assert instance.width_mm == 1000
        assert instance.height_mm == 500
        assert instance.area == 500_000
        assert instance.label == "cut-7#2"

    def test_instance_numbers_start_at_one(
        self, request_1000x500: CutRequest
    ) -> None:
        with pytest.raises(ValueError, match="at least 1"):
            CutInstance(request=request_1000x500, instance=0)


class TestStock:
    """Tests for StockSheet and StockRemnant."""

    def test_sheet_accommodates_either_orientation(self) -> None:
        sheet = StockSheet(
            id="s", material_type_id="m", width_mm=1000, height_mm=2000, quantity=1
        )
        assert sheet.accommodates(900, 1900)
        assert sheet.accommodates(1900, 900)
        assert not sheet.accommodates(1100, 2100)
        assert sheet.area == 2_000_000

    def test_remnant_accommodates_either_orientation(self) -> None:
        remnant = StockRemnant(
            id="r", material_type_id="m", width_mm=300, height_mm=600
        )
        assert remnant.accommodates(600, 300)
        assert not remnant.accommodates(601, 300)

    def test_sheet_rejects_negative_quantity(self) -> None:
        with pytest.raises(ValueError, match="non-negative"):
            StockSheet(
                id="s", material_type_id="m", width_mm=10, height_mm=10, quantity=-1
            )

    def test_zero_quantity_is_allowed(self) -> None:
        sheet = StockSheet(
            id="s", material_type_id="m", width_mm=10, height_mm=10, quantity=0
        )
        assert sheet.quantity == 0

    def test_remnant_rejects_non_positive_dimensions(self) -> None:
        with pytest.raises(ValueError, match="positive"):
            StockRemnant(id="r", material_type_id="m", width_mm=0, height_mm=10)


class TestPlacedCut:
    """Tests for PlacedCut geometry."""

    def _placed(self, x: int, y: int, w: int = 100, h: int = 50) -> PlacedCut:
        request = CutRequest(id="c", material_type_id="m", width_mm=w, height_mm=h)
        return PlacedCut(instance=CutInstance(request, 1), x=x, y=y)

    def test_edges(self) -> None:
        cut = self._placed(10, 20)
        assert cut.right_edge == 110
        assert cut.bottom_edge == 70
        assert cut.area == 5000

    def test_adjacent_cuts_do_not_overlap(self) -> None:
        assert not self._placed(0, 0).overlaps(self._placed(100, 0))
        assert not self._placed(0, 0).overlaps(self._placed(0, 50))

    def test_intersecting_cuts_overlap(self) -> None:
        assert self._placed(0, 0).overlaps(self._placed(99, 49))

    def test_rejects_negative_position(self) -> None:
        with pytest.raises(ValueError):
            self._placed(-1, 0)


class TestStockSnapshot:
    """Tests for StockSnapshot lookups."""

    def test_filters_by_material_type(self) -> None:
        snapshot = StockSnapshot(
            sheets=(
                StockSheet("s1", "a", 10, 10, 1),
                StockSheet("s2", "b", 10, 10, 1),
            ),
            remnants=(StockRemnant("r1", "b", 5, 5),),
            material_types=(MaterialType(id="b", code="BRZ", thickness_mm=6),),
        )
        assert [s.id for s in snapshot.sheets_for("a")] == ["s1"]
        assert [r.id for r in snapshot.remnants_for("b")] == ["r1"]
        assert snapshot.remnants_for("a") == ()
        assert snapshot.material_type("b").display_name == "BRZ 6mm"
        assert snapshot.material_type("zzz") is None


class TestOptimizerSettings:
    """Tests for OptimizerSettings defaults and validation."""

    def test_defaults(self) -> None:
        settings = OptimizerSettings()
        assert settings.min_waste_mm == 5
        assert settings.shelf_tolerance_mm == 1
        assert settings.reusable_min_height_mm == 50
        assert settings.default_location == "Auto-Optimizer"

    def test_rejects_negative_threshold(self) -> None:
        with pytest.raises(ValueError):
            OptimizerSettings(min_waste_mm=-1)
