"""Unit tests for plan entities and the waste review surface."""

from __future__ import annotations

import pytest

from glasscut.domain import (
    CutInstance,
    CutRequest,
    ExcludedCut,
    ExclusionReason,
    Piece,
    PieceOrigin,
    PlacedCut,
    Plan,
    PlanSummary,
    StaleWasteRegionError,
    WasteClassification,
    WasteEdge,
    WasteRegion,
)


def _request(request_id: str, w: int = 1000, h: int = 500, qty: int = 1) -> CutRequest:
    return CutRequest(
        id=request_id,
        material_type_id="float-4mm",
        width_mm=w,
        height_mm=h,
        quantity=qty,
    )


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def plan() -> Plan:
    """Two pieces from different stock and one excluded unit."""
    a = _request("cut-a", qty=3)
    b = _request("cut-b", 400, 400)
    c = CutRequest("cut-c", "bronze-6mm", 500, 400)
    sheet_piece = Piece(
        id="P1",
        origin=PieceOrigin.SHEET,
        source_id="sheet-jumbo",
        material_type_id="float-4mm",
        width=2400,
        height=3210,
        placements=[
            PlacedCut(CutInstance(a, 1), 0, 0),
            PlacedCut(CutInstance(a, 2), 1000, 0),
            PlacedCut(CutInstance(b, 1), 2000, 0),
        ],
        waste=[
            WasteRegion("W1", 2000, 400, 400, 100, WasteEdge.TOP),
            WasteRegion("W2", 0, 500, 2400, 2710, WasteEdge.BOTTOM, saved=True),
        ],
    )
    remnant_piece = Piece(
        id="P2",
        origin=PieceOrigin.REMNANT,
        source_id="rem-1",
        material_type_id="bronze-6mm",
        width=500,
        height=500,
        placements=[PlacedCut(CutInstance(c, 1), 0, 0)],
        waste=[WasteRegion("W3", 0, 400, 500, 100, WasteEdge.BOTTOM, saved=True)],
        location="Rack A",
    )
    return Plan(
        pieces=[sheet_piece, remnant_piece],
        excluded=[ExcludedCut(CutInstance(a, 3), ExclusionReason.STOCK_EXHAUSTED)],
        dropped_request_ids=("cut-bad",),
    )


class TestWasteRegion:
    """Tests for WasteRegion."""

    def test_classification_follows_saved_flag(self) -> None:
        region = WasteRegion("W1", 0, 0, 100, 100, WasteEdge.RIGHT)
        assert region.classification == WasteClassification.SCRAP

        region.toggle()
        assert region.classification == WasteClassification.REUSABLE_REMNANT
        assert region.area == 10_000

    def test_rejects_empty_region(self) -> None:
        with pytest.raises(ValueError, match="positive"):
            WasteRegion("W1", 0, 0, 0, 100, WasteEdge.RIGHT)


class TestPiece:
    """Tests for Piece accounting."""

    def test_areas_and_efficiency(self, plan: Plan) -> None:
        piece = plan.pieces[0]
        assert piece.used_area == 2 * 500_000 + 160_000
        assert piece.waste_area == piece.area - piece.used_area
        assert piece.efficiency == pytest.approx(1_160_000 / 7_704_000 * 100)
        assert piece.cut_count == 3
        assert piece.dimensions_label == "2400x3210"

    def test_cut_request_ids_are_distinct_in_order(self, plan: Plan) -> None:
        assert plan.pieces[0].cut_request_ids == ("cut-a", "cut-b")

    def test_saved_remnants(self, plan: Plan) -> None:
        assert [w.id for w in plan.pieces[0].saved_remnants] == ["W2"]


class TestPlanReview:
    """Tests for toggling waste regions before commit."""

    def test_set_saved_discards_region(self, plan: Plan) -> None:
        region = plan.set_saved("W2", False)

        assert region.classification == WasteClassification.SCRAP
        assert plan.pieces[0].saved_remnants == []

    def test_set_saved_keeps_region_with_location(self, plan: Plan) -> None:
        plan.set_saved("W1", True, "Rack C")

        region = plan.waste_region("W1")
        assert region.saved
        assert region.location == "Rack C"

    def test_location_is_kept_when_not_given(self, plan: Plan) -> None:
        plan.set_saved("W1", True, "Rack C")
        plan.set_saved("W1", True)
        assert plan.waste_region("W1").location == "Rack C"

    def test_unknown_region_is_rejected(self, plan: Plan) -> None:
        with pytest.raises(StaleWasteRegionError, match="W99") as exc_info:
            plan.set_saved("W99", True)
        assert exc_info.value.region_id == "W99"

    def test_geometry_is_unchanged_by_review(self, plan: Plan) -> None:
        plan.set_saved("W2", False)
        region = plan.waste_region("W2")
        assert (region.x, region.y, region.width, region.height) == (0, 500, 2400, 2710)


class TestPlan:
    """Tests for Plan aggregates."""

    def test_summary(self, plan: Plan) -> None:
        summary = plan.summary()

        assert summary.total_pieces == 2
        assert summary.sheets_used == 1
        assert summary.remnants_used == 1
        assert summary.total_cuts == 4
        assert summary.excluded_cuts == 1
        assert summary.total_area == 7_704_000 + 250_000
        assert summary.used_area == 1_160_000 + 200_000
        assert summary.waste_area == summary.total_area - summary.used_area
        assert summary.saved_remnants == 2

    def test_summary_metadata(self, plan: Plan) -> None:
        metadata = plan.summary().as_metadata()

        assert metadata["total_pieces"] == 2
        assert metadata["waste_area_mm2"] == 7_954_000 - 1_360_000
        assert metadata["efficiency"] == round(1_360_000 / 7_954_000 * 100, 2)

    def test_summary_from_metadata(self, plan: Plan) -> None:
        summary = plan.summary()
        metadata = {**summary.as_metadata(), "efficiency": 0.0}

        assert PlanSummary.from_metadata(metadata) == summary

    def test_empty_plan_summary(self) -> None:
        summary = Plan().summary()
        assert summary.efficiency == 0.0
        assert summary.total_area == 0
        assert Plan().is_empty

    def test_partially_placed_requests(self, plan: Plan) -> None:
        assert plan.partially_placed_request_ids == ("cut-a",)
        assert [i.label for i in plan.excluded_cuts] == ["cut-a#3"]

    def test_material_type_ids_in_first_seen_order(self, plan: Plan) -> None:
        assert plan.material_type_ids == ("float-4mm", "bronze-6mm")

    def test_for_material_shares_pieces(self, plan: Plan) -> None:
        bronze = plan.for_material("bronze-6mm")

        assert [p.id for p in bronze.pieces] == ["P2"]
        assert bronze.excluded == []
        assert bronze.pieces[0] is plan.pieces[1]

    def test_waste_regions_across_pieces(self, plan: Plan) -> None:
        assert [w.id for w in plan.waste_regions] == ["W1", "W2", "W3"]
