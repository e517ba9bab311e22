"""Unit tests for the remnant and sheet allocation passes."""

from __future__ import annotations

import pytest

from glasscut.domain import (
    AreaOrder,
    CutInstance,
    CutRequest,
    ExclusionReason,
    OptimizerSettings,
    PieceOrigin,
    StockRemnant,
    StockSheet,
)
from glasscut.domain.services import StockAllocator, order_by_area

MATERIAL = "float-4mm"


def _instances(*sizes: tuple[int, int], quantity: int = 1) -> list[CutInstance]:
    result = []
    for n, (w, h) in enumerate(sizes, start=1):
        request = CutRequest(
            id=f"c{n}",
            material_type_id=MATERIAL,
            width_mm=w,
            height_mm=h,
            quantity=quantity,
        )
        result.extend(CutInstance(request, i) for i in range(1, quantity + 1))
    return result


def _sheet(sheet_id: str, w: int, h: int, quantity: int = 1) -> StockSheet:
    return StockSheet(sheet_id, MATERIAL, w, h, quantity)


def _remnant(remnant_id: str, w: int, h: int, quantity: int = 1) -> StockRemnant:
    return StockRemnant(remnant_id, MATERIAL, w, h, quantity, location="Rack A")


@pytest.fixture
def allocator() -> StockAllocator:
    return StockAllocator(OptimizerSettings())


class TestOrderByArea:
    """Tests for order_by_area."""

    def test_ascending_and_descending(self) -> None:
        stock = [_sheet("mid", 20, 20), _sheet("big", 30, 30), _sheet("small", 10, 10)]

        ascending = order_by_area(stock, AreaOrder.ASCENDING)
        descending = order_by_area(stock, AreaOrder.DESCENDING)

        assert [s.id for s in ascending] == ["small", "mid", "big"]
        assert [s.id for s in descending] == ["big", "mid", "small"]

    def test_equal_areas_keep_input_order(self) -> None:
        stock = [_sheet("a", 10, 40), _sheet("b", 20, 20), _sheet("c", 40, 10)]
        assert [s.id for s in order_by_area(stock, AreaOrder.DESCENDING)] == [
            "a",
            "b",
            "c",
        ]


class TestRemnantPass:
    """Tests for remnant consumption."""

    def test_smallest_remnant_is_used_first(self, allocator: StockAllocator) -> None:
        remnants = [_remnant("rem-big", 1500, 1000), _remnant("rem-small", 1200, 800)]

        result = allocator.allocate(
            MATERIAL, _instances((1000, 500)), [_sheet("s", 2400, 3210)], remnants
        )

        assert len(result.pieces) == 1
        piece = result.pieces[0]
        assert piece.origin == PieceOrigin.REMNANT
        assert piece.source_id == "rem-small"
        assert piece.location == "Rack A"

    def test_descending_remnant_order_is_configurable(self) -> None:
        allocator = StockAllocator(
            OptimizerSettings(remnant_order=AreaOrder.DESCENDING)
        )
        remnants = [_remnant("rem-small", 1200, 800), _remnant("rem-big", 1500, 1000)]

        result = allocator.allocate(MATERIAL, _instances((1000, 500)), [], remnants)

        assert result.pieces[0].source_id == "rem-big"

    def test_remnant_quantity_yields_several_pieces(
        self, allocator: StockAllocator
    ) -> None:
        result = allocator.allocate(
            MATERIAL,
            _instances((1000, 500), quantity=3),
            [_sheet("s", 2400, 3210)],
            [_remnant("rem-1", 1000, 500, quantity=2)],
        )

        origins = [(p.origin, p.source_id) for p in result.pieces]
        assert origins == [
            (PieceOrigin.REMNANT, "rem-1"),
            (PieceOrigin.REMNANT, "rem-1"),
            (PieceOrigin.SHEET, "s"),
        ]
        assert result.excluded == ()

    def test_remnant_too_small_is_skipped(self, allocator: StockAllocator) -> None:
        result = allocator.allocate(
            MATERIAL,
            _instances((500, 500)),
            [_sheet("s", 1000, 1000)],
            [_remnant("rem-tiny", 300, 300)],
        )

        assert [p.source_id for p in result.pieces] == ["s"]

    def test_stock_is_not_mutated(self, allocator: StockAllocator) -> None:
        sheet = _sheet("s", 1000, 1000, quantity=2)
        remnant = _remnant("rem-1", 1000, 1000)

        allocator.allocate(
            MATERIAL, _instances((1000, 1000), quantity=3), [sheet], [remnant]
        )

        assert sheet.quantity == 2
        assert remnant.quantity == 1


class TestSheetPass:
    """Tests for sheet consumption and exclusions."""

    def test_largest_sheet_is_preferred(self, allocator: StockAllocator) -> None:
        sheets = [_sheet("small", 1000, 1000), _sheet("big", 2400, 3210)]

        result = allocator.allocate(MATERIAL, _instances((500, 500)), sheets, [])

        assert result.pieces[0].source_id == "big"

    def test_ascending_sheet_order_is_configurable(self) -> None:
        allocator = StockAllocator(OptimizerSettings(sheet_order=AreaOrder.ASCENDING))
        sheets = [_sheet("big", 2400, 3210), _sheet("small", 1000, 1000)]

        result = allocator.allocate(MATERIAL, _instances((500, 500)), sheets, [])

        assert result.pieces[0].source_id == "small"

    def test_sheet_that_cannot_hold_head_cut_is_skipped(
        self, allocator: StockAllocator
    ) -> None:
        sheets = [_sheet("big-but-short", 3000, 400), _sheet("tall", 1000, 1000)]

        result = allocator.allocate(MATERIAL, _instances((600, 600)), sheets, [])

        assert result.pieces[0].source_id == "tall"

    def test_exhausted_stock_excludes_all_pending(
        self, allocator: StockAllocator
    ) -> None:
        result = allocator.allocate(
            MATERIAL,
            _instances((1000, 1000), quantity=3),
            [_sheet("s", 1000, 1000, quantity=1)],
            [],
        )

        assert len(result.pieces) == 1
        assert [(e.instance.label, e.reason) for e in result.excluded] == [
            ("c1#2", ExclusionReason.STOCK_EXHAUSTED),
            ("c1#3", ExclusionReason.STOCK_EXHAUSTED),
        ]

    def test_no_sheets_excludes_cuts_left_after_remnants(
        self, allocator: StockAllocator
    ) -> None:
        result = allocator.allocate(
            MATERIAL,
            _instances((1000, 500), quantity=2),
            [],
            [_remnant("rem-1", 1000, 500)],
        )

        assert len(result.pieces) == 1
        assert [e.reason for e in result.excluded] == [
            ExclusionReason.STOCK_EXHAUSTED
        ]

    def test_packing_stall_excludes_blocking_cut(
        self, allocator: StockAllocator
    ) -> None:
        """A cut that fits only rotated stalls the packer and is excluded."""
        result = allocator.allocate(
            MATERIAL,
            _instances((1500, 800), (500, 500)),
            [_sheet("s", 1000, 2000, quantity=5)],
            [],
        )

        assert len(result.pieces) == 1
        assert [p.instance.request_id for p in result.pieces[0].placements] == ["c2"]
        assert [(e.instance.request_id, e.reason) for e in result.excluded] == [
            ("c1", ExclusionReason.PACKING_STALL)
        ]

    def test_every_instance_is_placed_or_excluded(
        self, allocator: StockAllocator
    ) -> None:
        instances = _instances((900, 700), (800, 600), (1200, 300), quantity=4)

        result = allocator.allocate(
            MATERIAL,
            instances,
            [_sheet("s", 2000, 1500, quantity=2)],
            [_remnant("rem-1", 1000, 800)],
        )

        placed = [p.instance for piece in result.pieces for p in piece.placements]
        excluded = [e.instance for e in result.excluded]
        assert sorted(i.label for i in placed + excluded) == sorted(
            i.label for i in instances
        )
        sheet_pieces = [p for p in result.pieces if p.origin == PieceOrigin.SHEET]
        assert len(sheet_pieces) <= 2

    def test_piece_and_region_ids_are_sequential(
        self, allocator: StockAllocator
    ) -> None:
        result = allocator.allocate(
            MATERIAL,
            _instances((1000, 500), quantity=2),
            [_sheet("s", 1000, 1000, quantity=2)],
            [_remnant("rem-1", 1000, 600)],
        )

        assert [p.id for p in result.pieces] == ["P1", "P2"]
        region_ids = [w.id for p in result.pieces for w in p.waste]
        assert region_ids == [f"W{n}" for n in range(1, len(region_ids) + 1)]
