"""Unit tests for building confirmations and committing plans."""

from __future__ import annotations

import pytest

from glasscut.domain import (
    CommitError,
    CutRequest,
    CutStatus,
    CuttingOptimizer,
    InventoryStoreError,
    OptimizerSettings,
    PieceOrigin,
    Plan,
    PlanCommitter,
    StockRemnant,
    StockSheet,
)
from glasscut.domain.services import CommitStatus, CutConfirmation, build_confirmation
from glasscut.infrastructure import InMemoryInventoryStore

MATERIAL = "float-4mm"


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def store() -> InMemoryInventoryStore:
    return InMemoryInventoryStore(
        cut_requests=[
            CutRequest("cut-1", MATERIAL, 1000, 500, quantity=2),
            CutRequest("cut-2", MATERIAL, 1200, 800),
        ],
        sheets=[StockSheet("sheet-jumbo", MATERIAL, 2400, 3210, quantity=1)],
        remnants=[StockRemnant("rem-1", MATERIAL, 1200, 800, location="Rack A")],
    )


@pytest.fixture
def plan(store: InMemoryInventoryStore) -> Plan:
    return CuttingOptimizer().optimize(store.list_pending_cuts(), store.snapshot())


class _FailingStore(InMemoryInventoryStore):
    """Store whose writes fail after a number of successful applies."""

    def __init__(self, fail_after: int, **kwargs: object) -> None:
        super().__init__(**kwargs)
        self.fail_after = fail_after
        self.applied = 0

    def apply_cut_confirmation(self, confirmation: CutConfirmation) -> None:
        if self.applied >= self.fail_after:
            raise InventoryStoreError("disk full")
        super().apply_cut_confirmation(confirmation)
        self.applied += 1


class TestBuildConfirmation:
    """Tests for build_confirmation."""

    def test_saved_regions_become_new_remnants(self, plan: Plan) -> None:
        sheet_piece = plan.pieces[1]

        confirmation = build_confirmation(sheet_piece)

        assert confirmation.source_kind == PieceOrigin.SHEET
        assert confirmation.source_id == "sheet-jumbo"
        assert confirmation.cut_request_ids == ("cut-1",)
        assert [
            (r.width_mm, r.height_mm, r.location) for r in confirmation.new_remnants
        ] == [(2400, 2710, "Auto-Optimizer")]
        assert confirmation.piece_id == "P2"

    def test_reviewed_location_and_custom_default(self, plan: Plan) -> None:
        plan.set_saved("W1", True, "Rack B")
        settings = OptimizerSettings(default_location="Dock")

        confirmation = build_confirmation(plan.pieces[1], settings)

        assert [r.location for r in confirmation.new_remnants] == ["Rack B", "Dock"]

    def test_discarded_regions_are_not_inserted(self, plan: Plan) -> None:
        plan.set_saved("W2", False)
        assert build_confirmation(plan.pieces[1]).new_remnants == ()


class TestPlanCommitter:
    """Tests for PlanCommitter."""

    def test_commit_updates_inventory(
        self, store: InMemoryInventoryStore, plan: Plan
    ) -> None:
        report = PlanCommitter(store).commit(plan)

        assert report.committed_piece_ids == ("P1", "P2")
        assert report.is_complete
        assert not report.needs_reoptimization
        snapshot = store.snapshot()
        assert snapshot.sheets[0].quantity == 0
        assert [(r.width_mm, r.height_mm) for r in snapshot.remnants] == [(2400, 2710)]
        assert store.list_pending_cuts() == []
        assert store.get_cut_request("cut-1").status == CutStatus.CUT

    def test_second_commit_of_same_plan_conflicts(
        self, store: InMemoryInventoryStore, plan: Plan
    ) -> None:
        PlanCommitter(store).commit(plan)

        report = PlanCommitter(store).commit(plan)

        assert report.committed_piece_ids == ()
        assert [o.status for o in report.outcomes] == [
            CommitStatus.CONFLICT,
            CommitStatus.CONFLICT,
        ]
        assert report.needs_reoptimization
        assert "re-run the optimization" in report.conflicts[0].message

    def test_conflict_does_not_stop_later_pieces(
        self, store: InMemoryInventoryStore, plan: Plan
    ) -> None:
        PlanCommitter(store).commit_confirmations([build_confirmation(plan.pieces[0])])

        report = PlanCommitter(store).commit(plan)

        assert [(o.piece_id, o.status) for o in report.outcomes] == [
            ("P1", CommitStatus.CONFLICT),
            ("P2", CommitStatus.COMMITTED),
        ]

    def test_stop_on_conflict(self, store: InMemoryInventoryStore, plan: Plan) -> None:
        PlanCommitter(store).commit_confirmations([build_confirmation(plan.pieces[0])])

        report = PlanCommitter(store, stop_on_conflict=True).commit(plan)

        assert [o.piece_id for o in report.outcomes] == ["P1"]
        assert store.snapshot().sheets[0].quantity == 1

    def test_store_failure_aborts_with_partial_report(self, plan: Plan) -> None:
        store = _FailingStore(
            fail_after=1,
            cut_requests=[
                CutRequest("cut-1", MATERIAL, 1000, 500, quantity=2),
                CutRequest("cut-2", MATERIAL, 1200, 800),
            ],
            sheets=[StockSheet("sheet-jumbo", MATERIAL, 2400, 3210, quantity=1)],
            remnants=[StockRemnant("rem-1", MATERIAL, 1200, 800)],
        )

        with pytest.raises(CommitError, match="P2") as exc_info:
            PlanCommitter(store).commit(plan)

        assert exc_info.value.report.committed_piece_ids == ("P1",)
        assert store.get_cut_request("cut-2").status == CutStatus.CUT
        assert store.get_cut_request("cut-1").status == CutStatus.PENDING

    def test_empty_plan_commits_nothing(self, store: InMemoryInventoryStore) -> None:
        report = PlanCommitter(store).commit(Plan())
        assert report.outcomes == ()
        assert report.is_complete
