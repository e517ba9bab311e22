"""Unit tests for application commands and the service factory."""

from __future__ import annotations

from pathlib import Path

import pytest

from glasscut.application import (
    CommitConfirmationsCommand,
    CommitPlanCommand,
    OptimizationHistoryCommand,
    RunOptimizationCommand,
    ServiceFactory,
    build_log_entries,
    get_factory,
    reset_factory,
    set_factory,
)
from glasscut.application.config import load_inventory
from glasscut.domain import (
    AreaOrder,
    CutStatus,
    OptimizerSettings,
    PlanCommitter,
)
from glasscut.domain.services import build_confirmation
from glasscut.infrastructure import InMemoryInventoryStore, PlanFormatter

FIXTURES_PATH = Path(__file__).parent.parent / "fixtures" / "inventory"


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def store() -> InMemoryInventoryStore:
    """Store seeded with the sample shop inventory."""
    return InMemoryInventoryStore.from_inventory(
        load_inventory(FIXTURES_PATH / "shop.json")
    )


@pytest.fixture(autouse=True)
def clean_factory():
    yield
    reset_factory()


class TestRunOptimizationCommand:
    """Tests for RunOptimizationCommand."""

    def test_plans_all_pending_cuts(self, store: InMemoryInventoryStore) -> None:
        output = RunOptimizationCommand(store).execute()

        assert [r.id for r in output.requests] == ["cut-1", "cut-2", "cut-3"]
        assert [(p.id, p.source_id) for p in output.plan.pieces] == [
            ("P1", "rem-1"),
            ("P2", "sheet-float"),
            ("P3", "sheet-bronze"),
        ]
        assert output.plan.excluded == []
        assert output.material_name("float-4mm") == "FLT 4mm clear"
        assert output.material_name("unknown") == "unknown"

    def test_material_filter(self, store: InMemoryInventoryStore) -> None:
        output = RunOptimizationCommand(store).execute(material_type_ids=["bronze-6mm"])

        assert [r.id for r in output.requests] == ["cut-3"]
        assert [s.id for s in output.snapshot.sheets] == ["sheet-bronze"]
        assert output.plan.material_type_ids == ("bronze-6mm",)

    def test_request_filter(self, store: InMemoryInventoryStore) -> None:
        output = RunOptimizationCommand(store).execute(request_ids=["cut-2"])

        assert [r.id for r in output.requests] == ["cut-2"]
        assert len(output.plan.pieces) == 1
        assert output.plan.pieces[0].source_id == "rem-1"

    def test_nothing_pending(self) -> None:
        output = RunOptimizationCommand(InMemoryInventoryStore()).execute()
        assert output.plan.is_empty
        assert output.requests == []

    def test_does_not_write(self, store: InMemoryInventoryStore) -> None:
        RunOptimizationCommand(store).execute()

        assert len(store.list_pending_cuts()) == 3
        assert store.optimization_logs == []


class TestCommitPlanCommand:
    """Tests for CommitPlanCommand."""

    def test_commit_logs_each_material(self, store: InMemoryInventoryStore) -> None:
        plan = RunOptimizationCommand(store).execute().plan

        result = CommitPlanCommand(store).execute(plan)

        assert result.is_complete
        assert result.logged_material_type_ids == ["float-4mm", "bronze-6mm"]
        logs = store.optimization_logs
        assert [log["material_type_id"] for log in logs] == ["float-4mm", "bronze-6mm"]
        assert logs[0]["metadata"]["total_pieces"] == 2
        assert logs[1]["metadata"]["sheets_used"] == 1
        assert store.get_cut_request("cut-3").status == CutStatus.CUT

    def test_material_with_conflict_is_not_logged(
        self, store: InMemoryInventoryStore
    ) -> None:
        plan = RunOptimizationCommand(store).execute().plan
        stale = RunOptimizationCommand(store).execute(["bronze-6mm"]).plan
        CommitPlanCommand(store).execute(stale)

        result = CommitPlanCommand(store).execute(plan)

        assert not result.is_complete
        assert result.logged_material_type_ids == ["float-4mm"]
        assert [c.piece_id for c in result.report.conflicts] == ["P3"]

    def test_custom_committer(self, store: InMemoryInventoryStore) -> None:
        committer = PlanCommitter(store, OptimizerSettings(default_location="Dock"))
        plan = RunOptimizationCommand(store).execute(["bronze-6mm"]).plan

        CommitPlanCommand(store, committer).execute(plan)

        locations = {r.location for r in store.snapshot(["bronze-6mm"]).remnants}
        assert locations == {"Dock"}

    def test_report_kept_with_log(self, store: InMemoryInventoryStore) -> None:
        plan = RunOptimizationCommand(store).execute().plan
        formatter = PlanFormatter({"float-4mm": "FLT 4mm clear"})

        CommitPlanCommand(store, report_formatter=formatter).execute(plan)

        float_log, bronze_log = store.optimization_logs
        assert "P1: 1200x800 FLT 4mm clear" in float_log["report"]
        assert "P3" not in float_log["report"]
        assert "P3: 2000x1500 bronze-6mm" in bronze_log["report"]

    def test_without_formatter_no_report(self, store: InMemoryInventoryStore) -> None:
        plan = RunOptimizationCommand(store).execute().plan

        CommitPlanCommand(store).execute(plan)

        assert [log["report"] for log in store.optimization_logs] == [None, None]


class TestBuildLogEntries:
    """Tests for build_log_entries."""

    def test_one_entry_per_material(self, store: InMemoryInventoryStore) -> None:
        plan = RunOptimizationCommand(store).execute().plan

        entries = build_log_entries(plan)

        assert [(e.material_type_id, e.piece_ids) for e in entries] == [
            ("float-4mm", ("P1", "P2")),
            ("bronze-6mm", ("P3",)),
        ]
        assert entries[0].summary.total_cuts == 3
        assert entries[0].summary.remnants_used == 1
        assert entries[1].report is None

    def test_empty_plan(self) -> None:
        plan = RunOptimizationCommand(InMemoryInventoryStore()).execute().plan
        assert build_log_entries(plan) == []


class TestCommitConfirmationsCommand:
    """Tests for CommitConfirmationsCommand."""

    def test_logs_fully_committed_materials(
        self, store: InMemoryInventoryStore
    ) -> None:
        plan = RunOptimizationCommand(store).execute().plan
        confirmations = [build_confirmation(p) for p in plan.pieces]

        result = CommitConfirmationsCommand(store).execute(
            confirmations, build_log_entries(plan)
        )

        assert result.is_complete
        assert result.logged_material_type_ids == ["float-4mm", "bronze-6mm"]
        assert store.optimization_logs[0]["metadata"]["total_cuts"] == 3

    def test_partially_sent_material_not_logged(
        self, store: InMemoryInventoryStore
    ) -> None:
        plan = RunOptimizationCommand(store).execute().plan
        first_piece = build_confirmation(plan.pieces[0])

        result = CommitConfirmationsCommand(store).execute(
            [first_piece], build_log_entries(plan)
        )

        assert result.is_complete
        assert result.logged_material_type_ids == []
        assert store.optimization_logs == []

    def test_material_without_entry_not_logged(
        self, store: InMemoryInventoryStore
    ) -> None:
        plan = RunOptimizationCommand(store).execute().plan
        float_entry, _ = build_log_entries(plan)

        result = CommitConfirmationsCommand(store).execute(
            [build_confirmation(p) for p in plan.pieces], [float_entry]
        )

        assert result.logged_material_type_ids == ["float-4mm"]
        assert store.get_cut_request("cut-3").status == CutStatus.CUT


class TestOptimizationHistoryCommand:
    """Tests for OptimizationHistoryCommand."""

    @pytest.fixture
    def committed_store(
        self, store: InMemoryInventoryStore
    ) -> InMemoryInventoryStore:
        plan = RunOptimizationCommand(store).execute().plan
        CommitPlanCommand(store).execute(plan)
        return store

    def test_lists_newest_first(
        self, committed_store: InMemoryInventoryStore
    ) -> None:
        output = OptimizationHistoryCommand(committed_store).execute()

        assert [log.material_type_id for log in output.logs] == [
            "bronze-6mm",
            "float-4mm",
        ]
        assert output.material_name("bronze-6mm") == "BRZ 6mm bronze"

    def test_material_filter(self, committed_store: InMemoryInventoryStore) -> None:
        output = OptimizationHistoryCommand(committed_store).execute(["float-4mm"])

        (log,) = output.logs
        assert log.total_cuts == 3

    @pytest.mark.parametrize(
        "term, expected",
        [
            ("brz", ["bronze-6mm"]),
            ("FLT", ["float-4mm"]),
            ("3", ["float-4mm"]),
            ("6mm", ["bronze-6mm"]),
            ("laminated", []),
        ],
    )
    def test_search(
        self,
        committed_store: InMemoryInventoryStore,
        term: str,
        expected: list[str],
    ) -> None:
        output = OptimizationHistoryCommand(committed_store).execute(search=term)

        assert [log.material_type_id for log in output.logs] == expected

    def test_empty_history(self, store: InMemoryInventoryStore) -> None:
        assert OptimizationHistoryCommand(store).execute().logs == []


class TestServiceFactory:
    """Tests for ServiceFactory."""

    def test_optimizer_is_cached_and_uses_settings(self) -> None:
        settings = OptimizerSettings(sheet_order=AreaOrder.ASCENDING)
        factory = ServiceFactory(settings=settings)

        optimizer = factory.get_optimizer()

        assert optimizer is factory.get_optimizer()
        assert optimizer.settings is settings

    def test_commands_share_the_store(self, store: InMemoryInventoryStore) -> None:
        factory = ServiceFactory()

        run = factory.create_run_optimization_command(store)
        commit = factory.create_commit_command(store, stop_on_conflict=True)

        assert run.store is store
        assert commit.committer.store is store
        assert commit.committer.stop_on_conflict

    def test_commit_command_keeps_reports(self, store: InMemoryInventoryStore) -> None:
        factory = ServiceFactory()
        plan = factory.create_run_optimization_command(store).execute().plan

        factory.create_commit_command(
            store, material_names={"bronze-6mm": "BRZ 6mm bronze"}
        ).execute(plan)

        assert "BRZ 6mm bronze" in store.optimization_logs[1]["report"]

    def test_confirmation_and_history_commands(
        self, store: InMemoryInventoryStore
    ) -> None:
        factory = ServiceFactory()

        commit = factory.create_commit_confirmations_command(
            store, stop_on_conflict=True
        )
        history = factory.create_history_command(store)

        assert commit.committer.stop_on_conflict
        assert commit.store is store
        assert history.store is store

    def test_presentation_services(self) -> None:
        factory = ServiceFactory()
        names = {"float-4mm": "FLT 4mm"}

        assert factory.get_plan_formatter(names).material_names == names
        assert factory.get_cut_diagram_renderer(names).material_names == names
        assert factory.get_json_exporter() is not None

    def test_default_factory_can_be_replaced(self) -> None:
        custom = ServiceFactory(settings=OptimizerSettings(min_waste_mm=10))

        set_factory(custom)
        assert get_factory() is custom

        reset_factory()
        assert get_factory() is not custom
