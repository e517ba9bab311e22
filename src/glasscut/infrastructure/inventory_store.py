"""Inventory store implementations.

``InMemoryInventoryStore`` keeps cut requests and stock in process memory
and is used by tests and as the default REST store. ``JsonInventoryStore``
applies the same transactions to an inventory JSON file, rewriting it
atomically after each change.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
import uuid
from dataclasses import replace
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterable

from glasscut.application.config import (
    ConfigError,
    InventoryFile,
    domain_to_inventory,
    inventory_to_cut_requests,
    inventory_to_snapshot,
    load_inventory,
)
from glasscut.domain import (
    CommitConflictError,
    CutRequest,
    CutStatus,
    InventoryStoreError,
    MaterialType,
    OptimizationLog,
    PieceOrigin,
    PlanSummary,
    StockRemnant,
    StockSheet,
    StockSnapshot,
)
from glasscut.domain.services import CutConfirmation

logger = logging.getLogger(__name__)


def _wanted(material_type_ids: Iterable[str] | None) -> set[str] | None:
    return None if material_type_ids is None else set(material_type_ids)


class InMemoryInventoryStore:
    """Thread-safe inventory held in memory.

    Each confirmation is checked and applied under one lock, so two
    commits racing for the last unit of a stock record cannot both
    succeed: the loser gets a ``CommitConflictError``.
    """

    def __init__(
        self,
        cut_requests: Iterable[CutRequest] = (),
        sheets: Iterable[StockSheet] = (),
        remnants: Iterable[StockRemnant] = (),
        material_types: Iterable[MaterialType] = (),
        optimization_logs: Iterable[dict[str, Any]] = (),
    ) -> None:
        self._lock = threading.Lock()
        self._requests = {r.id: r for r in cut_requests}
        self._sheets = {s.id: s for s in sheets}
        self._remnants = {r.id: r for r in remnants}
        self._material_types = list(material_types)
        self._logs = [dict(log) for log in optimization_logs]

    @classmethod
    def from_inventory(cls, inventory: InventoryFile) -> InMemoryInventoryStore:
        """Create a store holding the contents of an inventory document."""
        snapshot = inventory_to_snapshot(inventory)
        return cls(
            cut_requests=inventory_to_cut_requests(inventory, pending_only=False),
            sheets=snapshot.sheets,
            remnants=snapshot.remnants,
            material_types=snapshot.material_types,
            optimization_logs=[log.model_dump() for log in inventory.optimization_logs],
        )

    def to_inventory(self) -> InventoryFile:
        """Export the full store contents as an inventory document."""
        with self._lock:
            return domain_to_inventory(
                self._requests.values(), self._snapshot_unlocked(None), self._logs
            )

    @property
    def optimization_logs(self) -> list[dict[str, Any]]:
        with self._lock:
            return [dict(log) for log in self._logs]

    def get_cut_request(self, request_id: str) -> CutRequest | None:
        with self._lock:
            return self._requests.get(request_id)

    def list_pending_cuts(
        self, material_type_ids: Iterable[str] | None = None
    ) -> list[CutRequest]:
        wanted = _wanted(material_type_ids)
        with self._lock:
            return [
                r
                for r in self._requests.values()
                if r.is_pending and (wanted is None or r.material_type_id in wanted)
            ]

    def snapshot(
        self, material_type_ids: Iterable[str] | None = None
    ) -> StockSnapshot:
        with self._lock:
            return self._snapshot_unlocked(_wanted(material_type_ids))

    def _snapshot_unlocked(self, wanted: set[str] | None) -> StockSnapshot:
        def keep(material_type_id: str) -> bool:
            return wanted is None or material_type_id in wanted

        return StockSnapshot(
            sheets=tuple(s for s in self._sheets.values() if keep(s.material_type_id)),
            remnants=tuple(
                r for r in self._remnants.values() if keep(r.material_type_id)
            ),
            material_types=tuple(m for m in self._material_types if keep(m.id)),
        )

    def apply_cut_confirmation(self, confirmation: CutConfirmation) -> None:
        """Apply one piece's inventory transaction atomically.

        The consumed stock record is re-read inside the lock; remnants
        whose quantity reaches zero are removed, sheet records stay at
        zero. Saved waste becomes new remnant records and every listed
        cut request is marked as cut.

        Raises:
            CommitConflictError: If the source stock unit is missing or
                has no units left.
            InventoryStoreError: If the confirmation names an unknown cut
                request or a stock record of another material type.
        """
        with self._lock:
            stock: dict[str, Any] = (
                self._sheets
                if confirmation.source_kind == PieceOrigin.SHEET
                else self._remnants
            )
            source = stock.get(confirmation.source_id)
            if source is None or source.quantity < 1:
                raise CommitConflictError(
                    confirmation.source_id, source.quantity if source else 0
                )
            if source.material_type_id != confirmation.material_type_id:
                raise InventoryStoreError(
                    f"Stock unit {confirmation.source_id!r} is material "
                    f"{source.material_type_id!r}, not "
                    f"{confirmation.material_type_id!r}"
                )
            unknown = [
                rid for rid in confirmation.cut_request_ids if rid not in self._requests
            ]
            if unknown:
                raise InventoryStoreError(
                    f"Unknown cut requests: {', '.join(unknown)}"
                )

            # All checks passed; nothing below can fail.
            remaining = source.quantity - 1
            if confirmation.source_kind == PieceOrigin.REMNANT and remaining == 0:
                del stock[source.id]
            else:
                stock[source.id] = replace(source, quantity=remaining)

            for new in confirmation.new_remnants:
                remnant = StockRemnant(
                    id=f"rem-{uuid.uuid4().hex[:12]}",
                    material_type_id=confirmation.material_type_id,
                    width_mm=new.width_mm,
                    height_mm=new.height_mm,
                    quantity=new.quantity,
                    location=new.location,
                )
                self._remnants[remnant.id] = remnant

            for request_id in confirmation.cut_request_ids:
                self._requests[request_id] = replace(
                    self._requests[request_id], status=CutStatus.CUT
                )

        logger.debug(
            "Applied confirmation for piece %s: %s %s now %d, %d remnants added",
            confirmation.piece_id,
            confirmation.source_kind.value,
            confirmation.source_id,
            remaining,
            len(confirmation.new_remnants),
        )

    def record_optimization(
        self,
        material_type_id: str,
        summary: PlanSummary,
        report: str | None = None,
    ) -> None:
        with self._lock:
            self._logs.append(
                {
                    "material_type_id": material_type_id,
                    "created_at": datetime.now(timezone.utc).isoformat(),
                    "metadata": summary.as_metadata(),
                    "report": report,
                }
            )

    def list_optimization_logs(
        self, material_type_ids: Iterable[str] | None = None
    ) -> list[OptimizationLog]:
        """Return logs newest first."""
        wanted = _wanted(material_type_ids)
        # Reversed before the stable sort so equal timestamps stay newest first
        with self._lock:
            logs = [
                OptimizationLog(
                    material_type_id=log["material_type_id"],
                    created_at=log["created_at"],
                    metadata=dict(log.get("metadata") or {}),
                    report=log.get("report"),
                )
                for log in reversed(self._logs)
                if wanted is None or log["material_type_id"] in wanted
            ]
        return sorted(logs, key=lambda log: log.created_at, reverse=True)


class JsonInventoryStore:
    """Inventory store backed by an inventory JSON file.

    Every operation reloads the file, so edits made by other tools between
    an optimization and its commit are seen by the commit's re-check.
    Writes go to a temporary file in the same directory that then replaces
    the original.

    Attributes:
        path: Location of the inventory file.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()

    def _load(self) -> InMemoryInventoryStore:
        try:
            inventory = load_inventory(self.path)
        except ConfigError as e:
            raise InventoryStoreError(str(e)) from e
        return InMemoryInventoryStore.from_inventory(inventory)

    def _save(self, store: InMemoryInventoryStore) -> None:
        data = store.to_inventory().model_dump(mode="json")
        tmp_name: str | None = None
        try:
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self.path.parent,
                prefix=f".{self.path.name}.",
                suffix=".tmp",
                delete=False,
            ) as tmp:
                tmp_name = tmp.name
                json.dump(data, tmp, indent=2)
                tmp.write("\n")
            os.replace(tmp_name, self.path)
        except OSError as e:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise InventoryStoreError(
                f"Error writing inventory file: {self.path}: {e}"
            ) from e

    def list_pending_cuts(
        self, material_type_ids: Iterable[str] | None = None
    ) -> list[CutRequest]:
        with self._lock:
            return self._load().list_pending_cuts(material_type_ids)

    def snapshot(
        self, material_type_ids: Iterable[str] | None = None
    ) -> StockSnapshot:
        with self._lock:
            return self._load().snapshot(material_type_ids)

    def apply_cut_confirmation(self, confirmation: CutConfirmation) -> None:
        """Apply one piece's transaction and rewrite the file.

        Raises:
            CommitConflictError: If the source stock unit is no longer
                available in the file.
            InventoryStoreError: If the file cannot be read or written.
        """
        with self._lock:
            store = self._load()
            store.apply_cut_confirmation(confirmation)
            self._save(store)

    def record_optimization(
        self,
        material_type_id: str,
        summary: PlanSummary,
        report: str | None = None,
    ) -> None:
        with self._lock:
            store = self._load()
            store.record_optimization(material_type_id, summary, report)
            self._save(store)

    def list_optimization_logs(
        self, material_type_ids: Iterable[str] | None = None
    ) -> list[OptimizationLog]:
        with self._lock:
            return self._load().list_optimization_logs(material_type_ids)
