"""Commit of an accepted plan against persisted inventory.

Each piece is committed as one independent store transaction that
decrements the consumed stock unit, inserts the saved remnants and marks
the fulfilled cut requests as cut. A piece that fails does not roll back
the pieces committed before it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Iterable

from glasscut.domain.entities import Piece, Plan
from glasscut.domain.exceptions import (
    CommitConflictError,
    CommitError,
    InventoryStoreError,
)
from glasscut.domain.value_objects import OptimizerSettings, PieceOrigin

if TYPE_CHECKING:
    from glasscut.contracts.protocols import InventoryStoreProtocol

logger = logging.getLogger(__name__)


class CommitStatus(str, Enum):
    """Outcome of committing one piece."""

    COMMITTED = "committed"
    CONFLICT = "conflict"


@dataclass(frozen=True)
class NewRemnant:
    """A remnant to add to inventory."""

    width_mm: int
    height_mm: int
    location: str
    quantity: int = 1

    def __post_init__(self) -> None:
        if self.width_mm <= 0 or self.height_mm <= 0:
            raise ValueError("Remnant dimensions must be positive")
        if self.quantity < 1:
            raise ValueError("Quantity must be at least 1")


@dataclass(frozen=True)
class CutConfirmation:
    """Inventory transaction for one committed piece.

    Attributes:
        material_type_id: Glass type of the consumed stock unit.
        source_kind: Whether a sheet or a remnant was consumed.
        source_id: Identifier of the consumed sheet or remnant record.
        cut_request_ids: Distinct requests fulfilled by the piece.
        new_remnants: Saved waste regions to insert as remnants.
        piece_id: Plan piece the confirmation was built from.
    """

    material_type_id: str
    source_kind: PieceOrigin
    source_id: str
    cut_request_ids: tuple[str, ...]
    new_remnants: tuple[NewRemnant, ...] = ()
    piece_id: str | None = None


def build_confirmation(
    piece: Piece, settings: OptimizerSettings | None = None
) -> CutConfirmation:
    """Build the store transaction for a reviewed piece.

    Only waste regions still classified as reusable remnants become new
    remnants; regions without a location get the default location.
    """
    settings = settings or OptimizerSettings()
    new_remnants = tuple(
        NewRemnant(
            width_mm=region.width,
            height_mm=region.height,
            location=region.location or settings.default_location,
        )
        for region in piece.saved_remnants
    )
    return CutConfirmation(
        material_type_id=piece.material_type_id,
        source_kind=piece.origin,
        source_id=piece.source_id,
        cut_request_ids=piece.cut_request_ids,
        new_remnants=new_remnants,
        piece_id=piece.id,
    )


@dataclass(frozen=True)
class PieceCommitOutcome:
    """Result of committing a single piece."""

    piece_id: str | None
    status: CommitStatus
    message: str = ""


@dataclass(frozen=True)
class CommitReport:
    """Per-piece outcomes of a commit batch."""

    outcomes: tuple[PieceCommitOutcome, ...] = field(default_factory=tuple)

    @property
    def committed_piece_ids(self) -> tuple[str | None, ...]:
        return tuple(
            o.piece_id for o in self.outcomes if o.status == CommitStatus.COMMITTED
        )

    @property
    def conflicts(self) -> tuple[PieceCommitOutcome, ...]:
        return tuple(o for o in self.outcomes if o.status == CommitStatus.CONFLICT)

    @property
    def is_complete(self) -> bool:
        """True when every attempted piece was committed."""
        return not self.conflicts

    @property
    def needs_reoptimization(self) -> bool:
        """True when the plan went stale during commit."""
        return bool(self.conflicts)


class PlanCommitter:
    """Applies reviewed pieces to the inventory store, one piece at a time.

    Attributes:
        store: Inventory store receiving the transactions.
        settings: Settings providing the default remnant location.
        stop_on_conflict: Stop the batch at the first stale piece instead
            of attempting the remaining ones.
    """

    def __init__(
        self,
        store: "InventoryStoreProtocol",
        settings: OptimizerSettings | None = None,
        stop_on_conflict: bool = False,
    ) -> None:
        self.store = store
        self.settings = settings or OptimizerSettings()
        self.stop_on_conflict = stop_on_conflict

    def commit(self, plan: Plan) -> CommitReport:
        """Commit every piece of a reviewed plan.

        Raises:
            CommitError: If the store fails for a reason other than a
                stock conflict. The error carries the partial report.
        """
        return self.commit_confirmations(
            build_confirmation(piece, self.settings) for piece in plan.pieces
        )

    def commit_confirmations(
        self, confirmations: Iterable[CutConfirmation]
    ) -> CommitReport:
        """Apply prepared confirmations in order.

        Raises:
            CommitError: If the store fails for a reason other than a
                stock conflict. The error carries the partial report.
        """
        outcomes: list[PieceCommitOutcome] = []
        for confirmation in confirmations:
            try:
                self.store.apply_cut_confirmation(confirmation)
            except CommitConflictError as e:
                logger.warning(
                    "Commit of piece %s conflicted: %s", confirmation.piece_id, e
                )
                outcomes.append(
                    PieceCommitOutcome(
                        confirmation.piece_id, CommitStatus.CONFLICT, str(e)
                    )
                )
                if self.stop_on_conflict:
                    break
                continue
            except InventoryStoreError as e:
                report = CommitReport(tuple(outcomes))
                raise CommitError(
                    f"Commit aborted at piece {confirmation.piece_id}: {e}", report
                ) from e

            outcomes.append(
                PieceCommitOutcome(confirmation.piece_id, CommitStatus.COMMITTED)
            )
            logger.debug(
                "Committed piece %s (%s %s, %d requests, %d new remnants)",
                confirmation.piece_id,
                confirmation.source_kind.value,
                confirmation.source_id,
                len(confirmation.cut_request_ids),
                len(confirmation.new_remnants),
            )

        report = CommitReport(tuple(outcomes))
        logger.info(
            "Commit finished: %d committed, %d conflicts",
            len(report.committed_piece_ids),
            len(report.conflicts),
        )
        return report

