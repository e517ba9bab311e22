"""Exceptions raised at the commit boundary.

Planning itself never raises for unplaceable cuts; those end up in the
plan's excluded list. Only the inventory store and the review surface
report failures as exceptions.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from glasscut.domain.services.commit import CommitReport


class InventoryStoreError(Exception):
    """Raised when the inventory store cannot apply or read data."""


class CommitConflictError(InventoryStoreError):
    """Raised when the targeted stock unit is no longer available.

    The plan the confirmation was built from is stale and the
    optimization has to be run again.

    Attributes:
        source_id: Identifier of the sheet or remnant that was targeted.
        available: Quantity the store holds for that stock unit.
    """

    def __init__(self, source_id: str | None, available: int = 0) -> None:
        self.source_id = source_id
        self.available = available
        super().__init__(
            f"Stock unit {source_id!r} is no longer available "
            f"(available: {available}); re-run the optimization"
        )


class StaleWasteRegionError(LookupError):
    """Raised when a review action names a waste region not in the plan."""

    def __init__(self, region_id: str) -> None:
        self.region_id = region_id
        super().__init__(f"Unknown waste region: {region_id}")


class CommitError(Exception):
    """Raised when a commit batch is aborted by a storage failure.

    Pieces committed before the failure stay committed; ``report`` lists
    them.
    """

    def __init__(self, message: str, report: "CommitReport") -> None:
        self.message = message
        self.report = report
        super().__init__(message)
