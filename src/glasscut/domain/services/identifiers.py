"""Run-scoped identifiers for pieces and waste regions."""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from typing import Iterator


@dataclass
class RunIdentifiers:
    """Monotonic id sources for one optimization run.

    Identifiers only need to be unique within a run; they are never
    persisted.
    """

    _pieces: Iterator[int] = field(default_factory=lambda: itertools.count(1))
    _regions: Iterator[int] = field(default_factory=lambda: itertools.count(1))

    def next_piece_id(self) -> str:
        return f"P{next(self._pieces)}"

    def next_region_id(self) -> str:
        return f"W{next(self._regions)}"
