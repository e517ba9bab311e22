"""Expansion of cut requests into individual cut instances."""

from __future__ import annotations

import logging
from typing import Iterable

from glasscut.domain.value_objects import CutInstance, CutRequest

logger = logging.getLogger(__name__)


def expand_cut_requests(requests: Iterable[CutRequest]) -> list[CutInstance]:
    """Expand requests with quantity N into N cut instances.

    Instances keep the input order of their requests and are numbered
    1..quantity. Malformed requests (non-positive quantity or dimensions)
    produce no instances.

    Args:
        requests: Cut requests selected for planning.

    Returns:
        Flat list of cut instances.
    """
    expanded: list[CutInstance] = []
    for request in requests:
        if not request.is_well_formed:
            logger.warning(
                "Dropping malformed cut request %s (%sx%s, qty %s)",
                request.id,
                request.width_mm,
                request.height_mm,
                request.quantity,
            )
            continue
        for i in range(request.quantity):
            expanded.append(CutInstance(request=request, instance=i + 1))
    return expanded


def malformed_request_ids(requests: Iterable[CutRequest]) -> tuple[str, ...]:
    """Identifiers of requests that expand to nothing."""
    return tuple(r.id for r in requests if not r.is_well_formed)
