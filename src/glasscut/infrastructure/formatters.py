"""Output formatters and exporters for cutting plans."""

from __future__ import annotations

import json
from typing import Any, Mapping

from glasscut.domain import ExcludedCut, Piece, PlacedCut, Plan, WasteRegion


def _piece_signature(piece: Piece) -> tuple[Any, ...]:
    """Key under which identical pieces are grouped for display."""
    return (
        piece.material_type_id,
        piece.origin,
        piece.source_id,
        piece.width,
        piece.height,
        tuple((p.instance.request_id, p.x, p.y) for p in piece.placements),
    )


class PlanFormatter:
    """Formats cutting plans for terminal display.

    Pieces with the same stock source and the same cut layout are listed
    once with a multiplicity count, which keeps large repeat orders
    readable.
    """

    def __init__(
        self,
        material_names: Mapping[str, str] | None = None,
        group_identical: bool = True,
    ) -> None:
        self.material_names = dict(material_names or {})
        self.group_identical = group_identical

    def _material_desc(self, material_type_id: str) -> str:
        return self.material_names.get(material_type_id, material_type_id)

    def format(self, plan: Plan) -> str:
        """Format the whole plan: pieces, waste, exclusions and summary."""
        if plan.is_empty and not plan.dropped_request_ids:
            return "Nothing to cut."

        sections = [self.format_pieces(plan), self.format_waste(plan)]
        excluded = self.format_excluded(plan)
        if excluded:
            sections.append(excluded)
        sections.append(self.format_summary(plan))
        return "\n\n".join(s for s in sections if s)

    def _group(self, pieces: list[Piece]) -> list[tuple[Piece, list[str]]]:
        groups: dict[tuple[Any, ...], tuple[Piece, list[str]]] = {}
        for piece in pieces:
            key = _piece_signature(piece) if self.group_identical else (piece.id,)
            if key in groups:
                groups[key][1].append(piece.id)
            else:
                groups[key] = (piece, [piece.id])
        return list(groups.values())

    def format_pieces(self, plan: Plan) -> str:
        """Format the cut table of every piece."""
        if not plan.pieces:
            return "No pieces in plan."

        lines = ["CUTTING PLAN", "=" * 70]
        for piece, piece_ids in self._group(plan.pieces):
            count = len(piece_ids)
            source = f"{piece.origin.value} {piece.source_id}"
            if piece.location:
                source += f" @ {piece.location}"
            lines.append("")
            lines.append(
                f"{', '.join(piece_ids)}: {piece.dimensions_label} "
                f"{self._material_desc(piece.material_type_id)} ({source})"
                + (f"  x{count}" if count > 1 else "")
            )
            lines.append("-" * 70)
            lines.append(
                f"{'Cut':<20} {'Width':<8} {'Height':<8} {'X':<8} {'Y':<8} {'Client'}"
            )
            for placement in piece.placements:
                lines.append(self._format_placement(placement))
            lines.append(
                f"{piece.cut_count} cuts, {piece.efficiency:.1f}% used"
                + (" (each)" if count > 1 else "")
            )
        return "\n".join(lines)

    def _format_placement(self, placement: PlacedCut) -> str:
        request = placement.instance.request
        client = request.client_name or ""
        if request.order_number:
            client = f"{client} #{request.order_number}".strip()
        return (
            f"{placement.instance.label:<20} {placement.width:<8} "
            f"{placement.height:<8} {placement.x:<8} {placement.y:<8} {client}"
        )

    def format_waste(self, plan: Plan) -> str:
        """Format the waste regions of every piece."""
        regions = [(piece, w) for piece in plan.pieces for w in piece.waste]
        if not regions:
            return ""

        lines = [
            "WASTE REGIONS",
            "=" * 70,
            f"{'Region':<8} {'Piece':<8} {'Edge':<8} {'Width':<8} {'Height':<8} "
            f"{'Keep':<6} {'Location'}",
            "-" * 70,
        ]
        for piece, region in regions:
            lines.append(self._format_region(piece, region))
        return "\n".join(lines)

    def _format_region(self, piece: Piece, region: WasteRegion) -> str:
        keep = "yes" if region.saved else "no"
        location = region.location or ""
        return (
            f"{region.id:<8} {piece.id:<8} {region.edge.value:<8} "
            f"{region.width:<8} {region.height:<8} {keep:<6} {location}"
        )

    def format_excluded(self, plan: Plan) -> str:
        """Format the cuts that could not be placed."""
        if not plan.excluded and not plan.dropped_request_ids:
            return ""

        lines = ["NOT PLACED", "=" * 70]
        for excluded in plan.excluded:
            lines.append(self._format_excluded(excluded))
        for request_id in plan.dropped_request_ids:
            lines.append(f"{request_id:<20} invalid request (dropped)")
        partial = plan.partially_placed_request_ids
        if partial:
            lines.append("")
            lines.append(f"Partially placed requests: {', '.join(partial)}")
        return "\n".join(lines)

    def _format_excluded(self, excluded: ExcludedCut) -> str:
        instance = excluded.instance
        return (
            f"{instance.label:<20} {instance.width_mm}x{instance.height_mm:<10} "
            f"{self._material_desc(instance.material_type_id):<16} "
            f"{excluded.reason.value.replace('_', ' ')}"
        )

    def format_summary(self, plan: Plan) -> str:
        """Format resource and efficiency figures."""
        summary = plan.summary()
        return "\n".join(
            [
                "SUMMARY",
                "=" * 40,
                f"Pieces:          {summary.total_pieces} "
                f"({summary.sheets_used} sheets, {summary.remnants_used} remnants)",
                f"Cuts placed:     {summary.total_cuts}",
                f"Cuts excluded:   {summary.excluded_cuts}",
                f"Stock area:      {summary.total_area / 1_000_000:.3f} m2",
                f"Used area:       {summary.used_area / 1_000_000:.3f} m2",
                f"Efficiency:      {summary.efficiency:.1f}%",
                f"Saved remnants:  {summary.saved_remnants}",
            ]
        )


class PlanJsonExporter:
    """Exports cutting plans as JSON-compatible data."""

    def to_dict(self, plan: Plan) -> dict[str, Any]:
        """Convert a plan to plain data."""
        return {
            "pieces": [self._format_piece(p) for p in plan.pieces],
            "excluded": [self._format_excluded(e) for e in plan.excluded],
            "dropped_request_ids": list(plan.dropped_request_ids),
            "partially_placed_request_ids": list(plan.partially_placed_request_ids),
            "summary": plan.summary().as_metadata(),
        }

    def export(self, plan: Plan) -> str:
        """Export a plan as a JSON string."""
        return json.dumps(self.to_dict(plan), indent=2)

    def _format_piece(self, piece: Piece) -> dict[str, Any]:
        return {
            "id": piece.id,
            "origin": piece.origin.value,
            "source_id": piece.source_id,
            "material_type_id": piece.material_type_id,
            "width_mm": piece.width,
            "height_mm": piece.height,
            "location": piece.location,
            "efficiency": round(piece.efficiency, 2),
            "placements": [
                {
                    "request_id": p.instance.request_id,
                    "instance": p.instance.instance,
                    "label": p.instance.label,
                    "x": p.x,
                    "y": p.y,
                    "width_mm": p.width,
                    "height_mm": p.height,
                }
                for p in piece.placements
            ],
            "waste": [
                {
                    "id": w.id,
                    "x": w.x,
                    "y": w.y,
                    "width_mm": w.width,
                    "height_mm": w.height,
                    "edge": w.edge.value,
                    "classification": w.classification.value,
                    "saved": w.saved,
                    "location": w.location,
                }
                for w in piece.waste
            ],
        }

    def _format_excluded(self, excluded: ExcludedCut) -> dict[str, Any]:
        instance = excluded.instance
        return {
            "request_id": instance.request_id,
            "instance": instance.instance,
            "label": instance.label,
            "material_type_id": instance.material_type_id,
            "width_mm": instance.width_mm,
            "height_mm": instance.height_mm,
            "reason": excluded.reason.value,
        }
