"""Cut diagram rendering for cutting plans.

This module provides SVG and ASCII rendering of plan pieces showing cut
placements, dimensions and waste regions, with saved remnants told apart
from scrap.
"""

from __future__ import annotations

from html import escape
from typing import Mapping

from glasscut.domain import (
    Piece,
    PlacedCut,
    Plan,
    WasteClassification,
    WasteRegion,
)

# Fill colors for waste classifications
WASTE_COLORS: dict[WasteClassification, str] = {
    WasteClassification.SCRAP: "#D3D3D3",  # Light gray
    WasteClassification.REUSABLE_REMNANT: "#90EE90",  # Light green
}

# Characters used to fill waste regions in ASCII diagrams
WASTE_CHARS: dict[WasteClassification, str] = {
    WasteClassification.SCRAP: ".",
    WasteClassification.REUSABLE_REMNANT: "~",
}

_LEGEND_HEIGHT = 30


class CutDiagramRenderer:
    """Renders cut diagrams in SVG and ASCII format.

    Attributes:
        scale: Pixels per millimeter for SVG rendering.
        cut_fill: Fill color for placed cuts.
        cut_stroke: Stroke color for cut outlines.
        glass_fill: Background color of the stock piece.
        text_color: Color for labels and dimensions.
        show_dimensions: Whether to show cut dimensions.
        show_labels: Whether to show cut and region labels.
        show_legend: Whether to add a color legend under each piece.
        material_names: Display names by material type id, used in headers.
    """

    def __init__(
        self,
        scale: float = 0.25,
        cut_fill: str = "#ADD8E6",  # Light blue
        cut_stroke: str = "#000000",  # Black
        glass_fill: str = "#F0F8FF",  # Alice blue
        text_color: str = "#000000",  # Black
        show_dimensions: bool = True,
        show_labels: bool = True,
        show_legend: bool = True,
        material_names: Mapping[str, str] | None = None,
    ) -> None:
        self.scale = scale
        self.cut_fill = cut_fill
        self.cut_stroke = cut_stroke
        self.glass_fill = glass_fill
        self.text_color = text_color
        self.show_dimensions = show_dimensions
        self.show_labels = show_labels
        self.show_legend = show_legend
        self.material_names = dict(material_names or {})

    def _material_desc(self, piece: Piece) -> str:
        return self.material_names.get(piece.material_type_id, piece.material_type_id)

    def _header_text(self, piece: Piece, index: int, total: int) -> str:
        return (
            f"Piece {piece.id} ({index} of {total}) - {piece.origin.value} "
            f"{piece.source_id} {piece.dimensions_label} - "
            f"{self._material_desc(piece)} - {piece.efficiency:.1f}% used"
        )

    def render_svg(self, piece: Piece, index: int = 1, total: int = 1) -> str:
        """Generate SVG cut diagram for a single piece.

        Args:
            piece: Packed piece with placements and waste regions.
            index: 1-based position of the piece in the plan.
            total: Number of pieces in the plan (for header display).

        Returns:
            SVG string representation of the piece.
        """
        header_height = 30
        legend_height = _LEGEND_HEIGHT if self.show_legend else 0

        svg_width = piece.width * self.scale
        svg_height = piece.height * self.scale + header_height + legend_height

        parts: list[str] = [
            f'<svg width="{svg_width}" height="{svg_height}" '
            f'xmlns="http://www.w3.org/2000/svg">',
            "",
            "  <!-- Background -->",
            f'  <rect x="0" y="0" width="{svg_width}" height="{svg_height}" '
            f'fill="white"/>',
            "",
            self._render_header(piece, index, total, svg_width, header_height),
            "  <!-- Piece outline -->",
            f'  <rect x="0" y="{header_height}" '
            f'width="{svg_width}" height="{piece.height * self.scale}" '
            f'fill="{self.glass_fill}" stroke="{self.cut_stroke}" stroke-width="2"/>',
        ]

        # Waste first so cut outlines render on top
        parts.append("")
        parts.append("  <!-- Waste regions -->")
        for region in piece.waste:
            parts.append(self._render_waste_region(region, header_height))

        parts.append("")
        parts.append("  <!-- Placed cuts -->")
        for placement in piece.placements:
            parts.append(self._render_cut(placement, header_height))

        if self.show_legend:
            legend_y = header_height + piece.height * self.scale
            parts.append("")
            parts.append("  <!-- Legend -->")
            parts.append(self._render_legend(svg_width, legend_y))

        parts.append("")
        parts.append("</svg>")
        return "\n".join(parts)

    def render_all_svg(self, plan: Plan) -> list[str]:
        """Generate SVG cut diagrams for all pieces of a plan."""
        total = len(plan.pieces)
        return [
            self.render_svg(piece, index, total)
            for index, piece in enumerate(plan.pieces, start=1)
        ]

    def _render_header(
        self,
        piece: Piece,
        index: int,
        total: int,
        svg_width: float,
        header_height: float,
    ) -> str:
        header_text = escape(self._header_text(piece, index, total))
        return (
            f"  <!-- Header -->\n"
            f'  <rect x="0" y="0" width="{svg_width}" height="{header_height}" '
            f'fill="#E0E0E0"/>\n'
            f'  <text x="10" y="{header_height - 8}" '
            f'font-family="Arial, sans-serif" font-size="14" '
            f'fill="{self.text_color}">{header_text}</text>'
        )

    def _render_cut(self, placement: PlacedCut, header_height: float) -> str:
        """Render a single placed cut as SVG rect and text."""
        x = placement.x * self.scale
        y = header_height + placement.y * self.scale
        w = placement.width * self.scale
        h = placement.height * self.scale

        rect = (
            f'<rect x="{x}" y="{y}" width="{w}" height="{h}" '
            f'fill="{self.cut_fill}" stroke="{self.cut_stroke}"/>'
        )

        font_size = min(12, min(w, h) / 6)
        if font_size < 6:
            # Too small for text
            return f"  {rect}"

        text_x = x + w / 2
        text_y = y + h / 2
        svg_parts = ["  <g>", f"    {rect}"]

        if self.show_labels:
            label = escape(placement.instance.label)
            svg_parts.append(
                f'    <text x="{text_x}" y="{text_y - font_size / 2}" '
                f'text-anchor="middle" font-family="Arial, sans-serif" '
                f'font-size="{font_size}" fill="{self.text_color}">{label}</text>'
            )

        if self.show_dimensions:
            dims_y = text_y + font_size / 2 + 2 if self.show_labels else text_y
            dims = f"{placement.width} x {placement.height} mm"
            svg_parts.append(
                f'    <text x="{text_x}" y="{dims_y}" '
                f'text-anchor="middle" font-family="Arial, sans-serif" '
                f'font-size="{font_size * 0.8}" fill="{self.text_color}">{dims}</text>'
            )

        svg_parts.append("  </g>")
        return "\n".join(svg_parts)

    def _render_waste_region(self, region: WasteRegion, header_height: float) -> str:
        """Render a waste region colored by its classification."""
        x = region.x * self.scale
        y = header_height + region.y * self.scale
        w = region.width * self.scale
        h = region.height * self.scale
        fill = WASTE_COLORS[region.classification]

        rect = (
            f'<rect x="{x}" y="{y}" width="{w}" height="{h}" '
            f'fill="{fill}" stroke="#999999" stroke-dasharray="4,4"/>'
        )
        font_size = min(10, min(w, h) / 3)
        if not self.show_labels or font_size < 6:
            return f"  {rect}"

        return (
            f"  <g>\n    {rect}\n"
            f'    <text x="{x + w / 2}" y="{y + h / 2 + font_size / 3}" '
            f'text-anchor="middle" font-family="Arial, sans-serif" '
            f'font-size="{font_size}" fill="#555555">{region.id}</text>\n'
            f"  </g>"
        )

    def _render_legend(self, svg_width: float, y_offset: float) -> str:
        parts: list[str] = [
            f'  <rect x="0" y="{y_offset}" width="{svg_width}" '
            f'height="{_LEGEND_HEIGHT}" fill="#F5F5F5" stroke="#CCCCCC"/>'
        ]
        entries = [
            ("Cut", self.cut_fill),
            ("Scrap", WASTE_COLORS[WasteClassification.SCRAP]),
            ("Remnant", WASTE_COLORS[WasteClassification.REUSABLE_REMNANT]),
        ]
        swatch_size = 12
        for idx, (label, color) in enumerate(entries):
            x = 10 + idx * 90
            y = y_offset + (_LEGEND_HEIGHT - swatch_size) / 2
            parts.append(
                f'  <rect x="{x}" y="{y}" width="{swatch_size}" '
                f'height="{swatch_size}" fill="{color}" stroke="{self.cut_stroke}"/>'
            )
            parts.append(
                f'  <text x="{x + swatch_size + 5}" y="{y + swatch_size - 2}" '
                f'font-family="Arial, sans-serif" font-size="10" '
                f'fill="{self.text_color}">{label}</text>'
            )
        return "\n".join(parts)

    def render_combined_svg(self, plan: Plan) -> str:
        """Generate single SVG with all pieces stacked vertically."""
        if not plan.pieces:
            return (
                '<svg width="100" height="50" xmlns="http://www.w3.org/2000/svg">'
                '<text x="10" y="30">No pieces to display</text></svg>'
            )

        header_height = 30
        legend_height = _LEGEND_HEIGHT if self.show_legend else 0
        spacing = 20
        svg_width = max(p.width for p in plan.pieces) * self.scale
        svg_height = sum(
            p.height * self.scale + header_height + legend_height + spacing
            for p in plan.pieces
        )

        parts: list[str] = [
            f'<svg width="{svg_width}" height="{svg_height}" '
            f'xmlns="http://www.w3.org/2000/svg">',
            f'  <rect x="0" y="0" width="{svg_width}" height="{svg_height}" '
            f'fill="white"/>',
        ]

        y_offset = 0.0
        total = len(plan.pieces)
        for index, piece in enumerate(plan.pieces, start=1):
            parts.append(f'  <g transform="translate(0, {y_offset})">')
            parts.append(f"    <!-- Piece {piece.id} -->")

            piece_svg = self.render_svg(piece, index, total)
            start_idx = piece_svg.find(">") + 1
            end_idx = piece_svg.rfind("</svg>")
            for line in piece_svg[start_idx:end_idx].strip().split("\n"):
                if line.strip():
                    parts.append(f"  {line}")

            parts.append("  </g>")
            y_offset += piece.height * self.scale + header_height + legend_height
            y_offset += spacing

        parts.append("</svg>")
        return "\n".join(parts)

    def render_ascii(
        self,
        piece: Piece,
        width: int = 80,
        index: int = 1,
        total: int = 1,
    ) -> str:
        """Generate ASCII cut diagram for a single piece.

        Waste regions are filled with ``.`` for scrap and ``~`` for saved
        remnants; cuts are drawn as boxes on top.

        Args:
            piece: Packed piece with placements and waste regions.
            width: Terminal width in characters (default 80).
            index: 1-based position of the piece in the plan.
            total: Number of pieces in the plan.

        Returns:
            ASCII string representation of the piece.
        """
        usable_width = width - 2
        scale_x = usable_width / piece.width

        aspect_ratio = piece.height / piece.width
        # 0.5 for char aspect ratio
        grid_height = max(int(usable_width * aspect_ratio * 0.5), 10)
        scale_y = grid_height / piece.height

        grid = [[" " for _ in range(usable_width)] for _ in range(grid_height)]

        for region in piece.waste:
            self._fill_region_ascii(grid, region, scale_x, scale_y)
        for placement in piece.placements:
            self._draw_cut_ascii(grid, placement, scale_x, scale_y)

        lines: list[str] = [self._header_text(piece, index, total)]
        lines.append("+" + "-" * usable_width + "+")
        for row in grid:
            lines.append("|" + "".join(row) + "|")
        lines.append("+" + "-" * usable_width + "+")
        return "\n".join(lines)

    def _fill_region_ascii(
        self,
        grid: list[list[str]],
        region: WasteRegion,
        scale_x: float,
        scale_y: float,
    ) -> None:
        grid_height = len(grid)
        grid_width = len(grid[0]) if grid else 0
        x1 = max(0, min(int(region.x * scale_x), grid_width - 1))
        y1 = max(0, min(int(region.y * scale_y), grid_height - 1))
        x2 = max(0, min(int((region.x + region.width) * scale_x), grid_width))
        y2 = max(0, min(int((region.y + region.height) * scale_y), grid_height))
        char = WASTE_CHARS[region.classification]
        for y in range(y1, y2):
            for x in range(x1, x2):
                grid[y][x] = char

    def _draw_cut_ascii(
        self,
        grid: list[list[str]],
        placement: PlacedCut,
        scale_x: float,
        scale_y: float,
    ) -> None:
        """Draw a single cut onto the ASCII grid."""
        grid_height = len(grid)
        grid_width = len(grid[0]) if grid else 0
        x1 = max(0, min(int(placement.x * scale_x), grid_width - 1))
        x2 = max(0, min(int(placement.right_edge * scale_x), grid_width - 1))
        y1 = max(0, min(int(placement.y * scale_y), grid_height - 1))
        y2 = max(0, min(int(placement.bottom_edge * scale_y), grid_height - 1))

        # Clear the interior of any waste fill
        for y in range(y1, y2 + 1):
            for x in range(x1, x2 + 1):
                grid[y][x] = " "

        for x in range(x1, x2 + 1):
            grid[y1][x] = "-"
            grid[y2][x] = "-"
        for y in range(y1, y2 + 1):
            grid[y][x1] = "|"
            grid[y][x2] = "|"
        for y, x in ((y1, x1), (y1, x2), (y2, x1), (y2, x2)):
            grid[y][x] = "+"

        texts = [placement.instance.label, f"{placement.width}x{placement.height}"]
        for offset, text in enumerate(texts, start=1):
            row = y1 + offset
            if row >= y2:
                break
            text = text[: max(0, x2 - x1 - 1)]
            for i, char in enumerate(text):
                grid[row][x1 + 1 + i] = char

    def render_all_ascii(self, plan: Plan, width: int = 80) -> str:
        """Generate ASCII cut diagrams for all pieces of a plan."""
        if not plan.pieces:
            return "No pieces to display."

        total = len(plan.pieces)
        parts: list[str] = []
        for index, piece in enumerate(plan.pieces, start=1):
            parts.append(self.render_ascii(piece, width, index, total))
            parts.append("")

        summary = plan.summary()
        parts.append("=" * width)
        parts.append(
            f"SUMMARY: {summary.total_pieces} "
            f"piece{'s' if summary.total_pieces != 1 else ''} "
            f"({summary.sheets_used} sheets, {summary.remnants_used} remnants), "
            f"{summary.efficiency:.1f}% used"
        )
        parts.append(
            f"Legend: '{WASTE_CHARS[WasteClassification.SCRAP]}' scrap, "
            f"'{WASTE_CHARS[WasteClassification.REUSABLE_REMNANT]}' saved remnant"
        )
        return "\n".join(parts)
