"""
Document and image renderers.

Report builders hand over neutral sections (heading, summary lines, optional
table) and chart specs; everything reportlab-specific stays in this module.
"""

from io import BytesIO
from typing import List, Protocol, Sequence
from xml.sax.saxutils import escape

from reportlab.graphics import renderSVG
from reportlab.graphics.charts.piecharts import Pie
from reportlab.graphics.shapes import Drawing, String
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from portal.schemas.report_schemas import ChartSpec, ReportSection

CHART_WIDTH = 520
CHART_HEIGHT = 280

PIE_COLORS = [
    colors.HexColor("#1e3a8a"),
    colors.HexColor("#2563eb"),
    colors.HexColor("#60a5fa"),
    colors.HexColor("#16a34a"),
    colors.HexColor("#f59e0b"),
    colors.HexColor("#dc2626"),
    colors.HexColor("#7c3aed"),
    colors.HexColor("#0d9488"),
    colors.HexColor("#64748b"),
]


class Exporter(Protocol):
    def render_document(self, title: str, sections: Sequence[ReportSection]) -> bytes:
        ...

    def render_image(self, charts: Sequence[ChartSpec]) -> bytes:
        ...

    def render_text(self, sections: Sequence[ReportSection]) -> bytes:
        ...


class ReportlabExporter:
    """PDF via platypus, charts as SVG via reportlab.graphics."""

    def render_document(self, title: str, sections: Sequence[ReportSection]) -> bytes:
        buffer = BytesIO()
        doc = SimpleDocTemplate(buffer, pagesize=A4, rightMargin=24, leftMargin=24, topMargin=24, bottomMargin=24)
        styles = getSampleStyleSheet()

        story = [Paragraph(escape(title), styles["Title"]), Spacer(1, 12)]
        for section in sections:
            story.append(Paragraph(escape(section.heading), styles["Heading2"]))
            for line in section.lines:
                story.append(Paragraph(escape(line), styles["Normal"]))
            if section.table:
                story.append(Spacer(1, 6))
                story.append(self._build_table(section.table))
            story.append(Spacer(1, 12))

        doc.build(story)
        return buffer.getvalue()

    def _build_table(self, rows: List[List[str]]) -> Table:
        table = Table(rows, repeatRows=1)
        table.setStyle(TableStyle([
            ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#1e3a8a")),
            ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
            ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
            ("FONTSIZE", (0, 0), (-1, -1), 8),
            ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
        ]))
        return table

    def render_image(self, charts: Sequence[ChartSpec]) -> bytes:
        height = max(1, len(charts)) * CHART_HEIGHT
        drawing = Drawing(CHART_WIDTH, height)

        for index, chart in enumerate(charts):
            top = height - index * CHART_HEIGHT
            drawing.add(String(CHART_WIDTH / 2, top - 24, chart.title, fontSize=14, textAnchor="middle"))

            if sum(chart.values) == 0:
                drawing.add(String(CHART_WIDTH / 2, top - CHART_HEIGHT / 2, "Sem dados", fontSize=10, textAnchor="middle"))
                continue

            pie = Pie()
            pie.x = CHART_WIDTH / 2 - 90
            pie.y = top - CHART_HEIGHT + 30
            pie.width = 180
            pie.height = 180
            pie.data = list(chart.values)
            pie.labels = [f"{label} ({value})" for label, value in zip(chart.labels, chart.values)]
            pie.simpleLabels = 1
            pie.slices.strokeWidth = 0.5
            pie.slices.fontSize = 7
            for slice_index in range(len(pie.data)):
                pie.slices[slice_index].fillColor = PIE_COLORS[slice_index % len(PIE_COLORS)]
            drawing.add(pie)

        return renderSVG.drawToString(drawing).encode("utf-8")

    def render_text(self, sections: Sequence[ReportSection]) -> bytes:
        blocks = ["\n" + "\n".join([section.heading, *section.lines]) for section in sections]
        return "\n".join(blocks).encode("utf-8")
