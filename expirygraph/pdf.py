"""PDF export of the expiry table using ReportLab."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .tracker import EntryRow, TrackerStats

_STATUS_COLORS = {
    "expired": "#E57373",
    "soon": "#FFD54F",
    "fresh": "#81C784",
}


def generate_pdf(
    rows: list[EntryRow],
    stats: TrackerStats,
    output_path: str | Path,
    generated_at: datetime | None = None,
) -> Path:
    """Generate a PDF report of tracked foods.

    Args:
        rows: Display rows, already sorted by expiry.
        stats: Summary counts for the header.
        output_path: Where to save the PDF file.
        generated_at: Timestamp printed under the title.

    Returns:
        Path to the generated PDF file.

    Raises:
        ImportError: If reportlab is not installed.
    """
    try:
        from reportlab.lib import colors
        from reportlab.lib.pagesizes import A4
        from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
        from reportlab.lib.units import mm
        from reportlab.platypus import (
            Paragraph,
            SimpleDocTemplate,
            Spacer,
            Table,
            TableStyle,
        )
    except ImportError:
        raise ImportError(
            "reportlab is required: pip install 'expirygraph[pdf]'"
        ) from None

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    generated_at = generated_at or datetime.now()

    doc = SimpleDocTemplate(
        str(output_path),
        pagesize=A4,
        leftMargin=15 * mm,
        rightMargin=15 * mm,
        topMargin=15 * mm,
        bottomMargin=15 * mm,
    )

    styles = getSampleStyleSheet()
    title_style = ParagraphStyle(
        "ExpiryTitle",
        parent=styles["Title"],
        fontSize=18,
        leading=24,
    )
    subtitle_style = ParagraphStyle(
        "ExpirySubtitle",
        parent=styles["Normal"],
        fontSize=10,
        leading=14,
        textColor=colors.grey,
    )
    body_style = ParagraphStyle(
        "ExpiryBody",
        parent=styles["Normal"],
        fontSize=10,
        leading=14,
    )

    elements: list = [
        Paragraph("Expiry graph", title_style),
        Paragraph(f"Generated {generated_at:%Y-%m-%d %H:%M}", subtitle_style),
        Spacer(1, 4 * mm),
        Paragraph(
            f"Total foods: {stats.total} &nbsp; Expired: {stats.expired} "
            f"&nbsp; Safe / fresh: {stats.safe}",
            body_style,
        ),
        Spacer(1, 6 * mm),
    ]

    if not rows:
        elements.append(Paragraph("No entries to show.", body_style))
        doc.build(elements)
        return output_path

    table_data = [["Food", "Expiry date", "Status", "Details"]]
    for row in rows:
        table_data.append([
            row.food_name, row.formatted_date, row.status.short, row.status.text,
        ])

    style_commands = [
        ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#4A90D9")),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
        ("FONTSIZE", (0, 0), (-1, -1), 9),
        ("ALIGN", (0, 0), (-1, -1), "LEFT"),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
        ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
        ("TOPPADDING", (0, 0), (-1, -1), 3),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 3),
        ("LEFTPADDING", (0, 0), (-1, -1), 4),
        ("RIGHTPADDING", (0, 0), (-1, -1), 4),
    ]
    for i, row in enumerate(rows, 1):
        color = colors.HexColor(_STATUS_COLORS[row.status.display_type])
        style_commands.append(("BACKGROUND", (2, i), (2, i), color))

    col_widths = [55 * mm, 35 * mm, 25 * mm, 65 * mm]
    t = Table(table_data, colWidths=col_widths, repeatRows=1)
    t.setStyle(TableStyle(style_commands))
    elements.append(t)

    doc.build(elements)
    return output_path
