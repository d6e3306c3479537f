"""PDF export of a retirement projection."""

import io

from reportlab.lib import colors
from reportlab.lib.pagesizes import letter
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.platypus import (
    PageBreak,
    Paragraph,
    SimpleDocTemplate,
    Spacer,
    Table,
    TableStyle,
)

from finance_planner.components.insights import format_currency

HEADER_COLOR = colors.HexColor("#E6ECE9")

LEDGER_HEADINGS = [
    ("age", "Age"),
    ("salary", "Salary"),
    ("balance_401k", "401k"),
    ("balance_roth_ira", "Roth IRA"),
    ("balance_other", "Other"),
    ("net_worth", "Total"),
]


def _table(rows, align="LEFT"):
    table = Table(rows, hAlign=align)
    table.setStyle(
        TableStyle(
            [
                ("BACKGROUND", (0, 0), (-1, 0), HEADER_COLOR),
                ("GRID", (0, 0), (-1, -1), 0.25, colors.grey),
                ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
            ]
        )
    )
    return table


def _fmt(value) -> str:
    if value is None:
        return ""
    if isinstance(value, float):
        return f"{value:,.2f}" if abs(value) >= 1 else f"{value:g}"
    return str(value)


def build_pdf(summary: dict) -> bytes:
    """Create a PDF report from a ``services.retirement_summary`` result."""
    projection = summary["projection"]
    buffer = io.BytesIO()
    doc = SimpleDocTemplate(buffer, pagesize=letter, leftMargin=36, rightMargin=36)
    styles = getSampleStyleSheet()
    story = [Paragraph("Retirement Projection", styles["Title"]), Spacer(1, 12)]

    # ---- Inputs ----
    story.append(Paragraph("Inputs", styles["Heading2"]))
    rows = [["Field", "Value"]]
    for key, value in summary["inputs"].items():
        rows.append([key.replace("_", " "), _fmt(value)])
    story.extend([_table(rows), Spacer(1, 12)])

    # ---- Results ----
    story.append(Paragraph("Results", styles["Heading2"]))
    results = [
        ["Metric", "Value"],
        ["Years to retirement", str(projection["years"])],
        ["Real return", f"{projection['real_return'] * 100:.2f}%"],
        ["Projected savings", format_currency(projection["projected_savings"])],
        ["Monthly retirement income", format_currency(projection["monthly_income"])],
    ]
    if projection.get("target_gap") is not None:
        results.append(["Gap to target", format_currency(projection["target_gap"])])
    story.extend([_table(results), Spacer(1, 12)])

    # ---- Ledger ----
    ledger = projection["ledger"]
    if projection["years"]:
        story.extend([PageBreak(), Paragraph("Year by Year", styles["Heading2"])])
        rows = [[h for _, h in LEDGER_HEADINGS]]
        for i in range(projection["years"]):
            row = [str(ledger["age"][i])]
            row += [format_currency(ledger[k][i]) for k, _ in LEDGER_HEADINGS[1:]]
            rows.append(row)
        story.extend([_table(rows, align="CENTER"), Spacer(1, 12)])

    # ---- Calculation steps ----
    story.append(Paragraph("Calculation Steps", styles["Heading2"]))
    for step in projection["calculation_steps"]:
        story.append(Paragraph(step, styles["BodyText"]))

    doc.build(story)
    pdf_bytes = buffer.getvalue()
    buffer.close()
    return pdf_bytes
