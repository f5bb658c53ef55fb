import io
from xml.sax.saxutils import escape

from reportlab.lib.pagesizes import A4, landscape
from reportlab.platypus import SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer
from reportlab.lib import colors
from reportlab.lib.styles import getSampleStyleSheet

from mealgrid.logic.grid.slot_index import build_week_grid
from mealgrid.utilities.constants import MEAL_TYPES


def _cell(meals, style):
    if not meals:
        return "-"
    lines = []
    for m in meals:
        text = f"<b>{escape(m.name)}</b>"
        if m.chef:
            text += f"<br/><i>Chef: {escape(m.chef)}</i>"
        lines.append(text)
    return Paragraph("<br/><br/>".join(lines), style)


def generate_pdf_for_plan(plan, meals):
    """Printable week grid: one row per day, one column per meal type, stacked meals per cell."""
    buf = io.BytesIO()
    doc = SimpleDocTemplate(
        buf, pagesize=landscape(A4),
        rightMargin=20, leftMargin=20, topMargin=20, bottomMargin=20
    )

    styles = getSampleStyleSheet()
    elements = [Paragraph(f"Meal Plan: {escape(plan.name)}", styles["Title"])]
    if plan.description:
        elements.append(Paragraph(escape(plan.description), styles["Normal"]))
    elements.append(Spacer(1, 16))

    data = [["Day", *MEAL_TYPES]]
    for day, slots in build_week_grid(meals).items():
        data.append([day] + [_cell(slots[t], styles["BodyText"]) for t in MEAL_TYPES])

    table = Table(data, repeatRows=1)
    table.setStyle(TableStyle([
        ("BACKGROUND", (0,0), (-1,0), colors.HexColor("#4CAF50")),
        ("TEXTCOLOR", (0,0), (-1,0), colors.whitesmoke),
        ("ALIGN", (0,0), (-1,-1), "CENTER"),
        ("VALIGN", (0,0), (-1,-1), "MIDDLE"),
        ("FONTNAME", (0,0), (-1,0), "Helvetica-Bold"),
        ("FONTSIZE", (0,0), (-1,0), 12),
        ("BOTTOMPADDING", (0,0), (-1,0), 10),
        ("GRID", (0,0), (-1,-1), 0.5, colors.grey),
    ]))

    elements.append(table)
    doc.build(elements)
    return buf.getvalue()
