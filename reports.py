# -*- coding: utf-8 -*-
"""
Report flattening and export.

A report payload is ``{user: [atividade, ...]}`` or ``{user: {key: [atividade, ...]}}``
(atividade = the JSON dict served by /atividades). ``flatten_report`` is the only
traversal: the on-screen table, the CSV, the XLSX and the PDF all consume its rows,
so every output lists the same (user, key, title) triples in the same order.
"""

import csv
import io
from datetime import datetime
from xml.sax.saxutils import escape

from openpyxl import Workbook
from reportlab.graphics.charts.barcharts import VerticalBarChart
from reportlab.graphics.shapes import Drawing
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

REPORT_HEADER = ["Usuário", "Chave", "Atividade", "Status", "Criada em", "Concluída em"]
NO_KEY = "-"
NO_TITLE = "(sem título)"
INDIGO = colors.Color(99 / 255, 102 / 255, 241 / 255)
# user, key, title, status, created, completed; 680pt fits the landscape A4 frame
PDF_COL_WIDTHS = [90, 70, 250, 70, 100, 100]


def _fmt_date(value) -> str:
    if not value:
        return "-"
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value)
        except ValueError:
            return value
    return value.strftime("%d/%m/%Y %H:%M")


def _row(user, key, atividade: dict) -> list[str]:
    return [
        str(user),
        str(key),
        atividade.get("title") or NO_TITLE,
        atividade.get("status") or "-",
        _fmt_date(atividade.get("createdAt")),
        _fmt_date(atividade.get("completedAt")),
    ]


def flatten_report(data: dict | None) -> list[list[str]]:
    rows = []
    for user, group in (data or {}).items():
        if isinstance(group, list):
            rows.extend(_row(user, NO_KEY, a) for a in group)
        else:
            for key, atividades in group.items():
                rows.extend(_row(user, key, a) for a in atividades)
    return rows


def chart_series(data: dict | None) -> list[tuple[str, int]]:
    """One bar per user: how many activities the group holds."""
    series = []
    for user, group in (data or {}).items():
        if isinstance(group, list):
            count = len(group)
        else:
            count = sum(len(v) for v in group.values())
        series.append((str(user), count))
    return series


# ---------- CSV ----------
def report_csv(rows: list[list[str]]) -> bytes:
    out = io.StringIO()
    writer = csv.writer(out, lineterminator="\n")
    writer.writerow(REPORT_HEADER)
    writer.writerows(rows)
    # BOM so spreadsheet tools pick up UTF-8
    return ("\ufeff" + out.getvalue()).encode("utf-8")


# ---------- XLSX ----------
def report_xlsx(rows: list[list[str]], title: str = "Relatório") -> bytes:
    wb = Workbook()
    ws = wb.active
    ws.title = title[:31]
    ws.append(REPORT_HEADER)
    for row in rows:
        ws.append(row)
    out = io.BytesIO()
    wb.save(out)
    return out.getvalue()


# ---------- PDF ----------
def pdf_table_data(rows: list[list[str]]) -> list[list[str]]:
    return [REPORT_HEADER] + [list(r) for r in rows]


def pdf_table(rows: list[list[str]]) -> Table:
    """Report table whose cells wrap inside fixed columns that fit the landscape A4 frame."""
    cell = ParagraphStyle("cell", fontName="Helvetica", fontSize=8, leading=10)
    head = ParagraphStyle("head", parent=cell, fontName="Helvetica-Bold", textColor=colors.white)
    data = [[Paragraph(escape(value), head if i == 0 else cell) for value in row]
            for i, row in enumerate(pdf_table_data(rows))]

    table = Table(data, colWidths=PDF_COL_WIDTHS, repeatRows=1)
    table.setStyle(TableStyle([
        ("BACKGROUND", (0, 0), (-1, 0), INDIGO),
        ("GRID", (0, 0), (-1, -1), 0.25, colors.grey),
        ("VALIGN", (0, 0), (-1, -1), "TOP"),
    ]))
    return table


def _bar_chart(series: list[tuple[str, int]]) -> Drawing:
    drawing = Drawing(sum(PDF_COL_WIDTHS), 200)
    chart = VerticalBarChart()
    chart.x, chart.y = 40, 30
    chart.width, chart.height = sum(PDF_COL_WIDTHS) - 60, 150
    chart.data = [[count for _, count in series]]
    chart.categoryAxis.categoryNames = [name for name, _ in series]
    chart.valueAxis.valueMin = 0
    chart.bars[0].fillColor = INDIGO
    drawing.add(chart)
    return drawing


def _page_number(canvas, doc):
    canvas.saveState()
    canvas.setFont("Helvetica", 8)
    canvas.drawRightString(doc.pagesize[0] - 30, 15, f"Página {doc.page}")
    canvas.restoreState()


def report_pdf(rows: list[list[str]], title: str, series: list[tuple[str, int]] | None = None) -> bytes:
    out = io.BytesIO()
    doc = SimpleDocTemplate(out, pagesize=landscape(A4), title=f"Relatório: {title}")
    styles = getSampleStyleSheet()

    story = [Paragraph(escape(f"Relatório: {title}"), styles["Title"]), Spacer(1, 12)]
    if series:
        story += [_bar_chart(series), Spacer(1, 12)]
    story.append(pdf_table(rows))

    doc.build(story, onFirstPage=_page_number, onLaterPages=_page_number)
    return out.getvalue()


EXPORTERS = {
    "csv": ("text/csv; charset=utf-8", lambda rows, title, series: report_csv(rows)),
    "xlsx": ("application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
             lambda rows, title, series: report_xlsx(rows, title)),
    "pdf": ("application/pdf", report_pdf),
}


def export_report(data: dict | None, fmt: str, title: str) -> tuple[bytes, str]:
    """Render ``data`` as ``fmt``; returns (body, content type). KeyError on unknown format."""
    content_type, render = EXPORTERS[fmt]
    return render(flatten_report(data), title, chart_series(data)), content_type
