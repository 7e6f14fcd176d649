# -*- coding: utf-8 -*-
"""
Excel Writer

Layout (one sheet):
    title
    footer label
    (blank)
    header row
    data rows
    (blank)
    English note
    Hindi note
"""
from __future__ import annotations

from io import BytesIO

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter

from ..logger import get_logger
from . import Report, report_footer, report_notes

logger = get_logger("exports.xlsx")

HEADER_FILL = PatternFill(start_color="4472C4", end_color="4472C4", fill_type="solid")
MAX_WIDTH = 30


def render_xlsx(report: Report, sheet_name: str = "Sheet1") -> bytes:
    wb = Workbook()
    ws = wb.active
    ws.title = sheet_name[:31]

    if report.title:
        ws.append([report.title])
        ws.cell(ws.max_row, 1).font = Font(bold=True, size=13)
        ws.append([report_footer()])
        if report.subtitle:
            ws.append([report.subtitle])
        ws.append([])

    ws.append(list(report.headers))
    header_row = ws.max_row
    for col in range(1, len(report.headers) + 1):
        cell = ws.cell(header_row, col)
        cell.font = Font(bold=True, color="FFFFFF")
        cell.fill = HEADER_FILL
        cell.alignment = Alignment(horizontal="center")

    for row in report.rows:
        ws.append(list(row))

    if report.summary:
        ws.append([])
        for line in report.summary:
            ws.append([line])

    english, hindi = report_notes()
    ws.append([])
    ws.append([english])
    ws.append([hindi])

    for i, header in enumerate(report.headers):
        longest = max([len(str(header))] + [len(str(r[i] if i < len(r) and r[i] is not None else "")) for r in report.rows])
        ws.column_dimensions[get_column_letter(i + 1)].width = min(longest + 2, MAX_WIDTH)

    buf = BytesIO()
    wb.save(buf)
    logger.info(f"XLSX rendered: {report.title!r}, {len(report.rows)} row(s)")
    return buf.getvalue()
