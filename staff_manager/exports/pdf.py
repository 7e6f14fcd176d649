# -*- coding: utf-8 -*-
"""
PDF Writer

Renders a Report as an A4 landscape table with fpdf2. Core fonts cannot
print the rupee sign or Devanagari, so text is reduced to latin-1 unless a
Unicode TTF is configured through PDF_FONT_PATH; the Hindi note is only
printed in that case.
"""
from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import List, Optional

from fpdf import FPDF
from fpdf.errors import FPDFException

from ..logger import get_logger
from . import Report, report_footer, report_notes

logger = get_logger("exports.pdf")

FALLBACK_FONT = "Helvetica"
UNICODE_FONT = "ReportFont"


class ReportPdf(FPDF):
    """FPDF with a centered title header and a page-number footer."""

    def __init__(self, title: str = "", font_path: Optional[str] = None):
        super().__init__(orientation="L", unit="mm", format="A4")
        self.title_text = title
        self.has_unicode_font = False
        self.report_font = FALLBACK_FONT
        self._setup_font(font_path)

    def _setup_font(self, font_path: Optional[str]) -> None:
        if not font_path:
            return
        path = Path(font_path)
        if not path.exists():
            logger.warning(f"PDF font not found: {path}, using {FALLBACK_FONT}")
            return
        try:
            self.add_font(UNICODE_FONT, "", str(path))
        except (FPDFException, OSError, RuntimeError) as e:
            logger.warning(f"cannot load PDF font {path}: {e}")
            return
        self.report_font = UNICODE_FONT
        self.has_unicode_font = True

    def text_safe(self, value) -> str:
        text = "" if value is None else str(value)
        if self.has_unicode_font:
            return text
        return text.replace("₹", "Rs. ").encode("latin-1", "replace").decode("latin-1")

    def use_font(self, size: float, bold: bool = False) -> None:
        # the TTF is registered without a bold face
        style = "B" if bold and not self.has_unicode_font else ""
        self.set_font(self.report_font, style, size)

    def header(self) -> None:
        self.use_font(14, bold=True)
        self.cell(0, 9, self.text_safe(self.title_text), align="C", new_x="LMARGIN", new_y="NEXT")
        self.ln(2)

    def footer(self) -> None:
        self.set_y(-12)
        self.use_font(8)
        self.cell(0, 10, f"Page {self.page_no()}/{{nb}}", align="C")


def _column_widths(pdf: ReportPdf, report: Report) -> List[float]:
    # first column (names) gets a double share
    n = max(len(report.headers), 1)
    usable = pdf.w - pdf.l_margin - pdf.r_margin
    unit = usable / (n + 1)
    return [unit * 2] + [unit] * (n - 1)


def _table(pdf: ReportPdf, report: Report) -> None:
    widths = _column_widths(pdf, report)
    row_h = 7

    def header_row():
        pdf.use_font(9, bold=True)
        pdf.set_fill_color(68, 114, 196)
        pdf.set_text_color(255, 255, 255)
        for w, h in zip(widths, report.headers):
            pdf.cell(w, row_h, pdf.text_safe(h), border=1, align="C", fill=True)
        pdf.ln(row_h)
        pdf.set_text_color(0, 0, 0)
        pdf.use_font(9)

    header_row()
    for row in report.rows:
        if pdf.get_y() + row_h > pdf.page_break_trigger:
            pdf.add_page()
            header_row()
        for i, (w, value) in enumerate(zip(widths, row)):
            pdf.cell(w, row_h, pdf.text_safe(value), border=1, align="L" if i == 0 else "R")
        pdf.ln(row_h)


def render_pdf(report: Report, font_path: Optional[str] = None,
               generated_at: Optional[datetime] = None) -> bytes:
    pdf = ReportPdf(title=report.title, font_path=font_path)
    pdf.alias_nb_pages()
    pdf.set_auto_page_break(auto=True, margin=15)
    pdf.add_page()

    pdf.use_font(10)
    pdf.cell(0, 6, pdf.text_safe(report_footer()), new_x="LMARGIN", new_y="NEXT")
    if report.subtitle:
        pdf.cell(0, 6, pdf.text_safe(report.subtitle), new_x="LMARGIN", new_y="NEXT")
    stamp = (generated_at or datetime.now()).strftime("%d-%m-%Y %H:%M")
    pdf.cell(0, 6, f"Generated: {stamp}", new_x="LMARGIN", new_y="NEXT")
    pdf.ln(3)

    if report.rows:
        _table(pdf, report)
    else:
        pdf.cell(0, 8, "No records", new_x="LMARGIN", new_y="NEXT")

    pdf.ln(5)
    pdf.use_font(11, bold=True)
    for line in report.summary:
        pdf.cell(0, 7, pdf.text_safe(line), new_x="LMARGIN", new_y="NEXT")

    pdf.ln(4)
    pdf.use_font(9)
    pdf.set_text_color(100, 100, 100)
    english, hindi = report_notes()
    pdf.cell(0, 6, pdf.text_safe(english), new_x="LMARGIN", new_y="NEXT")
    if pdf.has_unicode_font:
        pdf.cell(0, 6, hindi, new_x="LMARGIN", new_y="NEXT")

    data = bytes(pdf.output())
    logger.info(f"PDF rendered: {report.title!r}, {len(report.rows)} row(s), {len(data)} bytes")
    return data
