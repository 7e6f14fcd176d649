# -*- coding: utf-8 -*-
"""
Report exports.

Screens build a `Report` (title, header row, data rows, summary lines) and
hand it to one of the renderers:

- `pdf.render_pdf`   -> PDF bytes (fpdf2)
- `xlsx.render_xlsx` -> XLSX bytes (openpyxl)
- `share.share_link` -> wa.me URL for a plain-text message
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, List, Sequence

from flask import Response, current_app


@dataclass
class Report:
    title: str
    headers: Sequence[str]
    rows: List[Sequence[Any]] = field(default_factory=list)
    summary: List[str] = field(default_factory=list)  # lines printed under the table
    subtitle: str = ""


def report_footer() -> str:
    return current_app.config.get("REPORT_TITLE") or "Tibrewal Staff Manager"


def report_notes() -> tuple[str, str]:
    """(english, hindi) support note printed at the bottom of every export."""
    phone = current_app.config.get("SUPPORT_PHONE") or ""
    return (
        f"Note: If you have any queries, contact {phone}",
        f"नोट: यदि आपके कोई प्रश्न हैं, तो {phone} पर संपर्क करें",
    )


MIMETYPES = {
    "pdf": "application/pdf",
    "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
}


def attachment_name(stem: str, ext: str) -> str:
    safe = "".join(ch if ch.isalnum() or ch in "-_" else "_" for ch in stem.strip())
    return f"{safe or 'report'}.{ext}"


def download(data: bytes, ext: str, stem: str) -> Response:
    return Response(
        data,
        mimetype=MIMETYPES[ext],
        headers={"Content-Disposition": f'attachment; filename="{attachment_name(stem, ext)}"'},
    )
