# -*- coding: utf-8 -*-
from __future__ import annotations

from flask import Blueprint, current_app, request
from flask_login import login_required

from ...exports import Report, download
from ...exports.pdf import render_pdf
from ...exports.share import share_payload
from ...exports.xlsx import render_xlsx
from ...money import fmt_inr, fmt_pdf, parse_amount
from ...periods import parse_period, period_label
from ...security import current_auth
from ...web import listing, ok, payload, require_confirm
from ..staff import load_staff
from . import service

bp = Blueprint("payroll", __name__, url_prefix="/payroll")

HEADERS = ["Name", "Category", "Shifts", "Gross", "Advances", "Carry Fwd", "Payable", "Status"]


def _department():
    auth = current_auth()
    year, month = parse_period(request.args.get("m"))
    rows, totals = service.compute_department(
        auth, request.args.get("roster"), request.args.get("category"), year, month
    )
    return year, month, rows, totals


def _salary_report(year, month, rows, totals, money, text_money) -> Report:
    return Report(
        title=f"Salary Report - {period_label(year, month)}",
        subtitle=f"Category: {request.args.get('category') or 'All'}",
        headers=HEADERS,
        rows=[
            [
                r.name,
                r.category,
                r.total_shifts,
                money(r.shift_amount),
                money(r.total_advances),
                money(r.carry_forward),
                money(r.payable),
                "Paid" if r.is_paid else "Pending",
            ]
            for r in rows
        ],
        summary=[
            f"Total Gross: {text_money(totals.shift_amount)}",
            f"Total Advances: {text_money(totals.total_advances)}",
            f"Total Payable: {text_money(totals.payable)}",
            f"Paid: {totals.paid_count} of {totals.staff_count}",
        ],
    )


# ------------ summary / single staff -----------------------------------------
@bp.get("/")
@login_required
def index():
    year, month, rows, totals = _department()
    return listing(
        "salaries",
        [r.to_dict() for r in rows],
        period=f"{year}-{month:02d}",
        totals=totals.to_dict(),
    )


@bp.get("/<int:staff_id>")
@login_required
def view(staff_id: int):
    auth = current_auth()
    year, month = parse_period(request.args.get("m"))
    s = load_staff(staff_id, auth)
    calc = service.compute(s, year, month)
    rec = service.find_record(s.id, year, month)
    return ok(
        salary=calc.to_dict(),
        committed=rec.to_dict() if rec else None,
    )


# ------------ payment state ---------------------------------------------------
@bp.post("/<int:staff_id>/pay")
@login_required
def pay(staff_id: int):
    auth = current_auth()
    data = payload()
    require_confirm(data)
    year, month = parse_period(data.get("m") or request.args.get("m"))
    expected = data.get("expected_payable")
    if expected not in (None, ""):
        expected = parse_amount(expected, field="expected_payable", positive=None)
    else:
        expected = None

    s = load_staff(staff_id, auth)
    rec = service.mark_paid(s, year, month, auth, expected_payable=expected)
    return ok(record=rec.to_dict(), salary=service.compute(s, year, month).to_dict())


@bp.post("/<int:staff_id>/unpay")
@login_required
def unpay(staff_id: int):
    auth = current_auth()
    data = payload()
    require_confirm(data)
    year, month = parse_period(data.get("m") or request.args.get("m"))
    s = load_staff(staff_id, auth)
    rec = service.mark_unpaid(
        s, year, month, auth,
        restore_advances=bool(current_app.config.get("UNPAID_RESTORES_ADVANCES")),
    )
    return ok(record=rec.to_dict(), salary=service.compute(s, year, month).to_dict())


# ------------ exports ---------------------------------------------------------
@bp.get("/export.pdf")
@login_required
def export_pdf():
    year, month, rows, totals = _department()
    report = _salary_report(year, month, rows, totals, fmt_pdf, fmt_pdf)
    data = render_pdf(report, font_path=current_app.config.get("PDF_FONT_PATH"))
    return download(data, "pdf", f"Salary_Report_{year}-{month:02d}")


@bp.get("/export.xlsx")
@login_required
def export_xlsx():
    year, month, rows, totals = _department()
    report = _salary_report(year, month, rows, totals, lambda v: v, fmt_inr)
    data = render_xlsx(report, sheet_name="Salary")
    return download(data, "xlsx", f"Salary_Report_{year}-{month:02d}")


@bp.get("/share")
@login_required
def share():
    year, month, rows, totals = _department()
    lines = [f"📊 *Salary Report - {period_label(year, month)}*", ""]
    for r in rows:
        mark = "✅" if r.is_paid else "⏳"
        lines.append(f"{mark} {r.name} ({r.category})")
        lines.append(f"   Shifts: {r.total_shifts} | Gross: {fmt_inr(r.shift_amount)}")
        lines.append(f"   Advances: {fmt_inr(r.total_advances)} | Payable: {fmt_inr(r.payable)}")
        lines.append("")
    lines += [
        "💰 *Summary*",
        f"Total Gross: {fmt_inr(totals.shift_amount)}",
        f"Total Advances: {fmt_inr(totals.total_advances)}",
        f"Total Payable: {fmt_inr(totals.payable)}",
    ]
    return ok(**share_payload("\n".join(lines)))
