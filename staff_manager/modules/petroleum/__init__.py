# -*- coding: utf-8 -*-
"""
Petroleum day book: pump sales (UPI / cash) and payments received, kept
per month. Neither ledger touches payroll.
"""
from __future__ import annotations

from decimal import Decimal
from typing import Any

from flask import Blueprint, current_app, request
from flask_login import login_required

from ...acl import ROLE_MANAGER, ROLE_PETROLEUM_ADMIN
from ...errors import ValidationError
from ...extensions import db
from ...exports import Report, download, report_footer
from ...exports.pdf import render_pdf
from ...exports.share import share_payload
from ...exports.xlsx import render_xlsx
from ...logger import get_logger
from ...models.ledger import PetroleumPayment, PetroleumSale, SaleType
from ...money import D, fmt_inr, fmt_pdf, parse_amount
from ...periods import month_bounds, parse_day, parse_period, period_label
from ...persistence import commit, delete_rows, load_row
from ...security import current_auth, roles_required
from ...web import apply_text, id_list, listing, ok, payload, require_confirm

logger = get_logger("petroleum")

bp = Blueprint("petroleum", __name__, url_prefix="/petroleum")

PETROLEUM_ROLES = (ROLE_MANAGER, ROLE_PETROLEUM_ADMIN)


# ------------ helpers ---------------------------------------------------------
def month_rows(model, year: int, month: int):
    start, end = month_bounds(year, month)
    return (
        model.query
        .filter(model.day >= start, model.day <= end)
        .order_by(model.day.desc(), model.id.desc())
        .all()
    )


def _sale_type(value, field: str = "sale_type") -> str:
    try:
        return SaleType((value or "").strip().lower()).value
    except ValueError:
        raise ValidationError(f"{field} must be upi or cash", code=f"bad_{field}") from None


def _entry_fields(row, data: dict[str, Any], creating: bool, type_field: str) -> None:
    if data.get("date"):
        row.day = parse_day(data.get("date"))
    elif creating:
        raise ValidationError("date is required", code="no_date")
    if creating or type_field in data:
        setattr(row, type_field, _sale_type(data.get(type_field) or SaleType.UPI.value, type_field))
    if creating or "amount" in data:
        row.amount = parse_amount(data.get("amount"))
    apply_text(row, data, ("notes",), creating=creating)


def sale_totals(rows) -> dict:
    """UPI, cash and combined totals for a month of sales."""
    upi = sum((D(s.amount) for s in rows if s.sale_type == SaleType.UPI.value), Decimal("0"))
    cash = sum((D(s.amount) for s in rows if s.sale_type == SaleType.CASH.value), Decimal("0"))
    return {"upi": upi, "cash": cash, "total": upi + cash}


def by_day(rows) -> dict[str, str]:
    """Calendar view: date -> total taken that day."""
    days: dict[str, Decimal] = {}
    for r in rows:
        key = r.day.isoformat()
        days[key] = days.get(key, Decimal("0")) + D(r.amount)
    return {k: str(v) for k, v in sorted(days.items())}


def _sales():
    """Month of sales; ?type=upi|cash narrows the rows, totals always cover the month."""
    year, month = parse_period(request.args.get("m"))
    rows = month_rows(PetroleumSale, year, month)
    totals = sale_totals(rows)
    if request.args.get("type"):
        wanted = _sale_type(request.args.get("type"))
        rows = [s for s in rows if s.sale_type == wanted]
    return year, month, rows, totals


def _sales_report(year, month, rows, totals, money, text_money) -> Report:
    return Report(
        title=f"Petroleum Sales - {period_label(year, month)}",
        headers=["Date", "Type", "Amount", "Notes"],
        rows=[[s.day.strftime("%d-%m-%Y"), s.sale_type.upper(), money(s.amount), s.notes or "-"] for s in rows],
        summary=[
            f"UPI: {text_money(totals['upi'])}",
            f"Cash: {text_money(totals['cash'])}",
            f"Total: {text_money(totals['total'])}",
        ],
    )


def _payments_report(year, month, rows, money, text_money) -> Report:
    total = sum((D(p.amount) for p in rows), Decimal("0"))
    return Report(
        title=f"Petroleum Payments - {period_label(year, month)}",
        headers=["Date", "Type", "Amount", "Notes"],
        rows=[[p.day.strftime("%d-%m-%Y"), p.payment_type.upper(), money(p.amount), p.notes or "-"] for p in rows],
        summary=[f"Total: {text_money(total)}"],
    )


def _delete_many(model, action: str):
    auth = current_auth()
    data = payload()
    require_confirm(data)
    ids = id_list(data)
    delete_rows(model, ids, action, logger)
    logger.info(f"{action}: {len(ids)} row(s) by user #{auth.user_id}: {ids}")
    return ok(deleted=ids)


# ------------ sales -----------------------------------------------------------
@bp.get("/sales")
@login_required
@roles_required(*PETROLEUM_ROLES)
def sales():
    year, month, rows, totals = _sales()
    return listing(
        "sales",
        [s.to_dict() for s in rows],
        period=f"{year}-{month:02d}",
        totals={k: str(v) for k, v in totals.items()},
        by_day=by_day(rows),
    )


@bp.post("/sales")
@login_required
@roles_required(*PETROLEUM_ROLES)
def add_sale():
    auth = current_auth()
    s = PetroleumSale()
    _entry_fields(s, payload(), creating=True, type_field="sale_type")
    db.session.add(s)
    commit("add petroleum sale", logger)
    logger.info(f"petroleum sale #{s.id} {s.sale_type} {s.amount} on {s.day} by user #{auth.user_id}")
    return ok(sale=s.to_dict()), 201


@bp.post("/sales/<int:sale_id>/update")
@login_required
@roles_required(*PETROLEUM_ROLES)
def update_sale(sale_id: int):
    s = load_row(PetroleumSale, sale_id)
    _entry_fields(s, payload(), creating=False, type_field="sale_type")
    commit("update petroleum sale", logger)
    return ok(sale=s.to_dict())


@bp.post("/sales/delete")
@login_required
@roles_required(*PETROLEUM_ROLES)
def delete_sales():
    return _delete_many(PetroleumSale, "delete petroleum sales")


@bp.get("/sales/export.pdf")
@login_required
@roles_required(*PETROLEUM_ROLES)
def sales_pdf():
    year, month, rows, totals = _sales()
    report = _sales_report(year, month, rows, totals, fmt_pdf, fmt_pdf)
    data = render_pdf(report, font_path=current_app.config.get("PDF_FONT_PATH"))
    return download(data, "pdf", f"petroleum-sales-{year}-{month:02d}")


@bp.get("/sales/export.xlsx")
@login_required
@roles_required(*PETROLEUM_ROLES)
def sales_xlsx():
    year, month, rows, totals = _sales()
    data = render_xlsx(_sales_report(year, month, rows, totals, D, fmt_inr), sheet_name="Sales")
    return download(data, "xlsx", f"petroleum-sales-{year}-{month:02d}")


@bp.get("/sales/share")
@login_required
@roles_required(*PETROLEUM_ROLES)
def sales_share():
    year, month, _rows, totals = _sales()
    lines = [
        f"⛽ *Petroleum Sales - {period_label(year, month)}*",
        "",
        "*Summary*",
        f"💳 UPI: {fmt_inr(totals['upi'])}",
        f"💵 Cash: {fmt_inr(totals['cash'])}",
        f"📊 Total: {fmt_inr(totals['total'])}",
        "",
        f"_{report_footer()}_",
    ]
    return ok(**share_payload("\n".join(lines)))


# ------------ payments --------------------------------------------------------
@bp.get("/payments")
@login_required
@roles_required(*PETROLEUM_ROLES)
def payments():
    year, month = parse_period(request.args.get("m"))
    rows = month_rows(PetroleumPayment, year, month)
    total = sum((D(p.amount) for p in rows), Decimal("0"))
    return listing(
        "payments",
        [p.to_dict() for p in rows],
        period=f"{year}-{month:02d}",
        total=str(total),
        by_day=by_day(rows),
    )


@bp.post("/payments")
@login_required
@roles_required(*PETROLEUM_ROLES)
def add_payment():
    auth = current_auth()
    p = PetroleumPayment()
    _entry_fields(p, payload(), creating=True, type_field="payment_type")
    db.session.add(p)
    commit("add petroleum payment", logger)
    logger.info(f"petroleum payment #{p.id} {p.amount} on {p.day} by user #{auth.user_id}")
    return ok(payment=p.to_dict()), 201


@bp.post("/payments/<int:payment_id>/update")
@login_required
@roles_required(*PETROLEUM_ROLES)
def update_payment(payment_id: int):
    p = load_row(PetroleumPayment, payment_id)
    _entry_fields(p, payload(), creating=False, type_field="payment_type")
    commit("update petroleum payment", logger)
    return ok(payment=p.to_dict())


@bp.post("/payments/delete")
@login_required
@roles_required(*PETROLEUM_ROLES)
def delete_payments():
    return _delete_many(PetroleumPayment, "delete petroleum payments")


@bp.get("/payments/export.pdf")
@login_required
@roles_required(*PETROLEUM_ROLES)
def payments_pdf():
    year, month = parse_period(request.args.get("m"))
    rows = month_rows(PetroleumPayment, year, month)
    data = render_pdf(_payments_report(year, month, rows, fmt_pdf, fmt_pdf),
                      font_path=current_app.config.get("PDF_FONT_PATH"))
    return download(data, "pdf", f"petroleum-payments-{year}-{month:02d}")


@bp.get("/payments/export.xlsx")
@login_required
@roles_required(*PETROLEUM_ROLES)
def payments_xlsx():
    year, month = parse_period(request.args.get("m"))
    rows = month_rows(PetroleumPayment, year, month)
    data = render_xlsx(_payments_report(year, month, rows, D, fmt_inr), sheet_name="Payments")
    return download(data, "xlsx", f"petroleum-payments-{year}-{month:02d}")
