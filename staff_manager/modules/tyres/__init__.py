# -*- coding: utf-8 -*-
from __future__ import annotations

from decimal import Decimal

from flask import Blueprint, current_app, request
from flask_login import login_required

from ...acl import ROLE_MANAGER
from ...errors import ValidationError
from ...extensions import db
from ...exports import Report, download
from ...exports.pdf import render_pdf
from ...exports.xlsx import render_xlsx
from ...logger import get_logger
from ...models.ledger import TyreSale
from ...money import D, fmt_inr, fmt_pdf, parse_amount
from ...periods import parse_day, parse_period, period_label
from ...persistence import commit, delete_rows, load_row
from ...security import current_auth, roles_required
from ...web import apply_text, id_list, listing, ok, payload, require_confirm
from ..petroleum import by_day, month_rows

logger = get_logger("tyres")

# tyre trading has no admin of its own
bp = Blueprint("tyres", __name__, url_prefix="/tyres")


def _fields(t: TyreSale, data: dict, creating: bool) -> None:
    if data.get("date"):
        t.day = parse_day(data.get("date"))
    elif creating:
        raise ValidationError("date is required", code="no_date")
    if creating or "amount" in data:
        t.amount = parse_amount(data.get("amount"))
    apply_text(t, data, ("notes",), creating=creating)


def _month():
    year, month = parse_period(request.args.get("m"))
    rows = month_rows(TyreSale, year, month)
    return year, month, rows, sum((D(t.amount) for t in rows), Decimal("0"))


def _report(year, month, rows, total, money, text_money) -> Report:
    return Report(
        title=f"Tyre Sales - {period_label(year, month)}",
        headers=["Date", "Amount", "Notes"],
        rows=[[t.day.strftime("%d-%m-%Y"), money(t.amount), t.notes or "-"] for t in rows],
        summary=[f"Total: {text_money(total)}"],
    )


@bp.get("/sales")
@login_required
@roles_required(ROLE_MANAGER)
def sales():
    year, month, rows, total = _month()
    return listing(
        "sales", [t.to_dict() for t in rows], period=f"{year}-{month:02d}", total=str(total), by_day=by_day(rows)
    )


@bp.post("/sales")
@login_required
@roles_required(ROLE_MANAGER)
def add_sale():
    auth = current_auth()
    t = TyreSale()
    _fields(t, payload(), creating=True)
    db.session.add(t)
    commit("add tyre sale", logger)
    logger.info(f"tyre sale #{t.id} {t.amount} on {t.day} by user #{auth.user_id}")
    return ok(sale=t.to_dict()), 201


@bp.post("/sales/<int:sale_id>/update")
@login_required
@roles_required(ROLE_MANAGER)
def update_sale(sale_id: int):
    t = load_row(TyreSale, sale_id)
    _fields(t, payload(), creating=False)
    commit("update tyre sale", logger)
    return ok(sale=t.to_dict())


@bp.post("/sales/delete")
@login_required
@roles_required(ROLE_MANAGER)
def delete_sales():
    auth = current_auth()
    data = payload()
    require_confirm(data)
    ids = id_list(data)
    delete_rows(TyreSale, ids, "delete tyre sales", logger)
    logger.info(f"{len(ids)} tyre sale(s) deleted by user #{auth.user_id}: {ids}")
    return ok(deleted=ids)


@bp.get("/sales/export.pdf")
@login_required
@roles_required(ROLE_MANAGER)
def export_pdf():
    year, month, rows, total = _month()
    data = render_pdf(_report(year, month, rows, total, fmt_pdf, fmt_pdf),
                      font_path=current_app.config.get("PDF_FONT_PATH"))
    return download(data, "pdf", f"tyre-sales-{year}-{month:02d}")


@bp.get("/sales/export.xlsx")
@login_required
@roles_required(ROLE_MANAGER)
def export_xlsx():
    year, month, rows, total = _month()
    data = render_xlsx(_report(year, month, rows, total, D, fmt_inr), sheet_name="Tyre Sales")
    return download(data, "xlsx", f"tyre-sales-{year}-{month:02d}")
