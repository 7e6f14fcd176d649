# -*- coding: utf-8 -*-
"""
Crusher reports.

Dispatch: product loads sent out to parties (quantity and amount).
Bolder:   boulder loads received from suppliers (no money recorded).

Both lists take ?date=YYYY-MM-DD for a daily report or ?m=YYYY-MM for a
monthly one, plus ?q= to filter by party / company name.
"""
from __future__ import annotations

from decimal import Decimal

from flask import Blueprint, current_app, request
from flask_login import login_required

from ...acl import ROLE_CRUSHER_ADMIN, ROLE_MANAGER
from ...extensions import db
from ...exports import Report, download, report_footer, report_notes
from ...exports.pdf import render_pdf
from ...exports.share import share_payload
from ...exports.xlsx import render_xlsx
from ...logger import get_logger
from ...models.ledger import BolderEntry, DispatchEntry
from ...money import D, fmt_inr, fmt_pdf, parse_amount
from ...periods import month_bounds, parse_day, parse_period, period_label
from ...persistence import commit, load_row
from ...security import current_auth, roles_required
from ...web import apply_text, listing, ok, payload, require_confirm

logger = get_logger("crusher")

bp = Blueprint("crusher", __name__, url_prefix="/crusher")

CRUSHER_ROLES = (ROLE_MANAGER, ROLE_CRUSHER_ADMIN)

DISPATCH_HEADERS = ["Date", "Party", "Product", "Truck", "Challan", "RST", "Qty", "Amount"]
BOLDER_HEADERS = ["Date", "Company", "Quality", "Truck", "Challan", "RST"]


# ------------ helpers ---------------------------------------------------------
def _entries(model, name_column, heading: str):
    """Rows for one day or one month, newest first, and the report title."""
    q = model.query
    if request.args.get("date"):
        day = parse_day(request.args.get("date"))
        q = q.filter(model.day == day)
        title = f"{heading} - {day.strftime('%d-%m-%Y')}"
    else:
        year, month = parse_period(request.args.get("m"))
        start, end = month_bounds(year, month)
        q = q.filter(model.day >= start, model.day <= end)
        title = f"{heading} - {period_label(year, month)}"
    name = (request.args.get("q") or "").strip()
    if name:
        q = q.filter(name_column.ilike(f"%{name}%"))
    return q.order_by(model.day.desc(), model.id.desc()).all(), title


def _set_day(row, data: dict) -> None:
    # no date on a new entry means today (column default)
    if data.get("date"):
        row.day = parse_day(data.get("date"))


def _dispatch_fields(d: DispatchEntry, data: dict, creating: bool) -> None:
    apply_text(d, data, ("party_name", "truck_number", "product_name"),
               required=("party_name", "truck_number", "product_name"), creating=creating)
    if creating or "quantity" in data:
        d.quantity = parse_amount(data.get("quantity"), field="quantity")
    if creating or "amount" in data:
        d.amount = parse_amount(data.get("amount"))
    apply_text(d, data, ("challan_number", "rst_number", "notes"), creating=creating)
    _set_day(d, data)


def _bolder_fields(b: BolderEntry, data: dict, creating: bool) -> None:
    apply_text(b, data, ("company_name", "quality", "truck_number"),
               required=("company_name", "quality", "truck_number"), creating=creating)
    apply_text(b, data, ("challan_number", "rst_number", "notes"), creating=creating)
    _set_day(b, data)


def dispatch_totals(rows) -> dict:
    return {
        "entries": len(rows),
        "quantity": sum((D(d.quantity) for d in rows), Decimal("0")),
        "amount": sum((D(d.amount) for d in rows), Decimal("0")),
    }


def _dispatch_report(rows, title, money, text_money) -> Report:
    totals = dispatch_totals(rows)
    return Report(
        title=title,
        headers=DISPATCH_HEADERS,
        rows=[
            [
                d.day.strftime("%d-%m-%Y"),
                d.party_name,
                d.product_name,
                d.truck_number,
                d.challan_number or "-",
                d.rst_number or "-",
                D(d.quantity),
                money(d.amount),
            ]
            for d in rows
        ],
        summary=[
            f"Total Entries: {totals['entries']}",
            f"Total Qty: {totals['quantity']}",
            f"Total Amount: {text_money(totals['amount'])}",
        ],
    )


def _bolder_report(rows, title) -> Report:
    return Report(
        title=title,
        headers=BOLDER_HEADERS,
        rows=[
            [
                b.day.strftime("%d-%m-%Y"),
                b.company_name,
                b.quality,
                b.truck_number,
                b.challan_number or "-",
                b.rst_number or "-",
            ]
            for b in rows
        ],
        summary=[f"Total Entries: {len(rows)}"],
    )


def _slip_refs(row) -> str:
    refs = ""
    if row.challan_number:
        refs += f" | Ch: {row.challan_number}"
    if row.rst_number:
        refs += f" | RST: {row.rst_number}"
    return refs


def _delete(model, row_id: int, action: str):
    auth = current_auth()
    require_confirm(payload())
    row = load_row(model, row_id)
    db.session.delete(row)
    commit(action, logger)
    logger.info(f"{action} #{row_id} by user #{auth.user_id}")
    return ok(deleted=row_id)


# ------------ dispatch --------------------------------------------------------
@bp.get("/dispatch")
@login_required
@roles_required(*CRUSHER_ROLES)
def dispatches():
    rows, title = _entries(DispatchEntry, DispatchEntry.party_name, "Dispatch Report")
    totals = dispatch_totals(rows)
    return listing(
        "dispatches",
        [d.to_dict() for d in rows],
        label=title,
        totals={**totals, "quantity": str(totals["quantity"]), "amount": str(totals["amount"])},
    )


@bp.post("/dispatch")
@login_required
@roles_required(*CRUSHER_ROLES)
def add_dispatch():
    auth = current_auth()
    d = DispatchEntry()
    _dispatch_fields(d, payload(), creating=True)
    db.session.add(d)
    commit("add dispatch entry", logger)
    logger.info(f"dispatch #{d.id} {d.party_name!r} {d.quantity} x {d.product_name!r} by user #{auth.user_id}")
    return ok(dispatch=d.to_dict()), 201


@bp.post("/dispatch/<int:entry_id>/update")
@login_required
@roles_required(*CRUSHER_ROLES)
def update_dispatch(entry_id: int):
    d = load_row(DispatchEntry, entry_id)
    _dispatch_fields(d, payload(), creating=False)
    commit("update dispatch entry", logger)
    return ok(dispatch=d.to_dict())


@bp.post("/dispatch/<int:entry_id>/delete")
@login_required
@roles_required(*CRUSHER_ROLES)
def delete_dispatch(entry_id: int):
    return _delete(DispatchEntry, entry_id, "delete dispatch entry")


@bp.get("/dispatch/export.pdf")
@login_required
@roles_required(*CRUSHER_ROLES)
def dispatch_pdf():
    rows, title = _entries(DispatchEntry, DispatchEntry.party_name, "Dispatch Report")
    data = render_pdf(_dispatch_report(rows, title, fmt_pdf, fmt_pdf), font_path=current_app.config.get("PDF_FONT_PATH"))
    return download(data, "pdf", title)


@bp.get("/dispatch/export.xlsx")
@login_required
@roles_required(*CRUSHER_ROLES)
def dispatch_xlsx():
    rows, title = _entries(DispatchEntry, DispatchEntry.party_name, "Dispatch Report")
    data = render_xlsx(_dispatch_report(rows, title, D, fmt_inr), sheet_name="Dispatch")
    return download(data, "xlsx", title)


@bp.get("/dispatch/share")
@login_required
@roles_required(*CRUSHER_ROLES)
def dispatch_share():
    rows, title = _entries(DispatchEntry, DispatchEntry.party_name, "Dispatch Report")
    totals = dispatch_totals(rows)
    lines = [
        f"📊 *{title}*",
        report_footer(),
        "",
        "*Summary:*",
        f"Total Entries: {totals['entries']}",
        f"Total Quantity: {totals['quantity']}",
        f"Total Amount: {fmt_inr(totals['amount'])}",
        "",
        "*Details:*",
    ]
    for i, d in enumerate(rows, 1):
        lines.append(
            f"{i}. {d.day.strftime('%d-%m-%Y')} | {d.party_name} | {d.product_name} | Qty: {d.quantity} | "
            f"{fmt_inr(d.amount)} | Truck: {d.truck_number}{_slip_refs(d)}"
        )
    lines += ["", *report_notes()]
    return ok(**share_payload("\n".join(lines)))


# ------------ bolder ----------------------------------------------------------
@bp.get("/bolder")
@login_required
@roles_required(*CRUSHER_ROLES)
def bolders():
    rows, title = _entries(BolderEntry, BolderEntry.company_name, "Bolder Report")
    return listing("bolders", [b.to_dict() for b in rows], label=title, entries=len(rows))


@bp.post("/bolder")
@login_required
@roles_required(*CRUSHER_ROLES)
def add_bolder():
    auth = current_auth()
    b = BolderEntry()
    _bolder_fields(b, payload(), creating=True)
    db.session.add(b)
    commit("add bolder entry", logger)
    logger.info(f"bolder #{b.id} {b.company_name!r} truck {b.truck_number} by user #{auth.user_id}")
    return ok(bolder=b.to_dict()), 201


@bp.post("/bolder/<int:entry_id>/update")
@login_required
@roles_required(*CRUSHER_ROLES)
def update_bolder(entry_id: int):
    b = load_row(BolderEntry, entry_id)
    _bolder_fields(b, payload(), creating=False)
    commit("update bolder entry", logger)
    return ok(bolder=b.to_dict())


@bp.post("/bolder/<int:entry_id>/delete")
@login_required
@roles_required(*CRUSHER_ROLES)
def delete_bolder(entry_id: int):
    return _delete(BolderEntry, entry_id, "delete bolder entry")


@bp.get("/bolder/export.pdf")
@login_required
@roles_required(*CRUSHER_ROLES)
def bolder_pdf():
    rows, title = _entries(BolderEntry, BolderEntry.company_name, "Bolder Report")
    data = render_pdf(_bolder_report(rows, title), font_path=current_app.config.get("PDF_FONT_PATH"))
    return download(data, "pdf", title)


@bp.get("/bolder/export.xlsx")
@login_required
@roles_required(*CRUSHER_ROLES)
def bolder_xlsx():
    rows, title = _entries(BolderEntry, BolderEntry.company_name, "Bolder Report")
    data = render_xlsx(_bolder_report(rows, title), sheet_name="Bolder")
    return download(data, "xlsx", title)


@bp.get("/bolder/share")
@login_required
@roles_required(*CRUSHER_ROLES)
def bolder_share():
    rows, title = _entries(BolderEntry, BolderEntry.company_name, "Bolder Report")
    lines = [f"📊 *{title}*", report_footer(), "", "*Summary:*", f"Total Entries: {len(rows)}", "", "*Details:*"]
    for i, b in enumerate(rows, 1):
        lines.append(
            f"{i}. {b.day.strftime('%d-%m-%Y')} | {b.company_name} | Quality: {b.quality} | "
            f"Truck: {b.truck_number}{_slip_refs(b)}"
        )
    lines += ["", *report_notes()]
    return ok(**share_payload("\n".join(lines)))
