# -*- coding: utf-8 -*-
from __future__ import annotations

from datetime import date
from decimal import Decimal

from flask import Blueprint, current_app, request
from flask_login import login_required

from ...acl import AuthContext
from ...errors import NotFound, ValidationError
from ...extensions import db
from ...exports import Report, download
from ...exports.pdf import render_pdf
from ...exports.xlsx import render_xlsx
from ...logger import get_logger
from ...models.advance import Advance
from ...models.staff import Staff
from ...money import fmt_inr, fmt_pdf, parse_amount
from ...periods import month_bounds, parse_day, parse_period, period_label
from ...persistence import commit, unit_of_work
from ...security import current_auth
from ...web import flag_arg, id_list, int_arg, listing, ok, payload, require_confirm
from ..staff import list_staff, load_staff

logger = get_logger("advances")

bp = Blueprint("advances", __name__, url_prefix="/advances")


def load_advance(advance_id: int, auth: AuthContext) -> Advance:
    a = db.session.get(Advance, advance_id)
    if not a:
        raise NotFound(f"advance #{advance_id} not found")
    load_staff(a.staff_id, auth)
    return a


def query_advances(auth: AuthContext):
    """
    Advances visible to `auth`, filtered by the request args:
    ?pending=1 -> every undeducted advance, otherwise ?m=YYYY-MM (default: this month).
    """
    staff = list_staff(
        auth,
        roster=request.args.get("roster"),
        category=request.args.get("category"),
        include_inactive=True,
    )
    names = {s.id: s for s in staff}
    q = Advance.query.filter(Advance.staff_id.in_(list(names) or [0]))
    if request.args.get("staff_id"):
        q = q.filter(Advance.staff_id == int_arg(request.args.get("staff_id"), "staff_id"))

    if flag_arg("pending"):
        q = q.filter(Advance.is_deducted.is_(False))
        label = "Pending advances"
    else:
        year, month = parse_period(request.args.get("m"))
        start, end = month_bounds(year, month)
        q = q.filter(Advance.day >= start, Advance.day <= end)
        label = f"Advances - {period_label(year, month)}"

    rows = q.order_by(Advance.day.desc(), Advance.id.desc()).all()
    return rows, names, label


def _row(a: Advance, staff: dict[int, Staff]) -> dict:
    d = a.to_dict()
    s = staff.get(a.staff_id)
    d["staff_name"] = s.name if s else ""
    d["category"] = s.category if s else ""
    return d


def _report(rows, staff, label, money, text_money) -> Report:
    total = sum((Decimal(str(a.amount)) for a in rows), Decimal("0"))
    pending = sum((Decimal(str(a.amount)) for a in rows if not a.is_deducted), Decimal("0"))
    return Report(
        title=label,
        headers=["Name", "Category", "Date", "Amount", "Status", "Notes"],
        rows=[
            [
                staff[a.staff_id].name if a.staff_id in staff else "",
                staff[a.staff_id].category if a.staff_id in staff else "",
                a.day.strftime("%d-%m-%Y"),
                money(a.amount),
                "Deducted" if a.is_deducted else "Pending",
                a.notes or "",
            ]
            for a in rows
        ],
        summary=[f"Total: {text_money(total)}", f"Pending: {text_money(pending)}"],
    )


def _set_deducted(advance_id: int, deducted: bool):
    auth = current_auth()
    a = load_advance(advance_id, auth)
    a.is_deducted = deducted
    if not deducted:
        a.deducted_in_id = None
    commit("update advance", logger)
    logger.info(f"advance #{a.id} marked {'deducted' if deducted else 'pending'} by user #{auth.user_id}")
    return ok(advance=a.to_dict())


# ------------ routes ----------------------------------------------------------
@bp.get("/")
@login_required
def index():
    rows, staff, label = query_advances(current_auth())
    total = sum((Decimal(str(a.amount)) for a in rows), Decimal("0"))
    return listing("advances", [_row(a, staff) for a in rows], label=label, total=str(total))


@bp.post("/")
@login_required
def create():
    auth = current_auth()
    data = payload()
    s = load_staff(int_arg(data.get("staff_id"), "staff_id"), auth)
    if not s.is_active:
        raise ValidationError("staff member is inactive", code="inactive_staff")
    a = Advance(
        staff_id=s.id,
        amount=parse_amount(data.get("amount")),
        day=parse_day(data.get("date")) if data.get("date") else date.today(),
        notes=(data.get("notes") or "").strip(),
        is_deducted=False,
    )
    db.session.add(a)
    commit("add advance", logger)
    logger.info(f"advance #{a.id} {a.amount} for staff #{s.id} by user #{auth.user_id}")
    return ok(advance=a.to_dict()), 201


@bp.post("/<int:advance_id>/delete")
@login_required
def delete(advance_id: int):
    auth = current_auth()
    require_confirm(payload())
    a = load_advance(advance_id, auth)
    db.session.delete(a)
    commit("delete advance", logger)
    logger.info(f"advance #{advance_id} deleted by user #{auth.user_id}")
    return ok(deleted=[advance_id])


@bp.post("/bulk-delete")
@login_required
def bulk_delete():
    auth = current_auth()
    data = payload()
    require_confirm(data)
    ids = id_list(data)

    with unit_of_work("bulk delete advances", logger):
        # every id must be visible before anything is removed
        for a in [load_advance(i, auth) for i in ids]:
            db.session.delete(a)

    logger.info(f"{len(ids)} advance(s) deleted by user #{auth.user_id}: {ids}")
    return ok(deleted=ids)


@bp.post("/<int:advance_id>/deduct")
@login_required
def deduct(advance_id: int):
    return _set_deducted(advance_id, True)


@bp.post("/<int:advance_id>/undeduct")
@login_required
def undeduct(advance_id: int):
    return _set_deducted(advance_id, False)


@bp.get("/export.pdf")
@login_required
def export_pdf():
    rows, staff, label = query_advances(current_auth())
    data = render_pdf(_report(rows, staff, label, fmt_pdf, fmt_pdf), font_path=current_app.config.get("PDF_FONT_PATH"))
    return download(data, "pdf", label)


@bp.get("/export.xlsx")
@login_required
def export_xlsx():
    rows, staff, label = query_advances(current_auth())
    data = render_xlsx(_report(rows, staff, label, lambda v: Decimal(str(v)), fmt_inr), sheet_name="Advances")
    return download(data, "xlsx", label)
