# -*- coding: utf-8 -*-
from __future__ import annotations

from datetime import date
from typing import Any

from flask import Blueprint, request
from flask_login import login_required

from ...acl import AuthContext, resolve_scope
from ...errors import NotFound, ValidationError
from ...extensions import db
from ...logger import get_logger
from ...models.staff import Roster, Staff
from ...money import parse_amount
from ...persistence import commit
from ...periods import parse_day
from ...security import current_auth
from ...web import flag_arg, listing, ok, payload, require_confirm

logger = get_logger("staff")

bp = Blueprint("staff", __name__, url_prefix="/staff")

_TEXT_FIELDS = ("phone", "designation", "address", "notes")


# ------------ helpers ---------------------------------------------------------
def load_staff(staff_id: int, auth: AuthContext) -> Staff:
    s = db.session.get(Staff, staff_id)
    if not s:
        raise NotFound(f"staff #{staff_id} not found")
    auth.require(s.category)
    return s


def list_staff(auth: AuthContext, roster: str | None = None, category: str | None = None,
               include_inactive: bool = False) -> list[Staff]:
    r, cats = resolve_scope(auth, roster, category)
    q = Staff.query.filter(Staff.roster == r.value, Staff.category.in_(cats))
    if not include_inactive:
        q = q.filter(Staff.is_active.is_(True))
    return q.order_by(Staff.name.asc(), Staff.id.asc()).all()


def _apply_fields(s: Staff, data: dict[str, Any], creating: bool) -> None:
    if creating or "name" in data:
        name = (data.get("name") or "").strip()
        if not name:
            raise ValidationError("name is required", code="no_name")
        s.name = name

    if creating or "roster" in data or "category" in data:
        category_raw = data.get("category") or (s.category if not creating else None)
        try:
            if data.get("roster"):
                roster = Roster(str(data.get("roster")).strip().lower())
            else:
                # a bare category names its roster
                roster = Roster.for_category(category_raw or "")
            category = roster.parse_category(category_raw).value
        except ValueError as e:
            raise ValidationError(str(e), code="bad_category") from None
        # roster first: the category validator checks against it
        s.roster = roster.value
        s.category = category

    for field in ("shift_rate", "base_salary"):
        if field in data and data.get(field) not in (None, ""):
            setattr(s, field, parse_amount(data.get(field), field=field, positive=False))
        elif creating:
            setattr(s, field, 0)

    for field in _TEXT_FIELDS:
        if field in data:
            setattr(s, field, (data.get(field) or "").strip())

    if data.get("joining_date"):
        s.joining_date = parse_day(data.get("joining_date"), field="joining_date")
    elif creating:
        s.joining_date = date.today()


# ------------ routes ----------------------------------------------------------
@bp.get("/")
@login_required
def index():
    auth = current_auth()
    rows = list_staff(
        auth,
        roster=request.args.get("roster"),
        category=request.args.get("category"),
        include_inactive=flag_arg("include_inactive"),
    )
    return listing("staff", [s.to_dict() for s in rows])


@bp.post("/")
@login_required
def create():
    auth = current_auth()
    data = payload()
    s = Staff()
    _apply_fields(s, data, creating=True)
    auth.require(s.category)
    s.is_active = True
    db.session.add(s)
    commit("create staff", logger)
    logger.info(f"staff #{s.id} {s.name!r} added to {s.roster}/{s.category} by user #{auth.user_id}")
    return ok(staff=s.to_dict()), 201


@bp.get("/<int:staff_id>")
@login_required
def view(staff_id: int):
    s = load_staff(staff_id, current_auth())
    return ok(staff=s.to_dict())


@bp.post("/<int:staff_id>/update")
@login_required
def update(staff_id: int):
    auth = current_auth()
    s = load_staff(staff_id, auth)
    _apply_fields(s, payload(), creating=False)
    # moving someone into a category you cannot see is not allowed either
    auth.require(s.category)
    commit("update staff", logger)
    logger.info(f"staff #{s.id} updated by user #{auth.user_id}")
    return ok(staff=s.to_dict())


@bp.post("/<int:staff_id>/deactivate")
@login_required
def deactivate(staff_id: int):
    """Removal from the roster. Rows are kept so history stays valid."""
    auth = current_auth()
    require_confirm(payload())
    s = load_staff(staff_id, auth)
    s.is_active = False
    commit("deactivate staff", logger)
    logger.info(f"staff #{s.id} deactivated by user #{auth.user_id}")
    return ok(staff=s.to_dict())


@bp.post("/<int:staff_id>/activate")
@login_required
def activate(staff_id: int):
    auth = current_auth()
    s = load_staff(staff_id, auth)
    s.is_active = True
    commit("activate staff", logger)
    logger.info(f"staff #{s.id} re-activated by user #{auth.user_id}")
    return ok(staff=s.to_dict())
