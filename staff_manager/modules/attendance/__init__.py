# -*- coding: utf-8 -*-
from __future__ import annotations

from datetime import date
from typing import Optional

from flask import Blueprint, request
from flask_login import login_required

from ...acl import AuthContext
from ...errors import ValidationError
from ...extensions import db
from ...logger import get_logger
from ...models.attendance import AttendanceRecord, AttendanceStatus
from ...models.staff import Staff
from ...periods import month_bounds, parse_day, parse_period
from ...persistence import unit_of_work
from ...salary import aggregate_attendance
from ...security import current_auth
from ...web import int_arg, listing, ok, payload, require_confirm
from ..staff import list_staff, load_staff

logger = get_logger("attendance")

bp = Blueprint("attendance", __name__, url_prefix="/attendance")

NOT_MARKED = "not_marked"

# UI mark -> (status, shift_count); None clears the day
MARKS: dict[str, Optional[tuple[str, Optional[int]]]] = {
    "1shift": (AttendanceStatus.PRESENT.value, 1),
    "2shift": (AttendanceStatus.PRESENT.value, 2),
    "absent": (AttendanceStatus.ABSENT.value, None),
    NOT_MARKED: None,
}


def _parse_mark(value) -> str:
    mark = (value or "").strip().lower()
    if mark not in MARKS:
        raise ValidationError(
            f"status must be one of: {', '.join(MARKS)}", code="bad_status"
        )
    return mark


def _day_arg(value) -> date:
    return parse_day(value, field="date") if value else date.today()


def set_mark(staff: Staff, day: date, mark: str, notes: str = "") -> Optional[AttendanceRecord]:
    """Upsert (or delete, for not_marked) the row for one staff/day. No commit."""
    row = AttendanceRecord.query.filter_by(staff_id=staff.id, day=day).first()
    target = MARKS[mark]
    if target is None:
        if row is not None:
            db.session.delete(row)
        return None
    status, shifts = target
    if row is None:
        row = AttendanceRecord(staff_id=staff.id, day=day)
        db.session.add(row)
    row.status = status
    row.shift_count = shifts
    if notes:
        row.notes = notes
    return row


def _mark_of(row: Optional[AttendanceRecord]) -> str:
    if row is None:
        return NOT_MARKED
    if row.status == AttendanceStatus.ABSENT.value:
        return "absent"
    return "2shift" if (row.shift_count or 1) == 2 else "1shift"


def day_sheet(auth: AuthContext, day: date, roster: str | None, category: str | None) -> list[dict]:
    staff = list_staff(auth, roster=roster, category=category)
    rows = {
        r.staff_id: r
        for r in AttendanceRecord.query.filter(
            AttendanceRecord.day == day,
            AttendanceRecord.staff_id.in_([s.id for s in staff] or [0]),
        ).all()
    }
    return [
        {
            "staff_id": s.id,
            "name": s.name,
            "category": s.category,
            "mark": _mark_of(rows.get(s.id)),
            "record": rows[s.id].to_dict() if s.id in rows else None,
        }
        for s in staff
    ]


# ------------ routes ----------------------------------------------------------
@bp.get("/")
@login_required
def index():
    auth = current_auth()
    day = _day_arg(request.args.get("date"))
    sheet = day_sheet(auth, day, request.args.get("roster"), request.args.get("category"))
    return listing("attendance", sheet, date=day.isoformat())


@bp.post("/mark")
@login_required
def mark():
    auth = current_auth()
    data = payload()
    s = load_staff(int_arg(data.get("staff_id"), "staff_id"), auth)
    day = _day_arg(data.get("date"))
    mark_value = _parse_mark(data.get("status"))

    with unit_of_work("mark attendance", logger):
        row = set_mark(s, day, mark_value, notes=(data.get("notes") or "").strip())

    logger.info(f"attendance staff #{s.id} {day.isoformat()} -> {mark_value} by user #{auth.user_id}")
    return ok(mark=mark_value, record=row.to_dict() if row else None)


@bp.post("/mark-all")
@login_required
def mark_all():
    """Same mark for every active staff member of one category."""
    auth = current_auth()
    data = payload()
    require_confirm(data)
    category = (data.get("category") or "").strip()
    if not category:
        raise ValidationError("category is required", code="no_category")
    day = _day_arg(data.get("date"))
    mark_value = _parse_mark(data.get("status"))
    staff = list_staff(auth, roster=data.get("roster"), category=category)

    with unit_of_work("mark all attendance", logger):
        for s in staff:
            set_mark(s, day, mark_value)

    logger.info(
        f"attendance {category} {day.isoformat()} -> {mark_value} for {len(staff)} staff "
        f"by user #{auth.user_id}"
    )
    return ok(mark=mark_value, count=len(staff), date=day.isoformat())


@bp.get("/summary")
@login_required
def summary():
    auth = current_auth()
    year, month = parse_period(request.args.get("m"))
    start, end = month_bounds(year, month)
    staff = list_staff(auth, roster=request.args.get("roster"), category=request.args.get("category"))

    out = []
    for s in staff:
        records = AttendanceRecord.query.filter(
            AttendanceRecord.staff_id == s.id,
            AttendanceRecord.day >= start,
            AttendanceRecord.day <= end,
        ).all()
        agg = aggregate_attendance(records)
        out.append({
            "staff_id": s.id,
            "name": s.name,
            "category": s.category,
            "total_shifts": agg.total_shifts,
            "absent_days": agg.absent_days,
            "marked_days": len(records),
        })
    return listing("summary", out, period=f"{year}-{month:02d}")
