# -*- coding: utf-8 -*-
"""
Payroll service: feeds database rows into the salary core and owns the two
payment-state transitions (mark paid / mark unpaid).

Every call takes an explicit AuthContext; nothing here reads the request.
"""
from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ...acl import AuthContext
from ...errors import ConflictError, NotFound
from ...extensions import db
from ...logger import get_logger
from ...models.advance import Advance
from ...models.attendance import AttendanceRecord
from ...models.salary import SalaryRecord
from ...models.staff import Staff
from ...periods import month_bounds, previous_period
from ...persistence import unit_of_work
from ...salary import (
    AdvanceSummary,
    AttendanceSummary,
    DepartmentTotals,
    SalaryCalculation,
    aggregate_attendance,
    calculate_salary,
    carry_forward_from,
    department_totals,
    summarize_advances,
)
from ..staff import list_staff

logger = get_logger("payroll")


def attendance_summary(staff_id: int, start: date, end: date) -> AttendanceSummary:
    rows = AttendanceRecord.query.filter(
        AttendanceRecord.staff_id == staff_id,
        AttendanceRecord.day >= start,
        AttendanceRecord.day <= end,
    ).all()
    return aggregate_attendance(rows)


def advance_summary(staff_id: int, start: date, end: date) -> AdvanceSummary:
    rows = Advance.query.filter(
        Advance.staff_id == staff_id,
        Advance.day >= start,
        Advance.day <= end,
    ).all()
    return summarize_advances(rows)


def find_record(staff_id: int, year: int, month: int) -> Optional[SalaryRecord]:
    return SalaryRecord.query.filter_by(staff_id=staff_id, year=year, month=month).first()


def resolve_carry_forward(staff_id: int, year: int, month: int) -> Decimal:
    py, pm = previous_period(year, month)
    return carry_forward_from(find_record(staff_id, py, pm))


def compute(staff: Staff, year: int, month: int) -> SalaryCalculation:
    """Live calculation from current rows; is_paid comes from the stored record."""
    start, end = month_bounds(year, month)
    rec = find_record(staff.id, year, month)
    return calculate_salary(
        staff_id=staff.id,
        name=staff.name,
        category=staff.category,
        month=month,
        year=year,
        shift_rate=staff.shift_rate,
        attendance=attendance_summary(staff.id, start, end),
        advances=advance_summary(staff.id, start, end),
        carry_forward=resolve_carry_forward(staff.id, year, month),
        is_paid=bool(rec and rec.is_paid),
        paid_at=rec.paid_at if rec else None,
    )


def compute_department(auth: AuthContext, roster: str | None, category: str | None,
                       year: int, month: int) -> tuple[list[SalaryCalculation], DepartmentTotals]:
    rows = [compute(s, year, month) for s in list_staff(auth, roster=roster, category=category)]
    return rows, department_totals(rows)


def _freeze(rec: SalaryRecord, calc: SalaryCalculation) -> None:
    rec.shift_rate = calc.shift_rate
    rec.total_shifts = calc.total_shifts
    rec.absent_days = calc.absent_days
    rec.gross_amount = calc.shift_amount
    rec.total_advances = calc.total_advances
    rec.carry_forward = calc.carry_forward
    rec.net_payable = calc.payable


def mark_paid(staff: Staff, year: int, month: int, auth: AuthContext, *,
              expected_payable: Optional[Decimal] = None,
              now: Optional[datetime] = None) -> SalaryRecord:
    """
    Commit the month as paid.

    In one transaction: recompute from current rows, upsert the SalaryRecord
    with the frozen figures, and mark every pending advance of the staff
    member (any date) as deducted by this record.
    """
    auth.require(staff.category)
    now = now or datetime.utcnow()

    with unit_of_work("mark paid", logger):
        calc = compute(staff, year, month)
        if expected_payable is not None and Decimal(expected_payable) != calc.payable:
            raise ConflictError(
                f"payable changed: shown {expected_payable}, now {calc.payable}; reload and retry",
                code="stale_calculation",
            )

        rec = find_record(staff.id, year, month)
        if rec is None:
            rec = SalaryRecord(staff_id=staff.id, year=year, month=month)
            db.session.add(rec)
        _freeze(rec, calc)
        rec.is_paid = True
        rec.paid_at = now
        db.session.flush()

        deducted = (
            Advance.query
            .filter(Advance.staff_id == staff.id, Advance.is_deducted.is_(False))
            .update({Advance.is_deducted: True, Advance.deducted_in_id: rec.id},
                    synchronize_session="fetch")
        )

    logger.info(
        f"staff #{staff.id} {year}-{month:02d} marked paid: payable={calc.payable}, "
        f"{deducted} advance(s) deducted, by user #{auth.user_id}"
    )
    return rec


def mark_unpaid(staff: Staff, year: int, month: int, auth: AuthContext, *,
                restore_advances: bool = False) -> SalaryRecord:
    """
    Flip the stored record back to unpaid.

    Deducted advances stay deducted unless `restore_advances` is set, in
    which case only the advances this record consumed are released.
    """
    auth.require(staff.category)

    with unit_of_work("mark unpaid", logger):
        rec = find_record(staff.id, year, month)
        if rec is None:
            raise NotFound(f"no salary record for staff #{staff.id} in {year}-{month:02d}")
        rec.is_paid = False
        rec.paid_at = None
        restored = 0
        if restore_advances:
            restored = (
                Advance.query
                .filter(Advance.deducted_in_id == rec.id)
                .update({Advance.is_deducted: False, Advance.deducted_in_id: None},
                        synchronize_session="fetch")
            )

    logger.info(
        f"staff #{staff.id} {year}-{month:02d} marked unpaid "
        f"({restored} advance(s) restored) by user #{auth.user_id}"
    )
    return rec
