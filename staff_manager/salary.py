"""
Salary Core

Pure computation for the monthly salary of one staff member:

- attendance aggregation (shift count, absent days)
- advance ledger partition (deducted / pending)
- carry-forward from the previous month's salary record
- the payable formula itself

Nothing here touches the database; the payroll service feeds rows in and
persists what comes out.
"""

from __future__ import annotations

from dataclasses import dataclass, asdict
from datetime import datetime
from decimal import Decimal
from typing import Iterable, Optional, Protocol

from .models.attendance import AttendanceStatus
from .money import D


class _AttendanceRow(Protocol):
    status: str
    shift_count: Optional[int]


class _AdvanceRow(Protocol):
    amount: object
    is_deducted: bool


class _SalaryRow(Protocol):
    is_paid: bool
    net_payable: object


@dataclass(frozen=True)
class AttendanceSummary:
    total_shifts: int = 0
    absent_days: int = 0


@dataclass(frozen=True)
class AdvanceSummary:
    total_advance: Decimal = Decimal("0")
    deducted_advance: Decimal = Decimal("0")
    pending_advance: Decimal = Decimal("0")


@dataclass(frozen=True)
class SalaryCalculation:
    """Every term of the payable formula for one (staff, month, year)."""

    staff_id: int
    name: str
    category: str
    month: int
    year: int
    shift_rate: Decimal
    total_shifts: int
    absent_days: int
    shift_amount: Decimal
    total_advances: Decimal
    deducted_advances: Decimal
    pending_advances: Decimal
    carry_forward: Decimal
    payable: Decimal
    is_paid: bool = False
    paid_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        out = asdict(self)
        for key, value in out.items():
            if isinstance(value, Decimal):
                out[key] = str(value)
        out["paid_at"] = self.paid_at.isoformat(sep=" ", timespec="seconds") if self.paid_at else None
        return out


def aggregate_attendance(records: Iterable[_AttendanceRow]) -> AttendanceSummary:
    """
    Reduce attendance rows to shift and absence counts.

    Status decides: only `present` rows add shifts (shift_count, default 1),
    only `absent` rows add absent days. Days without a row are "not marked"
    and contribute nothing.
    """
    shifts = 0
    absent = 0
    for r in records:
        if r.status == AttendanceStatus.PRESENT.value:
            shifts += int(r.shift_count or 1)
        elif r.status == AttendanceStatus.ABSENT.value:
            absent += 1
    return AttendanceSummary(total_shifts=shifts, absent_days=absent)


def summarize_advances(advances: Iterable[_AdvanceRow]) -> AdvanceSummary:
    deducted = Decimal("0")
    pending = Decimal("0")
    for a in advances:
        if a.is_deducted:
            deducted += D(a.amount)
        else:
            pending += D(a.amount)
    return AdvanceSummary(
        total_advance=deducted + pending,
        deducted_advance=deducted,
        pending_advance=pending,
    )


def carry_forward_from(previous: Optional[_SalaryRow]) -> Decimal:
    """Unpaid previous month -> its net payable; paid or missing -> 0."""
    if previous is None or previous.is_paid:
        return Decimal("0")
    return D(previous.net_payable)


def calculate_salary(
    *,
    staff_id: int,
    name: str,
    category: str,
    month: int,
    year: int,
    shift_rate,
    attendance: AttendanceSummary,
    advances: AdvanceSummary,
    carry_forward,
    is_paid: bool = False,
    paid_at: Optional[datetime] = None,
) -> SalaryCalculation:
    rate = D(shift_rate)
    carry = D(carry_forward)
    shift_amount = rate * attendance.total_shifts
    payable = shift_amount - advances.total_advance + carry
    return SalaryCalculation(
        staff_id=staff_id,
        name=name,
        category=category,
        month=month,
        year=year,
        shift_rate=rate,
        total_shifts=attendance.total_shifts,
        absent_days=attendance.absent_days,
        shift_amount=shift_amount,
        total_advances=advances.total_advance,
        deducted_advances=advances.deducted_advance,
        pending_advances=advances.pending_advance,
        carry_forward=carry,
        payable=payable,
        is_paid=bool(is_paid),
        paid_at=paid_at,
    )


@dataclass(frozen=True)
class DepartmentTotals:
    staff_count: int = 0
    paid_count: int = 0
    total_shifts: int = 0
    shift_amount: Decimal = Decimal("0")
    total_advances: Decimal = Decimal("0")
    carry_forward: Decimal = Decimal("0")
    payable: Decimal = Decimal("0")

    def to_dict(self) -> dict:
        return {k: (str(v) if isinstance(v, Decimal) else v) for k, v in asdict(self).items()}


def department_totals(rows: Iterable[SalaryCalculation]) -> DepartmentTotals:
    rows = list(rows)
    return DepartmentTotals(
        staff_count=len(rows),
        paid_count=sum(1 for r in rows if r.is_paid),
        total_shifts=sum(r.total_shifts for r in rows),
        shift_amount=sum((r.shift_amount for r in rows), Decimal("0")),
        total_advances=sum((r.total_advances for r in rows), Decimal("0")),
        carry_forward=sum((r.carry_forward for r in rows), Decimal("0")),
        payable=sum((r.payable for r in rows), Decimal("0")),
    )
