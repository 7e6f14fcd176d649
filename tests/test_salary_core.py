"""
Unit tests for the pure salary core (no database).
"""

from decimal import Decimal
from types import SimpleNamespace as Row

import pytest

from staff_manager.salary import (
    AdvanceSummary,
    AttendanceSummary,
    aggregate_attendance,
    calculate_salary,
    carry_forward_from,
    department_totals,
    summarize_advances,
)


def present(shifts=1):
    return Row(status="present", shift_count=shifts)


def absent():
    return Row(status="absent", shift_count=None)


def advance(amount, deducted=False):
    return Row(amount=Decimal(str(amount)), is_deducted=deducted)


def calc(rate=500, shifts=0, advances=(), carry=0, **kw):
    return calculate_salary(
        staff_id=1, name="Ramesh", category="petroleum", month=3, year=2025,
        shift_rate=rate,
        attendance=AttendanceSummary(total_shifts=shifts),
        advances=summarize_advances(advances),
        carry_forward=carry,
        **kw,
    )


class TestAggregateAttendance:
    def test_empty(self):
        assert aggregate_attendance([]) == AttendanceSummary(0, 0)

    def test_single_and_double_shifts(self):
        rows = [present(1), present(2), present(1), absent()]
        summary = aggregate_attendance(rows)
        assert summary.total_shifts == 4
        assert summary.absent_days == 1

    def test_missing_shift_count_counts_as_one(self):
        assert aggregate_attendance([present(None), present(0)]).total_shifts == 2

    def test_absent_with_shift_count_never_counts(self):
        rows = [Row(status="absent", shift_count=2)]
        summary = aggregate_attendance(rows)
        assert summary.total_shifts == 0
        assert summary.absent_days == 1

    def test_unknown_status_ignored(self):
        assert aggregate_attendance([Row(status="leave", shift_count=2)]) == AttendanceSummary(0, 0)


class TestSummarizeAdvances:
    def test_partition_is_complete(self):
        rows = [advance(1000), advance(250.50, deducted=True), advance(749.50)]
        s = summarize_advances(rows)
        assert s.pending_advance == Decimal("1749.50")
        assert s.deducted_advance == Decimal("250.50")
        assert s.deducted_advance + s.pending_advance == s.total_advance
        assert s.total_advance == Decimal("2000.00")

    def test_empty(self):
        assert summarize_advances([]) == AdvanceSummary()


class TestCarryForward:
    def test_no_record(self):
        assert carry_forward_from(None) == Decimal("0")

    def test_paid_record(self):
        assert carry_forward_from(Row(is_paid=True, net_payable=Decimal("12000"))) == Decimal("0")

    def test_unpaid_record(self):
        assert carry_forward_from(Row(is_paid=False, net_payable=Decimal("12000"))) == Decimal("12000")

    def test_negative_balance_carries(self):
        assert carry_forward_from(Row(is_paid=False, net_payable=Decimal("-1500"))) == Decimal("-1500")


class TestCalculateSalary:
    def test_worked_example_march(self):
        c = calc(rate=500, shifts=30, advances=[advance(3000)])
        assert c.shift_amount == Decimal("15000")
        assert c.total_advances == Decimal("3000")
        assert c.carry_forward == Decimal("0")
        assert c.payable == Decimal("12000")
        assert c.is_paid is False

    def test_worked_example_april_after_unpaid_march(self):
        c = calc(rate=500, shifts=10, carry=Decimal("12000"))
        assert c.payable == Decimal("17000")

    def test_worked_example_april_after_paid_march(self):
        c = calc(rate=500, shifts=10, carry=carry_forward_from(Row(is_paid=True, net_payable=12000)))
        assert c.payable == Decimal("5000")

    def test_payable_can_be_negative(self):
        c = calc(rate=500, shifts=2, advances=[advance(3000)])
        assert c.payable == Decimal("-2000")

    def test_exact_decimals(self):
        c = calc(rate="333.33", shifts=3)
        assert c.shift_amount == Decimal("999.99")

    def test_deducted_advances_still_reduce_payable(self):
        c = calc(rate=500, shifts=30, advances=[advance(1000, deducted=True), advance(2000)])
        assert c.total_advances == Decimal("3000")
        assert c.deducted_advances == Decimal("1000")
        assert c.pending_advances == Decimal("2000")
        assert c.payable == Decimal("12000")

    def test_idempotent(self):
        rows = [advance(500), advance(250, deducted=True)]
        assert calc(shifts=7, advances=rows, carry=100) == calc(shifts=7, advances=rows, carry=100)

    def test_to_dict_serializes_decimals(self):
        d = calc(rate=500, shifts=30, advances=[advance(3000)]).to_dict()
        assert d["payable"] == "12000"
        assert d["total_shifts"] == 30
        assert d["paid_at"] is None


class TestDepartmentTotals:
    def test_sum_of_independent_rows(self):
        rows = [
            calc(rate=500, shifts=30, advances=[advance(3000)], is_paid=True),
            calc(rate=400, shifts=10, carry=-500),
        ]
        t = department_totals(rows)
        assert t.staff_count == 2
        assert t.paid_count == 1
        assert t.total_shifts == 40
        assert t.shift_amount == Decimal("19000")
        assert t.payable == Decimal("12000") + Decimal("3500")

    def test_empty(self):
        t = department_totals([])
        assert t.staff_count == 0
        assert t.payable == Decimal("0")

    @pytest.mark.parametrize("n", [1, 3, 5])
    def test_payable_total_matches_row_sum(self, n):
        rows = [calc(rate=100 * (i + 1), shifts=i) for i in range(n)]
        assert department_totals(rows).payable == sum((r.payable for r in rows), Decimal("0"))
