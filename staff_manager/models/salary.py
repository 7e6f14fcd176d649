# -*- coding: utf-8 -*-
from __future__ import annotations

from datetime import datetime

from ..extensions import db
from ..money import D


class SalaryRecord(db.Model):
    """Committed payroll state for one staff member and one calendar month.

    Computed fields are frozen at the moment of "mark paid"; the next month's
    carry-forward reads `net_payable` from here when `is_paid` is false.
    """

    __tablename__ = "salary_record"

    id = db.Column(db.Integer, primary_key=True)
    staff_id = db.Column(db.Integer, db.ForeignKey("staff.id"), nullable=False, index=True)
    month = db.Column(db.Integer, nullable=False)
    year = db.Column(db.Integer, nullable=False)

    shift_rate = db.Column(db.Numeric(12, 2), default=0)
    total_shifts = db.Column(db.Integer, default=0)
    absent_days = db.Column(db.Integer, default=0)
    gross_amount = db.Column(db.Numeric(12, 2), default=0)  # shifts x rate
    total_advances = db.Column(db.Numeric(12, 2), default=0)
    carry_forward = db.Column(db.Numeric(12, 2), default=0)
    net_payable = db.Column(db.Numeric(12, 2), default=0)

    is_paid = db.Column(db.Boolean, nullable=False, default=False)
    paid_at = db.Column(db.DateTime, nullable=True)

    version = db.Column(db.Integer, nullable=False, default=1)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        db.UniqueConstraint("staff_id", "month", "year", name="uq_salary_staff_period"),
    )
    __mapper_args__ = {"version_id_col": version}

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "staff_id": self.staff_id,
            "month": self.month,
            "year": self.year,
            "shift_rate": str(D(self.shift_rate)),
            "total_shifts": int(self.total_shifts or 0),
            "absent_days": int(self.absent_days or 0),
            "gross_amount": str(D(self.gross_amount)),
            "total_advances": str(D(self.total_advances)),
            "carry_forward": str(D(self.carry_forward)),
            "net_payable": str(D(self.net_payable)),
            "is_paid": bool(self.is_paid),
            "paid_at": self.paid_at.isoformat(sep=" ", timespec="seconds") if self.paid_at else None,
            "version": self.version,
        }
