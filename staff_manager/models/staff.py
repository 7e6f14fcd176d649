# -*- coding: utf-8 -*-
from __future__ import annotations

import enum
from datetime import date, datetime

from sqlalchemy.orm import validates

from ..extensions import db


class StaffCategory(str, enum.Enum):
    PETROLEUM = "petroleum"
    CRUSHER = "crusher"
    OFFICE = "office"


class TransportCategory(str, enum.Enum):
    DRIVER = "driver"
    KHALASI = "khalasi"


class Roster(str, enum.Enum):
    """Two parallel rosters; each owns a closed set of categories."""

    STAFF = "staff"
    TRANSPORT = "transport"

    @property
    def categories(self) -> type[enum.Enum]:
        return StaffCategory if self is Roster.STAFF else TransportCategory

    def parse_category(self, value: str | None) -> enum.Enum:
        try:
            return self.categories((value or "").strip().lower())
        except ValueError:
            allowed = ", ".join(c.value for c in self.categories)
            raise ValueError(f"category must be one of: {allowed}") from None

    @classmethod
    def for_category(cls, value: str) -> "Roster":
        v = (value or "").strip().lower()
        for roster in cls:
            if v in {c.value for c in roster.categories}:
                return roster
        raise ValueError(f"unknown category: {value!r}")


class Staff(db.Model):
    __tablename__ = "staff"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False, index=True)
    roster = db.Column(db.String(16), nullable=False, default=Roster.STAFF.value, index=True)
    category = db.Column(db.String(16), nullable=False, index=True)
    shift_rate = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    base_salary = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    phone = db.Column(db.String(32), default="")
    designation = db.Column(db.String(64), default="")
    address = db.Column(db.String(255), default="")
    joining_date = db.Column(db.Date, default=date.today)
    notes = db.Column(db.Text, default="")
    is_active = db.Column(db.Boolean, nullable=False, default=True)  # no hard delete
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    @validates("roster")
    def _check_roster(self, key, value):
        return Roster(value).value

    @validates("category")
    def _check_category(self, key, value):
        roster = Roster(self.roster or Roster.STAFF.value)
        return roster.parse_category(value).value

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "roster": self.roster,
            "category": self.category,
            "shift_rate": str(self.shift_rate or 0),
            "base_salary": str(self.base_salary or 0),
            "phone": self.phone or "",
            "designation": self.designation or "",
            "address": self.address or "",
            "joining_date": self.joining_date.isoformat() if self.joining_date else None,
            "notes": self.notes or "",
            "is_active": bool(self.is_active),
        }
