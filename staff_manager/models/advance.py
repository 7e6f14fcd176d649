
from datetime import date, datetime

from ..extensions import db


class Advance(db.Model):
    __tablename__ = "advance"

    id = db.Column(db.Integer, primary_key=True)
    staff_id = db.Column(db.Integer, db.ForeignKey("staff.id"), nullable=False, index=True)
    amount = db.Column(db.Numeric(12, 2), nullable=False)
    day = db.Column(db.Date, nullable=False, default=date.today, index=True)
    notes = db.Column(db.String(255), default="")
    is_deducted = db.Column(db.Boolean, nullable=False, default=False, index=True)
    # salary record whose "mark paid" consumed this advance
    deducted_in_id = db.Column(db.Integer, db.ForeignKey("salary_record.id"), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "staff_id": self.staff_id,
            "amount": str(self.amount),
            "date": self.day.isoformat(),
            "notes": self.notes or "",
            "is_deducted": bool(self.is_deducted),
            "deducted_in_id": self.deducted_in_id,
        }
