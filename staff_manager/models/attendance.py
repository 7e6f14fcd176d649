
import enum
from datetime import datetime

from ..extensions import db


class AttendanceStatus(str, enum.Enum):
    PRESENT = "present"
    ABSENT = "absent"
    # "not marked" is never stored: it is the absence of a row


class AttendanceRecord(db.Model):
    __tablename__ = "attendance"

    id = db.Column(db.Integer, primary_key=True)
    staff_id = db.Column(db.Integer, db.ForeignKey("staff.id"), nullable=False, index=True)
    day = db.Column(db.Date, nullable=False, index=True)
    status = db.Column(db.String(16), nullable=False, default=AttendanceStatus.PRESENT.value)
    shift_count = db.Column(db.Integer, nullable=True, default=1)  # 1|2, only for present
    notes = db.Column(db.String(255), default="")
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    __table_args__ = (db.UniqueConstraint("staff_id", "day", name="uq_attendance_staff_day"),)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "staff_id": self.staff_id,
            "date": self.day.isoformat(),
            "status": self.status,
            "shift_count": self.shift_count,
            "notes": self.notes or "",
        }
