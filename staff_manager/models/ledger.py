
import enum
from datetime import date, datetime

from ..extensions import db


class TransactionType(str, enum.Enum):
    PETROLEUM = "petroleum"  # fuel on credit
    TYRE = "tyre"
    DEBIT = "debit"          # manual debit
    PAYMENT = "payment"      # money received from the party


class FuelType(str, enum.Enum):
    DIESEL = "diesel"
    PETROL = "petrol"


class CreditParty(db.Model):
    __tablename__ = "credit_party"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False, index=True)
    phone = db.Column(db.String(32), default="")
    address = db.Column(db.String(255), default="")
    notes = db.Column(db.Text, default="")
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "phone": self.phone or "",
            "address": self.address or "",
            "notes": self.notes or "",
            "is_active": bool(self.is_active),
        }


class CreditTransaction(db.Model):
    __tablename__ = "credit_transaction"

    id = db.Column(db.Integer, primary_key=True)
    party_id = db.Column(db.Integer, db.ForeignKey("credit_party.id"), nullable=False, index=True)
    kind = db.Column(db.String(16), nullable=False, default=TransactionType.PETROLEUM.value)
    amount = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    day = db.Column(db.Date, nullable=False, default=date.today, index=True)
    fuel_type = db.Column(db.String(16), nullable=True)
    litres = db.Column(db.Numeric(12, 2), nullable=True)
    rate_per_litre = db.Column(db.Numeric(12, 2), nullable=True)
    tyre_name = db.Column(db.String(120), nullable=True)
    notes = db.Column(db.String(255), default="")
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    @property
    def is_credit(self) -> bool:
        return self.kind == TransactionType.PAYMENT.value

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "party_id": self.party_id,
            "kind": self.kind,
            "amount": str(self.amount),
            "date": self.day.isoformat(),
            "fuel_type": self.fuel_type,
            "litres": str(self.litres) if self.litres is not None else None,
            "rate_per_litre": str(self.rate_per_litre) if self.rate_per_litre is not None else None,
            "tyre_name": self.tyre_name,
            "notes": self.notes or "",
        }


class SaleType(str, enum.Enum):
    UPI = "upi"
    CASH = "cash"


class PetroleumSale(db.Model):
    """Pump takings for a day, one row per entry."""

    __tablename__ = "petroleum_sale"

    id = db.Column(db.Integer, primary_key=True)
    day = db.Column(db.Date, nullable=False, default=date.today, index=True)
    sale_type = db.Column(db.String(8), nullable=False, default=SaleType.UPI.value)
    amount = db.Column(db.Numeric(12, 2), nullable=False)
    notes = db.Column(db.String(255), default="")
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "date": self.day.isoformat(),
            "sale_type": self.sale_type,
            "amount": str(self.amount),
            "notes": self.notes or "",
        }


class PetroleumPayment(db.Model):
    __tablename__ = "petroleum_payment"

    id = db.Column(db.Integer, primary_key=True)
    day = db.Column(db.Date, nullable=False, default=date.today, index=True)
    payment_type = db.Column(db.String(8), nullable=False, default=SaleType.UPI.value)
    amount = db.Column(db.Numeric(12, 2), nullable=False)
    notes = db.Column(db.String(255), default="")
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "date": self.day.isoformat(),
            "payment_type": self.payment_type,
            "amount": str(self.amount),
            "notes": self.notes or "",
        }


class TyreSale(db.Model):
    __tablename__ = "tyre_sale"

    id = db.Column(db.Integer, primary_key=True)
    day = db.Column(db.Date, nullable=False, default=date.today, index=True)
    amount = db.Column(db.Numeric(12, 2), nullable=False)
    notes = db.Column(db.String(255), default="")
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "date": self.day.isoformat(),
            "amount": str(self.amount),
            "notes": self.notes or "",
        }


class DispatchEntry(db.Model):
    """A truck load of crusher product sold to a party."""

    __tablename__ = "dispatch_entry"

    id = db.Column(db.Integer, primary_key=True)
    day = db.Column(db.Date, nullable=False, default=date.today, index=True)
    party_name = db.Column(db.String(120), nullable=False, index=True)
    truck_number = db.Column(db.String(32), nullable=False)
    product_name = db.Column(db.String(120), nullable=False)
    quantity = db.Column(db.Numeric(12, 2), nullable=False)
    amount = db.Column(db.Numeric(12, 2), nullable=False)
    challan_number = db.Column(db.String(64), default="")
    rst_number = db.Column(db.String(64), default="")  # weighbridge slip
    notes = db.Column(db.String(255), default="")
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "date": self.day.isoformat(),
            "party_name": self.party_name,
            "truck_number": self.truck_number,
            "product_name": self.product_name,
            "quantity": str(self.quantity),
            "amount": str(self.amount),
            "challan_number": self.challan_number or "",
            "rst_number": self.rst_number or "",
            "notes": self.notes or "",
        }


class BolderEntry(db.Model):
    """Boulder received at the crusher; no money on this side of the book."""

    __tablename__ = "bolder_entry"

    id = db.Column(db.Integer, primary_key=True)
    day = db.Column(db.Date, nullable=False, default=date.today, index=True)
    company_name = db.Column(db.String(120), nullable=False, index=True)
    quality = db.Column(db.String(64), nullable=False)
    truck_number = db.Column(db.String(32), nullable=False)
    challan_number = db.Column(db.String(64), default="")
    rst_number = db.Column(db.String(64), default="")
    notes = db.Column(db.String(255), default="")
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "date": self.day.isoformat(),
            "company_name": self.company_name,
            "quality": self.quality,
            "truck_number": self.truck_number,
            "challan_number": self.challan_number or "",
            "rst_number": self.rst_number or "",
            "notes": self.notes or "",
        }
