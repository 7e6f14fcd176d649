from .user import AppUser
from .staff import Staff, Roster, StaffCategory, TransportCategory
from .attendance import AttendanceRecord, AttendanceStatus
from .advance import Advance
from .salary import SalaryRecord
from .ledger import (
    BolderEntry,
    CreditParty,
    CreditTransaction,
    DispatchEntry,
    FuelType,
    PetroleumPayment,
    PetroleumSale,
    SaleType,
    TransactionType,
    TyreSale,
)

__all__ = [
    "AppUser",
    "Staff",
    "Roster",
    "StaffCategory",
    "TransportCategory",
    "AttendanceRecord",
    "AttendanceStatus",
    "Advance",
    "SalaryRecord",
    "CreditParty",
    "CreditTransaction",
    "TransactionType",
    "FuelType",
    "SaleType",
    "PetroleumSale",
    "PetroleumPayment",
    "TyreSale",
    "DispatchEntry",
    "BolderEntry",
]
