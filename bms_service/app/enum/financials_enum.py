from enum import Enum


class InvoiceStatus(str, Enum):
    draft = "draft"
    sent = "sent"
    pending = "pending"
    paid = "paid"
    overdue = "overdue"
    cancelled = "cancelled"


class InvoiceItemType(str, Enum):
    rent = "rent"
    charge = "charge"
    penalty = "penalty"
    deposit = "deposit"
    other = "other"


class PaymentMethod(str, Enum):
    cash = "cash"
    bank_transfer = "bank_transfer"
    telebirr = "telebirr"
    cbe_birr = "cbe_birr"
    chapa = "chapa"
    hellocash = "hellocash"
    other = "other"


class PaymentStatus(str, Enum):
    pending = "pending"
    completed = "completed"
    failed = "failed"
    refunded = "refunded"


class ReconciliationStatus(str, Enum):
    pending = "pending"
    reconciled = "reconciled"
    disputed = "disputed"


class UtilityType(str, Enum):
    electricity = "electricity"
    water = "water"
    gas = "gas"
