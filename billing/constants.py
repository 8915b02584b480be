# billing/constants.py

from enum import Enum
from decimal import Decimal

# General
DATE_FORMAT = "%Y-%m-%d"

MONEY_QUANTUM = Decimal("0.01")
ZERO = Decimal("0")


class PartyType(Enum):
    CUSTOMER = "customer"
    SUPPLIER = "supplier"


class InvoiceStatus(Enum):
    UNPAID = "unpaid"
    PARTIAL = "partial"
    PAID = "paid"


class TransactionType(Enum):
    PAYMENT = "payment"  # money out, to a supplier
    RECEIPT = "receipt"  # money in, from a customer


class PaymentMode(Enum):
    CASH = "cash"
    BANK_TRANSFER = "bank_transfer"
    UPI = "upi"
    CHEQUE = "cheque"


class ReturnType(Enum):
    SALES = "sales"
    PURCHASE = "purchase"


class ReturnStatus(Enum):
    PENDING = "pending"
    PROCESSED = "processed"
    REJECTED = "rejected"


class StockStatus(Enum):
    IN_STOCK = "in_stock"
    LOW_STOCK = "low_stock"
    OUT_OF_STOCK = "out_of_stock"


class MovementSource(Enum):
    SALE = "sale"
    PURCHASE = "purchase"
    SALES_RETURN = "sales_return"
    PURCHASE_RETURN = "purchase_return"
    ADJUSTMENT = "adjustment"


class LedgerEntryKind(Enum):
    INVOICE = "invoice"
    RECEIPT = "receipt"
    PAYMENT = "payment"


class FiscalCalendar(Enum):
    GREGORIAN = "gregorian"
    JALALI = "jalali"
