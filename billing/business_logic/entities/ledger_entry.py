# billing/business_logic/entities/ledger_entry.py
from dataclasses import dataclass, field
from typing import Optional
from datetime import date
from decimal import Decimal
from billing.constants import LedgerEntryKind, InvoiceStatus

@dataclass(frozen=True)
class LedgerEntry:
    entry_date: date
    kind: LedgerEntryKind
    reference: str
    amount: Decimal
    source_id: Optional[int] = None
    status: Optional[InvoiceStatus] = None  # only set for invoice entries


@dataclass(frozen=True)
class LedgerTotals:
    total_amount: Decimal
    paid_amount: Decimal
    unpaid_amount: Decimal
    credit_balance: Decimal = field(default_factory=lambda: Decimal("0.00"))
