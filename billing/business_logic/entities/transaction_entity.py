# billing/business_logic/entities/transaction_entity.py
from dataclasses import dataclass, field
from typing import Optional
from datetime import date
from decimal import Decimal
from .base_entity import BaseEntity
from billing.constants import TransactionType, PaymentMode

@dataclass
class TransactionEntity(BaseEntity):
    # Immutable once recorded; corrections are new transactions.
    transaction_type: TransactionType
    party_id: int
    amount: Decimal
    transaction_date: date
    mode: PaymentMode = field(default=PaymentMode.CASH)
    reference: Optional[str] = field(default=None)
    description: Optional[str] = field(default=None)
