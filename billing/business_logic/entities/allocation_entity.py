# billing/business_logic/entities/allocation_entity.py
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from .base_entity import BaseEntity

@dataclass
class AllocationEntity(BaseEntity):
    """Part of a transaction applied against one invoice."""
    transaction_id: int
    invoice_id: int
    amount: Decimal
    allocation_date: date
