# billing/business_logic/entities/return_entity.py
from dataclasses import dataclass, field
from typing import Optional, List
from datetime import date
from decimal import Decimal
from .base_entity import BaseEntity
from .return_item_entity import ReturnItemEntity
from .document_totals import items_subtotal, gst_on
from billing.constants import ReturnType, ReturnStatus, ZERO

@dataclass
class ReturnEntity(BaseEntity):
    return_number: str
    return_type: ReturnType
    party_id: int
    return_date: date

    invoice_id: Optional[int] = field(default=None)
    invoice_number: Optional[str] = field(default=None)
    gst_percentage: Decimal = field(default_factory=lambda: Decimal("0"))
    status: ReturnStatus = field(default=ReturnStatus.PENDING)
    notes: Optional[str] = field(default=None)
    items: List[ReturnItemEntity] = field(default_factory=list)

    @property
    def subtotal(self) -> Decimal:
        return items_subtotal(self.items)

    @property
    def gst_amount(self) -> Decimal:
        return gst_on(self.subtotal, self.gst_percentage)

    @property
    def total(self) -> Decimal:
        return max(ZERO, self.subtotal + self.gst_amount)
