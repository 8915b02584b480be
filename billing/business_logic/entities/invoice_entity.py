# billing/business_logic/entities/invoice_entity.py
from dataclasses import dataclass, field
from typing import Optional, List
from datetime import date
from decimal import Decimal
from .base_entity import BaseEntity
from .invoice_item_entity import InvoiceItemEntity
from .document_totals import items_subtotal, gst_on
from billing.constants import InvoiceStatus, ZERO

@dataclass
class InvoiceEntity(BaseEntity):
    invoice_number: str
    party_id: int
    invoice_date: date

    gst_percentage: Decimal = field(default_factory=lambda: Decimal("0"))
    discount: Decimal = field(default_factory=lambda: Decimal("0.00"))
    paid_amount: Decimal = field(default_factory=lambda: Decimal("0.00"))
    status: InvoiceStatus = field(default=InvoiceStatus.UNPAID)
    notes: Optional[str] = field(default=None)
    items: List[InvoiceItemEntity] = field(default_factory=list)

    # Totals are always derived from the items so they cannot drift from them.
    @property
    def subtotal(self) -> Decimal:
        return items_subtotal(self.items)

    @property
    def gst_amount(self) -> Decimal:
        return gst_on(self.subtotal, self.gst_percentage)

    @property
    def total(self) -> Decimal:
        return max(ZERO, self.subtotal + self.gst_amount - self.discount)
