# billing/business_logic/entities/invoice_item_entity.py
from dataclasses import dataclass, field
from typing import Optional
from .line_item_entity import LineItemEntity

@dataclass
class InvoiceItemEntity(LineItemEntity):
    invoice_id: Optional[int] = field(default=None)
