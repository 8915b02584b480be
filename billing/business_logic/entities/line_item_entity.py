# billing/business_logic/entities/line_item_entity.py
from dataclasses import dataclass, field
from typing import Optional
from decimal import Decimal
from .base_entity import BaseEntity

@dataclass
class LineItemEntity(BaseEntity):
    """Shape shared by invoice lines and return lines."""
    product_name: str
    quantity: int
    rate: Decimal = field(default_factory=lambda: Decimal("0.00"))
    product_id: Optional[int] = field(default=None)  # None for free-text lines

    @property
    def amount(self) -> Decimal:
        return Decimal(self.quantity) * self.rate
