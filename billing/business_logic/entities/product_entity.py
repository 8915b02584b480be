# billing/business_logic/entities/product_entity.py
from dataclasses import dataclass, field
from typing import Optional
from decimal import Decimal
from .base_entity import BaseEntity

@dataclass
class ProductEntity(BaseEntity):
    name: str

    price: Decimal = field(default_factory=lambda: Decimal("0.00"))       # sale rate
    cost_price: Decimal = field(default_factory=lambda: Decimal("0.00"))
    # Authoritative current quantity. Signed: may go negative when oversold.
    stock: int = field(default=0)
    # Quantity at creation; stock == opening_stock + sum of applied movements.
    opening_stock: int = field(default=0)
    low_stock_alert: Optional[int] = field(default=None)  # None -> config.DEFAULT_LOW_STOCK_ALERT
    unit: str = field(default="pcs")
    description: Optional[str] = field(default=None)
