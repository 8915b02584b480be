# billing/business_logic/entities/stock_adjustment_entity.py
from dataclasses import dataclass, field
from typing import Optional
from datetime import date
from .base_entity import BaseEntity

@dataclass
class StockAdjustmentEntity(BaseEntity):
    product_id: int
    quantity_change: int  # signed
    adjustment_date: date
    reason: Optional[str] = field(default=None)
