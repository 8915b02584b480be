# billing/business_logic/entities/return_item_entity.py
from dataclasses import dataclass, field
from typing import Optional
from .line_item_entity import LineItemEntity

@dataclass
class ReturnItemEntity(LineItemEntity):
    return_id: Optional[int] = field(default=None)
