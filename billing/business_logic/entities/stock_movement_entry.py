# billing/business_logic/entities/stock_movement_entry.py
from dataclasses import dataclass
from datetime import date
from billing.constants import MovementSource

@dataclass(frozen=True)
class StockMovementEntry:
    """One signed quantity change. Derived from invoices/returns/adjustments, never stored."""
    movement_date: date
    reference: str        # invoice number, return number or adjustment label
    source: MovementSource
    quantity_change: int
    unit: str
    balance_after: int
