# billing/business_logic/entities/document_totals.py
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable

from billing.constants import MONEY_QUANTUM, ZERO
from .line_item_entity import LineItemEntity


def items_subtotal(items: Iterable[LineItemEntity]) -> Decimal:
    return sum((item.amount for item in items), ZERO)


def gst_on(subtotal: Decimal, gst_percentage: Decimal) -> Decimal:
    """GST on a subtotal, rounded half-up to the cent."""
    return (subtotal * gst_percentage / Decimal(100)).quantize(MONEY_QUANTUM, rounding=ROUND_HALF_UP)
