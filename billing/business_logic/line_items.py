# billing/business_logic/line_items.py
"""
Line item building and validation shared by invoices and returns.

Lines come in as entities or as dicts with ``product_id``, ``product_name``,
``quantity`` and ``rate``. A line with a product id but no name or rate takes
them from the product.
"""

from decimal import Decimal
from typing import Any, Callable, Dict, Iterable, List, Type, TypeVar, Union

from billing.business_logic.entities.line_item_entity import LineItemEntity
from billing.business_logic.entities.product_entity import ProductEntity
from billing.business_logic.invoice_status import to_amount
from billing.constants import ZERO
from billing.exceptions import InvalidQuantityError, InvalidAmountError, InvalidLineItemError

L = TypeVar("L", bound=LineItemEntity)


def whole_quantity(value: Any, product_name: str = "") -> int:
    """A positive whole number of units. Text, booleans and fractions are rejected."""
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        raise InvalidQuantityError(f"Quantity for '{product_name}' must be a positive whole number, got {value!r}.")
    try:
        whole = int(value)
    except (ValueError, OverflowError):
        raise InvalidQuantityError(f"Quantity for '{product_name}' must be a positive whole number, got {value!r}.")
    if whole != value or whole <= 0:
        raise InvalidQuantityError(f"Quantity for '{product_name}' must be a positive whole number, got {value!r}.")
    return whole


def validate_line(item: LineItemEntity) -> None:
    whole_quantity(item.quantity, item.product_name)
    if to_amount(item.rate) < ZERO:
        raise InvalidAmountError(f"Rate for '{item.product_name}' cannot be negative, got {item.rate}.")
    if not item.product_name:
        raise InvalidLineItemError("Every line needs a product name.")


def build_lines(items_data: Iterable[Union[LineItemEntity, Dict[str, Any]]],
                item_cls: Type[L],
                require_product: Callable[[int], ProductEntity]) -> List[L]:
    items: List[L] = []
    for data in items_data or []:
        if isinstance(data, LineItemEntity):
            name, quantity, rate, product_id = data.product_name, data.quantity, data.rate, data.product_id
        else:
            product_id = data.get("product_id")
            name = data.get("product_name")
            quantity = data.get("quantity")
            rate = data.get("rate")
            if product_id is not None and (not name or rate is None):
                product = require_product(product_id)
                name = name or product.name
                rate = product.price if rate is None else rate

        item = item_cls(product_name=name or "",
                        quantity=whole_quantity(quantity, name or ""),
                        rate=to_amount(rate if rate is not None else "0"),
                        product_id=product_id)
        validate_line(item)
        items.append(item)
    return items
