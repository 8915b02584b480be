# billing/business_logic/return_processor.py
"""
Return Processor.

Validation of a return against its source invoice and the stock effect of
each status transition. The effect fires when a return enters ``processed``
and is undone when it leaves ``processed`` (or is deleted while processed);
``pending`` and ``rejected`` returns never touch stock.
"""

from collections import defaultdict
from dataclasses import dataclass, replace
from enum import Enum
from typing import Dict, Iterable, List, Optional, Tuple, Union

from billing.business_logic.entities.invoice_entity import InvoiceEntity
from billing.business_logic.entities.line_item_entity import LineItemEntity
from billing.business_logic.entities.return_entity import ReturnEntity
from billing.business_logic import line_items
from billing.constants import ReturnStatus
from billing.exceptions import InvalidQuantityError

import logging
logger = logging.getLogger(__name__)


class StockEffect(Enum):
    APPLY = "apply"
    REVERSE = "reverse"
    NONE = "none"


@dataclass(frozen=True)
class ReturnQuantityWarning:
    """More of a product returned than the source invoice carried. Advisory only."""
    product_name: str
    returned: int
    invoiced: int
    product_id: Optional[int] = None


def _line_key(item: LineItemEntity) -> Union[int, str]:
    # Free-text lines have no product id; match them by name.
    return item.product_id if item.product_id is not None else item.product_name


def _quantities(items: Iterable[LineItemEntity]) -> Dict[Union[int, str], int]:
    totals: Dict[Union[int, str], int] = defaultdict(int)
    for item in items:
        totals[_line_key(item)] += item.quantity
    return totals


def validate_items(items: List[LineItemEntity]) -> None:
    if not items:
        raise InvalidQuantityError("A return must have at least one item.")
    for item in items:
        line_items.validate_line(item)


def validate_return(ret: ReturnEntity,
                    source_invoice: Optional[InvoiceEntity] = None,
                    prior_returns: Iterable[ReturnEntity] = ()) -> List[ReturnQuantityWarning]:
    """
    Raises InvalidQuantityError for an empty return or a quantity that is
    not a positive whole number. When tied to an invoice, quantities above what the invoice
    carried (less what other non-rejected returns already took back) come
    back as warnings.
    """
    validate_items(ret.items)
    if source_invoice is None:
        return []

    invoiced = _quantities(source_invoice.items)
    already_returned: Dict[Union[int, str], int] = defaultdict(int)
    for other in prior_returns:
        if other.id == ret.id or other.status == ReturnStatus.REJECTED:
            continue
        for key, qty in _quantities(other.items).items():
            already_returned[key] += qty

    names = {_line_key(item): item.product_name for item in ret.items}
    warnings = []
    for key, returned in _quantities(ret.items).items():
        available = invoiced.get(key, 0) - already_returned.get(key, 0)
        if returned > available:
            warnings.append(ReturnQuantityWarning(
                product_name=names[key],
                returned=returned,
                invoiced=max(0, available),
                product_id=key if isinstance(key, int) else None,
            ))
    return warnings


def transition_effect(current: ReturnStatus, new: ReturnStatus) -> StockEffect:
    if current == new:
        return StockEffect.NONE
    if new == ReturnStatus.PROCESSED:
        return StockEffect.APPLY
    if current == ReturnStatus.PROCESSED:
        return StockEffect.REVERSE
    return StockEffect.NONE


def transition(ret: ReturnEntity, new_status: ReturnStatus) -> Tuple[ReturnEntity, StockEffect]:
    """Returns the return in its new status and the stock effect the caller must apply."""
    effect = transition_effect(ret.status, new_status)
    if ret.status == new_status:
        return ret, effect
    logger.debug(f"Return {ret.return_number}: {ret.status.value} -> {new_status.value} ({effect.value}).")
    return replace(ret, status=new_status), effect


def deletion_effect(ret: ReturnEntity) -> StockEffect:
    return StockEffect.REVERSE if ret.status == ReturnStatus.PROCESSED else StockEffect.NONE
