# billing/business_logic/stock_ledger.py
"""
Stock Ledger.

Stock effects of invoices and returns, the movement history of a product and
stock classification. Every function is pure: products come in, updated
copies come out, and the caller persists them.

Sign conventions:
    customer invoice (sale)       -qty
    supplier invoice (purchase)   +qty
    processed sales return        +qty   (goods come back)
    processed purchase return     -qty   (goods go back to the supplier)
"""

from collections import defaultdict
from dataclasses import dataclass, replace
from typing import Dict, Iterable, List, Mapping

from billing.business_logic.entities.invoice_entity import InvoiceEntity
from billing.business_logic.entities.line_item_entity import LineItemEntity
from billing.business_logic.entities.party_entity import PartyEntity
from billing.business_logic.entities.product_entity import ProductEntity
from billing.business_logic.entities.return_entity import ReturnEntity
from billing.business_logic.entities.stock_adjustment_entity import StockAdjustmentEntity
from billing.business_logic.entities.stock_movement_entry import StockMovementEntry
from billing.config import DEFAULT_LOW_STOCK_ALERT
from billing.constants import PartyType, ReturnType, ReturnStatus, StockStatus, MovementSource
from billing.exceptions import NotFoundError

import logging
logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StockShortage:
    """A sale line asking for more than is on hand. Advisory: the sale is still recorded."""
    product_id: int
    product_name: str
    requested: int
    available: int


# --- Signed quantity changes ---

def invoice_direction(party_type: PartyType) -> int:
    return -1 if party_type == PartyType.CUSTOMER else 1


def return_direction(return_type: ReturnType) -> int:
    return 1 if return_type == ReturnType.SALES else -1


def _net_by_product(items: Iterable[LineItemEntity], sign: int) -> Dict[int, int]:
    changes: Dict[int, int] = defaultdict(int)
    for item in items:
        if item.product_id is None:
            continue  # free-text line, no stock effect
        changes[item.product_id] += sign * item.quantity
    return dict(changes)


def invoice_stock_changes(invoice: InvoiceEntity, party_type: PartyType) -> Dict[int, int]:
    return _net_by_product(invoice.items, invoice_direction(party_type))


def return_stock_changes(ret: ReturnEntity) -> Dict[int, int]:
    return _net_by_product(ret.items, return_direction(ret.return_type))


# --- Applying changes to products ---

def apply_changes(products: Mapping[int, ProductEntity],
                  changes: Mapping[int, int],
                  strict: bool = True) -> List[ProductEntity]:
    """
    Returns updated copies of the products touched by changes. With strict, a
    product id missing from products raises NotFoundError before anything is
    changed; otherwise the line is skipped with a warning.
    """
    if strict:
        missing = [pid for pid in changes if pid not in products]
        if missing:
            raise NotFoundError("Product", missing[0])

    updated = []
    for product_id, change in changes.items():
        product = products.get(product_id)
        if product is None:
            logger.warning(f"Product ID {product_id} no longer exists; stock change of {change} skipped.")
            continue
        if change == 0:
            continue
        new_stock = product.stock + change
        if new_stock < 0:
            logger.debug(f"Product '{product.name}' (ID: {product_id}) goes negative: {product.stock} -> {new_stock}.")
        updated.append(replace(product, stock=new_stock))
    return updated


def _negate(changes: Mapping[int, int]) -> Dict[int, int]:
    return {pid: -change for pid, change in changes.items()}


def apply_invoice(products: Mapping[int, ProductEntity], invoice: InvoiceEntity, party_type: PartyType) -> List[ProductEntity]:
    return apply_changes(products, invoice_stock_changes(invoice, party_type))


def reverse_invoice(products: Mapping[int, ProductEntity], invoice: InvoiceEntity, party_type: PartyType) -> List[ProductEntity]:
    return apply_changes(products, _negate(invoice_stock_changes(invoice, party_type)), strict=False)


def apply_return(products: Mapping[int, ProductEntity], ret: ReturnEntity) -> List[ProductEntity]:
    return apply_changes(products, return_stock_changes(ret))


def reverse_return(products: Mapping[int, ProductEntity], ret: ReturnEntity) -> List[ProductEntity]:
    return apply_changes(products, _negate(return_stock_changes(ret)), strict=False)


def find_shortages(products: Mapping[int, ProductEntity], invoice: InvoiceEntity, party_type: PartyType) -> List[StockShortage]:
    """Sale lines whose quantity exceeds the product's current stock."""
    if party_type != PartyType.CUSTOMER:
        return []
    shortages = []
    for product_id, change in invoice_stock_changes(invoice, party_type).items():
        product = products.get(product_id)
        if product is not None and -change > product.stock:
            shortages.append(StockShortage(product_id, product.name, -change, product.stock))
    return shortages


# --- Reads ---

def current_stock(product: ProductEntity) -> int:
    return product.stock


def stock_status(product: ProductEntity, default_threshold: int = DEFAULT_LOW_STOCK_ALERT) -> StockStatus:
    threshold = product.low_stock_alert if product.low_stock_alert is not None else default_threshold
    if product.stock <= 0:
        return StockStatus.OUT_OF_STOCK
    if product.stock <= threshold:
        return StockStatus.LOW_STOCK
    return StockStatus.IN_STOCK


def movement_history(product: ProductEntity,
                     invoices: Iterable[InvoiceEntity],
                     parties: Mapping[int, PartyEntity],
                     returns: Iterable[ReturnEntity] = (),
                     adjustments: Iterable[StockAdjustmentEntity] = ()) -> List[StockMovementEntry]:
    """
    Rebuilds the product's movements from source documents, oldest first.
    Only processed returns contribute. Same-date movements keep input order
    (invoices, then returns, then adjustments).
    """
    raw = []  # (date, reference, source, change)

    for invoice in invoices:
        party = parties.get(invoice.party_id)
        if party is None:
            logger.warning(f"Invoice {invoice.invoice_number} references missing party ID {invoice.party_id}; skipped in history.")
            continue
        sign = invoice_direction(party.party_type)
        source = MovementSource.SALE if sign < 0 else MovementSource.PURCHASE
        for item in invoice.items:
            if item.product_id == product.id:
                raw.append((invoice.invoice_date, invoice.invoice_number, source, sign * item.quantity))

    for ret in returns:
        if ret.status != ReturnStatus.PROCESSED:
            continue
        sign = return_direction(ret.return_type)
        source = MovementSource.SALES_RETURN if ret.return_type == ReturnType.SALES else MovementSource.PURCHASE_RETURN
        for item in ret.items:
            if item.product_id == product.id:
                raw.append((ret.return_date, ret.return_number, source, sign * item.quantity))

    for adjustment in adjustments:
        if adjustment.product_id == product.id:
            label = adjustment.reason or f"ADJ-{adjustment.id}"
            raw.append((adjustment.adjustment_date, label, MovementSource.ADJUSTMENT, adjustment.quantity_change))

    raw.sort(key=lambda entry: entry[0])  # stable

    history = []
    balance = product.opening_stock
    for movement_date, reference, source, change in raw:
        balance += change
        history.append(StockMovementEntry(
            movement_date=movement_date,
            reference=reference,
            source=source,
            quantity_change=change,
            unit=product.unit,
            balance_after=balance,
        ))
    return history


def expected_stock(product: ProductEntity, history: List[StockMovementEntry]) -> int:
    """Opening stock plus every movement; equals product.stock when nothing drifted."""
    return product.opening_stock + sum(entry.quantity_change for entry in history)


def index_by_id(entities: Iterable) -> Dict[int, object]:
    return {entity.id: entity for entity in entities}
