# billing/business_logic/invoice_status.py
"""
Invoice Status Engine.

Pure functions: each takes an invoice and returns an updated copy, leaving
persistence to the caller. The status invariant maintained everywhere:

    paid    <=> paid_amount >= total
    partial <=> 0 < paid_amount < total
    unpaid  <=> paid_amount == 0 (and total > 0)
"""

from dataclasses import replace
from decimal import Decimal, InvalidOperation
from typing import Any

from billing.business_logic.entities.invoice_entity import InvoiceEntity
from billing.constants import InvoiceStatus, ZERO
from billing.exceptions import InvalidAmountError, InvalidStatusError

import logging
logger = logging.getLogger(__name__)


def to_amount(value: Any) -> Decimal:
    try:
        return value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        raise InvalidAmountError(f"Invalid amount: {value!r}")


def derive_status(total: Decimal, paid_amount: Decimal) -> InvoiceStatus:
    # A zero-total invoice is settled by definition.
    if paid_amount >= total:
        return InvoiceStatus.PAID
    if paid_amount > ZERO:
        return InvoiceStatus.PARTIAL
    return InvoiceStatus.UNPAID


def remaining_balance(invoice: InvoiceEntity) -> Decimal:
    return max(ZERO, invoice.total - invoice.paid_amount)


def apply_payment(invoice: InvoiceEntity, amount: Any) -> InvoiceEntity:
    """Adds amount to paid_amount, capped at the invoice total."""
    amount_dec = to_amount(amount)
    if amount_dec <= ZERO:
        raise InvalidAmountError(f"Payment amount must be positive, got {amount_dec}.")

    total = invoice.total
    new_paid = min(total, invoice.paid_amount + amount_dec)
    if invoice.paid_amount + amount_dec > total:
        logger.debug(f"Payment of {amount_dec} on {invoice.invoice_number} exceeds its balance; capped at total {total}.")
    return replace(invoice, paid_amount=new_paid, status=derive_status(total, new_paid))


def set_status(invoice: InvoiceEntity, status: InvoiceStatus) -> InvoiceEntity:
    """
    Explicit "mark as paid/unpaid". A blunt reset: paid forces paid_amount to
    the total, unpaid forces it to zero. Any earlier partial amount is dropped.
    """
    if status == InvoiceStatus.PAID:
        return replace(invoice, paid_amount=invoice.total, status=InvoiceStatus.PAID)
    if status == InvoiceStatus.UNPAID:
        return replace(invoice, paid_amount=Decimal("0.00"), status=derive_status(invoice.total, ZERO))
    raise InvalidStatusError(f"Invoice status can only be set to paid or unpaid, not '{status.value}'.")


def rebalance(invoice: InvoiceEntity) -> InvoiceEntity:
    """Re-derives status after the total changed (e.g. an edit), clamping paid_amount to the new total."""
    total = invoice.total
    paid = min(max(ZERO, invoice.paid_amount), total)
    return replace(invoice, paid_amount=paid, status=derive_status(total, paid))
