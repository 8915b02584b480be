# billing/business_logic/payment_allocator.py
"""
Payment Allocator.

Distributes an incoming payment/receipt over a party's unpaid invoices,
oldest first. An invoice is only touched when the remaining amount covers its
whole total; the walk stops at the first invoice it cannot fully cover and the
rest of the amount is reported back as unallocated.
"""

from dataclasses import dataclass, field, replace
from decimal import Decimal
from typing import Iterable, List, Tuple

from billing.business_logic.entities.invoice_entity import InvoiceEntity
from billing.business_logic import invoice_status
from billing.constants import InvoiceStatus, ZERO
from billing.exceptions import InvalidAmountError

import logging
logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InvoiceAllocation:
    invoice_id: int
    invoice_number: str
    amount: Decimal


@dataclass
class AllocationResult:
    amount: Decimal
    updated_invoices: List[InvoiceEntity] = field(default_factory=list)
    allocations: List[InvoiceAllocation] = field(default_factory=list)

    @property
    def allocated(self) -> Decimal:
        return sum((a.amount for a in self.allocations), ZERO)

    @property
    def unallocated(self) -> Decimal:
        return self.amount - self.allocated


def eligible_invoices(party_id: int, invoices: Iterable[InvoiceEntity]) -> List[InvoiceEntity]:
    """The party's unpaid invoices, oldest first; same-date invoices in insertion order."""
    candidates = [inv for inv in invoices if inv.party_id == party_id and inv.status == InvoiceStatus.UNPAID]
    return sorted(candidates, key=lambda inv: (inv.invoice_date, inv.id is None, inv.id or 0, inv.invoice_number))


def allocate(party_id: int, amount, invoices: Iterable[InvoiceEntity]) -> AllocationResult:
    amount_dec = invoice_status.to_amount(amount)
    if amount_dec <= ZERO:
        raise InvalidAmountError(f"Allocation amount must be positive, got {amount_dec}.")

    result = AllocationResult(amount=amount_dec)
    remaining = amount_dec

    for invoice in eligible_invoices(party_id, invoices):
        if remaining <= ZERO:
            break
        total = invoice.total
        if remaining < total:
            logger.debug(f"Stopping at {invoice.invoice_number}: remaining {remaining} does not cover total {total}.")
            break

        if total > ZERO:
            updated = invoice_status.apply_payment(invoice, total)
        else:
            updated = invoice_status.set_status(invoice, InvoiceStatus.PAID)
        result.updated_invoices.append(updated)
        result.allocations.append(InvoiceAllocation(invoice.id, invoice.invoice_number, total))
        remaining -= total

    logger.debug(f"Allocated {result.allocated} of {amount_dec} for party ID {party_id} "
                 f"across {len(result.allocations)} invoice(s).")
    return result


def trim_allocations(allocations: Iterable, keep: Decimal) -> Tuple[list, list]:
    """
    Shrinks an invoice's allocation rows so they sum to at most ``keep``.
    The newest rows give way first. Returns ``(changed, removed)``: rows with
    a reduced amount and rows to drop entirely. The trimmed part goes back to
    the party's credit.
    """
    rows = sorted(allocations, key=lambda a: (a.allocation_date, a.id or 0), reverse=True)
    excess = sum((a.amount for a in rows), ZERO) - max(keep, ZERO)
    changed, removed = [], []
    for row in rows:
        if excess <= ZERO:
            break
        if row.amount <= excess:
            removed.append(row)
            excess -= row.amount
        else:
            changed.append(replace(row, amount=row.amount - excess))
            excess = ZERO
    return changed, removed
