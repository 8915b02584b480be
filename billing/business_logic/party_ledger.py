# billing/business_logic/party_ledger.py
"""
Party Ledger Aggregator.

Merges a party's invoices and transactions into one chronological statement
and derives the summary totals shown beside it.
"""

from decimal import Decimal
from typing import Iterable, List

from billing.business_logic.entities.allocation_entity import AllocationEntity
from billing.business_logic.entities.invoice_entity import InvoiceEntity
from billing.business_logic.entities.ledger_entry import LedgerEntry, LedgerTotals
from billing.business_logic.entities.transaction_entity import TransactionEntity
from billing.constants import PartyType, TransactionType, InvoiceStatus, LedgerEntryKind, ZERO


def ledger_for(party_id: int,
               invoices: Iterable[InvoiceEntity],
               transactions: Iterable[TransactionEntity]) -> List[LedgerEntry]:
    """Invoices then transactions, stably sorted by date."""
    entries = []
    for invoice in invoices:
        if invoice.party_id != party_id:
            continue
        entries.append(LedgerEntry(
            entry_date=invoice.invoice_date,
            kind=LedgerEntryKind.INVOICE,
            reference=invoice.invoice_number,
            amount=invoice.total,
            source_id=invoice.id,
            status=invoice.status,
        ))
    for txn in transactions:
        if txn.party_id != party_id:
            continue
        kind = LedgerEntryKind.RECEIPT if txn.transaction_type == TransactionType.RECEIPT else LedgerEntryKind.PAYMENT
        entries.append(LedgerEntry(
            entry_date=txn.transaction_date,
            kind=kind,
            reference=txn.reference or f"TXN-{txn.id}",
            amount=txn.amount,
            source_id=txn.id,
        ))
    entries.sort(key=lambda entry: entry.entry_date)
    return entries


def totals(entries: Iterable[LedgerEntry], party_type: PartyType, credit_balance: Decimal = ZERO) -> LedgerTotals:
    """
    total  = sum of invoice totals
    paid   = totals of paid invoices + receipts (customer) or payments (supplier)
    unpaid = max(0, total - paid)

    A net-position view, not a running balance: money beyond the invoiced
    totals is not carried here (see credit_balance).
    """
    counted_kind = LedgerEntryKind.RECEIPT if party_type == PartyType.CUSTOMER else LedgerEntryKind.PAYMENT
    total_amount = ZERO
    paid_amount = ZERO
    for entry in entries:
        if entry.kind == LedgerEntryKind.INVOICE:
            total_amount += entry.amount
            if entry.status == InvoiceStatus.PAID:
                paid_amount += entry.amount
        elif entry.kind == counted_kind:
            paid_amount += entry.amount
    return LedgerTotals(
        total_amount=total_amount,
        paid_amount=paid_amount,
        unpaid_amount=max(ZERO, total_amount - paid_amount),
        credit_balance=credit_balance,
    )


def credit_balance(transactions: Iterable[TransactionEntity], allocations: Iterable[AllocationEntity]) -> Decimal:
    """Money received/paid that no invoice absorbed."""
    transactions = list(transactions)
    txn_ids = {txn.id for txn in transactions}
    received = sum((txn.amount for txn in transactions), ZERO)
    allocated = sum((a.amount for a in allocations if a.transaction_id in txn_ids), ZERO)
    return max(ZERO, received - allocated)
