"""
Tests for oldest-first payment allocation.
"""

from datetime import date
from decimal import Decimal

import pytest

from billing.business_logic import payment_allocator
from billing.business_logic.entities import AllocationEntity, InvoiceEntity, InvoiceItemEntity
from billing.constants import InvoiceStatus
from billing.exceptions import InvalidAmountError


def make_invoice(invoice_id, total, on, party_id=1, status=InvoiceStatus.UNPAID, paid="0.00"):
    return InvoiceEntity(
        invoice_number=f"INV-2401-{invoice_id:03d}",
        party_id=party_id,
        invoice_date=on,
        paid_amount=Decimal(paid),
        status=status,
        items=[InvoiceItemEntity(product_name="Item", quantity=1, rate=Decimal(total))],
        id=invoice_id,
    )


class TestAllocate:

    def setup_method(self):
        self.i1 = make_invoice(1, "100.00", date(2024, 1, 1))
        self.i2 = make_invoice(2, "200.00", date(2024, 1, 15))
        self.invoices = [self.i2, self.i1]

    def test_exact_cover_of_oldest(self):
        result = payment_allocator.allocate(1, Decimal("100"), self.invoices)
        assert [inv.id for inv in result.updated_invoices] == [1]
        assert result.updated_invoices[0].status == InvoiceStatus.PAID
        assert result.updated_invoices[0].paid_amount == Decimal("100.00")
        assert result.unallocated == Decimal("0")

    def test_stops_at_first_uncoverable_invoice(self):
        result = payment_allocator.allocate(1, Decimal("150"), self.invoices)
        assert [inv.id for inv in result.updated_invoices] == [1]
        assert result.unallocated == Decimal("50")
        assert self.i2.status == InvoiceStatus.UNPAID
        assert self.i2.paid_amount == Decimal("0.00")

    def test_covers_both(self):
        result = payment_allocator.allocate(1, Decimal("300"), self.invoices)
        assert [inv.id for inv in result.updated_invoices] == [1, 2]
        assert all(inv.status == InvoiceStatus.PAID for inv in result.updated_invoices)
        assert result.allocated == Decimal("300.00")
        assert result.unallocated == Decimal("0")

    def test_too_small_for_oldest_allocates_nothing(self):
        result = payment_allocator.allocate(1, Decimal("60"), self.invoices)
        assert result.updated_invoices == []
        assert result.allocations == []
        assert result.unallocated == Decimal("60")

    def test_allocations_name_invoice_and_amount(self):
        result = payment_allocator.allocate(1, Decimal("300"), self.invoices)
        assert [(a.invoice_id, a.amount) for a in result.allocations] == [(1, Decimal("100.00")), (2, Decimal("200.00"))]

    def test_no_eligible_invoices(self):
        result = payment_allocator.allocate(7, Decimal("500"), self.invoices)
        assert result.updated_invoices == []
        assert result.unallocated == Decimal("500")

    @pytest.mark.parametrize("amount", [Decimal("0"), Decimal("-10")])
    def test_non_positive_amount_rejected(self, amount):
        with pytest.raises(InvalidAmountError):
            payment_allocator.allocate(1, amount, self.invoices)

    def test_input_invoices_untouched(self):
        payment_allocator.allocate(1, Decimal("300"), self.invoices)
        assert self.i1.status == InvoiceStatus.UNPAID
        assert self.i2.status == InvoiceStatus.UNPAID


class TestEligibleInvoices:

    def test_only_unpaid_for_party(self):
        invoices = [
            make_invoice(1, "100.00", date(2024, 1, 1)),
            make_invoice(2, "100.00", date(2024, 1, 2), status=InvoiceStatus.PARTIAL, paid="40.00"),
            make_invoice(3, "100.00", date(2024, 1, 3), status=InvoiceStatus.PAID, paid="100.00"),
            make_invoice(4, "100.00", date(2024, 1, 4), party_id=2),
        ]
        assert [inv.id for inv in payment_allocator.eligible_invoices(1, invoices)] == [1]

    def test_same_date_ordered_by_insertion(self):
        invoices = [
            make_invoice(3, "10.00", date(2024, 1, 5)),
            make_invoice(1, "10.00", date(2024, 1, 5)),
            make_invoice(2, "10.00", date(2024, 1, 2)),
        ]
        assert [inv.id for inv in payment_allocator.eligible_invoices(1, invoices)] == [2, 1, 3]

    def test_partial_invoice_is_skipped_by_allocation(self):
        invoices = [
            make_invoice(1, "100.00", date(2024, 1, 1), status=InvoiceStatus.PARTIAL, paid="40.00"),
            make_invoice(2, "50.00", date(2024, 1, 2)),
        ]
        result = payment_allocator.allocate(1, Decimal("50"), invoices)
        assert [inv.id for inv in result.updated_invoices] == [2]


class TestTrimAllocations:

    def rows(self):
        return [
            AllocationEntity(transaction_id=1, invoice_id=1, amount=Decimal("60.00"), allocation_date=date(2024, 2, 1), id=1),
            AllocationEntity(transaction_id=2, invoice_id=1, amount=Decimal("40.00"), allocation_date=date(2024, 3, 1), id=2),
        ]

    def test_within_paid_amount_untouched(self):
        assert payment_allocator.trim_allocations(self.rows(), Decimal("100.00")) == ([], [])

    def test_newest_row_reduced_first(self):
        changed, removed = payment_allocator.trim_allocations(self.rows(), Decimal("70.00"))
        assert removed == []
        assert [(a.id, a.amount) for a in changed] == [(2, Decimal("10.00"))]

    def test_rows_removed_then_reduced(self):
        changed, removed = payment_allocator.trim_allocations(self.rows(), Decimal("50.00"))
        assert [a.id for a in removed] == [2]
        assert [(a.id, a.amount) for a in changed] == [(1, Decimal("50.00"))]

    def test_zero_keeps_nothing(self):
        changed, removed = payment_allocator.trim_allocations(self.rows(), Decimal("0"))
        assert changed == []
        assert sorted(a.id for a in removed) == [1, 2]
