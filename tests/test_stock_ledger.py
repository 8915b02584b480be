"""
Tests for the stock ledger: signed stock effects, movement history and
stock classification. All pure, no database.
"""

from datetime import date
from decimal import Decimal

import pytest

from billing.business_logic import stock_ledger
from billing.business_logic.entities import (
    InvoiceEntity, InvoiceItemEntity, PartyEntity, ProductEntity,
    ReturnEntity, ReturnItemEntity, StockAdjustmentEntity,
)
from billing.constants import PartyType, ReturnType, ReturnStatus, StockStatus, MovementSource
from billing.exceptions import NotFoundError


def make_product(product_id=1, stock=10, low_stock_alert=None):
    return ProductEntity(name=f"P{product_id}", price=Decimal("10.00"), stock=stock,
                         opening_stock=stock, low_stock_alert=low_stock_alert, id=product_id)


def make_invoice(number, on, party_id, lines):
    return InvoiceEntity(
        invoice_number=number, party_id=party_id, invoice_date=on,
        items=[InvoiceItemEntity(product_name=f"P{pid}", quantity=qty, rate=Decimal("10.00"), product_id=pid)
               for pid, qty in lines],
    )


def make_return(number, on, return_type, lines, status=ReturnStatus.PROCESSED):
    return ReturnEntity(
        return_number=number, return_type=return_type, party_id=1, return_date=on, status=status,
        items=[ReturnItemEntity(product_name=f"P{pid}", quantity=qty, rate=Decimal("10.00"), product_id=pid)
               for pid, qty in lines],
    )


# =============================================================================
# Stock effects
# =============================================================================


class TestInvoiceEffects:

    def setup_method(self):
        self.products = {1: make_product(1, stock=10), 2: make_product(2, stock=4)}

    def test_sale_decreases_stock(self):
        invoice = make_invoice("INV-1", date(2024, 1, 5), 1, [(1, 3)])
        updated = stock_ledger.apply_invoice(self.products, invoice, PartyType.CUSTOMER)
        assert [p.stock for p in updated] == [7]

    def test_purchase_increases_stock(self):
        invoice = make_invoice("INV-1", date(2024, 1, 5), 2, [(1, 3), (2, 6)])
        updated = stock_ledger.index_by_id(stock_ledger.apply_invoice(self.products, invoice, PartyType.SUPPLIER))
        assert updated[1].stock == 13
        assert updated[2].stock == 10

    def test_lines_for_same_product_are_netted(self):
        invoice = make_invoice("INV-1", date(2024, 1, 5), 1, [(1, 2), (1, 5)])
        assert stock_ledger.invoice_stock_changes(invoice, PartyType.CUSTOMER) == {1: -7}

    def test_free_text_lines_have_no_effect(self):
        invoice = make_invoice("INV-1", date(2024, 1, 5), 1, [(1, 1)])
        invoice.items.append(InvoiceItemEntity(product_name="Delivery", quantity=1, rate=Decimal("5.00")))
        assert stock_ledger.invoice_stock_changes(invoice, PartyType.CUSTOMER) == {1: -1}

    def test_oversell_goes_negative(self):
        invoice = make_invoice("INV-1", date(2024, 1, 5), 1, [(2, 6)])
        updated = stock_ledger.apply_invoice(self.products, invoice, PartyType.CUSTOMER)
        assert updated[0].stock == -2

    def test_reverse_restores(self):
        invoice = make_invoice("INV-1", date(2024, 1, 5), 1, [(1, 3)])
        applied = stock_ledger.index_by_id(stock_ledger.apply_invoice(self.products, invoice, PartyType.CUSTOMER))
        reversed_ = stock_ledger.reverse_invoice(applied, invoice, PartyType.CUSTOMER)
        assert reversed_[0].stock == 10

    def test_inputs_are_not_mutated(self):
        invoice = make_invoice("INV-1", date(2024, 1, 5), 1, [(1, 3)])
        stock_ledger.apply_invoice(self.products, invoice, PartyType.CUSTOMER)
        assert self.products[1].stock == 10

    def test_missing_product_raises_before_any_change(self):
        invoice = make_invoice("INV-1", date(2024, 1, 5), 1, [(1, 3), (99, 1)])
        with pytest.raises(NotFoundError):
            stock_ledger.apply_invoice(self.products, invoice, PartyType.CUSTOMER)

    def test_reverse_skips_missing_product(self):
        invoice = make_invoice("INV-1", date(2024, 1, 5), 1, [(1, 3), (99, 1)])
        reversed_ = stock_ledger.reverse_invoice(self.products, invoice, PartyType.CUSTOMER)
        assert [(p.id, p.stock) for p in reversed_] == [(1, 13)]


class TestShortages:

    def test_sale_beyond_stock_is_reported(self):
        products = {1: make_product(1, stock=2)}
        invoice = make_invoice("INV-1", date(2024, 1, 5), 1, [(1, 5)])
        shortages = stock_ledger.find_shortages(products, invoice, PartyType.CUSTOMER)
        assert len(shortages) == 1
        assert shortages[0].requested == 5
        assert shortages[0].available == 2

    def test_purchases_never_short(self):
        products = {1: make_product(1, stock=0)}
        invoice = make_invoice("INV-1", date(2024, 1, 5), 2, [(1, 5)])
        assert stock_ledger.find_shortages(products, invoice, PartyType.SUPPLIER) == []


class TestReturnEffects:

    def setup_method(self):
        self.products = {1: make_product(1, stock=10)}

    def test_sales_return_adds_stock(self):
        ret = make_return("SR-1", date(2024, 1, 6), ReturnType.SALES, [(1, 2)])
        assert stock_ledger.apply_return(self.products, ret)[0].stock == 12

    def test_purchase_return_removes_stock(self):
        ret = make_return("PR-1", date(2024, 1, 6), ReturnType.PURCHASE, [(1, 3)])
        assert stock_ledger.apply_return(self.products, ret)[0].stock == 7

    def test_reverse_return(self):
        ret = make_return("SR-1", date(2024, 1, 6), ReturnType.SALES, [(1, 2)])
        applied = stock_ledger.index_by_id(stock_ledger.apply_return(self.products, ret))
        assert stock_ledger.reverse_return(applied, ret)[0].stock == 10


# =============================================================================
# Movement history
# =============================================================================


class TestMovementHistory:

    def setup_method(self):
        self.parties = {
            1: PartyEntity(name="C", party_type=PartyType.CUSTOMER, id=1),
            2: PartyEntity(name="S", party_type=PartyType.SUPPLIER, id=2),
        }
        self.product = make_product(1, stock=10)

    def test_chronological_with_running_balance(self):
        invoices = [
            make_invoice("INV-2", date(2024, 2, 1), 1, [(1, 4)]),
            make_invoice("INV-1", date(2024, 1, 1), 2, [(1, 6)]),
        ]
        returns = [
            make_return("SR-1", date(2024, 2, 10), ReturnType.SALES, [(1, 1)]),
            make_return("SR-2", date(2024, 2, 11), ReturnType.SALES, [(1, 9)], status=ReturnStatus.PENDING),
        ]
        adjustments = [StockAdjustmentEntity(product_id=1, quantity_change=-2, adjustment_date=date(2024, 3, 1),
                                             reason="Damaged", id=1)]

        history = stock_ledger.movement_history(self.product, invoices, self.parties, returns, adjustments)

        assert [e.reference for e in history] == ["INV-1", "INV-2", "SR-1", "Damaged"]
        assert [e.quantity_change for e in history] == [6, -4, 1, -2]
        assert [e.source for e in history] == [MovementSource.PURCHASE, MovementSource.SALE,
                                               MovementSource.SALES_RETURN, MovementSource.ADJUSTMENT]
        assert [e.balance_after for e in history] == [16, 12, 13, 11]
        assert all(e.unit == "pcs" for e in history)

    def test_dates_are_non_decreasing(self):
        invoices = [make_invoice(f"INV-{n}", date(2024, 1, day), 1, [(1, 1)]) for n, day in enumerate([9, 3, 7, 3, 1])]
        history = stock_ledger.movement_history(self.product, invoices, self.parties)
        dates = [e.movement_date for e in history]
        assert dates == sorted(dates)

    def test_same_date_keeps_input_order(self):
        invoices = [make_invoice("INV-B", date(2024, 1, 1), 1, [(1, 1)]),
                    make_invoice("INV-A", date(2024, 1, 1), 1, [(1, 1)])]
        history = stock_ledger.movement_history(self.product, invoices, self.parties)
        assert [e.reference for e in history] == ["INV-B", "INV-A"]

    def test_recomputation_matches_applied_stock(self):
        invoices = [make_invoice("INV-1", date(2024, 1, 1), 2, [(1, 5)]),
                    make_invoice("INV-2", date(2024, 1, 2), 1, [(1, 8)])]
        returns = [make_return("SR-1", date(2024, 1, 3), ReturnType.SALES, [(1, 2)])]

        products = {1: self.product}
        for invoice in invoices:
            party_type = self.parties[invoice.party_id].party_type
            products = stock_ledger.index_by_id(stock_ledger.apply_invoice(products, invoice, party_type))
        products = stock_ledger.index_by_id(stock_ledger.apply_return(products, returns[0]))

        current = products[1]
        history = stock_ledger.movement_history(current, invoices, self.parties, returns)
        assert stock_ledger.current_stock(current) == 9
        assert stock_ledger.expected_stock(current, history) == stock_ledger.current_stock(current)

    def test_other_products_are_ignored(self):
        invoices = [make_invoice("INV-1", date(2024, 1, 1), 1, [(2, 5)])]
        assert stock_ledger.movement_history(self.product, invoices, self.parties) == []


# =============================================================================
# Stock classification
# =============================================================================


class TestStockStatus:

    @pytest.mark.parametrize("stock,expected", [
        (-3, StockStatus.OUT_OF_STOCK),
        (0, StockStatus.OUT_OF_STOCK),
        (1, StockStatus.LOW_STOCK),
        (5, StockStatus.LOW_STOCK),
        (6, StockStatus.IN_STOCK),
    ])
    def test_default_threshold(self, stock, expected):
        assert stock_ledger.stock_status(make_product(stock=stock)) == expected

    def test_product_threshold_wins(self):
        product = make_product(stock=8, low_stock_alert=10)
        assert stock_ledger.stock_status(product) == StockStatus.LOW_STOCK
