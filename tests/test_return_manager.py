"""
Tests for returns: numbering, validation warnings and the stock effect of
status transitions and deletion.
"""

from datetime import date
from decimal import Decimal

import pytest

from billing.constants import ReturnType, ReturnStatus
from billing.exceptions import InvalidQuantityError, NotFoundError


def lines(product, qty):
    return [{"product_id": product.id, "quantity": qty}]


class TestReturnStockEffects:

    def test_sales_return_processed_then_rejected(self, app, customer, widget):
        ret = app.return_manager.create_return(ReturnType.SALES, customer.id, lines(widget, 2)).return_entity
        assert app.product_manager.current_stock(widget.id) == 10

        app.return_manager.process_return(ret.id)
        assert app.product_manager.current_stock(widget.id) == 12

        app.return_manager.reject_return(ret.id)
        assert app.product_manager.current_stock(widget.id) == 10
        assert app.return_manager.require_return(ret.id).status == ReturnStatus.REJECTED

    def test_purchase_return_lowers_stock(self, app, supplier, widget):
        ret = app.return_manager.create_return(ReturnType.PURCHASE, supplier.id, lines(widget, 3)).return_entity
        app.return_manager.process_return(ret.id)
        assert app.product_manager.current_stock(widget.id) == 7

    def test_processing_twice_applies_once(self, app, customer, widget):
        ret = app.return_manager.create_return(ReturnType.SALES, customer.id, lines(widget, 2)).return_entity
        app.return_manager.process_return(ret.id)
        app.return_manager.process_return(ret.id)
        assert app.product_manager.current_stock(widget.id) == 12

    def test_pending_to_rejected_has_no_effect(self, app, customer, widget):
        ret = app.return_manager.create_return(ReturnType.SALES, customer.id, lines(widget, 2)).return_entity
        app.return_manager.reject_return(ret.id)
        assert app.product_manager.current_stock(widget.id) == 10

    def test_back_to_pending_reverses(self, app, customer, widget):
        ret = app.return_manager.create_return(ReturnType.SALES, customer.id, lines(widget, 2)).return_entity
        app.return_manager.process_return(ret.id)
        app.return_manager.transition_status(ret.id, ReturnStatus.PENDING)
        assert app.product_manager.current_stock(widget.id) == 10

    def test_delete_processed_return_reverses_once(self, app, customer, widget):
        before = app.product_manager.current_stock(widget.id)
        ret = app.return_manager.create_return(ReturnType.SALES, customer.id, lines(widget, 2)).return_entity
        app.return_manager.process_return(ret.id)
        assert app.product_manager.current_stock(widget.id) == before + 2

        app.return_manager.delete_return(ret.id)
        assert app.product_manager.current_stock(widget.id) == before
        with pytest.raises(NotFoundError):
            app.return_manager.require_return(ret.id)

    def test_delete_pending_return_leaves_stock(self, app, customer, widget):
        ret = app.return_manager.create_return(ReturnType.SALES, customer.id, lines(widget, 2)).return_entity
        app.return_manager.delete_return(ret.id)
        assert app.product_manager.current_stock(widget.id) == 10

    def test_created_as_processed_applies_immediately(self, app, customer, widget):
        app.return_manager.create_return(ReturnType.SALES, customer.id, lines(widget, 4), status=ReturnStatus.PROCESSED)
        assert app.product_manager.current_stock(widget.id) == 14

    def test_no_money_moves(self, app, customer, widget):
        invoice = app.invoice_manager.create_invoice(customer.id, lines(widget, 3), gst_percentage=0).invoice
        ret = app.return_manager.create_return(ReturnType.SALES, customer.id, lines(widget, 1),
                                               invoice_id=invoice.id).return_entity
        app.return_manager.process_return(ret.id)
        stored = app.invoice_manager.require_invoice(invoice.id)
        assert stored.paid_amount == Decimal("0")
        assert stored.total == Decimal("150.00")


class TestCreateReturn:

    def test_numbering_per_type(self, app, customer, supplier, widget):
        on = date(2024, 5, 3)
        sr1 = app.return_manager.create_return(ReturnType.SALES, customer.id, lines(widget, 1), return_date=on)
        sr2 = app.return_manager.create_return(ReturnType.SALES, customer.id, lines(widget, 1), return_date=on)
        pr1 = app.return_manager.create_return(ReturnType.PURCHASE, supplier.id, lines(widget, 1), return_date=on)
        assert sr1.return_entity.return_number == "SR-2405-001"
        assert sr2.return_entity.return_number == "SR-2405-002"
        assert pr1.return_entity.return_number == "PR-2405-001"

    def test_over_return_against_invoice_warns(self, app, customer, widget):
        invoice = app.invoice_manager.create_invoice(customer.id, lines(widget, 3), gst_percentage=12).invoice
        result = app.return_manager.create_return(ReturnType.SALES, customer.id, lines(widget, 5), invoice_id=invoice.id)
        assert result.has_warnings
        assert result.warnings[0].returned == 5
        assert result.warnings[0].invoiced == 3
        ret = app.return_manager.require_return(result.return_entity.id)
        assert ret.invoice_number == invoice.invoice_number
        assert ret.gst_percentage == Decimal("12")
        assert ret.items[0].rate == Decimal("50.00")

    def test_within_invoice_no_warning(self, app, customer, widget):
        invoice = app.invoice_manager.create_invoice(customer.id, lines(widget, 3)).invoice
        result = app.return_manager.create_return(ReturnType.SALES, customer.id, lines(widget, 3), invoice_id=invoice.id)
        assert not result.has_warnings
        assert [r.id for r in app.return_manager.get_returns_for_invoice(invoice.id)] == [result.return_entity.id]

    def test_invalid_quantity_writes_nothing(self, app, customer, widget):
        with pytest.raises(InvalidQuantityError):
            app.return_manager.create_return(ReturnType.SALES, customer.id, lines(widget, 0))
        with pytest.raises(InvalidQuantityError):
            app.return_manager.create_return(ReturnType.SALES, customer.id, [])
        assert app.return_manager.get_all_returns() == []

    @pytest.mark.parametrize("qty", [1.5, "2"])
    def test_processed_return_with_fractional_or_text_quantity_writes_nothing(self, app, customer, widget, qty):
        with pytest.raises(InvalidQuantityError):
            app.return_manager.create_return(ReturnType.SALES, customer.id, lines(widget, qty),
                                             status=ReturnStatus.PROCESSED)
        assert app.return_manager.get_all_returns() == []
        assert app.product_manager.current_stock(widget.id) == 10

    def test_unknown_invoice(self, app, customer, widget):
        with pytest.raises(NotFoundError):
            app.return_manager.create_return(ReturnType.SALES, customer.id, lines(widget, 1), invoice_id=321)

    def test_filters(self, app, customer, supplier, widget):
        app.return_manager.create_return(ReturnType.SALES, customer.id, lines(widget, 1))
        app.return_manager.create_return(ReturnType.PURCHASE, supplier.id, lines(widget, 1), status=ReturnStatus.PROCESSED)
        assert len(app.return_manager.get_returns_by_type(ReturnType.SALES)) == 1
        assert len(app.return_manager.get_returns_by_status(ReturnStatus.PROCESSED)) == 1
