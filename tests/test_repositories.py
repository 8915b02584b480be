"""
Tests for the sqlite entity store.
"""

import sqlite3
from datetime import date
from decimal import Decimal

import pytest

from billing.business_logic.entities import (
    InvoiceEntity, InvoiceItemEntity, PartyEntity, ProductEntity, SettingEntity,
)
from billing.constants import InvoiceStatus, PartyType


class TestBaseRepository:

    def test_put_creates_then_overwrites(self, app):
        product = ProductEntity(name="Bolt", price=Decimal("0.75"), stock=100, opening_stock=100)
        app.products_repo.put(product)
        assert product.id is not None

        product.price = Decimal("0.80")
        app.products_repo.put(product)
        stored = app.products_repo.get_by_id(product.id)
        assert stored.price == Decimal("0.80")
        assert stored.low_stock_alert is None
        assert len(app.products_repo.get_all()) == 1

    def test_delete(self, app):
        party = app.parties_repo.put(PartyEntity(name="Gone", party_type=PartyType.CUSTOMER))
        app.parties_repo.delete(party.id)
        assert app.parties_repo.get_by_id(party.id) is None

    def test_find_by_criteria_operators(self, app):
        for stock in (1, 5, 9):
            app.products_repo.add(ProductEntity(name=f"P{stock}", stock=stock, opening_stock=stock))
        assert [p.stock for p in app.products_repo.find_by_criteria({"stock": (">=", 5)})] == [5, 9]
        assert [p.stock for p in app.products_repo.find_by_criteria({"stock": ("BETWEEN", (2, 8))})] == [5]
        assert [p.name for p in app.products_repo.find_by_criteria({"name": "P9"})] == ["P9"]

    def test_check_constraint_rejects_unknown_type(self, app):
        with pytest.raises(sqlite3.IntegrityError):
            app.db_manager.execute_query("INSERT INTO parties (name, party_type) VALUES (?, ?)", ("X", "vendor"))


class TestDocumentRepository:

    def setup_invoice(self, app):
        party = app.parties_repo.add(PartyEntity(name="C", party_type=PartyType.CUSTOMER))
        invoice = InvoiceEntity(
            invoice_number="INV-2401-001", party_id=party.id, invoice_date=date(2024, 1, 3),
            gst_percentage=Decimal("5"), status=InvoiceStatus.UNPAID,
            items=[InvoiceItemEntity(product_name="A", quantity=2, rate=Decimal("9.99")),
                   InvoiceItemEntity(product_name="B", quantity=1, rate=Decimal("0.02"))],
        )
        return app.invoices_repo.add(invoice)

    def test_items_round_trip_with_header(self, app):
        invoice = self.setup_invoice(app)
        stored = app.invoices_repo.get_by_id(invoice.id)
        assert stored.invoice_date == date(2024, 1, 3)
        assert stored.status == InvoiceStatus.UNPAID
        assert [(i.product_name, i.quantity, i.rate) for i in stored.items] == [
            ("A", 2, Decimal("9.99")), ("B", 1, Decimal("0.02"))]
        assert all(i.invoice_id == invoice.id for i in stored.items)
        assert stored.total == invoice.total == Decimal("21.00")

    def test_update_replaces_items(self, app):
        invoice = self.setup_invoice(app)
        invoice.items = [InvoiceItemEntity(product_name="C", quantity=3, rate=Decimal("1.00"))]
        app.invoices_repo.update(invoice)
        stored = app.invoices_repo.get_by_id(invoice.id)
        assert [i.product_name for i in stored.items] == ["C"]

    def test_delete_cascades_to_items(self, app):
        invoice = self.setup_invoice(app)
        app.invoices_repo.delete(invoice.id)
        assert app.db_manager.fetch_all("SELECT * FROM invoice_items") == []

    def test_duplicate_number_rejected(self, app):
        invoice = self.setup_invoice(app)
        duplicate = InvoiceEntity(invoice_number=invoice.invoice_number, party_id=invoice.party_id,
                                  invoice_date=date(2024, 1, 4))
        with pytest.raises(sqlite3.IntegrityError):
            app.invoices_repo.add(duplicate)
        assert duplicate.id is None


class TestSettingsRepository:

    def test_set_get_delete(self, app):
        app.settings_repo.set_setting(SettingEntity(key="low_stock_alert", value="8"))
        assert app.settings_repo.get_value("low_stock_alert") == "8"
        app.settings_repo.set_setting(SettingEntity(key="low_stock_alert", value="9"))
        assert [s.value for s in app.settings_repo.get_all_settings()] == ["9"]
        app.settings_repo.delete_setting("low_stock_alert")
        assert app.settings_repo.get_value("low_stock_alert", "5") == "5"
