# tests/conftest.py
from decimal import Decimal

import pytest

from billing.app import BillingApp
from billing.constants import PartyType


@pytest.fixture
def db_path(tmp_path):
    return str(tmp_path / "billing_test.db")


@pytest.fixture
def app(db_path):
    return BillingApp(db_path=db_path)


@pytest.fixture
def customer(app):
    return app.party_manager.create_party("Asha Traders", PartyType.CUSTOMER, mobile="9800000001")


@pytest.fixture
def supplier(app):
    return app.party_manager.create_party("Northwind Wholesale", PartyType.SUPPLIER)


@pytest.fixture
def widget(app):
    return app.product_manager.create_product("Widget", price=Decimal("50.00"), cost_price=Decimal("30.00"), stock=10)
