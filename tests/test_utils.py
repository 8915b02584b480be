"""
Tests for document numbering, fiscal period codes and start-up settings.
"""

from datetime import date, datetime

from billing.app import BillingApp
from billing.business_logic.entities import SettingEntity
from billing.constants import FiscalCalendar
from billing.utils.date_converter import fiscal_period_code
from billing.utils.numbering import next_document_number


class TestFiscalPeriodCode:

    def test_gregorian(self):
        assert fiscal_period_code(date(2024, 10, 5)) == "2410"
        assert fiscal_period_code(datetime(2009, 1, 31, 23, 59)) == "0901"

    def test_jalali_month_boundary(self):
        # Nowruz 1403 fell on 2024-03-20.
        assert fiscal_period_code(date(2024, 3, 19), FiscalCalendar.JALALI) == "0212"
        assert fiscal_period_code(date(2024, 3, 21), FiscalCalendar.JALALI) == "0301"


class TestNextDocumentNumber:

    def test_first_of_month(self):
        assert next_document_number("INV", [], date(2024, 10, 1)) == "INV-2410-001"

    def test_highest_sequence_plus_one(self):
        existing = ["INV-2410-001", "INV-2410-004", "INV-2409-010", "SR-2410-009"]
        assert next_document_number("INV", existing, date(2024, 10, 9)) == "INV-2410-005"

    def test_unparseable_numbers_ignored(self):
        existing = ["INV-2410-abc", "", None, "INV-2410-002"]
        assert next_document_number("INV", existing, date(2024, 10, 9)) == "INV-2410-003"

    def test_grows_past_width(self):
        assert next_document_number("PR", ["PR-2410-999"], date(2024, 10, 9)) == "PR-2410-1000"


class TestStartupSettings:

    def test_defaults(self, app):
        assert app.fiscal_calendar == FiscalCalendar.GREGORIAN
        assert app.low_stock_alert == 5

    def test_overrides_from_settings_table(self, app, db_path):
        app.settings_repo.set_setting(SettingEntity(key="fiscal_calendar", value="jalali"))
        app.settings_repo.set_setting(SettingEntity(key="low_stock_alert", value="2"))

        reopened = BillingApp(db_path=db_path)
        assert reopened.fiscal_calendar == FiscalCalendar.JALALI
        assert reopened.low_stock_alert == 2
        assert reopened.invoice_manager.generate_invoice_number(date(2024, 3, 21)) == "INV-0301-001"

    def test_bad_values_fall_back(self, app, db_path):
        app.settings_repo.set_setting(SettingEntity(key="fiscal_calendar", value="lunar"))
        app.settings_repo.set_setting(SettingEntity(key="low_stock_alert", value="many"))
        reopened = BillingApp(db_path=db_path)
        assert reopened.fiscal_calendar == FiscalCalendar.GREGORIAN
        assert reopened.low_stock_alert == 5
