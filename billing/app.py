# billing/app.py
"""Composition root: wires the data access layer to the business logic layer."""

import logging
import logging.config
from typing import Optional

from billing.config import (
    DATABASE_PATH, LOGGING_CONFIG, DEFAULT_LOW_STOCK_ALERT, FISCAL_CALENDAR,
    SETTING_FISCAL_CALENDAR, SETTING_LOW_STOCK_ALERT, ensure_directories,
)
from billing.constants import FiscalCalendar

# --- Data Access Layer (DAL) ---
from billing.data_access.database_manager import DatabaseManager
from billing.data_access.settings_repository import SettingsRepository
from billing.data_access.parties_repository import PartiesRepository
from billing.data_access.products_repository import ProductsRepository
from billing.data_access.invoices_repository import InvoicesRepository
from billing.data_access.transactions_repository import TransactionsRepository
from billing.data_access.allocations_repository import AllocationsRepository
from billing.data_access.returns_repository import ReturnsRepository
from billing.data_access.stock_adjustments_repository import StockAdjustmentsRepository

# --- Business Logic Layer (BLL) ---
from billing.business_logic.party_manager import PartyManager
from billing.business_logic.product_manager import ProductManager
from billing.business_logic.invoice_manager import InvoiceManager
from billing.business_logic.transaction_manager import TransactionManager
from billing.business_logic.return_manager import ReturnManager
from billing.business_logic.report_manager import ReportManager

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    ensure_directories()
    logging.config.dictConfig(LOGGING_CONFIG)


class BillingApp:
    def __init__(self, db_path: Optional[str] = None):
        self.db_path = db_path or DATABASE_PATH
        if db_path is None:
            ensure_directories()

        logger.info(f"Initializing Database Manager for {self.db_path} and creating tables...")
        self.db_manager = DatabaseManager(self.db_path)
        self.db_manager.create_tables()

        logger.info("Initializing Repositories...")
        self.settings_repo = SettingsRepository(self.db_manager)
        self.parties_repo = PartiesRepository(self.db_manager)
        self.products_repo = ProductsRepository(self.db_manager)
        self.invoices_repo = InvoicesRepository(self.db_manager)
        self.transactions_repo = TransactionsRepository(self.db_manager)
        self.allocations_repo = AllocationsRepository(self.db_manager)
        self.returns_repo = ReturnsRepository(self.db_manager)
        self.stock_adjustments_repo = StockAdjustmentsRepository(self.db_manager)

        self.fiscal_calendar = self._read_fiscal_calendar()
        self.low_stock_alert = self._read_low_stock_alert()

        logger.info("Initializing Managers...")
        self.party_manager = PartyManager(self.parties_repo)
        self.product_manager = ProductManager(
            products_repository=self.products_repo,
            stock_adjustments_repository=self.stock_adjustments_repo,
            invoices_repository=self.invoices_repo,
            returns_repository=self.returns_repo,
            parties_repository=self.parties_repo,
            low_stock_alert=self.low_stock_alert,
        )
        self.invoice_manager = InvoiceManager(
            invoices_repository=self.invoices_repo,
            allocations_repository=self.allocations_repo,
            party_manager=self.party_manager,
            product_manager=self.product_manager,
            fiscal_calendar=self.fiscal_calendar,
        )
        self.transaction_manager = TransactionManager(
            transactions_repository=self.transactions_repo,
            allocations_repository=self.allocations_repo,
            invoices_repository=self.invoices_repo,
            party_manager=self.party_manager,
        )
        self.return_manager = ReturnManager(
            returns_repository=self.returns_repo,
            party_manager=self.party_manager,
            product_manager=self.product_manager,
            invoice_manager=self.invoice_manager,
            fiscal_calendar=self.fiscal_calendar,
        )
        self.report_manager = ReportManager(
            invoices_repository=self.invoices_repo,
            transactions_repository=self.transactions_repo,
            party_manager=self.party_manager,
            transaction_manager=self.transaction_manager,
        )
        logger.info("Billing application ready.")

    # --- Settings overrides ---

    def _read_fiscal_calendar(self) -> FiscalCalendar:
        value = self.settings_repo.get_value(SETTING_FISCAL_CALENDAR, FISCAL_CALENDAR)
        try:
            return FiscalCalendar(value)
        except ValueError:
            logger.warning(f"Unknown fiscal calendar '{value}' in settings; using {FISCAL_CALENDAR}.")
            return FiscalCalendar(FISCAL_CALENDAR)

    def _read_low_stock_alert(self) -> int:
        value = self.settings_repo.get_value(SETTING_LOW_STOCK_ALERT)
        if value is None:
            return DEFAULT_LOW_STOCK_ALERT
        try:
            return int(value)
        except ValueError:
            logger.warning(f"Invalid low stock alert '{value}' in settings; using {DEFAULT_LOW_STOCK_ALERT}.")
            return DEFAULT_LOW_STOCK_ALERT


def main():
    configure_logging()
    app = BillingApp()
    stats = app.product_manager.inventory_stats()
    summary = app.report_manager.business_summary()
    logger.info(f"Products: {stats.total_products} (low: {stats.low_stock}, out: {stats.out_of_stock}), "
                f"inventory value {stats.inventory_value}.")
    logger.info(f"Sales {summary['total_sales']}, purchases {summary['total_purchases']}, unpaid {summary['total_unpaid']}.")


if __name__ == '__main__':
    main()
