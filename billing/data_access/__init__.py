# billing/data_access/__init__.py

from .database_manager import DatabaseManager
from .base_repository import BaseRepository
from .document_repository import DocumentRepository

from .settings_repository import SettingsRepository
from .parties_repository import PartiesRepository
from .products_repository import ProductsRepository
from .invoice_items_repository import InvoiceItemsRepository
from .invoices_repository import InvoicesRepository
from .transactions_repository import TransactionsRepository
from .allocations_repository import AllocationsRepository
from .return_items_repository import ReturnItemsRepository
from .returns_repository import ReturnsRepository
from .stock_adjustments_repository import StockAdjustmentsRepository

__all__ = [
    "DatabaseManager", "BaseRepository", "DocumentRepository",
    "SettingsRepository", "PartiesRepository", "ProductsRepository", "InvoicesRepository",
    "InvoiceItemsRepository", "TransactionsRepository", "AllocationsRepository",
    "ReturnsRepository", "ReturnItemsRepository", "StockAdjustmentsRepository",
]
