# billing/business_logic/__init__.py
"""
Business logic layer: the pure reconciliation engines (stock_ledger,
invoice_status, payment_allocator, return_processor, party_ledger) and the
managers that run them against the store.
"""

from .party_manager import PartyManager
from .product_manager import ProductManager
from .invoice_manager import InvoiceManager
from .transaction_manager import TransactionManager
from .return_manager import ReturnManager
from .report_manager import ReportManager

__all__ = [
    "PartyManager", "ProductManager", "InvoiceManager",
    "TransactionManager", "ReturnManager", "ReportManager",
]
