# billing/business_logic/entities/__init__.py
from .base_entity import BaseEntity
from .party_entity import PartyEntity
from .product_entity import ProductEntity
from .line_item_entity import LineItemEntity
from .invoice_item_entity import InvoiceItemEntity
from .invoice_entity import InvoiceEntity
from .transaction_entity import TransactionEntity
from .allocation_entity import AllocationEntity
from .return_item_entity import ReturnItemEntity
from .return_entity import ReturnEntity
from .stock_adjustment_entity import StockAdjustmentEntity
from .setting_entity import SettingEntity
from .stock_movement_entry import StockMovementEntry
from .ledger_entry import LedgerEntry, LedgerTotals

__all__ = [
    "BaseEntity", "PartyEntity", "ProductEntity", "LineItemEntity",
    "InvoiceItemEntity", "InvoiceEntity", "TransactionEntity", "AllocationEntity",
    "ReturnItemEntity", "ReturnEntity", "StockAdjustmentEntity", "SettingEntity",
    "StockMovementEntry", "LedgerEntry", "LedgerTotals",
]
