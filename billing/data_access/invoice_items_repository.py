# billing/data_access/invoice_items_repository.py

from billing.data_access.base_repository import BaseRepository
from billing.data_access.database_manager import DatabaseManager
from billing.business_logic.entities.invoice_item_entity import InvoiceItemEntity

class InvoiceItemsRepository(BaseRepository[InvoiceItemEntity]):
    def __init__(self, db_manager: DatabaseManager):
        super().__init__(db_manager=db_manager,
                         model_type=InvoiceItemEntity,
                         table_name="invoice_items")

