# billing/data_access/invoices_repository.py

from typing import Optional, List

from billing.data_access.document_repository import DocumentRepository
from billing.data_access.database_manager import DatabaseManager
from billing.data_access.invoice_items_repository import InvoiceItemsRepository
from billing.business_logic.entities.invoice_entity import InvoiceEntity
import logging

logger = logging.getLogger(__name__)

class InvoicesRepository(DocumentRepository[InvoiceEntity]):
    parent_key = "invoice_id"

    def __init__(self, db_manager: DatabaseManager):
        super().__init__(db_manager=db_manager,
                         model_type=InvoiceEntity,
                         table_name="invoices",
                         items_repository=InvoiceItemsRepository(db_manager))

    def get_by_invoice_number(self, invoice_number: str) -> Optional[InvoiceEntity]:
        found = self.find_by_criteria({"invoice_number": invoice_number})
        return found[0] if found else None

    def get_by_party_id(self, party_id: int) -> List[InvoiceEntity]:
        return self.find_by_criteria({"party_id": party_id}, order_by="invoice_date ASC, id ASC")

    def get_all_invoice_numbers(self) -> List[str]:
        rows = self.db_manager.fetch_all(f"SELECT invoice_number FROM {self._table_name}")
        return [row["invoice_number"] for row in rows]
