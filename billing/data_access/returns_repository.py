# billing/data_access/returns_repository.py

from typing import List

from billing.data_access.document_repository import DocumentRepository
from billing.data_access.database_manager import DatabaseManager
from billing.data_access.return_items_repository import ReturnItemsRepository
from billing.business_logic.entities.return_entity import ReturnEntity
from billing.constants import ReturnType, ReturnStatus
import logging

logger = logging.getLogger(__name__)

class ReturnsRepository(DocumentRepository[ReturnEntity]):
    parent_key = "return_id"

    def __init__(self, db_manager: DatabaseManager):
        super().__init__(db_manager=db_manager,
                         model_type=ReturnEntity,
                         table_name="returns",
                         items_repository=ReturnItemsRepository(db_manager))

    def get_by_type(self, return_type: ReturnType) -> List[ReturnEntity]:
        return self.find_by_criteria({"return_type": return_type}, order_by="return_date DESC, id DESC")

    def get_by_status(self, status: ReturnStatus) -> List[ReturnEntity]:
        return self.find_by_criteria({"status": status})

    def get_by_invoice_id(self, invoice_id: int) -> List[ReturnEntity]:
        return self.find_by_criteria({"invoice_id": invoice_id})

    def get_all_return_numbers(self) -> List[str]:
        rows = self.db_manager.fetch_all(f"SELECT return_number FROM {self._table_name}")
        return [row["return_number"] for row in rows]
