# billing/data_access/allocations_repository.py

from typing import List

from billing.data_access.base_repository import BaseRepository
from billing.data_access.database_manager import DatabaseManager
from billing.business_logic.entities.allocation_entity import AllocationEntity

class AllocationsRepository(BaseRepository[AllocationEntity]):
    def __init__(self, db_manager: DatabaseManager):
        super().__init__(db_manager=db_manager,
                         model_type=AllocationEntity,
                         table_name="allocations")

    def get_by_transaction_id(self, transaction_id: int) -> List[AllocationEntity]:
        return self.find_by_criteria({"transaction_id": transaction_id})

    def get_by_invoice_id(self, invoice_id: int) -> List[AllocationEntity]:
        return self.find_by_criteria({"invoice_id": invoice_id})

    def get_by_party_id(self, party_id: int) -> List[AllocationEntity]:
        query = (f"SELECT a.* FROM {self._table_name} a "
                 f"JOIN transactions t ON t.id = a.transaction_id "
                 f"WHERE t.party_id = ? ORDER BY a.id ASC")
        return self._select(query, (party_id,))
