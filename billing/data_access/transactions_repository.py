# billing/data_access/transactions_repository.py

from typing import List, Optional

from billing.data_access.base_repository import BaseRepository
from billing.data_access.database_manager import DatabaseManager
from billing.business_logic.entities.transaction_entity import TransactionEntity
from billing.constants import TransactionType

class TransactionsRepository(BaseRepository[TransactionEntity]):
    def __init__(self, db_manager: DatabaseManager):
        super().__init__(db_manager=db_manager,
                         model_type=TransactionEntity,
                         table_name="transactions")

    def get_by_party_id(self, party_id: int, transaction_type: Optional[TransactionType] = None) -> List[TransactionEntity]:
        criteria = {"party_id": party_id}
        if transaction_type:
            criteria["transaction_type"] = transaction_type
        return self.find_by_criteria(criteria, order_by="transaction_date ASC, id ASC")

    def get_by_type(self, transaction_type: TransactionType) -> List[TransactionEntity]:
        return self.find_by_criteria({"transaction_type": transaction_type}, order_by="transaction_date DESC, id DESC")
