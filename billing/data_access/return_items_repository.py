# billing/data_access/return_items_repository.py

from billing.data_access.base_repository import BaseRepository
from billing.data_access.database_manager import DatabaseManager
from billing.business_logic.entities.return_item_entity import ReturnItemEntity

class ReturnItemsRepository(BaseRepository[ReturnItemEntity]):
    def __init__(self, db_manager: DatabaseManager):
        super().__init__(db_manager=db_manager,
                         model_type=ReturnItemEntity,
                         table_name="return_items")
