# billing/data_access/stock_adjustments_repository.py

from typing import List

from billing.data_access.base_repository import BaseRepository
from billing.data_access.database_manager import DatabaseManager
from billing.business_logic.entities.stock_adjustment_entity import StockAdjustmentEntity

class StockAdjustmentsRepository(BaseRepository[StockAdjustmentEntity]):
    def __init__(self, db_manager: DatabaseManager):
        super().__init__(db_manager=db_manager,
                         model_type=StockAdjustmentEntity,
                         table_name="stock_adjustments")

    def get_by_product_id(self, product_id: int) -> List[StockAdjustmentEntity]:
        return self.find_by_criteria({"product_id": product_id}, order_by="adjustment_date ASC, id ASC")
