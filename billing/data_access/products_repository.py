# billing/data_access/products_repository.py

from typing import List

from billing.data_access.base_repository import BaseRepository
from billing.data_access.database_manager import DatabaseManager
from billing.business_logic.entities.product_entity import ProductEntity
import logging

logger = logging.getLogger(__name__)

class ProductsRepository(BaseRepository[ProductEntity]):
    def __init__(self, db_manager: DatabaseManager):
        super().__init__(db_manager=db_manager,
                         model_type=ProductEntity,
                         table_name="products")

    def search_by_name(self, name_query: str) -> List[ProductEntity]:
        return self.find_by_criteria({"name": ("LIKE", f"%{name_query}%")}, order_by="name ASC")
