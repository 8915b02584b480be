# billing/data_access/parties_repository.py

from typing import List

from billing.data_access.base_repository import BaseRepository
from billing.data_access.database_manager import DatabaseManager
from billing.business_logic.entities.party_entity import PartyEntity
from billing.constants import PartyType
import logging

logger = logging.getLogger(__name__)

class PartiesRepository(BaseRepository[PartyEntity]):
    def __init__(self, db_manager: DatabaseManager):
        super().__init__(db_manager=db_manager,
                         model_type=PartyEntity,
                         table_name="parties")

    def get_by_name(self, name: str, exact: bool = True) -> List[PartyEntity]:
        if exact:
            return self.find_by_criteria({"name": name})
        return self.find_by_criteria({"name": ("LIKE", f"%{name}%")}, order_by="name ASC")

    def get_by_type(self, party_type: PartyType) -> List[PartyEntity]:
        return self.find_by_criteria({"party_type": party_type}, order_by="name ASC")
