# billing/business_logic/party_manager.py
from typing import Optional, List, Any, Dict, TYPE_CHECKING

from billing.business_logic.entities.party_entity import PartyEntity
from billing.constants import PartyType
from billing.exceptions import NotFoundError, InvalidStatusError

if TYPE_CHECKING:
    from ..data_access.parties_repository import PartiesRepository

import logging
logger = logging.getLogger(__name__)


class PartyManager:
    def __init__(self, parties_repository: 'PartiesRepository'):
        if parties_repository is None:
            raise ValueError("parties_repository cannot be None")
        self.parties_repo = parties_repository

    def create_party(self,
                     name: str,
                     party_type: PartyType,
                     mobile: str = "",
                     address: str = "",
                     tax_id: Optional[str] = None) -> PartyEntity:
        if not name or not name.strip():
            raise ValueError("Party name cannot be empty.")
        if not isinstance(party_type, PartyType):
            party_type = PartyType(party_type)

        party = PartyEntity(name=name.strip(), party_type=party_type, mobile=mobile or "",
                            address=address or "", tax_id=tax_id)
        created = self.parties_repo.add(party)
        logger.info(f"Party '{created.name}' ({created.party_type.value}, ID: {created.id}) created.")
        return created

    def get_party_by_id(self, party_id: int) -> Optional[PartyEntity]:
        party = self.parties_repo.get_by_id(party_id)
        if not party:
            logger.warning(f"Party with ID {party_id} not found.")
        return party

    def require_party(self, party_id: int) -> PartyEntity:
        party = self.parties_repo.get_by_id(party_id)
        if party is None:
            raise NotFoundError("Party", party_id)
        return party

    def get_all_parties(self, party_type: Optional[PartyType] = None) -> List[PartyEntity]:
        if party_type:
            return self.parties_repo.get_by_type(party_type)
        return self.parties_repo.get_all(order_by="name ASC")

    def get_customers(self) -> List[PartyEntity]:
        return self.get_all_parties(PartyType.CUSTOMER)

    def get_suppliers(self) -> List[PartyEntity]:
        return self.get_all_parties(PartyType.SUPPLIER)

    def search_parties(self, name_query: str) -> List[PartyEntity]:
        return self.parties_repo.get_by_name(name_query, exact=False)

    def update_party(self, party_id: int, update_data: Dict[str, Any]) -> PartyEntity:
        """
        Updates contact fields. The party type is fixed after creation because
        sales/purchase classification of existing invoices depends on it.
        """
        party = self.require_party(party_id)

        new_type = update_data.get("party_type")
        if new_type is not None and PartyType(new_type) != party.party_type:
            raise InvalidStatusError(f"Party type of '{party.name}' cannot be changed after creation.")

        changed = False
        for key, value in update_data.items():
            if key in ("id", "party_type"):
                continue
            if not hasattr(party, key):
                logger.warning(f"Field '{key}' not found in PartyEntity during update of party ID {party_id}.")
                continue
            if key == "name" and (not value or not str(value).strip()):
                raise ValueError("Party name cannot be empty.")
            if getattr(party, key) != value:
                setattr(party, key, value)
                changed = True

        if changed:
            self.parties_repo.update(party)
            logger.info(f"Party ID {party_id} updated.")
        else:
            logger.info(f"No changes detected for party ID {party_id}. Update not performed.")
        return party

    def delete_party(self, party_id: int) -> None:
        """Fails with sqlite3.IntegrityError while invoices, transactions or returns reference the party."""
        party = self.require_party(party_id)
        self.parties_repo.delete(party_id)
        logger.info(f"Party '{party.name}' (ID: {party_id}) deleted.")
