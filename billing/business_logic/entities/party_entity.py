# billing/business_logic/entities/party_entity.py
from dataclasses import dataclass, field
from typing import Optional
from .base_entity import BaseEntity
from billing.constants import PartyType

@dataclass
class PartyEntity(BaseEntity):
    name: str
    party_type: PartyType # Enum: Customer, Supplier. Fixed after creation.
    mobile: str = field(default="")
    address: str = field(default="")
    tax_id: Optional[str] = field(default=None)

    @property
    def is_customer(self) -> bool:
        return self.party_type == PartyType.CUSTOMER
