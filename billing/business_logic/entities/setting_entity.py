# billing/business_logic/entities/setting_entity.py
from dataclasses import dataclass
from typing import Optional

@dataclass
class SettingEntity:
    key: str
    value: Optional[str]
