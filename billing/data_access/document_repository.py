# billing/data_access/document_repository.py

import sqlite3
import logging
from typing import List, TypeVar

from billing.data_access.base_repository import BaseRepository

logger = logging.getLogger(__name__)

T = TypeVar('T')


class DocumentRepository(BaseRepository[T]):
    """
    Repository for a header entity that owns a list of line items
    (invoices, returns). Items are rewritten with the header in one commit.
    """
    related_fields = ("items",)
    parent_key: str = ""

    def __init__(self, db_manager, model_type, table_name, items_repository: BaseRepository):
        super().__init__(db_manager=db_manager, model_type=model_type, table_name=table_name)
        self.items_repo = items_repository

    def _load_related(self, conn: sqlite3.Connection, entities: List[T]) -> None:
        if not entities:
            return
        by_id = {entity.id: entity for entity in entities}
        placeholders = ', '.join(['?'] * len(by_id))
        query = (f"SELECT * FROM {self.items_repo._table_name} "
                 f"WHERE {self.parent_key} IN ({placeholders}) ORDER BY id ASC")
        for row in conn.execute(query, tuple(by_id.keys())).fetchall():
            item = self.items_repo._entity_from_row(dict(row))
            by_id[getattr(item, self.parent_key)].items.append(item)

    def _save_related(self, conn: sqlite3.Connection, entity: T) -> None:
        conn.execute(f"DELETE FROM {self.items_repo._table_name} WHERE {self.parent_key} = ?", (entity.id,))
        for item in entity.items:
            setattr(item, self.parent_key, entity.id)
            self.items_repo._insert(conn, item)
        logger.debug(f"Saved {len(entity.items)} items for {self._table_name} ID {entity.id}.")
