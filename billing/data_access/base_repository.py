# billing/data_access/base_repository.py

import sqlite3
import logging
from typing import Generic, TypeVar, Type, List, Optional, Dict, Any, Tuple, Union, TYPE_CHECKING
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from dataclasses import fields, MISSING

from billing.data_access.database_manager import DatabaseManager

if TYPE_CHECKING:
    from billing.business_logic.entities.base_entity import BaseEntity

logger = logging.getLogger(__name__)

T = TypeVar('T', bound='BaseEntity')


def to_db_value(value: Any) -> Any:
    """Converts an entity attribute to the value sqlite stores."""
    if isinstance(value, Decimal): return str(value)
    if isinstance(value, Enum): return value.value
    if isinstance(value, bool): return 1 if value else 0
    if isinstance(value, (datetime, date)): return value.isoformat()
    return value


class BaseRepository(Generic[T]):
    """
    Entity Store for one collection: get_all / get_by_id / put / delete.

    Child rows (invoice items, return items) are not columns of the table;
    subclasses list them in ``related_fields`` and persist them in
    ``_save_related`` so the parent and its children are committed together.
    """
    related_fields: Tuple[str, ...] = ()

    def __init__(self, db_manager: DatabaseManager, model_type: Type[T], table_name: str):
        self.db_manager = db_manager
        self.model_type = model_type
        self._table_name = table_name
        self._db_columns = [f.name for f in fields(model_type) if f.init and f.name not in self.related_fields]
        logger.debug(f"BaseRepository for {self._table_name} initialized. Columns: {self._db_columns}")

    # --- Reads ---

    def get_by_id(self, entity_id: int) -> Optional[T]:
        query = f"SELECT * FROM {self._table_name} WHERE id = ?"
        with self.db_manager as conn:
            row = conn.execute(query, (entity_id,)).fetchone()
            if not row:
                return None
            entity = self._entity_from_row(dict(row))
            self._load_related(conn, [entity])
            return entity

    def get_all(self, order_by: Optional[str] = None) -> List[T]:
        query = f"SELECT * FROM {self._table_name}"
        query += f" ORDER BY {order_by or 'id ASC'}"
        return self._select(query, ())

    def find_by_criteria(self, criteria: Dict[str, Any], order_by: Optional[str] = None) -> List[T]:
        """
        Finds entities matching every criterion. A value may be a plain value
        (equality) or an (operator, value) tuple, e.g. ('>=', date) or
        ('BETWEEN', (start, end)).
        """
        if not criteria:
            return self.get_all(order_by=order_by)

        conditions = []
        params: List[Any] = []
        for key, value in criteria.items():
            if isinstance(value, tuple) and len(value) == 2:
                operator, val = value
                if str(operator).upper() == 'BETWEEN' and isinstance(val, (list, tuple)) and len(val) == 2:
                    conditions.append(f"{key} BETWEEN ? AND ?")
                    params.extend(to_db_value(v) for v in val)
                else:
                    conditions.append(f"{key} {operator} ?")
                    params.append(to_db_value(val))
            else:
                conditions.append(f"{key} = ?")
                params.append(to_db_value(value))

        query = f"SELECT * FROM {self._table_name} WHERE " + " AND ".join(conditions)
        query += f" ORDER BY {order_by or 'id ASC'}"
        logger.debug(f"BaseRepository.find_by_criteria: Query: {query}, Values: {tuple(params)}")
        return self._select(query, tuple(params))

    def _select(self, query: str, params: tuple) -> List[T]:
        with self.db_manager as conn:
            rows = conn.execute(query, params).fetchall()
            entities = [self._entity_from_row(dict(row)) for row in rows]
            self._load_related(conn, entities)
            return entities

    # --- Writes ---

    def add(self, entity: T) -> T:
        logger.debug(f"BaseRepository.add: Type {type(entity).__name__} to table '{self._table_name}'.")
        try:
            with self.db_manager as conn:
                self._insert(conn, entity)
                self._save_related(conn, entity)
                conn.commit()
        except sqlite3.Error as e:
            entity.id = None
            logger.error(f"Error during INSERT into {self._table_name}: {e}", exc_info=True)
            raise
        logger.debug(f"BaseRepository.add: Entity ID set to {entity.id} after insert.")
        return entity

    def update(self, entity: T) -> T:
        if getattr(entity, 'id', None) is None:
            raise ValueError(f"Entity of type {type(entity).__name__} must have an ID to be updated.")
        try:
            with self.db_manager as conn:
                self._update(conn, entity)
                self._save_related(conn, entity)
                conn.commit()
        except sqlite3.Error as e:
            logger.error(f"Error during UPDATE for entity ID {entity.id} in table {self._table_name}: {e}", exc_info=True)
            raise
        logger.debug(f"BaseRepository.update: Entity ID {entity.id} in table {self._table_name} updated.")
        return entity

    def put(self, entity: T) -> T:
        """Creates the entity if it has no id, otherwise overwrites it."""
        if getattr(entity, 'id', None) is None:
            return self.add(entity)
        return self.update(entity)

    def delete(self, entity_id: int) -> None:
        query = f"DELETE FROM {self._table_name} WHERE id = ?"
        self.db_manager.execute_query(query, (entity_id,))
        logger.debug(f"BaseRepository.delete: Entity ID {entity_id} removed from {self._table_name}.")

    def _insert(self, conn: sqlite3.Connection, entity: T) -> None:
        fields_to_insert = self._entity_to_dict_for_db(entity)
        fields_to_insert.pop('id', None)  # id is AUTOINCREMENT

        columns = ', '.join(fields_to_insert.keys())
        placeholders = ', '.join(['?'] * len(fields_to_insert))
        query = f"INSERT INTO {self._table_name} ({columns}) VALUES ({placeholders})"
        cursor = conn.execute(query, tuple(fields_to_insert.values()))
        entity.id = cursor.lastrowid

    def _update(self, conn: sqlite3.Connection, entity: T) -> None:
        fields_to_update = self._entity_to_dict_for_db(entity)
        fields_to_update.pop('id', None)

        set_clause = ', '.join([f"{key} = ?" for key in fields_to_update.keys()])
        query = f"UPDATE {self._table_name} SET {set_clause} WHERE id = ?"
        conn.execute(query, tuple(fields_to_update.values()) + (entity.id,))

    # --- Hooks for child rows ---

    def _load_related(self, conn: sqlite3.Connection, entities: List[T]) -> None:
        pass

    def _save_related(self, conn: sqlite3.Connection, entity: T) -> None:
        pass

    # --- Row mapping ---

    def _entity_to_dict_for_db(self, entity: T) -> Dict[str, Any]:
        return {col: to_db_value(getattr(entity, col)) for col in self._db_columns}

    def _entity_from_row(self, row: Dict[str, Any]) -> T:
        """
        Converts a database row into the dataclass, restoring Enum, Decimal
        and date values from their stored form.
        """
        entity_data = {}

        for f in fields(self.model_type):
            if not f.init or f.name in self.related_fields:
                continue

            field_name = f.name
            field_type = f.type
            value_from_db = row.get(field_name)

            if value_from_db is None:
                if f.default is MISSING and f.default_factory is MISSING:
                    is_optional = getattr(field_type, '__origin__', None) is Union and type(None) in getattr(field_type, '__args__', [])
                    if not is_optional:
                        raise ValueError(
                            f"Database integrity error: NULL value found for required field '{field_name}' "
                            f"in table '{self._table_name}' for row: {row}"
                        )
                continue

            actual_type = field_type
            if getattr(field_type, '__origin__', None) is Union:
                possible_types = [arg for arg in getattr(field_type, '__args__', []) if arg is not type(None)]
                if possible_types:
                    actual_type = possible_types[0]

            is_enum = isinstance(actual_type, type) and issubclass(actual_type, Enum)

            if is_enum:
                entity_data[field_name] = actual_type(value_from_db)
            elif actual_type == Decimal:
                entity_data[field_name] = Decimal(str(value_from_db))
            elif actual_type == datetime and isinstance(value_from_db, str):
                entity_data[field_name] = datetime.fromisoformat(value_from_db)
            elif actual_type == date and isinstance(value_from_db, str):
                entity_data[field_name] = date.fromisoformat(value_from_db.split(" ")[0])
            elif actual_type == bool and isinstance(value_from_db, int):
                entity_data[field_name] = bool(value_from_db)
            elif actual_type == int:
                entity_data[field_name] = int(value_from_db)
            else:
                entity_data[field_name] = value_from_db

        try:
            return self.model_type(**entity_data)
        except TypeError as e:
            logger.error(f"Failed to instantiate {self.model_type.__name__}. Error: {e}. Data passed: {entity_data}")
            raise
