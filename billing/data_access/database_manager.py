# billing/data_access/database_manager.py

import sqlite3
import logging
from billing.config import DATABASE_PATH
from billing.constants import (
    PartyType, InvoiceStatus, TransactionType, PaymentMode, ReturnType, ReturnStatus
)

logger = logging.getLogger(__name__)


def _in_clause(enum_cls) -> str:
    return ', '.join(f"'{member.value}'" for member in enum_cls)


class DatabaseManager:
    def __init__(self, db_path=DATABASE_PATH):
        self.db_path = db_path
        self.conn = None

    def __enter__(self):
        try:
            self.conn = sqlite3.connect(self.db_path)
            self.conn.row_factory = sqlite3.Row # Access columns by name
            self.conn.execute("PRAGMA foreign_keys = ON;") # Enforce foreign key constraints
            logger.debug(f"Database connection established to {self.db_path}")
            return self.conn
        except sqlite3.Error as e:
            logger.error(f"Error connecting to database {self.db_path}: {e}")
            raise

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.conn:
            # Anything not committed by the caller is rolled back on close.
            self.conn.close()
            self.conn = None
            logger.debug("Database connection closed.")

    def execute_query(self, query, params=None):
        try:
            with self as conn:
                cursor = conn.cursor()
                cursor.execute(query, params or ())
                conn.commit()
                return cursor
        except sqlite3.Error as e:
            logger.error(f"Query execution failed: {query} with params {params} - {e}")
            raise

    def fetch_one(self, query, params=None):
        try:
            with self as conn:
                cursor = conn.cursor()
                cursor.execute(query, params or ())
                return cursor.fetchone()
        except sqlite3.Error as e:
            logger.error(f"Fetch one failed: {query} with params {params} - {e}")
            raise

    def fetch_all(self, query, params=None):
        try:
            with self as conn:
                cursor = conn.cursor()
                cursor.execute(query, params or ())
                return cursor.fetchall()
        except sqlite3.Error as e:
            logger.error(f"Fetch all failed: {query} with params {params} - {e}")
            raise

    def create_tables(self):
        queries = [
            """
            CREATE TABLE IF NOT EXISTS settings (
                key TEXT PRIMARY KEY,
                value TEXT
            );
            """,
            """
            CREATE TABLE IF NOT EXISTS parties (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                name TEXT NOT NULL,
                party_type TEXT NOT NULL CHECK(party_type IN ({})),
                mobile TEXT NOT NULL DEFAULT '',
                address TEXT NOT NULL DEFAULT '',
                tax_id TEXT
            );
            """.format(_in_clause(PartyType)),
            """
            CREATE TABLE IF NOT EXISTS products (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                name TEXT NOT NULL,
                price TEXT NOT NULL DEFAULT '0.00',
                cost_price TEXT NOT NULL DEFAULT '0.00',
                stock INTEGER NOT NULL DEFAULT 0,
                opening_stock INTEGER NOT NULL DEFAULT 0,
                low_stock_alert INTEGER,
                unit TEXT NOT NULL DEFAULT 'pcs',
                description TEXT
            );
            """,
            """
            CREATE TABLE IF NOT EXISTS invoices (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                invoice_number TEXT NOT NULL UNIQUE,
                party_id INTEGER NOT NULL,
                invoice_date TEXT NOT NULL, -- ISO Date
                gst_percentage TEXT NOT NULL DEFAULT '0',
                discount TEXT NOT NULL DEFAULT '0.00',
                paid_amount TEXT NOT NULL DEFAULT '0.00',
                status TEXT NOT NULL CHECK(status IN ({})),
                notes TEXT,
                FOREIGN KEY (party_id) REFERENCES parties(id) ON DELETE RESTRICT
            );
            """.format(_in_clause(InvoiceStatus)),
            """
            CREATE TABLE IF NOT EXISTS invoice_items (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                invoice_id INTEGER NOT NULL,
                product_id INTEGER, -- NULL for free-text lines
                product_name TEXT NOT NULL,
                quantity INTEGER NOT NULL CHECK(quantity > 0),
                rate TEXT NOT NULL DEFAULT '0.00',
                FOREIGN KEY (invoice_id) REFERENCES invoices(id) ON DELETE CASCADE
            );
            """,
            """
            CREATE TABLE IF NOT EXISTS transactions (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                transaction_type TEXT NOT NULL CHECK(transaction_type IN ({})),
                party_id INTEGER NOT NULL,
                amount TEXT NOT NULL,
                transaction_date TEXT NOT NULL,
                mode TEXT NOT NULL CHECK(mode IN ({})),
                reference TEXT,
                description TEXT,
                FOREIGN KEY (party_id) REFERENCES parties(id) ON DELETE RESTRICT
            );
            """.format(_in_clause(TransactionType), _in_clause(PaymentMode)),
            """
            CREATE TABLE IF NOT EXISTS allocations (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                transaction_id INTEGER NOT NULL,
                invoice_id INTEGER NOT NULL,
                amount TEXT NOT NULL,
                allocation_date TEXT NOT NULL,
                FOREIGN KEY (transaction_id) REFERENCES transactions(id) ON DELETE CASCADE,
                FOREIGN KEY (invoice_id) REFERENCES invoices(id) ON DELETE CASCADE
            );
            """,
            """
            CREATE TABLE IF NOT EXISTS returns (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                return_number TEXT NOT NULL UNIQUE,
                return_type TEXT NOT NULL CHECK(return_type IN ({})),
                party_id INTEGER NOT NULL,
                return_date TEXT NOT NULL,
                invoice_id INTEGER,
                invoice_number TEXT,
                gst_percentage TEXT NOT NULL DEFAULT '0',
                status TEXT NOT NULL CHECK(status IN ({})),
                notes TEXT,
                FOREIGN KEY (party_id) REFERENCES parties(id) ON DELETE RESTRICT,
                FOREIGN KEY (invoice_id) REFERENCES invoices(id) ON DELETE SET NULL
            );
            """.format(_in_clause(ReturnType), _in_clause(ReturnStatus)),
            """
            CREATE TABLE IF NOT EXISTS return_items (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                return_id INTEGER NOT NULL,
                product_id INTEGER,
                product_name TEXT NOT NULL,
                quantity INTEGER NOT NULL CHECK(quantity > 0),
                rate TEXT NOT NULL DEFAULT '0.00',
                FOREIGN KEY (return_id) REFERENCES returns(id) ON DELETE CASCADE
            );
            """,
            """
            CREATE TABLE IF NOT EXISTS stock_adjustments (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                product_id INTEGER NOT NULL,
                quantity_change INTEGER NOT NULL,
                adjustment_date TEXT NOT NULL,
                reason TEXT,
                FOREIGN KEY (product_id) REFERENCES products(id) ON DELETE CASCADE
            );
            """,
        ]
        try:
            with self as conn:
                for query in queries:
                    conn.execute(query)
                conn.commit()
            logger.info("Database tables checked/created successfully.")
        except sqlite3.Error as e:
            logger.error(f"Failed to create tables in {self.db_path}: {e}", exc_info=True)
            raise
