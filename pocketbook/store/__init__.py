"""Database store layer - provides persistence for the application.

This module re-exports all public database functions for easy importing.
"""

from pocketbook.store.queries import (
    add_category,
    delete_category,
    delete_transaction,
    get_all_categories,
    get_all_transactions,
    get_transaction,
    insert_transaction,
    update_transaction,
)
from pocketbook.store.schema import database_exists, get_db_path, init_database

__all__ = [
    # Schema
    "database_exists",
    "get_db_path",
    "init_database",
    # Queries
    "add_category",
    "delete_category",
    "delete_transaction",
    "get_all_categories",
    "get_all_transactions",
    "get_transaction",
    "insert_transaction",
    "update_transaction",
]
