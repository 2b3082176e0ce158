"""Database query functions."""

import sqlite3
from pathlib import Path
from typing import Any

from pocketbook.domain.models import CategoryName, Money
from pocketbook.logging_setup import get_logger
from pocketbook.store.schema import get_db_path

logger = get_logger(__name__)

_TRANSACTION_COLUMNS = "id, type, amount, category_id, date, description, payment_method"

# Columns that update_transaction may change
_UPDATABLE = ("type", "amount", "category_id", "date", "description", "payment_method")


def _connect(db_path: Path | None = None) -> sqlite3.Connection:
    """Create a database connection with row factory.

    Args:
        db_path: Path to the database file. If None, uses default location.

    Returns:
        Database connection with row_factory configured.
    """
    if db_path is None:
        db_path = get_db_path()
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    return conn


def get_all_categories(db_path: Path | None = None) -> list[dict[str, Any]]:
    """Get all categories.

    Args:
        db_path: Path to the database file. If None, uses default location.

    Returns:
        List of category dictionaries ordered by id.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        cursor.execute("SELECT id, name, color, type FROM categories ORDER BY id")
        return [dict(row) for row in cursor.fetchall()]


def add_category(name: CategoryName, color: str, category_type: str, db_path: Path | None = None) -> int:
    """Add a category.

    Names are not unique; two categories with the same name are reported
    together in breakdowns.

    Args:
        name: Category name.
        color: Display colour (e.g. "#F59E0B").
        category_type: "income" or "expense".
        db_path: Path to the database file. If None, uses default location.

    Returns:
        ID of the new category.

    Raises:
        sqlite3.Error: If database operation fails (including an invalid type).
    """
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        try:
            cursor.execute(
                "INSERT INTO categories (name, color, type) VALUES (?, ?, ?)",
                (name, color, category_type),
            )
            conn.commit()
        except sqlite3.Error:
            conn.rollback()
            raise
        category_id = cursor.lastrowid
        logger.debug("Added category %s (%s)", category_id, name)
        return category_id


def delete_category(category_id: int, db_path: Path | None = None) -> bool:
    """Delete a category. Its transactions are kept.

    Args:
        category_id: Category ID.
        db_path: Path to the database file. If None, uses default location.

    Returns:
        True if a category was deleted.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        try:
            cursor.execute("DELETE FROM categories WHERE id = ?", (category_id,))
            conn.commit()
        except sqlite3.Error:
            conn.rollback()
            raise
        return cursor.rowcount > 0


def insert_transaction(
    txn_type: str,
    amount: Money,
    date: str,
    category_id: int | None = None,
    description: str = "",
    payment_method: str = "",
    db_path: Path | None = None,
) -> int:
    """Insert a transaction.

    Args:
        txn_type: "income" or "expense".
        amount: Non-negative amount in minor units.
        date: Transaction date (YYYY-MM-DD).
        category_id: Optional category ID.
        description: Description text.
        payment_method: Payment method text.
        db_path: Path to the database file. If None, uses default location.

    Returns:
        ID of the new transaction.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        try:
            cursor.execute(
                "INSERT INTO transactions (type, amount, category_id, date, description, payment_method) "
                "VALUES (?, ?, ?, ?, ?, ?)",
                (txn_type, amount, category_id, date, description, payment_method),
            )
            conn.commit()
        except sqlite3.Error:
            conn.rollback()
            raise
        txn_id = cursor.lastrowid
        logger.debug("Inserted transaction %s", txn_id)
        return txn_id


def get_transaction(txn_id: int, db_path: Path | None = None) -> dict[str, Any] | None:
    """Get a single transaction.

    Args:
        txn_id: Transaction ID.
        db_path: Path to the database file. If None, uses default location.

    Returns:
        Transaction dictionary or None if not found.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        cursor.execute(f"SELECT {_TRANSACTION_COLUMNS} FROM transactions WHERE id = ?", (txn_id,))
        row = cursor.fetchone()
        return dict(row) if row else None


def get_all_transactions(
    db_path: Path | None = None,
    limit: int | None = None,
    since_date: str | None = None,
    until_date: str | None = None,
) -> list[dict[str, Any]]:
    """Get transactions, newest first.

    Args:
        db_path: Path to the database file. If None, uses default location.
        limit: Maximum number of transactions to return. If None, returns all.
        since_date: Optional start date (inclusive, YYYY-MM-DD).
        until_date: Optional end date (inclusive, YYYY-MM-DD).

    Returns:
        List of transaction dictionaries ordered by date descending.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        query = f"SELECT {_TRANSACTION_COLUMNS} FROM transactions WHERE 1=1"
        params: list[Any] = []

        if since_date:
            query += " AND date(date) >= date(?)"
            params.append(since_date)

        if until_date:
            query += " AND date(date) <= date(?)"
            params.append(until_date)

        query += " ORDER BY date DESC, id DESC"

        if limit is not None:
            query += " LIMIT ?"
            params.append(limit)

        cursor.execute(query, params)
        return [dict(row) for row in cursor.fetchall()]


def update_transaction(txn_id: int, changes: dict[str, Any], db_path: Path | None = None) -> bool:
    """Update fields of a transaction.

    Args:
        txn_id: Transaction ID.
        changes: Column -> new value; only type, amount, category_id, date,
            description and payment_method may be changed.
        db_path: Path to the database file. If None, uses default location.

    Returns:
        True if a transaction was updated.

    Raises:
        ValueError: If changes names an unknown column.
        sqlite3.Error: If database operation fails.
    """
    unknown = set(changes) - set(_UPDATABLE)
    if unknown:
        raise ValueError(f"Cannot update columns: {', '.join(sorted(unknown))}")
    if not changes:
        return False

    assignments = ", ".join(f"{column} = ?" for column in changes)

    with _connect(db_path) as conn:
        cursor = conn.cursor()
        try:
            cursor.execute(
                f"UPDATE transactions SET {assignments} WHERE id = ?",
                (*changes.values(), txn_id),
            )
            conn.commit()
        except sqlite3.Error:
            conn.rollback()
            raise
        return cursor.rowcount > 0


def delete_transaction(txn_id: int, db_path: Path | None = None) -> bool:
    """Delete a transaction.

    Args:
        txn_id: Transaction ID.
        db_path: Path to the database file. If None, uses default location.

    Returns:
        True if a transaction was deleted.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        cursor = conn.cursor()
        try:
            cursor.execute("DELETE FROM transactions WHERE id = ?", (txn_id,))
            conn.commit()
        except sqlite3.Error:
            conn.rollback()
            raise
        return cursor.rowcount > 0
