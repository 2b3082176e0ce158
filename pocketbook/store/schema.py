"""Database schema initialization."""

import os
import sqlite3
from pathlib import Path

from pocketbook.logging_setup import get_logger

logger = get_logger(__name__)

# (name, color, type) seeded into a fresh database
DEFAULT_CATEGORIES: list[tuple[str, str, str]] = [
    ("Salary", "#10B981", "income"),
    ("Freelance", "#3B82F6", "income"),
    ("Investments", "#8B5CF6", "income"),
    ("Food", "#F59E0B", "expense"),
    ("Transport", "#EF4444", "expense"),
    ("Shopping", "#EC4899", "expense"),
    ("Bills", "#6366F1", "expense"),
    ("Entertainment", "#14B8A6", "expense"),
    ("Health", "#F97316", "expense"),
]


def get_xdg_data_home() -> Path:
    """Get XDG data directory, with fallback to ~/.local/share."""
    xdg_data = os.environ.get("XDG_DATA_HOME")
    if xdg_data:
        return Path(xdg_data)
    return Path.home() / ".local" / "share"


def get_db_path() -> Path:
    """Get the default database path (XDG compliant)."""
    return get_xdg_data_home() / "pocketbook" / "pocketbook.db"


def database_exists(db_path: Path | None = None) -> bool:
    """Check if the database file exists.

    Args:
        db_path: Path to check. If None, uses default location.

    Returns:
        True if database exists, False otherwise.
    """
    if db_path is None:
        db_path = get_db_path()
    return db_path.exists()


def init_database(db_path: Path | None = None, seed_categories: bool = True) -> None:
    """Initialize the database with the required schema.

    Args:
        db_path: Path to the database file. If None, uses default location.
        seed_categories: Insert the default categories when the table is empty.

    Raises:
        sqlite3.Error: If database initialization fails.
    """
    if db_path is None:
        db_path = get_db_path()

    db_path.parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(db_path)
    cursor = conn.cursor()

    try:
        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS categories (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                name TEXT NOT NULL,
                color TEXT NOT NULL DEFAULT '#6B7280',
                type TEXT NOT NULL CHECK (type IN ('income', 'expense'))
            )
        """
        )

        # No foreign key on category_id: transactions may outlive their category
        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS transactions (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                type TEXT NOT NULL,
                amount INTEGER NOT NULL,
                category_id INTEGER,
                date TEXT NOT NULL,
                description TEXT NOT NULL DEFAULT '',
                payment_method TEXT NOT NULL DEFAULT '',
                created_at TEXT NOT NULL DEFAULT (datetime('now'))
            )
        """
        )

        cursor.execute("CREATE INDEX IF NOT EXISTS idx_txn_date ON transactions(date)")
        cursor.execute("CREATE INDEX IF NOT EXISTS idx_txn_category_date ON transactions(category_id, date)")

        if seed_categories:
            cursor.execute("SELECT COUNT(*) FROM categories")
            if cursor.fetchone()[0] == 0:
                cursor.executemany(
                    "INSERT INTO categories (name, color, type) VALUES (?, ?, ?)",
                    DEFAULT_CATEGORIES,
                )
                logger.info("Seeded %d default categories", len(DEFAULT_CATEGORIES))

        conn.commit()

    except sqlite3.Error:
        conn.rollback()
        raise
    finally:
        conn.close()
