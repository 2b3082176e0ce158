"""CSV export of transactions and derived summaries.

The summary files are built from the analytics core's output; this module
only shapes it into tables and writes them.
"""

from collections.abc import Iterable, Sequence
from datetime import datetime
from pathlib import Path

import pandas as pd

from pocketbook.dates import as_datetime
from pocketbook.domain.analytics import (
    CategoryBreakdownEntry,
    MonthlyPoint,
    breakdown_by_category,
    build_series,
    filter_by_window,
)
from pocketbook.domain.models import OTHER_CATEGORY, Category, Transaction
from pocketbook.logging_setup import get_logger

logger = get_logger(__name__)

TRANSACTION_COLUMNS = ["id", "date", "type", "amount", "category", "description", "payment_method"]
SERIES_COLUMNS = ["key", "month", "income", "expenses", "net_balance"]
BREAKDOWN_COLUMNS = ["name", "color", "type", "income", "expense", "total"]


def _major(amount: int) -> float:
    return amount / 100


def transactions_frame(transactions: Iterable[Transaction], categories: Iterable[Category]) -> pd.DataFrame:
    """Tabulate transactions with category names resolved and amounts in major units."""
    names = {cat.id: cat.name for cat in categories}
    rows = [
        {
            "id": txn.id,
            "date": as_datetime(txn.date).strftime("%Y-%m-%d"),
            "type": txn.type,
            "amount": _major(txn.amount),
            "category": names.get(txn.category_id, OTHER_CATEGORY),
            "description": txn.description,
            "payment_method": txn.payment_method,
        }
        for txn in transactions
    ]
    return pd.DataFrame(rows, columns=TRANSACTION_COLUMNS)


def series_frame(series: Sequence[MonthlyPoint]) -> pd.DataFrame:
    """Tabulate a monthly series, amounts in major units."""
    df = pd.DataFrame([point.to_dict() for point in series], columns=SERIES_COLUMNS)
    for column in ("income", "expenses", "net_balance"):
        df[column] = df[column].astype(float) / 100
    return df


def breakdown_frame(entries: Sequence[CategoryBreakdownEntry]) -> pd.DataFrame:
    """Tabulate a category breakdown, amounts in major units."""
    df = pd.DataFrame([entry.to_dict() for entry in entries], columns=BREAKDOWN_COLUMNS)
    for column in ("income", "expense", "total"):
        df[column] = df[column].astype(float) / 100
    return df


def select_transactions(
    transactions: Sequence[Transaction],
    categories: Sequence[Category],
    since: datetime | None = None,
    until: datetime | None = None,
    category_names: Sequence[str] | None = None,
) -> list[Transaction]:
    """Apply the export's date range and category filters.

    Args:
        transactions: All transactions.
        categories: Category catalog.
        since: Optional first instant to include.
        until: Optional last instant to include.
        category_names: Optional category names to keep (case-insensitive;
            "Other" selects transactions with an unknown category).

    Returns:
        Selected transactions in their original order.
    """
    selected = list(transactions)

    if since is not None or until is not None:
        selected = filter_by_window(
            selected,
            since if since is not None else datetime.min,
            until if until is not None else datetime.max,
        )

    if category_names:
        wanted = {name.lower() for name in category_names}
        names = {cat.id: cat.name for cat in categories}
        selected = [txn for txn in selected if names.get(txn.category_id, OTHER_CATEGORY).lower() in wanted]

    return selected


def export_csv(
    output_dir: Path,
    transactions: Sequence[Transaction],
    categories: Sequence[Category],
    reference: datetime,
    months: int = 6,
) -> list[Path]:
    """Write transactions.csv, monthly_summary.csv and categories.csv.

    Args:
        output_dir: Directory to write into; created if missing.
        transactions: Transactions to export (already filtered).
        categories: Category catalog.
        reference: Reference instant for the monthly summary.
        months: Number of months in the monthly summary.

    Returns:
        Paths of the written files.

    Raises:
        OSError: If the files cannot be written.
        ValueError: If a transaction is malformed or months < 1.
    """
    output_dir.mkdir(parents=True, exist_ok=True)

    frames = {
        "transactions.csv": transactions_frame(transactions, categories),
        "monthly_summary.csv": series_frame(build_series(transactions, reference, months)),
        "categories.csv": breakdown_frame(breakdown_by_category(transactions, categories)),
    }

    written = []
    for filename, df in frames.items():
        path = output_dir / filename
        df.to_csv(path, index=False)
        logger.info("Wrote %d rows to %s", len(df), path)
        written.append(path)
    return written
