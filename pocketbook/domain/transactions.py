"""Pure functions for transaction records.

This module contains the functional core for transaction operations:
- No I/O operations (no database, no console, no files)
- No side effects
- Pure data transformations
- Easy to test

All monetary amounts are in minor units (Money type).
"""

from collections.abc import Iterable, Sequence
from typing import Any

from pocketbook.dates import as_datetime, parse_date
from pocketbook.domain.errors import MalformedTransactionError
from pocketbook.domain.models import (
    OTHER_COLOR,
    TRANSACTION_TYPES,
    Category,
    CategoryName,
    Money,
    Transaction,
)


def validate_transaction(txn: Transaction) -> None:
    """Check that a transaction can be aggregated.

    Args:
        txn: Transaction to check.

    Raises:
        MalformedTransactionError: If the type is not income/expense or the
            amount is negative.
    """
    if txn.type not in TRANSACTION_TYPES:
        raise MalformedTransactionError(txn.id, f"unknown type {txn.type!r}")
    if txn.amount < 0:
        raise MalformedTransactionError(txn.id, f"negative amount {txn.amount}")


def transaction_from_row(row: dict[str, Any]) -> Transaction:
    """Build a Transaction from a store row.

    Args:
        row: Dictionary with id, type, amount, category_id, date and optional
            description / payment_method keys.

    Returns:
        Transaction with the date parsed to a datetime.
    """
    return Transaction(
        id=row["id"],
        type=row["type"],
        amount=Money(row["amount"]),
        category_id=row.get("category_id"),
        date=parse_date(row["date"]),
        description=row.get("description") or "",
        payment_method=row.get("payment_method") or "",
    )


def category_from_row(row: dict[str, Any]) -> Category:
    """Build a Category from a store row."""
    return Category(
        id=row["id"],
        name=CategoryName(row["name"]),
        color=row.get("color") or OTHER_COLOR,
        type=row["type"],
    )


def search_transactions(
    transactions: Iterable[Transaction],
    categories: Iterable[Category],
    term: str = "",
    type_filter: str = "all",
) -> list[Transaction]:
    """Filter transactions by search term and type.

    The term matches case-insensitively against the description or the name
    of the transaction's category. An empty term matches everything.

    Args:
        transactions: Transactions to search.
        categories: Category catalog used to resolve names.
        term: Substring to look for.
        type_filter: "all", "income" or "expense".

    Returns:
        Matching transactions in their original order.

    Raises:
        ValueError: If type_filter is not recognised.
    """
    if type_filter != "all" and type_filter not in TRANSACTION_TYPES:
        raise ValueError(f"Unknown type filter: {type_filter!r}")

    names = {cat.id: cat.name.lower() for cat in categories}
    needle = term.lower()

    def matches(txn: Transaction) -> bool:
        if type_filter != "all" and txn.type != type_filter:
            return False
        if needle in txn.description.lower():
            return True
        name = names.get(txn.category_id)
        return name is not None and needle in name

    return [txn for txn in transactions if matches(txn)]


def recent_transactions(transactions: Sequence[Transaction], limit: int = 5) -> list[Transaction]:
    """Return the newest transactions first.

    Args:
        transactions: Transactions in any order.
        limit: Maximum number to return.

    Returns:
        Up to ``limit`` transactions sorted by date descending.
    """
    if limit <= 0:
        return []
    return sorted(transactions, key=lambda t: as_datetime(t.date), reverse=True)[:limit]
