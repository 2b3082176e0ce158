"""Domain types and records for pocketbook.

These NewTypes provide semantic clarity and help with type checking:
- Money: Amount in minor units (paise, pence, cents)
- Month: Month in YYYY-MM format
- CategoryName: Display name of a category

Transactions and categories are owned by the store; the domain treats them
as immutable input.
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Literal, NewType

# Money amounts are stored as minor units to avoid floating point errors
Money = NewType("Money", int)

# Month is always in YYYY-MM format (e.g., "2024-01")
Month = NewType("Month", str)

CategoryName = NewType("CategoryName", str)

TransactionType = Literal["income", "expense"]

INCOME: TransactionType = "income"
EXPENSE: TransactionType = "expense"
TRANSACTION_TYPES: tuple[str, ...] = (INCOME, EXPENSE)

# Fallback for transactions whose category is missing from the catalog
OTHER_CATEGORY = CategoryName("Other")
OTHER_COLOR = "#6B7280"


@dataclass(frozen=True)
class Category:
    """Immutable category record."""

    id: int
    name: CategoryName
    color: str = OTHER_COLOR
    type: str = EXPENSE


@dataclass(frozen=True)
class Transaction:
    """Immutable transaction record.

    ``type`` is kept as a plain string so that malformed rows coming from the
    store can reach the aggregator and be reported there.
    """

    id: int
    type: str
    amount: Money
    category_id: int | None
    date: datetime | date
    description: str = ""
    payment_method: str = ""
