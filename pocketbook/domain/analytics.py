"""Pure functions for financial analytics aggregation.

This module contains the functional core behind the dashboard and analytics
views:
- No I/O operations (no database, no console, no files)
- No side effects and no caching; every call recomputes from its inputs
- The reference instant is always passed in, never read from the clock

All monetary amounts are in minor units (Money type).
"""

from bisect import bisect_right
from collections import defaultdict
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any

from pocketbook.dates import as_datetime, month_key, month_label, trailing_months
from pocketbook.domain.models import (
    EXPENSE,
    INCOME,
    OTHER_CATEGORY,
    OTHER_COLOR,
    Category,
    CategoryName,
    Money,
    Month,
    Transaction,
)
from pocketbook.domain.transactions import validate_transaction


@dataclass(frozen=True)
class WindowSummary:
    """Immutable totals for one window."""

    total_income: Money
    total_expenses: Money
    transaction_count: int

    @property
    def balance(self) -> Money:
        return Money(self.total_income - self.total_expenses)

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_income": self.total_income,
            "total_expenses": self.total_expenses,
            "balance": self.balance,
            "transaction_count": self.transaction_count,
        }


@dataclass(frozen=True)
class CategoryBreakdownEntry:
    """Immutable income/expense aggregate for one category name."""

    name: CategoryName
    color: str
    type: str
    income: Money
    expense: Money

    @property
    def total(self) -> Money:
        return Money(self.income + self.expense)

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "color": self.color,
            "type": self.type,
            "income": self.income,
            "expense": self.expense,
            "total": self.total,
        }


@dataclass(frozen=True)
class MonthlyPoint:
    """Immutable income/expense totals for one calendar month."""

    key: Month
    month: str
    income: Money
    expenses: Money

    @property
    def net_balance(self) -> Money:
        return Money(self.income - self.expenses)

    def to_dict(self) -> dict[str, Any]:
        return {
            "key": self.key,
            "month": self.month,
            "income": self.income,
            "expenses": self.expenses,
            "net_balance": self.net_balance,
        }


def filter_by_window(
    transactions: Iterable[Transaction],
    start: datetime | date,
    end: datetime | date,
) -> list[Transaction]:
    """Select transactions dated inside an inclusive window.

    Args:
        transactions: Transactions to filter.
        start: First instant of the window.
        end: Last instant of the window.

    Returns:
        Transactions with start <= date <= end, in their original order.
    """
    start, end = as_datetime(start), as_datetime(end)
    return [txn for txn in transactions if start <= as_datetime(txn.date) <= end]


def summarize(transactions: Iterable[Transaction]) -> WindowSummary:
    """Total income and expenses for a set of transactions.

    Args:
        transactions: Transactions already filtered to one window.

    Returns:
        WindowSummary with totals and count.

    Raises:
        MalformedTransactionError: If any transaction fails validation.
    """
    income = 0
    expenses = 0
    count = 0

    for txn in transactions:
        validate_transaction(txn)
        if txn.type == INCOME:
            income += txn.amount
        else:
            expenses += txn.amount
        count += 1

    return WindowSummary(
        total_income=Money(income),
        total_expenses=Money(expenses),
        transaction_count=count,
    )


def percent_change(current: float, previous: float) -> float:
    """Calculate percentage change versus a previous value.

    A previous value of zero or less always reports 0.0, whatever the current
    value is.

    Args:
        current: Value for the current period.
        previous: Value for the previous period.

    Returns:
        Change in percent (e.g. 50.0 for 100 -> 150).
    """
    if previous <= 0:
        return 0.0
    return (current - previous) / previous * 100


def breakdown_by_category(
    transactions: Iterable[Transaction],
    categories: Iterable[Category],
) -> list[CategoryBreakdownEntry]:
    """Group income and expense amounts by category name.

    Categories sharing a name are merged into one entry. Transactions whose
    category is not in the catalog are grouped under "Other". The colour and
    type of an entry come from the first category seen for that name.

    Args:
        transactions: Transactions already filtered to one window.
        categories: Category catalog.

    Returns:
        Entries with a non-zero total, sorted by total descending. Ties keep
        the order in which names were first seen.

    Raises:
        MalformedTransactionError: If any transaction fails validation.
    """
    lookup = {cat.id: cat for cat in categories}

    # name -> [color, type, income, expense]
    groups: dict[CategoryName, list[Any]] = {}

    for txn in transactions:
        validate_transaction(txn)

        category = lookup.get(txn.category_id)
        if category is not None:
            name, color, cat_type = category.name, category.color, category.type
        else:
            name, color, cat_type = OTHER_CATEGORY, OTHER_COLOR, EXPENSE

        group = groups.setdefault(name, [color, cat_type, 0, 0])
        if txn.type == INCOME:
            group[2] += txn.amount
        else:
            group[3] += txn.amount

    entries = [
        CategoryBreakdownEntry(
            name=name,
            color=color,
            type=cat_type,
            income=Money(income),
            expense=Money(expense),
        )
        for name, (color, cat_type, income, expense) in groups.items()
        if income > 0 or expense > 0
    ]

    return sorted(entries, key=lambda entry: entry.total, reverse=True)


def build_series(
    transactions: Sequence[Transaction],
    reference: datetime | date,
    month_count: int,
) -> list[MonthlyPoint]:
    """Build a month-by-month income/expense series.

    Transactions are bucketed in a single pass, so each month does not
    rescan the whole list. A transaction lands in the window whose bounds
    contain it, compared as instants, so an aware timestamp in another
    offset counts toward the reference's calendar month, not its own.

    Args:
        transactions: All transactions; those outside the range are ignored.
        reference: Instant in the newest month of the series.
        month_count: Number of months, including the reference month.

    Returns:
        Exactly ``month_count`` points, oldest first. Months with no
        transactions have zero income and expenses.

    Raises:
        InvalidWindowError: If month_count is less than 1.
        MalformedTransactionError: If an in-range transaction fails validation.
    """
    windows = trailing_months(reference, month_count)
    starts = [start for start, _ in windows]
    last_end = windows[-1][1]

    # window index -> transactions
    buckets: dict[int, list[Transaction]] = defaultdict(list)
    for txn in transactions:
        dt = as_datetime(txn.date)
        if starts[0] <= dt <= last_end:
            buckets[bisect_right(starts, dt) - 1].append(txn)

    points = []
    for index, start in enumerate(starts):
        key = month_key(start)
        summary = summarize(buckets.get(index, []))
        points.append(
            MonthlyPoint(
                key=key,
                month=month_label(start),
                income=summary.total_income,
                expenses=summary.total_expenses,
            )
        )
    return points
