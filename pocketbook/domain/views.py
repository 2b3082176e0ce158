"""Dashboard and analytics view composition.

Each builder takes one reference instant and threads it through every
window, summary and series it computes, so a transaction can never land in
one window's filter and miss another's.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime

from pocketbook.dates import month_bounds
from pocketbook.domain.analytics import (
    CategoryBreakdownEntry,
    MonthlyPoint,
    WindowSummary,
    breakdown_by_category,
    build_series,
    filter_by_window,
    percent_change,
    summarize,
)
from pocketbook.domain.models import Category, Transaction
from pocketbook.domain.transactions import recent_transactions
from pocketbook.logging_setup import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class DashboardView:
    """Immutable dashboard data."""

    reference: datetime
    current: WindowSummary
    previous: WindowSummary
    income_change: float
    expense_change: float
    balance_change: float
    categories: list[CategoryBreakdownEntry]
    series: list[MonthlyPoint]
    recent: list[Transaction]


@dataclass(frozen=True)
class AnalyticsView:
    """Immutable analytics data."""

    reference: datetime
    summary: WindowSummary
    categories: list[CategoryBreakdownEntry]
    series: list[MonthlyPoint]


def build_dashboard(
    transactions: Sequence[Transaction],
    categories: Sequence[Category],
    reference: datetime,
    months: int = 6,
    recent: int = 5,
) -> DashboardView:
    """Compute the dashboard view.

    Args:
        transactions: All of the user's transactions.
        categories: The user's category catalog.
        reference: The captured "now" for this computation.
        months: Length of the trailing series.
        recent: Number of recent transactions to include.

    Returns:
        DashboardView for the reference month.
    """
    current_txns = filter_by_window(transactions, *month_bounds(reference, 0))
    previous_txns = filter_by_window(transactions, *month_bounds(reference, 1))

    current = summarize(current_txns)
    previous = summarize(previous_txns)

    logger.debug(
        "Dashboard at %s: %d transactions this month, %d last month",
        reference.isoformat(),
        current.transaction_count,
        previous.transaction_count,
    )

    return DashboardView(
        reference=reference,
        current=current,
        previous=previous,
        income_change=percent_change(current.total_income, previous.total_income),
        expense_change=percent_change(current.total_expenses, previous.total_expenses),
        balance_change=percent_change(current.balance, previous.balance),
        categories=breakdown_by_category(current_txns, categories),
        series=build_series(transactions, reference, months),
        recent=recent_transactions(transactions, recent),
    )


def build_analytics(
    transactions: Sequence[Transaction],
    categories: Sequence[Category],
    reference: datetime,
    months: int = 6,
) -> AnalyticsView:
    """Compute the analytics view.

    Args:
        transactions: All of the user's transactions.
        categories: The user's category catalog.
        reference: The captured "now" for this computation.
        months: Length of the trailing series.

    Returns:
        AnalyticsView for the reference month.
    """
    current_txns = filter_by_window(transactions, *month_bounds(reference, 0))

    logger.debug("Analytics at %s over %d months", reference.isoformat(), months)

    return AnalyticsView(
        reference=reference,
        summary=summarize(current_txns),
        categories=breakdown_by_category(current_txns, categories),
        series=build_series(transactions, reference, months),
    )
