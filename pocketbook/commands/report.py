"""Dashboard and analytics commands for viewing derived figures."""

import sqlite3
import sys
from datetime import datetime

from rich.console import Console
from rich.table import Table

from pocketbook.commands.transactions import format_money, load_records, require_database
from pocketbook.config import get_settings
from pocketbook.domain.analytics import CategoryBreakdownEntry, MonthlyPoint, WindowSummary
from pocketbook.domain.views import build_analytics, build_dashboard

console = Console()

BAR_WIDTH = 30


def calculate_histogram_bar_length(amount: int, max_amount: int, bar_width: int) -> int:
    """Calculate histogram bar length.

    Args:
        amount: Amount to display.
        max_amount: Maximum amount in dataset.
        bar_width: Maximum bar width in characters.

    Returns:
        Bar length in characters.
    """
    if max_amount <= 0:
        return 0
    return int((abs(amount) / max_amount) * bar_width)


def format_change(change: float, higher_is_better: bool = True) -> str:
    """Format a percent change, green when it moves in the good direction.

    Args:
        change: Percent change.
        higher_is_better: False for metrics like expenses where a drop is good.

    Returns:
        Rich markup such as "[green]+12.5%[/green]".
    """
    text = f"{'+' if change > 0 else ''}{change:.1f}%"
    improved = change >= 0 if higher_is_better else change <= 0
    color = "green" if improved else "red"
    return f"[{color}]{text}[/{color}]"


def render_summary(summary: WindowSummary, symbol: str, changes: tuple[float, float, float] | None = None) -> None:
    """Render the income / expenses / net / count cards as one table."""
    table = Table(show_header=True, header_style="bold")
    table.add_column("Income", justify="right")
    table.add_column("Expenses", justify="right")
    table.add_column("Net", justify="right")
    table.add_column("Transactions", justify="right")

    balance_color = "green" if summary.balance >= 0 else "red"
    table.add_row(
        f"[green]{format_money(summary.total_income, symbol)}[/green]",
        f"[red]{format_money(summary.total_expenses, symbol)}[/red]",
        f"[{balance_color}]{format_money(summary.balance, symbol)}[/{balance_color}]",
        str(summary.transaction_count),
    )

    if changes is not None:
        income_change, expense_change, balance_change = changes
        table.add_row(
            format_change(income_change),
            format_change(expense_change, higher_is_better=False),
            format_change(balance_change),
            "[dim]this month[/dim]",
        )

    console.print(table)


def render_breakdown(entries: list[CategoryBreakdownEntry], symbol: str) -> None:
    """Render the category breakdown with a histogram column."""
    if not entries:
        console.print("[dim]No transactions this month[/dim]\n")
        return

    max_total = max(entry.total for entry in entries)

    table = Table(title="Income & Expense Breakdown")
    table.add_column("Category")
    table.add_column("Income", justify="right", style="green")
    table.add_column("Expense", justify="right", style="red")
    table.add_column("Total", justify="right", style="bold")
    table.add_column("")

    for entry in entries:
        bar = "█" * calculate_histogram_bar_length(entry.total, max_total, BAR_WIDTH)
        table.add_row(
            f"[{entry.color}]■[/] {entry.name}",
            format_money(entry.income, symbol),
            format_money(entry.expense, symbol),
            format_money(entry.total, symbol),
            f"[{entry.color}]{bar}[/]",
        )

    console.print(table)


def render_series(series: list[MonthlyPoint], symbol: str) -> None:
    """Render the monthly income/expense series."""
    table = Table(title=f"Income vs Expenses (last {len(series)} months)")
    table.add_column("Month", style="cyan")
    table.add_column("Income", justify="right", style="green")
    table.add_column("Expenses", justify="right", style="red")
    table.add_column("Net", justify="right")

    for point in series:
        net_color = "green" if point.net_balance >= 0 else "red"
        table.add_row(
            point.month,
            format_money(point.income, symbol),
            format_money(point.expenses, symbol),
            f"[{net_color}]{format_money(point.net_balance, symbol)}[/{net_color}]",
        )

    console.print(table)


def dashboard_command() -> None:
    """Show the dashboard for the current month."""
    db_path = require_database()

    try:
        settings = get_settings()
        symbol = settings.currency_symbol
        transactions, categories = load_records(db_path)

        now = datetime.now()
        view = build_dashboard(
            transactions,
            categories,
            now,
            months=settings.dashboard_months,
            recent=settings.recent_limit,
        )

        console.print(f"[bold cyan]Financial overview for {now.strftime('%B %Y')}[/bold cyan]\n")
        render_summary(view.current, symbol, (view.income_change, view.expense_change, view.balance_change))
        console.print()
        render_series(view.series, symbol)
        console.print()
        render_breakdown(view.categories, symbol)

        if view.recent:
            names = {cat.id: cat.name for cat in categories}
            console.print("\n[bold]Recent transactions[/bold]")
            for txn in view.recent:
                if txn.type == "income":
                    amount_display = f"[green]+{format_money(txn.amount, symbol)}[/green]"
                else:
                    amount_display = f"[red]-{format_money(txn.amount, symbol)}[/red]"
                category = names.get(txn.category_id, "Other")
                console.print(
                    f"  {txn.date.strftime('%b %d')}  {txn.description or category:30} {category:15} {amount_display}"
                )

    except ValueError as e:
        console.print(f"[red]Cannot build dashboard: {e}[/red]", style="bold")
        sys.exit(1)
    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)


def analytics_command(months: int | None = None) -> None:
    """Show analytics for the current month and a trailing series."""
    db_path = require_database()

    try:
        settings = get_settings()
        symbol = settings.currency_symbol
        transactions, categories = load_records(db_path)

        now = datetime.now()
        view = build_analytics(
            transactions,
            categories,
            now,
            months=months if months is not None else settings.analytics_months,
        )

        console.print(f"[bold cyan]Analytics for {now.strftime('%B %Y')}[/bold cyan]\n")
        render_summary(view.summary, symbol)

        net = view.summary.balance
        if net >= 0:
            console.print(f"[green]Savings: {format_money(net, symbol)}[/green]\n")
        else:
            console.print(f"[red]Deficit: {format_money(abs(net), symbol)}[/red]\n")

        render_breakdown(view.categories, symbol)
        console.print()
        render_series(view.series, symbol)

    except ValueError as e:
        console.print(f"[red]Cannot build analytics: {e}[/red]", style="bold")
        sys.exit(1)
    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)
