"""CLI entry point for pocketbook."""

import typer

from pocketbook.commands.admin import init_command
from pocketbook.commands.categories import categories_command
from pocketbook.commands.export import export_command
from pocketbook.commands.report import analytics_command, dashboard_command
from pocketbook.commands.transactions import add_command, delete_command, edit_command, list_command
from pocketbook.config import get_settings
from pocketbook.logging_setup import configure_logging

app = typer.Typer(
    name="pocketbook",
    help="pocketbook - track your income and expenses",
    add_completion=False,
)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """pocketbook - track your income and expenses."""
    if verbose:
        configure_logging("DEBUG")
        return

    try:
        level = get_settings().log_level
    except (ValueError, OSError):
        level = None
    configure_logging(level)


@app.command(name="init")
def init(
    force: bool = typer.Option(False, "--force", "-f", help="Overwrite existing database and config"),
) -> None:
    """Initialize pocketbook database and configuration."""
    init_command(force)


@app.command()
def add(
    date: str,
    amount: float,
    txn_type: str = typer.Option("expense", "--type", "-t", help="'income' or 'expense'"),
    category: str = typer.Option(None, "--category", "-c", help="Category name or ID"),
    description: str = typer.Option("", "--description", "-d", help="Description"),
    payment_method: str = typer.Option("", "--payment-method", "-p", help="Payment method (e.g. cash, card, UPI)"),
) -> None:
    """Record a transaction (amount in major units, e.g. 12.50)."""
    add_command(date, amount, txn_type, category, description, payment_method)


@app.command()
def edit(
    transaction_id: int,
    date: str = typer.Option(None, "--date", help="New date"),
    amount: float = typer.Option(None, "--amount", help="New amount"),
    txn_type: str = typer.Option(None, "--type", "-t", help="'income' or 'expense'"),
    category: str = typer.Option(None, "--category", "-c", help="Category name or ID"),
    description: str = typer.Option(None, "--description", "-d", help="New description"),
    payment_method: str = typer.Option(None, "--payment-method", "-p", help="New payment method"),
) -> None:
    """Update an existing transaction."""
    edit_command(transaction_id, date, amount, txn_type, category, description, payment_method)


@app.command()
def delete(transaction_id: int) -> None:
    """Delete a transaction."""
    delete_command(transaction_id)


@app.command()
def categories(
    add: str = typer.Option(None, "--add", help="Name of a category to create"),
    color: str = typer.Option("#6B7280", "--color", help="Colour for a new category (#RRGGBB)"),
    category_type: str = typer.Option("expense", "--type", "-t", help="Type for a new category"),
    delete: int = typer.Option(None, "--delete", help="ID of a category to delete"),
) -> None:
    """List, add or delete categories."""
    categories_command(add, color, category_type, delete)


@app.command(name="list")
def list_transactions(
    search: str = typer.Option("", "--search", "-s", help="Match description or category name"),
    txn_type: str = typer.Option("all", "--type", "-t", help="'all', 'income' or 'expense'"),
    limit: int = typer.Option(20, help="Maximum transactions to show"),
    all: bool = typer.Option(False, "--all", "-a", help="Show all matching transactions"),
) -> None:
    """List and search your transactions."""
    list_command(search, txn_type, limit, all)


@app.command()
def dashboard() -> None:
    """Show this month's totals, changes, breakdown and trend."""
    dashboard_command()


@app.command()
def analytics(
    months: int = typer.Option(None, "--months", "-m", help="Months in the trend (default from config)"),
) -> None:
    """Show this month's analytics and a trailing monthly trend."""
    analytics_command(months)


@app.command()
def export(
    output_dir: str,
    since: str = typer.Option(None, "--since", help="First date to include"),
    until: str = typer.Option(None, "--until", help="Last date to include"),
    month: str = typer.Option(None, "--month", help="Specific month (YYYY-MM)"),
    category: list[str] = typer.Option(None, "--category", "-c", help="Only these categories (repeatable)"),
) -> None:
    """Export transactions and summaries to CSV files."""
    export_command(output_dir, since, until, month, category)


if __name__ == "__main__":
    app()
