"""Transaction management commands (add, edit, delete, list)."""

import sqlite3
import sys
from pathlib import Path

import pandas as pd
from rich.console import Console
from rich.table import Table

from pocketbook.config import get_settings
from pocketbook.domain.models import TRANSACTION_TYPES, Category, Money, Transaction
from pocketbook.domain.transactions import (
    category_from_row,
    search_transactions,
    transaction_from_row,
)
from pocketbook.logging_setup import get_logger
from pocketbook.store.queries import (
    delete_transaction,
    get_all_categories,
    get_all_transactions,
    get_transaction,
    insert_transaction,
    update_transaction,
)
from pocketbook.store.schema import database_exists, get_db_path

console = Console()
logger = get_logger(__name__)


def require_database() -> Path:
    """Return the database path, exiting with a hint if it has not been created."""
    db_path = get_db_path()
    if not database_exists(db_path):
        console.print("[red]Database not found. Run 'pocketbook init' first.[/red]", style="bold")
        sys.exit(1)
    return db_path


def load_records(db_path: Path) -> tuple[list[Transaction], list[Category]]:
    """Load all transactions (newest first) and the category catalog.

    Raises:
        sqlite3.Error: If database operation fails.
        ValueError: If a stored date cannot be parsed.
    """
    transactions = [transaction_from_row(row) for row in get_all_transactions(db_path)]
    categories = [category_from_row(row) for row in get_all_categories(db_path)]
    logger.debug("Loaded %d transactions and %d categories", len(transactions), len(categories))
    return transactions, categories


def format_money(amount: int, symbol: str) -> str:
    """Format minor units for display, e.g. 123456 -> "₹1,234.56"."""
    sign = "-" if amount < 0 else ""
    return f"{sign}{symbol}{abs(amount) / 100:,.2f}"


def normalize_date(raw: str) -> str:
    """Normalize a user-entered date to YYYY-MM-DD.

    ISO dates (YYYY-MM-DD) are parsed strictly; anything else is read
    day-first (DD/MM/YYYY, DD-MM-YYYY, ...).

    Raises:
        ValueError: If the date cannot be parsed.
    """
    try:
        parsed = pd.to_datetime(raw, format="ISO8601")
    except (ValueError, TypeError):
        try:
            parsed = pd.to_datetime(raw, dayfirst=True)
        except (ValueError, TypeError, OverflowError) as e:
            raise ValueError(f"Invalid date '{raw}': {e}") from e
    return parsed.strftime("%Y-%m-%d")


def to_minor_units(amount: float) -> Money:
    """Convert a major-unit amount to minor units.

    Raises:
        ValueError: If the amount is negative.
    """
    if amount < 0:
        raise ValueError("Amount must not be negative (use --type to record income or expense)")
    return Money(round(amount * 100))


def check_type(txn_type: str) -> str:
    """Validate a transaction type entered on the command line."""
    txn_type = txn_type.lower()
    if txn_type not in TRANSACTION_TYPES:
        raise ValueError(f"Type must be one of: {', '.join(TRANSACTION_TYPES)}")
    return txn_type


def resolve_category(value: str, categories: list[Category]) -> Category:
    """Find a category by ID or (case-insensitive) name.

    Raises:
        ValueError: If no category matches.
    """
    if value.isdigit():
        match = next((cat for cat in categories if cat.id == int(value)), None)
    else:
        match = next((cat for cat in categories if cat.name.lower() == value.lower()), None)

    if match is None:
        raise ValueError(f"Category '{value}' not found (see 'pocketbook categories')")
    return match


def add_command(
    date: str,
    amount: float,
    txn_type: str = "expense",
    category: str | None = None,
    description: str = "",
    payment_method: str = "",
) -> None:
    """Add a transaction."""
    db_path = require_database()

    try:
        settings = get_settings()
        normalized_date = normalize_date(date)
        amount_minor = to_minor_units(amount)
        txn_type = check_type(txn_type)

        category_id = None
        category_name = None
        if category:
            resolved = resolve_category(category, [category_from_row(r) for r in get_all_categories(db_path)])
            category_id = resolved.id
            category_name = resolved.name

        txn_id = insert_transaction(
            txn_type,
            amount_minor,
            normalized_date,
            category_id=category_id,
            description=description,
            payment_method=payment_method,
            db_path=db_path,
        )

        console.print(f"[green]✓[/green] Transaction {txn_id} added:")
        console.print(f"  Date: {normalized_date}")
        console.print(f"  Type: {txn_type}")
        console.print(f"  Amount: {format_money(amount_minor, settings.currency_symbol)}")
        if category_name:
            console.print(f"  Category: {category_name}")
        if description:
            console.print(f"  Description: {description}")
        if payment_method:
            console.print(f"  Payment method: {payment_method}")

    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)
    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)


def edit_command(
    transaction_id: int,
    date: str | None = None,
    amount: float | None = None,
    txn_type: str | None = None,
    category: str | None = None,
    description: str | None = None,
    payment_method: str | None = None,
) -> None:
    """Update fields of an existing transaction."""
    db_path = require_database()

    try:
        if get_transaction(transaction_id, db_path) is None:
            console.print(f"[red]Transaction {transaction_id} not found[/red]")
            sys.exit(1)

        changes: dict[str, object] = {}
        if date is not None:
            changes["date"] = normalize_date(date)
        if amount is not None:
            changes["amount"] = to_minor_units(amount)
        if txn_type is not None:
            changes["type"] = check_type(txn_type)
        if category is not None:
            categories = [category_from_row(r) for r in get_all_categories(db_path)]
            changes["category_id"] = resolve_category(category, categories).id
        if description is not None:
            changes["description"] = description
        if payment_method is not None:
            changes["payment_method"] = payment_method

        if not changes:
            console.print("[yellow]Nothing to change[/yellow]")
            return

        update_transaction(transaction_id, changes, db_path)
        console.print(f"[green]✓[/green] Transaction {transaction_id} updated ({', '.join(changes)})")

    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)
    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)


def delete_command(transaction_id: int) -> None:
    """Delete a transaction."""
    db_path = require_database()

    try:
        if not delete_transaction(transaction_id, db_path):
            console.print(f"[red]Transaction {transaction_id} not found[/red]")
            sys.exit(1)
        console.print(f"[green]✓[/green] Transaction {transaction_id} deleted")

    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)


def list_command(
    search: str = "",
    txn_type: str = "all",
    limit: int = 20,
    all: bool = False,
) -> None:
    """List and search transactions."""
    db_path = require_database()

    try:
        settings = get_settings()
        transactions, categories = load_records(db_path)
        matches = search_transactions(transactions, categories, search, txn_type.lower())

        if not matches:
            console.print("[yellow]No transactions found[/yellow]")
            return

        shown = matches if all else matches[:limit]
        names = {cat.id: cat.name for cat in categories}

        table = Table(title=f"Transactions ({len(shown)} of {len(matches)})")
        table.add_column("ID", style="dim", justify="right")
        table.add_column("Date", style="cyan")
        table.add_column("Description", style="white")
        table.add_column("Category", style="magenta")
        table.add_column("Payment", style="dim")
        table.add_column("Amount", justify="right")

        for txn in shown:
            if txn.type == "income":
                amount_display = f"[green]+{format_money(txn.amount, settings.currency_symbol)}[/green]"
            else:
                amount_display = f"[red]-{format_money(txn.amount, settings.currency_symbol)}[/red]"

            table.add_row(
                str(txn.id),
                txn.date.strftime("%Y-%m-%d"),
                txn.description,
                names.get(txn.category_id, "[dim]Other[/dim]"),
                txn.payment_method or "[dim]-[/dim]",
                amount_display,
            )

        console.print(table)

        if not all and len(matches) > limit:
            console.print(f"[dim]{len(matches) - limit} more (use --all to show everything)[/dim]")

    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)
    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)
