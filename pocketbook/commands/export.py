"""Export command for writing CSV files."""

import sqlite3
import sys
from datetime import datetime
from pathlib import Path

from rich.console import Console

from pocketbook.commands.transactions import load_records, normalize_date, require_database
from pocketbook.dates import as_datetime, month_range, months_spanned, parse_date
from pocketbook.domain.models import Month
from pocketbook.export import export_csv, select_transactions
from pocketbook.logging_setup import get_logger

console = Console()
logger = get_logger(__name__)


def compute_export_period(
    since: str | None,
    until: str | None,
    month: str | None,
) -> tuple[datetime | None, datetime | None]:
    """Resolve the export date range from --since/--until or --month.

    Returns:
        Tuple of (since, until) instants; either may be None for an open end.

    Raises:
        ValueError: If a date or month cannot be parsed, or both forms are given.
    """
    if month and (since or until):
        raise ValueError("Use either --month or --since/--until, not both")

    if month:
        since, until, _ = month_range(Month(month))

    since_dt = parse_date(normalize_date(since)) if since else None
    until_dt = None
    if until:
        until_dt = parse_date(normalize_date(until)).replace(hour=23, minute=59, second=59, microsecond=999999)
    return since_dt, until_dt


def export_command(
    output_dir: str,
    since: str | None = None,
    until: str | None = None,
    month: str | None = None,
    categories: list[str] | None = None,
) -> None:
    """Export transactions and summaries to CSV."""
    db_path = require_database()

    try:
        since_dt, until_dt = compute_export_period(since, until, month)
        transactions, catalog = load_records(db_path)

        selected = select_transactions(transactions, catalog, since_dt, until_dt, categories)
        if not selected:
            console.print("[yellow]No transactions match the export filters[/yellow]")
            return

        # Summary months run from the export's first day (or earliest selected
        # transaction) to its last day (or today for open ranges)
        reference = until_dt or datetime.now()
        first = since_dt or min(as_datetime(txn.date) for txn in selected)
        months = months_spanned(first, reference)
        logger.debug("Export summary covers %d months ending %s", months, reference.date())
        written = export_csv(
            Path(output_dir).expanduser(),
            selected,
            catalog,
            reference,
            months=months,
        )

        console.print(f"[green]✓[/green] Exported {len(selected)} transactions:")
        for path in written:
            console.print(f"  {path}")

    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)
    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)
    except OSError as e:
        console.print(f"[red]Export failed: {e}[/red]", style="bold")
        sys.exit(1)
