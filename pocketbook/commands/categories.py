"""Category commands."""

import re
import sqlite3
import sys

from rich.console import Console
from rich.table import Table

from pocketbook.commands.transactions import check_type, require_database
from pocketbook.domain.models import OTHER_COLOR, CategoryName
from pocketbook.store.queries import add_category, delete_category, get_all_categories

console = Console()

_HEX_COLOR = re.compile(r"^#[0-9A-Fa-f]{6}$")


def categories_command(
    add: str | None = None,
    color: str = OTHER_COLOR,
    category_type: str = "expense",
    delete: int | None = None,
) -> None:
    """List, add or delete categories."""
    db_path = require_database()

    if add and delete is not None:
        console.print("[red]Use either --add or --delete, not both[/red]")
        sys.exit(1)

    try:
        if add:
            if not _HEX_COLOR.match(color):
                console.print(f"[red]Colour must look like #RRGGBB, got '{color}'[/red]")
                sys.exit(1)
            category_id = add_category(CategoryName(add), color, check_type(category_type), db_path)
            console.print(f"[green]✓[/green] Created category {category_id}: {add}")
            return

        if delete is not None:
            if not delete_category(delete, db_path):
                console.print(f"[red]Category {delete} not found[/red]")
                sys.exit(1)
            console.print(f"[green]✓[/green] Category {delete} deleted")
            console.print("[dim]Its transactions now appear under 'Other'[/dim]")
            return

        rows = get_all_categories(db_path)
        if not rows:
            console.print("[yellow]No categories yet[/yellow]")
            return

        table = Table(title="Categories")
        table.add_column("ID", style="dim", justify="right")
        table.add_column("Name", style="white")
        table.add_column("Type")
        table.add_column("Colour")

        for row in rows:
            type_display = "[green]income[/green]" if row["type"] == "income" else "[red]expense[/red]"
            table.add_row(str(row["id"]), row["name"], type_display, f"[{row['color']}]■[/] {row['color']}")

        console.print(table)

    except ValueError as e:
        console.print(f"[red]{e}[/red]")
        sys.exit(1)
    except sqlite3.Error as e:
        console.print(f"[red]Database error: {e}[/red]", style="bold")
        sys.exit(1)
