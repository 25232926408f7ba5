"""Calendar commands: a month of real and projected money movements."""

import sqlite3
import sys
from datetime import date

from rich.table import Table

from safespender.commands.common import (
    console,
    currency_of,
    fail,
    get_settings,
    load_ready_snapshot,
    logger,
    require_database,
    require_date,
)
from safespender.dates import month_of, month_range
from safespender.domain.calendar import (
    CalendarItem,
    VirtualItemError,
    calendar_window,
    ensure_deletable,
    items_for_date,
    net_flow,
    project_calendar,
    summarize_days,
)
from safespender.domain.models import Loading, Money, Month, TransactionKind, format_money
from safespender.store.queries import delete_transaction
from safespender.store.schema import get_db_path

_KIND_COLOURS = {
    TransactionKind.INCOME: "green",
    TransactionKind.EXPENSE: "red",
    TransactionKind.SAVINGS: "blue",
}


def _format_flow(amount: Money, currency: str) -> str:
    if amount > 0:
        return f"[green]+{format_money(amount, currency)}[/green]"
    if amount < 0:
        return f"[red]{format_money(amount, currency)}[/red]"
    return f"[dim]{format_money(amount, currency)}[/dim]"


def _format_item(item: CalendarItem, currency: str) -> str:
    colour = _KIND_COLOURS[item.kind]
    sign = "+" if item.kind is TransactionKind.INCOME else "-"
    return f"{item.title} [{colour}]{sign}{format_money(item.amount, currency)}[/{colour}]"


def calendar_command(month: str | None = None, day: str | None = None) -> None:
    """Show a month of transactions, paychecks, bills and planned savings.

    With ``day`` only that day's items are listed, with the ids used by
    ``delete-item``.
    """
    settings = get_settings()
    snapshot = load_ready_snapshot(get_db_path())
    currency = currency_of(snapshot)
    today = date.today()

    selected_day = require_date(day) if day else None
    if month is None:
        month = month_of(selected_day or today)
    try:
        first_day, last_day, label = month_range(Month(month))
    except ValueError:
        fail(f"Invalid month '{month}' (expected YYYY-MM)")

    window_start, window_end = calendar_window(Month(month), settings.calendar_padding_months)
    items = project_calendar(snapshot, window_start, window_end, settings.contribution_policy)
    if isinstance(items, Loading):
        console.print("[yellow]Still loading your records...[/yellow]")
        return

    if selected_day is not None:
        _show_day(items, selected_day, currency)
        return

    table = Table(title=label)
    table.add_column("Date", style="cyan")
    table.add_column("Items", style="white")
    table.add_column("Net", justify="right")

    days = summarize_days(items, first_day, last_day, today)
    for summary in days:
        if not summary.items and not summary.is_today:
            continue
        date_display = summary.date.strftime("%a %d")
        if summary.is_today:
            date_display = f"[bold]{date_display} (today)[/bold]"
        elif summary.is_past:
            date_display = f"[dim]{date_display}[/dim]"
        table.add_row(
            date_display,
            "\n".join(_format_item(item, currency) for item in summary.items) or "[dim]-[/dim]",
            _format_flow(summary.net_flow, currency),
        )

    console.print(table)
    month_flow = Money(sum(summary.net_flow for summary in days))
    console.print(f"[dim]Net for {label}:[/dim] {_format_flow(month_flow, currency)}")


def _show_day(items: list[CalendarItem], day: date, currency: str) -> None:
    day_items = items_for_date(items, day)
    if not day_items:
        console.print(f"[dim]Nothing on {day.isoformat()}[/dim]")
        return

    table = Table(title=day.strftime("%A %d %B %Y"))
    table.add_column("ID", style="dim")
    table.add_column("What", style="white")
    table.add_column("Category", style="magenta")
    table.add_column("Amount", justify="right")
    for item in day_items:
        title = item.title + (" [dim](planned)[/dim]" if item.is_virtual else "")
        colour = _KIND_COLOURS[item.kind]
        table.add_row(
            item.id,
            title,
            item.category or "",
            f"[{colour}]{format_money(item.amount, currency)}[/{colour}]",
        )
    console.print(table)
    console.print(f"[dim]Net:[/dim] {_format_flow(net_flow(day_items), currency)}")


def delete_item_command(item_id: str) -> None:
    """Delete a real transaction shown on the calendar."""
    db_path = get_db_path()
    require_database(db_path)

    try:
        txn_id = ensure_deletable(item_id)
    except VirtualItemError as e:
        console.print(f"[yellow]{e}[/yellow]")
        sys.exit(1)
    except ValueError as e:
        fail(str(e))

    try:
        deleted = delete_transaction(txn_id, db_path)
    except sqlite3.Error as e:
        logger.error("Failed to delete transaction %s: %s", txn_id, e)
        fail(f"Failed to delete item: {e}")

    if not deleted:
        fail(f"Transaction {txn_id} not found")
    console.print(f"[green]✓[/green] Transaction {txn_id} deleted")
