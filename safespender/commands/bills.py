"""Commands for managing one-time and monthly bills."""

import sqlite3
from datetime import date

from rich.table import Table

from safespender.commands.common import (
    console,
    currency_of,
    fail,
    load_ready_snapshot,
    logger,
    require_database,
    require_date,
    require_money,
)
from safespender.domain.bills import apply_bill_changes
from safespender.domain.models import format_money
from safespender.domain.upcoming import next_bill_date
from safespender.domain.validation import validate_amount, validate_day_of_month
from safespender.store.queries import (
    create_expense_definition,
    delete_expense_definition,
    update_expense_definition,
)
from safespender.store.schema import get_db_path


def add_bill_command(
    description: str,
    amount: str,
    category: str = "bills",
    day: int | None = None,
    on: str | None = None,
    end_date: str | None = None,
) -> None:
    """Add a bill: monthly when --day is given, otherwise one-time on --date."""
    db_path = get_db_path()
    snapshot = load_ready_snapshot(db_path)
    currency = currency_of(snapshot)

    amount_minor = require_money(amount)
    valid, error = validate_amount(amount_minor)
    if not valid:
        fail(error or "Invalid amount")
    if not description.strip():
        fail("Description is required")
    if day is not None:
        valid, error = validate_day_of_month(day)
        if not valid:
            fail(error or "Invalid day of month")
    if day is None and end_date is not None:
        fail("--end-date only applies to monthly bills (use --day)")

    created_at = require_date(on)
    end = require_date(end_date) if end_date else None
    if end is not None and end < created_at:
        fail("End date is before the bill starts")

    try:
        bill_id = create_expense_definition(
            description.strip(),
            category,
            amount_minor,
            recurring=day is not None,
            created_at=created_at,
            day_of_month=day,
            end_date=end,
            db_path=db_path,
        )
    except sqlite3.Error as e:
        logger.error("Failed to add bill: %s", e)
        fail(f"Failed to add bill: {e}")

    if day is not None:
        schedule = f"monthly on day {day}"
        if day > 28:
            schedule += " (earlier in short months, the 28th in February)"
        if end:
            schedule += f" until {end.isoformat()}"
    else:
        schedule = f"once on {created_at.isoformat()}"
    console.print(
        f"[green]✓[/green] Bill {bill_id} added: {description.strip()} "
        f"{format_money(amount_minor, currency)}, {schedule}"
    )


def bills_command() -> None:
    """List bills with their next due date."""
    snapshot = load_ready_snapshot(get_db_path())
    currency = currency_of(snapshot)
    expenses = snapshot.expenses or ()

    if not expenses:
        console.print("[yellow]No bills yet (use 'safespender add-bill')[/yellow]")
        return

    table = Table(title="Bills")
    table.add_column("ID", style="dim", justify="right")
    table.add_column("Description", style="white")
    table.add_column("Category", style="magenta")
    table.add_column("Amount", justify="right")
    table.add_column("Schedule", style="cyan")
    table.add_column("Next due", style="cyan")

    today = date.today()
    for expense in expenses:
        if expense.recurring:
            schedule = f"monthly, day {expense.day_of_month}"
            if expense.end_date:
                schedule += f" until {expense.end_date.isoformat()}"
        else:
            schedule = f"once, {expense.created_at.isoformat()}"
        due = next_bill_date(expense, today)
        table.add_row(
            str(expense.id),
            expense.description,
            expense.category,
            format_money(expense.amount, currency),
            schedule,
            due.isoformat() if due else "[dim]-[/dim]",
        )

    console.print(table)


def delete_bill_command(bill_id: int) -> None:
    """Delete a bill and all of its future occurrences."""
    db_path = get_db_path()
    require_database(db_path)

    try:
        deleted = delete_expense_definition(bill_id, db_path)
    except sqlite3.Error as e:
        logger.error("Failed to delete bill %s: %s", bill_id, e)
        fail(f"Failed to delete bill: {e}")

    if not deleted:
        fail(f"Bill {bill_id} not found")
    console.print(f"[green]✓[/green] Bill {bill_id} deleted")


def bill_edit_command(
    bill_id: int,
    description: str | None = None,
    amount: str | None = None,
    category: str | None = None,
    day: int | None = None,
    on: str | None = None,
    end_date: str | None = None,
    clear_end_date: bool = False,
) -> None:
    """Change a bill. Every projected occurrence follows the new values."""
    db_path = get_db_path()
    snapshot = load_ready_snapshot(db_path)
    currency = currency_of(snapshot)

    expense = next((e for e in snapshot.expenses or () if e.id == bill_id), None)
    if expense is None:
        fail(f"Bill {bill_id} not found")

    updated, error = apply_bill_changes(
        expense,
        description=description,
        amount=require_money(amount) if amount is not None else None,
        category=category,
        day=day,
        start=require_date(on) if on is not None else None,
        end_date=require_date(end_date) if end_date is not None else None,
        clear_end_date=clear_end_date,
    )
    if error:
        fail(error)

    try:
        found = update_expense_definition(updated, db_path)
    except sqlite3.Error as e:
        logger.error("Failed to update bill %s: %s", bill_id, e)
        fail(f"Failed to update bill: {e}")

    if not found:
        fail(f"Bill {bill_id} not found")
    console.print(
        f"[green]✓[/green] Bill {bill_id} updated: {updated.description} "
        f"{format_money(updated.amount, currency)}"
    )
