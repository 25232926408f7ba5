"""Commands for configuring the salary schedule."""

import sqlite3

from rich.table import Table

from safespender.commands.common import (
    console,
    currency_of,
    fail,
    load_ready_snapshot,
    logger,
    require_database,
    require_money,
)
from safespender.domain.models import SalarySchedule, ScheduleType, format_money
from safespender.domain.summary import mean_paycheck
from safespender.domain.validation import validate_schedule
from safespender.store.queries import clear_salary_schedule, set_salary_schedule
from safespender.store.schema import get_db_path


def salary_command(
    schedule: str | None = None,
    pay_days: list[int] | None = None,
    paychecks: list[str] | None = None,
) -> None:
    """Show the salary schedule, or replace it when pay days are given."""
    db_path = get_db_path()
    snapshot = load_ready_snapshot(db_path)
    currency = currency_of(snapshot)

    if not pay_days and not paychecks:
        _show_schedule(snapshot.salary, currency)
        return

    try:
        schedule_type = ScheduleType((schedule or ScheduleType.MONTHLY.value).lower())
    except ValueError:
        fail(f"Unknown schedule '{schedule}' (choose from {', '.join(s.value for s in ScheduleType)})")

    days = list(pay_days or [])
    amounts = [require_money(amount) for amount in paychecks or []]
    valid, error = validate_schedule(days, amounts)
    if not valid:
        fail(error or "Invalid salary schedule")

    # Keep slots ordered by day so positions stay meaningful
    slots = sorted(zip(days, amounts))
    try:
        set_salary_schedule(schedule_type, [day for day, _ in slots], [amount for _, amount in slots], db_path)
    except sqlite3.Error as e:
        logger.error("Failed to save salary schedule: %s", e)
        fail(f"Failed to save salary: {e}")

    console.print(f"[green]✓[/green] Salary schedule saved ({schedule_type.value})")
    for day, amount in slots:
        console.print(f"  Day {day}: {format_money(amount, currency)}")


def _show_schedule(salary: SalarySchedule | None, currency: str) -> None:
    if salary is None:
        console.print("[yellow]No salary schedule configured[/yellow]")
        console.print("[dim]Set one with: safespender salary --day 15 --paycheck 1000[/dim]")
        return

    table = Table(title=f"Salary ({salary.schedule_type.value})")
    table.add_column("Pay day", style="cyan", justify="right")
    table.add_column("Paycheck", justify="right")
    for day, amount in zip(salary.pay_days, salary.paycheck_amounts):
        table.add_row(str(day), f"[green]{format_money(amount, currency)}[/green]")
    console.print(table)
    console.print(f"[dim]Average paycheck: {format_money(mean_paycheck(salary), currency)}[/dim]")


def salary_clear_command() -> None:
    """Remove the salary schedule."""
    db_path = get_db_path()
    require_database(db_path)

    try:
        removed = clear_salary_schedule(db_path)
    except sqlite3.Error as e:
        logger.error("Failed to clear salary schedule: %s", e)
        fail(f"Failed to clear salary: {e}")

    if removed:
        console.print("[green]✓[/green] Salary schedule removed")
    else:
        console.print("[yellow]No salary schedule to remove[/yellow]")
