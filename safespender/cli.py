"""CLI entry point for safespender."""

import typer

from safespender.commands.admin import backup_command, init_command, list_command
from safespender.commands.advance import advance_command
from safespender.commands.bills import add_bill_command, bill_edit_command, bills_command, delete_bill_command
from safespender.commands.calendar import calendar_command, delete_item_command
from safespender.commands.common import get_settings
from safespender.commands.goals import (
    contribute_command,
    goal_add_command,
    goal_delete_command,
    goal_edit_command,
    goals_command,
    withdraw_command,
)
from safespender.commands.salary import salary_clear_command, salary_command
from safespender.commands.summary import summary_command, upcoming_command
from safespender.commands.transactions import add_expense_command, add_income_command
from safespender.logger import configure_logging

app = typer.Typer(
    name="safespender",
    help="Safe to Spend - know how much of your money is free to spend",
    add_completion=False,
)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging on stderr"),
) -> None:
    """Safe to Spend - know how much of your money is free to spend."""
    configure_logging("DEBUG" if verbose else get_settings().log_level)


@app.command(name="backup")
def backup(
    output_dir: str = typer.Option(None, "--output", "-o", help="Backup directory (default: data dir/backups)"),
) -> None:
    """Backup your database and configuration files."""
    backup_command(output_dir)


@app.command(name="init")
def init(
    start_date: str = typer.Option(None, "--start-date", help="Track money from this date (default: today)"),
    currency: str = typer.Option(None, "--currency", help="Base currency code (default: from config, else GBP)"),
    force: bool = typer.Option(False, "--force", "-f", help="Replace the existing profile and config"),
) -> None:
    """Initialize the database, config and your financial profile."""
    init_command(start_date, currency, force)


@app.command()
def summary(
    today: str = typer.Option(None, "--today", help="Calculate as of this date (default: today)"),
) -> None:
    """Show how much you are free to spend."""
    summary_command(today)


@app.command()
def upcoming(
    today: str = typer.Option(None, "--today", help="Look ahead from this date (default: today)"),
    limit: int = typer.Option(3, "--limit", help="Paychecks and transactions to show"),
) -> None:
    """Show bills due before your next paycheck and what's coming up."""
    upcoming_command(today, limit)


@app.command(name="list")
def list_transactions(
    limit: int = typer.Option(50, help="Maximum transactions to show"),
    all: bool = typer.Option(False, "--all", "-a", help="Show all your transactions"),
) -> None:
    """List your transactions."""
    list_command(limit, all)


@app.command(name="add-income")
def add_income(
    amount: str,
    description: str,
    on: str = typer.Option(None, "--date", help="Date received (default: today)"),
    category: str = typer.Option(None, "--category", help="Category name"),
) -> None:
    """Record one-off income."""
    add_income_command(amount, description, on, category)


@app.command(name="add-expense")
def add_expense(
    amount: str,
    description: str,
    on: str = typer.Option(None, "--date", help="Date spent (default: today)"),
    category: str = typer.Option(None, "--category", help="Category name (default: other)"),
    reserved: bool = typer.Option(False, "--reserved", help="Mark as money already set aside"),
) -> None:
    """Record a one-off expense."""
    add_expense_command(amount, description, on, category, reserved)


@app.command(name="add-bill")
def add_bill(
    description: str,
    amount: str,
    category: str = typer.Option("bills", "--category", help="Category name"),
    day: int = typer.Option(None, "--day", help="Day of month for a monthly bill"),
    on: str = typer.Option(None, "--date", help="Due date of a one-time bill, or start of a monthly one"),
    end_date: str = typer.Option(None, "--end-date", help="Last date a monthly bill is due"),
) -> None:
    """Add a monthly (--day) or one-time (--date) bill."""
    add_bill_command(description, amount, category, day, on, end_date)


@app.command()
def bills() -> None:
    """List your bills and when they are next due."""
    bills_command()


@app.command(name="bill-edit")
def bill_edit(
    bill_id: int,
    description: str = typer.Option(None, "--description", help="New description"),
    amount: str = typer.Option(None, "--amount", help="New amount"),
    category: str = typer.Option(None, "--category", help="New category"),
    day: int = typer.Option(None, "--day", help="New day of month (monthly bills)"),
    on: str = typer.Option(None, "--date", help="New due date of a one-time bill, or start of a monthly one"),
    end_date: str = typer.Option(None, "--end-date", help="New last date a monthly bill is due"),
    no_end_date: bool = typer.Option(False, "--no-end-date", help="Keep a monthly bill going indefinitely"),
) -> None:
    """Change a bill, including every projected occurrence."""
    bill_edit_command(bill_id, description, amount, category, day, on, end_date, no_end_date)


@app.command(name="delete-bill")
def delete_bill(bill_id: int) -> None:
    """Delete a bill."""
    delete_bill_command(bill_id)


@app.command()
def salary(
    schedule: str = typer.Option(None, "--schedule", help="monthly, biweekly or yearly"),
    pay_days: list[int] = typer.Option(None, "--day", help="Pay day of the month (repeat for each paycheck)"),
    paychecks: list[str] = typer.Option(None, "--paycheck", help="Paycheck amount (one per --day)"),
) -> None:
    """Show or set your salary schedule."""
    salary_command(schedule, pay_days, paychecks)


@app.command(name="salary-clear")
def salary_clear() -> None:
    """Remove your salary schedule."""
    salary_clear_command()


@app.command(name="goal-add")
def goal_add(
    name: str,
    target: str,
    icon: str = typer.Option("💰", "--icon", help="Icon shown next to the goal"),
    contribution: str = typer.Option(None, "--contribution", help="Recurring contribution amount"),
    frequency: str = typer.Option(None, "--frequency", help="weekly, biweekly or monthly"),
) -> None:
    """Create a savings goal."""
    goal_add_command(name, target, icon, contribution, frequency)


@app.command(name="goal-edit")
def goal_edit(
    goal_id: int,
    name: str = typer.Option(None, "--name", help="New name"),
    target: str = typer.Option(None, "--target", help="New target amount"),
    icon: str = typer.Option(None, "--icon", help="New icon"),
    contribution: str = typer.Option(None, "--contribution", help="New recurring contribution amount"),
    frequency: str = typer.Option(None, "--frequency", help="weekly, biweekly or monthly"),
    no_contribution: bool = typer.Option(False, "--no-contribution", help="Stop the recurring contribution"),
) -> None:
    """Change a savings goal, including its recurring contribution."""
    goal_edit_command(goal_id, name, target, icon, contribution, frequency, no_contribution)


@app.command()
def goals() -> None:
    """List your savings goals."""
    goals_command()


@app.command()
def contribute(
    goal_id: int,
    amount: str,
    on: str = typer.Option(None, "--date", help="Date of the contribution (default: today)"),
) -> None:
    """Move free-to-spend money into a savings goal."""
    contribute_command(goal_id, amount, on)


@app.command()
def withdraw(
    goal_id: int,
    amount: str,
    on: str = typer.Option(None, "--date", help="Date of the withdrawal (default: today)"),
) -> None:
    """Take money back out of a savings goal."""
    withdraw_command(goal_id, amount, on)


@app.command(name="goal-delete")
def goal_delete(
    goal_id: int,
    yes: bool = typer.Option(False, "--yes", "-y", help="Don't ask for confirmation"),
) -> None:
    """Delete a savings goal, returning its balance to free-to-spend."""
    goal_delete_command(goal_id, yes)


@app.command()
def advance(
    amount: str = typer.Argument(None, help="Amount to borrow (omit to see the limit)"),
    reason: str = typer.Option(None, "--reason", help="What the advance is for"),
    on: str = typer.Option(None, "--date", help="Date of the advance (default: today)"),
) -> None:
    """Borrow against your next paycheck."""
    advance_command(amount, reason, on)


@app.command()
def calendar(
    month: str = typer.Option(None, "--month", help="Month to show (YYYY-MM)"),
    day: str = typer.Option(None, "--day", help="Show one day in detail"),
) -> None:
    """Show a month of transactions, paychecks, bills and savings."""
    calendar_command(month, day)


@app.command(name="delete-item")
def delete_item(item_id: str) -> None:
    """Delete a transaction by its calendar id."""
    delete_item_command(item_id)


if __name__ == "__main__":
    app()
