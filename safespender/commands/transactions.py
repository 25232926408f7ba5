"""Commands for recording one-off income and expenses."""

import sqlite3

from safespender.commands.common import console, fail, logger, require_database, require_date, require_money
from safespender.domain.models import TRANSFER_CATEGORIES, TransactionKind, format_money
from safespender.domain.validation import validate_amount
from safespender.store.queries import create_transaction, get_financial_profile
from safespender.store.schema import get_db_path


def _record(
    kind: TransactionKind,
    amount_str: str,
    description: str,
    on: str | None,
    category: str | None,
    reserved: bool = False,
) -> None:
    db_path = get_db_path()
    require_database(db_path)

    amount = require_money(amount_str)
    valid, error = validate_amount(amount)
    if not valid:
        fail(error or "Invalid amount")
    if not description.strip():
        fail("Description is required")
    if category in TRANSFER_CATEGORIES:
        fail(f"Category '{category}' is reserved for goal and advance movements")
    txn_date = require_date(on)

    try:
        profile = get_financial_profile(db_path)
        txn_id = create_transaction(
            kind,
            amount,
            txn_date,
            description.strip(),
            category=category,
            reserved=reserved,
            db_path=db_path,
        )
    except sqlite3.Error as e:
        logger.error("Failed to add %s: %s", kind.value, e)
        fail(f"Failed to add {kind.value}: {e}")

    currency = profile.base_currency if profile else "GBP"
    console.print(f"[green]✓[/green] {kind.value.capitalize()} recorded (ID: {txn_id}):")
    console.print(f"  Date: {txn_date.isoformat()}")
    console.print(f"  Description: {description.strip()}")
    console.print(f"  Amount: {format_money(amount, currency)}")
    if category:
        console.print(f"  Category: {category}")
    if profile and txn_date < profile.start_date:
        console.print(
            f"[yellow]Note: dated before your start date ({profile.start_date.isoformat()}), "
            "so it won't count toward free to spend[/yellow]"
        )


def add_income_command(amount: str, description: str, on: str | None = None, category: str | None = None) -> None:
    """Record one-off income."""
    _record(TransactionKind.INCOME, amount, description, on, category)


def add_expense_command(
    amount: str,
    description: str,
    on: str | None = None,
    category: str | None = None,
    reserved: bool = False,
) -> None:
    """Record a one-off expense."""
    _record(TransactionKind.EXPENSE, amount, description, on, category or "other", reserved)
