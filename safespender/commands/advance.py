"""Advance command: borrow against the next paycheck."""

import sqlite3

from safespender.commands.common import (
    console,
    currency_of,
    fail,
    get_settings,
    load_ready_snapshot,
    logger,
    require_date,
    require_money,
)
from safespender.domain.goals import calculate_advance, calculate_advance_limit, calculate_upcoming_savings
from safespender.domain.models import ADVANCE_CATEGORY, Loading, Money, TransactionKind, format_money
from safespender.domain.summary import compute_free_to_spend
from safespender.domain.upcoming import upcoming_bills
from safespender.store.queries import create_transaction
from safespender.store.schema import get_db_path


def advance_command(amount: str | None = None, reason: str | None = None, on: str | None = None) -> None:
    """Show the advance limit, or take an advance on the next paycheck.

    The advance counts as income straight away and is paid back out of the
    first paycheck after it.
    """
    settings = get_settings()
    db_path = get_db_path()
    snapshot = load_ready_snapshot(db_path)
    currency = currency_of(snapshot)
    as_of = require_date(on)

    summary = compute_free_to_spend(snapshot, as_of, settings.contribution_policy)
    bills = upcoming_bills(snapshot, as_of)
    if isinstance(summary, Loading) or isinstance(bills, Loading):
        fail("Records are still loading, try again")
    if summary.next_income_date is None:
        fail("No next paycheck to borrow from (use 'safespender salary')")

    pending = Money(sum(bill.amount for bill in bills))
    savings = calculate_upcoming_savings(snapshot.goals or (), as_of, summary.next_income_date)
    limit = calculate_advance_limit(summary.next_income_amount, pending, savings, summary.outstanding_advances)

    if amount is None:
        console.print(
            f"Next paycheck: {format_money(summary.next_income_amount, currency)} "
            f"on {summary.next_income_date.isoformat()}"
        )
        console.print(f"  Bills due before it: [red]-{format_money(pending, currency)}[/red]")
        console.print(f"  Savings due before it: [blue]-{format_money(savings, currency)}[/blue]")
        if summary.outstanding_advances:
            console.print(
                f"  Advances not yet repaid: [red]-{format_money(summary.outstanding_advances, currency)}[/red]"
            )
        console.print(f"[bold]You can advance up to {format_money(limit, currency)}[/bold]")
        return

    advanced, error = calculate_advance(require_money(amount), limit, currency)
    if error:
        fail(error)

    description = (reason or "").strip() or "Income advance"
    try:
        txn_id = create_transaction(
            TransactionKind.INCOME,
            advanced,
            as_of,
            description,
            category=ADVANCE_CATEGORY,
            db_path=db_path,
        )
    except sqlite3.Error as e:
        logger.error("Failed to record advance: %s", e)
        fail(f"Failed to record advance: {e}")

    logger.debug("Advance %s of %s against paycheck on %s", txn_id, advanced, summary.next_income_date)
    console.print(
        f"[green]✓[/green] Advanced {format_money(advanced, currency)} (ID: {txn_id}), "
        f"repaid from your paycheck on {summary.next_income_date.isoformat()}"
    )
