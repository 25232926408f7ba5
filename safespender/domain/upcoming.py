"""Pure functions for what is coming up next: bills and income."""

from dataclasses import dataclass
from datetime import date, timedelta

from safespender.dates import add_months, days_in_month, end_of_month
from safespender.domain.models import (
    LOADING,
    ExpenseDefinition,
    Loading,
    Money,
    RecordSnapshot,
    TransactionKind,
)
from safespender.domain.recurrence import expand
from safespender.domain.summary import find_next_income


@dataclass(frozen=True)
class UpcomingBill:
    """Immutable bill due before the next paycheck."""

    expense_id: int
    title: str
    amount: Money
    date: date
    category: str
    recurring: bool


@dataclass(frozen=True)
class UpcomingEvent:
    """Immutable upcoming income or transaction."""

    id: str
    kind: TransactionKind
    title: str
    amount: Money
    date: date
    recurring: bool


def _end_of_next_month(today: date) -> date:
    year, month = add_months(today.year, today.month, 1)
    return date(year, month, days_in_month(year, month))


def next_bill_date(expense: ExpenseDefinition, today: date) -> date | None:
    """Next due date strictly after today, looking no further than next month.

    One-time bills are due on their creation date.
    """
    if not expense.recurring:
        return expense.created_at if expense.created_at > today else None
    upcoming = next(iter(expand(expense, today + timedelta(days=1), _end_of_next_month(today))), None)
    return upcoming.date if upcoming is not None else None


def upcoming_bills(snapshot: RecordSnapshot, today: date) -> list[UpcomingBill] | Loading:
    """Bills due after today and no later than the next paycheck.

    Without a salary schedule the cutoff is the end of the current month.

    Args:
        snapshot: Loaded records.
        today: Current date.

    Returns:
        Bills sorted by due date, or LOADING if the snapshot is incomplete.
    """
    if not snapshot.is_ready:
        return LOADING

    next_income_date, _ = find_next_income(snapshot.salary, today)
    cutoff = next_income_date or end_of_month(today)

    bills: list[UpcomingBill] = []
    for expense in snapshot.expenses or ():
        due = next_bill_date(expense, today)
        if due is not None and today < due <= cutoff:
            bills.append(
                UpcomingBill(
                    expense_id=expense.id,
                    title=expense.description,
                    amount=expense.amount,
                    date=due,
                    category=expense.category,
                    recurring=expense.recurring,
                )
            )

    return sorted(bills, key=lambda bill: bill.date)


def upcoming_events(snapshot: RecordSnapshot, today: date, limit: int = 3) -> list[UpcomingEvent] | Loading:
    """Next few paychecks and future-dated transactions.

    Args:
        snapshot: Loaded records.
        today: Current date.
        limit: Maximum paychecks and maximum transactions to include.

    Returns:
        Up to 2 * limit events sorted by date, or LOADING if the snapshot is
        incomplete.
    """
    if not snapshot.is_ready:
        return LOADING

    events: list[UpcomingEvent] = []

    if snapshot.salary is not None:
        paychecks = expand(snapshot.salary, today + timedelta(days=1), _end_of_next_month(today))
        for paycheck in list(paychecks)[:limit]:
            events.append(
                UpcomingEvent(
                    id=f"salary-{snapshot.salary.id}-{paycheck.date.isoformat()}",
                    kind=TransactionKind.INCOME,
                    title="Salary Payment",
                    amount=paycheck.amount,
                    date=paycheck.date,
                    recurring=True,
                )
            )

    future = sorted((txn for txn in snapshot.transactions or () if txn.date > today), key=lambda txn: txn.date)
    for txn in future[:limit]:
        events.append(
            UpcomingEvent(
                id=str(txn.id),
                kind=txn.kind,
                title=txn.description,
                amount=txn.amount,
                date=txn.date,
                recurring=False,
            )
        )

    return sorted(events, key=lambda event: event.date)
