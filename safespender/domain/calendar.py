"""Calendar projection: real transactions merged with projected occurrences.

Salary paychecks, recurring bills and programmed savings contributions are
shown on the calendar as virtual items. They exist only for planning and
cannot be deleted one at a time; changing them means editing the salary
schedule, bill or goal they come from.
"""

from dataclasses import dataclass
from datetime import date, timedelta

from safespender.dates import add_months, days_in_month
from safespender.domain.models import (
    LOADING,
    ContributionPolicy,
    Loading,
    Money,
    Month,
    RecordSnapshot,
    TransactionKind,
)
from safespender.domain.recurrence import OccurrenceSource, expand

VIRTUAL_ID_PREFIXES = tuple(f"{source.value}-" for source in OccurrenceSource)

_VIRTUAL_ITEM_GUIDANCE = {
    OccurrenceSource.SALARY: "Change your salary schedule instead (safespender salary).",
    OccurrenceSource.BILL: "Edit or delete the recurring bill instead (safespender bill-edit, delete-bill).",
    OccurrenceSource.SAVINGS: "Change the savings goal's contribution instead (safespender goal-edit).",
}


class VirtualItemError(ValueError):
    """Raised when deleting a projected calendar item."""

    def __init__(self, item_id: str, source: OccurrenceSource):
        self.item_id = item_id
        self.source = source
        super().__init__(
            f"'{item_id}' is a generated {source.value} entry and cannot be deleted directly. "
            f"{_VIRTUAL_ITEM_GUIDANCE[source]}"
        )


@dataclass(frozen=True)
class CalendarItem:
    """Immutable calendar entry, real or projected."""

    id: str
    kind: TransactionKind
    title: str
    amount: Money
    date: date
    category: str | None = None
    description: str = ""

    @property
    def is_virtual(self) -> bool:
        return is_virtual_id(self.id)

    @property
    def signed_amount(self) -> Money:
        """Income positive, everything else negative."""
        if self.kind is TransactionKind.INCOME:
            return self.amount
        return Money(-self.amount)


@dataclass(frozen=True)
class DaySummary:
    """Immutable view of one calendar day."""

    date: date
    items: list[CalendarItem]
    net_flow: Money
    is_today: bool
    is_past: bool
    is_future: bool


def is_virtual_id(item_id: str) -> bool:
    return item_id.startswith(VIRTUAL_ID_PREFIXES)


def ensure_deletable(item_id: str) -> int:
    """Check that a calendar item id refers to a real transaction.

    Args:
        item_id: Calendar item id.

    Returns:
        The transaction id to delete.

    Raises:
        VirtualItemError: If the id belongs to a projected item.
        ValueError: If the id is not a transaction id at all.
    """
    for source in OccurrenceSource:
        if item_id.startswith(f"{source.value}-"):
            raise VirtualItemError(item_id, source)
    try:
        return int(item_id)
    except ValueError:
        raise ValueError(f"Unknown calendar item '{item_id}'") from None


def calendar_window(month: Month, padding_months: int = 1) -> tuple[date, date]:
    """Display window for a month with whole months of padding either side.

    Args:
        month: Month in YYYY-MM format.
        padding_months: Extra months before and after.

    Returns:
        Tuple of (first_day, last_day), both inclusive.
    """
    year, month_num = int(month[:4]), int(month[5:7])
    start_year, start_month = add_months(year, month_num, -padding_months)
    end_year, end_month = add_months(year, month_num, padding_months)
    return (
        date(start_year, start_month, 1),
        date(end_year, end_month, days_in_month(end_year, end_month)),
    )


def project_calendar(
    snapshot: RecordSnapshot,
    start: date,
    end: date,
    policy: ContributionPolicy = ContributionPolicy.MONTHLY,
) -> list[CalendarItem] | Loading:
    """Collect every real and projected item between start and end.

    Args:
        snapshot: Loaded records.
        start: First day of the window (inclusive).
        end: Last day of the window (inclusive).
        policy: How weekly/biweekly savings goals are projected.

    Returns:
        Items sorted by date (real transactions before projections on the
        same day), or LOADING if the snapshot is incomplete.
    """
    if not snapshot.is_ready:
        return LOADING

    items: list[CalendarItem] = [
        CalendarItem(
            id=str(txn.id),
            kind=txn.kind,
            title=txn.description,
            amount=txn.amount,
            date=txn.date,
            category=txn.category,
            description=txn.description,
        )
        for txn in snapshot.transactions or ()
        if start <= txn.date <= end
    ]

    if snapshot.salary is not None:
        for paycheck in expand(snapshot.salary, start, end):
            items.append(
                CalendarItem(
                    id=f"salary-{snapshot.salary.id}-{paycheck.date.isoformat()}",
                    kind=TransactionKind.INCOME,
                    title="Salary Payment",
                    amount=paycheck.amount,
                    date=paycheck.date,
                    category="salary",
                    description="Salary Payment",
                )
            )

    for expense in snapshot.expenses or ():
        if not expense.recurring:
            continue
        for bill in expand(expense, start, end):
            items.append(
                CalendarItem(
                    id=f"recurring-{expense.id}-{bill.date.isoformat()}",
                    kind=TransactionKind.EXPENSE,
                    title=expense.description,
                    amount=bill.amount,
                    date=bill.date,
                    category=expense.category,
                    description=expense.description,
                )
            )

    for goal in snapshot.goals or ():
        for contribution in expand(goal, start, end, policy):
            items.append(
                CalendarItem(
                    id=f"savings-{goal.id}-{contribution.date.isoformat()}",
                    kind=TransactionKind.SAVINGS,
                    title=f"{goal.icon} {goal.name} Savings",
                    amount=contribution.amount,
                    date=contribution.date,
                    category="savings",
                    description=f"Savings contribution to {goal.name}",
                )
            )

    # sorted() is stable, so insertion order breaks ties
    return sorted(items, key=lambda item: item.date)


def items_for_date(items: list[CalendarItem], day: date | str) -> list[CalendarItem]:
    """Items landing on one calendar day.

    Args:
        items: Projected calendar items.
        day: The day, as a date or a YYYY-MM-DD string.

    Returns:
        Matching items, compared on the YYYY-MM-DD text.
    """
    key = day if isinstance(day, str) else day.isoformat()
    return [item for item in items if item.date.isoformat() == key]


def net_flow(items: list[CalendarItem]) -> Money:
    return Money(sum(item.signed_amount for item in items))


def summarize_days(items: list[CalendarItem], start: date, end: date, today: date) -> list[DaySummary]:
    """Build one DaySummary per day from start to end inclusive."""
    by_day: dict[date, list[CalendarItem]] = {}
    for item in items:
        by_day.setdefault(item.date, []).append(item)

    summaries: list[DaySummary] = []
    day = start
    while day <= end:
        day_items = by_day.get(day, [])
        summaries.append(
            DaySummary(
                date=day,
                items=day_items,
                net_flow=net_flow(day_items),
                is_today=day == today,
                is_past=day < today,
                is_future=day > today,
            )
        )
        day += timedelta(days=1)
    return summaries
