"""Recurrence expansion: turn recurring definitions into dated occurrences.

This module contains the functional core for projecting salary schedules,
recurring bills and programmed savings contributions onto the calendar:
- No I/O operations
- No side effects
- Windows are inclusive on both ends

All monetary amounts are in minor units (Money type).
"""

from collections.abc import Iterator
from dataclasses import dataclass
from datetime import date
from enum import Enum

from safespender.dates import clip_bill_day, clip_day, iter_months
from safespender.domain.models import (
    ContributionFrequency,
    ContributionPolicy,
    ExpenseDefinition,
    Money,
    SalarySchedule,
    SavingsGoal,
)

# Programmed savings contributions always land on this day of the month.
SAVINGS_CONTRIBUTION_DAY = 16

Definition = SalarySchedule | ExpenseDefinition | SavingsGoal


class OccurrenceSource(str, Enum):
    """What produced an occurrence. The value doubles as its calendar id prefix."""

    SALARY = "salary"
    BILL = "recurring"
    SAVINGS = "savings"


@dataclass(frozen=True)
class Occurrence:
    """One concrete, dated instance of a recurring definition."""

    date: date
    amount: Money
    source: OccurrenceSource
    source_id: int


@dataclass(frozen=True)
class Expansion:
    """Occurrences of one definition within [start, end].

    Iterating walks the window afresh each time, so the same expansion can be
    consumed any number of times and re-expanding over another window never
    affects this one.
    """

    definition: Definition
    start: date
    end: date
    policy: ContributionPolicy = ContributionPolicy.MONTHLY

    def __iter__(self) -> Iterator[Occurrence]:
        if self.start > self.end:
            return iter(())
        if isinstance(self.definition, SalarySchedule):
            return _salary_occurrences(self.definition, self.start, self.end)
        if isinstance(self.definition, ExpenseDefinition):
            return _bill_occurrences(self.definition, self.start, self.end)
        return _contribution_occurrences(self.definition, self.start, self.end, self.policy)

    def total(self) -> Money:
        return Money(sum(occurrence.amount for occurrence in self))

    def dates(self) -> list[date]:
        return [occurrence.date for occurrence in self]


def expand(
    definition: Definition,
    start: date,
    end: date,
    policy: ContributionPolicy = ContributionPolicy.MONTHLY,
) -> Expansion:
    """Expand a salary schedule, bill or savings goal over a date window.

    Args:
        definition: The recurring definition to project.
        start: First day of the window (inclusive).
        end: Last day of the window (inclusive).
        policy: How weekly/biweekly savings goals are projected.

    Returns:
        A restartable Expansion; an empty one when start is after end.
    """
    return Expansion(definition=definition, start=start, end=end, policy=policy)


def _salary_occurrences(schedule: SalarySchedule, start: date, end: date) -> Iterator[Occurrence]:
    # zip() pairs pay days with amounts and drops the tail of the longer list
    slots = list(zip(schedule.pay_days, schedule.paycheck_amounts))
    if not slots:
        return

    for year, month in iter_months(start, end):
        by_date: dict[date, int] = {}
        for day, amount in slots:
            if amount <= 0 or day < 1:
                continue
            pay_date = clip_day(year, month, day)
            if start <= pay_date <= end:
                # Slots clipped onto the same day (30th and 31st in April) pay out together
                by_date[pay_date] = by_date.get(pay_date, 0) + amount

        for pay_date in sorted(by_date):
            yield Occurrence(
                date=pay_date,
                amount=Money(by_date[pay_date]),
                source=OccurrenceSource.SALARY,
                source_id=schedule.id,
            )


def _bill_occurrences(expense: ExpenseDefinition, start: date, end: date) -> Iterator[Occurrence]:
    if not expense.recurring:
        if start <= expense.created_at <= end:
            yield Occurrence(
                date=expense.created_at,
                amount=expense.amount,
                source=OccurrenceSource.BILL,
                source_id=expense.id,
            )
        return

    if expense.day_of_month is None or expense.day_of_month < 1:
        return

    for year, month in iter_months(start, end):
        due = clip_bill_day(year, month, expense.day_of_month)
        if expense.end_date is not None and due > expense.end_date:
            return
        if due < expense.created_at:
            continue
        if start <= due <= end:
            yield Occurrence(
                date=due,
                amount=expense.amount,
                source=OccurrenceSource.BILL,
                source_id=expense.id,
            )


def _contribution_occurrences(
    goal: SavingsGoal, start: date, end: date, policy: ContributionPolicy
) -> Iterator[Occurrence]:
    amount = goal.recurring_contribution or 0
    if amount <= 0:
        return

    non_monthly = goal.contribution_frequency in (ContributionFrequency.WEEKLY, ContributionFrequency.BIWEEKLY)
    if non_monthly and policy is ContributionPolicy.EXCLUDE:
        return

    for year, month in iter_months(start, end):
        due = clip_day(year, month, SAVINGS_CONTRIBUTION_DAY)
        if start <= due <= end:
            yield Occurrence(
                date=due,
                amount=Money(amount),
                source=OccurrenceSource.SAVINGS,
                source_id=goal.id,
            )
            if non_monthly and policy is ContributionPolicy.ONCE_PER_WINDOW:
                return
