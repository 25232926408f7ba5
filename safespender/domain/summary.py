"""Pure functions for the free-to-spend calculation.

This module contains the functional core for the dashboard figures:
- No I/O operations (no database, no console, no files)
- No side effects
- Pure data transformations
- Easy to test

All monetary amounts are in minor units (Money type). The caller supplies
"today" so results depend only on the arguments.
"""

from dataclasses import dataclass
from datetime import date, timedelta

from safespender.dates import add_months, clip_day, days_in_month, end_of_month
from safespender.domain.models import (
    ADVANCE_CATEGORY,
    LOADING,
    ContributionPolicy,
    Loading,
    Money,
    RecordSnapshot,
    SalarySchedule,
    SavingsGoal,
    Transaction,
    TransactionKind,
)
from safespender.domain.recurrence import expand


@dataclass(frozen=True)
class FreeToSpendSummary:
    """Immutable headline figures as of one day."""

    total_income: Money
    reserved_for_bills: Money
    assigned_to_savings: Money
    free_to_spend: Money
    raw_free_to_spend: Money
    current_balance: Money
    last_income_date: date | None
    next_income_date: date | None
    next_income_amount: Money
    outstanding_advances: Money = Money(0)

    @property
    def is_over_budget(self) -> bool:
        return self.raw_free_to_spend < 0


def _is_advance(txn: Transaction) -> bool:
    return txn.kind is TransactionKind.INCOME and txn.category == ADVANCE_CATEGORY


def mean_paycheck(salary: SalarySchedule) -> Money:
    """Average of the configured paycheck amounts, rounded to a minor unit."""
    if not salary.paycheck_amounts:
        return Money(0)
    return Money(round(sum(salary.paycheck_amounts) / len(salary.paycheck_amounts)))


def calculate_income_to_date(
    transactions: tuple[Transaction, ...],
    salary: SalarySchedule | None,
    start_date: date,
    today: date,
) -> tuple[Money, date | None]:
    """Sum income received between the profile start date and today.

    Args:
        transactions: All transactions.
        salary: Salary schedule, or None if not configured.
        start_date: Profile start date; nothing earlier counts.
        today: Current date (inclusive).

    Returns:
        Tuple of (total_income, last_income_date). The date is None when
        nothing has been received yet. Transfers (goal withdrawals, deleted
        goals, advances) add to the total but never set the date. Advances
        taken before the last income have been paid back and drop out.
    """
    total = 0
    income_dates: list[date] = []

    for txn in transactions:
        if txn.kind is TransactionKind.INCOME and start_date <= txn.date <= today:
            total += txn.amount
            if not txn.is_transfer:
                income_dates.append(txn.date)

    if salary is not None:
        for paycheck in expand(salary, start_date, today):
            total += paycheck.amount
            income_dates.append(paycheck.date)

    last_income_date = max(income_dates, default=None)
    if last_income_date is not None:
        # An advance is paid back out of the first paycheck after it
        total -= sum(
            txn.amount
            for txn in transactions
            if _is_advance(txn) and start_date <= txn.date < last_income_date
        )

    return Money(total), last_income_date


def calculate_reserved_for_bills(
    snapshot: RecordSnapshot,
    last_income_date: date | None,
    today: date,
) -> Money:
    """Sum bills that fell due after the last income, up to and including today.

    Args:
        snapshot: Loaded records.
        last_income_date: Most recent income date, or None.
        today: Current date.

    Returns:
        Reserved amount; zero when no income has been received.
    """
    if last_income_date is None:
        return Money(0)

    reserved = sum(
        txn.amount
        for txn in snapshot.transactions or ()
        if txn.kind is TransactionKind.EXPENSE and last_income_date < txn.date <= today
    )

    window_start = last_income_date + timedelta(days=1)
    for expense in snapshot.expenses or ():
        if expense.recurring:
            reserved += expand(expense, window_start, today).total()

    return Money(reserved)


def find_next_income(salary: SalarySchedule | None, today: date) -> tuple[date | None, Money]:
    """Find the next paycheck strictly after today.

    The rest of the current month is searched first, then next month. When
    no slot carries a usable amount the date still comes from the pay days
    and the amount falls back to the mean paycheck.

    Args:
        salary: Salary schedule, or None if not configured.
        today: Current date.

    Returns:
        Tuple of (next_income_date, next_income_amount); (None, 0) without
        a schedule or pay days.
    """
    if salary is None:
        return None, Money(0)

    next_year, next_month = add_months(today.year, today.month, 1)
    horizon = date(next_year, next_month, days_in_month(next_year, next_month))
    upcoming = next(iter(expand(salary, today + timedelta(days=1), horizon)), None)
    if upcoming is not None:
        return upcoming.date, upcoming.amount

    pay_days = sorted(day for day in salary.pay_days if day >= 1)
    if not pay_days:
        return None, Money(0)

    for day in pay_days:
        candidate = clip_day(today.year, today.month, day)
        if candidate > today:
            return candidate, mean_paycheck(salary)
    return clip_day(next_year, next_month, pay_days[0]), mean_paycheck(salary)


def calculate_assigned_to_savings(
    transactions: tuple[Transaction, ...],
    goals: tuple[SavingsGoal, ...],
    today: date,
    last_income_date: date | None,
    next_income_date: date | None,
    policy: ContributionPolicy = ContributionPolicy.MONTHLY,
) -> Money:
    """Sum savings set aside for the current pay period.

    The period is [last_income_date, next_income_date); with no next income
    it is open-ended. Logged savings transactions in the period count, plus
    each goal's programmed contribution when this month's 16th is inside it.

    Args:
        transactions: All transactions.
        goals: All savings goals.
        today: Current date; selects the month whose 16th is checked.
        last_income_date: Start of the period, or None.
        next_income_date: End of the period (exclusive), or None.
        policy: How weekly/biweekly goals are projected.

    Returns:
        Assigned amount; zero when no income has been received.
    """
    if last_income_date is None:
        return Money(0)

    def in_period(day: date) -> bool:
        return day >= last_income_date and (next_income_date is None or day < next_income_date)

    assigned = sum(
        txn.amount for txn in transactions if txn.kind is TransactionKind.SAVINGS and in_period(txn.date)
    )

    month_start = today.replace(day=1)
    month_end = end_of_month(today)
    for goal in goals:
        assigned += sum(
            contribution.amount
            for contribution in expand(goal, month_start, month_end, policy)
            if in_period(contribution.date)
        )

    return Money(assigned)


def calculate_current_balance(
    transactions: tuple[Transaction, ...],
    total_income: Money,
    start_date: date,
    today: date,
) -> Money:
    """Income to date minus every expense transaction to date.

    Savings are not subtracted.
    """
    spent = sum(
        txn.amount
        for txn in transactions
        if txn.kind is TransactionKind.EXPENSE and start_date <= txn.date <= today
    )
    return Money(total_income - spent)


def calculate_outstanding_advances(
    transactions: tuple[Transaction, ...],
    start_date: date,
    last_income_date: date | None,
    today: date,
) -> Money:
    """Advances taken but not yet paid back by a later paycheck."""
    return Money(
        sum(
            txn.amount
            for txn in transactions
            if _is_advance(txn)
            and start_date <= txn.date <= today
            and (last_income_date is None or txn.date >= last_income_date)
        )
    )


def compute_free_to_spend(
    snapshot: RecordSnapshot,
    today: date | None = None,
    policy: ContributionPolicy = ContributionPolicy.MONTHLY,
) -> FreeToSpendSummary | Loading:
    """Compute the dashboard figures.

    Args:
        snapshot: Loaded records.
        today: Current date. Defaults to the system date.
        policy: How weekly/biweekly goals are projected.

    Returns:
        FreeToSpendSummary, or LOADING if any required part of the snapshot
        is missing.
    """
    transactions, goals, profile = snapshot.transactions, snapshot.goals, snapshot.profile
    if not snapshot.is_ready or transactions is None or goals is None or profile is None:
        return LOADING

    if today is None:
        today = date.today()
    start_date = profile.start_date

    total_income, last_income_date = calculate_income_to_date(transactions, snapshot.salary, start_date, today)
    reserved = calculate_reserved_for_bills(snapshot, last_income_date, today)
    next_income_date, next_income_amount = find_next_income(snapshot.salary, today)
    assigned = calculate_assigned_to_savings(
        transactions, goals, today, last_income_date, next_income_date, policy
    )
    current_balance = calculate_current_balance(transactions, total_income, start_date, today)
    outstanding = calculate_outstanding_advances(transactions, start_date, last_income_date, today)

    raw_free = Money(total_income - reserved - assigned)

    return FreeToSpendSummary(
        total_income=total_income,
        reserved_for_bills=reserved,
        assigned_to_savings=assigned,
        free_to_spend=Money(max(0, raw_free)),
        raw_free_to_spend=raw_free,
        current_balance=current_balance,
        last_income_date=last_income_date,
        next_income_date=next_income_date,
        next_income_amount=next_income_amount,
        outstanding_advances=outstanding,
    )
