"""Domain types and records for safespender.

These NewTypes provide semantic clarity and help with type checking:
- Money: Amount in minor units (pence/cents)
- Month: Month in YYYY-MM format

The record dataclasses mirror the persisted rows. They are immutable; the
store hands out fresh instances on every read.
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import NewType

# Money amounts are stored as minor units to avoid floating point errors
Money = NewType("Money", int)

# Month is always in YYYY-MM format (e.g., "2025-01")
Month = NewType("Month", str)


# Income transactions in these categories move money the user already had
# (back out of a goal, or ahead of the next paycheck). They count as income
# but never start a new pay period.
WITHDRAWAL_CATEGORY = "savings-withdrawal"
GOAL_DELETION_CATEGORY = "goal-deletion"
ADVANCE_CATEGORY = "advance"
TRANSFER_CATEGORIES = frozenset({WITHDRAWAL_CATEGORY, GOAL_DELETION_CATEGORY, ADVANCE_CATEGORY})


class TransactionKind(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"
    SAVINGS = "savings"


class ScheduleType(str, Enum):
    MONTHLY = "monthly"
    BIWEEKLY = "biweekly"
    YEARLY = "yearly"


class ContributionFrequency(str, Enum):
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"


class ContributionPolicy(str, Enum):
    """How weekly and biweekly savings goals are projected onto the calendar."""

    MONTHLY = "monthly"
    ONCE_PER_WINDOW = "once-per-window"
    EXCLUDE = "exclude"


@dataclass(frozen=True)
class Transaction:
    """A real, persisted income/expense/savings event."""

    id: int
    kind: TransactionKind
    amount: Money
    date: date
    description: str
    category: str | None = None
    goal_id: int | None = None
    reserved: bool = False

    @property
    def is_transfer(self) -> bool:
        return self.category in TRANSFER_CATEGORIES


@dataclass(frozen=True)
class ExpenseDefinition:
    """A one-time or monthly-recurring bill."""

    id: int
    description: str
    category: str
    amount: Money
    recurring: bool
    created_at: date
    day_of_month: int | None = None
    end_date: date | None = None


@dataclass(frozen=True)
class SavingsGoal:
    id: int
    name: str
    target_amount: Money
    current_amount: Money
    icon: str = "💰"
    recurring_contribution: Money | None = None
    contribution_frequency: ContributionFrequency | None = None


@dataclass(frozen=True)
class SalarySchedule:
    """Pay days and paycheck amounts, matched by position."""

    id: int
    schedule_type: ScheduleType
    pay_days: tuple[int, ...]
    paycheck_amounts: tuple[Money, ...]


@dataclass(frozen=True)
class FinancialProfile:
    base_currency: str
    start_date: date
    has_completed_onboarding: bool = False
    has_completed_feature_tour: bool = False


@dataclass(frozen=True)
class RecordSnapshot:
    """Everything the calculations read, as loaded from the store.

    A part left as None has not been loaded yet. ``salary`` is the exception:
    None there means no schedule is configured.
    """

    transactions: tuple[Transaction, ...] | None = None
    expenses: tuple[ExpenseDefinition, ...] | None = None
    goals: tuple[SavingsGoal, ...] | None = None
    profile: FinancialProfile | None = None
    salary: SalarySchedule | None = field(default=None)

    @property
    def is_ready(self) -> bool:
        return (
            self.transactions is not None
            and self.expenses is not None
            and self.goals is not None
            and self.profile is not None
        )


@dataclass(frozen=True)
class Loading:
    """Returned in place of results while a snapshot is incomplete."""


LOADING = Loading()


CURRENCY_SYMBOLS = {
    "GBP": "£",
    "USD": "$",
    "EUR": "€",
    "CAD": "$",
    "AUD": "$",
    "JPY": "¥",
    "INR": "₹",
}


def format_money(amount: Money | int, currency: str = "GBP") -> str:
    """Format minor units for display, e.g. 123456 -> "£1,234.56".

    Args:
        amount: Amount in minor units.
        currency: ISO currency code. Unknown codes are used as a prefix.

    Returns:
        Display string with a leading minus sign for negative amounts.
    """
    symbol = CURRENCY_SYMBOLS.get(currency.upper(), f"{currency.upper()} ")
    sign = "-" if amount < 0 else ""
    return f"{sign}{symbol}{abs(amount) / 100:,.2f}"
