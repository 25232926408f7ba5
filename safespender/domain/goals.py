"""Pure functions for savings goals and income advances.

This module contains the functional core for goal operations:
- No I/O operations (no database, no console, no files)
- No side effects
- Pure data transformations
- Easy to test

All monetary amounts are in minor units (Money type). A goal's
current_amount is the authoritative balance; savings transactions are a log
of how it got there.
"""

import math
from dataclasses import dataclass, replace
from datetime import date

from safespender.domain.models import ContributionFrequency, Money, SavingsGoal, format_money
from safespender.domain.validation import validate_amount

# Advances are capped at this share of the next paycheck
ADVANCE_PAYCHECK_PERCENT = 50
# and at this share of what the paycheck has left once its obligations are met
ADVANCE_SHARE_PERCENT = 80

_CONTRIBUTION_PERIOD_DAYS = {
    ContributionFrequency.WEEKLY: 7,
    ContributionFrequency.BIWEEKLY: 14,
    ContributionFrequency.MONTHLY: 30,
}


def calculate_contribution(
    amount: Money,
    current_amount: Money,
    available: Money,
    currency: str = "GBP",
) -> tuple[Money, str | None]:
    """Calculate adding free-to-spend money to a goal.

    Args:
        amount: Amount to contribute.
        current_amount: Goal balance before the contribution.
        available: Free-to-spend amount the contribution comes out of.
        currency: Currency code for the error message.

    Returns:
        Tuple of (new_current_amount, error_message). On error the balance
        is unchanged.
    """
    valid, error = validate_amount(amount)
    if not valid:
        return current_amount, error

    if amount > available:
        return (
            current_amount,
            f"Contribution exceeds your available balance (only {format_money(available, currency)} free to spend)",
        )

    return Money(current_amount + amount), None


def calculate_withdrawal(
    amount: Money,
    current_amount: Money,
    currency: str = "GBP",
) -> tuple[Money, str | None]:
    """Calculate taking money back out of a goal.

    Args:
        amount: Amount to withdraw.
        current_amount: Goal balance before the withdrawal.
        currency: Currency code for the error message.

    Returns:
        Tuple of (new_current_amount, error_message). On error the balance
        is unchanged.
    """
    valid, error = validate_amount(amount)
    if not valid:
        return current_amount, error

    if amount > current_amount:
        return (
            current_amount,
            f"Can't withdraw more than saved (only {format_money(current_amount, currency)})",
        )

    return Money(current_amount - amount), None


def calculate_goal_progress(goal: SavingsGoal) -> float:
    """Percentage of the target saved so far (can exceed 100)."""
    if goal.target_amount <= 0:
        return 0.0
    return (goal.current_amount / goal.target_amount) * 100


def total_savings_balance(goals: tuple[SavingsGoal, ...]) -> Money:
    return Money(sum(goal.current_amount for goal in goals))


def recovered_on_delete(goal: SavingsGoal) -> Money:
    """Amount returned to free-to-spend when a goal is deleted."""
    return Money(max(0, goal.current_amount))


@dataclass(frozen=True)
class GoalImpact:
    """How long a goal's recurring contribution needs to reach the target."""

    contributions_left: int
    time_value: int
    time_unit: str


def apply_goal_changes(
    goal: SavingsGoal,
    name: str | None = None,
    target: Money | None = None,
    icon: str | None = None,
    contribution: Money | None = None,
    frequency: ContributionFrequency | None = None,
    clear_contribution: bool = False,
) -> tuple[SavingsGoal, str | None]:
    """Apply edits to a goal. Arguments left as None keep their value.

    The balance is never edited here; it only moves through contributions
    and withdrawals.

    Returns:
        Tuple of (updated_goal, error_message). On error the goal is
        returned unchanged.
    """
    if clear_contribution and (contribution is not None or frequency is not None):
        return goal, "Can't set and clear the contribution at once"

    changes: dict[str, object] = {}
    if name is not None:
        if not name.strip():
            return goal, "Goal name is required"
        changes["name"] = name.strip()
    if icon is not None:
        changes["icon"] = icon
    if target is not None:
        valid, error = validate_amount(target)
        if not valid:
            return goal, error
        changes["target_amount"] = target

    if clear_contribution:
        changes["recurring_contribution"] = None
        changes["contribution_frequency"] = None
    elif contribution is not None:
        valid, error = validate_amount(contribution)
        if not valid:
            return goal, error
        changes["recurring_contribution"] = contribution
        changes["contribution_frequency"] = frequency or goal.contribution_frequency or ContributionFrequency.MONTHLY
    elif frequency is not None:
        if not goal.recurring_contribution:
            return goal, "Set a contribution amount before choosing its frequency"
        changes["contribution_frequency"] = frequency

    updated = replace(goal, **changes)
    if updated == goal:
        return goal, "Nothing to change"
    return updated, None


def calculate_goal_impact(goal: SavingsGoal, withdraw_amount: Money = Money(0)) -> GoalImpact | None:
    """Time left to reach the target after withdrawing from a goal.

    Args:
        goal: The goal, before the withdrawal.
        withdraw_amount: Amount about to be taken out.

    Returns:
        GoalImpact, or None when the goal has no recurring contribution or
        would still be at or above its target.
    """
    contribution = goal.recurring_contribution or 0
    if contribution <= 0:
        return None

    remaining = goal.target_amount - (goal.current_amount - withdraw_amount)
    if remaining <= 0:
        return None

    contributions_left = math.ceil(remaining / contribution)
    if goal.contribution_frequency is ContributionFrequency.WEEKLY:
        return GoalImpact(contributions_left, contributions_left, "weeks")
    if goal.contribution_frequency is ContributionFrequency.BIWEEKLY:
        return GoalImpact(contributions_left, contributions_left * 2, "weeks")
    return GoalImpact(contributions_left, contributions_left, "months")


def calculate_upcoming_savings(
    goals: tuple[SavingsGoal, ...],
    today: date,
    next_income_date: date | None,
) -> Money:
    """Recurring contributions that fall due before the next paycheck.

    Each goal contributes once per whole week, fortnight or 30 days
    between today and the next income.
    """
    if next_income_date is None or next_income_date <= today:
        return Money(0)

    days = (next_income_date - today).days
    total = 0
    for goal in goals:
        contribution = goal.recurring_contribution or 0
        if contribution <= 0:
            continue
        period = _CONTRIBUTION_PERIOD_DAYS[goal.contribution_frequency or ContributionFrequency.MONTHLY]
        total += (days // period) * contribution
    return Money(total)


def calculate_advance_limit(
    next_income_amount: Money,
    pending_bills: Money,
    upcoming_savings: Money,
    outstanding_advances: Money = Money(0),
) -> Money:
    """Most that can be borrowed from the next paycheck.

    The paycheck has to cover the bills and savings due before it arrives
    and any advance not yet repaid. The limit is the lower of half the
    paycheck and 80% of what is left, less advances already taken.
    """
    paycheck_cap = next_income_amount * ADVANCE_PAYCHECK_PERCENT // 100 - outstanding_advances
    available = next_income_amount - pending_bills - upcoming_savings - outstanding_advances
    return Money(max(0, min(paycheck_cap, available * ADVANCE_SHARE_PERCENT // 100)))


def calculate_advance(amount: Money, limit: Money, currency: str = "GBP") -> tuple[Money, str | None]:
    """Check an advance request against the limit.

    Returns:
        Tuple of (advanced_amount, error_message). On error the amount is 0.
    """
    valid, error = validate_amount(amount)
    if not valid:
        return Money(0), error
    if limit <= 0:
        return Money(0), "Your next paycheck is already spoken for, no advance is available"
    if amount > limit:
        return Money(0), f"Advance exceeds the limit (at most {format_money(limit, currency)})"
    return amount, None
