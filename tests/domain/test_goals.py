"""Tests for safespender.domain.goals pure functions."""

from datetime import date

from safespender.domain.goals import (
    GoalImpact,
    apply_goal_changes,
    calculate_advance,
    calculate_advance_limit,
    calculate_contribution,
    calculate_goal_impact,
    calculate_goal_progress,
    calculate_upcoming_savings,
    calculate_withdrawal,
    recovered_on_delete,
    total_savings_balance,
)
from safespender.domain.models import ContributionFrequency, Money, SavingsGoal


def make_goal(current: int, target: int = 100000, goal_id: int = 1) -> SavingsGoal:
    return SavingsGoal(id=goal_id, name="Bike", target_amount=Money(target), current_amount=Money(current))


def saving_goal(
    contribution: int | None,
    frequency: ContributionFrequency | None = ContributionFrequency.MONTHLY,
    current: int = 0,
    target: int = 100000,
) -> SavingsGoal:
    return SavingsGoal(
        id=1,
        name="Bike",
        target_amount=Money(target),
        current_amount=Money(current),
        recurring_contribution=Money(contribution) if contribution is not None else None,
        contribution_frequency=frequency if contribution is not None else None,
    )


class TestCalculateContribution:
    """Tests for calculate_contribution."""

    def test_contribution_within_free_to_spend(self) -> None:
        """Should add to the goal balance."""
        new_amount, error = calculate_contribution(
            amount=Money(5000),  # £50
            current_amount=Money(20000),  # £200
            available=Money(10000),  # £100
        )
        assert new_amount == Money(25000)
        assert error is None

    def test_contribution_of_exactly_available(self) -> None:
        new_amount, error = calculate_contribution(Money(10000), Money(0), Money(10000))
        assert new_amount == Money(10000)
        assert error is None

    def test_contribution_exceeding_available(self) -> None:
        """Should refuse and leave the balance unchanged."""
        new_amount, error = calculate_contribution(Money(15000), Money(20000), Money(10000))
        assert new_amount == Money(20000)
        assert error is not None
        assert "exceeds your available balance" in error
        assert "£100.00" in error

    def test_zero_contribution(self) -> None:
        new_amount, error = calculate_contribution(Money(0), Money(20000), Money(10000))
        assert new_amount == Money(20000)
        assert error == "Amount must be positive"

    def test_over_funding_allowed(self) -> None:
        """Goals may go past their target."""
        new_amount, error = calculate_contribution(Money(5000), Money(100000), Money(5000))
        assert new_amount == Money(105000)
        assert error is None


class TestCalculateWithdrawal:
    """Tests for calculate_withdrawal."""

    def test_partial_withdrawal(self) -> None:
        new_amount, error = calculate_withdrawal(Money(5000), Money(20000))
        assert new_amount == Money(15000)
        assert error is None

    def test_withdraw_everything(self) -> None:
        new_amount, error = calculate_withdrawal(Money(20000), Money(20000))
        assert new_amount == Money(0)
        assert error is None

    def test_withdraw_more_than_saved(self) -> None:
        new_amount, error = calculate_withdrawal(Money(25000), Money(20000), currency="USD")
        assert new_amount == Money(20000)
        assert error == "Can't withdraw more than saved (only $200.00)"

    def test_negative_withdrawal(self) -> None:
        _, error = calculate_withdrawal(Money(-1), Money(20000))
        assert error == "Amount must be positive"


class TestGoalTotals:
    """Tests for progress, totals and deletion recovery."""

    def test_progress_percentage(self) -> None:
        assert calculate_goal_progress(make_goal(25000)) == 25.0

    def test_progress_past_target(self) -> None:
        assert calculate_goal_progress(make_goal(150000)) == 150.0

    def test_progress_zero_target(self) -> None:
        assert calculate_goal_progress(make_goal(5000, target=0)) == 0.0

    def test_total_savings_balance(self) -> None:
        goals = (make_goal(1000, goal_id=1), make_goal(2500, goal_id=2))
        assert total_savings_balance(goals) == Money(3500)

    def test_recovered_on_delete(self) -> None:
        assert recovered_on_delete(make_goal(4200)) == Money(4200)

    def test_nothing_recovered_from_empty_goal(self) -> None:
        assert recovered_on_delete(make_goal(0)) == Money(0)


class TestApplyGoalChanges:
    """Tests for apply_goal_changes."""

    def test_rename_and_retarget(self) -> None:
        updated, error = apply_goal_changes(make_goal(2000), name="  Road bike ", target=Money(150000))

        assert error is None
        assert updated.name == "Road bike"
        assert updated.target_amount == Money(150000)
        assert updated.current_amount == Money(2000)

    def test_nothing_to_change(self) -> None:
        goal = make_goal(2000)

        updated, error = apply_goal_changes(goal)

        assert updated is goal
        assert error == "Nothing to change"

    def test_new_contribution_defaults_to_monthly(self) -> None:
        updated, error = apply_goal_changes(make_goal(0), contribution=Money(2500))

        assert error is None
        assert updated.recurring_contribution == Money(2500)
        assert updated.contribution_frequency is ContributionFrequency.MONTHLY

    def test_contribution_keeps_frequency(self) -> None:
        goal = saving_goal(1000, ContributionFrequency.WEEKLY)

        updated, error = apply_goal_changes(goal, contribution=Money(2500))

        assert error is None
        assert updated.contribution_frequency is ContributionFrequency.WEEKLY

    def test_frequency_only(self) -> None:
        updated, error = apply_goal_changes(saving_goal(1000), frequency=ContributionFrequency.BIWEEKLY)

        assert error is None
        assert updated.recurring_contribution == Money(1000)
        assert updated.contribution_frequency is ContributionFrequency.BIWEEKLY

    def test_frequency_without_contribution(self) -> None:
        goal = make_goal(0)

        updated, error = apply_goal_changes(goal, frequency=ContributionFrequency.WEEKLY)

        assert updated is goal
        assert error is not None

    def test_clear_contribution(self) -> None:
        updated, error = apply_goal_changes(saving_goal(1000), clear_contribution=True)

        assert error is None
        assert updated.recurring_contribution is None
        assert updated.contribution_frequency is None

    def test_set_and_clear_rejected(self) -> None:
        goal = saving_goal(1000)

        updated, error = apply_goal_changes(goal, contribution=Money(500), clear_contribution=True)

        assert updated is goal
        assert error is not None

    def test_invalid_values_rejected(self) -> None:
        goal = make_goal(0)

        assert apply_goal_changes(goal, name="  ") == (goal, "Goal name is required")
        assert apply_goal_changes(goal, target=Money(0)) == (goal, "Amount must be positive")
        assert apply_goal_changes(goal, contribution=Money(0)) == (goal, "Amount must be positive")


class TestGoalImpact:
    """Tests for calculate_goal_impact."""

    def test_weekly(self) -> None:
        goal = saving_goal(1000, ContributionFrequency.WEEKLY, current=6000, target=10000)

        assert calculate_goal_impact(goal, Money(2000)) == GoalImpact(6, 6, "weeks")

    def test_biweekly_counts_fortnights(self) -> None:
        goal = saving_goal(1000, ContributionFrequency.BIWEEKLY, current=6000, target=10000)

        assert calculate_goal_impact(goal, Money(2000)) == GoalImpact(6, 12, "weeks")

    def test_monthly_rounds_up(self) -> None:
        goal = saving_goal(3000, ContributionFrequency.MONTHLY, current=0, target=10000)

        assert calculate_goal_impact(goal) == GoalImpact(4, 4, "months")

    def test_no_contribution(self) -> None:
        assert calculate_goal_impact(make_goal(100), Money(50)) is None

    def test_still_above_target(self) -> None:
        goal = saving_goal(1000, current=15000, target=10000)

        assert calculate_goal_impact(goal, Money(2000)) is None


class TestUpcomingSavings:
    """Tests for calculate_upcoming_savings."""

    def test_contributions_per_whole_period(self) -> None:
        goals = (
            saving_goal(1000, ContributionFrequency.WEEKLY),
            saving_goal(2000, ContributionFrequency.BIWEEKLY),
            saving_goal(5000, ContributionFrequency.MONTHLY),
        )

        # 20 days: two weeks, one fortnight, no whole month
        total = calculate_upcoming_savings(goals, date(2024, 1, 10), date(2024, 1, 30))

        assert total == Money(2 * 1000 + 2000)

    def test_no_next_income(self) -> None:
        goals = (saving_goal(1000, ContributionFrequency.WEEKLY),)

        assert calculate_upcoming_savings(goals, date(2024, 1, 10), None) == Money(0)

    def test_goals_without_contribution_ignored(self) -> None:
        goals = (make_goal(0), saving_goal(None))

        assert calculate_upcoming_savings(goals, date(2024, 1, 1), date(2024, 3, 1)) == Money(0)


class TestAdvance:
    """Tests for calculate_advance_limit and calculate_advance."""

    def test_limit_is_share_of_what_is_left(self) -> None:
        limit = calculate_advance_limit(Money(100000), Money(30000), Money(10000))

        assert limit == Money(48000)

    def test_limit_counts_outstanding_advances(self) -> None:
        limit = calculate_advance_limit(Money(100000), Money(30000), Money(10000), Money(20000))

        assert limit == Money(30000)

    def test_limit_capped_at_half_the_paycheck(self) -> None:
        assert calculate_advance_limit(Money(100000), Money(0), Money(0)) == Money(50000)

    def test_limit_never_negative(self) -> None:
        assert calculate_advance_limit(Money(10000), Money(30000), Money(0)) == Money(0)

    def test_within_limit(self) -> None:
        assert calculate_advance(Money(48000), Money(48000)) == (Money(48000), None)

    def test_over_limit(self) -> None:
        advanced, error = calculate_advance(Money(48001), Money(48000))

        assert advanced == Money(0)
        assert error is not None
        assert "£480.00" in error

    def test_nothing_available(self) -> None:
        advanced, error = calculate_advance(Money(100), Money(0))

        assert advanced == Money(0)
        assert error is not None

    def test_zero_amount(self) -> None:
        assert calculate_advance(Money(0), Money(48000)) == (Money(0), "Amount must be positive")
