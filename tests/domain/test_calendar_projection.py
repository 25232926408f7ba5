"""Tests for safespender.domain.calendar pure functions."""

from datetime import date

import pytest

from safespender.domain.calendar import (
    CalendarItem,
    VirtualItemError,
    calendar_window,
    ensure_deletable,
    is_virtual_id,
    items_for_date,
    project_calendar,
    summarize_days,
)
from safespender.domain.models import (
    LOADING,
    ExpenseDefinition,
    FinancialProfile,
    Money,
    Month,
    RecordSnapshot,
    SalarySchedule,
    SavingsGoal,
    ScheduleType,
    Transaction,
    TransactionKind,
)
from safespender.domain.recurrence import OccurrenceSource

JAN_START = date(2024, 1, 1)
JAN_END = date(2024, 1, 31)


def make_snapshot(**overrides) -> RecordSnapshot:
    parts = {
        "transactions": (),
        "expenses": (),
        "goals": (),
        "profile": FinancialProfile(base_currency="GBP", start_date=JAN_START),
        "salary": None,
    }
    parts.update(overrides)
    return RecordSnapshot(**parts)


SALARY = SalarySchedule(
    id=4,
    schedule_type=ScheduleType.MONTHLY,
    pay_days=(15,),
    paycheck_amounts=(Money(100000),),
)

RENT = ExpenseDefinition(
    id=9,
    description="Rent",
    category="housing",
    amount=Money(80000),
    recurring=True,
    created_at=JAN_START,
    day_of_month=1,
)

HOLIDAY = SavingsGoal(
    id=2,
    name="Holiday",
    target_amount=Money(100000),
    current_amount=Money(0),
    icon="🏖",
    recurring_contribution=Money(5000),
)


class TestProjectCalendar:
    """Tests for project_calendar."""

    def test_merges_real_and_virtual_items(self) -> None:
        coffee = Transaction(
            id=12,
            kind=TransactionKind.EXPENSE,
            amount=Money(350),
            date=date(2024, 1, 15),
            description="Coffee",
        )
        records = make_snapshot(transactions=(coffee,), expenses=(RENT,), goals=(HOLIDAY,), salary=SALARY)

        items = project_calendar(records, JAN_START, JAN_END)

        assert isinstance(items, list)
        assert [item.id for item in items] == [
            "recurring-9-2024-01-01",
            "12",
            "salary-4-2024-01-15",
            "savings-2-2024-01-16",
        ]

    def test_virtual_item_fields(self) -> None:
        records = make_snapshot(goals=(HOLIDAY,), salary=SALARY)

        items = project_calendar(records, JAN_START, JAN_END)

        assert isinstance(items, list)
        paycheck, contribution = items
        assert paycheck.kind is TransactionKind.INCOME
        assert paycheck.title == "Salary Payment"
        assert paycheck.amount == Money(100000)
        assert contribution.kind is TransactionKind.SAVINGS
        assert contribution.title == "🏖 Holiday Savings"
        assert contribution.is_virtual

    def test_transactions_outside_window_skipped(self) -> None:
        old = Transaction(
            id=1,
            kind=TransactionKind.INCOME,
            amount=Money(100),
            date=date(2023, 12, 31),
            description="Old",
        )

        assert project_calendar(make_snapshot(transactions=(old,)), JAN_START, JAN_END) == []

    def test_one_time_bills_not_projected(self) -> None:
        one_time = ExpenseDefinition(
            id=3,
            description="Car tax",
            category="car",
            amount=Money(19000),
            recurring=False,
            created_at=date(2024, 1, 10),
        )

        assert project_calendar(make_snapshot(expenses=(one_time,)), JAN_START, JAN_END) == []

    def test_incomplete_snapshot_is_loading(self) -> None:
        records = make_snapshot(goals=None)

        assert project_calendar(records, JAN_START, JAN_END) is LOADING


class TestItemsForDate:
    """Tests for items_for_date."""

    def test_matches_date_or_iso_text(self) -> None:
        records = make_snapshot(expenses=(RENT,), salary=SALARY)
        items = project_calendar(records, JAN_START, JAN_END)
        assert isinstance(items, list)

        assert [item.id for item in items_for_date(items, date(2024, 1, 15))] == ["salary-4-2024-01-15"]
        assert [item.id for item in items_for_date(items, "2024-01-01")] == ["recurring-9-2024-01-01"]

    def test_empty_day(self) -> None:
        records = make_snapshot(salary=SALARY)
        items = project_calendar(records, JAN_START, JAN_END)
        assert isinstance(items, list)

        assert items_for_date(items, date(2024, 1, 2)) == []


class TestSummarizeDays:
    """Tests for summarize_days."""

    def test_one_summary_per_day(self) -> None:
        records = make_snapshot(expenses=(RENT,), salary=SALARY)
        items = project_calendar(records, JAN_START, JAN_END)
        assert isinstance(items, list)

        days = summarize_days(items, JAN_START, JAN_END, today=date(2024, 1, 15))

        assert len(days) == 31
        assert days[0].net_flow == Money(-80000)
        assert days[14].net_flow == Money(100000)
        assert days[14].is_today
        assert days[0].is_past
        assert days[30].is_future
        assert days[1].items == []


class TestVirtualIds:
    """Tests for virtual id handling and deletion guards."""

    def test_prefixes(self) -> None:
        assert is_virtual_id("salary-1-2024-01-15")
        assert is_virtual_id("recurring-9-2024-01-01")
        assert is_virtual_id("savings-2-2024-01-16")
        assert not is_virtual_id("42")

    def test_real_transaction_is_deletable(self) -> None:
        assert ensure_deletable("42") == 42

    def test_virtual_item_rejected(self) -> None:
        with pytest.raises(VirtualItemError) as exc_info:
            ensure_deletable("recurring-9-2024-01-01")

        assert exc_info.value.source is OccurrenceSource.BILL
        assert "recurring bill" in str(exc_info.value)
        assert "bill-edit" in str(exc_info.value)

    def test_virtual_contribution_points_to_goal_edit(self) -> None:
        with pytest.raises(VirtualItemError, match="goal-edit"):
            ensure_deletable("savings-2-2024-01-16")

    def test_virtual_error_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            ensure_deletable("salary-4-2024-01-15")

    def test_unknown_id_rejected(self) -> None:
        with pytest.raises(ValueError, match="Unknown calendar item"):
            ensure_deletable("bogus")

    def test_signed_amount(self) -> None:
        item = CalendarItem(
            id="7",
            kind=TransactionKind.SAVINGS,
            title="Pot",
            amount=Money(500),
            date=JAN_START,
        )
        assert item.signed_amount == Money(-500)


class TestCalendarWindow:
    """Tests for calendar_window."""

    def test_one_month_padding(self) -> None:
        assert calendar_window(Month("2024-01")) == (date(2023, 12, 1), date(2024, 2, 29))

    def test_no_padding(self) -> None:
        assert calendar_window(Month("2024-04"), padding_months=0) == (date(2024, 4, 1), date(2024, 4, 30))
