"""Tests for safespender.domain.upcoming pure functions."""

from datetime import date

from safespender.domain.models import (
    LOADING,
    ExpenseDefinition,
    FinancialProfile,
    Money,
    RecordSnapshot,
    SalarySchedule,
    ScheduleType,
    Transaction,
    TransactionKind,
)
from safespender.domain.upcoming import next_bill_date, upcoming_bills, upcoming_events

TODAY = date(2024, 1, 10)


def bill(
    bill_id: int,
    day: int | None,
    created_at: date = date(2024, 1, 1),
    end_date: date | None = None,
) -> ExpenseDefinition:
    return ExpenseDefinition(
        id=bill_id,
        description=f"Bill {bill_id}",
        category="bills",
        amount=Money(1000 * bill_id),
        recurring=day is not None,
        created_at=created_at,
        day_of_month=day,
        end_date=end_date,
    )


def records(
    expenses: tuple[ExpenseDefinition, ...] = (),
    transactions: tuple[Transaction, ...] = (),
    pay_days: tuple[int, ...] | None = (20,),
) -> RecordSnapshot:
    salary = None
    if pay_days is not None:
        salary = SalarySchedule(
            id=1,
            schedule_type=ScheduleType.MONTHLY,
            pay_days=pay_days,
            paycheck_amounts=tuple(Money(100000) for _ in pay_days),
        )
    return RecordSnapshot(
        transactions=transactions,
        expenses=expenses,
        goals=(),
        profile=FinancialProfile(base_currency="GBP", start_date=date(2024, 1, 1)),
        salary=salary,
    )


class TestNextBillDate:
    """Tests for next_bill_date."""

    def test_recurring_later_this_month(self) -> None:
        assert next_bill_date(bill(1, 15), TODAY) == date(2024, 1, 15)

    def test_recurring_due_today_moves_to_next_month(self) -> None:
        assert next_bill_date(bill(1, 10), TODAY) == date(2024, 2, 10)

    def test_recurring_ended(self) -> None:
        assert next_bill_date(bill(1, 15, end_date=date(2024, 1, 5)), TODAY) is None

    def test_one_time_in_future(self) -> None:
        assert next_bill_date(bill(1, None, created_at=date(2024, 3, 1)), TODAY) == date(2024, 3, 1)

    def test_one_time_in_past(self) -> None:
        assert next_bill_date(bill(1, None, created_at=date(2024, 1, 5)), TODAY) is None


class TestUpcomingBills:
    """Tests for upcoming_bills."""

    def test_only_bills_before_next_paycheck(self) -> None:
        """Payday is the 20th, so the bill on the 25th waits."""
        snapshot = records(expenses=(bill(1, 25), bill(2, 12), bill(3, 20)))

        bills = upcoming_bills(snapshot, TODAY)

        assert isinstance(bills, list)
        assert [(b.expense_id, b.date) for b in bills] == [
            (2, date(2024, 1, 12)),
            (3, date(2024, 1, 20)),
        ]

    def test_one_time_bill_included(self) -> None:
        snapshot = records(expenses=(bill(4, None, created_at=date(2024, 1, 18)),))

        bills = upcoming_bills(snapshot, TODAY)

        assert isinstance(bills, list)
        assert len(bills) == 1
        assert not bills[0].recurring
        assert bills[0].amount == Money(4000)

    def test_without_salary_uses_end_of_month(self) -> None:
        snapshot = records(expenses=(bill(1, 25), bill(2, 5)), pay_days=None)

        bills = upcoming_bills(snapshot, TODAY)

        assert isinstance(bills, list)
        assert [b.date for b in bills] == [date(2024, 1, 25)]

    def test_loading(self) -> None:
        snapshot = RecordSnapshot(transactions=(), expenses=(), goals=(), profile=None)

        assert upcoming_bills(snapshot, TODAY) is LOADING


class TestUpcomingEvents:
    """Tests for upcoming_events."""

    def test_paychecks_and_future_transactions(self) -> None:
        future = Transaction(
            id=5,
            kind=TransactionKind.EXPENSE,
            amount=Money(2500),
            date=date(2024, 1, 12),
            description="Concert",
        )
        past = Transaction(
            id=6,
            kind=TransactionKind.EXPENSE,
            amount=Money(100),
            date=date(2024, 1, 9),
            description="Bus",
        )
        snapshot = records(transactions=(future, past))

        events = upcoming_events(snapshot, TODAY)

        assert isinstance(events, list)
        assert [event.id for event in events] == ["5", "salary-1-2024-01-20", "salary-1-2024-02-20"]
        assert events[1].recurring
        assert not events[0].recurring

    def test_limit_applies_per_source(self) -> None:
        snapshot = records(pay_days=(1, 8, 15, 22))

        events = upcoming_events(snapshot, TODAY, limit=2)

        assert isinstance(events, list)
        assert [event.date for event in events] == [date(2024, 1, 15), date(2024, 1, 22)]

    def test_loading(self) -> None:
        snapshot = RecordSnapshot(transactions=None, expenses=(), goals=(), profile=None)

        assert upcoming_events(snapshot, TODAY) is LOADING
