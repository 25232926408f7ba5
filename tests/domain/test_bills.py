"""Tests for safespender.domain.bills pure functions."""

from datetime import date

from safespender.domain.bills import apply_bill_changes
from safespender.domain.models import ExpenseDefinition, Money


def monthly(end_date: date | None = None) -> ExpenseDefinition:
    return ExpenseDefinition(
        id=4,
        description="Gym",
        category="health",
        amount=Money(3000),
        recurring=True,
        created_at=date(2024, 1, 1),
        day_of_month=5,
        end_date=end_date,
    )


def one_time() -> ExpenseDefinition:
    return ExpenseDefinition(
        id=5,
        description="Car tax",
        category="car",
        amount=Money(19000),
        recurring=False,
        created_at=date(2024, 3, 1),
    )


class TestApplyBillChanges:
    """Tests for apply_bill_changes."""

    def test_change_amount_and_day(self) -> None:
        updated, error = apply_bill_changes(monthly(), amount=Money(3500), day=12)

        assert error is None
        assert updated.amount == Money(3500)
        assert updated.day_of_month == 12
        assert updated.description == "Gym"

    def test_move_one_time_bill(self) -> None:
        updated, error = apply_bill_changes(one_time(), start=date(2024, 4, 2))

        assert error is None
        assert updated.created_at == date(2024, 4, 2)

    def test_set_and_clear_end_date(self) -> None:
        ending, error = apply_bill_changes(monthly(), end_date=date(2024, 6, 30))
        assert error is None
        assert ending.end_date == date(2024, 6, 30)

        endless, error = apply_bill_changes(ending, clear_end_date=True)
        assert error is None
        assert endless.end_date is None

    def test_end_before_start_rejected(self) -> None:
        bill = monthly()

        updated, error = apply_bill_changes(bill, end_date=date(2023, 12, 31))

        assert updated is bill
        assert error == "End date is before the bill starts"

    def test_start_moved_past_end_rejected(self) -> None:
        bill = monthly(end_date=date(2024, 6, 30))

        _, error = apply_bill_changes(bill, start=date(2024, 7, 1))

        assert error == "End date is before the bill starts"

    def test_one_time_bill_has_no_day(self) -> None:
        bill = one_time()

        updated, error = apply_bill_changes(bill, day=10)

        assert updated is bill
        assert error is not None

    def test_invalid_values_rejected(self) -> None:
        bill = monthly()

        assert apply_bill_changes(bill, description=" ") == (bill, "Description is required")
        assert apply_bill_changes(bill, amount=Money(0)) == (bill, "Amount must be positive")
        assert apply_bill_changes(bill, day=32) == (bill, "Day of month must be between 1 and 31")

    def test_nothing_to_change(self) -> None:
        bill = monthly()

        assert apply_bill_changes(bill, description="Gym") == (bill, "Nothing to change")
