"""Pure functions for editing bill definitions.

Each function returns a tuple of (result, error_message) and never touches
the database.
"""

from dataclasses import replace
from datetime import date

from safespender.domain.models import ExpenseDefinition, Money
from safespender.domain.validation import validate_amount, validate_day_of_month


def apply_bill_changes(
    expense: ExpenseDefinition,
    description: str | None = None,
    amount: Money | None = None,
    category: str | None = None,
    day: int | None = None,
    start: date | None = None,
    end_date: date | None = None,
    clear_end_date: bool = False,
) -> tuple[ExpenseDefinition, str | None]:
    """Apply edits to a bill. Arguments left as None keep their value.

    A bill stays one-time or monthly; changing that means deleting it and
    adding it again.

    Args:
        expense: The bill as stored.
        description: New description.
        amount: New amount in minor units.
        category: New category.
        day: New day of month (monthly bills only).
        start: New due date of a one-time bill, or first month of a monthly one.
        end_date: New last date (monthly bills only).
        clear_end_date: Remove the end date so the bill repeats forever.

    Returns:
        Tuple of (updated_bill, error_message). On error the bill is
        returned unchanged.
    """
    if clear_end_date and end_date is not None:
        return expense, "Can't set and clear the end date at once"
    if not expense.recurring and (day is not None or end_date is not None or clear_end_date):
        return expense, "Only monthly bills have a day of month and an end date"

    changes: dict[str, object] = {}
    if description is not None:
        if not description.strip():
            return expense, "Description is required"
        changes["description"] = description.strip()
    if category is not None:
        if not category.strip():
            return expense, "Category is required"
        changes["category"] = category.strip()
    if amount is not None:
        valid, error = validate_amount(amount)
        if not valid:
            return expense, error
        changes["amount"] = amount
    if day is not None:
        valid, error = validate_day_of_month(day)
        if not valid:
            return expense, error
        changes["day_of_month"] = day
    if start is not None:
        changes["created_at"] = start
    if end_date is not None:
        changes["end_date"] = end_date
    elif clear_end_date:
        changes["end_date"] = None

    updated = replace(expense, **changes)
    if updated.end_date is not None and updated.end_date < updated.created_at:
        return expense, "End date is before the bill starts"
    if updated == expense:
        return expense, "Nothing to change"
    return updated, None
