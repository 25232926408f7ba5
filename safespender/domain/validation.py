"""Pure validation of user input, run before anything is written.

Each validator returns a tuple of (is_valid, error_message).
"""

from safespender.domain.models import Money


def validate_amount(amount: Money) -> tuple[bool, str | None]:
    """Validate a user-entered amount.

    Args:
        amount: Amount in minor units.

    Returns:
        Tuple of (is_valid, error_message).
    """
    if amount <= 0:
        return False, "Amount must be positive"
    return True, None


def validate_day_of_month(day: int) -> tuple[bool, str | None]:
    if not 1 <= day <= 31:
        return False, "Day of month must be between 1 and 31"
    return True, None


def validate_schedule(pay_days: list[int], paychecks: list[Money]) -> tuple[bool, str | None]:
    """Validate a salary schedule before saving it.

    Args:
        pay_days: Days of the month.
        paychecks: Amount paid on each day, in the same order.

    Returns:
        Tuple of (is_valid, error_message).
    """
    if not pay_days:
        return False, "At least one pay day is required"
    if len(pay_days) != len(paychecks):
        return False, "Each pay day needs exactly one paycheck amount"
    if any(not 1 <= day <= 31 for day in pay_days):
        return False, "Pay days must be between 1 and 31"
    if len(set(pay_days)) != len(pay_days):
        return False, "Pay days must be different"
    if all(amount <= 0 for amount in paychecks):
        return False, "At least one paycheck must be positive"
    return True, None
