"""Domain models and calculations for safespender.

This package contains the functional core:
- Pure functions with no side effects
- No I/O operations
- Easy to test
- Business logic separated from infrastructure
"""

from safespender.domain.models import (
    ExpenseDefinition,
    FinancialProfile,
    Money,
    Month,
    RecordSnapshot,
    SalarySchedule,
    SavingsGoal,
    Transaction,
)

__all__ = [
    "ExpenseDefinition",
    "FinancialProfile",
    "Money",
    "Month",
    "RecordSnapshot",
    "SalarySchedule",
    "SavingsGoal",
    "Transaction",
]
