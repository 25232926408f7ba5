"""Database query functions."""

import json
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import date
from pathlib import Path

from safespender.domain.models import (
    GOAL_DELETION_CATEGORY,
    ContributionFrequency,
    ExpenseDefinition,
    FinancialProfile,
    Money,
    RecordSnapshot,
    SalarySchedule,
    SavingsGoal,
    ScheduleType,
    Transaction,
    TransactionKind,
)
from safespender.logger import get_logger
from safespender.store.schema import get_db_path

logger = get_logger(__name__)


@contextmanager
def _connect(db_path: Path | None = None) -> Iterator[sqlite3.Connection]:
    """Open a database connection with row factory and foreign keys enabled.

    Args:
        db_path: Path to the database file. If None, uses default location.

    Yields:
        Database connection, closed on exit.
    """
    if db_path is None:
        db_path = get_db_path()
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON")
    try:
        yield conn
    finally:
        conn.close()


def _optional_date(value: str | None) -> date | None:
    return date.fromisoformat(value) if value else None


def _row_to_transaction(row: sqlite3.Row) -> Transaction:
    return Transaction(
        id=row["id"],
        kind=TransactionKind(row["kind"]),
        amount=Money(row["amount"]),
        date=date.fromisoformat(row["date"]),
        description=row["description"],
        category=row["category"],
        goal_id=row["goal_id"],
        reserved=bool(row["reserved"]),
    )


def _row_to_expense(row: sqlite3.Row) -> ExpenseDefinition:
    return ExpenseDefinition(
        id=row["id"],
        description=row["description"],
        category=row["category"],
        amount=Money(row["amount"]),
        recurring=bool(row["recurring"]),
        created_at=date.fromisoformat(row["created_at"]),
        day_of_month=row["day_of_month"],
        end_date=_optional_date(row["end_date"]),
    )


def _row_to_goal(row: sqlite3.Row) -> SavingsGoal:
    frequency = row["contribution_frequency"]
    contribution = row["recurring_contribution"]
    return SavingsGoal(
        id=row["id"],
        name=row["name"],
        icon=row["icon"],
        target_amount=Money(row["target_amount"]),
        current_amount=Money(row["current_amount"]),
        recurring_contribution=Money(contribution) if contribution is not None else None,
        contribution_frequency=ContributionFrequency(frequency) if frequency else None,
    )


def _row_to_salary(row: sqlite3.Row) -> SalarySchedule:
    return SalarySchedule(
        id=row["id"],
        schedule_type=ScheduleType(row["schedule_type"]),
        pay_days=tuple(int(day) for day in json.loads(row["pay_days"])),
        paycheck_amounts=tuple(Money(int(amount)) for amount in json.loads(row["paycheck_amounts"])),
    )


def get_financial_profile(db_path: Path | None = None) -> FinancialProfile | None:
    """Get the financial profile.

    Args:
        db_path: Path to the database file. If None, uses default location.

    Returns:
        The profile, or None if onboarding has not created one yet.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        row = conn.execute(
            "SELECT base_currency, start_date, has_completed_onboarding, has_completed_feature_tour "
            "FROM financial_profile WHERE id = 1"
        ).fetchone()
    if row is None:
        return None
    return FinancialProfile(
        base_currency=row["base_currency"],
        start_date=date.fromisoformat(row["start_date"]),
        has_completed_onboarding=bool(row["has_completed_onboarding"]),
        has_completed_feature_tour=bool(row["has_completed_feature_tour"]),
    )


def save_financial_profile(profile: FinancialProfile, db_path: Path | None = None) -> None:
    """Create or replace the financial profile.

    Args:
        profile: Profile to store.
        db_path: Path to the database file. If None, uses default location.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        try:
            conn.execute(
                """
                INSERT OR REPLACE INTO financial_profile
                    (id, base_currency, start_date, has_completed_onboarding, has_completed_feature_tour)
                VALUES (1, ?, ?, ?, ?)
                """,
                (
                    profile.base_currency,
                    profile.start_date.isoformat(),
                    int(profile.has_completed_onboarding),
                    int(profile.has_completed_feature_tour),
                ),
            )
            conn.commit()
        except sqlite3.Error:
            conn.rollback()
            raise
    logger.debug("Saved profile starting %s", profile.start_date)


def list_transactions(db_path: Path | None = None, limit: int | None = None) -> list[Transaction]:
    """Get transactions, newest first.

    Args:
        db_path: Path to the database file. If None, uses default location.
        limit: Maximum number of transactions to return. If None, returns all.

    Returns:
        List of transactions ordered by date descending.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    query = "SELECT * FROM transactions ORDER BY date DESC, id DESC"
    params: tuple[int, ...] = ()
    if limit:
        query += " LIMIT ?"
        params = (limit,)

    with _connect(db_path) as conn:
        rows = conn.execute(query, params).fetchall()
    return [_row_to_transaction(row) for row in rows]


def create_transaction(
    kind: TransactionKind,
    amount: Money,
    on: date,
    description: str,
    category: str | None = None,
    goal_id: int | None = None,
    reserved: bool = False,
    db_path: Path | None = None,
) -> int:
    """Insert a transaction.

    Args:
        kind: Income, expense or savings.
        amount: Amount in minor units (never negative).
        on: Transaction date.
        description: Transaction description.
        category: Optional category name.
        goal_id: Savings goal the transaction belongs to, if any.
        reserved: Whether the expense was set aside in advance.
        db_path: Path to the database file. If None, uses default location.

    Returns:
        ID of the new transaction.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        try:
            cursor = conn.execute(
                """
                INSERT INTO transactions (kind, amount, date, description, category, goal_id, reserved)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (kind.value, amount, on.isoformat(), description, category, goal_id, int(reserved)),
            )
            conn.commit()
        except sqlite3.Error:
            conn.rollback()
            raise
    logger.debug("Created %s transaction %s", kind.value, cursor.lastrowid)
    return int(cursor.lastrowid or 0)


def update_transaction(txn: Transaction, db_path: Path | None = None) -> bool:
    """Overwrite a transaction's fields.

    Args:
        txn: Transaction with its new values.
        db_path: Path to the database file. If None, uses default location.

    Returns:
        True if a transaction was updated, False if the ID doesn't exist.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        try:
            cursor = conn.execute(
                """
                UPDATE transactions
                SET kind = ?, amount = ?, date = ?, description = ?, category = ?, goal_id = ?, reserved = ?
                WHERE id = ?
                """,
                (
                    txn.kind.value,
                    txn.amount,
                    txn.date.isoformat(),
                    txn.description,
                    txn.category,
                    txn.goal_id,
                    int(txn.reserved),
                    txn.id,
                ),
            )
            conn.commit()
        except sqlite3.Error:
            conn.rollback()
            raise
    return cursor.rowcount > 0


def delete_transaction(txn_id: int, db_path: Path | None = None) -> bool:
    """Delete one transaction.

    Args:
        txn_id: Transaction ID.
        db_path: Path to the database file. If None, uses default location.

    Returns:
        True if a row was deleted, False if the ID doesn't exist.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        try:
            cursor = conn.execute("DELETE FROM transactions WHERE id = ?", (txn_id,))
            conn.commit()
        except sqlite3.Error:
            conn.rollback()
            raise
    logger.debug("Deleted transaction %s (%s rows)", txn_id, cursor.rowcount)
    return cursor.rowcount > 0


def list_expense_definitions(db_path: Path | None = None) -> list[ExpenseDefinition]:
    """Get all bills, newest first.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        rows = conn.execute("SELECT * FROM expenses ORDER BY created_at DESC, id DESC").fetchall()
    return [_row_to_expense(row) for row in rows]


def create_expense_definition(
    description: str,
    category: str,
    amount: Money,
    recurring: bool,
    created_at: date,
    day_of_month: int | None = None,
    end_date: date | None = None,
    db_path: Path | None = None,
) -> int:
    """Insert a one-time or monthly bill.

    Args:
        description: Bill description.
        category: Category name.
        amount: Amount in minor units.
        recurring: Whether the bill repeats monthly.
        created_at: Creation date; the due date of a one-time bill.
        day_of_month: Due day (1-31) of a recurring bill.
        end_date: Last date a recurring bill can fall on.
        db_path: Path to the database file. If None, uses default location.

    Returns:
        ID of the new bill.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        try:
            cursor = conn.execute(
                """
                INSERT INTO expenses (description, category, amount, recurring, day_of_month, created_at, end_date)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    description,
                    category,
                    amount,
                    int(recurring),
                    day_of_month,
                    created_at.isoformat(),
                    end_date.isoformat() if end_date else None,
                ),
            )
            conn.commit()
        except sqlite3.Error:
            conn.rollback()
            raise
    logger.debug("Created bill %s", cursor.lastrowid)
    return int(cursor.lastrowid or 0)


def update_expense_definition(expense: ExpenseDefinition, db_path: Path | None = None) -> bool:
    """Overwrite a bill's fields.

    Returns:
        True if a bill was updated, False if the ID doesn't exist.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        try:
            cursor = conn.execute(
                """
                UPDATE expenses
                SET description = ?, category = ?, amount = ?, recurring = ?, day_of_month = ?,
                    created_at = ?, end_date = ?
                WHERE id = ?
                """,
                (
                    expense.description,
                    expense.category,
                    expense.amount,
                    int(expense.recurring),
                    expense.day_of_month,
                    expense.created_at.isoformat(),
                    expense.end_date.isoformat() if expense.end_date else None,
                    expense.id,
                ),
            )
            conn.commit()
        except sqlite3.Error:
            conn.rollback()
            raise
    return cursor.rowcount > 0


def delete_expense_definition(expense_id: int, db_path: Path | None = None) -> bool:
    """Delete a bill and with it every projected occurrence.

    Transactions already recorded against the bill are separate rows and
    stay.

    Returns:
        True if a bill was deleted, False if the ID doesn't exist.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        try:
            cursor = conn.execute("DELETE FROM expenses WHERE id = ?", (expense_id,))
            conn.commit()
        except sqlite3.Error:
            conn.rollback()
            raise
    logger.debug("Deleted bill %s (%s rows)", expense_id, cursor.rowcount)
    return cursor.rowcount > 0


def list_savings_goals(db_path: Path | None = None) -> list[SavingsGoal]:
    """Get all savings goals, newest first.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        rows = conn.execute("SELECT * FROM savings_goals ORDER BY id DESC").fetchall()
    return [_row_to_goal(row) for row in rows]


def get_savings_goal(goal_id: int, db_path: Path | None = None) -> SavingsGoal | None:
    """Get one savings goal.

    Returns:
        The goal, or None if the ID doesn't exist.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        row = conn.execute("SELECT * FROM savings_goals WHERE id = ?", (goal_id,)).fetchone()
    return _row_to_goal(row) if row else None


def create_savings_goal(
    name: str,
    target_amount: Money,
    icon: str = "💰",
    current_amount: Money = Money(0),
    recurring_contribution: Money | None = None,
    contribution_frequency: ContributionFrequency | None = None,
    db_path: Path | None = None,
) -> int:
    """Insert a savings goal.

    Returns:
        ID of the new goal.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        try:
            cursor = conn.execute(
                """
                INSERT INTO savings_goals
                    (name, icon, target_amount, current_amount, recurring_contribution, contribution_frequency)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    name,
                    icon,
                    target_amount,
                    current_amount,
                    recurring_contribution,
                    contribution_frequency.value if contribution_frequency else None,
                ),
            )
            conn.commit()
        except sqlite3.Error:
            conn.rollback()
            raise
    logger.debug("Created goal %s", cursor.lastrowid)
    return int(cursor.lastrowid or 0)


def update_savings_goal(goal: SavingsGoal, db_path: Path | None = None) -> bool:
    """Overwrite a goal's fields.

    Returns:
        True if a goal was updated, False if the ID doesn't exist.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        try:
            cursor = conn.execute(
                """
                UPDATE savings_goals
                SET name = ?, icon = ?, target_amount = ?, current_amount = ?,
                    recurring_contribution = ?, contribution_frequency = ?
                WHERE id = ?
                """,
                (
                    goal.name,
                    goal.icon,
                    goal.target_amount,
                    goal.current_amount,
                    goal.recurring_contribution,
                    goal.contribution_frequency.value if goal.contribution_frequency else None,
                    goal.id,
                ),
            )
            conn.commit()
        except sqlite3.Error:
            conn.rollback()
            raise
    return cursor.rowcount > 0


def record_goal_movement(
    goal_id: int,
    new_current_amount: Money,
    kind: TransactionKind,
    amount: Money,
    on: date,
    description: str,
    category: str | None = None,
    db_path: Path | None = None,
) -> int:
    """Change a goal's balance and log the movement in one transaction.

    A contribution is logged as a savings transaction against the goal; a
    withdrawal as an income transaction, since the money becomes spendable.

    Args:
        goal_id: Savings goal ID.
        new_current_amount: Goal balance after the movement.
        kind: Kind of transaction to log.
        amount: Amount moved, in minor units.
        on: Date of the movement.
        description: Transaction description.
        category: Optional category name.
        db_path: Path to the database file. If None, uses default location.

    Returns:
        ID of the logged transaction.

    Raises:
        LookupError: If the goal doesn't exist.
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        try:
            updated = conn.execute(
                "UPDATE savings_goals SET current_amount = ? WHERE id = ?",
                (new_current_amount, goal_id),
            )
            if updated.rowcount == 0:
                conn.rollback()
                raise LookupError(f"Savings goal {goal_id} not found")
            cursor = conn.execute(
                """
                INSERT INTO transactions (kind, amount, date, description, category, goal_id)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    kind.value,
                    amount,
                    on.isoformat(),
                    description,
                    category,
                    goal_id if kind is TransactionKind.SAVINGS else None,
                ),
            )
            conn.commit()
        except sqlite3.Error:
            conn.rollback()
            raise
    logger.debug("Goal %s balance now %s", goal_id, new_current_amount)
    return int(cursor.lastrowid or 0)


def delete_savings_goal(goal_id: int, on: date, db_path: Path | None = None) -> Money | None:
    """Delete a goal, returning its balance to spendable money.

    A positive balance is recorded as an income transaction dated ``on``.
    The goal's savings transactions are removed with it.

    Args:
        goal_id: Savings goal ID.
        on: Date for the recovery transaction.
        db_path: Path to the database file. If None, uses default location.

    Returns:
        Amount recovered, or None if the goal doesn't exist.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        try:
            row = conn.execute(
                "SELECT name, current_amount FROM savings_goals WHERE id = ?", (goal_id,)
            ).fetchone()
            if row is None:
                return None

            recovered = Money(max(0, row["current_amount"]))
            if recovered > 0:
                conn.execute(
                    """
                    INSERT INTO transactions (kind, amount, date, description, category)
                    VALUES (?, ?, ?, ?, ?)
                    """,
                    (
                        TransactionKind.INCOME.value,
                        recovered,
                        on.isoformat(),
                        f"Money recovered from deleted goal: {row['name']}",
                        GOAL_DELETION_CATEGORY,
                    ),
                )

            conn.execute("DELETE FROM transactions WHERE goal_id = ?", (goal_id,))
            conn.execute("DELETE FROM savings_goals WHERE id = ?", (goal_id,))
            conn.commit()
        except sqlite3.Error:
            conn.rollback()
            raise
    logger.debug("Deleted goal %s, recovered %s", goal_id, recovered)
    return recovered


def get_salary_schedule(db_path: Path | None = None) -> SalarySchedule | None:
    """Get the salary schedule.

    Returns:
        The schedule, or None if none is configured.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        row = conn.execute("SELECT * FROM salary_schedule ORDER BY id DESC LIMIT 1").fetchone()
    return _row_to_salary(row) if row else None


def set_salary_schedule(
    schedule_type: ScheduleType,
    pay_days: list[int],
    paycheck_amounts: list[Money],
    db_path: Path | None = None,
) -> int:
    """Replace the salary schedule.

    Only one schedule exists at a time.

    Args:
        schedule_type: Pay frequency label.
        pay_days: Days of the month paychecks arrive.
        paycheck_amounts: Amount for each pay day, in the same order.
        db_path: Path to the database file. If None, uses default location.

    Returns:
        ID of the new schedule.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        try:
            conn.execute("DELETE FROM salary_schedule")
            cursor = conn.execute(
                "INSERT INTO salary_schedule (schedule_type, pay_days, paycheck_amounts) VALUES (?, ?, ?)",
                (schedule_type.value, json.dumps(pay_days), json.dumps([int(a) for a in paycheck_amounts])),
            )
            conn.commit()
        except sqlite3.Error:
            conn.rollback()
            raise
    logger.debug("Salary schedule set: days %s", pay_days)
    return int(cursor.lastrowid or 0)


def clear_salary_schedule(db_path: Path | None = None) -> bool:
    """Remove the salary schedule.

    Returns:
        True if a schedule was removed.

    Raises:
        sqlite3.Error: If database operation fails.
    """
    with _connect(db_path) as conn:
        try:
            cursor = conn.execute("DELETE FROM salary_schedule")
            conn.commit()
        except sqlite3.Error:
            conn.rollback()
            raise
    return cursor.rowcount > 0


def load_snapshot(db_path: Path | None = None) -> RecordSnapshot:
    """Read every collection the calculations need.

    Args:
        db_path: Path to the database file. If None, uses default location.

    Returns:
        RecordSnapshot. Its profile is None before onboarding, which leaves
        the snapshot not ready.

    Raises:
        sqlite3.Error: If any read fails. Partial results are never returned.
    """
    return RecordSnapshot(
        transactions=tuple(list_transactions(db_path)),
        expenses=tuple(list_expense_definitions(db_path)),
        goals=tuple(list_savings_goals(db_path)),
        profile=get_financial_profile(db_path),
        salary=get_salary_schedule(db_path),
    )
