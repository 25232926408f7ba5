"""Database schema initialization."""

import os
import sqlite3
from pathlib import Path


def get_xdg_data_home() -> Path:
    """Get XDG data directory, with fallback to ~/.local/share."""
    xdg_data = os.environ.get("XDG_DATA_HOME")
    if xdg_data:
        return Path(xdg_data)
    return Path.home() / ".local" / "share"


def get_db_path() -> Path:
    """Get the default database path (XDG compliant)."""
    return get_xdg_data_home() / "safespender" / "safespender.db"


def get_backups_dir() -> Path:
    """Get the default backup directory (XDG compliant)."""
    return get_xdg_data_home() / "safespender" / "backups"


def database_exists(db_path: Path | None = None) -> bool:
    """Check if the database file exists.

    Args:
        db_path: Path to check. If None, uses default location.

    Returns:
        True if database exists, False otherwise.
    """
    if db_path is None:
        db_path = get_db_path()
    return db_path.exists()


def init_database(db_path: Path | None = None) -> None:
    """Initialize the database with the required schema.

    Safe to run on an existing database; missing tables, columns and indexes
    are added.

    Args:
        db_path: Path to the database file. If None, uses default location.

    Raises:
        sqlite3.Error: If database initialization fails.
    """
    if db_path is None:
        db_path = get_db_path()

    db_path.parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(db_path)
    cursor = conn.cursor()

    try:
        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS financial_profile (
                id INTEGER PRIMARY KEY CHECK (id = 1),
                base_currency TEXT NOT NULL,
                start_date TEXT NOT NULL,
                has_completed_onboarding INTEGER NOT NULL DEFAULT 0,
                has_completed_feature_tour INTEGER NOT NULL DEFAULT 0
            )
        """
        )

        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS savings_goals (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                name TEXT NOT NULL,
                icon TEXT NOT NULL DEFAULT '💰',
                target_amount INTEGER NOT NULL,
                current_amount INTEGER NOT NULL DEFAULT 0,
                recurring_contribution INTEGER,
                contribution_frequency TEXT
            )
        """
        )

        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS transactions (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                kind TEXT NOT NULL CHECK (kind IN ('income', 'expense', 'savings')),
                amount INTEGER NOT NULL CHECK (amount >= 0),
                date TEXT NOT NULL,
                description TEXT NOT NULL,
                category TEXT,
                goal_id INTEGER REFERENCES savings_goals(id),
                reserved INTEGER NOT NULL DEFAULT 0
            )
        """
        )

        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS expenses (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                description TEXT NOT NULL,
                category TEXT NOT NULL,
                amount INTEGER NOT NULL CHECK (amount >= 0),
                recurring INTEGER NOT NULL DEFAULT 0,
                day_of_month INTEGER CHECK (day_of_month BETWEEN 1 AND 31),
                created_at TEXT NOT NULL,
                end_date TEXT
            )
        """
        )

        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS salary_schedule (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                schedule_type TEXT NOT NULL,
                pay_days TEXT NOT NULL,
                paycheck_amounts TEXT NOT NULL
            )
        """
        )

        cursor.execute("CREATE INDEX IF NOT EXISTS idx_txn_date ON transactions(date)")
        cursor.execute("CREATE INDEX IF NOT EXISTS idx_txn_kind_date ON transactions(kind, date)")
        cursor.execute("CREATE INDEX IF NOT EXISTS idx_txn_goal ON transactions(goal_id)")

        conn.commit()

    except sqlite3.Error:
        conn.rollback()
        raise
    finally:
        conn.close()
