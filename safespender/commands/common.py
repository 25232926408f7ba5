"""Helpers shared by the commands: parsing input and loading records."""

import sqlite3
import sys
from datetime import date
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import NoReturn

from rich.console import Console

from safespender.config import Settings, load_settings
from safespender.dates import parse_date
from safespender.domain.models import Money, RecordSnapshot
from safespender.logger import get_logger
from safespender.store.queries import load_snapshot
from safespender.store.schema import database_exists

console = Console()
logger = get_logger(__name__)


def fail(message: str) -> NoReturn:
    """Print an error in red and exit with status 1."""
    console.print(f"[red]{message}[/red]", style="bold")
    sys.exit(1)


def parse_money(amount_str: str) -> Money | None:
    """Parse money string to minor units.

    Args:
        amount_str: String containing amount in major units (e.g. "12.50").

    Returns:
        Money amount in minor units, or None if invalid or negative.
    """
    try:
        value = Decimal(amount_str.strip().replace(",", ""))
    except InvalidOperation:
        return None
    if not value.is_finite() or value < 0:
        return None
    return Money(int((value * 100).to_integral_value()))


def require_money(amount_str: str) -> Money:
    """Parse an amount or exit with an error."""
    amount = parse_money(amount_str)
    if amount is None:
        fail(f"Invalid amount '{amount_str}'")
    return amount


def require_date(raw: str | None) -> date:
    """Parse a date, defaulting to today, or exit with an error."""
    if raw is None:
        return date.today()
    try:
        return parse_date(raw)
    except ValueError as e:
        fail(str(e))


def get_settings() -> Settings:
    """Load settings or exit on an invalid config file."""
    try:
        return load_settings()
    except ValueError as e:
        fail(f"Config error: {e}")


def require_database(db_path: Path) -> None:
    if not database_exists(db_path):
        fail("Database not found. Run 'safespender init' first.")


def load_ready_snapshot(db_path: Path) -> RecordSnapshot:
    """Load every record, exiting if anything is missing or unreadable.

    Args:
        db_path: Path to the database file.

    Returns:
        A snapshot that is ready for calculation.
    """
    require_database(db_path)
    try:
        snapshot = load_snapshot(db_path)
    except sqlite3.Error as e:
        logger.error("Failed to load records from %s: %s", db_path, e)
        fail(f"Database error: {e}")

    if not snapshot.is_ready:
        fail("No financial profile found. Run 'safespender init' first.")
    return snapshot


def currency_of(snapshot: RecordSnapshot) -> str:
    return snapshot.profile.base_currency if snapshot.profile else "GBP"
