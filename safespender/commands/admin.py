"""Admin commands for backup, init, and listing transactions."""

import shutil
import sqlite3
from datetime import date, datetime
from pathlib import Path

from rich.table import Table

from safespender.commands.common import (
    console,
    fail,
    get_settings,
    logger,
    require_database,
    require_date,
)
from safespender.config import create_default_config, get_config_path
from safespender.domain.models import FinancialProfile, TransactionKind, format_money
from safespender.store.queries import get_financial_profile, list_transactions, save_financial_profile
from safespender.store.schema import get_backups_dir, get_db_path, init_database


def backup_command(
    output_dir: str | None = None,
) -> None:
    """Backup database and configuration files."""
    db_path = get_db_path()
    config_path = get_config_path()

    require_database(db_path)

    if output_dir:
        backup_dir = Path(output_dir).expanduser()
    else:
        backup_dir = get_backups_dir()

    backup_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")

    try:
        db_backup = backup_dir / f"safespender_{timestamp}.db"
        shutil.copy2(db_path, db_backup)
        console.print(f"[green]✓[/green] Database backed up to: {db_backup}")

        if config_path.exists():
            config_backup = backup_dir / f"config_{timestamp}.toml"
            shutil.copy2(config_path, config_backup)
            console.print(f"[green]✓[/green] Config backed up to: {config_backup}")

        console.print("\n[green]Backup complete![/green]", style="bold")
        console.print(f"[dim]Backup directory: {backup_dir}[/dim]")

    except OSError as e:
        logger.error("Backup to %s failed: %s", backup_dir, e)
        fail(f"Backup failed: {e}")


def init_command(start_date: str | None = None, currency: str | None = None, force: bool = False) -> None:
    """Initialize the database, config file and financial profile.

    Running it again on an existing database keeps its rows and profile
    unless --force is given, which replaces the profile.
    """
    db_path = get_db_path()
    config_path = get_config_path()
    start = require_date(start_date)

    currency = (currency or get_settings().currency).upper()
    if len(currency) != 3 or not currency.isalpha():
        fail(f"Invalid currency code '{currency}'")

    try:
        console.print(f"[cyan]Initializing database at {db_path}...[/cyan]")
        init_database(db_path)
        console.print("[green]✓[/green] Database schema is up to date")

        existing = get_financial_profile(db_path)
        if existing is not None and not force:
            console.print(
                f"[yellow]Profile already exists (tracking since {existing.start_date.isoformat()}, "
                f"{existing.base_currency})[/yellow]"
            )
            console.print("[yellow]Use 'safespender init --force' to replace it[/yellow]")
        else:
            save_financial_profile(
                FinancialProfile(base_currency=currency, start_date=start, has_completed_onboarding=True),
                db_path,
            )
            console.print(f"[green]✓[/green] Tracking money from {start.isoformat()} in {currency}")

        if force or not config_path.exists():
            create_default_config(config_path, currency)
            console.print(f"[green]✓[/green] Config file written to {config_path} (permissions: 600)")

        console.print("\n[green]Initialization complete![/green]", style="bold")

    except sqlite3.Error as e:
        logger.error("Initialization failed: %s", e)
        fail(f"Database error: {e}")
    except OSError as e:
        logger.error("Initialization failed: %s", e)
        fail(f"Filesystem error: {e}")


def list_command(
    limit: int = 50,
    all: bool = False,
) -> None:
    """List transactions."""
    db_path = get_db_path()
    require_database(db_path)

    try:
        profile = get_financial_profile(db_path)
        actual_limit = None if all else limit
        transactions = list_transactions(db_path, actual_limit)
    except sqlite3.Error as e:
        logger.error("Failed to list transactions: %s", e)
        fail(f"Database error: {e}")

    currency = profile.base_currency if profile else "GBP"

    if not transactions:
        console.print("[yellow]No transactions found[/yellow]")
        return

    title = f"Transactions (showing all {len(transactions)})" if all else f"Transactions (showing {len(transactions)})"
    table = Table(title=title)
    table.add_column("ID", style="dim", justify="right")
    table.add_column("Date", style="cyan")
    table.add_column("Description", style="white")
    table.add_column("Amount", justify="right")
    table.add_column("Category", style="magenta")
    table.add_column("Kind", justify="center")

    for txn in transactions:
        if txn.kind is TransactionKind.INCOME:
            amount_display = f"[green]+{format_money(txn.amount, currency)}[/green]"
        elif txn.kind is TransactionKind.SAVINGS:
            amount_display = f"[blue]-{format_money(txn.amount, currency)}[/blue]"
        else:
            amount_display = f"[red]-{format_money(txn.amount, currency)}[/red]"

        marker = " (reserved)" if txn.reserved else ""
        future = " [dim](upcoming)[/dim]" if txn.date > date.today() else ""
        table.add_row(
            str(txn.id),
            txn.date.isoformat() + future,
            txn.description,
            amount_display,
            txn.category or "[dim]-[/dim]",
            txn.kind.value + marker,
        )

    console.print(table)
