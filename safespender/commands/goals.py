"""Commands for savings goals: create, edit, list, contribute, withdraw, delete."""

import sqlite3
from datetime import date

import typer
from rich.table import Table

from safespender.commands.common import (
    console,
    currency_of,
    fail,
    get_settings,
    load_ready_snapshot,
    logger,
    require_date,
    require_money,
)
from safespender.domain.goals import (
    apply_goal_changes,
    calculate_contribution,
    calculate_goal_impact,
    calculate_goal_progress,
    calculate_withdrawal,
    recovered_on_delete,
    total_savings_balance,
)
from safespender.domain.models import (
    WITHDRAWAL_CATEGORY,
    ContributionFrequency,
    Loading,
    Money,
    SavingsGoal,
    TransactionKind,
    format_money,
)
from safespender.domain.summary import compute_free_to_spend
from safespender.domain.validation import validate_amount
from safespender.store.queries import (
    create_savings_goal,
    delete_savings_goal,
    record_goal_movement,
    update_savings_goal,
)
from safespender.store.schema import get_db_path


def _find_goal(goals: tuple[SavingsGoal, ...] | None, goal_id: int) -> SavingsGoal:
    for goal in goals or ():
        if goal.id == goal_id:
            return goal
    fail(f"Savings goal {goal_id} not found")


def _parse_frequency(frequency: str) -> ContributionFrequency:
    try:
        return ContributionFrequency(frequency.lower())
    except ValueError:
        fail(
            f"Unknown frequency '{frequency}' "
            f"(choose from {', '.join(f.value for f in ContributionFrequency)})"
        )


def goal_add_command(
    name: str,
    target: str,
    icon: str = "💰",
    contribution: str | None = None,
    frequency: str | None = None,
) -> None:
    """Create a savings goal, optionally with a recurring contribution."""
    db_path = get_db_path()
    snapshot = load_ready_snapshot(db_path)
    currency = currency_of(snapshot)

    if not name.strip():
        fail("Goal name is required")
    target_amount = require_money(target)
    valid, error = validate_amount(target_amount)
    if not valid:
        fail(error or "Invalid target")

    recurring: Money | None = None
    contribution_frequency: ContributionFrequency | None = None
    if contribution is not None:
        recurring = require_money(contribution)
        valid, error = validate_amount(recurring)
        if not valid:
            fail(error or "Invalid contribution")
        contribution_frequency = _parse_frequency(frequency or "monthly")
    elif frequency is not None:
        fail("--frequency needs a --contribution amount")

    try:
        goal_id = create_savings_goal(
            name.strip(),
            target_amount,
            icon=icon,
            recurring_contribution=recurring,
            contribution_frequency=contribution_frequency,
            db_path=db_path,
        )
    except sqlite3.Error as e:
        logger.error("Failed to create goal: %s", e)
        fail(f"Failed to create goal: {e}")

    console.print(
        f"[green]✓[/green] Goal {goal_id} created: {icon} {name.strip()} "
        f"(target {format_money(target_amount, currency)})"
    )
    if recurring is not None and contribution_frequency is not None:
        console.print(f"  Contributing {format_money(recurring, currency)} {contribution_frequency.value}")
        if contribution_frequency is not ContributionFrequency.MONTHLY:
            settings = get_settings()
            console.print(
                f"[dim]Planned on the 16th of each month "
                f"(contribution policy: {settings.contribution_policy.value})[/dim]"
            )


def goals_command() -> None:
    """List savings goals and their progress."""
    snapshot = load_ready_snapshot(get_db_path())
    currency = currency_of(snapshot)
    goals = snapshot.goals or ()

    if not goals:
        console.print("[yellow]No savings goals yet (use 'safespender goal-add')[/yellow]")
        return

    table = Table(title="Savings goals")
    table.add_column("ID", style="dim", justify="right")
    table.add_column("Goal", style="white")
    table.add_column("Saved", justify="right")
    table.add_column("Target", justify="right")
    table.add_column("Progress", justify="right")
    table.add_column("Contribution", style="cyan")

    for goal in goals:
        progress = calculate_goal_progress(goal)
        colour = "green" if progress >= 100 else "yellow"
        if goal.recurring_contribution and goal.contribution_frequency:
            plan = f"{format_money(goal.recurring_contribution, currency)} {goal.contribution_frequency.value}"
        else:
            plan = "[dim]-[/dim]"
        table.add_row(
            str(goal.id),
            f"{goal.icon} {goal.name}",
            format_money(goal.current_amount, currency),
            format_money(goal.target_amount, currency),
            f"[{colour}]{progress:.0f}%[/{colour}]",
            plan,
        )

    console.print(table)
    console.print(f"[dim]Total saved: {format_money(total_savings_balance(goals), currency)}[/dim]")


def contribute_command(goal_id: int, amount: str, on: str | None = None) -> None:
    """Move free-to-spend money into a goal."""
    settings = get_settings()
    db_path = get_db_path()
    snapshot = load_ready_snapshot(db_path)
    currency = currency_of(snapshot)
    goal = _find_goal(snapshot.goals, goal_id)
    movement_date = require_date(on)

    summary = compute_free_to_spend(snapshot, movement_date, settings.contribution_policy)
    if isinstance(summary, Loading):
        fail("Records are still loading, try again")

    amount_minor = require_money(amount)
    new_amount, error = calculate_contribution(amount_minor, goal.current_amount, summary.free_to_spend, currency)
    if error:
        fail(error)

    try:
        record_goal_movement(
            goal.id,
            new_amount,
            TransactionKind.SAVINGS,
            amount_minor,
            movement_date,
            f"Contribution to {goal.name}",
            category="savings",
            db_path=db_path,
        )
    except (sqlite3.Error, LookupError) as e:
        logger.error("Failed to contribute to goal %s: %s", goal.id, e)
        fail(f"Failed to contribute: {e}")

    console.print(
        f"[green]✓[/green] Added {format_money(amount_minor, currency)} to {goal.icon} {goal.name} "
        f"(now {format_money(new_amount, currency)} of {format_money(goal.target_amount, currency)})"
    )


def withdraw_command(goal_id: int, amount: str, on: str | None = None) -> None:
    """Take money out of a goal, making it spendable again."""
    db_path = get_db_path()
    snapshot = load_ready_snapshot(db_path)
    currency = currency_of(snapshot)
    goal = _find_goal(snapshot.goals, goal_id)
    movement_date = require_date(on)

    amount_minor = require_money(amount)
    new_amount, error = calculate_withdrawal(amount_minor, goal.current_amount, currency)
    if error:
        fail(error)

    try:
        record_goal_movement(
            goal.id,
            new_amount,
            TransactionKind.INCOME,
            amount_minor,
            movement_date,
            f"Withdrawal from {goal.name}",
            category=WITHDRAWAL_CATEGORY,
            db_path=db_path,
        )
    except (sqlite3.Error, LookupError) as e:
        logger.error("Failed to withdraw from goal %s: %s", goal.id, e)
        fail(f"Failed to withdraw: {e}")

    console.print(
        f"[green]✓[/green] Withdrew {format_money(amount_minor, currency)} from {goal.icon} {goal.name} "
        f"({format_money(new_amount, currency)} left)"
    )
    impact = calculate_goal_impact(goal, amount_minor)
    if impact is not None and goal.recurring_contribution:
        console.print(
            f"[dim]At {format_money(goal.recurring_contribution, currency)} per contribution, "
            f"{goal.name} now needs {impact.contributions_left} more "
            f"(about {impact.time_value} {impact.time_unit})[/dim]"
        )


def goal_delete_command(goal_id: int, yes: bool = False) -> None:
    """Delete a goal and return its balance to free-to-spend."""
    db_path = get_db_path()
    snapshot = load_ready_snapshot(db_path)
    currency = currency_of(snapshot)
    goal = _find_goal(snapshot.goals, goal_id)

    if not yes:
        console.print(
            f"Delete {goal.icon} {goal.name}? {format_money(recovered_on_delete(goal), currency)} "
            "will go back to free to spend."
        )
        if not typer.confirm("Delete this goal?", default=False):
            console.print("[dim]Cancelled[/dim]")
            return

    try:
        recovered = delete_savings_goal(goal.id, date.today(), db_path)
    except sqlite3.Error as e:
        logger.error("Failed to delete goal %s: %s", goal.id, e)
        fail(f"Failed to delete goal: {e}")

    if recovered is None:
        fail(f"Savings goal {goal_id} not found")
    console.print(f"[green]✓[/green] Deleted {goal.icon} {goal.name}")
    if recovered > 0:
        console.print(f"  {format_money(recovered, currency)} returned to free to spend")


def goal_edit_command(
    goal_id: int,
    name: str | None = None,
    target: str | None = None,
    icon: str | None = None,
    contribution: str | None = None,
    frequency: str | None = None,
    clear_contribution: bool = False,
) -> None:
    """Change a goal's name, icon, target or recurring contribution."""
    db_path = get_db_path()
    snapshot = load_ready_snapshot(db_path)
    currency = currency_of(snapshot)
    goal = _find_goal(snapshot.goals, goal_id)

    updated, error = apply_goal_changes(
        goal,
        name=name,
        target=require_money(target) if target is not None else None,
        icon=icon,
        contribution=require_money(contribution) if contribution is not None else None,
        frequency=_parse_frequency(frequency) if frequency is not None else None,
        clear_contribution=clear_contribution,
    )
    if error:
        fail(error)

    try:
        found = update_savings_goal(updated, db_path)
    except sqlite3.Error as e:
        logger.error("Failed to update goal %s: %s", goal.id, e)
        fail(f"Failed to update goal: {e}")

    if not found:
        fail(f"Savings goal {goal_id} not found")
    console.print(
        f"[green]✓[/green] Goal {updated.id} updated: {updated.icon} {updated.name} "
        f"(target {format_money(updated.target_amount, currency)})"
    )
    if updated.recurring_contribution and updated.contribution_frequency:
        console.print(
            f"  Contributing {format_money(updated.recurring_contribution, currency)} "
            f"{updated.contribution_frequency.value}"
        )
    else:
        console.print("  No recurring contribution")
