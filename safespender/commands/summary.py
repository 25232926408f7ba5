"""Summary and upcoming commands: the dashboard figures."""

from rich.panel import Panel
from rich.table import Table

from safespender.commands.common import console, currency_of, get_settings, load_ready_snapshot, require_date
from safespender.domain.models import Loading, TransactionKind, format_money
from safespender.domain.summary import compute_free_to_spend
from safespender.domain.upcoming import upcoming_bills, upcoming_events
from safespender.store.schema import get_db_path


def summary_command(today: str | None = None) -> None:
    """Show free-to-spend and the figures it is built from."""
    settings = get_settings()
    snapshot = load_ready_snapshot(get_db_path())
    currency = currency_of(snapshot)
    as_of = require_date(today)

    summary = compute_free_to_spend(snapshot, as_of, settings.contribution_policy)
    if isinstance(summary, Loading):
        console.print("[yellow]Still loading your records...[/yellow]")
        return

    colour = "red" if summary.is_over_budget else "green"
    headline = f"[bold {colour}]{format_money(summary.free_to_spend, currency)}[/bold {colour}] free to spend"
    if summary.is_over_budget:
        headline += f"\n[red]Over budget by {format_money(-summary.raw_free_to_spend, currency)}[/red]"
    console.print(Panel(headline, title=f"As of {as_of.isoformat()}", expand=False))

    table = Table(show_header=False, box=None)
    table.add_column("Figure", style="cyan")
    table.add_column("Amount", justify="right")
    table.add_row("Income received", f"[green]{format_money(summary.total_income, currency)}[/green]")
    table.add_row("Reserved for bills", f"[red]-{format_money(summary.reserved_for_bills, currency)}[/red]")
    table.add_row("Assigned to savings", f"[blue]-{format_money(summary.assigned_to_savings, currency)}[/blue]")
    table.add_row("Current balance", format_money(summary.current_balance, currency))
    console.print(table)

    if summary.last_income_date:
        console.print(f"\n[dim]Last income: {summary.last_income_date.isoformat()}[/dim]")
    if snapshot.salary is None:
        console.print("[dim]No salary schedule configured (use 'safespender salary')[/dim]")
        return

    if summary.next_income_date:
        console.print(
            f"[dim]Next income: {format_money(summary.next_income_amount, currency)} "
            f"on {summary.next_income_date.isoformat()}[/dim]"
        )


def upcoming_command(today: str | None = None, limit: int = 3) -> None:
    """Show bills due before the next paycheck and upcoming events."""
    snapshot = load_ready_snapshot(get_db_path())
    currency = currency_of(snapshot)
    as_of = require_date(today)

    bills = upcoming_bills(snapshot, as_of)
    events = upcoming_events(snapshot, as_of, limit)
    if isinstance(bills, Loading) or isinstance(events, Loading):
        console.print("[yellow]Still loading your records...[/yellow]")
        return

    if bills:
        table = Table(title="Bills before next paycheck")
        table.add_column("Due", style="cyan")
        table.add_column("Bill", style="white")
        table.add_column("Category", style="magenta")
        table.add_column("Amount", justify="right")
        for bill in bills:
            table.add_row(
                bill.date.isoformat(),
                bill.title + (" [dim](monthly)[/dim]" if bill.recurring else ""),
                bill.category,
                f"[red]{format_money(bill.amount, currency)}[/red]",
            )
        console.print(table)
        total = sum(bill.amount for bill in bills)
        console.print(f"[dim]Total due: {format_money(total, currency)}[/dim]\n")
    else:
        console.print("[green]No bills due before your next paycheck[/green]\n")

    if not events:
        console.print("[dim]Nothing else coming up[/dim]")
        return

    table = Table(title="Coming up")
    table.add_column("Date", style="cyan")
    table.add_column("What", style="white")
    table.add_column("Amount", justify="right")
    for event in events:
        if event.kind is TransactionKind.INCOME:
            amount_display = f"[green]+{format_money(event.amount, currency)}[/green]"
        else:
            amount_display = f"[red]-{format_money(event.amount, currency)}[/red]"
        title = event.title + (" [dim](recurring)[/dim]" if event.recurring else "")
        table.add_row(event.date.isoformat(), title, amount_display)
    console.print(table)
