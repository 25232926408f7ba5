"""End-to-end tests for the safespender commands against a temporary database."""

from pathlib import Path

import pytest
from typer.testing import CliRunner

from safespender.cli import app
from safespender.store.queries import list_expense_definitions, list_savings_goals, list_transactions
from safespender.store.schema import get_db_path

runner = CliRunner()


def run(*args: str) -> str:
    result = runner.invoke(app, list(args))
    assert result.exit_code == 0, result.output
    return result.output


def run_failing(*args: str) -> str:
    result = runner.invoke(app, list(args))
    assert result.exit_code == 1, result.output
    return result.output


@pytest.fixture(autouse=True)
def workspace(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    run("init", "--start-date", "2024-01-01", "--currency", "GBP")
    return tmp_path


def monthly_salary() -> None:
    run("salary", "--schedule", "monthly", "--day", "1", "--paycheck", "1000")


class TestSummaryCommand:
    """Tests for the summary command."""

    def test_last_income_shown_without_salary(self) -> None:
        run("add-income", "500", "Gift", "--date", "2024-01-05")

        output = run("summary", "--today", "2024-01-10")

        assert "Last income: 2024-01-05" in output
        assert "No salary schedule configured" in output

    def test_withdrawal_keeps_reserved_bills(self) -> None:
        monthly_salary()
        run("add-expense", "300", "Shopping", "--date", "2024-01-05")
        run("goal-add", "Bike", "2000")
        run("contribute", "1", "100", "--date", "2024-01-06")
        run("withdraw", "1", "0.01", "--date", "2024-01-10")

        output = run("summary", "--today", "2024-01-10")

        assert "Last income: 2024-01-01" in output
        assert "£600.01" in output


class TestGoalCommands:
    """Tests for contribute and goal-edit."""

    def test_contribution_checked_against_its_own_date(self) -> None:
        """On 10 January only one paycheck has arrived, whatever today is."""
        monthly_salary()
        run("goal-add", "Bike", "2000")

        output = run_failing("contribute", "1", "1500", "--date", "2024-01-10")

        assert "exceeds your available balance" in output
        assert list_savings_goals(get_db_path())[0].current_amount == 0

    def test_goal_edit(self) -> None:
        run("goal-add", "Bike", "2000")

        run("goal-edit", "1", "--name", "Road bike", "--contribution", "25", "--frequency", "weekly")

        goal = list_savings_goals(get_db_path())[0]
        assert goal.name == "Road bike"
        assert goal.recurring_contribution == 2500
        assert goal.contribution_frequency is not None
        assert goal.contribution_frequency.value == "weekly"

    def test_goal_edit_clears_contribution(self) -> None:
        run("goal-add", "Bike", "2000", "--contribution", "25")

        run("goal-edit", "1", "--no-contribution")

        assert list_savings_goals(get_db_path())[0].recurring_contribution is None

    def test_goal_edit_unknown_goal(self) -> None:
        assert "not found" in run_failing("goal-edit", "9", "--name", "Car")


class TestBillCommands:
    """Tests for add-bill and bill-edit."""

    def test_bill_edit(self) -> None:
        run("add-bill", "Gym", "30", "--day", "5", "--date", "2024-01-01")

        run("bill-edit", "1", "--amount", "35", "--end-date", "2024-06-30")

        bill = list_expense_definitions(get_db_path())[0]
        assert bill.amount == 3500
        assert bill.day_of_month == 5
        assert bill.end_date is not None
        assert bill.end_date.isoformat() == "2024-06-30"

    def test_bill_edit_end_before_start(self) -> None:
        run("add-bill", "Gym", "30", "--day", "5", "--date", "2024-03-01")

        assert "before the bill starts" in run_failing("bill-edit", "1", "--end-date", "2024-02-01")

    def test_monthly_bill_not_reserved_before_it_starts(self) -> None:
        monthly_salary()
        run("add-bill", "Rent", "300", "--day", "10", "--date", "2024-03-01")

        output = run("summary", "--today", "2024-02-15")

        assert "£2,000.00" in output
        assert "-£300.00" not in output


class TestAdvanceCommand:
    """Tests for the advance command."""

    def test_shows_limit(self) -> None:
        monthly_salary()

        output = run("advance", "--date", "2024-01-10")

        assert "You can advance up to £500.00" in output

    def test_over_limit_rejected(self) -> None:
        monthly_salary()

        assert "exceeds the limit" in run_failing("advance", "600", "--date", "2024-01-10")
        assert list_transactions(get_db_path()) == []

    def test_records_advance(self) -> None:
        monthly_salary()

        run("advance", "300", "--reason", "Boiler", "--date", "2024-01-10")

        txn = list_transactions(get_db_path())[0]
        assert txn.category == "advance"
        assert txn.description == "Boiler"
        assert "up to £200.00" in run("advance", "--date", "2024-01-10")

    def test_needs_salary(self) -> None:
        assert "No next paycheck" in run_failing("advance", "--date", "2024-01-10")


class TestSalaryCommand:
    """Tests for showing the salary schedule."""

    def test_show_without_schedule(self) -> None:
        assert "No salary schedule configured" in run("salary")

    def test_show_schedule(self) -> None:
        run("salary", "--day", "15", "--paycheck", "1000", "--day", "30", "--paycheck", "900")

        output = run("salary")

        assert "Average paycheck: £950.00" in output


class TestTransactionCommands:
    """Tests for add-income."""

    def test_internal_category_rejected(self) -> None:
        assert "reserved" in run_failing("add-income", "10", "Gift", "--category", "advance")
