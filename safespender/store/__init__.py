"""Database store layer - provides persistence for the application.

This module re-exports all public database functions for easy importing.
"""

from safespender.store.queries import (
    clear_salary_schedule,
    create_expense_definition,
    create_savings_goal,
    create_transaction,
    delete_expense_definition,
    delete_savings_goal,
    delete_transaction,
    get_financial_profile,
    get_salary_schedule,
    get_savings_goal,
    list_expense_definitions,
    list_savings_goals,
    list_transactions,
    load_snapshot,
    record_goal_movement,
    save_financial_profile,
    set_salary_schedule,
    update_expense_definition,
    update_savings_goal,
    update_transaction,
)
from safespender.store.schema import database_exists, get_db_path, init_database

__all__ = [
    # Schema
    "database_exists",
    "get_db_path",
    "init_database",
    # Queries
    "clear_salary_schedule",
    "create_expense_definition",
    "create_savings_goal",
    "create_transaction",
    "delete_expense_definition",
    "delete_savings_goal",
    "delete_transaction",
    "get_financial_profile",
    "get_salary_schedule",
    "get_savings_goal",
    "list_expense_definitions",
    "list_savings_goals",
    "list_transactions",
    "load_snapshot",
    "record_goal_movement",
    "save_financial_profile",
    "set_salary_schedule",
    "update_expense_definition",
    "update_savings_goal",
    "update_transaction",
]
