import logging
from datetime import date

from models.projection_dto import ProjectionResult, ProjectionTransaction
from repositories.accounts_repository import list_accounts
from repositories.recurrences_repository import list_recurrences
from repositories.transactions_repository import list_transactions
from services.occurrence_service import enumerate_occurrences
from utils.dates import month_bounds
from utils.money import ZERO, sum_money

LEDGER_STATUSES = ("confirmed", "pending")


def balance_effect(tx):
    """Signed contribution of a ledger row to the aggregate balance.

    Transfers count as outflows: their destination may sit outside the
    aggregated accounts.
    """
    if tx.type == "income":
        return tx.amount
    if tx.type in ("expense", "transfer"):
        return -tx.amount
    return ZERO


def _from_transaction(tx) -> ProjectionTransaction:
    return ProjectionTransaction(
        id=tx.id,
        date=tx.date,
        type=tx.type,
        description=tx.description,
        amount=tx.amount,
        status=tx.status,
        is_recurring=tx.is_recurring,
        recurrence_id=tx.recurrence_id,
        category_id=tx.category_id,
    )


def _from_occurrence(rule, occurrence) -> ProjectionTransaction:
    return ProjectionTransaction(
        id=None,
        date=occurrence.date,
        type=rule.type,
        description=rule.description,
        amount=rule.amount,
        status="pending",
        is_recurring=True,
        recurrence_id=rule.id,
        category_id=rule.category_id,
        is_projected=True,
    )


def project(conn, user_id, period_start: date, period_end: date) -> ProjectionResult:
    """Projected balance of ``user_id``'s aggregated accounts over a period.

    Pure function of the store's state at call time: no writes, inclusive
    window, recurrences expanded and deduplicated against materialized rows.
    """
    # --- starting balance: account baselines + ledger before the period ---
    accounts = list_accounts(conn, user_id, include_in_total=True, is_archived=False)
    account_baseline = sum_money(a.initial_balance for a in accounts)

    before = list_transactions(
        conn, user_id,
        before=period_start,
        status_in=LEDGER_STATUSES,
        credit_card_id_is_null=True,
        exclude_savings_goal=True,
    )
    initial_balance = account_baseline + sum((balance_effect(t) for t in before), ZERO)
    pending_before = sum(1 for t in before if t.status == "pending")

    # --- the period itself ---
    in_period = list_transactions(
        conn, user_id,
        date_from=period_start,
        date_to=period_end,
        credit_card_id_is_null=True,
        exclude_savings_goal=True,
    )
    recurrences = list_recurrences(conn, user_id, is_active=True, credit_card_id_is_null=True)

    materialized = {
        (t.recurrence_id, t.date) for t in in_period if t.recurrence_id is not None
    }

    merged = [_from_transaction(t) for t in in_period]
    for rule in recurrences:
        for occurrence in enumerate_occurrences(rule, period_start, period_end):
            if (occurrence.source_recurrence_id, occurrence.date) in materialized:
                continue
            merged.append(_from_occurrence(rule, occurrence))

    income = sorted((t for t in merged if t.type == "income"), key=lambda t: t.date)
    expenses = sorted((t for t in merged if t.type == "expense"), key=lambda t: t.date)

    projected_income = sum_money(t.amount for t in income)
    projected_expenses = sum_money(t.amount for t in expenses)
    projected_balance = initial_balance + projected_income - projected_expenses

    logging.info(
        f"Projection user={user_id} {period_start.isoformat()}..{period_end.isoformat()}: "
        f"initial={initial_balance} income={projected_income} "
        f"expenses={projected_expenses} balance={projected_balance}"
    )

    return ProjectionResult(
        period_start=period_start,
        period_end=period_end,
        initial_balance=initial_balance,
        projected_income=projected_income,
        projected_expenses=projected_expenses,
        projected_balance=projected_balance,
        income_transactions=income,
        expense_transactions=expenses,
        has_projected_initial_balance=pending_before > 0,
        pending_count_before_period=pending_before,
    )


def project_month(conn, user_id, month: date) -> ProjectionResult:
    """Projection over the calendar month containing ``month``."""
    first_day, last_day = month_bounds(month)
    return project(conn, user_id, first_day, last_day)
