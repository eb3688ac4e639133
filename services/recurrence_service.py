import logging
from datetime import date

import config
from models.projection_dto import MaterializationResult
from models.recurrence import RecurrenceRule
from repositories.recurrences_repository import (
    create_recurrence as repo_create_recurrence,
    get_recurrence as repo_get_recurrence,
    list_recurrences,
    set_recurrence_active as repo_set_recurrence_active,
    update_next_occurrence,
)
from repositories.transactions_repository import (
    insert_transactions,
    list_recurrence_dates,
)
from services.occurrence_service import enumerate_dates, next_occurrence
from utils.dates import add_months


def _pending_row(user_id, rule, occurrence_date):
    return {
        "user_id": user_id,
        "date": occurrence_date,
        "type": rule.type,
        "amount": rule.amount,
        "status": "pending",
        "description": rule.description,
        "category_id": rule.category_id,
        "account_id": rule.account_id,
        "credit_card_id": rule.credit_card_id,
        "recurrence_id": rule.id,
        "is_recurring": True,
    }


def create_recurrence(conn, user_id, **fields) -> RecurrenceRule:
    """Validate, persist, and materialize the first occurrence on ``start_date``.

    Raises InvalidRuleError before anything is written.
    """
    rule = RecurrenceRule(id=None, user_id=user_id, **fields)
    recurrence_id = repo_create_recurrence(conn, user_id, rule)
    saved = repo_get_recurrence(conn, user_id, recurrence_id)

    if saved.is_active:
        insert_transactions(conn, [_pending_row(user_id, saved, saved.start_date)])
    logging.info(f"Recurrence {recurrence_id} created for user={user_id} ({saved.frequency})")
    return saved


def get_recurrence(conn, user_id, recurrence_id):
    return repo_get_recurrence(conn, user_id, recurrence_id)


def set_recurrence_active(conn, user_id, recurrence_id, is_active):
    """Toggle a rule; returns the updated rule or None if it does not exist."""
    if repo_get_recurrence(conn, user_id, recurrence_id) is None:
        return None
    repo_set_recurrence_active(conn, user_id, recurrence_id, is_active)
    return repo_get_recurrence(conn, user_id, recurrence_id)


def materialize_recurrence(conn, user_id, rule, today=None, months_ahead=None):
    """
    Write pending transactions for every due date of ``rule`` through
    ``months_ahead`` months past ``today``, resuming from the latest date
    already in the ledger (or ``start_date`` on the first run).

    Dates already in the ledger are left alone; a concurrent writer that got
    there first shows up as a skipped row, not an error.
    """
    today = today or date.today()
    months_ahead = config.DEFAULT_MONTHS_AHEAD if months_ahead is None else months_ahead

    if rule.start_date > today:
        if rule.next_occurrence != rule.start_date:
            update_next_occurrence(conn, user_id, rule.id, rule.start_date)
        return MaterializationResult(
            recurrence_id=rule.id, inserted=0, skipped=0, next_occurrence=rule.start_date
        )

    horizon = add_months(today, months_ahead)
    existing = list_recurrence_dates(conn, user_id, rule.id)
    resume_from = max(existing) if existing else rule.start_date
    due = enumerate_dates(rule, resume_from, horizon)
    missing = [d for d in due if d not in existing]

    inserted, skipped = insert_transactions(
        conn, [_pending_row(user_id, rule, d) for d in missing]
    )

    following = rule.next_occurrence
    known = existing | set(missing)
    if known:
        following = next_occurrence(max(known), rule.frequency, rule.anchor_day)
        update_next_occurrence(conn, user_id, rule.id, following)

    if inserted or skipped:
        logging.info(
            f"Recurrence {rule.id}: materialized {inserted}, "
            f"{skipped} already present, next {following}"
        )

    return MaterializationResult(
        recurrence_id=rule.id, inserted=inserted, skipped=skipped, next_occurrence=following
    )


def process_recurrences(conn, user_id, today=None, months_ahead=None):
    """Materialize every active recurrence of the user. Returns one result per rule."""
    return [
        materialize_recurrence(conn, user_id, rule, today=today, months_ahead=months_ahead)
        for rule in list_recurrences(conn, user_id, is_active=True)
    ]
