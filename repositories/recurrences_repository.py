import logging

import duckdb

from db import fetch_dicts
from helpers.normalize import row_to_recurrence
from models.errors import DataFetchError

# -----------------------------
# Recurrences Repository
# -----------------------------

_COLUMNS = """
    id, user_id, type, amount, description, category_id, account_id,
    credit_card_id, frequency, start_date, end_date, next_occurrence, is_active
"""


def list_recurrences(conn, user_id, is_active=True, credit_card_id_is_null=False):
    """
    Return the user's recurrences as RecurrenceRule objects, ordered by id.

    Args:
        conn: Database connection.
        user_id: Owner of the recurrences.
        is_active: Filter on the active flag; None returns both.
        credit_card_id_is_null: Only recurrences not billed to a credit card.
    """
    query = f"SELECT {_COLUMNS} FROM recurrences WHERE user_id = ?"
    params = [user_id]

    if is_active is not None:
        query += " AND is_active = ?"
        params.append(is_active)
    if credit_card_id_is_null:
        query += " AND credit_card_id IS NULL"

    query += " ORDER BY id"
    return [row_to_recurrence(r) for r in fetch_dicts(conn, query, params)]


def get_recurrence(conn, user_id, recurrence_id):
    """
    Return a single recurrence or None if the user has no such rule.
    """
    rows = fetch_dicts(
        conn,
        f"SELECT {_COLUMNS} FROM recurrences WHERE user_id = ? AND id = ?",
        [user_id, recurrence_id],
    )
    return row_to_recurrence(rows[0]) if rows else None


def create_recurrence(conn, user_id, rule):
    """
    Persist a validated RecurrenceRule and return its new id.
    """
    try:
        row = conn.execute(
            """
            INSERT INTO recurrences
            (user_id, type, amount, description, category_id, account_id,
             credit_card_id, frequency, start_date, end_date, next_occurrence, is_active)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            RETURNING id
            """,
            [user_id, rule.type, rule.amount, rule.description, rule.category_id,
             rule.account_id, rule.credit_card_id, rule.frequency, rule.start_date,
             rule.end_date, rule.start_date, rule.is_active],
        ).fetchone()
    except duckdb.Error as e:
        logging.error(f"Recurrence insert failed: {e}")
        raise DataFetchError(str(e)) from e
    return row[0]


def set_recurrence_active(conn, user_id, recurrence_id, is_active):
    _update(conn, "UPDATE recurrences SET is_active = ? WHERE user_id = ? AND id = ?",
            [is_active, user_id, recurrence_id])


def update_next_occurrence(conn, user_id, recurrence_id, next_occurrence):
    _update(conn, "UPDATE recurrences SET next_occurrence = ? WHERE user_id = ? AND id = ?",
            [next_occurrence, user_id, recurrence_id])


def _update(conn, query, params):
    try:
        conn.execute(query, params)
    except duckdb.Error as e:
        logging.error(f"Recurrence update failed: {e}")
        raise DataFetchError(str(e)) from e
