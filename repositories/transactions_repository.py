import logging

import duckdb

from db import fetch_dicts
from helpers.normalize import row_to_transaction
from models.errors import DataFetchError

# -----------------------------
# Transactions Repository
# -----------------------------

_COLUMNS = """
    id, user_id, type, status, amount, description, date, category_id,
    account_id, credit_card_id, recurrence_id, savings_goal_id, is_recurring
"""

def list_transactions(conn, user_id, date_from=None, date_to=None, before=None,
                      status_in=None, credit_card_id_is_null=False,
                      exclude_savings_goal=False):
    """
    Returns the user's transactions ordered by date.
    - date_from / date_to: inclusive bounds
    - before: strict upper bound (date < before)
    - status_in: optional iterable of statuses
    - credit_card_id_is_null: only rows not tied to a credit card
    - exclude_savings_goal: drop rows tied to a savings goal
    """
    query = f"SELECT {_COLUMNS} FROM transactions WHERE user_id = ?"
    params = [user_id]

    if date_from is not None:
        query += " AND date >= ?"
        params.append(date_from)
    if date_to is not None:
        query += " AND date <= ?"
        params.append(date_to)
    if before is not None:
        query += " AND date < ?"
        params.append(before)
    if status_in:
        statuses = list(status_in)
        query += f" AND status IN ({', '.join('?' for _ in statuses)})"
        params.extend(statuses)
    if credit_card_id_is_null:
        query += " AND credit_card_id IS NULL"
    if exclude_savings_goal:
        query += " AND savings_goal_id IS NULL"

    query += " ORDER BY date, id"

    return [row_to_transaction(r) for r in fetch_dicts(conn, query, params)]


def list_recurrence_dates(conn, user_id, recurrence_id):
    """Return the set of dates already materialized for a recurrence."""
    rows = fetch_dicts(
        conn,
        "SELECT date FROM transactions WHERE user_id = ? AND recurrence_id = ?",
        [user_id, recurrence_id],
    )
    return {r["date"] for r in rows}


def _insert(conn, user_id, date, type, amount, status="confirmed",
            description="", category_id=None, account_id=None,
            credit_card_id=None, recurrence_id=None,
            savings_goal_id=None, is_recurring=False):
    # Raw insert; a second row for the same (recurrence_id, date) raises
    # duckdb.ConstraintException.
    row = conn.execute(
        """
        INSERT INTO transactions
        (user_id, type, status, amount, description, date, category_id,
         account_id, credit_card_id, recurrence_id, savings_goal_id, is_recurring)
        VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        RETURNING id
        """,
        [user_id, type, status, amount, description, date, category_id,
         account_id, credit_card_id, recurrence_id, savings_goal_id, is_recurring]
    ).fetchone()
    return row[0]


def insert_transaction(conn, user_id, date, type, amount, **fields):
    """
    Inserts a transaction and returns its id.
    Any store rejection is raised as DataFetchError.
    """
    try:
        return _insert(conn, user_id, date, type, amount, **fields)
    except duckdb.Error as e:
        logging.error(f"Transaction insert failed: {e}")
        raise DataFetchError(str(e)) from e


def insert_transactions(conn, rows):
    """
    Insert many transactions (dicts of insert_transaction kwargs).
    Rows colliding on (recurrence_id, date) are already materialized and
    counted as skipped. Returns (inserted, skipped).
    """
    inserted = 0
    skipped = 0
    for row in rows:
        try:
            _insert(conn, **row)
            inserted += 1
        except duckdb.ConstraintException as e:
            if "unique" not in str(e).lower():
                logging.error(f"Transaction insert rejected: {e}")
                raise DataFetchError(str(e)) from e
            skipped += 1
            logging.info(
                f"Recurrence {row.get('recurrence_id')} already materialized on {row.get('date')}"
            )
        except duckdb.Error as e:
            logging.error(f"Transaction insert failed: {e}")
            raise DataFetchError(str(e)) from e
    return inserted, skipped
