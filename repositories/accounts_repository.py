import logging

import duckdb

from db import fetch_dicts
from helpers.normalize import row_to_account
from models.errors import DataFetchError

# -----------------------------
# Accounts Repository
# -----------------------------

def list_accounts(conn, user_id, include_in_total=True, is_archived=False):
    """Return the user's accounts matching both flags, ordered by name."""
    rows = fetch_dicts(
        conn,
        """
        SELECT id, user_id, name, initial_balance, include_in_total, is_archived
        FROM accounts
        WHERE user_id = ? AND include_in_total = ? AND is_archived = ?
        ORDER BY name
        """,
        [user_id, include_in_total, is_archived],
    )
    return [row_to_account(r) for r in rows]


def create_account(conn, user_id, name, initial_balance,
                   include_in_total=True, is_archived=False):
    """Insert an account and return its id."""
    try:
        row = conn.execute(
            """
            INSERT INTO accounts (user_id, name, initial_balance, include_in_total, is_archived)
            VALUES (?, ?, ?, ?, ?)
            RETURNING id
            """,
            [user_id, name, initial_balance, include_in_total, is_archived],
        ).fetchone()
    except duckdb.Error as e:
        logging.error(f"Account insert failed: {e}")
        raise DataFetchError(str(e)) from e
    return row[0]
