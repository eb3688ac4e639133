import os
import tempfile
from datetime import date
from decimal import Decimal

os.environ.setdefault(
    "BUDGET_LOG_FILE", os.path.join(tempfile.gettempdir(), "budget-projections-test.log")
)

import duckdb
import pytest

from db import init_db
from models.recurrence import RecurrenceRule
from repositories.accounts_repository import create_account
from repositories.recurrences_repository import create_recurrence, get_recurrence
from repositories.transactions_repository import insert_transaction

USER = "user-1"


@pytest.fixture
def conn():
    conn = duckdb.connect(":memory:")
    init_db(conn)
    yield conn
    conn.close()


def make_rule(**overrides):
    fields = {
        "id": 1,
        "frequency": "monthly",
        "start_date": date(2024, 1, 31),
        "amount": Decimal("100.00"),
        "type": "expense",
    }
    fields.update(overrides)
    return RecurrenceRule(**fields)


def add_account(conn, initial_balance, user_id=USER, **kwargs):
    return create_account(conn, user_id, "Checking", Decimal(initial_balance), **kwargs)


def add_tx(conn, on, type, amount, user_id=USER, **kwargs):
    return insert_transaction(conn, user_id, date=on, type=type, amount=Decimal(amount), **kwargs)


def add_recurrence(conn, user_id=USER, **overrides):
    rule = make_rule(id=None, **overrides)
    recurrence_id = create_recurrence(conn, user_id, rule)
    return get_recurrence(conn, user_id, recurrence_id)
