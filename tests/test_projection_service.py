import random
from datetime import date
from decimal import Decimal

import pytest

from conftest import USER, add_account, add_recurrence, add_tx
from models.errors import DataFetchError
from services.projection_service import project, project_month


def test_income_and_expense_over_initial_balance(conn):
    add_account(conn, "1000.00")
    add_tx(conn, date(2024, 1, 10), "income", "500.00")
    add_tx(conn, date(2024, 1, 15), "expense", "200.00")

    result = project(conn, USER, date(2024, 1, 1), date(2024, 1, 31))

    assert result.initial_balance == Decimal("1000.00")
    assert result.projected_income == Decimal("500.00")
    assert result.projected_expenses == Decimal("200.00")
    assert result.projected_balance == Decimal("1300.00")


def test_materialized_occurrence_is_not_counted_twice(conn):
    add_account(conn, "0")
    rule = add_recurrence(conn, start_date=date(2024, 1, 5), amount=Decimal("100.00"))
    add_tx(conn, date(2024, 2, 5), "expense", "100.00",
           status="pending", recurrence_id=rule.id, is_recurring=True)

    february = project_month(conn, USER, date(2024, 2, 1))
    march = project_month(conn, USER, date(2024, 3, 1))

    assert february.projected_expenses == Decimal("100.00")
    assert [t.is_projected for t in february.expense_transactions] == [False]
    assert march.projected_expenses == Decimal("100.00")
    assert [(t.date, t.is_projected) for t in march.expense_transactions] == [
        (date(2024, 3, 5), True)
    ]


def test_initial_balance_folds_ledger_before_period(conn):
    add_account(conn, "1000.00")
    add_account(conn, "500.00", is_archived=True)
    add_account(conn, "250.00", include_in_total=False)
    add_account(conn, "9999.00", user_id="someone-else")

    add_tx(conn, date(2023, 12, 1), "income", "300.00")
    add_tx(conn, date(2023, 12, 2), "expense", "50.00", status="pending")
    add_tx(conn, date(2023, 12, 3), "transfer", "20.00")
    add_tx(conn, date(2023, 12, 4), "adjustment", "999.00")
    add_tx(conn, date(2023, 12, 5), "expense", "70.00", credit_card_id="card-1")
    add_tx(conn, date(2023, 12, 6), "expense", "40.00", savings_goal_id="goal-1")

    result = project_month(conn, USER, date(2024, 1, 1))

    assert result.initial_balance == Decimal("1230.00")
    assert result.has_projected_initial_balance is True
    assert result.pending_count_before_period == 1
    assert result.projected_balance == Decimal("1230.00")


def test_period_excludes_cards_goals_and_transfers(conn):
    add_account(conn, "100.00")
    add_tx(conn, date(2024, 1, 3), "expense", "10.00")
    add_tx(conn, date(2024, 1, 4), "expense", "70.00", credit_card_id="card-1")
    add_tx(conn, date(2024, 1, 5), "expense", "40.00", savings_goal_id="goal-1")
    add_tx(conn, date(2024, 1, 6), "transfer", "25.00")
    add_recurrence(conn, start_date=date(2024, 1, 7), credit_card_id="card-1")
    add_recurrence(conn, start_date=date(2024, 1, 8), is_active=False)

    result = project_month(conn, USER, date(2024, 1, 1))

    assert [t.amount for t in result.expense_transactions] == [Decimal("10.00")]
    assert result.income_transactions == []
    assert result.projected_balance == Decimal("90.00")


def test_partitions_are_sorted_by_date(conn):
    add_account(conn, "0")
    add_tx(conn, date(2024, 1, 20), "income", "50.00")
    add_recurrence(conn, type="income", start_date=date(2024, 1, 5), amount=Decimal("75.00"))
    add_recurrence(conn, frequency="weekly", start_date=date(2024, 1, 1), amount=Decimal("5.00"))

    result = project_month(conn, USER, date(2024, 1, 15))

    assert [t.date for t in result.income_transactions] == [date(2024, 1, 5), date(2024, 1, 20)]
    expense_dates = [t.date for t in result.expense_transactions]
    assert expense_dates == sorted(expense_dates)
    assert len(expense_dates) == 5
    assert result.projected_expenses == Decimal("25.00")


def test_balance_identity_holds_exactly(conn):
    rng = random.Random(7)
    add_account(conn, "1234.56")

    expected_income = Decimal("0")
    expected_expenses = Decimal("0")
    for _ in range(60):
        day = date(2024, rng.randint(1, 6), rng.randint(1, 28))
        kind = rng.choice(["income", "expense"])
        amount = Decimal(rng.randint(1, 500000)) / 100
        add_tx(conn, day, kind, amount, status=rng.choice(["confirmed", "pending"]))
        if date(2024, 4, 1) <= day <= date(2024, 4, 30):
            if kind == "income":
                expected_income += amount
            else:
                expected_expenses += amount

    result = project_month(conn, USER, date(2024, 4, 1))

    assert result.projected_income == expected_income
    assert result.projected_expenses == expected_expenses
    assert result.projected_balance == (
        result.initial_balance + result.projected_income - result.projected_expenses
    )


def test_failed_fetch_fails_the_whole_projection(conn):
    add_account(conn, "100.00")
    conn.execute("DROP TABLE transactions")

    with pytest.raises(DataFetchError):
        project_month(conn, USER, date(2024, 1, 1))
