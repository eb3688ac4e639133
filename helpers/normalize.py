# helpers/normalize.py
from models.recurrence import RecurrenceRule
from models.transaction import Account, Transaction
from utils.money import to_money


def row_to_account(row: dict) -> Account:
    """
    Convert an accounts row into the canonical Account model
    """
    return Account(
        id=row["id"],
        name=row["name"],
        initial_balance=to_money(row["initial_balance"]),
        include_in_total=bool(row["include_in_total"]),
        is_archived=bool(row["is_archived"]),
        user_id=row.get("user_id"),
    )


def row_to_transaction(row: dict) -> Transaction:
    return Transaction(
        id=row["id"],
        date=row["date"],
        type=row["type"],
        amount=to_money(row["amount"]),
        status=row["status"],
        description=row.get("description") or "",
        category_id=row.get("category_id"),
        account_id=row.get("account_id"),
        recurrence_id=row.get("recurrence_id"),
        savings_goal_id=row.get("savings_goal_id"),
        credit_card_id=row.get("credit_card_id"),
        is_recurring=bool(row.get("is_recurring")),
        user_id=row.get("user_id"),
    )


def row_to_recurrence(row: dict) -> RecurrenceRule:
    """
    Convert a recurrences row into a validated RecurrenceRule.
    A stored row that violates the rule invariants raises InvalidRuleError.
    """
    return RecurrenceRule(
        id=row["id"],
        frequency=row["frequency"],
        start_date=row["start_date"],
        end_date=row.get("end_date"),
        is_active=bool(row["is_active"]),
        amount=to_money(row["amount"]),
        type=row["type"],
        description=row.get("description") or "",
        category_id=row.get("category_id"),
        account_id=row.get("account_id"),
        credit_card_id=row.get("credit_card_id"),
        user_id=row.get("user_id"),
        next_occurrence=row.get("next_occurrence"),
    )
