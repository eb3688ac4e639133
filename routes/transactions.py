import datetime
from decimal import Decimal
from typing import Literal, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field, field_validator

from db import get_conn
from repositories.accounts_repository import create_account
from repositories.transactions_repository import insert_transaction
from utils.money import parse_money

router = APIRouter()


def _money(value):
    return parse_money(value) if isinstance(value, str) else value


class AccountCreate(BaseModel):
    name: str
    initial_balance: Decimal = Field(default=Decimal("0"), max_digits=14, decimal_places=2)
    include_in_total: bool = True
    is_archived: bool = False

    @field_validator("initial_balance", mode="before")
    @classmethod
    def _parse_balance(cls, value):
        return _money(value)


class TransactionCreate(BaseModel):
    date: datetime.date
    type: Literal["income", "expense", "transfer", "adjustment"]
    amount: Decimal = Field(ge=0, max_digits=14, decimal_places=2)
    status: Literal["confirmed", "pending"] = "confirmed"
    description: str = ""
    category_id: Optional[str] = None
    account_id: Optional[int] = None
    credit_card_id: Optional[str] = None
    savings_goal_id: Optional[str] = None

    @field_validator("amount", mode="before")
    @classmethod
    def _parse_amount(cls, value):
        return _money(value)


# -------------------------
# ACCOUNTS
# -------------------------

@router.post("/accounts/{user_id}", status_code=201)
def add_account(user_id: str, body: AccountCreate, conn=Depends(get_conn)):
    account_id = create_account(
        conn, user_id, body.name.strip(), body.initial_balance,
        include_in_total=body.include_in_total, is_archived=body.is_archived,
    )
    return {"success": True, "id": account_id}


# -------------------------
# MANUAL TRANSACTIONS
# -------------------------

@router.post("/transactions/{user_id}", status_code=201)
def add_transaction(user_id: str, body: TransactionCreate, conn=Depends(get_conn)):
    transaction_id = insert_transaction(
        conn, user_id,
        date=body.date,
        type=body.type,
        amount=body.amount,
        status=body.status,
        description=body.description.strip(),
        category_id=body.category_id,
        account_id=body.account_id,
        credit_card_id=body.credit_card_id,
        savings_goal_id=body.savings_goal_id,
    )
    return {"success": True, "id": transaction_id}
