from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional


@dataclass
class Transaction:
    id: Optional[int]
    date: date
    type: str               # 'income' | 'expense' | 'transfer' | 'adjustment'
    amount: Decimal         # always a non-negative magnitude
    status: str             # 'confirmed' | 'pending'
    description: str = ""
    category_id: Optional[str] = None
    account_id: Optional[int] = None
    recurrence_id: Optional[int] = None
    savings_goal_id: Optional[str] = None
    credit_card_id: Optional[str] = None
    is_recurring: bool = False
    user_id: Optional[str] = None


@dataclass
class Account:
    id: int
    name: str
    initial_balance: Decimal
    include_in_total: bool = True
    is_archived: bool = False
    user_id: Optional[str] = None
