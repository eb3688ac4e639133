from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from models.errors import InvalidRuleError

FREQUENCIES = ("daily", "weekly", "biweekly", "monthly", "yearly")
RECURRENCE_TYPES = ("income", "expense")


@dataclass(frozen=True)
class RecurrenceRule:
    """Template for a repeating income or expense.

    The anchor day of monthly and yearly rules is ``start_date.day``; it is
    fixed here and never recomputed from later occurrences.
    """
    id: Optional[int]
    frequency: str
    start_date: date
    amount: Decimal
    type: str
    end_date: Optional[date] = None
    is_active: bool = True
    description: str = ""
    category_id: Optional[str] = None
    account_id: Optional[int] = None
    credit_card_id: Optional[str] = None
    user_id: Optional[str] = None
    next_occurrence: Optional[date] = None

    def __post_init__(self):
        if self.frequency not in FREQUENCIES:
            raise InvalidRuleError(f"Unknown frequency: {self.frequency!r}")
        if self.type not in RECURRENCE_TYPES:
            raise InvalidRuleError(f"Recurrence type must be income or expense, got {self.type!r}")
        if self.amount < 0:
            raise InvalidRuleError("Recurrence amount must not be negative")
        if self.end_date is not None and self.start_date > self.end_date:
            raise InvalidRuleError(
                f"start_date {self.start_date.isoformat()} is after end_date {self.end_date.isoformat()}"
            )

    @property
    def anchor_day(self) -> int:
        return self.start_date.day


@dataclass(frozen=True)
class Occurrence:
    """One due date of a rule. Never persisted unless materialized."""
    date: date
    source_recurrence_id: Optional[int]
