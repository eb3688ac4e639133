from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import List, Optional


@dataclass
class ProjectionTransaction:
    id: Optional[int]
    date: date
    type: str
    description: str
    amount: Decimal
    status: str
    is_recurring: bool = False
    recurrence_id: Optional[int] = None
    category_id: Optional[str] = None
    is_projected: bool = False  # synthesized from a recurrence, not in the ledger


@dataclass
class ProjectionResult:
    period_start: date
    period_end: date
    initial_balance: Decimal
    projected_income: Decimal
    projected_expenses: Decimal
    projected_balance: Decimal
    income_transactions: List[ProjectionTransaction] = field(default_factory=list)
    expense_transactions: List[ProjectionTransaction] = field(default_factory=list)
    has_projected_initial_balance: bool = False
    pending_count_before_period: int = 0


@dataclass(frozen=True)
class ScenarioDelta:
    """Hypothetical monthly income or expense used by what-if chains."""
    type: str
    amount: Decimal
    description: str = ""


@dataclass
class MonthProjection:
    month: date
    initial_balance: Decimal
    projected_income: Decimal
    projected_expenses: Decimal
    scenario_impact: Decimal
    projected_balance: Decimal


@dataclass
class ChainResult:
    simulated_initial_balance: Decimal
    original_projected_balance: Decimal
    simulated_projected_balance: Decimal
    scenario_impact: Decimal
    month_breakdown: List[MonthProjection]
    is_simulating: bool


@dataclass
class MaterializationResult:
    recurrence_id: int
    inserted: int
    skipped: int
    next_occurrence: Optional[date]
