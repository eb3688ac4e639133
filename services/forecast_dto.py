from dataclasses import dataclass
from typing import List, Optional

from utils.money import format_money


@dataclass
class TransactionDTO:
    """Single transaction line of a projection."""
    id: Optional[int]
    date: str  # ISO format YYYY-MM-DD
    type: str
    description: str
    amount: str  # exact, two decimals
    status: str
    is_recurring: bool
    recurrence_id: Optional[int]
    category_id: Optional[str]
    is_projected: bool

    @classmethod
    def from_transaction(cls, tx):
        return cls(
            id=tx.id,
            date=tx.date.isoformat(),
            type=tx.type,
            description=tx.description,
            amount=format_money(tx.amount),
            status=tx.status,
            is_recurring=tx.is_recurring,
            recurrence_id=tx.recurrence_id,
            category_id=tx.category_id,
            is_projected=tx.is_projected,
        )


@dataclass
class ProjectionResponseDTO:
    """Single-period projection response."""
    period_start: str
    period_end: str
    initial_balance: str
    projected_income: str
    projected_expenses: str
    projected_balance: str
    has_projected_initial_balance: bool
    pending_count_before_period: int
    income_transactions: List[TransactionDTO]
    expense_transactions: List[TransactionDTO]

    @classmethod
    def from_projection(cls, projection):
        """Convert ProjectionResult to JSON-serializable DTO."""
        return cls(
            period_start=projection.period_start.isoformat(),
            period_end=projection.period_end.isoformat(),
            initial_balance=format_money(projection.initial_balance),
            projected_income=format_money(projection.projected_income),
            projected_expenses=format_money(projection.projected_expenses),
            projected_balance=format_money(projection.projected_balance),
            has_projected_initial_balance=projection.has_projected_initial_balance,
            pending_count_before_period=projection.pending_count_before_period,
            income_transactions=[
                TransactionDTO.from_transaction(t) for t in projection.income_transactions
            ],
            expense_transactions=[
                TransactionDTO.from_transaction(t) for t in projection.expense_transactions
            ],
        )


@dataclass
class MonthDTO:
    month: str  # YYYY-MM
    initial_balance: str
    projected_income: str
    projected_expenses: str
    scenario_impact: str
    projected_balance: str


@dataclass
class ChainResponseDTO:
    """What-if chain response."""
    simulated_initial_balance: str
    original_projected_balance: str
    simulated_projected_balance: str
    scenario_impact: str
    is_simulating: bool
    month_breakdown: List[MonthDTO]

    @classmethod
    def from_chain(cls, chain):
        return cls(
            simulated_initial_balance=format_money(chain.simulated_initial_balance),
            original_projected_balance=format_money(chain.original_projected_balance),
            simulated_projected_balance=format_money(chain.simulated_projected_balance),
            scenario_impact=format_money(chain.scenario_impact),
            is_simulating=chain.is_simulating,
            month_breakdown=[
                MonthDTO(
                    month=m.month.strftime("%Y-%m"),
                    initial_balance=format_money(m.initial_balance),
                    projected_income=format_money(m.projected_income),
                    projected_expenses=format_money(m.projected_expenses),
                    scenario_impact=format_money(m.scenario_impact),
                    projected_balance=format_money(m.projected_balance),
                )
                for m in chain.month_breakdown
            ],
        )
