### Forecast service chains monthly projections forward under hypothetical recurring changes.
import logging
from datetime import date

from models.projection_dto import ChainResult, MonthProjection
from services.projection_service import project_month
from utils.dates import add_months, month_distance
from utils.money import ZERO, to_money


def scenario_impact(scenarios):
    """Net monthly effect of the scenario deltas: incomes add, expenses subtract."""
    impact = ZERO
    for s in scenarios:
        if s.type == "income":
            impact += to_money(s.amount)
        elif s.type == "expense":
            impact -= to_money(s.amount)
    return impact


def _month_row(month, projection, impact, initial=None):
    return MonthProjection(
        month=month,
        initial_balance=projection.initial_balance if initial is None else initial,
        projected_income=projection.projected_income,
        projected_expenses=projection.projected_expenses,
        scenario_impact=impact,
        projected_balance=(
            projection.projected_balance + impact
            if initial is None
            else initial + projection.projected_income - projection.projected_expenses + impact
        ),
    )


def project_chain(conn, user_id, base_month: date | None, target_month: date,
                  scenarios) -> ChainResult:
    """
    Carry a what-if delta from ``base_month`` through ``target_month``.

    Month 0 is the base month's real projection plus the impact. Every later
    month starts from the previous simulated balance and adds its own real
    income and expenses plus the impact once more.
    """
    base_month = base_month.replace(day=1) if base_month else None
    target_month = target_month.replace(day=1)

    if base_month is None or not scenarios:
        target = project_month(conn, user_id, target_month)
        return ChainResult(
            simulated_initial_balance=target.initial_balance,
            original_projected_balance=target.projected_balance,
            simulated_projected_balance=target.projected_balance,
            scenario_impact=ZERO,
            month_breakdown=[],
            is_simulating=False,
        )

    impact = scenario_impact(scenarios)
    months = month_distance(base_month, target_month)

    base = project_month(conn, user_id, base_month)
    breakdown = [_month_row(base_month, base, impact)]

    if months <= 0:
        original = base
    else:
        for m in range(1, months + 1):
            current_month = add_months(base_month, m)
            real = project_month(conn, user_id, current_month)
            breakdown.append(
                _month_row(current_month, real, impact, initial=breakdown[-1].projected_balance)
            )
        # The last month fetched is the target month itself.
        original = real

    last = breakdown[-1]
    logging.info(
        f"Scenario chain user={user_id} {base_month.isoformat()}..{target_month.isoformat()}: "
        f"impact={impact}/month simulated={last.projected_balance} "
        f"original={original.projected_balance}"
    )

    return ChainResult(
        simulated_initial_balance=last.initial_balance,
        original_projected_balance=original.projected_balance,
        simulated_projected_balance=last.projected_balance,
        scenario_impact=impact,
        month_breakdown=breakdown,
        is_simulating=True,
    )
