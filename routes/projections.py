from dataclasses import asdict
from datetime import date
from decimal import Decimal
from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field, field_validator

import config
from db import get_conn
from models.projection_dto import ScenarioDelta
from services.forecast_dto import ChainResponseDTO, ProjectionResponseDTO
from services.forecast_service import project_chain
from services.projection_service import project, project_month
from utils.dates import month_distance, parse_iso_date, parse_month
from utils.money import parse_money

router = APIRouter()


class ScenarioIn(BaseModel):
    type: Literal["income", "expense"]
    amount: Decimal = Field(ge=0, max_digits=14, decimal_places=2)
    description: str = ""

    @field_validator("amount", mode="before")
    @classmethod
    def _parse_amount(cls, value):
        return parse_money(value) if isinstance(value, str) else value


class ChainRequest(BaseModel):
    base_month: Optional[str] = None
    target_month: str
    scenarios: List[ScenarioIn] = []


def _month_or_422(raw, name):
    try:
        return parse_month(raw)
    except ValueError:
        raise HTTPException(status_code=422, detail=f"Invalid {name}. Use YYYY-MM.")


def _date_or_422(raw, name):
    try:
        return parse_iso_date(raw)
    except ValueError:
        raise HTTPException(status_code=422, detail=f"Invalid {name}. Use YYYY-MM-DD.")


@router.get("/projections/{user_id}")
def get_projection(
    user_id: str,
    month: Optional[str] = Query(None),
    start: Optional[str] = Query(None),
    end: Optional[str] = Query(None),
    conn=Depends(get_conn),
):
    """
    Projected income, expenses and balance for one period.

    Query Parameters:
        month (optional): YYYY-MM; defaults to the current month.
        start, end (optional): explicit inclusive period, both required together.
    """
    if start or end:
        if not (start and end):
            raise HTTPException(status_code=422, detail="start and end must be given together.")
        period_start = _date_or_422(start, "start")
        period_end = _date_or_422(end, "end")
        if period_start > period_end:
            raise HTTPException(status_code=422, detail="start must not be after end.")
        projection = project(conn, user_id, period_start, period_end)
    else:
        selected = _month_or_422(month, "month") if month else date.today()
        projection = project_month(conn, user_id, selected)

    return asdict(ProjectionResponseDTO.from_projection(projection))


@router.post("/projections/{user_id}/chain")
def post_projection_chain(user_id: str, body: ChainRequest, conn=Depends(get_conn)):
    """
    What-if chain: scenario deltas applied every month from base_month to target_month.
    """
    base_month = _month_or_422(body.base_month, "base_month") if body.base_month else None
    target_month = _month_or_422(body.target_month, "target_month")
    if base_month and month_distance(base_month, target_month) > config.MAX_CHAIN_MONTHS:
        raise HTTPException(
            status_code=422,
            detail=f"Chain spans more than {config.MAX_CHAIN_MONTHS} months.",
        )
    scenarios = [
        ScenarioDelta(type=s.type, amount=s.amount, description=s.description)
        for s in body.scenarios
    ]

    chain = project_chain(conn, user_id, base_month, target_month, scenarios)
    return asdict(ChainResponseDTO.from_chain(chain))
