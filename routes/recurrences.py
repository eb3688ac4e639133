from datetime import date
from decimal import Decimal
from typing import Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field, field_validator

from db import get_conn
from services.occurrence_service import enumerate_dates
from services.recurrence_service import (
    create_recurrence,
    get_recurrence,
    process_recurrences,
    set_recurrence_active,
)
from utils.dates import parse_iso_date
from utils.money import format_money, parse_money

router = APIRouter()


class RecurrenceCreate(BaseModel):
    type: Literal["income", "expense"]
    amount: Decimal = Field(ge=0, max_digits=14, decimal_places=2)
    description: str = ""
    frequency: Literal["daily", "weekly", "biweekly", "monthly", "yearly"]
    start_date: date
    end_date: Optional[date] = None
    category_id: Optional[str] = None
    account_id: Optional[int] = None
    credit_card_id: Optional[str] = None

    @field_validator("amount", mode="before")
    @classmethod
    def _parse_amount(cls, value):
        return parse_money(value) if isinstance(value, str) else value


class ActiveUpdate(BaseModel):
    is_active: bool


def _recurrence_dict(rule):
    return {
        "id": rule.id,
        "type": rule.type,
        "amount": format_money(rule.amount),
        "description": rule.description,
        "frequency": rule.frequency,
        "start_date": rule.start_date.isoformat(),
        "end_date": rule.end_date.isoformat() if rule.end_date else None,
        "next_occurrence": rule.next_occurrence.isoformat() if rule.next_occurrence else None,
        "is_active": rule.is_active,
        "category_id": rule.category_id,
        "account_id": rule.account_id,
        "credit_card_id": rule.credit_card_id,
    }


@router.post("/recurrences/{user_id}", status_code=201)
def add_recurrence(user_id: str, body: RecurrenceCreate, conn=Depends(get_conn)):
    rule = create_recurrence(conn, user_id, **body.model_dump())
    return _recurrence_dict(rule)


@router.patch("/recurrences/{user_id}/{recurrence_id}/active")
def update_recurrence_active(user_id: str, recurrence_id: int, body: ActiveUpdate,
                             conn=Depends(get_conn)):
    rule = set_recurrence_active(conn, user_id, recurrence_id, body.is_active)
    if rule is None:
        raise HTTPException(status_code=404, detail="Recurrence not found.")
    return _recurrence_dict(rule)


@router.get("/recurrences/{user_id}/{recurrence_id}/occurrences")
def list_occurrences(user_id: str, recurrence_id: int,
                     start: str = Query(...), end: str = Query(...),
                     conn=Depends(get_conn)):
    """
    Due dates of one recurrence inside [start, end], both inclusive.
    """
    try:
        range_start = parse_iso_date(start)
        range_end = parse_iso_date(end)
    except ValueError:
        raise HTTPException(status_code=422, detail="Invalid date format. Use YYYY-MM-DD.")

    rule = get_recurrence(conn, user_id, recurrence_id)
    if rule is None:
        raise HTTPException(status_code=404, detail="Recurrence not found.")

    dates = enumerate_dates(rule, range_start, range_end)
    return {
        "recurrence_id": rule.id,
        "count": len(dates),
        "dates": [d.isoformat() for d in dates],
    }


@router.post("/recurrences/{user_id}/process")
def process_user_recurrences(user_id: str, months_ahead: Optional[int] = Query(None, ge=0),
                             conn=Depends(get_conn)):
    """
    Materialize pending transactions for all active recurrences of the user.
    """
    results = process_recurrences(conn, user_id, months_ahead=months_ahead)
    return {
        "inserted": sum(r.inserted for r in results),
        "skipped": sum(r.skipped for r in results),
        "recurrences": [
            {
                "recurrence_id": r.recurrence_id,
                "inserted": r.inserted,
                "skipped": r.skipped,
                "next_occurrence": r.next_occurrence.isoformat() if r.next_occurrence else None,
            }
            for r in results
        ],
    }
