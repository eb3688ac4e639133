import calendar
from datetime import date, datetime

MONTH_FORMAT = "%Y-%m"


def parse_iso_date(raw_date: str) -> date:
    """Parse ``YYYY-MM-DD``. Raises ValueError on anything else."""
    return date.fromisoformat(raw_date.strip())


def parse_month(raw_month: str) -> date:
    """Return the first day of the month named by ``YYYY-MM`` or an ISO date."""
    raw_month = raw_month.strip()
    try:
        return datetime.strptime(raw_month, MONTH_FORMAT).date()
    except ValueError:
        return parse_iso_date(raw_month).replace(day=1)


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def month_bounds(d: date) -> tuple[date, date]:
    """(first_day, last_day) of the month containing ``d``."""
    return d.replace(day=1), d.replace(day=days_in_month(d.year, d.month))


def add_months(d: date, n: int, anchor_day: int | None = None) -> date:
    """Shift ``d`` by ``n`` calendar months.

    The day of the result is ``min(anchor_day, days in target month)``;
    ``anchor_day`` defaults to ``d.day``.
    """
    day = anchor_day if anchor_day is not None else d.day
    month_index = d.month - 1 + n
    year = d.year + month_index // 12
    month = month_index % 12 + 1
    return date(year, month, min(day, days_in_month(year, month)))


def month_distance(start: date, end: date) -> int:
    """Whole calendar months from ``start``'s month to ``end``'s month."""
    return (end.year - start.year) * 12 + (end.month - start.month)
