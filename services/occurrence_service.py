"""
Occurrence Enumerator — due dates of a recurrence rule inside a date window.

Pure functions: no database access, no hidden state. The same rule and
window always produce the same list.
"""
from datetime import date, timedelta
from typing import List

import config
from models.errors import EnumerationOverrunError
from models.recurrence import Occurrence, RecurrenceRule
from utils.dates import add_months, month_distance

DAY_STEPS = {
    "daily": 1,
    "weekly": 7,
    "biweekly": 14,
}

# Shortest possible gap between two consecutive occurrences, in days.
MIN_GAP_DAYS = dict(DAY_STEPS, monthly=28, yearly=365)


def next_occurrence(current: date, frequency: str, anchor_day: int) -> date:
    """Step one period forward from ``current``.

    Monthly and yearly steps land on ``min(anchor_day, days in month)``,
    always clamped from the anchor and never from ``current.day``.
    """
    if frequency in DAY_STEPS:
        return current + timedelta(days=DAY_STEPS[frequency])
    if frequency == "monthly":
        return add_months(current, 1, anchor_day)
    if frequency == "yearly":
        return add_months(current, 12, anchor_day)
    raise ValueError(f"Unknown frequency: {frequency!r}")


def _skip_ahead(rule: RecurrenceRule, range_start: date) -> date:
    """Jump to an occurrence at or shortly before ``range_start``.

    Lands exactly on a date the step function would reach from
    ``rule.start_date``, never past ``range_start``.
    """
    start = rule.start_date
    if range_start <= start:
        return start

    if rule.frequency in DAY_STEPS:
        step = DAY_STEPS[rule.frequency]
        periods = (range_start - start).days // step
        return start + timedelta(days=periods * step)

    months = month_distance(start, range_start)
    if rule.frequency == "monthly":
        periods = max(months - 1, 0)
        return add_months(start, periods, rule.anchor_day)
    # yearly
    periods = max(months // 12 - 1, 0)
    return add_months(start, periods * 12, rule.anchor_day)


def _window_limit(frequency: str, first: date, range_end: date) -> int:
    """Most occurrences a well-behaved step function can place in the window."""
    return max((range_end - first).days, 0) // MIN_GAP_DAYS[frequency] + 2


def enumerate_dates(rule: RecurrenceRule, range_start: date, range_end: date,
                    max_steps: int | None = None) -> List[date]:
    """
    Ordered due dates of ``rule`` within ``[range_start, range_end]``.

    Args:
        rule: The recurrence to expand.
        range_start: First day of the window, inclusive.
        range_end: Last day of the window, inclusive.
        max_steps: Bound on collection steps; defaults to
                   ``config.MAX_ENUMERATION_STEPS`` when set, otherwise to
                   the most occurrences the window can hold.

    Returns:
        List of dates. Empty for inactive rules, rules starting after the
        window and rules that ended before it.

    Raises:
        EnumerationOverrunError: the bound was exceeded or a step did not
        move forward.
    """
    if not rule.is_active:
        return []
    if rule.start_date > range_end:
        return []
    if rule.end_date is not None and rule.end_date < range_start:
        return []

    anchor = rule.anchor_day

    current = _skip_ahead(rule, range_start)
    while current < range_start:
        current = _advance(current, rule.frequency, anchor)

    limit = max_steps if max_steps is not None else config.MAX_ENUMERATION_STEPS
    if limit is None:
        limit = _window_limit(rule.frequency, current, range_end)

    dates = []
    steps = 0
    while current <= range_end:
        if rule.end_date is not None and current > rule.end_date:
            break
        steps += 1
        if steps > limit:
            raise EnumerationOverrunError(
                f"Recurrence {rule.id} exceeded {limit} steps between "
                f"{range_start.isoformat()} and {range_end.isoformat()}"
            )
        dates.append(current)
        current = _advance(current, rule.frequency, anchor)

    return dates


def enumerate_occurrences(rule: RecurrenceRule, range_start: date,
                          range_end: date) -> List[Occurrence]:
    """Same as enumerate_dates, wrapped as Occurrence records."""
    return [
        Occurrence(date=d, source_recurrence_id=rule.id)
        for d in enumerate_dates(rule, range_start, range_end)
    ]


def _advance(current: date, frequency: str, anchor_day: int) -> date:
    following = next_occurrence(current, frequency, anchor_day)
    if following <= current:
        raise EnumerationOverrunError(
            f"{frequency} step did not advance past {current.isoformat()}"
        )
    return following
