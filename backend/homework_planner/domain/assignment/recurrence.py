"""Recurrence generator: expands a recurring assignment into its series."""
from __future__ import annotations
import copy
from datetime import datetime, timedelta
from typing import Any, List

from homework_planner.core.config import RECURRENCE_OCCURRENCES
from homework_planner.domain.assignment.models import Assignment, Recurrence
from homework_planner.domain.common.clock import new_id

EXPANDING_TYPES = {"daily", "weekly"}


def _to_int(value: Any, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def sanitize_recurrence(raw: Any) -> Recurrence:
    """
    Build a Recurrence from a payload dict (camelCase or snake_case keys).
    interval is clamped to >= 1; weekdays outside 0..6 are dropped.
    """
    if isinstance(raw, Recurrence):
        raw = {"type": raw.type, "interval": raw.interval, "daysOfWeek": raw.days_of_week}
    if not isinstance(raw, dict):
        return Recurrence()

    rtype = str(raw.get("type") or "none").strip().lower()
    interval = max(1, _to_int(raw.get("interval"), 1))
    days_raw = raw.get("daysOfWeek", raw.get("days_of_week"))
    days: List[int] = []
    if isinstance(days_raw, (list, tuple, set)):
        for d in days_raw:
            day = _to_int(d, -1)
            if 0 <= day <= 6 and day not in days:
                days.append(day)
    return Recurrence(type=rtype, interval=interval, days_of_week=sorted(days))


def expands(is_recurring: bool, policy: Recurrence) -> bool:
    return bool(is_recurring) and policy.type in EXPANDING_TYPES


def js_weekday(dt: datetime) -> int:
    """Weekday with Sunday = 0 ... Saturday = 6."""
    return (dt.weekday() + 1) % 7


def advance(current: datetime, policy: Recurrence) -> datetime:
    """Due date of the occurrence following one due at `current`."""
    if policy.type == "daily":
        return current + timedelta(days=policy.interval)

    if policy.days_of_week:
        # interval is not applied when explicit weekdays are given
        today = js_weekday(current)
        days = sorted(policy.days_of_week)
        target = next((d for d in days if d > today), days[0] + 7)
        return current + timedelta(days=target - today)

    return current + timedelta(days=7 * policy.interval)


def expand(base: Assignment, policy: Recurrence, occurrences: int = RECURRENCE_OCCURRENCES) -> List[Assignment]:
    """
    Produce the full series for `base`: the base itself followed by
    occurrences - 1 copies with fresh ids and advanced due dates.

    Every record gets parent_id == base.id; only the first carries
    next_occurrence (the second record's due date). Policies that do not
    expand yield just a copy of the base.
    """
    first = copy.deepcopy(base)
    if policy.type not in EXPANDING_TYPES:
        return [first]

    first.parent_id = base.id
    first.next_occurrence = None
    series = [first]
    current = base.due_date
    for _ in range(1, occurrences):
        current = advance(current, policy)
        occurrence = copy.deepcopy(first)
        occurrence.id = new_id()
        occurrence.due_date = current
        occurrence.parent_id = base.id
        occurrence.next_occurrence = None
        series.append(occurrence)

    if len(series) > 1:
        first.next_occurrence = series[1].due_date
    return series
