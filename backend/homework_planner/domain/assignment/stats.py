"""Per-teacher statistics over the assignment set."""
from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Optional, Sequence

from homework_planner.domain.assignment.models import PRIORITIES, Assignment
from homework_planner.domain.common.clock import utcnow

UNCATEGORIZED = "Uncategorized"


@dataclass
class AssignmentStats:
    total: int = 0
    completed: int = 0
    pending: int = 0
    completion_rate: int = 0
    by_subject: Dict[str, int] = field(default_factory=dict)
    by_priority: Dict[str, int] = field(default_factory=lambda: {p: 0 for p in PRIORITIES})
    by_due_date: Dict[str, int] = field(default_factory=lambda: {"overdue": 0, "thisWeek": 0, "later": 0})


def completion_rate(completed: int, total: int) -> int:
    if total == 0:
        return 0
    rate = Decimal(100 * completed) / Decimal(total)
    return int(rate.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def compute_stats(
    assignments: Sequence[Assignment],
    teacher_email: str,
    now: Optional[datetime] = None,
) -> AssignmentStats:
    """Counts over `teacher_email`'s own records only."""
    now = now or utcnow()
    week_ahead = now + timedelta(days=7)
    mine = [a for a in assignments if a.teacher_email == teacher_email]

    stats = AssignmentStats(total=len(mine))
    for a in mine:
        subject = a.subject or UNCATEGORIZED
        stats.by_subject[subject] = stats.by_subject.get(subject, 0) + 1
        if a.priority in stats.by_priority:
            stats.by_priority[a.priority] += 1

        if a.completed:
            stats.completed += 1
        elif a.due_date < now:
            stats.by_due_date["overdue"] += 1
        elif a.due_date <= week_ahead:
            stats.by_due_date["thisWeek"] += 1
        else:
            stats.by_due_date["later"] += 1

    stats.pending = stats.total - stats.completed
    stats.completion_rate = completion_rate(stats.completed, stats.total)
    return stats
