"""Choosing which assignments a reminder email should mention, and its text."""
from __future__ import annotations
import re
from dataclasses import dataclass
from datetime import date, timedelta
from typing import List, Optional, Sequence

from homework_planner.domain.assignment.models import Assignment
from homework_planner.domain.common.clock import utcnow

_EMAIL_RE = re.compile(r"\S+@\S+\.\S+")


@dataclass
class Reminder:
    subject: str
    body: str
    assignments: List[Assignment]


def is_valid_recipient(address: Optional[str]) -> bool:
    return bool(address) and _EMAIL_RE.search(address) is not None


def target_date(days_ahead: int, today: Optional[date] = None) -> date:
    return (today or utcnow().date()) + timedelta(days=days_ahead)


def select_due(
    assignments: Sequence[Assignment],
    teacher_email: str,
    on: date,
) -> List[Assignment]:
    """The teacher's incomplete assignments due on calendar day `on` (UTC)."""
    return [
        a for a in assignments
        if a.teacher_email == teacher_email and not a.completed and a.due_date.date() == on
    ]


def render(assignments: Sequence[Assignment], on: date) -> Reminder:
    heading = f"Upcoming Homeworks - {on.strftime('%a %b %d %Y')}"
    lines = [heading, "", f"You have {len(assignments)} homeworks due soon:", ""]
    for a in assignments:
        lines.append(f"* {a.title} ({a.subject})")
        lines.append(f"  Due: {a.due_date.strftime('%Y-%m-%d %H:%M UTC')}")
        if a.priority:
            lines.append(f"  Priority: {a.priority}")
        if a.description:
            lines.append(f"  {a.description}")
    lines += ["", "Log in to your homework planner for more details."]
    return Reminder(subject=heading, body="\n".join(lines), assignments=list(assignments))
