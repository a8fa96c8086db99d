"""Query engine: filtering, due-date ordering and pagination over assignments."""
from __future__ import annotations
import math
from dataclasses import dataclass, field
from datetime import datetime, time, timezone
from typing import Callable, List, Optional, Sequence

from homework_planner.core.config import DEFAULT_PAGE_LIMIT
from homework_planner.domain.assignment.models import Assignment
from homework_planner.domain.common.clock import parse_datetime

_END_OF_DAY = time(23, 59, 59, 999000)


@dataclass
class AssignmentFilters:
    search: Optional[str] = None
    subject: Optional[str] = None
    status: Optional[str] = None
    priority: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    date_from: Optional[str] = None
    date_to: Optional[str] = None
    year_group: Optional[str] = None
    teacher_email: Optional[str] = None


@dataclass
class Pagination:
    total: int
    page: int
    limit: int
    total_pages: int
    has_next: bool
    has_previous: bool


@dataclass
class QueryResult:
    items: List[Assignment]
    pagination: Pagination


def _same_text(expected: str) -> Callable[[Optional[str]], bool]:
    needle = expected.lower()
    return lambda value: bool(value) and value.lower() == needle


def _end_of_day(value: str) -> Optional[datetime]:
    parsed = parse_datetime(value)
    if parsed is None:
        return None
    return datetime.combine(parsed.date(), _END_OF_DAY, tzinfo=timezone.utc)


def _predicates(filters: AssignmentFilters) -> List[Callable[[Assignment], bool]]:
    checks: List[Callable[[Assignment], bool]] = []

    if filters.search:
        needle = filters.search.lower()
        checks.append(
            lambda a: needle in a.title.lower()
            or needle in a.description.lower()
            or needle in a.subject.lower()
        )

    if filters.subject:
        match_subject = _same_text(filters.subject)
        checks.append(lambda a: match_subject(a.subject))

    if filters.status:
        want_completed = filters.status.lower() == "completed"
        checks.append(lambda a: a.completed == want_completed)

    if filters.priority:
        match_priority = _same_text(filters.priority)
        checks.append(lambda a: match_priority(a.priority))

    if filters.tags:
        wanted = set(filters.tags)
        checks.append(lambda a: not wanted.isdisjoint(a.tags))

    if filters.date_from:
        start = parse_datetime(filters.date_from)
        if start is not None:
            checks.append(lambda a: a.due_date >= start)

    if filters.date_to:
        end = _end_of_day(filters.date_to)
        if end is not None:
            checks.append(lambda a: a.due_date <= end)

    if filters.year_group:
        match_year_group = _same_text(str(filters.year_group))
        checks.append(lambda a: a.year_group is not None and match_year_group(str(a.year_group)))

    if filters.teacher_email:
        match_teacher = _same_text(filters.teacher_email)
        checks.append(lambda a: match_teacher(a.teacher_email))

    return checks


def filter_assignments(assignments: Sequence[Assignment], filters: AssignmentFilters) -> List[Assignment]:
    checks = _predicates(filters)
    return [a for a in assignments if all(check(a) for check in checks)]


def paginate(items: Sequence[Assignment], page: int, limit: int) -> QueryResult:
    total = len(items)
    start = (page - 1) * limit
    end = page * limit
    return QueryResult(
        items=list(items[start:end]),
        pagination=Pagination(
            total=total,
            page=page,
            limit=limit,
            total_pages=math.ceil(total / limit),
            has_next=end < total,
            has_previous=start > 0,
        ),
    )


def query(
    assignments: Sequence[Assignment],
    filters: Optional[AssignmentFilters] = None,
    page: int = 1,
    limit: int = DEFAULT_PAGE_LIMIT,
) -> QueryResult:
    """
    Apply filters (AND), sort by due date ascending and cut out one page.
    `sorted` is stable, so records due at the same instant keep their
    stored order. Pages past the end come back empty, not as an error.
    """
    page = max(1, page)
    limit = max(1, limit)
    matched = filter_assignments(assignments, filters or AssignmentFilters())
    ordered = sorted(matched, key=lambda a: a.due_date)
    return paginate(ordered, page, limit)
