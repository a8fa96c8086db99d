"""
Normalizer: turns stored or imported records into well-formed Assignments.

Applied once at the load boundary: every field missing from the raw dict is
filled from a fixed default record, so the rest of the engine never has to
guess. The inverse (`assignment_to_dict`) produces the camelCase wire format
that is persisted and returned by the API.
"""
from __future__ import annotations
from datetime import datetime
from typing import Any, Dict, List, Optional

from homework_planner.domain.assignment.models import (
    PRIORITIES,
    Assignment,
    Attachment,
    Comment,
    Recurrence,
)
from homework_planner.domain.assignment.recurrence import sanitize_recurrence
from homework_planner.domain.common.clock import format_datetime, new_id, parse_datetime, utcnow


def _text(value: Any, default: str = "") -> str:
    if value is None:
        return default
    return str(value)


def _optional_text(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    return str(value)


def _list(value: Any) -> list:
    return list(value) if isinstance(value, list) else []


def normalize_priority(value: Any) -> str:
    priority = _text(value).strip().lower()
    return priority if priority in PRIORITIES else "medium"


def comment_from_dict(raw: Dict[str, Any], now: datetime) -> Comment:
    created = parse_datetime(raw.get("createdAt")) or now
    return Comment(
        id=_text(raw.get("id")) or new_id(),
        content=_text(raw.get("content")),
        author=_text(raw.get("author")),
        author_name=_text(raw.get("authorName")),
        created_at=created,
        updated_at=parse_datetime(raw.get("updatedAt")) or created,
    )


def comment_to_dict(comment: Comment) -> Dict[str, Any]:
    return {
        "id": comment.id,
        "content": comment.content,
        "author": comment.author,
        "authorName": comment.author_name,
        "createdAt": format_datetime(comment.created_at),
        "updatedAt": format_datetime(comment.updated_at),
    }


def attachment_from_dict(raw: Dict[str, Any], now: datetime) -> Attachment:
    try:
        size = int(raw.get("size") or 0)
    except (TypeError, ValueError):
        size = 0
    return Attachment(
        id=_text(raw.get("id")) or new_id(),
        filename=_text(raw.get("filename")),
        path=_text(raw.get("path")),
        mime_type=_text(raw.get("mimeType")),
        size=size,
        uploaded_by=_text(raw.get("uploadedBy")),
        uploaded_at=parse_datetime(raw.get("uploadedAt")) or now,
    )


def attachment_to_dict(attachment: Attachment) -> Dict[str, Any]:
    return {
        "id": attachment.id,
        "filename": attachment.filename,
        "path": attachment.path,
        "mimeType": attachment.mime_type,
        "size": attachment.size,
        "uploadedBy": attachment.uploaded_by,
        "uploadedAt": format_datetime(attachment.uploaded_at),
    }


def recurrence_to_dict(recurrence: Recurrence) -> Dict[str, Any]:
    return {
        "type": recurrence.type,
        "interval": recurrence.interval,
        "daysOfWeek": list(recurrence.days_of_week),
    }


def normalize(raw: Dict[str, Any], now: Optional[datetime] = None) -> Assignment:
    """Fill every missing field of a raw record with its default."""
    now = now or utcnow()
    created = parse_datetime(raw.get("createdAt")) or now
    updated = parse_datetime(raw.get("updatedAt")) or now
    if updated < created:
        updated = created

    return Assignment(
        id=_text(raw.get("id")) or new_id(),
        title=_text(raw.get("title")) or "Untitled",
        subject=_text(raw.get("subject")),
        description=_text(raw.get("description")),
        due_date=parse_datetime(raw.get("dueDate")) or now,
        created_at=created,
        updated_at=updated,
        completed=bool(raw.get("completed", False)),
        priority=normalize_priority(raw.get("priority")),
        tags=[str(t) for t in _list(raw.get("tags"))],
        teacher_email=_text(raw.get("teacherEmail")),
        teacher_name=_text(raw.get("teacherName")),
        year_group=_optional_text(raw.get("yearGroup")),
        class_name=_optional_text(raw.get("className")),
        is_recurring=bool(raw.get("isRecurring", False)),
        recurrence=sanitize_recurrence(raw.get("recurrence")),
        next_occurrence=parse_datetime(raw.get("nextOccurrence")),
        parent_id=_optional_text(raw.get("parentId")),
        comments=[comment_from_dict(c, now) for c in _list(raw.get("comments")) if isinstance(c, dict)],
        attachments=[attachment_from_dict(a, now) for a in _list(raw.get("attachments")) if isinstance(a, dict)],
    )


def normalize_all(raws: Any, now: Optional[datetime] = None) -> List[Assignment]:
    now = now or utcnow()
    return [normalize(r, now) for r in _list(raws) if isinstance(r, dict)]


def assignment_to_dict(assignment: Assignment) -> Dict[str, Any]:
    return {
        "id": assignment.id,
        "title": assignment.title,
        "subject": assignment.subject,
        "description": assignment.description,
        "dueDate": format_datetime(assignment.due_date),
        "createdAt": format_datetime(assignment.created_at),
        "updatedAt": format_datetime(assignment.updated_at),
        "completed": assignment.completed,
        "priority": assignment.priority,
        "tags": list(assignment.tags),
        "attachments": [attachment_to_dict(a) for a in assignment.attachments],
        "teacherEmail": assignment.teacher_email,
        "teacherName": assignment.teacher_name,
        "yearGroup": assignment.year_group,
        "className": assignment.class_name,
        "isRecurring": assignment.is_recurring,
        "recurrence": recurrence_to_dict(assignment.recurrence),
        "nextOccurrence": format_datetime(assignment.next_occurrence),
        "parentId": assignment.parent_id,
        "comments": [comment_to_dict(c) for c in assignment.comments],
    }
