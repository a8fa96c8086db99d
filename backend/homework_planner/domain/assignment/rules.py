"""Business rules for the Assignment domain: input validation."""
from __future__ import annotations
from typing import Any, Iterable

from homework_planner.core.config import ALLOWED_UPLOAD_TYPES, MAX_UPLOAD_BYTES
from homework_planner.domain.assignment.models import PRIORITIES
from homework_planner.domain.common.clock import parse_datetime
from homework_planner.domain.common.result import Result

REQUIRED_FIELDS = ("title", "subject", "dueDate")

# Fields an update payload may change. Everything else (id, ownership,
# timestamps, sub-entities, series links) is ignored.
UPDATABLE_FIELDS = frozenset({
    "title",
    "subject",
    "description",
    "dueDate",
    "priority",
    "tags",
    "yearGroup",
    "className",
    "completed",
    "isRecurring",
    "recurrence",
})

CLEARABLE_FIELDS = frozenset({"yearGroup", "className"})


def _blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _check_fields(data: dict) -> Result[dict]:
    if "dueDate" in data and parse_datetime(data["dueDate"]) is None:
        return Result.fail(f"'{data['dueDate']}' is not a valid due date.")
    priority = data.get("priority")
    if priority is not None and str(priority).lower() not in PRIORITIES:
        return Result.fail(f"'{priority}' is not a valid priority. Must be one of {list(PRIORITIES)}.")
    if "tags" in data and data["tags"] is not None and not isinstance(data["tags"], list):
        return Result.fail("'tags' must be a list of strings.")
    return Result.ok(data)


def has_required_fields(data: dict) -> bool:
    return not any(_blank(data.get(name)) for name in REQUIRED_FIELDS)


def validate_assignment_content(data: dict) -> Result[dict]:
    """A new assignment needs a title, a subject and a due date."""
    if not has_required_fields(data):
        return Result.fail("Title, subject, and due date are required")
    return _check_fields(data)


def validate_update_payload(data: dict) -> Result[dict]:
    """Partial payloads may omit anything, but may not blank a required field."""
    if not isinstance(data, dict):
        return Result.fail("Update payload must be an object.")
    for name in REQUIRED_FIELDS:
        if name in data and _blank(data[name]):
            return Result.fail(f"'{name}' cannot be empty.")
    return _check_fields(data)


def validate_ids(ids: Any) -> Result[list]:
    if not isinstance(ids, (list, tuple)) or not ids:
        return Result.fail("No homework IDs provided")
    return Result.ok([str(i) for i in ids])


def validate_comment_content(content: Any) -> Result[str]:
    if not isinstance(content, str) or not content.strip():
        return Result.fail("Comment content is required")
    return Result.ok(content.strip())


def validate_upload(mime_type: str, size: int) -> Result[None]:
    """Checks the request layer runs before a file is handed to the engine."""
    if mime_type not in ALLOWED_UPLOAD_TYPES:
        return Result.fail("Invalid file type. Only PDF, DOC, DOCX, JPG, PNG, and TXT files are allowed.")
    if size > MAX_UPLOAD_BYTES:
        return Result.fail(f"File too large. Maximum size is {MAX_UPLOAD_BYTES // (1024 * 1024)}MB.")
    return Result.ok(None)


def filter_updatable(data: dict, allowed: Iterable[str] = UPDATABLE_FIELDS) -> dict:
    """Whitelisted keys only. A null clears the optional labels and is ignored everywhere else."""
    allowed = set(allowed)
    return {
        k: v for k, v in data.items()
        if k in allowed and (v is not None or k in CLEARABLE_FIELDS)
    }
