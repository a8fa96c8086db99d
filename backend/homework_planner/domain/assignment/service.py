"""Domain service: pure business logic for assignments and their sub-entities."""
from __future__ import annotations
from datetime import datetime
from typing import List, Optional, Sequence, Set, Tuple

from homework_planner.domain.assignment.models import Assignment, Attachment, Comment, Identity, Recurrence, StoredFile
from homework_planner.domain.assignment.normalizer import assignment_to_dict, normalize, normalize_priority
from homework_planner.domain.assignment.recurrence import expand, expands, sanitize_recurrence
from homework_planner.domain.assignment.rules import (
    REQUIRED_FIELDS,
    filter_updatable,
    has_required_fields,
    validate_assignment_content,
    validate_comment_content,
    validate_update_payload,
)
from homework_planner.domain.common.clock import new_id, parse_datetime, utcnow
from homework_planner.domain.common.result import Result


def find(assignments: Sequence[Assignment], assignment_id: str) -> Optional[Assignment]:
    return next((a for a in assignments if a.id == assignment_id), None)


class AssignmentDomainService:
    """
    Pure domain operations, no I/O. Methods that can reject input return
    Result[T]; the application layer calls these and then persists via the
    repository.
    """

    # ------------------------------------------------------------------
    # CREATE
    # ------------------------------------------------------------------
    def create_assignments(
        self,
        identity: Identity,
        data: dict,
        now: Optional[datetime] = None,
    ) -> Result[List[Assignment]]:
        """
        Build a new assignment owned by `identity`. Recurring daily/weekly
        payloads come back as the whole series, primary record first.
        """
        validation = validate_assignment_content(data)
        if not validation.is_success:
            return Result.fail(validation.error)

        now = now or utcnow()
        is_recurring = bool(data.get("isRecurring", False))
        recurrence = sanitize_recurrence(data.get("recurrence")) if is_recurring else Recurrence()

        base = Assignment(
            id=new_id(),
            title=str(data["title"]).strip(),
            subject=str(data["subject"]).strip(),
            description=str(data.get("description") or ""),
            due_date=parse_datetime(data["dueDate"]),
            created_at=now,
            updated_at=now,
            completed=False,
            priority=normalize_priority(data.get("priority")),
            tags=[str(t) for t in (data.get("tags") or [])],
            teacher_email=identity.email,
            teacher_name=identity.name or identity.email,
            year_group=str(data["yearGroup"]) if data.get("yearGroup") else None,
            class_name=str(data["className"]) if data.get("className") else None,
            is_recurring=is_recurring,
            recurrence=recurrence,
        )

        if expands(is_recurring, recurrence):
            return Result.ok(expand(base, recurrence))
        return Result.ok([base])

    # ------------------------------------------------------------------
    # UPDATE
    # ------------------------------------------------------------------
    def apply_update(
        self,
        assignment: Assignment,
        data: dict,
        now: Optional[datetime] = None,
    ) -> Result[Assignment]:
        """Merge a partial payload over `assignment`; id and ownership never change."""
        validation = validate_update_payload(data)
        if not validation.is_success:
            return Result.fail(validation.error)

        now = now or utcnow()
        merged = assignment_to_dict(assignment)
        merged.update(filter_updatable(data))
        for name in REQUIRED_FIELDS:
            if isinstance(merged.get(name), str):
                merged[name] = merged[name].strip()

        updated = normalize(merged, now)
        updated.id = assignment.id
        updated.updated_at = max(now, updated.created_at)
        return Result.ok(updated)

    def toggle_complete(self, assignment: Assignment, now: Optional[datetime] = None) -> Assignment:
        assignment.completed = not assignment.completed
        assignment.updated_at = now or utcnow()
        return assignment

    # ------------------------------------------------------------------
    # DELETE
    # ------------------------------------------------------------------
    def ids_to_delete(self, assignments: Sequence[Assignment], target: Assignment) -> Set[str]:
        """
        The target alone, or every record of its series when it recurs.
        """
        key = target.series_key
        if not target.is_recurring or key is None:
            return {target.id}
        return {a.id for a in assignments if a.id == target.id or a.id == key or a.parent_id == key}

    # ------------------------------------------------------------------
    # SUB-ENTITIES
    # ------------------------------------------------------------------
    def add_comment(
        self,
        assignment: Assignment,
        identity: Identity,
        content: str,
        now: Optional[datetime] = None,
    ) -> Result[Comment]:
        validation = validate_comment_content(content)
        if not validation.is_success:
            return Result.fail(validation.error)

        now = now or utcnow()
        comment = Comment(
            id=new_id(),
            content=validation.value,
            author=identity.email,
            author_name=identity.name or identity.email,
            created_at=now,
            updated_at=now,
        )
        assignment.comments.append(comment)
        assignment.updated_at = now
        return Result.ok(comment)

    def add_attachment(
        self,
        assignment: Assignment,
        identity: Identity,
        stored: StoredFile,
        now: Optional[datetime] = None,
    ) -> Attachment:
        now = now or utcnow()
        attachment = Attachment(
            id=new_id(),
            filename=stored.filename,
            path=stored.path,
            mime_type=stored.mime_type,
            size=stored.size,
            uploaded_by=identity.email,
            uploaded_at=now,
        )
        assignment.attachments.append(attachment)
        assignment.updated_at = now
        return attachment

    def remove_attachment(
        self,
        assignment: Assignment,
        attachment_id: str,
        now: Optional[datetime] = None,
    ) -> Result[Attachment]:
        attachment = next((a for a in assignment.attachments if a.id == attachment_id), None)
        if attachment is None:
            return Result.not_found(f"Attachment '{attachment_id}' not found.")
        assignment.attachments = [a for a in assignment.attachments if a.id != attachment_id]
        assignment.updated_at = now or utcnow()
        return Result.ok(attachment)

    # ------------------------------------------------------------------
    # IMPORT
    # ------------------------------------------------------------------
    def import_assignments(
        self,
        identity: Identity,
        items: list,
        now: Optional[datetime] = None,
    ) -> Tuple[List[Assignment], int]:
        """
        Re-own imported records to the caller. Items without a title,
        subject or due date are skipped; attachments and comments are
        never imported.
        """
        now = now or utcnow()
        imported: List[Assignment] = []
        for item in items:
            if not isinstance(item, dict) or not has_required_fields(item):
                continue
            raw = dict(item)
            raw.update({
                "id": new_id(),
                "createdAt": None,
                "updatedAt": None,
                "teacherEmail": identity.email,
                "teacherName": identity.name or identity.email,
                "attachments": [],
                "comments": [],
                "parentId": None,
            })
            imported.append(normalize(raw, now))
        return imported, len(items)
