"""Homework CRUD, bulk, comment and attachment API endpoints."""
from __future__ import annotations
from typing import Any, Dict, List, Optional, Union

from fastapi import APIRouter, Depends, File, Query, UploadFile, status
from pydantic import BaseModel, ConfigDict, Field

from homework_planner.api.auth import get_current_identity
from homework_planner.api.errors import ApiError, raise_for
from homework_planner.application.assignment_app_service import AssignmentAppService
from homework_planner.application.sub_entity_app_service import AttachmentAppService, CommentAppService
from homework_planner.container import (
    get_assignment_app_service,
    get_attachment_app_service,
    get_comment_app_service,
    get_file_store,
)
from homework_planner.core.config import DEFAULT_PAGE_LIMIT
from homework_planner.domain.assignment.models import Identity
from homework_planner.domain.assignment.normalizer import assignment_to_dict, attachment_to_dict, comment_to_dict
from homework_planner.domain.assignment.query import AssignmentFilters, Pagination
from homework_planner.domain.assignment.rules import validate_upload
from homework_planner.domain.common.result import ErrorKind
from homework_planner.persistence.interfaces.file_store import FileStore

router = APIRouter(tags=["homework"])


# ------------------------------------------------------------------
# Pydantic schemas
# ------------------------------------------------------------------
class RecurrenceBody(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    type: str = "none"
    interval: Any = 1
    days_of_week: List[Any] = Field(default_factory=list, alias="daysOfWeek")


class AssignmentBody(BaseModel):
    """Create and update payload; every field optional so the domain rules decide."""

    model_config = ConfigDict(populate_by_name=True)

    title: Optional[str] = None
    subject: Optional[str] = None
    description: Optional[str] = None
    due_date: Optional[str] = Field(None, alias="dueDate")
    priority: Optional[str] = None
    tags: Optional[List[str]] = None
    year_group: Optional[Union[str, int]] = Field(None, alias="yearGroup")
    class_name: Optional[Union[str, int]] = Field(None, alias="className")
    completed: Optional[bool] = None
    is_recurring: Optional[bool] = Field(None, alias="isRecurring")
    recurrence: Optional[RecurrenceBody] = None

    def payload(self) -> dict:
        return self.model_dump(by_alias=True, exclude_unset=True)


class BulkDeleteBody(BaseModel):
    ids: List[str] = []


class BulkUpdateBody(BaseModel):
    ids: List[str] = []
    updates: AssignmentBody = AssignmentBody()


class CommentBody(BaseModel):
    content: Optional[str] = None


# ------------------------------------------------------------------
# Serializers
# ------------------------------------------------------------------
def _serialize_pagination(p: Pagination) -> dict:
    return {
        "total": p.total,
        "page": p.page,
        "limit": p.limit,
        "totalPages": p.total_pages,
        "hasNext": p.has_next,
        "hasPrevious": p.has_previous,
    }


# ------------------------------------------------------------------
# Health check
# ------------------------------------------------------------------
@router.get("/health")
def health():
    return {"status": "ok"}


# ------------------------------------------------------------------
# Homework endpoints
# ------------------------------------------------------------------
@router.get("/api/homework")
def list_homework(
    search: Optional[str] = None,
    subject: Optional[str] = None,
    status_filter: Optional[str] = Query(None, alias="status"),
    priority: Optional[str] = None,
    tag: Optional[List[str]] = Query(None),
    date_from: Optional[str] = Query(None, alias="from"),
    date_to: Optional[str] = Query(None, alias="to"),
    year_group: Optional[str] = Query(None, alias="yearGroup"),
    teacher_email: Optional[str] = Query(None, alias="teacherEmail"),
    limit: int = Query(DEFAULT_PAGE_LIMIT, ge=1),
    page: int = Query(1, ge=1),
    svc: AssignmentAppService = Depends(get_assignment_app_service),
):
    filters = AssignmentFilters(
        search=search,
        subject=subject,
        status=status_filter,
        priority=priority,
        tags=tag or [],
        date_from=date_from,
        date_to=date_to,
        year_group=year_group,
        teacher_email=teacher_email,
    )
    result = svc.list_assignments(filters, page=page, limit=limit)
    return {
        "data": [assignment_to_dict(a) for a in result.items],
        "pagination": _serialize_pagination(result.pagination),
    }


@router.post("/api/homework", status_code=status.HTTP_201_CREATED)
def create_homework(
    body: AssignmentBody,
    svc: AssignmentAppService = Depends(get_assignment_app_service),
    identity: Identity = Depends(get_current_identity),
):
    result = svc.create_assignment(identity, body.payload())
    raise_for(result)
    return assignment_to_dict(result.value)


@router.post("/api/homework/bulk-delete")
def bulk_delete_homework(
    body: BulkDeleteBody,
    svc: AssignmentAppService = Depends(get_assignment_app_service),
    identity: Identity = Depends(get_current_identity),
):
    result = svc.bulk_delete(identity, body.ids)
    raise_for(result)
    return {"message": f"Successfully deleted {result.value} homeworks", "count": result.value}


@router.post("/api/homework/bulk-update")
def bulk_update_homework(
    body: BulkUpdateBody,
    svc: AssignmentAppService = Depends(get_assignment_app_service),
    identity: Identity = Depends(get_current_identity),
):
    result = svc.bulk_update(identity, body.ids, body.updates.payload())
    raise_for(result)
    return {"message": f"Successfully updated {result.value} homeworks", "count": result.value}


@router.get("/api/homework/{homework_id}")
def get_homework(
    homework_id: str,
    svc: AssignmentAppService = Depends(get_assignment_app_service),
):
    result = svc.get_assignment(homework_id)
    raise_for(result)
    return assignment_to_dict(result.value)


@router.put("/api/homework/{homework_id}")
def update_homework(
    homework_id: str,
    body: AssignmentBody,
    svc: AssignmentAppService = Depends(get_assignment_app_service),
    identity: Identity = Depends(get_current_identity),
):
    result = svc.update_assignment(identity, homework_id, body.payload())
    raise_for(result)
    return assignment_to_dict(result.value)


@router.delete("/api/homework/{homework_id}")
def delete_homework(
    homework_id: str,
    svc: AssignmentAppService = Depends(get_assignment_app_service),
    identity: Identity = Depends(get_current_identity),
):
    result = svc.delete_assignment(identity, homework_id)
    raise_for(result)
    return {"message": "Homework deleted successfully", "count": result.value}


@router.post("/api/homework/{homework_id}/complete")
def toggle_homework_complete(
    homework_id: str,
    svc: AssignmentAppService = Depends(get_assignment_app_service),
    identity: Identity = Depends(get_current_identity),
):
    result = svc.toggle_complete(identity, homework_id)
    raise_for(result)
    return assignment_to_dict(result.value)


# ------------------------------------------------------------------
# Comments
# ------------------------------------------------------------------
@router.get("/api/homework/{homework_id}/comments")
def list_comments(
    homework_id: str,
    svc: CommentAppService = Depends(get_comment_app_service),
    identity: Identity = Depends(get_current_identity),
):
    result = svc.list_comments(homework_id)
    raise_for(result)
    return [comment_to_dict(c) for c in result.value]


@router.post("/api/homework/{homework_id}/comments", status_code=status.HTTP_201_CREATED)
def add_comment(
    homework_id: str,
    body: CommentBody,
    svc: CommentAppService = Depends(get_comment_app_service),
    identity: Identity = Depends(get_current_identity),
):
    result = svc.add_comment(identity, homework_id, body.content)
    raise_for(result)
    return comment_to_dict(result.value)


# ------------------------------------------------------------------
# Attachments
# ------------------------------------------------------------------
def _reject_oversized(mime_type: str, size: int) -> None:
    checked = validate_upload(mime_type, size)
    if not checked.is_success:
        raise ApiError(status.HTTP_413_REQUEST_ENTITY_TOO_LARGE, checked.error, ErrorKind.VALIDATION)


@router.post("/api/homework/{homework_id}/attachments", status_code=status.HTTP_201_CREATED)
def upload_attachment(
    homework_id: str,
    file: UploadFile = File(...),
    svc: AttachmentAppService = Depends(get_attachment_app_service),
    files: FileStore = Depends(get_file_store),
    identity: Identity = Depends(get_current_identity),
):
    mime_type = file.content_type or "application/octet-stream"
    raise_for(validate_upload(mime_type, 0))
    if file.size is not None:
        _reject_oversized(mime_type, file.size)

    stored = files.store(file.filename or "upload", mime_type, file.file)
    try:
        _reject_oversized(mime_type, stored.size)
    except ApiError:
        files.delete(stored.path)
        raise

    result = svc.add_attachment(identity, homework_id, stored)
    raise_for(result)
    return attachment_to_dict(result.value)


@router.delete("/api/homework/{homework_id}/attachments/{attachment_id}")
def delete_attachment(
    homework_id: str,
    attachment_id: str,
    svc: AttachmentAppService = Depends(get_attachment_app_service),
    identity: Identity = Depends(get_current_identity),
) -> Dict[str, str]:
    result = svc.remove_attachment(identity, homework_id, attachment_id)
    raise_for(result)
    return {"message": "Attachment deleted successfully"}
