"""Statistics, export/import and reminder email endpoints."""
from __future__ import annotations
import json
import logging
import smtplib
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from fastapi.responses import Response
from pydantic import BaseModel, ConfigDict, Field

from homework_planner.api.auth import get_current_identity
from homework_planner.api.errors import ApiError, raise_for
from homework_planner.application.assignment_app_service import AssignmentAppService
from homework_planner.container import get_assignment_app_service, get_mailer
from homework_planner.domain.assignment.models import Identity
from homework_planner.domain.assignment.notifications import is_valid_recipient
from homework_planner.domain.assignment.stats import AssignmentStats
from homework_planner.domain.common.result import ErrorKind
from homework_planner.services.mailer import Mailer

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["reports"])


class NotifyBody(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    days_ahead: int = Field(1, alias="daysAhead")
    recipient_email: Optional[str] = Field(None, alias="recipientEmail")


def _serialize_stats(s: AssignmentStats) -> dict:
    return {
        "total": s.total,
        "completed": s.completed,
        "pending": s.pending,
        "completionRate": s.completion_rate,
        "bySubject": s.by_subject,
        "byPriority": s.by_priority,
        "byDueDate": s.by_due_date,
    }


@router.get("/stats")
def get_stats(
    svc: AssignmentAppService = Depends(get_assignment_app_service),
    identity: Identity = Depends(get_current_identity),
):
    return _serialize_stats(svc.stats(identity))


@router.get("/export")
def export_homework(
    svc: AssignmentAppService = Depends(get_assignment_app_service),
    identity: Identity = Depends(get_current_identity),
):
    filename = f"homework-export-{datetime.now(timezone.utc).date().isoformat()}.json"
    return Response(
        content=json.dumps(svc.export_assignments(identity), indent=2),
        media_type="application/json",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )


@router.post("/import")
def import_homework(
    file: UploadFile = File(...),
    svc: AssignmentAppService = Depends(get_assignment_app_service),
    identity: Identity = Depends(get_current_identity),
):
    try:
        items = json.loads(file.file.read().decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError):
        raise ApiError(status.HTTP_400_BAD_REQUEST, "Uploaded file is not valid JSON.", ErrorKind.VALIDATION)

    result = svc.import_assignments(identity, items)
    raise_for(result)
    imported, total = result.value
    return {"message": f"Successfully imported {imported} homeworks", "count": imported, "total": total}


@router.post("/notify")
def notify_upcoming(
    body: NotifyBody,
    svc: AssignmentAppService = Depends(get_assignment_app_service),
    mailer: Mailer = Depends(get_mailer),
    identity: Identity = Depends(get_current_identity),
):
    if not is_valid_recipient(body.recipient_email):
        raise ApiError(status.HTTP_400_BAD_REQUEST, "Valid recipient email is required", ErrorKind.VALIDATION)

    reminder = svc.due_reminder(identity, body.days_ahead)
    if not reminder.assignments:
        return {"message": "No upcoming homeworks found for notification", "count": 0}

    try:
        mailer.send(body.recipient_email, reminder.subject, reminder.body)
    except (smtplib.SMTPException, OSError) as e:
        logger.exception("Sending reminder to %s failed", body.recipient_email)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=f"Failed to send notification: {e}")

    return {
        "message": f"Notification sent successfully to {body.recipient_email}",
        "count": len(reminder.assignments),
    }
