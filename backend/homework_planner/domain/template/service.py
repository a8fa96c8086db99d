"""Template rules and (de)serialization."""
from __future__ import annotations
from datetime import datetime
from typing import Any, Dict, List, Optional

from homework_planner.domain.assignment.models import Identity
from homework_planner.domain.common.clock import format_datetime, new_id, parse_datetime, utcnow
from homework_planner.domain.common.result import Result
from homework_planner.domain.template.models import Template


def validate_template_content(data: dict) -> Result[dict]:
    title = str(data.get("title") or "").strip()
    subject = str(data.get("subject") or "").strip()
    if not title or not subject:
        return Result.fail("Title and subject are required")
    return Result.ok(data)


def create_template(identity: Identity, data: dict, now: Optional[datetime] = None) -> Result[Template]:
    validation = validate_template_content(data)
    if not validation.is_success:
        return Result.fail(validation.error)

    now = now or utcnow()
    tags = data.get("tags")
    return Result.ok(Template(
        id=new_id(),
        title=str(data["title"]).strip(),
        subject=str(data["subject"]).strip(),
        description=str(data.get("description") or ""),
        tags=[str(t) for t in tags] if isinstance(tags, list) else [],
        created_by=identity.email,
        created_at=now,
        updated_at=now,
    ))


def template_from_dict(raw: Dict[str, Any], now: Optional[datetime] = None) -> Template:
    now = now or utcnow()
    created = parse_datetime(raw.get("createdAt")) or now
    tags = raw.get("tags")
    return Template(
        id=str(raw.get("id") or new_id()),
        title=str(raw.get("title") or ""),
        subject=str(raw.get("subject") or ""),
        description=str(raw.get("description") or ""),
        tags=[str(t) for t in tags] if isinstance(tags, list) else [],
        created_by=str(raw.get("createdBy") or ""),
        created_at=created,
        updated_at=parse_datetime(raw.get("updatedAt")) or created,
    )


def template_to_dict(template: Template) -> Dict[str, Any]:
    return {
        "id": template.id,
        "title": template.title,
        "subject": template.subject,
        "description": template.description,
        "tags": list(template.tags),
        "createdBy": template.created_by,
        "createdAt": format_datetime(template.created_at),
        "updatedAt": format_datetime(template.updated_at),
    }


def templates_from_list(raws: Any) -> List[Template]:
    if not isinstance(raws, list):
        return []
    now = utcnow()
    return [template_from_dict(r, now) for r in raws if isinstance(r, dict)]
