"""Template API endpoints."""
from __future__ import annotations
from typing import List, Optional

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel

from homework_planner.api.auth import get_current_identity
from homework_planner.api.errors import raise_for
from homework_planner.application.template_app_service import TemplateAppService
from homework_planner.container import get_template_app_service
from homework_planner.domain.assignment.models import Identity
from homework_planner.domain.template.service import template_to_dict

router = APIRouter(prefix="/api/templates", tags=["templates"])


class TemplateBody(BaseModel):
    title: Optional[str] = None
    subject: Optional[str] = None
    description: Optional[str] = None
    tags: List[str] = []


@router.get("")
def list_templates(
    svc: TemplateAppService = Depends(get_template_app_service),
    identity: Identity = Depends(get_current_identity),
):
    return [template_to_dict(t) for t in svc.list_templates()]


@router.post("", status_code=status.HTTP_201_CREATED)
def create_template(
    body: TemplateBody,
    svc: TemplateAppService = Depends(get_template_app_service),
    identity: Identity = Depends(get_current_identity),
):
    result = svc.create_template(identity, body.model_dump())
    raise_for(result)
    return template_to_dict(result.value)


@router.delete("/{template_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_template(
    template_id: str,
    svc: TemplateAppService = Depends(get_template_app_service),
    identity: Identity = Depends(get_current_identity),
):
    raise_for(svc.delete_template(template_id))
