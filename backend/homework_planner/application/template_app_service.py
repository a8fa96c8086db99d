"""Application service for assignment templates."""
from __future__ import annotations
import logging
from typing import List

from homework_planner.domain.assignment.models import Identity
from homework_planner.domain.common.result import Result
from homework_planner.domain.template.models import Template
from homework_planner.domain.template.service import create_template
from homework_planner.persistence.interfaces.template_repository import TemplateRepository

logger = logging.getLogger(__name__)


class TemplateAppService:
    def __init__(self, repo: TemplateRepository):
        self._repo = repo

    def list_templates(self) -> List[Template]:
        return self._repo.load()

    def create_template(self, identity: Identity, data: dict) -> Result[Template]:
        result = create_template(identity, data)
        if not result.is_success:
            return result
        templates = self._repo.load()
        templates.append(result.value)
        if not self._repo.save(templates):
            logger.error("Saving template failed")
            return Result.persistence_failure("Failed to create template")
        return result

    def delete_template(self, template_id: str) -> Result[bool]:
        templates = self._repo.load()
        remaining = [t for t in templates if t.id != template_id]
        if len(remaining) == len(templates):
            return Result.not_found(f"Template '{template_id}' not found.")
        if not self._repo.save(remaining):
            logger.error("Saving templates after delete failed")
            return Result.persistence_failure("Failed to delete template")
        return Result.ok(True)
