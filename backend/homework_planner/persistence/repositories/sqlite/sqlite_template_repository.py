"""SQLite implementation of TemplateRepository."""
from __future__ import annotations
from typing import List, Sequence

from homework_planner.domain.template.models import Template
from homework_planner.domain.template.service import template_to_dict, templates_from_list
from homework_planner.persistence.interfaces.template_repository import TemplateRepository
from homework_planner.persistence.repositories.sqlite.sqlite_document_store import read_document, write_document

DOCUMENT_KEY = "templates"


class SqliteTemplateRepository(TemplateRepository):

    def load(self) -> List[Template]:
        return templates_from_list(read_document(DOCUMENT_KEY))

    def save(self, templates: Sequence[Template]) -> bool:
        return write_document(DOCUMENT_KEY, [template_to_dict(t) for t in templates])
