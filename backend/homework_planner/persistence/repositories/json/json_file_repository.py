"""
JSON file implementations of the whole-set repositories.

Same layout as the SQLite documents: one pretty-printed JSON array per file
(homework.json, templates.json). Saves go to a temp file that is then
renamed over the target, so a crash never leaves a half-written file.
"""
from __future__ import annotations
import json
import logging
import os
import tempfile
from typing import Any, List, Optional, Sequence

from homework_planner.domain.assignment.models import Assignment
from homework_planner.domain.assignment.normalizer import assignment_to_dict, normalize_all
from homework_planner.domain.template.models import Template
from homework_planner.domain.template.service import template_to_dict, templates_from_list
from homework_planner.persistence.interfaces.assignment_repository import AssignmentRepository
from homework_planner.persistence.interfaces.template_repository import TemplateRepository

logger = logging.getLogger(__name__)


def read_json_file(path: str) -> Optional[Any]:
    if not os.path.exists(path):
        return None
    try:
        with open(path, "r", encoding="utf-8") as f:
            raw = f.read()
        if not raw.strip():
            return None
        return json.loads(raw)
    except (OSError, json.JSONDecodeError):
        logger.exception("Error reading %s", path)
        return None


def write_json_file(path: str, value: Any) -> bool:
    directory = os.path.dirname(os.path.abspath(path))
    try:
        os.makedirs(directory, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=directory, suffix=".tmp")
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(value, f, indent=2)
        os.replace(tmp_path, path)
    except OSError:
        logger.exception("Error writing %s", path)
        return False
    return True


class JsonFileAssignmentRepository(AssignmentRepository):

    def __init__(self, path: str):
        self._path = path

    def load(self) -> List[Assignment]:
        return normalize_all(read_json_file(self._path))

    def save(self, assignments: Sequence[Assignment]) -> bool:
        return write_json_file(self._path, [assignment_to_dict(a) for a in assignments])


class JsonFileTemplateRepository(TemplateRepository):

    def __init__(self, path: str):
        self._path = path

    def load(self) -> List[Template]:
        return templates_from_list(read_json_file(self._path))

    def save(self, templates: Sequence[Template]) -> bool:
        return write_json_file(self._path, [template_to_dict(t) for t in templates])
