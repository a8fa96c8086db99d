"""SQLite implementation of AssignmentRepository."""
from __future__ import annotations
from typing import List, Sequence

from homework_planner.domain.assignment.models import Assignment
from homework_planner.domain.assignment.normalizer import assignment_to_dict, normalize_all
from homework_planner.persistence.interfaces.assignment_repository import AssignmentRepository
from homework_planner.persistence.repositories.sqlite.sqlite_document_store import read_document, write_document

DOCUMENT_KEY = "assignments"


class SqliteAssignmentRepository(AssignmentRepository):

    def load(self) -> List[Assignment]:
        return normalize_all(read_document(DOCUMENT_KEY))

    def save(self, assignments: Sequence[Assignment]) -> bool:
        return write_document(DOCUMENT_KEY, [assignment_to_dict(a) for a in assignments])
