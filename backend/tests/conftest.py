"""Shared fixtures: throwaway storage locations, in-memory repositories, identities."""
import os
import tempfile

# Configuration is read at import time, so point it somewhere disposable
# before anything from homework_planner is imported.
_SESSION_DIR = tempfile.mkdtemp(prefix="homework-planner-tests-")
os.environ.setdefault("DATA_DIR", _SESSION_DIR)
os.environ.setdefault("DATABASE_PATH", os.path.join(_SESSION_DIR, "homework.db"))
os.environ.setdefault("UPLOADS_DIR", os.path.join(_SESSION_DIR, "uploads"))
os.environ.setdefault("STORAGE_BACKEND", "sqlite")

from datetime import datetime, timezone  # noqa: E402
from typing import List, Sequence  # noqa: E402

import pytest  # noqa: E402

from homework_planner.domain.assignment.models import Assignment, Identity  # noqa: E402
from homework_planner.domain.assignment.normalizer import assignment_to_dict, normalize_all  # noqa: E402
from homework_planner.domain.common.clock import new_id  # noqa: E402
from homework_planner.persistence.interfaces.assignment_repository import AssignmentRepository  # noqa: E402
from homework_planner.persistence.interfaces.file_store import FileStore  # noqa: E402
from homework_planner.domain.assignment.models import StoredFile  # noqa: E402


class MemoryAssignmentRepository(AssignmentRepository):
    """Keeps the serialized set in memory, exactly as a real backend would store it."""

    def __init__(self, assignments: Sequence[Assignment] = ()):
        self.stored = [assignment_to_dict(a) for a in assignments]
        self.fail_saves = False
        self.saves = 0

    def load(self) -> List[Assignment]:
        return normalize_all(self.stored)

    def save(self, assignments: Sequence[Assignment]) -> bool:
        if self.fail_saves:
            return False
        self.saves += 1
        self.stored = [assignment_to_dict(a) for a in assignments]
        return True


class RecordingFileStore(FileStore):
    def __init__(self):
        self.deleted = []

    def store(self, filename, mime_type, stream):
        data = stream.read()
        return StoredFile(filename=filename, path=f"/uploads/{filename}", mime_type=mime_type, size=len(data))

    def delete(self, path):
        self.deleted.append(path)
        return True


def make_assignment(**overrides) -> Assignment:
    """An Assignment with sensible defaults; keyword overrides win."""
    stamp = datetime(2024, 1, 1, tzinfo=timezone.utc)
    fields = dict(
        id=new_id(),
        title="Worksheet",
        subject="Math",
        due_date=datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc),
        created_at=stamp,
        updated_at=stamp,
        teacher_email="alice@school.example",
        teacher_name="Alice",
    )
    fields.update(overrides)
    return Assignment(**fields)


@pytest.fixture
def alice() -> Identity:
    return Identity(email="alice@school.example", name="Alice")


@pytest.fixture
def bob() -> Identity:
    return Identity(email="bob@school.example", name="Bob")


@pytest.fixture
def admin() -> Identity:
    return Identity(email="head@school.example", name="Head", is_admin=True)


@pytest.fixture
def repo() -> MemoryAssignmentRepository:
    return MemoryAssignmentRepository()


@pytest.fixture
def file_store() -> RecordingFileStore:
    return RecordingFileStore()
