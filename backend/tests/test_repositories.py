"""Storage backends and the local file store."""
import io
import json
import os

import pytest

from conftest import make_assignment
from homework_planner.core import config
from homework_planner.domain.assignment.models import Comment
from homework_planner.domain.template.models import Template
from homework_planner.persistence.db import get_connection, init_db
from homework_planner.persistence.files.local_file_store import LocalFileStore
from homework_planner.persistence.repositories.json.json_file_repository import (
    JsonFileAssignmentRepository,
    JsonFileTemplateRepository,
)
from homework_planner.persistence.repositories.sqlite.sqlite_assignment_repository import SqliteAssignmentRepository
from homework_planner.persistence.repositories.sqlite.sqlite_template_repository import SqliteTemplateRepository


@pytest.fixture
def sqlite_db(tmp_path, monkeypatch):
    monkeypatch.setattr(config, "DATABASE_PATH", str(tmp_path / "test.db"))
    init_db()
    return tmp_path


def _sample():
    first = make_assignment(id="a1", tags=["x"], year_group="7")
    first.comments.append(Comment(
        id="c1", content="Well done", author="bob@school.example", author_name="Bob",
        created_at=first.created_at, updated_at=first.created_at,
    ))
    return [first, make_assignment(id="a2", completed=True, priority="high")]


def _template():
    return Template(
        id="t1", title="Reading log", subject="English", description="", tags=["weekly"],
        created_by="alice@school.example", created_at=make_assignment().created_at,
        updated_at=make_assignment().created_at,
    )


# ------------------------------------------------------------------
# SQLite
# ------------------------------------------------------------------
def test_sqlite_empty_store_loads_as_empty(sqlite_db):
    assert SqliteAssignmentRepository().load() == []
    assert SqliteTemplateRepository().load() == []


def test_sqlite_save_then_load(sqlite_db):
    repo = SqliteAssignmentRepository()
    saved = _sample()
    assert repo.save(saved) is True
    assert repo.load() == saved

    assert repo.save(saved[1:]) is True
    assert [a.id for a in repo.load()] == ["a2"]


def test_sqlite_templates(sqlite_db):
    repo = SqliteTemplateRepository()
    assert repo.save([_template()]) is True
    assert repo.load() == [_template()]


def test_sqlite_corrupt_document_loads_as_empty(sqlite_db):
    conn = get_connection()
    conn.execute("INSERT INTO documents (key, body, updated_at) VALUES ('assignments', '{not json', '')")
    conn.commit()
    conn.close()
    assert SqliteAssignmentRepository().load() == []


def test_init_db_seeds_one_admin(sqlite_db):
    init_db()
    conn = get_connection()
    rows = conn.execute("SELECT email, is_admin FROM users").fetchall()
    conn.close()
    assert [(r["email"], r["is_admin"]) for r in rows] == [(config.DEFAULT_ADMIN_EMAIL, 1)]


# ------------------------------------------------------------------
# JSON files
# ------------------------------------------------------------------
def test_json_file_missing_or_blank_loads_as_empty(tmp_path):
    path = tmp_path / "homework.json"
    repo = JsonFileAssignmentRepository(str(path))
    assert repo.load() == []
    path.write_text("   ")
    assert repo.load() == []


def test_json_file_save_then_load(tmp_path):
    path = tmp_path / "nested" / "homework.json"
    repo = JsonFileAssignmentRepository(str(path))
    saved = _sample()
    assert repo.save(saved) is True
    assert repo.load() == saved

    on_disk = json.loads(path.read_text())
    assert on_disk[0]["id"] == "a1"
    assert on_disk[0]["comments"][0]["authorName"] == "Bob"
    assert [p.name for p in path.parent.iterdir()] == ["homework.json"]


def test_json_file_records_are_normalized_on_load(tmp_path):
    path = tmp_path / "homework.json"
    path.write_text(json.dumps([{"id": "legacy", "title": "Old"}]))
    loaded = JsonFileAssignmentRepository(str(path)).load()
    assert loaded[0].priority == "medium"
    assert loaded[0].tags == []


def test_json_file_templates(tmp_path):
    repo = JsonFileTemplateRepository(str(tmp_path / "templates.json"))
    assert repo.save([_template()]) is True
    assert repo.load() == [_template()]


# ------------------------------------------------------------------
# Local file store
# ------------------------------------------------------------------
def test_local_file_store_round_trip(tmp_path):
    store = LocalFileStore(str(tmp_path / "uploads"))
    stored = store.store("../../sheet.pdf", "application/pdf", io.BytesIO(b"hello"))
    assert stored.filename == "sheet.pdf"
    assert stored.path.startswith("/uploads/")
    assert stored.path.endswith("-sheet.pdf")
    assert stored.size == 5

    on_disk = os.path.join(store.root, stored.path[len("/uploads/"):])
    assert os.path.exists(on_disk)
    assert store.delete(stored.path) is True
    assert not os.path.exists(on_disk)
    assert store.delete(stored.path) is False
