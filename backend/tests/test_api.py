"""API tests using FastAPI TestClient."""
import io
import json
import uuid
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from homework_planner import container
from homework_planner.core import config
from homework_planner.main import app
from homework_planner.persistence.db import create_user, init_db
from homework_planner.persistence.interfaces.file_store import FileStore
from homework_planner.services.mailer import Mailer


class OutboxMailer(Mailer):
    def __init__(self):
        self.sent = []

    def send(self, recipient, subject, body):
        self.sent.append((recipient, subject, body))


@pytest.fixture(scope="module")
def outbox():
    return OutboxMailer()


@pytest.fixture(scope="module")
def client(outbox):
    container.reset()
    init_db()
    app.dependency_overrides[container.get_mailer] = lambda: outbox
    yield TestClient(app)
    app.dependency_overrides.clear()


def _login(client, email, password):
    resp = client.post("/auth/login", json={"email": email, "password": password})
    assert resp.status_code == 200, resp.text
    return {"Authorization": f"Bearer {resp.json()['token']}"}


@pytest.fixture(scope="module")
def admin_headers(client):
    return _login(client, config.DEFAULT_ADMIN_EMAIL, config.DEFAULT_ADMIN_PASSWORD)


@pytest.fixture(scope="module")
def teacher(client):
    email = f"teacher-{uuid.uuid4().hex[:8]}@school.example"
    create_user(email, "s3cret-pass", "Ms Teacher")
    return email


@pytest.fixture(scope="module")
def headers(client, teacher):
    return _login(client, teacher, "s3cret-pass")


def _create(client, headers, **fields):
    body = {"title": "Worksheet", "subject": "Math", "dueDate": "2024-03-01T09:00:00Z"}
    body.update(fields)
    resp = client.post("/api/homework", json=body, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()


# ------------------------------------------------------------------
# Health
# ------------------------------------------------------------------
def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


# ------------------------------------------------------------------
# Auth
# ------------------------------------------------------------------
def test_login_success(client):
    resp = client.post(
        "/auth/login",
        json={"email": config.DEFAULT_ADMIN_EMAIL, "password": config.DEFAULT_ADMIN_PASSWORD},
    )
    assert resp.status_code == 200
    data = resp.json()
    assert "token" in data
    assert data["teacherEmail"] == config.DEFAULT_ADMIN_EMAIL
    assert data["isAdmin"] is True


def test_login_bad_password(client):
    resp = client.post("/auth/login", json={"email": config.DEFAULT_ADMIN_EMAIL, "password": "wrong"})
    assert resp.status_code == 401


def test_check_and_logout(client, headers, teacher):
    assert client.get("/auth/check").json() == {"authenticated": False}
    data = client.get("/auth/check", headers=headers).json()
    assert data["authenticated"] is True
    assert data["teacherEmail"] == teacher
    assert client.post("/auth/logout", headers=headers).status_code == 200


def test_writes_require_login(client):
    resp = client.post("/api/homework", json={"title": "x", "subject": "y", "dueDate": "2024-01-01"})
    assert resp.status_code == 401


# ------------------------------------------------------------------
# Homework CRUD
# ------------------------------------------------------------------
def test_create_get_update_delete(client, headers, teacher):
    created = _create(client, headers, priority="high", tags=["algebra"])
    assert created["teacherEmail"] == teacher
    assert created["teacherName"] == "Ms Teacher"
    assert created["createdAt"] == created["updatedAt"]

    fetched = client.get(f"/api/homework/{created['id']}")
    assert fetched.status_code == 200
    assert fetched.json()["tags"] == ["algebra"]

    resp = client.put(f"/api/homework/{created['id']}", json={"title": "Worksheet 2"}, headers=headers)
    assert resp.status_code == 200
    assert resp.json()["title"] == "Worksheet 2"
    assert resp.json()["priority"] == "high"

    resp = client.delete(f"/api/homework/{created['id']}", headers=headers)
    assert resp.status_code == 200
    assert resp.json()["count"] == 1
    assert client.get(f"/api/homework/{created['id']}").status_code == 404


def test_numeric_year_group_is_stored_as_text(client, headers):
    created = _create(client, headers, yearGroup=7, className=3)
    assert created["yearGroup"] == "7"
    assert created["className"] == "3"
    resp = client.get("/api/homework", params={"yearGroup": "7", "teacherEmail": created["teacherEmail"]})
    assert created["id"] in [a["id"] for a in resp.json()["data"]]


def test_malformed_body_is_400_with_code(client, headers):
    resp = client.post(
        "/api/homework",
        json={"title": "t", "subject": "s", "dueDate": "2024-01-01", "tags": "not-a-list"},
        headers=headers,
    )
    assert resp.status_code == 400
    assert resp.json()["code"] == "VALIDATION_ERROR"
    assert "tags" in resp.json()["detail"]

    resp = client.get("/api/homework", params={"limit": 0})
    assert resp.status_code == 400
    assert resp.json()["code"] == "VALIDATION_ERROR"


def test_create_missing_fields_is_400(client, headers):
    resp = client.post("/api/homework", json={"title": "No subject"}, headers=headers)
    assert resp.status_code == 400
    assert resp.json()["code"] == "VALIDATION_ERROR"


def test_other_teacher_cannot_modify_but_admin_can(client, headers, admin_headers):
    created = _create(client, admin_headers)
    resp = client.put(f"/api/homework/{created['id']}", json={"title": "Mine now"}, headers=headers)
    assert resp.status_code == 403
    assert resp.json()["code"] == "PERMISSION_DENIED"

    mine = _create(client, headers)
    assert client.post(f"/api/homework/{mine['id']}/complete", headers=admin_headers).json()["completed"] is True


def test_list_filters_and_paginates(client, headers, teacher):
    tag = uuid.uuid4().hex
    for day in ("05", "02", "09"):
        _create(client, headers, dueDate=f"2030-01-{day}T10:00:00Z", tags=[tag])

    resp = client.get("/api/homework", params={"tag": tag, "limit": 2, "page": 1})
    body = resp.json()
    assert [a["dueDate"][:10] for a in body["data"]] == ["2030-01-02", "2030-01-05"]
    assert body["pagination"] == {
        "total": 3, "page": 1, "limit": 2, "totalPages": 2, "hasNext": True, "hasPrevious": False,
    }

    resp = client.get("/api/homework", params={"tag": tag, "from": "2030-01-04", "to": "2030-01-05"})
    assert len(resp.json()["data"]) == 1


def test_recurring_create_and_series_delete(client, headers):
    first = _create(
        client, headers, dueDate="2031-01-06T08:00:00Z", isRecurring=True,
        recurrence={"type": "weekly", "interval": 1},
    )
    assert first["parentId"] == first["id"]
    assert first["nextOccurrence"].startswith("2031-01-13")

    resp = client.get("/api/homework", params={"from": "2031-01-01", "to": "2031-12-31"})
    series = [a for a in resp.json()["data"] if a["parentId"] == first["id"]]
    assert len(series) == 4

    resp = client.delete(f"/api/homework/{series[2]['id']}", headers=headers)
    assert resp.json()["count"] == 4


def test_bulk_update_and_delete(client, headers, admin_headers):
    mine = [_create(client, headers)["id"] for _ in range(2)]
    theirs = _create(client, admin_headers)["id"]

    resp = client.post(
        "/api/homework/bulk-update",
        json={"ids": mine + [theirs], "updates": {"priority": "low"}},
        headers=headers,
    )
    assert resp.status_code == 200
    assert resp.json()["count"] == 2
    assert client.get(f"/api/homework/{theirs}").json()["priority"] == "medium"

    resp = client.post("/api/homework/bulk-update", json={"ids": [theirs], "updates": {"priority": "low"}},
                       headers=headers)
    assert resp.status_code == 404

    resp = client.post("/api/homework/bulk-delete", json={"ids": mine + [theirs]}, headers=headers)
    assert resp.json()["count"] == 2
    assert client.get(f"/api/homework/{theirs}").status_code == 200

    assert client.post("/api/homework/bulk-delete", json={"ids": []}, headers=headers).status_code == 400


# ------------------------------------------------------------------
# Comments and attachments
# ------------------------------------------------------------------
def test_comments(client, headers, admin_headers):
    hw = _create(client, admin_headers)
    url = f"/api/homework/{hw['id']}/comments"
    assert client.post(url, json={"content": "  "}, headers=headers).status_code == 400

    resp = client.post(url, json={"content": "Can we get an extension?"}, headers=headers)
    assert resp.status_code == 201
    assert resp.json()["authorName"] == "Ms Teacher"
    assert [c["content"] for c in client.get(url, headers=headers).json()] == ["Can we get an extension?"]


def test_attachment_upload_and_delete(client, headers):
    hw = _create(client, headers)
    url = f"/api/homework/{hw['id']}/attachments"

    resp = client.post(url, files={"file": ("notes.txt", io.BytesIO(b"read chapter 3"), "text/plain")},
                       headers=headers)
    assert resp.status_code == 201
    attachment = resp.json()
    assert attachment["filename"] == "notes.txt"
    assert attachment["size"] == 14
    assert client.get(attachment["path"]).content == b"read chapter 3"

    resp = client.delete(f"{url}/{attachment['id']}", headers=headers)
    assert resp.status_code == 200
    assert client.get(f"/api/homework/{hw['id']}").json()["attachments"] == []


def test_attachment_rejects_type_and_size(client, headers, monkeypatch):
    hw = _create(client, headers)
    url = f"/api/homework/{hw['id']}/attachments"

    resp = client.post(url, files={"file": ("run.sh", io.BytesIO(b"echo"), "application/x-sh")}, headers=headers)
    assert resp.status_code == 400

    monkeypatch.setattr("homework_planner.domain.assignment.rules.MAX_UPLOAD_BYTES", 4)
    resp = client.post(url, files={"file": ("big.txt", io.BytesIO(b"too long"), "text/plain")}, headers=headers)
    assert resp.status_code == 413
    assert client.get(f"/api/homework/{hw['id']}").json()["attachments"] == []


# ------------------------------------------------------------------
# Templates
# ------------------------------------------------------------------
def test_templates(client, headers):
    resp = client.post("/api/templates", json={"title": "Reading log", "subject": "English"}, headers=headers)
    assert resp.status_code == 201
    template_id = resp.json()["id"]
    assert template_id in [t["id"] for t in client.get("/api/templates", headers=headers).json()]

    assert client.post("/api/templates", json={"title": "x"}, headers=headers).status_code == 400
    assert client.delete(f"/api/templates/{template_id}", headers=headers).status_code == 204
    assert client.delete(f"/api/templates/{template_id}", headers=headers).status_code == 404


# ------------------------------------------------------------------
# Stats, export/import, notify
# ------------------------------------------------------------------
def test_stats_export_import(client):
    email = f"stats-{uuid.uuid4().hex[:8]}@school.example"
    create_user(email, "pw", "Stats Teacher")
    headers = _login(client, email, "pw")

    done = _create(client, headers, subject="Math")
    client.post(f"/api/homework/{done['id']}/complete", headers=headers)
    _create(client, headers, subject="Art")

    stats = client.get("/api/stats", headers=headers).json()
    assert stats["total"] == 2
    assert stats["completionRate"] == 50
    assert stats["bySubject"] == {"Math": 1, "Art": 1}

    resp = client.get("/api/export", headers=headers)
    assert resp.headers["content-disposition"].startswith("attachment; filename=homework-export-")
    exported = resp.json()
    assert len(exported) == 2

    resp = client.post(
        "/api/import",
        files={"file": ("export.json", io.BytesIO(json.dumps(exported).encode()), "application/json")},
        headers=headers,
    )
    assert resp.json()["count"] == 2
    assert client.get("/api/stats", headers=headers).json()["total"] == 4

    resp = client.post("/api/import", files={"file": ("x.json", io.BytesIO(b"{oops"), "application/json")},
                       headers=headers)
    assert resp.status_code == 400
    resp = client.post("/api/import", files={"file": ("x.json", io.BytesIO(b"{}"), "application/json")},
                       headers=headers)
    assert resp.status_code == 400


def test_notify(client, outbox):
    email = f"notify-{uuid.uuid4().hex[:8]}@school.example"
    create_user(email, "pw", "Notify Teacher")
    headers = _login(client, email, "pw")

    resp = client.post("/api/notify", json={"recipientEmail": "not-an-email"}, headers=headers)
    assert resp.status_code == 400

    resp = client.post("/api/notify", json={"recipientEmail": "parent@home.example"}, headers=headers)
    assert resp.json()["count"] == 0
    assert outbox.sent == []

    due = datetime.now(timezone.utc) + timedelta(days=2)
    _create(client, headers, title="Lab report", dueDate=due.strftime("%Y-%m-%dT%H:%M:%SZ"))
    resp = client.post(
        "/api/notify", json={"daysAhead": 2, "recipientEmail": "parent@home.example"}, headers=headers,
    )
    assert resp.status_code == 200
    assert resp.json()["count"] == 1
    recipient, subject, body = outbox.sent[-1]
    assert recipient == "parent@home.example"
    assert subject.startswith("Upcoming Homeworks - ")
    assert "Lab report (Math)" in body


class UnwritableFileStore(FileStore):
    def __init__(self):
        self.stored = []

    def store(self, filename, mime_type, stream):
        self.stored.append(filename)
        raise AssertionError("oversized upload reached the file store")

    def delete(self, path):
        return False


def test_oversized_upload_is_refused_before_writing(client, headers, monkeypatch):
    hw = _create(client, headers)
    store = UnwritableFileStore()
    monkeypatch.setattr("homework_planner.domain.assignment.rules.MAX_UPLOAD_BYTES", 4)
    app.dependency_overrides[container.get_file_store] = lambda: store
    try:
        resp = client.post(
            f"/api/homework/{hw['id']}/attachments",
            files={"file": ("big.txt", io.BytesIO(b"much too long"), "text/plain")},
            headers=headers,
        )
    finally:
        del app.dependency_overrides[container.get_file_store]
    assert resp.status_code == 413
    assert resp.json()["code"] == "VALIDATION_ERROR"
    assert store.stored == []
