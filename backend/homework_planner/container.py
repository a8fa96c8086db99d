"""Dependency injection container: wires implementations to interfaces."""
from __future__ import annotations
import os
from functools import lru_cache

from homework_planner.core import config
from homework_planner.application.assignment_app_service import AssignmentAppService
from homework_planner.application.sub_entity_app_service import AttachmentAppService, CommentAppService
from homework_planner.application.template_app_service import TemplateAppService
from homework_planner.persistence.files.local_file_store import LocalFileStore
from homework_planner.persistence.interfaces.assignment_repository import AssignmentRepository
from homework_planner.persistence.interfaces.file_store import FileStore
from homework_planner.persistence.interfaces.template_repository import TemplateRepository
from homework_planner.persistence.repositories.json.json_file_repository import (
    JsonFileAssignmentRepository,
    JsonFileTemplateRepository,
)
from homework_planner.persistence.repositories.sqlite.sqlite_assignment_repository import SqliteAssignmentRepository
from homework_planner.persistence.repositories.sqlite.sqlite_template_repository import SqliteTemplateRepository
from homework_planner.services.mailer import Mailer, SmtpMailer


@lru_cache(maxsize=1)
def get_assignment_repo() -> AssignmentRepository:
    if config.STORAGE_BACKEND == "json":
        return JsonFileAssignmentRepository(os.path.join(config.DATA_DIR, "homework.json"))
    return SqliteAssignmentRepository()


@lru_cache(maxsize=1)
def get_template_repo() -> TemplateRepository:
    if config.STORAGE_BACKEND == "json":
        return JsonFileTemplateRepository(os.path.join(config.DATA_DIR, "templates.json"))
    return SqliteTemplateRepository()


@lru_cache(maxsize=1)
def get_file_store() -> FileStore:
    return LocalFileStore(config.UPLOADS_DIR)


@lru_cache(maxsize=1)
def get_mailer() -> Mailer:
    return SmtpMailer()


@lru_cache(maxsize=1)
def get_assignment_app_service() -> AssignmentAppService:
    return AssignmentAppService(repo=get_assignment_repo())


@lru_cache(maxsize=1)
def get_comment_app_service() -> CommentAppService:
    return CommentAppService(repo=get_assignment_repo())


@lru_cache(maxsize=1)
def get_attachment_app_service() -> AttachmentAppService:
    return AttachmentAppService(repo=get_assignment_repo(), files=get_file_store())


@lru_cache(maxsize=1)
def get_template_app_service() -> TemplateAppService:
    return TemplateAppService(repo=get_template_repo())


def reset() -> None:
    """Drop every cached instance (after configuration changes, e.g. in tests)."""
    for factory in (
        get_assignment_repo,
        get_template_repo,
        get_file_store,
        get_mailer,
        get_assignment_app_service,
        get_comment_app_service,
        get_attachment_app_service,
        get_template_app_service,
    ):
        factory.cache_clear()
