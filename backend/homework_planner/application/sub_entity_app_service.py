"""Application services for comments and attachments on an assignment."""
from __future__ import annotations
import logging
from typing import List

from homework_planner.domain.assignment.models import Attachment, Comment, Identity, StoredFile
from homework_planner.domain.assignment.service import AssignmentDomainService, find
from homework_planner.domain.common.result import Result
from homework_planner.persistence.interfaces.assignment_repository import AssignmentRepository
from homework_planner.persistence.interfaces.file_store import FileStore

logger = logging.getLogger(__name__)


class CommentAppService:
    def __init__(self, repo: AssignmentRepository):
        self._repo = repo
        self._domain = AssignmentDomainService()

    def list_comments(self, assignment_id: str) -> Result[List[Comment]]:
        assignment = find(self._repo.load(), assignment_id)
        if assignment is None:
            return Result.not_found("Homework not found")
        return Result.ok(list(assignment.comments))

    def add_comment(self, identity: Identity, assignment_id: str, content) -> Result[Comment]:
        assignments = self._repo.load()
        assignment = find(assignments, assignment_id)
        if assignment is None:
            return Result.not_found("Homework not found")

        result = self._domain.add_comment(assignment, identity, content)
        if not result.is_success:
            return result
        if not self._repo.save(assignments):
            logger.error("Saving comment on %s failed", assignment_id)
            return Result.persistence_failure("Failed to add comment")
        return result


class AttachmentAppService:
    """
    Attachment metadata lives on the assignment; the bytes live in the
    FileStore. Whenever the metadata cannot be recorded, the just-stored
    file is deleted again.
    """

    def __init__(self, repo: AssignmentRepository, files: FileStore):
        self._repo = repo
        self._files = files
        self._domain = AssignmentDomainService()

    def add_attachment(self, identity: Identity, assignment_id: str, stored: StoredFile) -> Result[Attachment]:
        assignments = self._repo.load()
        assignment = find(assignments, assignment_id)
        if assignment is None:
            self._files.delete(stored.path)
            return Result.not_found("Homework not found")

        attachment = self._domain.add_attachment(assignment, identity, stored)
        if not self._repo.save(assignments):
            logger.error("Saving attachment on %s failed; removing %s", assignment_id, stored.path)
            self._files.delete(stored.path)
            return Result.persistence_failure("Failed to save attachment")

        logger.info("%s attached %s to homework %s", identity.email, stored.filename, assignment_id)
        return Result.ok(attachment)

    def remove_attachment(self, identity: Identity, assignment_id: str, attachment_id: str) -> Result[Attachment]:
        assignments = self._repo.load()
        assignment = find(assignments, assignment_id)
        if assignment is None:
            return Result.not_found("Homework not found")

        result = self._domain.remove_attachment(assignment, attachment_id)
        if not result.is_success:
            return result
        if not self._repo.save(assignments):
            logger.error("Saving attachment removal on %s failed", assignment_id)
            return Result.persistence_failure("Failed to delete attachment")

        self._files.delete(result.value.path)
        logger.info("%s removed attachment %s from homework %s", identity.email, attachment_id, assignment_id)
        return result
