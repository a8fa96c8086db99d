"""Application service: orchestrates load → domain op → save for assignments."""
from __future__ import annotations
import logging
from datetime import date, datetime
from typing import List, Optional, Tuple

from homework_planner.core.config import DEFAULT_PAGE_LIMIT
from homework_planner.domain.assignment.models import Assignment, Identity
from homework_planner.domain.assignment.normalizer import assignment_to_dict
from homework_planner.domain.assignment.notifications import Reminder, render, select_due, target_date
from homework_planner.domain.assignment.permissions import can_modify, modifiable_matches
from homework_planner.domain.assignment.query import AssignmentFilters, QueryResult, query
from homework_planner.domain.assignment.rules import validate_ids, validate_update_payload
from homework_planner.domain.assignment.service import AssignmentDomainService, find
from homework_planner.domain.assignment.stats import AssignmentStats, compute_stats
from homework_planner.domain.common.clock import utcnow
from homework_planner.domain.common.result import Result
from homework_planner.persistence.interfaces.assignment_repository import AssignmentRepository

logger = logging.getLogger(__name__)


class AssignmentAppService:
    """
    Every write reads the full set, changes it in memory and saves the full
    set back. Concurrent writers are not serialized: the later save wins.
    """

    def __init__(self, repo: AssignmentRepository):
        self._repo = repo
        self._domain = AssignmentDomainService()

    def _persist(self, assignments: List[Assignment], action: str) -> bool:
        if self._repo.save(assignments):
            return True
        logger.error("Saving assignments failed during %s", action)
        return False

    def _load_modifiable(self, identity: Identity, assignment_id: str) -> Result[Tuple[List[Assignment], Assignment]]:
        assignments = self._repo.load()
        target = find(assignments, assignment_id)
        if target is None:
            return Result.not_found("Homework not found")
        if not can_modify(identity, target):
            return Result.denied("You do not have permission to modify this homework")
        return Result.ok((assignments, target))

    # ------------------------------------------------------------------
    # READ
    # ------------------------------------------------------------------
    def list_assignments(
        self,
        filters: Optional[AssignmentFilters] = None,
        page: int = 1,
        limit: int = DEFAULT_PAGE_LIMIT,
    ) -> QueryResult:
        return query(self._repo.load(), filters, page, limit)

    def get_assignment(self, assignment_id: str) -> Result[Assignment]:
        assignment = find(self._repo.load(), assignment_id)
        if assignment is None:
            return Result.not_found("Homework not found")
        return Result.ok(assignment)

    # ------------------------------------------------------------------
    # CREATE
    # ------------------------------------------------------------------
    def create_assignment(self, identity: Identity, data: dict) -> Result[Assignment]:
        result = self._domain.create_assignments(identity, data)
        if not result.is_success:
            return Result.fail(result.error, result.kind)

        created = result.value
        assignments = self._repo.load()
        assignments.extend(created)
        if not self._persist(assignments, "create"):
            return Result.persistence_failure("Failed to create homework")

        logger.info("%s created homework %s (%d record(s))", identity.email, created[0].id, len(created))
        return Result.ok(created[0])

    # ------------------------------------------------------------------
    # UPDATE
    # ------------------------------------------------------------------
    def update_assignment(self, identity: Identity, assignment_id: str, data: dict) -> Result[Assignment]:
        loaded = self._load_modifiable(identity, assignment_id)
        if not loaded.is_success:
            return Result.fail(loaded.error, loaded.kind)
        assignments, target = loaded.value

        result = self._domain.apply_update(target, data)
        if not result.is_success:
            return Result.fail(result.error, result.kind)

        updated = result.value
        assignments = [updated if a.id == assignment_id else a for a in assignments]
        if not self._persist(assignments, "update"):
            return Result.persistence_failure("Failed to update homework")

        logger.info("%s updated homework %s", identity.email, assignment_id)
        return Result.ok(updated)

    def toggle_complete(self, identity: Identity, assignment_id: str) -> Result[Assignment]:
        loaded = self._load_modifiable(identity, assignment_id)
        if not loaded.is_success:
            return Result.fail(loaded.error, loaded.kind)
        assignments, target = loaded.value

        self._domain.toggle_complete(target)
        if not self._persist(assignments, "toggle-complete"):
            return Result.persistence_failure("Failed to update homework status")
        return Result.ok(target)

    # ------------------------------------------------------------------
    # DELETE
    # ------------------------------------------------------------------
    def delete_assignment(self, identity: Identity, assignment_id: str) -> Result[int]:
        """Delete one record, or its whole series when it recurs. Returns the count removed."""
        loaded = self._load_modifiable(identity, assignment_id)
        if not loaded.is_success:
            return Result.fail(loaded.error, loaded.kind)
        assignments, target = loaded.value

        doomed = self._domain.ids_to_delete(assignments, target)
        remaining = [a for a in assignments if a.id not in doomed]
        if not self._persist(remaining, "delete"):
            return Result.persistence_failure("Failed to delete homework")

        logger.info("%s deleted homework %s (%d record(s))", identity.email, assignment_id, len(doomed))
        return Result.ok(len(assignments) - len(remaining))

    # ------------------------------------------------------------------
    # BULK
    # ------------------------------------------------------------------
    def bulk_delete(self, identity: Identity, ids: list) -> Result[int]:
        """
        Remove the listed records the caller may modify. Others are skipped
        without error; the count removed is returned.
        """
        checked = validate_ids(ids)
        if not checked.is_success:
            return Result.fail(checked.error)

        assignments = self._repo.load()
        doomed = {a.id for a in modifiable_matches(identity, assignments, checked.value)}
        remaining = [a for a in assignments if a.id not in doomed]
        if not self._persist(remaining, "bulk-delete"):
            return Result.persistence_failure("Failed to delete homeworks")

        logger.info("%s bulk-deleted %d homework(s)", identity.email, len(doomed))
        return Result.ok(len(doomed))

    def bulk_update(self, identity: Identity, ids: list, data: dict) -> Result[int]:
        checked = validate_ids(ids)
        if not checked.is_success:
            return Result.fail(checked.error)
        if not isinstance(data, dict) or not data:
            return Result.fail("Invalid request data")
        validation = validate_update_payload(data)
        if not validation.is_success:
            return Result.fail(validation.error)

        assignments = self._repo.load()
        now = utcnow()
        updated = {}
        for target in modifiable_matches(identity, assignments, checked.value):
            result = self._domain.apply_update(target, data, now)
            if not result.is_success:
                return Result.fail(result.error, result.kind)
            updated[target.id] = result.value

        if not updated:
            return Result.not_found("No matching homeworks found or no permission")

        assignments = [updated.get(a.id, a) for a in assignments]
        if not self._persist(assignments, "bulk-update"):
            return Result.persistence_failure("Failed to update homeworks")

        logger.info("%s bulk-updated %d homework(s)", identity.email, len(updated))
        return Result.ok(len(updated))

    # ------------------------------------------------------------------
    # STATS / EXPORT / IMPORT / REMINDERS
    # ------------------------------------------------------------------
    def stats(self, identity: Identity, now: Optional[datetime] = None) -> AssignmentStats:
        return compute_stats(self._repo.load(), identity.email, now)

    def export_assignments(self, identity: Identity) -> List[dict]:
        return [assignment_to_dict(a) for a in self._repo.load() if a.teacher_email == identity.email]

    def import_assignments(self, identity: Identity, items) -> Result[Tuple[int, int]]:
        """Returns (imported, total submitted)."""
        if not isinstance(items, list):
            return Result.fail("Invalid file format. Expected an array of homeworks.")

        imported, total = self._domain.import_assignments(identity, items)
        assignments = self._repo.load()
        assignments.extend(imported)
        if not self._persist(assignments, "import"):
            return Result.persistence_failure("Failed to import homeworks")

        logger.info("%s imported %d of %d homework(s)", identity.email, len(imported), total)
        return Result.ok((len(imported), total))

    def due_reminder(self, identity: Identity, days_ahead: int = 1, today: Optional[date] = None) -> Reminder:
        on = target_date(days_ahead, today)
        return render(select_due(self._repo.load(), identity.email, on), on)
