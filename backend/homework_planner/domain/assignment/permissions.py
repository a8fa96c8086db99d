"""Permission guard: who may change an assignment."""
from __future__ import annotations
from typing import Iterable, List, Optional

from homework_planner.domain.assignment.models import Assignment, Identity


def can_modify(identity: Optional[Identity], assignment: Assignment) -> bool:
    """Admins may change anything; teachers only their own assignments."""
    if identity is None:
        return False
    return identity.is_admin or identity.email == assignment.teacher_email


def modifiable_matches(
    identity: Identity,
    assignments: Iterable[Assignment],
    ids: Iterable[str],
) -> List[Assignment]:
    """
    Records among `ids` the caller may change. Bulk operations use this to
    skip other teachers' records silently rather than failing the batch.
    """
    wanted = set(ids)
    return [a for a in assignments if a.id in wanted and can_modify(identity, a)]
