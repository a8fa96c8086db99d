"""Abstract repository interface for the assignment record set."""
from __future__ import annotations
from abc import ABC, abstractmethod
from typing import List, Sequence

from homework_planner.domain.assignment.models import Assignment


class AssignmentRepository(ABC):
    """
    Whole-set storage port. Every mutation is load -> change -> save of the
    complete collection; there is no per-record write and no locking, so two
    writers racing between load and save lose the earlier update (last write
    wins).
    """

    @abstractmethod
    def load(self) -> List[Assignment]:
        """Return every stored assignment, normalized, or [] when nothing is stored yet."""
        ...

    @abstractmethod
    def save(self, assignments: Sequence[Assignment]) -> bool:
        """Atomically replace the stored set. Returns False if the write failed."""
        ...
