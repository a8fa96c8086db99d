"""Abstract repository interface for assignment templates."""
from __future__ import annotations
from abc import ABC, abstractmethod
from typing import List, Sequence

from homework_planner.domain.template.models import Template


class TemplateRepository(ABC):

    @abstractmethod
    def load(self) -> List[Template]:
        ...

    @abstractmethod
    def save(self, templates: Sequence[Template]) -> bool:
        """Replace the stored template list. Returns False if the write failed."""
        ...
