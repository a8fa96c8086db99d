"""Abstract interface for uploaded-file storage."""
from __future__ import annotations
from abc import ABC, abstractmethod
from typing import BinaryIO

from homework_planner.domain.assignment.models import StoredFile


class FileStore(ABC):

    @abstractmethod
    def store(self, filename: str, mime_type: str, stream: BinaryIO) -> StoredFile:
        """Write an upload and return its metadata (path is the public locator)."""
        ...

    @abstractmethod
    def delete(self, path: str) -> bool:
        """Remove a stored file by locator. Returns True if a file was removed."""
        ...
