"""Uploads kept on local disk and served under /uploads."""
from __future__ import annotations
import logging
import os
import random
import shutil
import time
from typing import BinaryIO

from homework_planner.domain.assignment.models import StoredFile
from homework_planner.persistence.interfaces.file_store import FileStore

logger = logging.getLogger(__name__)

PUBLIC_PREFIX = "/uploads/"


class LocalFileStore(FileStore):

    def __init__(self, root: str):
        self._root = root

    @property
    def root(self) -> str:
        return self._root

    def _disk_path(self, path: str) -> str:
        name = os.path.basename(path[len(PUBLIC_PREFIX):] if path.startswith(PUBLIC_PREFIX) else path)
        return os.path.join(self._root, name)

    def store(self, filename: str, mime_type: str, stream: BinaryIO) -> StoredFile:
        os.makedirs(self._root, exist_ok=True)
        original = os.path.basename(filename or "upload")
        stored_name = f"{int(time.time() * 1000)}-{random.randint(0, 10**9)}-{original}"
        target = os.path.join(self._root, stored_name)
        with open(target, "wb") as f:
            shutil.copyfileobj(stream, f)
        return StoredFile(
            filename=original,
            path=PUBLIC_PREFIX + stored_name,
            mime_type=mime_type,
            size=os.path.getsize(target),
        )

    def delete(self, path: str) -> bool:
        target = self._disk_path(path)
        if not os.path.exists(target):
            return False
        try:
            os.remove(target)
        except OSError:
            logger.exception("Could not delete stored file %s", target)
            return False
        return True
