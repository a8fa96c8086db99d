"""Template domain model: a reusable preset for new assignments."""
from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from typing import List


@dataclass
class Template:
    id: str
    title: str
    subject: str
    created_by: str
    created_at: datetime
    updated_at: datetime
    description: str = ""
    tags: List[str] = field(default_factory=list)
