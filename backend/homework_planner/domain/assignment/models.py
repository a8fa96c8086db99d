"""Assignment domain models: pure Python, no DB or HTTP dependencies."""
from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

PRIORITIES = ("high", "medium", "low")
RECURRENCE_TYPES = ("none", "daily", "weekly")


@dataclass
class Identity:
    """The authenticated caller, as handed over by the auth layer."""

    email: str
    name: str = ""
    is_admin: bool = False


@dataclass
class Recurrence:
    type: str = "none"  # none | daily | weekly
    interval: int = 1
    days_of_week: List[int] = field(default_factory=list)  # 0 = Sunday


@dataclass
class Comment:
    id: str
    content: str
    author: str
    author_name: str
    created_at: datetime
    updated_at: datetime


@dataclass
class Attachment:
    id: str
    filename: str
    path: str
    mime_type: str
    size: int
    uploaded_by: str
    uploaded_at: datetime


@dataclass
class StoredFile:
    """Metadata of an upload the request layer has already validated and written."""

    filename: str
    path: str
    mime_type: str
    size: int


@dataclass
class Assignment:
    id: str
    title: str
    subject: str
    due_date: datetime
    created_at: datetime
    updated_at: datetime
    description: str = ""
    priority: str = "medium"
    tags: List[str] = field(default_factory=list)
    teacher_email: str = ""
    teacher_name: str = ""
    year_group: Optional[str] = None
    class_name: Optional[str] = None
    completed: bool = False
    is_recurring: bool = False
    recurrence: Recurrence = field(default_factory=Recurrence)
    next_occurrence: Optional[datetime] = None
    parent_id: Optional[str] = None
    comments: List[Comment] = field(default_factory=list)
    attachments: List[Attachment] = field(default_factory=list)

    @property
    def series_key(self) -> Optional[str]:
        """Id shared by every occurrence of the series this record belongs to."""
        return self.parent_id or (self.id if self.is_recurring else None)
