"""Task list model."""

from __future__ import annotations

from pydantic import Field

from yardaudit.models._base import AuditBaseModel, AuditEnum, Timestamp, utcnow


class TaskPriority(AuditEnum):
    HIGH = "high"
    NORMAL = "normal"


class Task(AuditBaseModel):
    """A follow-up item noted during an audit."""

    id: str
    text: str
    completed: bool = False
    priority: TaskPriority = TaskPriority.NORMAL
    created_at: Timestamp = Field(default_factory=utcnow)
