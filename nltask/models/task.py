"""Task record model handed to the task creation consumer."""

from datetime import date, datetime
from typing import List, Optional
from enum import Enum
from pydantic import BaseModel, Field

from nltask.models.draft import Priority


class TaskStatus(str, Enum):
    """Task status enumeration."""
    TODO = "todo"
    IN_PROGRESS = "in_progress"
    DONE = "done"


class DueDateType(str, Enum):
    """How the due date should be read."""
    ON = "on"  # scheduled on that day
    BY = "by"  # deadline, finish by that day
    NONE = "none"


class Tag(BaseModel):
    """A user-defined label (area) attached to tasks."""
    id: str = Field(..., description="Unique tag identifier (UUID v4)")
    name: str = Field(..., description="Tag name as first written")


class Person(BaseModel):
    """A collaborator referenced in tasks."""
    id: str = Field(..., description="Unique person identifier (UUID v4)")
    name: str = Field(..., description="Person name as first written")


class TaskRecord(BaseModel):
    """Task built from a reconciled draft."""

    id: str = Field(..., description="Unique task identifier (UUID v4)")
    title: str = Field(..., description="Task title")
    description: Optional[str] = Field(None, description="Task description")
    priority: Priority = Field(Priority.NORMAL, description="Task priority")
    due_date: Optional[date] = Field(None, description="Resolved due date")
    due_date_type: DueDateType = Field(DueDateType.NONE, description="On/by semantics of the due date")
    go_live_date: Optional[date] = Field(None, description="Launch date, separate from the deadline")
    effort_level: Optional[int] = Field(
        None,
        description="Effort bucket (1, 2, 4, 8, 16, 32 or 64)",
    )
    tags: List[Tag] = Field(default_factory=list, description="Resolved tags")
    people: List[Person] = Field(default_factory=list, description="Resolved people")
    status: TaskStatus = Field(TaskStatus.TODO, description="Task status")
    created_at: datetime = Field(..., description="Task creation timestamp")

    class Config:
        """Pydantic configuration."""
        use_enum_values = True
