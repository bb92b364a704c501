from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime


class Subtask(SQLModel):
    id: Optional[str] = None
    title: str = ""
    status: str = Field(default="pending")
    progress_percentage: Optional[int] = Field(default=None, ge=0, le=100)
    assigned_to: Optional[str] = None
    deadline: Optional[datetime] = None


class OwnedSubtask(Subtask):
    """A subtask as seen from its assignee, carrying where it came from."""
    parent_task_id: Optional[str] = None
    parent_task_title: str = ""
    project_name: str = "General"
