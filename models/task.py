from sqlmodel import SQLModel, Field
from typing import Optional, List
from datetime import datetime

from models.subtask import Subtask

TASK_STATUSES = ("pending", "in_progress", "blocked", "on_hold", "overdue", "completed")
PRIORITIES = ("low", "medium", "high", "critical")
PROJECT_TASK_TYPES = ("project_task", "project_based")


class Task(SQLModel):
    id: Optional[str] = None
    title: str = ""
    description: Optional[str] = None
    status: str = Field(default="pending")
    priority: str = Field(default="medium")
    assigned_to: Optional[str] = None
    deadline: Optional[datetime] = None
    # only authoritative while subtasks is empty
    progress_percentage: Optional[int] = Field(default=None, ge=0, le=100)
    subtasks: List[Subtask] = Field(default_factory=list)
    task_type: str = Field(default="one_time")
    related_project: Optional[str] = None
    project_name: Optional[str] = None
