from datetime import date, datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

from partnerhub.models.task import TaskPriority, TaskStatus


class TaskBase(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    description: Optional[str] = None
    project_id: Optional[str] = None
    assignee_id: Optional[str] = None
    due_date: Optional[date] = None
    completed_at: Optional[datetime] = None
    progress: Optional[int] = Field(default=None, ge=0, le=100)


class TaskCreate(TaskBase):
    title: str = Field(..., min_length=1, max_length=255)
    status: TaskStatus = TaskStatus.TODO
    priority: TaskPriority = TaskPriority.MEDIUM


class TaskUpdate(TaskBase):
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
