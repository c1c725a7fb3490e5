from typing import Optional
from datetime import datetime

from app.models.project import ProjectStatus
from app.models.task import TaskPriority, TaskStatus
from app.schemas.common import CamelModel


class ProjectResponse(CamelModel):
    id: str
    workspace_id: str
    user_id: str
    name: str
    description: Optional[str] = None
    status: ProjectStatus
    created_at: datetime
    updated_at: Optional[datetime] = None


class TaskResponse(CamelModel):
    id: str
    project_id: str
    workspace_id: str
    title: str
    description: Optional[str] = None
    priority: TaskPriority
    status: TaskStatus
    created_by: Optional[str] = None
    assigned_to: Optional[str] = None
    due_date: Optional[datetime] = None
    created_at: datetime
