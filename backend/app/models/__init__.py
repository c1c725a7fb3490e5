# Re-export all models for convenient imports
from app.models.user import User
from app.models.workspace import Workspace
from app.models.project import Project, ProjectStatus
from app.models.task import Task, TaskPriority, TaskStatus
from app.models.template import ProjectTemplate, TemplateTask, TemplateCategory, CATEGORY_LABELS

__all__ = [
    # User
    "User",
    # Workspace
    "Workspace",
    # Project
    "Project",
    "ProjectStatus",
    # Task
    "Task",
    "TaskPriority",
    "TaskStatus",
    # Templates
    "ProjectTemplate",
    "TemplateTask",
    "TemplateCategory",
    "CATEGORY_LABELS",
]
