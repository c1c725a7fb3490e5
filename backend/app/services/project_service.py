"""
Project Service - the project/task store

Workspaces, projects and tasks. Like TemplateService it only flushes;
committing is left to the caller.
"""

from datetime import datetime
from typing import Dict, List, Optional

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ProjectNotFoundError, WorkspaceNotFoundError
from app.core.logging_config import logger
from app.models.project import Project
from app.models.task import Task, TaskPriority
from app.models.workspace import Workspace
from app.utils.pagination import LIKE_ESCAPE, PaginationParams, like_pattern, paginate


class ProjectService:
    """Data access for Workspace / Project / Task"""

    def __init__(self, db: AsyncSession):
        self.db = db

    # ========== Workspace Operations ==========

    async def create_workspace(self, user_id: str, name: str, description: Optional[str] = None) -> Workspace:
        workspace = Workspace(user_id=str(user_id), name=name, description=description)
        self.db.add(workspace)
        await self.db.flush()
        logger.info(f"Created workspace {workspace.id} for user {user_id}")
        return workspace

    async def list_workspaces(self, user_id: str) -> List[Workspace]:
        result = await self.db.execute(
            select(Workspace)
            .where(Workspace.user_id == str(user_id))
            .order_by(Workspace.created_at)
        )
        return list(result.scalars().all())

    async def get_workspace(self, workspace_id: str) -> Optional[Workspace]:
        result = await self.db.execute(select(Workspace).where(Workspace.id == str(workspace_id)))
        return result.scalar_one_or_none()

    async def get_workspace_or_404(self, workspace_id: str) -> Workspace:
        workspace = await self.get_workspace(workspace_id)
        if workspace is None:
            raise WorkspaceNotFoundError(workspace_id)
        return workspace

    # ========== Project Operations ==========

    async def create_project(
        self,
        workspace_id: str,
        owner_id: str,
        name: str,
        description: Optional[str] = None,
    ) -> Project:
        project = Project(
            workspace_id=str(workspace_id),
            user_id=str(owner_id),
            name=name,
            description=description,
        )
        self.db.add(project)
        await self.db.flush()
        return project

    async def get_project_or_404(self, workspace_id: str, project_id: str) -> Project:
        result = await self.db.execute(
            select(Project).where(
                Project.id == str(project_id),
                Project.workspace_id == str(workspace_id),
            )
        )
        project = result.scalar_one_or_none()
        if project is None:
            raise ProjectNotFoundError(project_id)
        return project

    async def list_projects(self, workspace_id: str, params: PaginationParams) -> Dict[str, object]:
        query = select(Project).where(Project.workspace_id == str(workspace_id))

        if params.search:
            term = like_pattern(params.search)
            query = query.where(or_(
                Project.name.ilike(term, escape=LIKE_ESCAPE),
                Project.description.ilike(term, escape=LIKE_ESCAPE),
            ))

        query = query.order_by(Project.created_at.desc())
        return await paginate(self.db, query, params)

    # ========== Task Operations ==========

    async def create_task(
        self,
        project_id: str,
        workspace_id: str,
        created_by: str,
        title: str,
        description: Optional[str] = None,
        priority: TaskPriority = TaskPriority.MEDIUM,
        due_date: Optional[datetime] = None,
        assigned_to: Optional[str] = None,
    ) -> Task:
        task = Task(
            project_id=str(project_id),
            workspace_id=str(workspace_id),
            created_by=str(created_by),
            title=title,
            description=description,
            priority=priority,
            due_date=due_date,
            assigned_to=assigned_to,
        )
        self.db.add(task)
        await self.db.flush()
        return task

    async def list_tasks(self, project_id: str) -> List[Task]:
        result = await self.db.execute(
            select(Task)
            .where(Task.project_id == str(project_id))
            .order_by(Task.created_at, Task.id)
        )
        return list(result.scalars().all())
