"""
Template Instantiator - materialises a Project and its Tasks from a template

Pipeline (one call, strictly sequential):
1. fetch the template (TemplateNotFoundError if missing)
2. create the project in the target workspace
3. fetch the template tasks in `order`
4. create one task per template task, due at base date + daysFromStart + 1 day
5. bump the template's usage counter

With `atomic=True` (default, TEMPLATE_INSTANTIATION_ATOMIC) the whole pipeline
is one transaction: any failure rolls everything back. With `atomic=False`
every write is committed as soon as it is made, and a failure part-way leaves
the already created project and tasks in place. Template task `dependencies`
are never consulted.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Callable, Dict, List, Mapping, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.logging_config import logger
from app.core.types import utcnow
from app.models.project import Project
from app.models.task import Task
from app.services.project_service import ProjectService
from app.services.template_service import TemplateService

# Added on top of every daysFromStart offset
DUE_DATE_BUFFER = timedelta(days=1)


def compute_due_date(base_date: datetime, days_from_start: int) -> datetime:
    return base_date + timedelta(days=days_from_start) + DUE_DATE_BUFFER


@dataclass
class InstantiationResult:
    project: Project
    tasks: List[Task] = field(default_factory=list)
    # template task id -> created task id
    task_map: Dict[str, str] = field(default_factory=dict)

    @property
    def tasks_created(self) -> int:
        return len(self.tasks)


class TemplateInstantiator:
    """Creates projects from templates"""

    def __init__(
        self,
        db: AsyncSession,
        atomic: Optional[bool] = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.db = db
        self.templates = TemplateService(db)
        self.projects = ProjectService(db)
        self.atomic = settings.TEMPLATE_INSTANTIATION_ATOMIC if atomic is None else atomic
        self.clock = clock

    async def instantiate(
        self,
        template_id: str,
        workspace_id: str,
        caller_id: str,
        project_name: str,
        project_description: Optional[str] = None,
        start_date: Optional[datetime] = None,
        task_assignments: Optional[Mapping[str, str]] = None,
    ) -> InstantiationResult:
        """
        Create a project from a template.

        Args:
            template_id: Source template
            workspace_id: Workspace receiving the project and tasks
            caller_id: Owner of the project and creator of the tasks
            project_name: Name of the new project
            project_description: Falls back to the template description when empty
            start_date: Naive UTC base date; defaults to the time the call started
            task_assignments: template task id -> assignee user id

        Returns:
            InstantiationResult with the project and its tasks in template order

        Raises:
            TemplateNotFoundError: template does not exist (nothing is written)
        """
        called_at = self.clock()
        assignments = task_assignments or {}

        try:
            template = await self.templates.get_template_or_404(template_id)

            project = await self.projects.create_project(
                workspace_id=workspace_id,
                owner_id=caller_id,
                name=project_name,
                description=project_description or template.description,
            )
            await self._commit_step()

            template_tasks = await self.templates.get_template_tasks(template.id)
            base_date = start_date if start_date is not None else called_at

            result = InstantiationResult(project=project)
            for template_task in template_tasks:
                task = await self.projects.create_task(
                    project_id=project.id,
                    workspace_id=workspace_id,
                    created_by=caller_id,
                    title=template_task.title,
                    description=template_task.description,
                    priority=template_task.priority,
                    due_date=compute_due_date(base_date, template_task.days_from_start),
                    assigned_to=assignments.get(str(template_task.id)) or None,
                )
                await self._commit_step()
                result.tasks.append(task)
                result.task_map[str(template_task.id)] = str(task.id)

            await self.templates.increment_usage(template.id)
            await self.db.commit()

        except Exception:
            # Only uncommitted work is discarded; in non-atomic mode earlier
            # steps are already committed and stay.
            await self.db.rollback()
            raise

        logger.info(
            f"[Templates] Instantiated template {template_id} as project {project.id} "
            f"({result.tasks_created} tasks)",
            extra={
                "template_id": str(template_id),
                "project_id": str(project.id),
                "workspace_id": str(workspace_id),
                "tasks_created": result.tasks_created,
            },
        )
        return result

    async def _commit_step(self) -> None:
        if not self.atomic:
            await self.db.commit()
