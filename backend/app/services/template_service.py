"""
Template Service - the template store

Reads and writes project templates and their ordered task definitions.
Methods flush but never commit; the caller owns the transaction.
"""

from typing import Dict, List, Optional

from sqlalchemy import String, cast, delete, or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import TemplateNotFoundError, ValidationError
from app.core.logging_config import logger
from app.models.template import ProjectTemplate, TemplateCategory, TemplateTask
from app.schemas.template import TemplateCreate
from app.utils.pagination import LIKE_ESCAPE, PaginationParams, like_pattern, paginate


class TemplateService:
    """Data access for ProjectTemplate / TemplateTask"""

    def __init__(self, db: AsyncSession):
        self.db = db

    # ========== Queries ==========

    async def get_template(self, template_id: str) -> Optional[ProjectTemplate]:
        result = await self.db.execute(
            select(ProjectTemplate).where(ProjectTemplate.id == str(template_id))
        )
        return result.scalar_one_or_none()

    async def get_template_or_404(self, template_id: str) -> ProjectTemplate:
        template = await self.get_template(template_id)
        if template is None:
            raise TemplateNotFoundError(template_id)
        return template

    async def get_template_tasks(self, template_id: str) -> List[TemplateTask]:
        """Template tasks in ascending `order`; ties fall back to creation order"""
        result = await self.db.execute(
            select(TemplateTask)
            .where(TemplateTask.template_id == str(template_id))
            .order_by(TemplateTask.order, TemplateTask.created_at, TemplateTask.id)
        )
        return list(result.scalars().all())

    async def list_public_templates(
        self,
        params: PaginationParams,
        category: Optional[TemplateCategory] = None,
    ) -> Dict[str, object]:
        """Public templates, most used first"""
        query = select(ProjectTemplate).where(ProjectTemplate.is_public.is_(True))

        if category is not None:
            query = query.where(ProjectTemplate.category == category)

        if params.search:
            term = like_pattern(params.search)
            query = query.where(
                or_(
                    ProjectTemplate.name.ilike(term, escape=LIKE_ESCAPE),
                    ProjectTemplate.description.ilike(term, escape=LIKE_ESCAPE),
                    cast(ProjectTemplate.tags, String).ilike(term, escape=LIKE_ESCAPE),
                )
            )

        query = query.order_by(
            ProjectTemplate.usage_count.desc(),
            ProjectTemplate.created_at.desc(),
        )
        return await paginate(self.db, query, params)

    async def list_popular_templates(self, limit: int) -> List[ProjectTemplate]:
        result = await self.db.execute(
            select(ProjectTemplate)
            .where(ProjectTemplate.is_public.is_(True))
            .order_by(ProjectTemplate.usage_count.desc(), ProjectTemplate.created_at.desc())
            .limit(limit)
        )
        return list(result.scalars().all())

    async def list_accessible_templates(self, user_id: str) -> List[ProjectTemplate]:
        """Public templates plus the caller's own private ones, newest first"""
        result = await self.db.execute(
            select(ProjectTemplate)
            .where(
                or_(
                    ProjectTemplate.is_public.is_(True),
                    ProjectTemplate.created_by == str(user_id),
                )
            )
            .order_by(ProjectTemplate.created_at.desc())
        )
        return list(result.scalars().all())

    # ========== Mutations ==========

    async def create_template(self, data: TemplateCreate, user_id: str) -> ProjectTemplate:
        """Create a template; task definitions are numbered 1..n in the given order"""
        template = ProjectTemplate(
            name=data.name,
            description=data.description,
            category=data.category,
            created_by=str(user_id),
            is_public=data.is_public,
            tags=data.tags,
            estimated_duration=data.estimated_duration,
        )
        self.db.add(template)
        await self.db.flush()

        for index, task in enumerate(data.tasks):
            self.db.add(
                TemplateTask(
                    template_id=template.id,
                    title=task.title,
                    description=task.description or "",
                    priority=task.priority,
                    estimated_hours=task.estimated_hours,
                    order=index + 1,
                    days_from_start=task.days_from_start,
                    dependencies=task.dependencies,
                )
            )
        await self.db.flush()

        logger.info(
            f"[Templates] Created template {template.id} with {len(data.tasks)} tasks",
            extra={"template_id": template.id, "task_count": len(data.tasks)},
        )
        return template

    async def get_owned_template(self, template_id: str, user_id: str, action: str) -> ProjectTemplate:
        """Fetch a template the caller created; anything else looks like NotFound"""
        result = await self.db.execute(
            select(ProjectTemplate).where(
                ProjectTemplate.id == str(template_id),
                ProjectTemplate.created_by == str(user_id),
            )
        )
        template = result.scalar_one_or_none()
        if template is None:
            raise TemplateNotFoundError(
                template_id,
                f"Template not found or you don't have permission to {action} it",
            )
        return template

    async def update_template(
        self, template_id: str, user_id: str, changes: Dict[str, object]
    ) -> ProjectTemplate:
        if not changes:
            raise ValidationError("No template fields to update")

        template = await self.get_owned_template(template_id, user_id, "update")

        for field, value in changes.items():
            setattr(template, field, value)

        await self.db.flush()
        await self.db.refresh(template)
        return template

    async def delete_template(self, template_id: str, user_id: str) -> None:
        """Delete a template together with its task definitions"""
        template = await self.get_owned_template(template_id, user_id, "delete")

        await self.db.execute(delete(TemplateTask).where(TemplateTask.template_id == template.id))
        await self.db.execute(delete(ProjectTemplate).where(ProjectTemplate.id == template.id))
        self.db.expunge(template)

        logger.info(f"[Templates] Deleted template {template_id}", extra={"template_id": template_id})

    async def increment_usage(self, template_id: str) -> None:
        """usage_count + 1 in SQL, so concurrent callers never lose an increment"""
        await self.db.execute(
            update(ProjectTemplate)
            .where(ProjectTemplate.id == str(template_id))
            .values(usage_count=ProjectTemplate.usage_count + 1)
            .execution_options(synchronize_session=False)
        )
