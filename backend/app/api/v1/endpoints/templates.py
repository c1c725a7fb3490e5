"""
Project Template API

Public catalogue:
    GET  /templates                      paginated public templates (category, search)
    GET  /templates/popular              public templates by usage
    GET  /templates/categories           fixed category list
    GET  /templates/{template_id}        template with its ordered tasks

Workspace scoped (authenticated):
    GET    /workspaces/{workspace_id}/templates
    POST   /workspaces/{workspace_id}/templates
    PUT    /workspaces/{workspace_id}/templates/{template_id}
    DELETE /workspaces/{workspace_id}/templates/{template_id}
    POST   /workspaces/{workspace_id}/projects/from-template/{template_id}
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.database import get_db
from app.core.logging_config import logger
from app.models.template import TemplateCategory
from app.models.user import User
from app.models.workspace import Workspace
from app.modules.auth.dependencies import get_current_user, get_workspace
from app.schemas.common import APIResponse, PaginatedAPIResponse, PaginationMeta
from app.schemas.project import ProjectResponse
from app.schemas.template import (
    CategoryOption,
    ProjectFromTemplateRequest,
    ProjectFromTemplateResponse,
    TemplateCreate,
    TemplateDetailResponse,
    TemplateResponse,
    TemplateTaskResponse,
    TemplateUpdate,
)
from app.services.template_instantiator import TemplateInstantiator
from app.services.template_service import TemplateService
from app.utils.pagination import PaginationParams, pagination_params

router = APIRouter()


# ========== Public catalogue ==========

@router.get("/templates", response_model=PaginatedAPIResponse[List[TemplateResponse]])
async def list_public_templates(
    category: Optional[TemplateCategory] = Query(None, description="Filter by category"),
    params: PaginationParams = Depends(pagination_params),
    db: AsyncSession = Depends(get_db)
):
    """Public templates, most used first, then newest"""
    page = await TemplateService(db).list_public_templates(params, category)

    return PaginatedAPIResponse[List[TemplateResponse]](
        data=[TemplateResponse.model_validate(t) for t in page["items"]],
        pagination=PaginationMeta(**page["pagination"]),
    )


@router.get("/templates/popular", response_model=APIResponse[List[TemplateResponse]])
async def list_popular_templates(
    limit: int = Query(settings.POPULAR_TEMPLATES_LIMIT, ge=1, le=settings.MAX_PAGE_SIZE),
    db: AsyncSession = Depends(get_db)
):
    templates = await TemplateService(db).list_popular_templates(limit)
    return APIResponse[List[TemplateResponse]](
        data=[TemplateResponse.model_validate(t) for t in templates]
    )


@router.get("/templates/categories", response_model=APIResponse[List[CategoryOption]])
async def list_template_categories():
    return APIResponse[List[CategoryOption]](
        data=[CategoryOption(value=c, label=c.label) for c in TemplateCategory]
    )


@router.get("/templates/{template_id}", response_model=APIResponse[TemplateDetailResponse])
async def get_template_details(
    template_id: str,
    db: AsyncSession = Depends(get_db)
):
    service = TemplateService(db)
    template = await service.get_template_or_404(template_id)
    tasks = await service.get_template_tasks(template.id)

    return APIResponse[TemplateDetailResponse](
        data=TemplateDetailResponse(
            template=TemplateResponse.model_validate(template),
            tasks=[TemplateTaskResponse.model_validate(t) for t in tasks],
        )
    )


# ========== Workspace scoped ==========

@router.get("/workspaces/{workspace_id}/templates", response_model=APIResponse[List[TemplateResponse]])
async def list_workspace_templates(
    workspace: Workspace = Depends(get_workspace),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Public templates plus the caller's private ones"""
    templates = await TemplateService(db).list_accessible_templates(current_user.id)
    return APIResponse[List[TemplateResponse]](
        data=[TemplateResponse.model_validate(t) for t in templates]
    )


@router.post(
    "/workspaces/{workspace_id}/templates",
    response_model=APIResponse[TemplateResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_template(
    template_data: TemplateCreate,
    workspace: Workspace = Depends(get_workspace),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    template = await TemplateService(db).create_template(template_data, current_user.id)
    await db.commit()

    return APIResponse[TemplateResponse](
        message="Template created successfully",
        data=TemplateResponse.model_validate(template),
    )


@router.put(
    "/workspaces/{workspace_id}/templates/{template_id}",
    response_model=APIResponse[TemplateResponse],
)
async def update_template(
    template_id: str,
    template_data: TemplateUpdate,
    workspace: Workspace = Depends(get_workspace),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Only the template's creator may update it"""
    template = await TemplateService(db).update_template(
        template_id, current_user.id, template_data.changes()
    )
    await db.commit()

    return APIResponse[TemplateResponse](
        message="Template updated successfully",
        data=TemplateResponse.model_validate(template),
    )


@router.delete(
    "/workspaces/{workspace_id}/templates/{template_id}",
    response_model=APIResponse[None],
)
async def delete_template(
    template_id: str,
    workspace: Workspace = Depends(get_workspace),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    await TemplateService(db).delete_template(template_id, current_user.id)
    await db.commit()

    return APIResponse[None](message="Template deleted successfully")


@router.post(
    "/workspaces/{workspace_id}/projects/from-template/{template_id}",
    response_model=APIResponse[ProjectFromTemplateResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_project_from_template(
    template_id: str,
    request: ProjectFromTemplateRequest,
    workspace: Workspace = Depends(get_workspace),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Create a project in this workspace from a template.

    Each template task becomes a task due `startDate + daysFromStart + 1 day`
    (startDate defaults to now). `customizations.taskAssignments` maps
    template task ids to assignee user ids.
    """
    logger.info(f"[Templates] User {current_user.id} instantiating {template_id} in {workspace.id}")

    result = await TemplateInstantiator(db).instantiate(
        template_id=template_id,
        workspace_id=workspace.id,
        caller_id=current_user.id,
        project_name=request.project_name,
        project_description=request.project_description,
        start_date=request.start_date,
        task_assignments=request.task_assignments,
    )

    return APIResponse[ProjectFromTemplateResponse](
        message="Project created from template successfully",
        data=ProjectFromTemplateResponse(
            project=ProjectResponse.model_validate(result.project),
            tasks_created=result.tasks_created,
        ),
    )
