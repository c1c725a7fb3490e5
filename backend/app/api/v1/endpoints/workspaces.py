"""
Workspace API - workspaces and read access to their projects and tasks
"""

from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.models.user import User
from app.models.workspace import Workspace
from app.modules.auth.dependencies import get_current_user, get_workspace
from app.schemas.common import APIResponse, PaginatedAPIResponse, PaginationMeta
from app.schemas.project import ProjectResponse, TaskResponse
from app.schemas.workspace import WorkspaceCreate, WorkspaceResponse
from app.services.project_service import ProjectService
from app.utils.pagination import PaginationParams, pagination_params

router = APIRouter()


@router.post("", response_model=APIResponse[WorkspaceResponse], status_code=status.HTTP_201_CREATED)
async def create_workspace(
    workspace_data: WorkspaceCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    workspace = await ProjectService(db).create_workspace(
        current_user.id, workspace_data.name, workspace_data.description
    )
    await db.commit()

    return APIResponse[WorkspaceResponse](
        message="Workspace created successfully",
        data=WorkspaceResponse.model_validate(workspace),
    )


@router.get("", response_model=APIResponse[List[WorkspaceResponse]])
async def list_workspaces(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """List the caller's workspaces"""
    workspaces = await ProjectService(db).list_workspaces(current_user.id)
    return APIResponse[List[WorkspaceResponse]](
        data=[WorkspaceResponse.model_validate(ws) for ws in workspaces]
    )


@router.get("/{workspace_id}/projects", response_model=PaginatedAPIResponse[List[ProjectResponse]])
async def list_workspace_projects(
    workspace: Workspace = Depends(get_workspace),
    params: PaginationParams = Depends(pagination_params),
    db: AsyncSession = Depends(get_db)
):
    page = await ProjectService(db).list_projects(workspace.id, params)

    return PaginatedAPIResponse[List[ProjectResponse]](
        data=[ProjectResponse.model_validate(p) for p in page["items"]],
        pagination=PaginationMeta(**page["pagination"]),
    )


@router.get("/{workspace_id}/projects/{project_id}/tasks", response_model=APIResponse[List[TaskResponse]])
async def list_project_tasks(
    project_id: str,
    workspace: Workspace = Depends(get_workspace),
    db: AsyncSession = Depends(get_db)
):
    service = ProjectService(db)
    project = await service.get_project_or_404(workspace.id, project_id)
    tasks = await service.list_tasks(project.id)

    return APIResponse[List[TaskResponse]](
        data=[TaskResponse.model_validate(t) for t in tasks]
    )
