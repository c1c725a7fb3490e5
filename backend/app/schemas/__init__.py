# Pydantic schemas
from app.schemas.common import APIResponse, PaginatedAPIResponse, PaginationMeta
from app.schemas.workspace import WorkspaceCreate, WorkspaceResponse
from app.schemas.project import ProjectResponse, TaskResponse
from app.schemas.template import (
    TemplateTaskCreate,
    TemplateCreate,
    TemplateUpdate,
    TemplateTaskResponse,
    TemplateResponse,
    TemplateDetailResponse,
    CategoryOption,
    TemplateCustomizations,
    ProjectFromTemplateRequest,
    ProjectFromTemplateResponse,
)

__all__ = [
    "APIResponse",
    "PaginatedAPIResponse",
    "PaginationMeta",
    "WorkspaceCreate",
    "WorkspaceResponse",
    "ProjectResponse",
    "TaskResponse",
    "TemplateTaskCreate",
    "TemplateCreate",
    "TemplateUpdate",
    "TemplateTaskResponse",
    "TemplateResponse",
    "TemplateDetailResponse",
    "CategoryOption",
    "TemplateCustomizations",
    "ProjectFromTemplateRequest",
    "ProjectFromTemplateResponse",
]
