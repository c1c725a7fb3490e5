"""
Template schemas - request validation happens here, before any service runs
"""
from pydantic import Field, field_validator
from typing import Dict, List, Optional
from datetime import datetime

from app.core.types import to_naive_utc
from app.models.task import TaskPriority
from app.models.template import TemplateCategory
from app.schemas.common import CamelModel
from app.schemas.project import ProjectResponse


def _clean_tags(tags: Optional[List[str]]) -> Optional[List[str]]:
    if tags is None:
        return None
    return [tag.strip() for tag in tags if tag and tag.strip()]


class TemplateTaskCreate(CamelModel):
    title: str = Field(..., min_length=1, max_length=500)
    description: Optional[str] = ""
    priority: TaskPriority = TaskPriority.MEDIUM
    estimated_hours: float = Field(1.0, ge=0.5)
    days_from_start: int = Field(0, ge=0)
    dependencies: List[str] = Field(default_factory=list)

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Task title is required")
        return v


class TemplateCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1)
    category: TemplateCategory
    is_public: bool = False
    tags: List[str] = Field(default_factory=list)
    estimated_duration: int = Field(..., ge=1, description="Estimated duration in days")
    tasks: List[TemplateTaskCreate] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Template name is required")
        return v

    @field_validator("tags")
    @classmethod
    def clean_tags(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        return _clean_tags(v)


class TemplateUpdate(CamelModel):
    """Partial update; fields left out (or null) are not touched"""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, min_length=1)
    category: Optional[TemplateCategory] = None
    is_public: Optional[bool] = None
    tags: Optional[List[str]] = None
    estimated_duration: Optional[int] = Field(None, ge=1)

    @field_validator("tags")
    @classmethod
    def clean_tags(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        return _clean_tags(v)

    def changes(self) -> Dict[str, object]:
        return self.model_dump(exclude_unset=True, exclude_none=True)


class TemplateTaskResponse(CamelModel):
    id: str
    template_id: str
    title: str
    description: str
    priority: TaskPriority
    estimated_hours: float
    order: int
    dependencies: List[str]
    days_from_start: int


class TemplateResponse(CamelModel):
    id: str
    name: str
    description: str
    category: TemplateCategory
    created_by: str
    is_public: bool
    tags: List[str]
    estimated_duration: int
    version: str
    usage_count: int
    created_at: datetime
    updated_at: Optional[datetime] = None


class TemplateDetailResponse(CamelModel):
    template: TemplateResponse
    tasks: List[TemplateTaskResponse]


class CategoryOption(CamelModel):
    value: TemplateCategory
    label: str


class TemplateCustomizations(CamelModel):
    # template task id -> user id
    task_assignments: Dict[str, str] = Field(default_factory=dict)


class ProjectFromTemplateRequest(CamelModel):
    project_name: str = Field(..., min_length=1, max_length=255)
    project_description: Optional[str] = None
    start_date: Optional[datetime] = None
    customizations: Optional[TemplateCustomizations] = None

    @field_validator("start_date")
    @classmethod
    def normalise_start_date(cls, v: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(v) if v is not None else None

    @property
    def task_assignments(self) -> Dict[str, str]:
        if self.customizations is None:
            return {}
        return self.customizations.task_assignments


class ProjectFromTemplateResponse(CamelModel):
    project: ProjectResponse
    tasks_created: int
