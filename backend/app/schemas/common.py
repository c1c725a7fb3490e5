"""Shared schema building blocks"""
from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    """camelCase on the wire, snake_case in Python; both accepted on input"""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class APIResponse(CamelModel, Generic[T]):
    """Standard response envelope"""
    success: bool = True
    message: Optional[str] = None
    data: Optional[T] = None


class PaginationMeta(CamelModel):
    page: int
    limit: int
    total: int
    total_pages: int


class PaginatedAPIResponse(APIResponse[T], Generic[T]):
    pagination: PaginationMeta
