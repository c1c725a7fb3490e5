from pydantic import Field
from typing import Optional
from datetime import datetime

from app.schemas.common import CamelModel


class WorkspaceCreate(CamelModel):
    name: str = Field("My Workspace", min_length=1, max_length=255)
    description: Optional[str] = None


class WorkspaceResponse(CamelModel):
    id: str
    user_id: str
    name: str
    description: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None
