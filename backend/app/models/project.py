from sqlalchemy import Column, String, DateTime, Enum as SQLEnum, Text, ForeignKey, Index
from sqlalchemy.orm import relationship
import enum

from app.core.database import Base
from app.core.types import GUID, generate_uuid, utcnow


class ProjectStatus(str, enum.Enum):
    """Project status"""
    ACTIVE = "active"
    ARCHIVED = "archived"


class Project(Base):
    """Project model"""
    __tablename__ = "projects"

    __table_args__ = (
        Index('ix_projects_workspace_created', 'workspace_id', 'created_at'),
    )

    id = Column(GUID, primary_key=True, default=generate_uuid)
    workspace_id = Column(GUID, ForeignKey("workspaces.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(GUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    status = Column(SQLEnum(ProjectStatus), default=ProjectStatus.ACTIVE, nullable=False)

    # Timestamps
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    # Relationships
    workspace = relationship("Workspace", back_populates="projects")
    tasks = relationship(
        "Task",
        back_populates="project",
        cascade="all, delete-orphan",
        order_by="Task.created_at",
    )

    def __repr__(self):
        return f"<Project {self.name}>"
