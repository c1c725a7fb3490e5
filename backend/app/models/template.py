"""
Project templates - reusable, ordered blueprints of task definitions
"""

from sqlalchemy import (
    Column, String, DateTime, Enum as SQLEnum, Integer, Float, Text, ForeignKey, Boolean, Index
)
from sqlalchemy.orm import relationship
import enum

from app.core.database import Base
from app.core.types import GUID, StringList, generate_uuid, utcnow
from app.models.task import TaskPriority


class TemplateCategory(str, enum.Enum):
    """Fixed template categories"""
    WEB_DEVELOPMENT = "web-development"
    MOBILE_DEVELOPMENT = "mobile-development"
    MARKETING = "marketing"
    DESIGN = "design"
    RESEARCH = "research"
    EVENT_PLANNING = "event-planning"
    PRODUCT_LAUNCH = "product-launch"
    OTHER = "other"

    @property
    def label(self) -> str:
        return CATEGORY_LABELS[self]


CATEGORY_LABELS = {
    TemplateCategory.WEB_DEVELOPMENT: "Web Development",
    TemplateCategory.MOBILE_DEVELOPMENT: "Mobile Development",
    TemplateCategory.MARKETING: "Marketing",
    TemplateCategory.DESIGN: "Design",
    TemplateCategory.RESEARCH: "Research",
    TemplateCategory.EVENT_PLANNING: "Event Planning",
    TemplateCategory.PRODUCT_LAUNCH: "Product Launch",
    TemplateCategory.OTHER: "Other",
}


class ProjectTemplate(Base):
    """Reusable project blueprint"""
    __tablename__ = "project_templates"

    __table_args__ = (
        Index('ix_project_templates_category_public', 'category', 'is_public'),
        Index('ix_project_templates_usage', 'usage_count'),
        Index('ix_project_templates_created_by', 'created_by'),
    )

    id = Column(GUID, primary_key=True, default=generate_uuid)
    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=False)
    # values_callable stores "web-development" rather than the member name
    category = Column(
        SQLEnum(TemplateCategory, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )
    created_by = Column(GUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    is_public = Column(Boolean, default=False, nullable=False)
    tags = Column(StringList, default=list, nullable=False)
    estimated_duration = Column(Integer, nullable=False)  # in days
    version = Column(String(20), default="1.0.0", nullable=False)

    # Only ever incremented, see TemplateService.increment_usage
    usage_count = Column(Integer, default=0, nullable=False)

    # Timestamps
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    # Relationships
    creator = relationship("User")
    tasks = relationship(
        "TemplateTask",
        back_populates="template",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by=lambda: [TemplateTask.order, TemplateTask.created_at, TemplateTask.id],
    )

    def __repr__(self):
        return f"<ProjectTemplate {self.name}>"


class TemplateTask(Base):
    """One task definition of a template, scheduled relative to the project start"""
    __tablename__ = "template_tasks"

    __table_args__ = (
        Index('ix_template_tasks_template_order', 'template_id', 'order'),
    )

    id = Column(GUID, primary_key=True, default=generate_uuid)
    template_id = Column(GUID, ForeignKey("project_templates.id", ondelete="CASCADE"), nullable=False)

    title = Column(String(500), nullable=False)
    description = Column(Text, default="", nullable=False)
    priority = Column(SQLEnum(TaskPriority), default=TaskPriority.MEDIUM, nullable=False)
    estimated_hours = Column(Float, default=1.0, nullable=False)
    order = Column(Integer, nullable=False)
    # Template task ids this one depends on. Stored as-is, never resolved.
    dependencies = Column(StringList, default=list, nullable=False)
    days_from_start = Column(Integer, default=0, nullable=False)

    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    # Relationships
    template = relationship("ProjectTemplate", back_populates="tasks")

    def __repr__(self):
        return f"<TemplateTask {self.order}: {self.title}>"
