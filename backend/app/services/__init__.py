from app.services.project_service import ProjectService
from app.services.template_service import TemplateService
from app.services.template_instantiator import InstantiationResult, TemplateInstantiator

__all__ = [
    "ProjectService",
    "TemplateService",
    "InstantiationResult",
    "TemplateInstantiator",
]
