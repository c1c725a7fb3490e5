# API endpoints
from . import health, templates, workspaces

__all__ = ["health", "templates", "workspaces"]
