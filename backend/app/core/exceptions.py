"""
Custom Exceptions for Workhive
==============================

Services raise these instead of HTTPException so that the same code can be
driven from the API layer, scripts and tests. The API layer renders them with
`error_response()` and the status carried by each class.

Usage:
    from app.core.exceptions import TemplateNotFoundError

    if not template:
        raise TemplateNotFoundError(template_id)
"""

from typing import Optional, Any, Dict


class WorkhiveError(Exception):
    """Base exception for all Workhive errors"""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details
        }


# ============================================
# Authentication & Authorization Errors
# ============================================

class AuthenticationError(WorkhiveError):
    """User authentication failed"""

    status_code = 401

    def __init__(self, message: str = "Authentication failed"):
        super().__init__(message, code="AUTH_FAILED")


class AuthorizationError(WorkhiveError):
    """User not authorized for this action"""

    status_code = 403

    def __init__(self, message: str = "Not authorized"):
        super().__init__(message, code="NOT_AUTHORIZED")


# ============================================
# Resource Errors (404-type)
# ============================================

class ResourceNotFoundError(WorkhiveError):
    """Base class for not found errors"""

    status_code = 404

    def __init__(self, resource_type: str, resource_id: str, message: Optional[str] = None):
        super().__init__(
            message or f"{resource_type} not found",
            code=f"{resource_type.upper()}_NOT_FOUND",
            details={"resource_type": resource_type, "resource_id": str(resource_id)}
        )


class TemplateNotFoundError(ResourceNotFoundError):
    """Template missing, or (for edits) not owned by the caller"""

    def __init__(self, template_id: str, message: Optional[str] = None):
        super().__init__("Template", template_id, message)


class WorkspaceNotFoundError(ResourceNotFoundError):
    """Workspace not found"""

    def __init__(self, workspace_id: str):
        super().__init__("Workspace", workspace_id)


class ProjectNotFoundError(ResourceNotFoundError):
    """Project not found"""

    def __init__(self, project_id: str):
        super().__init__("Project", project_id)


# ============================================
# Validation Errors (400-type)
# ============================================

class ValidationError(WorkhiveError):
    """Input validation failed"""

    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None):
        details = {"field": field} if field else {}
        super().__init__(message, code="VALIDATION_ERROR", details=details)


# ============================================
# Helper function for API responses
# ============================================

def error_response(error: WorkhiveError) -> Dict[str, Any]:
    """Convert exception to API error response format"""
    return {
        "success": False,
        "message": error.message,
        "error": error.to_dict()
    }
