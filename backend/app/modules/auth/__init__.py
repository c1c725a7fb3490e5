# Authentication module

from app.modules.auth.dependencies import get_current_user, get_workspace

__all__ = [
    "get_current_user",
    "get_workspace",
]
