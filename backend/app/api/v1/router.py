from fastapi import APIRouter
from app.api.v1.endpoints import health, templates, workspaces

api_router = APIRouter()

api_router.include_router(health.router, tags=["Health"])


@api_router.get("/health", tags=["Health"])
async def health_check():
    """Simple liveness check for load balancers"""
    return {"status": "healthy", "service": "workhive-backend"}


api_router.include_router(templates.router, tags=["Templates"])
api_router.include_router(workspaces.router, prefix="/workspaces", tags=["Workspaces"])
