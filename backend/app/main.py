"""
Workhive API application

Settings are validated when `app.core.config` is imported, so a missing
SECRET_KEY, JWT_SECRET_KEY or DATABASE_URL stops the process before the app
is built.
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.v1.router import api_router
from app.core.config import settings
from app.core.database import close_db, init_db
from app.core.exceptions import WorkhiveError, error_response
from app.core.logging_config import logger
from app.core.middleware import (
    RequestLoggingMiddleware,
    RequestSizeLimitMiddleware,
    SecurityHeadersMiddleware,
)

API_PREFIX = f"/api/{settings.API_VERSION}"


@asynccontextmanager
async def lifespan(_: FastAPI):
    logger.info(f"[Startup] {settings.APP_NAME} ({settings.ENVIRONMENT}) serving {API_PREFIX}")
    await init_db()
    yield
    logger.info("[Shutdown] Closing database engine")
    await close_db()


app = FastAPI(
    title=settings.APP_NAME,
    description="Workspaces, projects, tasks and reusable project templates",
    version="1.0.0",
    lifespan=lifespan,
    redirect_slashes=False,
)

# Last added runs first
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(RequestSizeLimitMiddleware, max_size=1024 * 1024)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID", "X-Response-Time"],
)


@app.exception_handler(WorkhiveError)
async def workhive_exception_handler(request: Request, exc: WorkhiveError):
    if exc.status_code >= 500:
        logger.log_error_with_context(exc, context=f"{request.method} {request.url.path}")
    else:
        logger.warning(f"{request.method} {request.url.path} -> {exc.status_code} {exc.code}")
    return JSONResponse(status_code=exc.status_code, content=error_response(exc))


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    """Anything a service did not anticipate becomes a generic 500"""
    logger.log_error_with_context(exc, context=f"{request.method} {request.url.path}")
    body = {"success": False, "message": "Internal server error"}
    if settings.DEBUG:
        body["error"] = str(exc)
    return JSONResponse(status_code=500, content=body)


@app.get("/health", tags=["Health"])
async def health_check():
    return {"status": "healthy", "service": settings.APP_NAME}


app.include_router(api_router, prefix=API_PREFIX)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host=settings.SERVER_HOST, port=settings.SERVER_PORT, reload=settings.DEBUG)
