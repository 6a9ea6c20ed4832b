"""
Harmony - Main Application

FastAPI backend with:
- REST API under /api (users, posts, jobs, communities, connections,
  messages, companies, digital CVs, admin)
- Signed cookie sessions (SessionMiddleware) with a separate admin flag
- Pluggable storage: in-memory or SQLAlchemy (DATABASE_URL)
- OpenAI-backed suggestions and video feedback with static fallbacks
- Uploaded media served from /uploads

Run: uvicorn harmony.main:app --reload
"""

import os
import time

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from starlette.middleware.sessions import SessionMiddleware

from harmony import __version__
from harmony.api.routes import api_router
from harmony.core.config import get_settings
from harmony.core.exceptions import (
    DomainException, DuplicateResourceException, ResourceNotFoundException,
    StorageException,
)
from harmony.core.logging_config import configure_logging

settings = get_settings()
configure_logging()

DOMAIN_STATUS_CODES = {
    ResourceNotFoundException: 404,
    DuplicateResourceException: 400,
    StorageException: 500,
}

# Create FastAPI app
app = FastAPI(
    title="Harmony",
    description="""
    Professional networking and recruiting platform.

    ## Features
    - **Profiles**: Skills, experience and video Digital CVs with AI feedback
    - **Feed**: Posts, likes, comments, reposts and AI post suggestions
    - **Jobs**: Postings, saved jobs, applications and recommendations
    - **Communities**: Groups with membership tracking
    - **Networking**: Connection requests and direct messages
    - **Admin**: Back-office for users, content and password resets
    """,
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc"
)

app.add_middleware(
    SessionMiddleware,
    secret_key=settings.session_secret,
    session_cookie="harmony_session",
    max_age=settings.session_max_age_seconds,
    same_site="lax",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_api_requests(request: Request, call_next):
    """Log every /api request as: METHOD path status in Nms"""
    start = time.perf_counter()
    response = await call_next(request)
    if request.url.path.startswith("/api"):
        duration_ms = (time.perf_counter() - start) * 1000
        logger.info(f"{request.method} {request.url.path} {response.status_code} in {duration_ms:.0f}ms")
    return response


# ============================================================
# ERROR HANDLERS
# ============================================================

def _status_for(exc: DomainException) -> int:
    for exc_type, status_code in DOMAIN_STATUS_CODES.items():
        if isinstance(exc, exc_type):
            return status_code
    return 400


def is_database_error(exc: Exception) -> bool:
    if isinstance(exc, (SQLAlchemyError, StorageException)):
        return True
    message = str(exc).lower()
    return "database" in message or "connection" in message


@app.exception_handler(DomainException)
async def domain_exception_handler(request: Request, exc: DomainException):
    status_code = _status_for(exc)
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
        return JSONResponse(
            status_code=status_code,
            content={"message": "Database connection error", "error": str(exc), "success": False}
        )
    return JSONResponse(status_code=status_code, content={"detail": str(exc)})


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Report request validation failures as 400."""
    return JSONResponse(status_code=400, content={"detail": jsonable_encoder(exc.errors())})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    message = "Database connection error" if is_database_error(exc) else "Internal server error"
    return JSONResponse(
        status_code=500,
        content={"message": message, "error": str(exc), "success": False}
    )


# Include API routes
app.include_router(api_router, prefix="/api")

# Serve uploaded media
os.makedirs(settings.upload_dir, exist_ok=True)
app.mount("/uploads", StaticFiles(directory=settings.upload_dir), name="uploads")


@app.get("/health", tags=["Health"])
async def health_check():
    """Detailed health check."""
    backend = settings.resolved_storage_backend
    result = {"status": "healthy", "storage": backend, "version": __version__}
    if backend == "database":
        from harmony.db.postgres import test_database_connection

        connected = test_database_connection()
        result["database"] = "connected" if connected else "disconnected"
        if not connected:
            result["status"] = "degraded"
    return result
