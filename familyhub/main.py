import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Depends
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from sqlalchemy.orm import Session
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from .config import settings
from .database import get_db, init_db
from .core.logging_config import setup_logging
from .core.middleware import (
    ExceptionHandlingMiddleware,
    create_error_response,
    register_exception_handlers,
)
from .schemas.result import Result, Error, ErrorCategory
from .utils.storage import get_upload_dir

from .api.v1 import auth, profile, family, tasks

setup_logging()
logger = logging.getLogger(__name__)

API_DESCRIPTION = """
FamilyHub API - families, members and shared tasks.

Every response is wrapped as `{"status": bool, "data": {...} | null, "error": {...} | null}`.
Endpoint payloads such as `{userId, access, refresh, user}` are the contents of `data`,
not top-level keys.
"""

ROUTERS = (
    (auth.router, "/auth", "authentication"),
    (profile.router, "/profile", "profile"),
    (family.router, "/family", "family"),
    (tasks.router, "/tasks", "tasks"),
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info(f"{settings.PROJECT_NAME} {settings.VERSION} started")
    yield


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        openapi_url=f"{settings.API_PREFIX}/openapi.json",
        description=API_DESCRIPTION,
        lifespan=lifespan,
    )

    register_exception_handlers(app)

    app.add_middleware(ExceptionHandlingMiddleware, log_internal_errors=True)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.BACKEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    for router, prefix, tag in ROUTERS:
        app.include_router(router, prefix=f"{settings.API_PREFIX}{prefix}", tags=[tag])

    app.mount(
        settings.UPLOAD_URL_PATH,
        StaticFiles(directory=str(get_upload_dir())),
        name="uploads",
    )
    return app


app = create_app()


@app.get("/", response_model=Result[dict])
async def root():
    return Result.successful(
        data={
            "name": settings.PROJECT_NAME,
            "version": settings.VERSION,
            "docs": "/docs",
            "status": "online",
        }
    )


@app.get("/health", response_model=Result[dict])
async def health_check(db: Session = Depends(get_db)):
    """Liveness plus a round trip to the database."""
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error(f"Health check failed: {e}")
        return create_error_response(
            Error(
                message="Database unavailable",
                status_code=503,
                category=ErrorCategory.INTERNAL,
            )
        )
    return Result.successful(data={"status": "healthy", "database": "connected"})
