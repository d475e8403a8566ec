"""FastAPI application and lifespan."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

import meditrack.models  # noqa: F401
from meditrack.config import get_settings
from meditrack.database import Base, engine
from meditrack.log_config import configure_logging
from meditrack.routers.auth import router as auth_router
from meditrack.routers.logs import router as logs_router
from meditrack.routers.organizations import router as organizations_router
from meditrack.routers.users import router as users_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    """Configure logging and the database schema on startup.

    Yields
    ------
    None
        Runs the application lifespan.
    """
    configure_logging(get_settings().log_level)
    async with engine.begin() as connection:
        await connection.run_sync(Base.metadata.create_all)
    logger.info("MediTrack API ready")
    yield
    await engine.dispose()


async def handle_store_error(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Turn an unexpected store failure into a 500 response."""
    logger.exception(
        "Store error on %s %s", request.method, request.url.path, exc_info=exc
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Database error"},
    )


settings = get_settings()

app = FastAPI(title=settings.app_name, lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_exception_handler(SQLAlchemyError, handle_store_error)
app.include_router(auth_router)
app.include_router(organizations_router)
app.include_router(users_router)
app.include_router(logs_router)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Report service liveness."""
    return {"status": "healthy", "service": settings.app_name}
