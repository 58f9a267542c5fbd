"""
Workforce — application entry point.

This is the only file that assembles the app.  Business rules live in
``services/`` and ``core/access.py``; HTTP wiring lives in ``api/``.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import or_, select

from workforce.api.v1.api import api_router
from workforce.api.v1.endpoints.auth import limiter
from workforce.core.config import settings
from workforce.core.enums import Role
from workforce.core.exceptions import register_exception_handlers
from workforce.core.security import get_password_hash
from workforce.db.base import Base
from workforce.db.session import async_session_factory, engine

# Ensure all models are imported so metadata.create_all can see them
from workforce.models.leave_request import LeaveRequest  # noqa: F401
from workforce.models.project import Project, Task  # noqa: F401
from workforce.models.time_entry import TimeEntry  # noqa: F401
from workforce.models.user import User

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)


async def seed_first_admin() -> None:
    """Create the bootstrap admin account unless it already exists."""
    async with async_session_factory() as session:
        result = await session.execute(
            select(User).where(
                or_(
                    User.username == settings.FIRST_ADMIN_USERNAME,
                    User.email == settings.FIRST_ADMIN_EMAIL,
                )
            )
        )
        if result.scalars().first() is not None:
            return
        session.add(
            User(
                username=settings.FIRST_ADMIN_USERNAME,
                email=settings.FIRST_ADMIN_EMAIL,
                hashed_password=get_password_hash(settings.FIRST_ADMIN_PASSWORD),
                name="System Administrator",
                role=Role.ADMIN.value,
            )
        )
        await session.commit()
        logger.info(
            "Default admin created: %s (password: <redacted>)",
            settings.FIRST_ADMIN_USERNAME,
        )


# ── Lifespan ────────────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(_app: FastAPI):
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables initialised")

    await seed_first_admin()

    logger.info("%s v%s started", settings.PROJECT_NAME, settings.VERSION)
    yield
    await engine.dispose()
    logger.info("Shutdown complete")


# ── App factory ─────────────────────────────────────────────────────
def create_app() -> FastAPI:
    application = FastAPI(
        title=settings.PROJECT_NAME,
        description="Time tracking, leave requests and task management",
        version=settings.VERSION,
        openapi_url=f"{settings.API_V1_PREFIX}/openapi.json",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Rate limiting state read by the @limiter.limit decorators
    application.state.limiter = limiter

    register_exception_handlers(application)

    application.include_router(api_router, prefix=settings.API_V1_PREFIX)

    return application


app = create_app()
