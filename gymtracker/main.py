"""FastAPI application factory and lifespan."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from gymtracker import __version__
from gymtracker.api import api_router
from gymtracker.core.config import get_settings
from gymtracker.core.errors import register_exception_handlers
from gymtracker.core.logging_config import configure_logging
from gymtracker.db.session import async_session_maker, engine

settings = get_settings()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup: log where we point; shutdown: release the default engine's pool."""
    logger.info("%s starting (environment=%s)", settings.app_name, settings.environment)
    yield
    await engine.dispose()


def create_application(
    session_factory: async_sessionmaker[AsyncSession] | None = None,
) -> FastAPI:
    """Build the app. ``session_factory`` overrides the default store (tests, scripts)."""
    configure_logging(settings.log_level)
    app = FastAPI(
        title=settings.app_name,
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.session_factory = session_factory or async_session_maker

    # CORS: anything goes in debug; in production use CORS_ORIGINS env (comma-separated)
    if settings.debug:
        cors_origins = ["*"]
    elif settings.environment == "development":
        cors_origins = ["http://localhost:3000", "http://127.0.0.1:3000"]
    else:
        cors_origins = [o.strip() for o in settings.cors_origins.split(",") if o.strip()]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=cors_origins != ["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)

    @app.get("/")
    def root():
        return {"status": "ok", "message": "GymTracker API"}

    app.include_router(api_router, prefix=settings.api_prefix)
    return app


app = create_application()
