"""Session Store Backend - FastAPI Application Factory."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from sessionstore.api import (
    health_router,
    register_error_handlers,
    sessions_router,
    users_router,
)
from sessionstore.core import (
    Settings,
    build_engine,
    build_session_maker,
    get_settings,
    setup_logging,
)
from sessionstore.core.logging import get_logger
from sessionstore.domain import Clock, utcnow
from sessionstore.services import SessionReaper, SessionService
from sessionstore.stores import SQLSessionStore, SQLUserStore

logger = get_logger("main")


def configure_state(
    app: FastAPI,
    session_maker: async_sessionmaker[AsyncSession],
    clock: Clock = utcnow,
) -> None:
    """Attach stores, the session service and the reaper to ``app.state``."""
    settings: Settings = app.state.settings
    session_store = SQLSessionStore(session_maker, clock=clock)

    app.state.session_maker = session_maker
    app.state.session_store = session_store
    app.state.user_store = SQLUserStore(session_maker)
    app.state.session_service = SessionService(
        session_store,
        idle_timeout=settings.session_idle_timeout,
        max_lifetime=settings.session_max_lifetime,
        clock=clock,
    )
    app.state.reaper = SessionReaper(
        session_store,
        interval_seconds=settings.session_reaper_interval_seconds,
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    settings: Settings = app.state.settings
    setup_logging(level=settings.log_level, format_type=settings.log_format)
    logger.info(f"Starting {settings.app_name} v{settings.app_version}")

    engine = build_engine(settings)
    configure_state(app, build_session_maker(engine))
    await app.state.reaper.start()

    yield

    # Shutdown
    logger.info("Shutting down...")
    await app.state.reaper.stop()
    await engine.dispose()


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings or get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Authenticated session and user record service",
        version=settings.app_version,
        lifespan=lifespan,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        openapi_url="/openapi.json" if settings.debug else None,
    )
    app.state.settings = settings

    register_error_handlers(app)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
        allow_headers=[
            "Authorization",
            "Content-Type",
            "X-Session-ID",
        ],
    )

    # Prometheus metrics (before routers so /metrics endpoint is registered first)
    if settings.enable_metrics:
        from prometheus_fastapi_instrumentator import Instrumentator

        Instrumentator(
            excluded_handlers=["/", "/health", "/metrics"],
        ).instrument(app).expose(app, endpoint="/metrics", include_in_schema=False)

    app.include_router(health_router)
    app.include_router(sessions_router)
    app.include_router(users_router)

    @app.get("/")
    async def root() -> dict[str, str]:
        """Liveness endpoint with service information."""
        return {
            "name": settings.app_name,
            "version": settings.app_version,
        }

    return app


def run() -> None:
    """Serve the application with uvicorn (``sessionstore`` console script)."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)
