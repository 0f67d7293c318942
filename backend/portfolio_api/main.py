"""
FastAPI application entry point.
Assembles the app with routers, middleware, lifespan handlers, and exception handlers.
"""

import asyncio
import os
import signal
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import Limiter
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address

from portfolio_api.api.router import api_router
from portfolio_api.core.config import settings
from portfolio_api.core.exceptions import setup_exception_handlers
from portfolio_api.core.logging import get_logger, setup_logging
from portfolio_api.db.init_db import create_tables
from portfolio_api.deps.di_container import build_container

logger = get_logger(__name__)

# Initialize rate limiter; one default budget per client address
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[settings.RATE_LIMIT],
    enabled=settings.RATE_LIMIT_ENABLED,
)


def handle_loop_exception(loop: asyncio.AbstractEventLoop, context: dict) -> None:
    """
    Exceptions escaping tasks nobody awaits are fatal: log them and
    ask the server to shut down through its normal lifespan path.
    """
    exception = context.get("exception")
    logger.critical(
        f"Unhandled exception in event loop: {context.get('message')}",
        exc_info=exception,
    )
    os.kill(os.getpid(), signal.SIGTERM)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events.
    Connects the database, creates tables, and runs the refresh token sweeper.
    """
    # Startup
    setup_logging()
    asyncio.get_running_loop().set_exception_handler(handle_loop_exception)

    container = build_container(settings)
    app.state.container = container

    database = container.database()
    await database.connect()
    if settings.AUTO_CREATE_TABLES:
        await create_tables(database)

    sweeper = container.token_sweeper()
    sweeper.start()

    logger.info(
        "Application started",
        extra={"environment": settings.ENVIRONMENT, "version": settings.VERSION},
    )

    yield

    # Shutdown
    await sweeper.stop()
    await database.disconnect()
    logger.info("Application stopped")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        description="Personal portfolio API: projects, contact messages and accounts",
        openapi_url=f"{settings.API_PREFIX}/openapi.json",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Rate limiting middleware
    app.state.limiter = limiter
    app.add_middleware(SlowAPIMiddleware)

    # Include API router
    app.include_router(api_router, prefix=settings.API_PREFIX)

    @app.get("/", include_in_schema=False)
    async def index():
        """API name, version and endpoint index."""
        return {
            "success": True,
            "message": f"{settings.PROJECT_NAME} is running",
            "version": settings.VERSION,
            "endpoints": {
                "health": f"{settings.API_PREFIX}/health",
                "auth": f"{settings.API_PREFIX}/auth",
                "projects": f"{settings.API_PREFIX}/projects",
                "contacts": f"{settings.API_PREFIX}/contacts",
                "docs": "/docs",
            },
        }

    # Global exception handlers
    setup_exception_handlers(app)

    return app


app = create_app()
