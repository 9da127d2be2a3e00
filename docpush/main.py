"""
Main FastAPI application entry point.

Builds the FastAPI app from explicit settings: services are constructed
once, stored on the application state, and injected into endpoints.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine

from docpush.api.v1.router import api_router
from docpush.core.config import Settings
from docpush.core.logging import get_logger, setup_logging
from docpush.core.retry import RetryOptions
from docpush.db.session import close_db, create_engine, create_session_factory, init_db
from docpush.db.store import DraftStore
from docpush.middleware.error_handler import ErrorHandlerMiddleware
from docpush.schemas.common import ErrorResponse, HealthCheckResponse
from docpush.services.auth_service import build_authenticator
from docpush.services.document_service import DocumentService
from docpush.services.draft_service import DraftService
from docpush.services.github_service import GitHubService
from docpush.services.media_service import MediaService

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """
    Application lifespan context manager.

    Creates the record store schema on startup, reports repository
    reachability, and disposes of database connections on shutdown.
    """
    settings: Settings = app.state.settings

    # Startup
    logger.info("Starting application...")
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    logger.info(f"Debug mode: {settings.DEBUG}")

    try:
        await init_db(app.state.engine)

        github_health = await app.state.github.health_check()
        logger.info(f"GitHub service: {github_health['status']}")

        logger.info("Application startup complete")

    except Exception as e:
        logger.error(f"Startup failed: {e}")
        raise

    yield

    # Shutdown
    logger.info("Shutting down application...")

    try:
        await close_db(app.state.engine)
    except Exception as e:
        logger.error(f"Shutdown error: {e}")

    logger.info("Application shutdown complete")


def build_github_service(settings: Settings) -> GitHubService:
    """Build the repository adapter from the GitHub settings."""
    return GitHubService(
        settings.repository,
        token=settings.GITHUB_TOKEN,
        retry_options=RetryOptions(
            max_retries=settings.GITHUB_MAX_RETRIES,
            base_delay=settings.GITHUB_RETRY_BASE_DELAY,
            max_delay=settings.GITHUB_RETRY_MAX_DELAY,
        ),
        timeout=settings.GITHUB_TIMEOUT,
    )


def create_app(
    settings: Settings | None = None,
    github: GitHubService | None = None,
    engine: AsyncEngine | None = None,
) -> FastAPI:
    """
    Create the FastAPI application.

    Args:
        settings: Application settings (read from the environment if omitted)
        github: Repository adapter (built from settings if omitted)
        engine: Record store engine (built from settings if omitted)

    Returns:
        Configured application
    """
    settings = settings or Settings()
    setup_logging(settings)

    github = github or build_github_service(settings)
    engine = engine or create_engine(settings)
    store = DraftStore(create_session_factory(engine))

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="Git-backed draft and review engine for documentation",
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
        openapi_url="/openapi.json" if settings.DEBUG else None,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.engine = engine
    app.state.github = github
    app.state.authenticator = build_authenticator(settings.AUTH, settings.ADMIN_EMAILS)
    app.state.draft_service = DraftService(github, store)
    app.state.document_service = DocumentService(github)
    app.state.media_service = MediaService(
        github,
        max_upload_size=settings.MAX_UPLOAD_SIZE,
        url_prefix=f"{settings.API_PREFIX}/media",
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_middleware(ErrorHandlerMiddleware, debug=settings.DEBUG)

    app.include_router(
        api_router,
        prefix=settings.API_PREFIX,
        responses={
            code: {"model": ErrorResponse} for code in (401, 403, 404, 409, 422, 502, 503)
        },
    )

    @app.get("/health", tags=["Health"])
    async def health_check(request: Request) -> JSONResponse:
        """
        Health check endpoint.

        Checks the record store and the documentation repository.

        Returns:
            JSON response with health status
        """
        state = request.app.state
        services: dict[str, str] = {}

        # Check database
        try:
            async with state.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            services["database"] = "healthy"
        except Exception as e:
            logger.error(f"Database health check failed: {e}")
            services["database"] = "unhealthy"

        # Check GitHub
        github_health = await state.github.health_check()
        services["github"] = github_health["status"]

        healthy = all(status == "healthy" for status in services.values())
        health_status = HealthCheckResponse(
            status="healthy" if healthy else "degraded",
            version=state.settings.APP_VERSION,
            timestamp=datetime.now(UTC).isoformat(),
            services=services,
        )
        return JSONResponse(
            status_code=200 if healthy else 503, content=health_status.model_dump()
        )

    return app


if __name__ == "__main__":
    import uvicorn

    _settings = Settings()
    uvicorn.run(
        "docpush.main:create_app",
        factory=True,
        host=_settings.HOST,
        port=_settings.PORT,
        reload=_settings.DEBUG,
        log_level=_settings.LOG_LEVEL.lower(),
    )
