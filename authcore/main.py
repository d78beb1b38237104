"""
FastAPI application entry point.

Exposes signup, signin, token refresh, logout and profile management
over HTTP on top of the auth service.
"""
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import APIRouter, FastAPI, Request, status
from fastapi.responses import JSONResponse

from .config import get_settings
from .domain.exceptions import (
    DomainException,
    StoreUnavailableException,
    ValidationException,
)
from .infrastructure.database.connection import DatabaseManager, health_check, init_db
from .logging_config import configure_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """
    Application lifespan handler.

    Manages startup and shutdown tasks.
    """
    settings = get_settings()
    logger.info("Starting %s v%s (%s)", settings.app_name, settings.app_version, settings.environment)

    try:
        await init_db()
    except Exception:
        logger.exception("Database initialization failed")
        raise

    yield

    logger.info("Shutting down application")
    await DatabaseManager.close()


def create_app() -> FastAPI:
    """
    Application factory.

    Creates and configures the FastAPI application.
    """
    settings = get_settings()
    configure_logging(settings.log_level, settings.log_format)

    # Interactive docs are a debugging aid and never served in production.
    show_docs = settings.debug and not settings.is_production
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Credential issuance and session lifecycle API",
        docs_url="/docs" if show_docs else None,
        redoc_url="/redoc" if show_docs else None,
        openapi_url="/openapi.json" if show_docs else None,
        lifespan=lifespan,
    )

    register_exception_handlers(app)
    register_routes(app)

    return app


def register_exception_handlers(app: FastAPI) -> None:
    """Register global exception handlers."""
    debug = get_settings().debug

    @app.exception_handler(DomainException)
    async def domain_exception_handler(request: Request, exc: DomainException):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=exc.to_dict(),
        )

    @app.exception_handler(ValidationException)
    async def validation_handler(request: Request, exc: ValidationException):
        return JSONResponse(
            status_code=422,
            content=exc.to_dict(),
        )

    @app.exception_handler(StoreUnavailableException)
    async def store_unavailable_handler(request: Request, exc: StoreUnavailableException):
        logger.warning("Store unavailable while handling %s", request.url.path)
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={'error': exc.code, 'message': 'Service temporarily unavailable'},
            headers={'Retry-After': '1'},
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.exception("Unhandled exception on %s", request.url.path)

        if debug:
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={
                    'error': 'INTERNAL_ERROR',
                    'message': str(exc),
                    'type': type(exc).__name__,
                },
            )

        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                'error': 'INTERNAL_ERROR',
                'message': 'An internal error occurred',
            },
        )


def register_routes(app: FastAPI) -> None:
    """Register API routes."""
    settings = get_settings()

    @app.get("/health", tags=["Health"])
    async def health():
        """Check application health."""
        db_ok = await health_check()
        return {
            'status': 'healthy' if db_ok else 'degraded',
            'services': {
                'database': 'up' if db_ok else 'down',
            },
            'version': settings.app_version,
            'environment': settings.environment,
        }

    from .api.v1 import api_router

    # Mount API under /api prefix
    main_router = APIRouter(prefix=settings.api_prefix)
    main_router.include_router(api_router)

    app.include_router(main_router)


# Create application instance
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("authcore.main:app", host="0.0.0.0", port=8000)
