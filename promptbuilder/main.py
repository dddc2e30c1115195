"""FastAPI application entry point."""

from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from promptbuilder import __version__
from promptbuilder.api.middleware import RequestLoggingMiddleware
from promptbuilder.api.v1.admin import ensure_default_admin
from promptbuilder.api.v1.router import router as api_router
from promptbuilder.config import settings
from promptbuilder.core.exceptions import BuilderError
from promptbuilder.core.storage import get_storage
from promptbuilder.models.deployment import DeploymentPlatform
from promptbuilder.services.completion_service import get_completion_client
from promptbuilder.services.deployment_service import get_deployment_service
from promptbuilder.utils.logging import configure_logging, get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Configure logging, seed the admin account and report usable upstreams."""
    configure_logging()
    await ensure_default_admin(get_storage())
    deployer = get_deployment_service()
    logger.info(
        "application.starting",
        version=__version__,
        environment=settings.app_env,
        generation_enabled=get_completion_client().is_configured(),
        deployment_platforms=[p.value for p in DeploymentPlatform if deployer.token_for(p)],
    )

    yield

    logger.info("application.shutdown")


def error_response(
    status_code: int,
    code: str,
    message: str,
    details: dict[str, Any] | None = None,
) -> JSONResponse:
    """Render the ``{success: false, error: {...}}`` envelope."""
    error: dict[str, Any] = {"code": code, "message": message}
    if details is not None:
        error["details"] = details
    return JSONResponse(status_code=status_code, content={"success": False, "error": error})


async def builder_error_handler(request: Request, exc: BuilderError) -> JSONResponse:
    """Render application errors with their own status code."""
    log = logger.warning if exc.status_code < 500 else logger.error
    log(
        "request.failed",
        error_code=type(exc).__name__,
        error=exc.message,
        status_code=exc.status_code,
        path=request.url.path,
    )
    return error_response(exc.status_code, type(exc).__name__.upper(), exc.message, exc.details)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log unexpected errors; only development responses carry the message."""
    logger.error(
        "unhandled_exception",
        error=str(exc),
        path=request.url.path,
        exc_info=True,
    )
    message = str(exc) if settings.is_development else "An unexpected error occurred"
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "INTERNAL_ERROR", message)


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="One-Prompt Builder API",
        description="Generate websites and mobile apps from a single prompt, then deploy them",
        version=__version__,
        docs_url="/docs" if settings.app_debug else None,
        redoc_url="/redoc" if settings.app_debug else None,
        lifespan=lifespan,
    )

    # Browsers reject credentialed requests to a wildcard origin
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"] if settings.is_development else [settings.frontend_url],
        allow_credentials=not settings.is_development,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Content-Disposition", "X-Request-ID"],
    )
    app.add_middleware(RequestLoggingMiddleware)

    app.add_exception_handler(BuilderError, builder_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.include_router(api_router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "promptbuilder.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.is_development,
    )
