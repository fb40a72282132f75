"""Main FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from starlette.middleware.sessions import SessionMiddleware

from infrastructure.logging import configure_logging
from infrastructure.observability import DefaultStartupProbe
from infrastructure.settings import get_app_settings
from infrastructure.version import __version__
from pipeline.application import PipelineRunner
from pipeline.dependencies import (
    close_upstream_clients,
    get_pipeline_runner,
    get_tenant_directory,
)
from pipeline.presentation import PipelineMiddleware


@asynccontextmanager
async def portico_lifespan(app: FastAPI):
    """Application lifespan context.

    Manages:
    - Logging configuration
    - Upstream HTTP clients (opened lazily, closed on shutdown)
    """
    settings = get_app_settings()
    configure_logging(debug=settings.debug)
    probe = DefaultStartupProbe()

    tenant_count = await get_tenant_directory().count()
    if tenant_count == 0:
        probe.tenant_directory_empty()
    probe.application_started(
        tenant_count=tenant_count, available_locales=settings.available_locales
    )

    yield

    await close_upstream_clients()
    probe.application_stopped()


def create_app(runner: PipelineRunner | None = None) -> FastAPI:
    """Create the application with the request pipeline installed.

    Args:
        runner: Pipeline runner to install; defaults to the one wired from
            settings.
    """
    settings = get_app_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Per-request gating pipeline for multi-tenant marketplaces",
        version=__version__,
        lifespan=portico_lifespan,
    )

    app.add_middleware(
        PipelineMiddleware,
        runner=runner or get_pipeline_runner(),
        exempt_paths=settings.pipeline_exempt_paths,
    )
    # Outermost: the pipeline reads and writes request.session.
    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.session_secret.get_secret_value(),
        https_only=settings.always_use_ssl,
    )

    @app.get("/health")
    def health():
        """Basic health check endpoint."""
        return {"status": "ok"}

    return app


app = create_app()
