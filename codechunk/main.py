"""codechunk FastAPI application entry point.

Wires the object store and orchestrator from settings and exposes the
transformation contract over HTTP.  The serverless entry point lives in
:mod:`codechunk.handler`; both share the same orchestrator wiring.

Run with ``uvicorn codechunk.main:create_app --factory`` or
``python -m codechunk.main``.
"""

from __future__ import annotations

from contextlib import asynccontextmanager

import structlog
import uvicorn
from fastapi import FastAPI

from codechunk import __version__
from codechunk.api.middleware import ErrorHandlingMiddleware, RequestLoggingMiddleware
from codechunk.api.routes import router as api_router
from codechunk.config.loader import load_settings
from codechunk.config.settings import Settings
from codechunk.handler import build_orchestrator
from codechunk.interfaces.object_store import IObjectStore
from codechunk.utils.logging import configure_logging, get_logger

_logger: structlog.BoundLogger = get_logger(__name__)


def create_app(
    settings: Settings | None = None,
    object_store: IObjectStore | None = None,
) -> FastAPI:
    """Build and configure the FastAPI application.

    Parameters
    ----------
    settings:
        Resolved settings; loaded from ``config/config.yaml`` plus the
        environment when omitted.
    object_store:
        Storage override, mainly for tests.
    """
    app_settings = settings or load_settings()

    @asynccontextmanager
    async def _lifespan(application: FastAPI):  # noqa: ANN202
        application.state.settings = app_settings
        application.state.orchestrator = build_orchestrator(app_settings, object_store)
        _logger.info(
            "app_startup",
            version=__version__,
            environment=app_settings.app_env,
            storage_backend=app_settings.storage_backend,
        )
        yield
        _logger.info("app_shutdown")

    application = FastAPI(
        title="codechunk API",
        version=__version__,
        description=(
            "Split code and documents into structural and paragraph chunks "
            "with provenance metadata for knowledge-base ingestion."
        ),
        lifespan=_lifespan,
    )

    # Last added runs first: logging wraps error handling.
    application.add_middleware(ErrorHandlingMiddleware)
    application.add_middleware(RequestLoggingMiddleware)
    application.include_router(api_router)
    return application


if __name__ == "__main__":
    _settings = load_settings()
    configure_logging(
        log_level=_settings.log_level,
        json_output=(_settings.app_env == "production"),
    )
    uvicorn.run(
        create_app(_settings),
        host=_settings.app_host,
        port=_settings.app_port,
    )
