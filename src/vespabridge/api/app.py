"""FastAPI application factory and lifecycle management."""

from __future__ import annotations

import logging
import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import Depends, FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from vespabridge import __version__
from vespabridge.api.actions import ROUTES
from vespabridge.api.deps import get_dispatcher
from vespabridge.api.routing import ActionContext, Dispatcher
from vespabridge.config.settings import CONFIG_ENV_VAR, DEFAULT_CONFIG_FILE, Settings
from vespabridge.core.metadata import IndexMetadataStore
from vespabridge.observability.logging import setup_logging
from vespabridge.transport.base import TransportClient
from vespabridge.transport.vespa import VespaTransport

logger = logging.getLogger(__name__)

_PROXY_METHODS = ["GET", "POST", "PUT", "DELETE", "HEAD"]


def create_app(settings: Settings | None = None, transport: TransportClient | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Application settings. If None, loads from environment.
        transport: Backend transport. If None, a :class:`VespaTransport`
            is built from ``settings.backend``.

    Returns:
        Configured FastAPI application.
    """
    if settings is None:
        # Auto-detect the config file if present
        yaml_path = Path(os.environ.get(CONFIG_ENV_VAR, DEFAULT_CONFIG_FILE))
        if yaml_path.exists():
            logger.info("Loading configuration from %s", yaml_path)
            settings = Settings.from_yaml(yaml_path)
        else:
            settings = Settings()

    setup_logging(settings.observability)

    if transport is None:
        transport = VespaTransport(endpoint=settings.backend.endpoint, timeout=settings.backend.timeout)

    context = ActionContext(
        transport=transport,
        store=IndexMetadataStore(),
        document_type=settings.backend.document_type,
        default_index=settings.backend.default_index,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Manage application lifecycle (startup/shutdown)."""
        logger.info("Starting VespaBridge v%s", __version__)
        logger.info(
            "Proxying to %s (document type '%s') on port %d",
            settings.backend.endpoint,
            settings.backend.document_type,
            settings.server.port,
        )
        yield

        logger.info("Shutting down VespaBridge...")
        transport.close()
        logger.info("VespaBridge shutdown complete")

    app = FastAPI(
        title="VespaBridge",
        description="OpenSearch-compatible REST facade for a Vespa backend.",
        version=__version__,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.dispatcher = Dispatcher(context, ROUTES, path_prefix=settings.proxy.path_prefix)

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.server.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ── Catch-all proxy route ─────────────────────────────────────────────
    @app.api_route("/{path:path}", methods=_PROXY_METHODS, include_in_schema=False)
    async def proxy(request: Request, dispatcher: Dispatcher = Depends(get_dispatcher)) -> Response:
        """Hand every request to the dispatcher on a worker thread."""
        body = await request.body()
        result = await run_in_threadpool(dispatcher.handle, request.method, request.url.path, body)
        if result.body is None or request.method == "HEAD":
            return Response(status_code=result.status)
        return JSONResponse(status_code=result.status, content=result.body)

    return app
