"""API dependencies — Dependency injection for FastAPI endpoints."""

from __future__ import annotations

from fastapi import Request

from vespabridge.api.routing import Dispatcher


def get_dispatcher(request: Request) -> Dispatcher:
    """Get the dispatcher owned by the running application.

    Returns:
        The dispatcher created by the application factory.

    Raises:
        RuntimeError: If the application was not built by ``create_app``.
    """
    dispatcher = getattr(request.app.state, "dispatcher", None)
    if dispatcher is None:
        raise RuntimeError("VespaBridge dispatcher not initialized. Was the app built with create_app()?")
    return dispatcher
