"""FastAPI application factory."""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI

from ledger.api import routes
from ledger.service import LedgerService

DEFAULT_MAX_UPLOAD_BYTES = 5 * 1024 * 1024


def create_app(
    service: LedgerService,
    lifespan: Any = None,
    max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES,
) -> FastAPI:
    """Create and configure the ledger HTTP application.

    Args:
        service: The ledger service every route delegates to.
        lifespan: Optional async context manager for startup/shutdown.
                  Used by main.py to load the record store before serving.
        max_upload_bytes: Largest accepted record set upload.

    Returns:
        Configured FastAPI application with routes registered.
    """
    app = FastAPI(
        title="Stake Ledger",
        lifespan=lifespan,
    )

    app.state.ledger_service = service
    app.state.max_upload_bytes = max_upload_bytes

    app.include_router(routes.router)

    return app
