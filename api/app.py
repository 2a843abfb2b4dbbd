"""FastAPI application factory for the telegram codec API.

Creates the app with all routers mounted, the TelegramInspector and the
encode defaults injected via app.state.
"""

import logging

from fastapi import FastAPI

from core.telegram_inspector import TelegramInspector

from .routes_reference import router as reference_router
from .routes_telegrams import router as telegrams_router

logger = logging.getLogger("knxcodec.api")

DEFAULT_ENCODE_SETTINGS = {
    "source_address": "1.1.255",
    "priority": "normal",
    "routing_counter": 6,
}


def create_app(telegram_inspector: TelegramInspector = None, defaults: dict = None) -> FastAPI:
    """Create the FastAPI application with all routes.

    Args:
        telegram_inspector: TelegramInspector for history access
        defaults: Encode defaults (source_address, priority, routing_counter)
    """
    app = FastAPI(
        title="KNX Telegram Codec",
        description="Decode and build KNX TP1 telegrams",
        version="1.0.0",
    )

    # Store references for route handlers
    app.state.telegram_inspector = telegram_inspector or TelegramInspector()
    app.state.defaults = {**DEFAULT_ENCODE_SETTINGS, **(defaults or {})}

    # Mount routers
    app.include_router(telegrams_router)
    app.include_router(reference_router)

    # Set app reference on routers (needed for app.state access)
    telegrams_router.app = app
    reference_router.app = app

    # Health endpoint
    @app.get("/api/v1/health", tags=["system"])
    def health():
        """Health check — returns how many telegrams have been recorded."""
        return {
            "status": "ok",
            "telegrams_recorded": app.state.telegram_inspector.total_count,
        }

    logger.info("FastAPI app created with %d routers", 2)
    return app
