"""Pytest configuration and shared fixtures for the telegram codec tests."""

from __future__ import annotations

import os
import sys

import pytest

_TESTS_DIR = os.path.dirname(__file__)
_PROJECT_ROOT = os.path.abspath(os.path.join(_TESTS_DIR, ".."))
if _PROJECT_ROOT not in sys.path:
    sys.path.insert(0, _PROJECT_ROOT)


@pytest.fixture
def telegram():
    """A freshly cleared telegram."""
    from knxtp import Telegram

    return Telegram()


@pytest.fixture
def telegram_inspector():
    """Create a TelegramInspector instance."""
    from core.telegram_inspector import TelegramInspector

    return TelegramInspector(max_size=100)


@pytest.fixture
def app(telegram_inspector):
    """Create a FastAPI test app with the inspector injected."""
    from api.app import create_app

    return create_app(
        telegram_inspector=telegram_inspector,
        defaults={"source_address": "1.1.10"},
    )


@pytest.fixture
async def client(app):
    """Create an AsyncClient for HTTP testing against the ASGI app."""
    import httpx

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(
        transport=transport, base_url="http://testserver"
    ) as client:
        yield client
