"""Installable alias for the addon ASGI app, used by uvicorn and the console script."""

from __future__ import annotations

from app.main import app, create_app

__all__ = ["app", "create_app"]
