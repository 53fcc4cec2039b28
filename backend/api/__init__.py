"""
Haazir access API package.

Provides the FastAPI application for identity bridging and route access checks.
"""

from .app import app, create_app

__all__ = ["app", "create_app"]
