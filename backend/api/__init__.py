"""
LogiTrack API package.

Provides the FastAPI application for the LogiTrack back-office.
"""

from .app import app, create_app

__all__ = ["app", "create_app"]
