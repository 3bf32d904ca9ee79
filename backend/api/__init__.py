"""
ShotLog API Module

FastAPI routes for shot-by-shot round entry.
"""

from .routes import router, get_session, get_submission_client

__all__ = [
    "router",
    "get_session",
    "get_submission_client",
]
