"""Streaming relay endpoint."""

from .app import create_app, router
from .models import MISSING_QUERY, SERVER_ERROR, ErrorBody

__all__ = ["ErrorBody", "MISSING_QUERY", "SERVER_ERROR", "create_app", "router"]
