"""
FastAPI Backend for TRH Finance

Provides REST API endpoints for the finance frontend.
"""

from .main import app

__all__ = ["app"]
