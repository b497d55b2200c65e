"""
API Routes Package

Contains all route modules for the finance API.
"""

from .requests import router as requests_router
from .disbursements import router as disbursements_router
from .ledger import router as ledger_router
from .audit import router as audit_router
from .dashboard import router as dashboard_router
from .session import router as session_router

__all__ = [
    "requests_router",
    "disbursements_router",
    "ledger_router",
    "audit_router",
    "dashboard_router",
    "session_router",
]
