"""
Dashboard API Routes

Provides the headline figures for the admin dashboard.
"""

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from ...workflow import DashboardService
from ...workflow.models import month_key, utcnow
from ..auth import AdminUser, require_view
from ..services import get_dashboard
from .ledger import MONTH_PATTERN

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


class DashboardSummary(BaseModel):
    """Complete dashboard summary response."""

    total_income: float
    total_expenses: float
    balance: float
    pending_requests: int
    method_split: dict[str, int]
    recent_activity: dict


@router.get("/summary", response_model=DashboardSummary)
async def get_dashboard_summary(
    audit_month: str | None = Query(None, pattern=MONTH_PATTERN),
    user: AdminUser = Depends(require_view),
    dashboard: DashboardService = Depends(get_dashboard),
) -> DashboardSummary:
    """Get balance, totals, pending count, payout split and recent activity.

    Args:
        audit_month: YYYY-MM month for the activity panel (current month by default)
        user: Authenticated user
        dashboard: Dashboard service

    Returns:
        DashboardSummary
    """
    stats = dashboard.stats()
    activity = dashboard.recent_activity(audit_month or month_key(utcnow()))
    return DashboardSummary(
        **stats.to_dict(),
        method_split=dashboard.method_split().to_dict(),
        recent_activity=activity.to_dict(),
    )
