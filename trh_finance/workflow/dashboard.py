"""
Dashboard Module

Headline figures for the admin dashboard: balance, totals, pending
requests, cash vs. digital payouts and the month's recent activity.
"""

from dataclasses import dataclass, field
from pathlib import Path

from ..storage.base import RecordStore
from .audit_trail import AuditTrail
from .ledger import Ledger, summarize
from .models import (
    AuditLog,
    DashboardStats,
    PaymentMethod,
    PaymentRequest,
    RequestStatus,
)


@dataclass
class MethodSplit:
    """Paid requests by payment channel."""

    cash: int = 0
    digital: int = 0

    def to_dict(self) -> dict:
        return {"cash": self.cash, "digital": self.digital}


@dataclass
class RecentActivity:
    """Latest audit entries for one month."""

    month: str
    total: int = 0
    entries: list[AuditLog] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "month": self.month,
            "total": self.total,
            "entries": [e.to_dict() for e in self.entries],
        }


class DashboardService:
    """Aggregates ledger, request and audit data for the dashboard."""

    def __init__(
        self,
        store: RecordStore,
        config_dir: Path | str | None = None,
        ledger: Ledger | None = None,
        audit: AuditTrail | None = None,
    ):
        self.store = store
        self.audit = audit or AuditTrail(store)
        self.ledger = ledger or Ledger(store, config_dir, self.audit)

    def _requests(self) -> list[PaymentRequest]:
        return [PaymentRequest.from_dict(r) for r in self.store.get_requests()]

    def stats(self) -> DashboardStats:
        """Balance over all ledger entries plus the pending request count."""
        summary = summarize(self.ledger.list_transactions())
        pending = sum(1 for r in self._requests() if r.status is RequestStatus.PENDING)
        return DashboardStats(
            total_income=summary.total_income,
            total_expenses=summary.total_expense,
            balance=summary.net,
            pending_requests=pending,
        )

    def method_split(self) -> MethodSplit:
        """Count PAID requests paid in cash vs. by bank transfer or POS."""
        split = MethodSplit()
        for request in self._requests():
            if request.status is not RequestStatus.PAID:
                continue
            if request.method is PaymentMethod.CASH:
                split.cash += 1
            else:
                split.digital += 1
        return split

    def recent_activity(self, month: str, limit: int = 5) -> RecentActivity:
        logs = self.audit.list_logs(month)
        return RecentActivity(month=month, total=len(logs), entries=logs[:limit])
