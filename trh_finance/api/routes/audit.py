"""
Audit Log API Routes
"""

from fastapi import APIRouter, Depends, Query

from ...workflow import AuditTrail
from ..auth import AdminUser, require_audit
from ..services import get_audit
from .ledger import MONTH_PATTERN

router = APIRouter(prefix="/audit-logs", tags=["audit"])


@router.get("")
async def list_audit_logs(
    month: str | None = Query(None, pattern=MONTH_PATTERN),
    user: AdminUser = Depends(require_audit),
    audit: AuditTrail = Depends(get_audit),
) -> dict:
    """Administrative actions, newest first, optionally for one YYYY-MM month."""
    logs = audit.list_logs(month)
    return {"items": [log.to_dict() for log in logs], "total": len(logs), "month": month}
