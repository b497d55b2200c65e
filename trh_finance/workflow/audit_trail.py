"""
Audit Trail Module

Append-only log of administrative actions.
"""

import logging

from ..storage.base import RecordStore
from .models import AuditLog, month_key, new_record_id, utcnow

logger = logging.getLogger(__name__)


class AuditTrail:
    """Writes and reads audit log entries."""

    def __init__(self, store: RecordStore):
        self.store = store

    def record(self, action: str, module: str, record_id: str, user: str | None) -> AuditLog:
        """Append an audit entry.

        When the backend keeps its own audit rows the entry is returned
        but not written, so nothing is logged twice.

        Args:
            action: Human-readable description of what happened
            module: Area of the system (Requests, Disbursements, Ledger)
            record_id: Id of the affected record
            user: Acting administrator ("System" if unknown)

        Returns:
            The audit entry
        """
        entry = AuditLog(
            id=new_record_id("LOG"),
            action=action,
            module=module,
            record_id=record_id,
            timestamp=utcnow(),
            user=user or "System",
        )
        if self.store.writes_audit_log:
            logger.debug(f"Backend logs its own audit rows, skipping: {action}")
            return entry

        self.store.add_audit_log(entry.to_dict())
        logger.info(f"Audit [{module}] {entry.user}: {action}")
        return entry

    def list_logs(self, month: str | None = None) -> list[AuditLog]:
        """List audit entries, newest first.

        Args:
            month: Optional YYYY-MM filter

        Returns:
            Audit entries
        """
        logs = [AuditLog.from_dict(r) for r in self.store.get_audit_logs()]
        if month:
            logs = [log for log in logs if month_key(log.timestamp) == month]
        return sorted(logs, key=lambda log: log.timestamp, reverse=True)
