"""
Record Store Interface

Contract shared by the remote spreadsheet backend and the SQL store.
Records are plain dicts keyed by snake_case field names.
"""

from abc import ABC, abstractmethod


class RecordStore(ABC):
    """CRUD contract for requests, disbursements, transactions and audit logs."""

    # True when the backend appends its own audit rows for every write
    writes_audit_log: bool = False

    @abstractmethod
    def get_requests(self) -> list[dict]:
        """Return all request records."""

    @abstractmethod
    def add_request(self, record: dict) -> dict:
        """Store a new request and return the stored record."""

    @abstractmethod
    def update_request_status(
        self,
        request_id: str,
        status: str,
        reason: str | None = None,
        user: str | None = None,
    ) -> None:
        """Set the status (and rejection reason) of a request."""

    @abstractmethod
    def get_disbursements(self) -> list[dict]:
        """Return all disbursement records."""

    @abstractmethod
    def add_disbursement(self, record: dict) -> dict:
        """Store a disbursement and return the stored record."""

    @abstractmethod
    def get_transactions(self) -> list[dict]:
        """Return all ledger transaction records."""

    @abstractmethod
    def add_transaction(self, record: dict) -> dict:
        """Store a ledger transaction and return the stored record."""

    @abstractmethod
    def get_audit_logs(self) -> list[dict]:
        """Return all audit log records."""

    @abstractmethod
    def add_audit_log(self, record: dict) -> dict:
        """Append an audit log record."""

    def close(self) -> None:
        """Release any held connections."""
