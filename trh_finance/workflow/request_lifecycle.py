"""
Request Lifecycle Module

Validates new fund requests and enforces the status transitions
PENDING -> APPROVED/REJECTED -> PAID.
"""

import logging
from decimal import Decimal
from pathlib import Path
from typing import Any
from urllib.parse import urlparse

from ..config import FinanceConfig
from ..exceptions import (
    InvalidTransitionError,
    RequestNotFoundError,
    RequestValidationError,
)
from ..storage.base import RecordStore
from .audit_trail import AuditTrail
from .models import (
    PaymentMethod,
    PaymentRequest,
    RequestStatus,
    new_record_id,
    parse_amount,
    parse_date,
    utcnow,
)

logger = logging.getLogger(__name__)

MIN_REQUEST_AMOUNT = Decimal("0.01")

ALLOWED_TRANSITIONS: dict[RequestStatus, set[RequestStatus]] = {
    RequestStatus.PENDING: {RequestStatus.APPROVED, RequestStatus.REJECTED},
    RequestStatus.APPROVED: {RequestStatus.PAID},
    RequestStatus.REJECTED: set(),
    RequestStatus.PAID: set(),
}

BANK_FIELDS = ("bank_name", "account_number", "account_name")


def can_transition(current: RequestStatus, target: RequestStatus) -> bool:
    return target in ALLOWED_TRANSITIONS[current]


def _text(data: dict, key: str) -> str:
    value = data.get(key)
    return str(value).strip() if value is not None else ""


class RequestWorkflow:
    """Submission, review and status bookkeeping for fund requests."""

    def __init__(
        self,
        store: RecordStore,
        config_dir: Path | str | None = None,
        audit: AuditTrail | None = None,
    ):
        """Initialize the workflow.

        Args:
            store: Record store
            config_dir: Path to configuration directory
            audit: Audit trail (created from the store if None)
        """
        self.store = store
        self.config = FinanceConfig(config_dir)
        self.audit = audit or AuditTrail(store)

    def validate_submission(self, data: dict[str, Any]) -> list[str]:
        """Validate a request submission.

        Args:
            data: Submitted fields (snake_case)

        Returns:
            List of error messages (empty if valid)
        """
        errors = []

        if not _text(data, "requester_name"):
            errors.append("Requester name is required")

        department = _text(data, "department")
        if not department:
            errors.append("Department is required")
        elif department not in self.config.departments:
            errors.append(f"Unknown department: {department}")

        try:
            amount = parse_amount(data.get("amount"))
            if amount < MIN_REQUEST_AMOUNT:
                errors.append("Amount must be at least 0.01")
        except ValueError:
            errors.append("Amount must be a number")

        if not _text(data, "purpose"):
            errors.append("Purpose is required")

        method = None
        try:
            method = PaymentMethod(_text(data, "method").upper())
        except ValueError:
            errors.append("Payment method must be one of BANK_TRANSFER, POS, CASH")

        date_needed = data.get("date_needed")
        if not date_needed:
            errors.append("Date needed is required")
        else:
            try:
                parse_date(date_needed)
            except ValueError:
                errors.append("Date needed must be a date (YYYY-MM-DD)")

        attachment_url = _text(data, "attachment_url")
        if attachment_url:
            parsed = urlparse(attachment_url)
            if parsed.scheme not in ("http", "https") or not parsed.netloc:
                errors.append("Attachment must be an http(s) link")

        if method is not None and method.needs_bank_details:
            labels = {
                "bank_name": "Bank name",
                "account_number": "Account number",
                "account_name": "Account name",
            }
            for key in BANK_FIELDS:
                if not _text(data, key):
                    errors.append(f"{labels[key]} is required for {method.label} payments")

        return errors

    def submit(self, data: dict[str, Any]) -> PaymentRequest:
        """Create a new PENDING request.

        Args:
            data: Submitted fields (snake_case)

        Returns:
            The stored request

        Raises:
            RequestValidationError: If the submission is invalid
        """
        errors = self.validate_submission(data)
        if errors:
            raise RequestValidationError(errors)

        now = utcnow()
        method = PaymentMethod(_text(data, "method").upper())
        request = PaymentRequest(
            id=new_record_id("REQ", now),
            requester_name=_text(data, "requester_name"),
            department=_text(data, "department"),
            amount=parse_amount(data["amount"]),
            purpose=_text(data, "purpose"),
            method=method,
            date_needed=parse_date(data["date_needed"]),
            status=RequestStatus.PENDING,
            created_at=now,
            updated_at=now,
            attachment_url=_text(data, "attachment_url") or None,
        )
        if method.needs_bank_details:
            request.bank_name = _text(data, "bank_name")
            request.account_number = _text(data, "account_number")
            request.account_name = _text(data, "account_name")

        stored = self.store.add_request(request.to_dict())
        request = PaymentRequest.from_dict(stored)

        logger.info(
            f"Request {request.id} submitted by {request.requester_name} "
            f"({request.department}) for {request.amount}"
        )
        return request

    def list_requests(self, status: RequestStatus | None = None) -> list[PaymentRequest]:
        """List requests: PENDING first, then newest first.

        Args:
            status: Optional status filter

        Returns:
            Sorted requests
        """
        requests = [PaymentRequest.from_dict(r) for r in self.store.get_requests()]
        if status is not None:
            requests = [r for r in requests if r.status is status]

        requests.sort(key=lambda r: r.created_at, reverse=True)
        # Stable sort keeps the date order inside each group
        requests.sort(key=lambda r: r.status is not RequestStatus.PENDING)
        return requests

    def get_request(self, request_id: str) -> PaymentRequest | None:
        """Look up a request by id.

        Raises:
            RequestValidationError: If the id is blank
        """
        request_id = (request_id or "").strip()
        if not request_id:
            raise RequestValidationError(["Request ID is required"])

        for record in self.store.get_requests():
            if str(record.get("id")) == request_id:
                return PaymentRequest.from_dict(record)
        return None

    def require_request(self, request_id: str) -> PaymentRequest:
        request = self.get_request(request_id)
        if request is None:
            raise RequestNotFoundError(request_id)
        return request

    def _transition(
        self,
        request_id: str,
        target: RequestStatus,
        user: str | None,
        reason: str | None = None,
    ) -> PaymentRequest:
        request = self.require_request(request_id)

        if not can_transition(request.status, target):
            raise InvalidTransitionError(request.id, request.status.value, target.value)

        self.store.update_request_status(request.id, target.value, reason, user)

        request.status = target
        request.updated_at = utcnow()
        if reason is not None:
            request.rejection_reason = reason

        logger.info(f"Request {request.id} -> {target.value} by {user}")
        return request

    def approve(self, request_id: str, user: str | None) -> PaymentRequest:
        """Approve a PENDING request."""
        request = self._transition(request_id, RequestStatus.APPROVED, user)
        self.audit.record(
            f"Approved request of {self.config.format_amount(request.amount)} "
            f"for {request.requester_name}",
            "Requests",
            request.id,
            user,
        )
        return request

    def reject(self, request_id: str, reason: str | None, user: str | None) -> PaymentRequest:
        """Reject a PENDING request. A reason is required.

        Raises:
            RequestValidationError: If the reason is blank
        """
        reason = (reason or "").strip()
        if not reason:
            raise RequestValidationError(["Please provide a reason for rejection."])

        request = self._transition(request_id, RequestStatus.REJECTED, user, reason)
        self.audit.record(
            f"Rejected request for {request.requester_name}: {reason}",
            "Requests",
            request.id,
            user,
        )
        return request

    def mark_paid(self, request_id: str, user: str | None) -> PaymentRequest:
        """Move an APPROVED request to PAID. Called by the disbursement processor."""
        request = self.require_request(request_id)
        if request.status is RequestStatus.PAID:
            # The spreadsheet backend settles the request itself on createDisbursement
            return request
        return self._transition(request_id, RequestStatus.PAID, user)
