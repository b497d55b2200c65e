"""
Disbursement Processor Module

Pays out approved requests: checks the method-specific proof, records
the disbursement, marks the request PAID and reflects the payment in the
audit trail (and, if configured, the ledger).
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from ..config import FinanceConfig
from ..exceptions import (
    InvalidTransitionError,
    RequestNotFoundError,
    RequestValidationError,
)
from ..storage.base import RecordStore
from .audit_trail import AuditTrail
from .ledger import Ledger
from .models import (
    Disbursement,
    PaymentMethod,
    PaymentRequest,
    RequestStatus,
    TransactionType,
    new_record_id,
    utcnow,
)
from .request_lifecycle import RequestWorkflow
from .signature import decode_signature

logger = logging.getLogger(__name__)


@dataclass
class DisbursementDraft:
    """Pre-filled payment form for an approved request."""

    request_id: str
    method: PaymentMethod
    amount: float
    bank_name: str
    account_number: str
    transaction_ref: str
    cash_receiver_name: str

    def to_dict(self) -> dict:
        return {
            "request_id": self.request_id,
            "method": self.method.value,
            "amount": self.amount,
            "bank_name": self.bank_name,
            "account_number": self.account_number,
            "transaction_ref": self.transaction_ref,
            "cash_receiver_name": self.cash_receiver_name,
        }


@dataclass
class DisbursementHistoryEntry:
    """A past disbursement with the requester's name attached."""

    disbursement: Disbursement
    requester_name: str

    def to_dict(self) -> dict:
        return {
            **self.disbursement.to_dict(),
            "requester_name": self.requester_name,
            "reference": self.disbursement.reference,
        }


class DisbursementProcessor:
    """Processes payouts for APPROVED requests."""

    def __init__(
        self,
        store: RecordStore,
        config_dir: Path | str | None = None,
        workflow: RequestWorkflow | None = None,
        ledger: Ledger | None = None,
        audit: AuditTrail | None = None,
    ):
        """Initialize the processor.

        Args:
            store: Record store
            config_dir: Path to configuration directory
            workflow: Request workflow (created from the store if None)
            ledger: Ledger used when disbursements post to it
            audit: Audit trail
        """
        self.store = store
        self.config = FinanceConfig(config_dir)
        self.audit = audit or AuditTrail(store)
        self.workflow = workflow or RequestWorkflow(store, config_dir, self.audit)
        self.ledger = ledger or Ledger(store, config_dir, self.audit)

    def pending_queue(self) -> list[PaymentRequest]:
        """Approved requests waiting for payment, oldest first."""
        approved = self.workflow.list_requests(RequestStatus.APPROVED)
        return sorted(approved, key=lambda r: r.created_at)

    def build_draft(self, request: PaymentRequest) -> DisbursementDraft:
        """Pre-fill the payment form from the request."""
        return DisbursementDraft(
            request_id=request.id,
            method=request.method,
            amount=float(request.amount),
            bank_name=request.bank_name or "",
            account_number=request.account_number or "",
            transaction_ref="",
            cash_receiver_name=request.requester_name,
        )

    def process(
        self,
        request_id: str,
        processed_by: str | None,
        bank_name: str | None = None,
        account_name: str | None = None,
        account_number: str | None = None,
        transaction_ref: str | None = None,
        cash_receiver_name: str | None = None,
        signature: str | None = None,
        evidence_url: str | None = None,
    ) -> Disbursement:
        """Pay out an approved request.

        Args:
            request_id: Request to pay
            processed_by: Acting administrator
            bank_name: Paying bank (bank/POS; defaults to the request's)
            account_name: Beneficiary account name (defaults to the request's)
            account_number: Beneficiary account (defaults to the request's)
            transaction_ref: Bank/POS transaction reference
            cash_receiver_name: Who received the cash (defaults to the requester)
            signature: Receiver signature image, mandatory for cash
            evidence_url: Optional link to a receipt

        Returns:
            The stored disbursement

        Raises:
            RequestNotFoundError: If the request does not exist
            InvalidTransitionError: If the request is not APPROVED
            SignatureError: If a cash payment lacks a usable signature
            RequestValidationError: If bank details are missing
        """
        request = self.workflow.require_request(request_id)
        if request.status is not RequestStatus.APPROVED:
            raise InvalidTransitionError(request.id, request.status.value, RequestStatus.PAID.value)

        processed_by = processed_by or "Admin"
        disbursement = Disbursement(
            id=new_record_id("DSB"),
            request_id=request.id,
            method=request.method,
            amount=request.amount,
            processed_by=processed_by,
            processed_at=utcnow(),
            evidence_url=(evidence_url or "").strip() or None,
        )

        if request.method is PaymentMethod.CASH:
            image = decode_signature(signature, self.config.signature_max_bytes)
            disbursement.signature_base64 = image.to_data_url()
            disbursement.cash_receiver_name = (
                (cash_receiver_name or "").strip() or request.requester_name
            )
        else:
            disbursement.bank_name = (bank_name or "").strip() or request.bank_name
            disbursement.account_name = (account_name or "").strip() or request.account_name
            disbursement.account_number = (account_number or "").strip() or request.account_number
            disbursement.transaction_ref = (transaction_ref or "").strip() or None

            errors = []
            if not disbursement.bank_name:
                errors.append("Bank name is required")
            if not disbursement.account_number:
                errors.append("Account number is required")
            if errors:
                raise RequestValidationError(errors)

        ledger_entry = None
        if self.config.post_disbursements_to_ledger:
            ledger_entry = {
                "type": TransactionType.EXPENSE.value,
                "category": self.config.disbursement_ledger_category,
                "amount": disbursement.amount,
                "description": f"Disbursement {disbursement.id} for {request.id}: {request.purpose}",
                "date": disbursement.processed_at.date(),
            }
            # Nothing is written unless the ledger entry is valid too
            errors = self.ledger.validate_entry(ledger_entry)
            if errors:
                raise RequestValidationError(errors)

        stored = self.store.add_disbursement(disbursement.to_dict())
        disbursement = Disbursement.from_dict(stored)
        self.workflow.mark_paid(request.id, processed_by)

        logger.info(
            f"Disbursed {disbursement.amount} for request {request.id} "
            f"via {disbursement.method.value} by {processed_by}"
        )
        self.audit.record(
            f"Disbursed {self.config.format_amount(disbursement.amount)} to "
            f"{request.requester_name} via {disbursement.method.label}",
            "Disbursements",
            disbursement.id,
            processed_by,
        )

        if ledger_entry is not None:
            self.ledger.record(
                ledger_entry["type"],
                ledger_entry["category"],
                ledger_entry["amount"],
                ledger_entry["description"],
                ledger_entry["date"],
                processed_by,
            )

        return disbursement

    def get_disbursement(self, disbursement_id: str) -> Disbursement:
        """Look up a disbursement by id.

        Raises:
            RequestNotFoundError: If it does not exist
        """
        disbursement_id = (disbursement_id or "").strip()
        for record in self.store.get_disbursements():
            if str(record.get("id")) == disbursement_id:
                return Disbursement.from_dict(record)
        raise RequestNotFoundError(disbursement_id, kind="Disbursement")

    def history(self) -> list[DisbursementHistoryEntry]:
        """All disbursements, newest first, with requester names."""
        names = {
            str(r.get("id")): r.get("requester_name") or "Unknown"
            for r in self.store.get_requests()
        }
        entries = [
            DisbursementHistoryEntry(
                disbursement=d,
                requester_name=names.get(d.request_id, "Unknown"),
            )
            for d in (Disbursement.from_dict(r) for r in self.store.get_disbursements())
        ]
        return sorted(entries, key=lambda e: e.disbursement.processed_at, reverse=True)
