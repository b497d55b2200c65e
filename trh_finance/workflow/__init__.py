"""
Workflow Module

Fund request lifecycle, disbursement bookkeeping, ledger and audit trail.
"""

from .models import (
    AuditLog,
    DashboardStats,
    Disbursement,
    PaymentMethod,
    PaymentRequest,
    RequestStatus,
    Transaction,
    TransactionType,
)
from .audit_trail import AuditTrail
from .request_lifecycle import ALLOWED_TRANSITIONS, RequestWorkflow, can_transition
from .ledger import Ledger, LedgerSummary, summarize
from .signature import SignatureImage, decode_signature
from .disbursement_processor import (
    DisbursementDraft,
    DisbursementHistoryEntry,
    DisbursementProcessor,
)
from .dashboard import DashboardService, MethodSplit, RecentActivity

__all__ = [
    "AuditLog",
    "DashboardStats",
    "Disbursement",
    "PaymentMethod",
    "PaymentRequest",
    "RequestStatus",
    "Transaction",
    "TransactionType",
    "AuditTrail",
    "ALLOWED_TRANSITIONS",
    "RequestWorkflow",
    "can_transition",
    "Ledger",
    "LedgerSummary",
    "summarize",
    "SignatureImage",
    "decode_signature",
    "DisbursementDraft",
    "DisbursementHistoryEntry",
    "DisbursementProcessor",
    "DashboardService",
    "MethodSplit",
    "RecentActivity",
]
