"""
Workflow Models Module

Data structures for fund requests, disbursements, ledger transactions
and audit log entries, plus the parsing helpers shared by the stores.
"""

import uuid
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from enum import Enum
from typing import Any

CENT = Decimal("0.01")


class PaymentMethod(Enum):
    """How a request is paid out."""
    BANK_TRANSFER = "BANK_TRANSFER"
    POS = "POS"
    CASH = "CASH"

    @property
    def needs_bank_details(self) -> bool:
        return self is not PaymentMethod.CASH

    @property
    def label(self) -> str:
        return self.value.replace("_", " ")


class RequestStatus(Enum):
    """Request lifecycle status."""
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    PAID = "PAID"


class TransactionType(Enum):
    """Ledger entry direction."""
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_record_id(prefix: str, now: datetime | None = None) -> str:
    """Generate a record id such as REQ-20250115-3F9A1C."""
    now = now or utcnow()
    return f"{prefix}-{now.strftime('%Y%m%d')}-{uuid.uuid4().hex[:6].upper()}"


def parse_amount(value: Any) -> Decimal:
    """Parse a money value into a Decimal rounded to cents.

    Raises:
        ValueError: If the value is not numeric
    """
    if isinstance(value, bool) or value is None or value == "":
        raise ValueError(f"Invalid amount: {value!r}")
    try:
        amount = Decimal(str(value).replace(",", "").strip())
    except InvalidOperation as e:
        raise ValueError(f"Invalid amount: {value!r}") from e
    if not amount.is_finite():
        raise ValueError(f"Invalid amount: {value!r}")
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def parse_timestamp(value: Any) -> datetime:
    """Parse an ISO timestamp. Naive values are taken as UTC."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    else:
        text = str(value).strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def parse_date(value: Any) -> date:
    """Parse a calendar date from the first ten characters of the value."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value).strip()[:10])


def parse_status(value: Any) -> RequestStatus:
    """Read a request status. Missing or blank means PENDING."""
    if value is None or str(value).strip() == "":
        return RequestStatus.PENDING
    return RequestStatus(str(value).strip().upper())


def _optional(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def month_key(value: date | datetime) -> str:
    """YYYY-MM key used by the monthly filters."""
    return value.strftime("%Y-%m")


@dataclass
class PaymentRequest:
    """A staff request for funds."""

    id: str
    requester_name: str
    department: str
    amount: Decimal
    purpose: str
    method: PaymentMethod
    date_needed: date
    status: RequestStatus = RequestStatus.PENDING
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)
    attachment_url: str | None = None
    rejection_reason: str | None = None
    bank_name: str | None = None
    account_name: str | None = None
    account_number: str | None = None

    @property
    def has_bank_details(self) -> bool:
        return bool(self.bank_name or self.account_number)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "requester_name": self.requester_name,
            "department": self.department,
            "amount": float(self.amount),
            "purpose": self.purpose,
            "method": self.method.value,
            "date_needed": self.date_needed.isoformat(),
            "attachment_url": self.attachment_url,
            "status": self.status.value,
            "rejection_reason": self.rejection_reason,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
            "bank_name": self.bank_name,
            "account_name": self.account_name,
            "account_number": self.account_number,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "PaymentRequest":
        created_at = parse_timestamp(data["created_at"])
        updated = data.get("updated_at")
        return cls(
            id=str(data["id"]),
            requester_name=str(data.get("requester_name") or ""),
            department=str(data.get("department") or ""),
            amount=parse_amount(data.get("amount")),
            purpose=str(data.get("purpose") or ""),
            method=PaymentMethod(str(data["method"]).upper()),
            date_needed=parse_date(data["date_needed"]),
            status=parse_status(data.get("status")),
            created_at=created_at,
            updated_at=parse_timestamp(updated) if updated else created_at,
            attachment_url=_optional(data.get("attachment_url")),
            rejection_reason=_optional(data.get("rejection_reason")),
            bank_name=_optional(data.get("bank_name")),
            account_name=_optional(data.get("account_name")),
            account_number=_optional(data.get("account_number")),
        )


@dataclass
class Disbursement:
    """Record of an approved request being paid out."""

    id: str
    request_id: str
    method: PaymentMethod
    amount: Decimal
    processed_by: str
    processed_at: datetime = field(default_factory=utcnow)
    bank_name: str | None = None
    account_name: str | None = None
    account_number: str | None = None
    transaction_ref: str | None = None
    cash_receiver_name: str | None = None
    signature_base64: str | None = None
    evidence_url: str | None = None

    @property
    def reference(self) -> str:
        """Proof reference shown in the payment history."""
        return self.transaction_ref or "CASH-SIG"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "request_id": self.request_id,
            "method": self.method.value,
            "amount": float(self.amount),
            "processed_by": self.processed_by,
            "processed_at": self.processed_at.isoformat(),
            "bank_name": self.bank_name,
            "account_name": self.account_name,
            "account_number": self.account_number,
            "transaction_ref": self.transaction_ref,
            "cash_receiver_name": self.cash_receiver_name,
            "signature_base64": self.signature_base64,
            "evidence_url": self.evidence_url,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Disbursement":
        return cls(
            id=str(data["id"]),
            request_id=str(data["request_id"]),
            method=PaymentMethod(str(data["method"]).upper()),
            amount=parse_amount(data.get("amount")),
            processed_by=str(data.get("processed_by") or ""),
            processed_at=parse_timestamp(data["processed_at"]),
            bank_name=_optional(data.get("bank_name")),
            account_name=_optional(data.get("account_name")),
            account_number=_optional(data.get("account_number")),
            transaction_ref=_optional(data.get("transaction_ref")),
            cash_receiver_name=_optional(data.get("cash_receiver_name")),
            signature_base64=_optional(data.get("signature_base64")),
            evidence_url=_optional(data.get("evidence_url")),
        )


@dataclass
class Transaction:
    """Independent income/expense ledger entry."""

    id: str
    type: TransactionType
    category: str
    amount: Decimal
    description: str
    date: date
    recorded_by: str

    @property
    def signed_amount(self) -> Decimal:
        return self.amount if self.type is TransactionType.INCOME else -self.amount

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "type": self.type.value,
            "category": self.category,
            "amount": float(self.amount),
            "description": self.description,
            "date": self.date.isoformat(),
            "recorded_by": self.recorded_by,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Transaction":
        return cls(
            id=str(data["id"]),
            type=TransactionType(str(data["type"]).upper()),
            category=str(data.get("category") or ""),
            amount=parse_amount(data.get("amount")),
            description=str(data.get("description") or ""),
            date=parse_date(data["date"]),
            recorded_by=str(data.get("recorded_by") or ""),
        )


@dataclass
class AuditLog:
    """One administrative action."""

    id: str
    action: str
    module: str
    record_id: str
    timestamp: datetime
    user: str

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "action": self.action,
            "module": self.module,
            "record_id": self.record_id,
            "timestamp": self.timestamp.isoformat(),
            "user": self.user,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "AuditLog":
        return cls(
            id=str(data["id"]),
            action=str(data.get("action") or ""),
            module=str(data.get("module") or ""),
            record_id=str(data.get("record_id") or ""),
            timestamp=parse_timestamp(data["timestamp"]),
            user=str(data.get("user") or "System"),
        )


@dataclass
class DashboardStats:
    """Headline figures for the admin dashboard."""

    total_income: Decimal = Decimal("0")
    total_expenses: Decimal = Decimal("0")
    balance: Decimal = Decimal("0")
    pending_requests: int = 0

    def to_dict(self) -> dict:
        return {
            "total_income": float(self.total_income),
            "total_expenses": float(self.total_expenses),
            "balance": float(self.balance),
            "pending_requests": self.pending_requests,
        }
