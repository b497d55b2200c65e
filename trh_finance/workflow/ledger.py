"""
Ledger Module

Records independent income/expense entries and computes the totals used
for financial reporting.
"""

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Any, Iterable

from ..config import FinanceConfig
from ..exceptions import RequestValidationError
from ..storage.base import RecordStore
from .audit_trail import AuditTrail
from .models import (
    Transaction,
    TransactionType,
    month_key,
    new_record_id,
    parse_amount,
    parse_date,
)

logger = logging.getLogger(__name__)


@dataclass
class LedgerSummary:
    """Income, expense and net for a set of transactions."""

    total_income: Decimal = Decimal("0")
    total_expense: Decimal = Decimal("0")
    count: int = 0
    period: str | None = None

    @property
    def net(self) -> Decimal:
        return self.total_income - self.total_expense

    def to_dict(self) -> dict:
        return {
            "period": self.period,
            "total_income": float(self.total_income),
            "total_expense": float(self.total_expense),
            "net": float(self.net),
            "count": self.count,
        }


def summarize(transactions: Iterable[Transaction], period: str | None = None) -> LedgerSummary:
    """Sum income and expense over the given transactions."""
    summary = LedgerSummary(period=period)
    for txn in transactions:
        if txn.type is TransactionType.INCOME:
            summary.total_income += txn.amount
        else:
            summary.total_expense += txn.amount
        summary.count += 1
    return summary


class Ledger:
    """Income/expense ledger."""

    def __init__(
        self,
        store: RecordStore,
        config_dir: Path | str | None = None,
        audit: AuditTrail | None = None,
    ):
        self.store = store
        self.config = FinanceConfig(config_dir)
        self.audit = audit or AuditTrail(store)

    def categories_for(self, txn_type: TransactionType) -> list[str]:
        if txn_type is TransactionType.INCOME:
            return self.config.income_categories
        return self.config.expense_categories

    def validate_entry(self, data: dict[str, Any]) -> list[str]:
        """Validate a ledger entry.

        Args:
            data: Entry fields (type, category, amount, description, date)

        Returns:
            List of error messages (empty if valid)
        """
        errors = []

        txn_type = None
        try:
            txn_type = TransactionType(str(data.get("type", "")).upper())
        except ValueError:
            errors.append("Type must be INCOME or EXPENSE")

        category = str(data.get("category") or "").strip()
        if not category:
            errors.append("Category is required")
        elif txn_type is not None and category not in self.categories_for(txn_type):
            errors.append(f"Unknown {txn_type.value.lower()} category: {category}")

        try:
            if parse_amount(data.get("amount")) <= 0:
                errors.append("Amount must be greater than zero")
        except ValueError:
            errors.append("Amount must be a number")

        if not str(data.get("description") or "").strip():
            errors.append("Description is required")

        try:
            parse_date(data.get("date"))
        except (TypeError, ValueError):
            errors.append("Date must be a date (YYYY-MM-DD)")

        return errors

    def record(
        self,
        txn_type: TransactionType | str,
        category: str,
        amount: Decimal | float | str,
        description: str,
        txn_date: date | str | None,
        recorded_by: str | None,
    ) -> Transaction:
        """Record a ledger entry.

        Raises:
            RequestValidationError: If the entry is invalid
        """
        data = {
            "type": txn_type.value if isinstance(txn_type, TransactionType) else txn_type,
            "category": category,
            "amount": amount,
            "description": description,
            "date": txn_date or date.today(),
        }
        errors = self.validate_entry(data)
        if errors:
            raise RequestValidationError(errors)

        txn = Transaction(
            id=new_record_id("TXN"),
            type=TransactionType(str(data["type"]).upper()),
            category=category.strip(),
            amount=parse_amount(amount),
            description=description.strip(),
            date=parse_date(data["date"]),
            recorded_by=recorded_by or "Admin",
        )
        txn = Transaction.from_dict(self.store.add_transaction(txn.to_dict()))

        logger.info(f"Recorded {txn.type.value} {txn.amount} ({txn.category}) by {txn.recorded_by}")
        self.audit.record(
            f"Recorded {txn.type.value.lower()} of {self.config.format_amount(txn.amount)} "
            f"({txn.category})",
            "Ledger",
            txn.id,
            txn.recorded_by,
        )
        return txn

    def list_transactions(self, month: str | None = None) -> list[Transaction]:
        """List transactions, newest date first.

        Args:
            month: Optional YYYY-MM filter
        """
        transactions = [Transaction.from_dict(r) for r in self.store.get_transactions()]
        if month:
            transactions = [t for t in transactions if month_key(t.date) == month]
        return sorted(transactions, key=lambda t: t.date, reverse=True)

    def monthly_summary(self, month: str) -> LedgerSummary:
        return summarize(self.list_transactions(month), period=month)

    def overall_summary(self) -> LedgerSummary:
        return summarize(self.list_transactions())
