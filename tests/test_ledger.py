"""
Tests for the Ledger

Tests entry validation, monthly filtering and the income/expense totals.
"""

from datetime import date
from decimal import Decimal

import pytest

from trh_finance.exceptions import RequestValidationError
from trh_finance.workflow import Ledger, Transaction, TransactionType, summarize


class TestRecordEntry:
    """Tests for Ledger.record."""

    def test_record_income(self, ledger: Ledger, audit):
        txn = ledger.record("INCOME", "Tithes", "150000", "Sunday service tithes", "2025-01-12", "Finance")

        assert txn.id.startswith("TXN-")
        assert txn.type is TransactionType.INCOME
        assert txn.amount == Decimal("150000.00")
        assert txn.date == date(2025, 1, 12)
        assert txn.recorded_by == "Finance"

        logs = audit.list_logs()
        assert len(logs) == 1
        assert logs[0].module == "Ledger"
        assert logs[0].record_id == txn.id

    def test_record_expense_defaults(self, ledger: Ledger):
        """Date defaults to today and the recorder to Admin."""
        txn = ledger.record(TransactionType.EXPENSE, " Utility Bills ", 42000, "  NEPA bill ", None, None)

        assert txn.category == "Utility Bills"
        assert txn.description == "NEPA bill"
        assert txn.date == date.today()
        assert txn.recorded_by == "Admin"

    def test_category_must_match_type(self, ledger: Ledger):
        with pytest.raises(RequestValidationError) as exc_info:
            ledger.record("INCOME", "Utility Bills", 100, "Wrong list", None, "Admin")

        assert exc_info.value.errors == ["Unknown income category: Utility Bills"]

    def test_validation_collects_all_errors(self, ledger: Ledger):
        errors = ledger.validate_entry({
            "type": "TRANSFER",
            "category": "",
            "amount": "-5",
            "description": " ",
            "date": "next week",
        })

        assert "Type must be INCOME or EXPENSE" in errors
        assert "Category is required" in errors
        assert "Amount must be greater than zero" in errors
        assert "Description is required" in errors
        assert "Date must be a date (YYYY-MM-DD)" in errors

    def test_non_numeric_amount(self, ledger: Ledger, store):
        with pytest.raises(RequestValidationError) as exc_info:
            ledger.record("EXPENSE", "Welfare", "lots", "Hospital visit", None, "Admin")

        assert "Amount must be a number" in exc_info.value.errors
        assert store.get_transactions() == []

    def test_categories_for(self, ledger: Ledger):
        assert "Offering" in ledger.categories_for(TransactionType.INCOME)
        assert "Offering" not in ledger.categories_for(TransactionType.EXPENSE)


class TestLedgerQueries:
    """Tests for listing and summarizing entries."""

    @pytest.fixture
    def populated(self, ledger: Ledger) -> Ledger:
        ledger.record("INCOME", "Offering", 50000, "Offering", "2025-01-05", "Finance")
        ledger.record("EXPENSE", "Fuel & Diesel", 20000, "Generator diesel", "2025-01-20", "Finance")
        ledger.record("INCOME", "Donations", 10000, "Donation", "2025-02-02", "Finance")
        ledger.record("EXPENSE", "Welfare", 75000, "Welfare support", "2025-02-10", "Finance")
        return ledger

    def test_newest_first(self, populated: Ledger):
        dates = [t.date.isoformat() for t in populated.list_transactions()]

        assert dates == ["2025-02-10", "2025-02-02", "2025-01-20", "2025-01-05"]

    def test_month_filter(self, populated: Ledger):
        january = populated.list_transactions("2025-01")

        assert len(january) == 2
        assert all(t.date.month == 1 for t in january)
        assert populated.list_transactions("2024-12") == []

    def test_monthly_summary(self, populated: Ledger):
        summary = populated.monthly_summary("2025-01")

        assert summary.period == "2025-01"
        assert summary.total_income == Decimal("50000")
        assert summary.total_expense == Decimal("20000")
        assert summary.net == Decimal("30000")
        assert summary.count == 2

    def test_overall_summary_can_go_negative(self, populated: Ledger):
        summary = populated.overall_summary()

        assert summary.net == summary.total_income - summary.total_expense
        assert summary.net == Decimal("-35000")
        assert summary.to_dict()["net"] == -35000.0


class TestSummarize:
    """Tests for the summarize helper."""

    def test_empty(self):
        summary = summarize([])

        assert summary.count == 0
        assert summary.net == Decimal("0")

    def test_signed_amounts_add_up_to_net(self):
        transactions = [
            Transaction("T1", TransactionType.INCOME, "Tithes", Decimal("100.25"), "a", date(2025, 3, 1), "A"),
            Transaction("T2", TransactionType.EXPENSE, "Welfare", Decimal("40.10"), "b", date(2025, 3, 2), "A"),
            Transaction("T3", TransactionType.EXPENSE, "Welfare", Decimal("0.15"), "c", date(2025, 3, 3), "A"),
        ]

        summary = summarize(transactions, period="2025-03")

        assert summary.net == sum(t.signed_amount for t in transactions)
        assert summary.net == Decimal("60.00")
