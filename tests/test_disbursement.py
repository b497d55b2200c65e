"""
Tests for the Disbursement Processor

Tests payout of approved requests for cash, bank transfer and POS.
"""

import base64

import pytest
import yaml

from trh_finance.exceptions import (
    InvalidTransitionError,
    RequestNotFoundError,
    RequestValidationError,
    SignatureError,
)
from trh_finance.workflow import (
    DisbursementProcessor,
    PaymentMethod,
    RequestStatus,
    RequestWorkflow,
    TransactionType,
)


@pytest.fixture
def approved_bank(workflow: RequestWorkflow, bank_submission: dict):
    request = workflow.submit(bank_submission)
    return workflow.approve(request.id, "Admin")


@pytest.fixture
def approved_cash(workflow: RequestWorkflow, cash_submission: dict):
    request = workflow.submit(cash_submission)
    return workflow.approve(request.id, "Admin")


class TestPendingQueue:
    """Tests for the approved-request queue and form drafts."""

    def test_queue_contains_only_approved(self, processor, workflow, bank_submission, cash_submission):
        first = workflow.submit(bank_submission)
        second = workflow.submit(cash_submission)
        workflow.submit(bank_submission)
        workflow.approve(first.id, "Admin")
        workflow.approve(second.id, "Admin")

        queue = processor.pending_queue()

        assert {r.id for r in queue} == {first.id, second.id}
        assert all(r.status is RequestStatus.APPROVED for r in queue)
        assert queue[0].created_at <= queue[1].created_at

    def test_draft_prefills_bank_details(self, processor: DisbursementProcessor, approved_bank):
        draft = processor.build_draft(approved_bank)

        assert draft.request_id == approved_bank.id
        assert draft.method is PaymentMethod.BANK_TRANSFER
        assert draft.amount == 25000.5
        assert draft.bank_name == "GTBank"
        assert draft.account_number == "0123456789"
        assert draft.transaction_ref == ""

    def test_draft_for_cash(self, processor: DisbursementProcessor, approved_cash):
        result = processor.build_draft(approved_cash).to_dict()

        assert result["method"] == "CASH"
        assert result["bank_name"] == ""
        assert result["cash_receiver_name"] == "Tunde Bello"


class TestCashDisbursement:
    """Tests for cash payouts, which need a receiver signature."""

    def test_signature_required(self, processor: DisbursementProcessor, approved_cash, workflow, store):
        with pytest.raises(SignatureError, match="MANDATORY"):
            processor.process(approved_cash.id, "Finance", signature="")

        assert workflow.get_request(approved_cash.id).status is RequestStatus.APPROVED
        assert store.get_disbursements() == []

    def test_cash_payout(self, processor, approved_cash, workflow, audit, signature_data_url):
        disbursement = processor.process(
            approved_cash.id,
            "Finance",
            signature=signature_data_url,
        )

        assert disbursement.id.startswith("DSB-")
        assert disbursement.method is PaymentMethod.CASH
        assert str(disbursement.amount) == "7500.00"
        assert disbursement.cash_receiver_name == "Tunde Bello"
        assert disbursement.signature_base64 == signature_data_url
        assert disbursement.bank_name is None
        assert disbursement.reference == "CASH-SIG"

        assert workflow.get_request(approved_cash.id).status is RequestStatus.PAID

        modules = [log.module for log in audit.list_logs()]
        assert modules.count("Disbursements") == 1

    def test_bare_base64_signature(self, processor, approved_cash, signature_png):
        disbursement = processor.process(
            approved_cash.id,
            "Finance",
            cash_receiver_name="Deacon Musa",
            signature=base64.b64encode(signature_png).decode("ascii"),
        )

        assert disbursement.cash_receiver_name == "Deacon Musa"
        assert disbursement.signature_base64.startswith("data:image/png;base64,")

    def test_signature_size_limit(self, config_dir, store, workflow, approved_cash, signature_data_url):
        config_file = config_dir / "finance_config.yaml"
        config = yaml.safe_load(config_file.read_text())
        config["disbursement"]["signature_max_bytes"] = 10
        config_file.write_text(yaml.safe_dump(config))

        processor = DisbursementProcessor(store, config_dir, workflow)

        with pytest.raises(SignatureError, match="exceeds"):
            processor.process(approved_cash.id, "Finance", signature=signature_data_url)


class TestBankDisbursement:
    """Tests for bank transfer and POS payouts."""

    def test_falls_back_to_request_details(self, processor, approved_bank, workflow):
        disbursement = processor.process(
            approved_bank.id,
            "Finance",
            transaction_ref=" FT2501150001 ",
        )

        assert disbursement.bank_name == "GTBank"
        assert disbursement.account_name == "Ada Obi"
        assert disbursement.account_number == "0123456789"
        assert disbursement.transaction_ref == "FT2501150001"
        assert disbursement.reference == "FT2501150001"
        assert disbursement.signature_base64 is None
        assert workflow.get_request(approved_bank.id).status is RequestStatus.PAID

    def test_override_details(self, processor, approved_bank):
        disbursement = processor.process(
            approved_bank.id,
            "Finance",
            bank_name="Access Bank",
            account_number="9876543210",
        )

        assert disbursement.bank_name == "Access Bank"
        assert disbursement.account_number == "9876543210"

    def test_missing_bank_details(self, processor, workflow, store):
        store.add_request({
            "id": "REQ-OLD",
            "requester_name": "Old Row",
            "department": "Admin",
            "amount": 500,
            "purpose": "Imported before bank details were required",
            "method": "POS",
            "date_needed": "2025-01-10",
            "status": "APPROVED",
            "created_at": "2025-01-05T10:00:00+00:00",
            "updated_at": "2025-01-06T10:00:00+00:00",
        })

        with pytest.raises(RequestValidationError) as exc_info:
            processor.process("REQ-OLD", "Finance")

        assert "Bank name is required" in exc_info.value.errors
        assert "Account number is required" in exc_info.value.errors
        assert workflow.get_request("REQ-OLD").status is RequestStatus.APPROVED


class TestDisbursementRules:
    """Tests for the preconditions and side effects of a payout."""

    def test_pending_request_cannot_be_paid(self, processor, workflow, bank_submission):
        request = workflow.submit(bank_submission)

        with pytest.raises(InvalidTransitionError):
            processor.process(request.id, "Finance")

    def test_paid_request_cannot_be_paid_again(self, processor, approved_bank):
        processor.process(approved_bank.id, "Finance")

        with pytest.raises(InvalidTransitionError):
            processor.process(approved_bank.id, "Finance")

    def test_unknown_request(self, processor):
        with pytest.raises(RequestNotFoundError):
            processor.process("REQ-NOPE", "Finance")

    def test_ledger_untouched_by_default(self, processor, approved_bank, ledger):
        processor.process(approved_bank.id, "Finance")

        assert ledger.list_transactions() == []

    def test_posts_to_ledger_when_enabled(self, config_dir, store, workflow, approved_bank):
        config_file = config_dir / "finance_config.yaml"
        config = yaml.safe_load(config_file.read_text())
        config["disbursement"]["post_to_ledger"] = True
        config_file.write_text(yaml.safe_dump(config))

        processor = DisbursementProcessor(store, config_dir, workflow)
        disbursement = processor.process(approved_bank.id, "Finance")

        transactions = processor.ledger.list_transactions()
        assert len(transactions) == 1
        assert transactions[0].type is TransactionType.EXPENSE
        assert transactions[0].category == "Miscellaneous"
        assert transactions[0].amount == disbursement.amount
        assert disbursement.id in transactions[0].description

    def test_bad_ledger_category_writes_nothing(self, config_dir, store, workflow, approved_bank):
        """A payout that cannot be posted to the ledger leaves the request APPROVED."""
        config_file = config_dir / "finance_config.yaml"
        config = yaml.safe_load(config_file.read_text())
        config["disbursement"]["post_to_ledger"] = True
        config["disbursement"]["ledger_category"] = "Disbursements"
        config_file.write_text(yaml.safe_dump(config))

        processor = DisbursementProcessor(store, config_dir, workflow)

        with pytest.raises(RequestValidationError) as exc_info:
            processor.process(approved_bank.id, "Finance")

        assert "Unknown expense category: Disbursements" in exc_info.value.errors
        assert workflow.get_request(approved_bank.id).status is RequestStatus.APPROVED
        assert store.get_disbursements() == []
        assert store.get_transactions() == []


class TestDisbursementHistory:
    """Tests for history and lookups."""

    def test_history_newest_first_with_names(self, processor, approved_bank, approved_cash, signature_data_url):
        first = processor.process(approved_bank.id, "Finance")
        second = processor.process(approved_cash.id, "Finance", signature=signature_data_url)

        history = processor.history()

        assert [e.disbursement.id for e in history] == [second.id, first.id]
        assert history[0].requester_name == "Tunde Bello"
        assert history[1].to_dict()["reference"] == first.reference

    def test_unknown_requester(self, processor, store):
        store.add_disbursement({
            "id": "DSB-ORPHAN",
            "request_id": "REQ-GONE",
            "method": "CASH",
            "amount": 100,
            "processed_by": "Admin",
            "processed_at": "2025-01-01T12:00:00+00:00",
        })

        history = processor.history()

        assert history[0].requester_name == "Unknown"
        assert history[0].to_dict()["reference"] == "CASH-SIG"

    def test_get_disbursement(self, processor, approved_bank):
        disbursement = processor.process(approved_bank.id, "Finance")

        assert processor.get_disbursement(disbursement.id).request_id == approved_bank.id
        with pytest.raises(RequestNotFoundError) as exc_info:
            processor.get_disbursement("DSB-NOPE")
        assert exc_info.value.kind == "Disbursement"
