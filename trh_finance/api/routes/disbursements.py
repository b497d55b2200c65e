"""
Disbursements API Routes

Payment queue, payout processing, history and vouchers.
"""

from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from ...reports import PaymentVoucherGenerator
from ...workflow import DisbursementProcessor
from ..auth import AdminUser, require_disburse, require_view
from ..services import get_processor, get_voucher_generator

router = APIRouter(prefix="/disbursements", tags=["disbursements"])


class DisbursementInput(BaseModel):
    """Input model for paying out an approved request."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    request_id: str
    bank_name: str | None = None
    account_name: str | None = None
    account_number: str | None = None
    transaction_ref: str | None = None
    cash_receiver_name: str | None = None
    signature_base64: str | None = None
    evidence_url: str | None = None


@router.get("/queue")
async def get_pending_queue(
    user: AdminUser = Depends(require_view),
    processor: DisbursementProcessor = Depends(get_processor),
) -> dict:
    """Approved requests waiting for payment, with pre-filled payment forms."""
    queue = processor.pending_queue()
    return {
        "items": [
            {**request.to_dict(), "draft": processor.build_draft(request).to_dict()}
            for request in queue
        ],
        "total": len(queue),
    }


@router.get("")
async def get_history(
    user: AdminUser = Depends(require_view),
    processor: DisbursementProcessor = Depends(get_processor),
) -> list[dict]:
    """Payment history, newest first."""
    return [entry.to_dict() for entry in processor.history()]


@router.post("", status_code=201)
async def create_disbursement(
    input_data: DisbursementInput,
    user: AdminUser = Depends(require_disburse),
    processor: DisbursementProcessor = Depends(get_processor),
) -> dict:
    """Pay out an approved request.

    Cash payments need the receiver's signature; bank and POS payments
    record the bank details and transaction reference.
    """
    disbursement = processor.process(
        input_data.request_id,
        user.name,
        bank_name=input_data.bank_name,
        account_name=input_data.account_name,
        account_number=input_data.account_number,
        transaction_ref=input_data.transaction_ref,
        cash_receiver_name=input_data.cash_receiver_name,
        signature=input_data.signature_base64,
        evidence_url=input_data.evidence_url,
    )
    return {
        "message": "Payment recorded",
        "id": disbursement.id,
        "request_id": disbursement.request_id,
        "amount": float(disbursement.amount),
        "reference": disbursement.reference,
    }


@router.get("/{disbursement_id}/voucher")
async def download_voucher(
    disbursement_id: str,
    user: AdminUser = Depends(require_view),
    processor: DisbursementProcessor = Depends(get_processor),
    generator: PaymentVoucherGenerator = Depends(get_voucher_generator),
) -> Response:
    """Download the PDF payment voucher."""
    disbursement = processor.get_disbursement(disbursement_id)
    request = processor.workflow.get_request(disbursement.request_id)
    content = generator.generate(disbursement, request)
    return Response(
        content=content,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="Voucher_{disbursement.id}.pdf"'},
    )
