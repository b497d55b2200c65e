"""
Ledger API Routes

Income/expense entries, monthly summaries and the Excel export.
"""

from datetime import date

from fastapi import APIRouter, Depends, Query
from fastapi.responses import FileResponse
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ...reports import LedgerExcelGenerator
from ...workflow import Ledger, summarize
from ...workflow.models import month_key
from ..auth import AdminUser, require_ledger, require_view
from ..services import get_excel_generator, get_ledger

router = APIRouter(prefix="/ledger", tags=["ledger"])

MONTH_PATTERN = r"^\d{4}-(0[1-9]|1[0-2])$"


class TransactionInput(BaseModel):
    """Input model for a ledger entry."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    type: str = ""
    category: str = ""
    amount: str | float | None = None
    description: str = ""
    txn_date: str | None = Field(None, alias="date")


@router.get("")
async def list_transactions(
    month: str | None = Query(None, pattern=MONTH_PATTERN),
    user: AdminUser = Depends(require_view),
    ledger: Ledger = Depends(get_ledger),
) -> dict:
    """List ledger entries, newest first.

    Args:
        month: Optional YYYY-MM filter
        user: Authenticated user
        ledger: Ledger service

    Returns:
        Entries plus their summary
    """
    transactions = ledger.list_transactions(month)
    summary = summarize(transactions, period=month)
    return {
        "items": [t.to_dict() for t in transactions],
        "summary": summary.to_dict(),
    }


@router.post("", status_code=201)
async def record_transaction(
    input_data: TransactionInput,
    user: AdminUser = Depends(require_ledger),
    ledger: Ledger = Depends(get_ledger),
) -> dict:
    """Record an income or expense entry."""
    txn = ledger.record(
        input_data.type,
        input_data.category,
        input_data.amount,
        input_data.description,
        input_data.txn_date,
        user.name,
    )
    return txn.to_dict()


@router.get("/summary")
async def get_summary(
    month: str | None = Query(None, pattern=MONTH_PATTERN),
    user: AdminUser = Depends(require_view),
    ledger: Ledger = Depends(get_ledger),
) -> dict:
    """Income, expense and net for a month (current month by default)."""
    return ledger.monthly_summary(month or month_key(date.today())).to_dict()


@router.get("/export")
async def export_ledger(
    month: str | None = Query(None, pattern=MONTH_PATTERN),
    user: AdminUser = Depends(require_view),
    ledger: Ledger = Depends(get_ledger),
    generator: LedgerExcelGenerator = Depends(get_excel_generator),
) -> FileResponse:
    """Download the month's ledger as an Excel workbook."""
    month = month or month_key(date.today())
    output_path = generator.generate(month, ledger.list_transactions(month))
    return FileResponse(
        path=output_path,
        filename=output_path.name,
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    )
