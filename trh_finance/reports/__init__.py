"""
Reports Module

Ledger workbook export and disbursement vouchers.
"""

from .ledger_excel import LedgerExcelGenerator
from .payment_voucher import PaymentVoucherGenerator

__all__ = [
    "LedgerExcelGenerator",
    "PaymentVoucherGenerator",
]
