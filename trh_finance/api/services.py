"""
Service Wiring Module

Builds the record store and workflow services for FastAPI dependency
injection.
"""

import os
from functools import lru_cache
from pathlib import Path

from fastapi import Depends

from ..config import FinanceConfig
from ..reports import LedgerExcelGenerator, PaymentVoucherGenerator
from ..storage import RecordStore, create_store
from ..workflow import (
    AuditTrail,
    DashboardService,
    DisbursementProcessor,
    Ledger,
    RequestWorkflow,
)


def get_config_dir() -> Path | None:
    config_dir = os.getenv("FINANCE_CONFIG_DIR")
    return Path(config_dir) if config_dir else None


@lru_cache(maxsize=1)
def get_store() -> RecordStore:
    """Shared record store, built once per process."""
    return create_store()


def get_finance_config(config_dir: Path | None = Depends(get_config_dir)) -> FinanceConfig:
    return FinanceConfig(config_dir)


def get_audit(store: RecordStore = Depends(get_store)) -> AuditTrail:
    return AuditTrail(store)


def get_workflow(
    store: RecordStore = Depends(get_store),
    config_dir: Path | None = Depends(get_config_dir),
    audit: AuditTrail = Depends(get_audit),
) -> RequestWorkflow:
    return RequestWorkflow(store, config_dir, audit)


def get_ledger(
    store: RecordStore = Depends(get_store),
    config_dir: Path | None = Depends(get_config_dir),
    audit: AuditTrail = Depends(get_audit),
) -> Ledger:
    return Ledger(store, config_dir, audit)


def get_processor(
    store: RecordStore = Depends(get_store),
    config_dir: Path | None = Depends(get_config_dir),
    workflow: RequestWorkflow = Depends(get_workflow),
    ledger: Ledger = Depends(get_ledger),
    audit: AuditTrail = Depends(get_audit),
) -> DisbursementProcessor:
    return DisbursementProcessor(store, config_dir, workflow, ledger, audit)


def get_dashboard(
    store: RecordStore = Depends(get_store),
    config_dir: Path | None = Depends(get_config_dir),
    ledger: Ledger = Depends(get_ledger),
    audit: AuditTrail = Depends(get_audit),
) -> DashboardService:
    return DashboardService(store, config_dir, ledger, audit)


def get_excel_generator(config_dir: Path | None = Depends(get_config_dir)) -> LedgerExcelGenerator:
    return LedgerExcelGenerator(config_dir)


def get_voucher_generator(config_dir: Path | None = Depends(get_config_dir)) -> PaymentVoucherGenerator:
    return PaymentVoucherGenerator(config_dir)
