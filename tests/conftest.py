"""
Pytest configuration and fixtures for the finance workflow tests.
"""

import base64
import shutil
import struct
import zlib
from datetime import date, timedelta
from pathlib import Path

import pytest

from trh_finance.storage import SqlStore
from trh_finance.workflow import (
    AuditTrail,
    DashboardService,
    DisbursementProcessor,
    Ledger,
    RequestWorkflow,
)

# Project root directory
PROJECT_ROOT = Path(__file__).parent.parent


def make_png(width: int = 8, height: int = 4) -> bytes:
    """Build a small white RGB PNG."""
    def chunk(tag: bytes, data: bytes) -> bytes:
        crc = zlib.crc32(tag + data) & 0xFFFFFFFF
        return struct.pack(">I", len(data)) + tag + data + struct.pack(">I", crc)

    raw = b"".join(b"\x00" + b"\xff\xff\xff" * width for _ in range(height))
    return (
        b"\x89PNG\r\n\x1a\n"
        + chunk(b"IHDR", struct.pack(">IIBBBBB", width, height, 8, 2, 0, 0, 0))
        + chunk(b"IDAT", zlib.compress(raw))
        + chunk(b"IEND", b"")
    )


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def config_dir(tmp_path: Path) -> Path:
    """Copy of the shipped config directory, safe to modify."""
    target = tmp_path / "config"
    shutil.copytree(PROJECT_ROOT / "config", target)
    return target


@pytest.fixture
def store() -> SqlStore:
    """Empty in-memory SQL store."""
    sql_store = SqlStore("sqlite://")
    yield sql_store
    sql_store.close()


@pytest.fixture
def audit(store: SqlStore) -> AuditTrail:
    return AuditTrail(store)


@pytest.fixture
def workflow(store: SqlStore, config_dir: Path, audit: AuditTrail) -> RequestWorkflow:
    return RequestWorkflow(store, config_dir, audit)


@pytest.fixture
def ledger(store: SqlStore, config_dir: Path, audit: AuditTrail) -> Ledger:
    return Ledger(store, config_dir, audit)


@pytest.fixture
def processor(
    store: SqlStore,
    config_dir: Path,
    workflow: RequestWorkflow,
    ledger: Ledger,
    audit: AuditTrail,
) -> DisbursementProcessor:
    return DisbursementProcessor(store, config_dir, workflow, ledger, audit)


@pytest.fixture
def dashboard(store: SqlStore, config_dir: Path, ledger: Ledger, audit: AuditTrail) -> DashboardService:
    return DashboardService(store, config_dir, ledger, audit)


@pytest.fixture
def signature_png() -> bytes:
    return make_png()


@pytest.fixture
def signature_data_url(signature_png: bytes) -> str:
    return "data:image/png;base64," + base64.b64encode(signature_png).decode("ascii")


@pytest.fixture
def bank_submission() -> dict:
    """A valid bank transfer request."""
    return {
        "requester_name": "Ada Obi",
        "department": "Media",
        "amount": "25000.50",
        "purpose": "Replacement camera battery",
        "method": "BANK_TRANSFER",
        "date_needed": (date.today() + timedelta(days=7)).isoformat(),
        "attachment_url": "https://drive.google.com/file/d/abc",
        "bank_name": "GTBank",
        "account_name": "Ada Obi",
        "account_number": "0123456789",
    }


@pytest.fixture
def cash_submission() -> dict:
    """A valid cash request."""
    return {
        "requester_name": "Tunde Bello",
        "department": "Hospitality",
        "amount": 7500,
        "purpose": "Refreshments for volunteers",
        "method": "CASH",
        "date_needed": date.today().isoformat(),
    }
