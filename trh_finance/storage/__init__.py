"""
Storage Module

Record stores for the finance workflow: the spreadsheet web app backend
and a local SQL database.
"""

import os

from .base import RecordStore
from .sheets_client import SheetsStore
from .sql_store import SqlStore


def create_store(backend: str | None = None) -> RecordStore:
    """Build the record store selected by FINANCE_BACKEND.

    Defaults to the spreadsheet backend when GOOGLE_SCRIPT_URL is set,
    otherwise to the SQL store.
    """
    script_url = os.getenv("GOOGLE_SCRIPT_URL", "")
    backend = (backend or os.getenv("FINANCE_BACKEND") or ("sheets" if script_url else "sql")).lower()

    if backend == "sheets":
        return SheetsStore(script_url, timeout=float(os.getenv("BACKEND_TIMEOUT", "30")))
    if backend == "sql":
        return SqlStore(os.getenv("DATABASE_URL"))
    raise ValueError(f"Unknown FINANCE_BACKEND: {backend}")


__all__ = [
    "RecordStore",
    "SheetsStore",
    "SqlStore",
    "create_store",
]
