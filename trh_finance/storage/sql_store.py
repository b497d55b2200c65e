"""
SQL Record Store

Keeps the finance records in a relational database through SQLAlchemy.
SQLite is used for development and tests, PostgreSQL (psycopg) in
production.
"""

import logging
import os
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Generator

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Connection
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool

from ..exceptions import BackendError
from .base import RecordStore

logger = logging.getLogger(__name__)

DEFAULT_DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///trh_finance.db")

REQUEST_COLUMNS = [
    "id", "requester_name", "department", "amount", "purpose", "method",
    "date_needed", "attachment_url", "status", "rejection_reason",
    "created_at", "updated_at", "bank_name", "account_name", "account_number",
]

DISBURSEMENT_COLUMNS = [
    "id", "request_id", "method", "amount", "processed_by", "processed_at",
    "bank_name", "account_name", "account_number", "transaction_ref",
    "cash_receiver_name", "signature_base64", "evidence_url",
]

TRANSACTION_COLUMNS = [
    "id", "type", "category", "amount", "description", "date", "recorded_by",
]

AUDIT_COLUMNS = ["id", "action", "module", "record_id", "timestamp", "user"]

SCHEMA = [
    """
    CREATE TABLE IF NOT EXISTS fund_requests (
        id VARCHAR(40) PRIMARY KEY,
        requester_name VARCHAR(200) NOT NULL,
        department VARCHAR(100) NOT NULL,
        amount NUMERIC(14, 2) NOT NULL,
        purpose TEXT NOT NULL,
        method VARCHAR(20) NOT NULL,
        date_needed VARCHAR(10) NOT NULL,
        attachment_url TEXT,
        status VARCHAR(20) NOT NULL DEFAULT 'PENDING',
        rejection_reason TEXT,
        created_at VARCHAR(40) NOT NULL,
        updated_at VARCHAR(40) NOT NULL,
        bank_name VARCHAR(100),
        account_name VARCHAR(200),
        account_number VARCHAR(40)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS disbursements (
        id VARCHAR(40) PRIMARY KEY,
        request_id VARCHAR(40) NOT NULL,
        method VARCHAR(20) NOT NULL,
        amount NUMERIC(14, 2) NOT NULL,
        processed_by VARCHAR(100) NOT NULL,
        processed_at VARCHAR(40) NOT NULL,
        bank_name VARCHAR(100),
        account_name VARCHAR(200),
        account_number VARCHAR(40),
        transaction_ref VARCHAR(100),
        cash_receiver_name VARCHAR(200),
        signature_base64 TEXT,
        evidence_url TEXT
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS ledger_transactions (
        id VARCHAR(40) PRIMARY KEY,
        type VARCHAR(10) NOT NULL,
        category VARCHAR(100) NOT NULL,
        amount NUMERIC(14, 2) NOT NULL,
        description TEXT NOT NULL,
        date VARCHAR(10) NOT NULL,
        recorded_by VARCHAR(100) NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS audit_logs (
        id VARCHAR(40) PRIMARY KEY,
        action TEXT NOT NULL,
        module VARCHAR(50) NOT NULL,
        record_id VARCHAR(40) NOT NULL,
        timestamp VARCHAR(40) NOT NULL,
        "user" VARCHAR(100) NOT NULL
    )
    """,
]


def _quote(column: str) -> str:
    return f'"{column}"' if column == "user" else column


class SqlStore(RecordStore):
    """Record store on a SQLAlchemy engine."""

    def __init__(self, database_url: str | None = None, create_schema: bool = True):
        """Initialize the store.

        Args:
            database_url: SQLAlchemy URL (defaults to DATABASE_URL)
            create_schema: Create missing tables on startup
        """
        self.database_url = database_url or DEFAULT_DATABASE_URL

        if self.database_url.startswith("sqlite"):
            engine_kwargs = {"connect_args": {"check_same_thread": False}}
            if self.database_url in ("sqlite://", "sqlite:///:memory:"):
                # One shared connection, otherwise every checkout gets an empty database
                engine_kwargs["poolclass"] = StaticPool
        else:
            engine_kwargs = {"pool_pre_ping": True, "pool_size": 5, "max_overflow": 10}

        self.engine = create_engine(self.database_url, **engine_kwargs)

        if create_schema:
            self.init_schema()

    def init_schema(self) -> None:
        """Create the record tables if they do not exist."""
        with self._connection() as conn:
            for statement in SCHEMA:
                conn.execute(text(statement))

    @contextmanager
    def _connection(self) -> Generator[Connection, None, None]:
        """Transactional connection; SQL errors surface as BackendError."""
        try:
            with self.engine.begin() as conn:
                yield conn
        except SQLAlchemyError as e:
            logger.error(f"Database error: {e}")
            raise BackendError(f"Database error: {e.__class__.__name__}") from e

    def _select(self, table: str, columns: list[str]) -> list[dict]:
        query = f"SELECT {', '.join(_quote(c) for c in columns)} FROM {table}"
        with self._connection() as conn:
            result = conn.execute(text(query))
            return [dict(zip(columns, row)) for row in result.fetchall()]

    def _insert(self, table: str, columns: list[str], record: dict) -> dict:
        data = {column: record.get(column) for column in columns}
        # Unset columns are left out so their defaults apply
        present = [c for c in columns if data[c] is not None]
        placeholders = ", ".join(f":{c}" for c in present)
        query = (
            f"INSERT INTO {table} ({', '.join(_quote(c) for c in present)}) "
            f"VALUES ({placeholders})"
        )
        with self._connection() as conn:
            conn.execute(text(query), {c: data[c] for c in present})
        return data

    def get_requests(self) -> list[dict]:
        return self._select("fund_requests", REQUEST_COLUMNS)

    def add_request(self, record: dict) -> dict:
        return self._insert("fund_requests", REQUEST_COLUMNS, record)

    def update_request_status(
        self,
        request_id: str,
        status: str,
        reason: str | None = None,
        user: str | None = None,
    ) -> None:
        query = """
            UPDATE fund_requests
            SET status = :status,
                rejection_reason = COALESCE(:reason, rejection_reason),
                updated_at = :updated_at
            WHERE id = :id
        """
        with self._connection() as conn:
            conn.execute(text(query), {
                "id": request_id,
                "status": status,
                "reason": reason,
                "updated_at": datetime.now(timezone.utc).isoformat(),
            })

    def get_disbursements(self) -> list[dict]:
        return self._select("disbursements", DISBURSEMENT_COLUMNS)

    def add_disbursement(self, record: dict) -> dict:
        return self._insert("disbursements", DISBURSEMENT_COLUMNS, record)

    def get_transactions(self) -> list[dict]:
        return self._select("ledger_transactions", TRANSACTION_COLUMNS)

    def add_transaction(self, record: dict) -> dict:
        return self._insert("ledger_transactions", TRANSACTION_COLUMNS, record)

    def get_audit_logs(self) -> list[dict]:
        return self._select("audit_logs", AUDIT_COLUMNS)

    def add_audit_log(self, record: dict) -> dict:
        return self._insert("audit_logs", AUDIT_COLUMNS, record)

    def close(self) -> None:
        self.engine.dispose()
