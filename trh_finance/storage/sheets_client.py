"""
Spreadsheet Backend Client

REST client for the Google Apps Script web app that keeps the finance
records in Google Sheets. Every call is ``<url>?action=<name>``; writes
are POSTed as a JSON body.
"""

import json
import logging
import re
from typing import Any

import httpx

from ..exceptions import BackendConfigurationError, BackendError
from .base import RecordStore

logger = logging.getLogger(__name__)

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def to_camel(name: str) -> str:
    """snake_case -> camelCase (sheet column names)."""
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def to_snake(name: str) -> str:
    """camelCase -> snake_case."""
    return _CAMEL_BOUNDARY.sub("_", name).lower()


def record_to_wire(record: dict) -> dict:
    return {to_camel(key): value for key, value in record.items() if value is not None}


def record_from_wire(payload: dict) -> dict:
    return {to_snake(key): value for key, value in payload.items()}


class SheetsStore(RecordStore):
    """Record store backed by the spreadsheet web app."""

    # The script appends audit rows for status updates, disbursements and ledger writes
    writes_audit_log = True

    def __init__(
        self,
        base_url: str | None,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ):
        """Initialize the client.

        Args:
            base_url: Deployed web app URL
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.base_url = (base_url or "").strip()
        self.timeout = timeout
        # Apps Script answers with a redirect to googleusercontent.com
        self._client = httpx.Client(
            timeout=timeout,
            follow_redirects=True,
            transport=transport,
        )

    def _call(self, action: str, method: str = "GET", payload: dict | None = None) -> Any:
        """Invoke a backend action.

        Args:
            action: Backend action name
            method: GET or POST
            payload: JSON body for POST actions

        Returns:
            Decoded JSON response

        Raises:
            BackendConfigurationError: If no backend URL is configured
            BackendError: On HTTP failure or an application-level error
        """
        if not self.base_url:
            raise BackendConfigurationError(
                "Backend Configuration Missing: GOOGLE_SCRIPT_URL is empty."
            )

        try:
            if method == "POST":
                # text/plain avoids a CORS preflight on the Apps Script side
                response = self._client.post(
                    self.base_url,
                    params={"action": action},
                    content=json.dumps(payload or {}, default=str).encode("utf-8"),
                    headers={"Content-Type": "text/plain;charset=utf-8"},
                )
            else:
                response = self._client.get(self.base_url, params={"action": action})
        except httpx.HTTPError as e:
            logger.error(f"Error in {action}: {e}")
            raise BackendError(f"Unable to reach the finance backend: {e}") from e

        if response.is_error:
            logger.error(f"Error in {action}: HTTP {response.status_code}")
            raise BackendError(f"API Error: {response.reason_phrase or response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            logger.error(f"Error in {action}: response is not JSON")
            raise BackendError(f"API Error: invalid response for {action}") from e

        if isinstance(data, dict) and data.get("error"):
            logger.error(f"Error in {action}: {data['error']}")
            raise BackendError(str(data["error"]))

        return data

    def _list(self, action: str) -> list[dict]:
        data = self._call(action)
        if not isinstance(data, list):
            return []
        return [record_from_wire(item) for item in data if isinstance(item, dict)]

    def _write(self, action: str, record: dict) -> dict:
        data = self._call(action, "POST", record_to_wire(record))
        if isinstance(data, dict) and data:
            return {**record, **record_from_wire(data)}
        return dict(record)

    def get_requests(self) -> list[dict]:
        return self._list("getRequests")

    def add_request(self, record: dict) -> dict:
        return self._write("submitRequest", record)

    def update_request_status(
        self,
        request_id: str,
        status: str,
        reason: str | None = None,
        user: str | None = None,
    ) -> None:
        self._call(
            "updateRequestStatus",
            "POST",
            {"id": request_id, "status": status, "reason": reason, "user": user},
        )

    def get_disbursements(self) -> list[dict]:
        return self._list("getDisbursements")

    def add_disbursement(self, record: dict) -> dict:
        return self._write("createDisbursement", record)

    def get_transactions(self) -> list[dict]:
        return self._list("getTransactions")

    def add_transaction(self, record: dict) -> dict:
        return self._write("recordTransaction", record)

    def get_audit_logs(self) -> list[dict]:
        return self._list("getAuditLogs")

    def add_audit_log(self, record: dict) -> dict:
        return self._write("appendAuditLog", record)

    def close(self) -> None:
        self._client.close()
