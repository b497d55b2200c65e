"""
Finance Exceptions

Errors raised by the workflow and storage layers.
"""


class FinanceError(Exception):
    """Base class for finance workflow errors."""


class RequestValidationError(FinanceError):
    """Input failed validation. Carries every message found."""

    def __init__(self, errors: list[str]):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors))


class RequestNotFoundError(FinanceError):
    """No record with the given id."""

    def __init__(self, record_id: str, kind: str = "Request"):
        self.record_id = record_id
        self.kind = kind
        super().__init__(f"{kind} not found: {record_id}")


class InvalidTransitionError(FinanceError):
    """A status change not allowed by the request lifecycle."""

    def __init__(self, request_id: str, current: str, target: str):
        self.request_id = request_id
        self.current = current
        self.target = target
        super().__init__(
            f"Request {request_id} cannot move from {current} to {target}"
        )


class SignatureError(FinanceError):
    """Signature image could not be decoded or is not acceptable."""


class BackendError(FinanceError):
    """The record backend failed or returned an application error."""


class BackendConfigurationError(BackendError):
    """The record backend is not configured."""
