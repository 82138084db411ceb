"""Typed errors raised by the ledger services.

Every error carries a machine-readable code and the HTTP status the API
layer answers with, so callers catch by type and never parse messages.
"""

from contextlib import contextmanager
from typing import Any, Iterator

from sqlalchemy.exc import OperationalError


class LedgerError(Exception):
    """Base ledger error."""

    code = "ledger_error"
    http_status = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {"success": False, "message": self.message, "code": self.code}


class ValidationError(LedgerError):
    """Required field missing or malformed."""

    code = "validation_error"
    http_status = 400

    def __init__(self, message: str = "Invalid input", fields: dict[str, str] | None = None):
        super().__init__(message)
        self.fields = fields or {}

    def to_dict(self) -> dict[str, Any]:
        payload = super().to_dict()
        payload["fields"] = self.fields
        return payload


class DuplicateRecordError(LedgerError):
    """A record with the same identity tuple already exists."""

    code = "duplicate_record"
    http_status = 409


class NotFoundError(LedgerError):
    """Target record does not exist."""

    code = "not_found"
    http_status = 404


class AuthenticationError(LedgerError):
    """Missing, malformed, expired or unknown bearer token."""

    code = "not_authenticated"
    http_status = 401


class PermissionDeniedError(LedgerError):
    """Principal lacks the role required for the operation."""

    code = "forbidden"
    http_status = 403


class TransactionError(LedgerError):
    """A multi-statement write failed and was rolled back."""

    code = "transaction_error"
    http_status = 500


class DependencyError(LedgerError):
    """The database is unreachable or refused the connection."""

    code = "dependency_error"
    http_status = 503


@contextmanager
def store_errors() -> Iterator[None]:
    """Translate an unreachable database into DependencyError for read paths."""
    try:
        yield
    except OperationalError as e:
        raise DependencyError("Database unavailable") from e


__all__ = [
    "LedgerError",
    "AuthenticationError",
    "ValidationError",
    "DuplicateRecordError",
    "NotFoundError",
    "PermissionDeniedError",
    "TransactionError",
    "DependencyError",
    "store_errors",
]
