"""API error handling and response helpers."""

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from duplex_tracker.services.errors import LedgerError, ValidationError

logger = logging.getLogger(__name__)


def success_response(data: Any = None, message: str | None = None) -> dict[str, Any]:
    """Create a standardized success envelope."""
    response: dict[str, Any] = {"success": True, "data": data}
    if message:
        response["message"] = message
    return response


def error_response(error: LedgerError) -> JSONResponse:
    """Create a failure envelope with the error's HTTP status."""
    return JSONResponse(status_code=error.http_status, content=error.to_dict())


async def ledger_error_handler(request: Request, exc: LedgerError) -> JSONResponse:
    if exc.http_status >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    else:
        logger.info("%s %s -> %d %s", request.method, request.url.path, exc.http_status, exc.code)
    return error_response(exc)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Answer malformed path/query parameters with the validation envelope."""
    fields = {
        ".".join(str(part) for part in err["loc"]): err["msg"] for err in exc.errors()
    }
    return error_response(ValidationError("Required fields are missing or invalid", fields=fields))


def register_error_handlers(app: FastAPI) -> None:
    """Install the handlers translating ledger errors into failure envelopes."""
    app.add_exception_handler(LedgerError, ledger_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)


__all__ = ["error_response", "register_error_handlers", "success_response"]
