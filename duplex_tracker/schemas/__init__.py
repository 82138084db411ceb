"""Pydantic schemas for ledger payloads and responses."""

from duplex_tracker.schemas.ledger import (
    PurchasePayload,
    PurchaseResponse,
    PurchaseTypePayload,
    PurchaseTypeResponse,
    WorkPaymentPayload,
    WorkPaymentResponse,
    WorkProjectPayload,
    WorkProjectResponse,
    normalize_attachment_paths,
    validate_payload,
)

__all__ = [
    "PurchasePayload",
    "PurchaseResponse",
    "PurchaseTypePayload",
    "PurchaseTypeResponse",
    "WorkPaymentPayload",
    "WorkPaymentResponse",
    "WorkProjectPayload",
    "WorkProjectResponse",
    "normalize_attachment_paths",
    "validate_payload",
]
