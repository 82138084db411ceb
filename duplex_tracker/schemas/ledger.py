"""Pydantic schemas for purchase, work payment and work project payloads."""

from collections.abc import Iterable
import datetime as dt
from datetime import date, datetime
from decimal import Decimal
from typing import Any, TypeVar

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from duplex_tracker.services.errors import ValidationError

PayloadT = TypeVar("PayloadT", bound=BaseModel)


def coerce_day(value: Any) -> Any:
    """Reduce datetimes and ISO datetime strings to their calendar day.

    Dates are compared at day granularity, so a time-of-day component sent
    by a client is dropped here rather than rejected.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, str) and len(value) > 10:
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
        except ValueError:
            return value
    return value


def validate_payload(model: type[PayloadT], payload: PayloadT | dict[str, Any] | None) -> PayloadT:
    """Validate a raw payload into ``model``.

    Raises:
        ValidationError: with one entry per offending field
    """
    if isinstance(payload, model):
        return payload
    try:
        return model.model_validate(payload or {})
    except PydanticValidationError as e:
        fields = {
            ".".join(str(part) for part in err["loc"]) or "__root__": err["msg"]
            for err in e.errors()
        }
        raise ValidationError("Required fields are missing or invalid", fields=fields) from e


def normalize_attachment_paths(paths: Iterable[str] | None) -> frozenset[str]:
    """Turn a client-supplied attachment list into a set of non-empty paths.

    Raises:
        ValidationError: if any entry is not a non-empty string
    """
    if paths is None:
        return frozenset()
    if isinstance(paths, str):
        raise ValidationError(
            "attachment_paths must be a list", fields={"attachment_paths": "must be a list"}
        )
    normalized = set()
    for index, path in enumerate(paths):
        if not isinstance(path, str) or not path.strip():
            raise ValidationError(
                "Invalid attachment path",
                fields={f"attachment_paths.{index}": "must be a non-empty string"},
            )
        normalized.add(path.strip())
    return frozenset(normalized)


class PurchasePayload(BaseModel):
    """Scalar fields of a purchase create/update request."""

    name: str = Field(..., min_length=1, max_length=255)
    duplex_number: int = Field(..., gt=0)
    type: str = Field(..., min_length=1, max_length=100)
    purchase_date: date
    price: Decimal = Field(..., ge=0, max_digits=12, decimal_places=2)
    notes: str | None = None

    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    @field_validator("purchase_date", mode="before")
    @classmethod
    def purchase_day(cls, value: Any) -> Any:
        return coerce_day(value)


class WorkPaymentPayload(BaseModel):
    """Scalar fields of a work payment create/update request."""

    project_id: int = Field(..., gt=0, validation_alias=AliasChoices("project_id", "projectId"))
    amount: Decimal = Field(..., ge=0, max_digits=12, decimal_places=2)
    date: dt.date
    notes: str | None = None
    duplex_number: int = Field(..., gt=0)
    created_by: str | None = None

    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    @field_validator("date", mode="before")
    @classmethod
    def payment_day(cls, value: Any) -> Any:
        return coerce_day(value)


class WorkProjectPayload(BaseModel):
    """Work project creation request."""

    name: str = Field(..., min_length=1, max_length=200)
    total_price: Decimal = Field(
        ..., ge=0, max_digits=12, decimal_places=2,
        validation_alias=AliasChoices("total_price", "totalPrice"),
    )
    duration: int = Field(default=0, ge=0)
    start_date: date = Field(..., validation_alias=AliasChoices("start_date", "startDate"))
    notes: str | None = None
    duplex_number: int = Field(..., gt=0)
    created_by: str | None = None

    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    @field_validator("start_date", mode="before")
    @classmethod
    def start_day(cls, value: Any) -> Any:
        return coerce_day(value)


class PurchaseTypePayload(BaseModel):
    """Purchase type creation request: English and Arabic labels."""

    name: str = Field(..., min_length=1, max_length=100)
    name_ar: str = Field(..., min_length=1, max_length=100)

    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")


class PurchaseResponse(BaseModel):
    """Purchase with its attachment paths."""

    id: int
    name: str
    duplex_number: int
    type: str
    purchase_date: date
    price: float
    notes: str | None = None
    created_by: str
    created_at: datetime
    attachment_paths: list[str]

    model_config = ConfigDict(from_attributes=True)


class WorkPaymentResponse(BaseModel):
    """Work payment with project name and attachment paths."""

    id: int
    project_id: int
    project_name: str | None = None
    amount: float
    date: dt.date
    notes: str | None = None
    duplex_number: int
    created_by: str | None = None
    created_at: datetime
    updated_at: datetime
    attachment_paths: list[str]

    model_config = ConfigDict(from_attributes=True)


class WorkProjectResponse(BaseModel):
    """Work project without its payments."""

    id: int
    name: str
    total_price: float
    duration: int
    start_date: date
    notes: str | None = None
    duplex_number: int
    created_by: str | None = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PurchaseTypeResponse(BaseModel):
    """Custom purchase type."""

    id: int
    name: str
    name_ar: str
    type_key: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
