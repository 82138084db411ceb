"""Unit tests for payload validation and ledger errors."""

from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from duplex_tracker.schemas.ledger import (
    PurchasePayload,
    WorkPaymentPayload,
    WorkProjectPayload,
    coerce_day,
    normalize_attachment_paths,
    validate_payload,
)
from duplex_tracker.services.errors import (
    DependencyError,
    DuplicateRecordError,
    NotFoundError,
    TransactionError,
    ValidationError,
)


def purchase_body(**overrides):
    body = {
        "name": "Paint",
        "duplex_number": 3,
        "type": "materials",
        "purchase_date": "2024-03-05",
        "price": "120.50",
    }
    body.update(overrides)
    return body


class TestValidatePayload:
    """Test conversion of raw bodies into payload models."""

    def test_valid_purchase(self):
        data = validate_payload(PurchasePayload, purchase_body(notes="two buckets"))

        assert data.name == "Paint"
        assert data.purchase_date == date(2024, 3, 5)
        assert data.price == Decimal("120.50")
        assert data.notes == "two buckets"

    def test_missing_fields_reported_per_field(self):
        with pytest.raises(ValidationError) as exc:
            validate_payload(PurchasePayload, {"name": "Paint"})

        assert exc.value.message == "Required fields are missing or invalid"
        assert {"duplex_number", "type", "purchase_date", "price"} <= set(exc.value.fields)

    def test_none_payload(self):
        with pytest.raises(ValidationError):
            validate_payload(PurchasePayload, None)

    def test_negative_price_rejected(self):
        with pytest.raises(ValidationError) as exc:
            validate_payload(PurchasePayload, purchase_body(price="-1"))
        assert "price" in exc.value.fields

    def test_zero_duplex_rejected(self):
        with pytest.raises(ValidationError) as exc:
            validate_payload(PurchasePayload, purchase_body(duplex_number=0))
        assert "duplex_number" in exc.value.fields

    def test_blank_name_rejected(self):
        with pytest.raises(ValidationError):
            validate_payload(PurchasePayload, purchase_body(name="   "))

    def test_datetime_string_reduced_to_day(self):
        data = validate_payload(PurchasePayload, purchase_body(purchase_date="2024-03-05T21:45:00Z"))
        assert data.purchase_date == date(2024, 3, 5)

    def test_model_instance_passes_through(self):
        payload = PurchasePayload(**purchase_body())
        assert validate_payload(PurchasePayload, payload) is payload

    def test_work_payment_accepts_camel_case_project_id(self):
        data = validate_payload(
            WorkPaymentPayload,
            {"projectId": 7, "amount": 500, "date": "2024-03-01", "duplex_number": 2},
        )
        assert data.project_id == 7
        assert data.created_by is None

    def test_work_project_defaults_duration(self):
        data = validate_payload(
            WorkProjectPayload,
            {"name": "Tiling", "totalPrice": 9000, "startDate": "2024-02-01", "duplex_number": 4},
        )
        assert data.duration == 0
        assert data.total_price == Decimal("9000")


class TestCoerceDay:
    def test_datetime(self):
        assert coerce_day(datetime(2024, 1, 2, 23, 59, tzinfo=timezone.utc)) == date(2024, 1, 2)

    def test_plain_date_string_untouched(self):
        assert coerce_day("2024-01-02") == "2024-01-02"

    def test_unparseable_string_left_for_validation(self):
        assert coerce_day("not a date at all") == "not a date at all"


class TestNormalizeAttachmentPaths:
    """Test attachment list normalization."""

    def test_none_is_empty(self):
        assert normalize_attachment_paths(None) == frozenset()

    def test_strips_and_deduplicates(self):
        assert normalize_attachment_paths([" a.jpg", "a.jpg", "b.pdf"]) == {"a.jpg", "b.pdf"}

    def test_bare_string_rejected(self):
        with pytest.raises(ValidationError):
            normalize_attachment_paths("a.jpg")

    def test_empty_entry_rejected(self):
        with pytest.raises(ValidationError) as exc:
            normalize_attachment_paths(["a.jpg", ""])
        assert "attachment_paths.1" in exc.value.fields

    def test_non_string_entry_rejected(self):
        with pytest.raises(ValidationError):
            normalize_attachment_paths(["a.jpg", 42])


class TestLedgerErrors:
    """Test error codes and failure envelopes."""

    def test_validation_error_envelope(self):
        error = ValidationError("bad", fields={"price": "required"})

        assert error.http_status == 400
        assert error.to_dict() == {
            "success": False,
            "message": "bad",
            "code": "validation_error",
            "fields": {"price": "required"},
        }

    @pytest.mark.parametrize(
        "error_cls,code,http_status",
        [
            (DuplicateRecordError, "duplicate_record", 409),
            (NotFoundError, "not_found", 404),
            (TransactionError, "transaction_error", 500),
            (DependencyError, "dependency_error", 503),
        ],
    )
    def test_codes(self, error_cls, code, http_status):
        error = error_cls("message")

        assert error.code == code
        assert error.http_status == http_status
        assert error.to_dict()["success"] is False
