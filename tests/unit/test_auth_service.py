"""Unit tests for duplex_tracker.services.auth_service token handling."""

from urllib.parse import parse_qsl, urlencode

import pytest

from duplex_tracker.models.user import UserRole
from duplex_tracker.services.auth_service import (
    Principal,
    extract_bearer_token,
    require_admin,
    sign_token,
    verify_token,
)
from duplex_tracker.services.errors import PermissionDeniedError

NOW = 1_700_000_000


def test_signed_token_verifies():
    token = sign_token("mona@example.com", secret="s3cret", auth_date=NOW)

    assert verify_token(token, secret="s3cret", now=NOW + 60) == "mona@example.com"


def test_wrong_secret_rejected():
    token = sign_token("mona@example.com", secret="s3cret", auth_date=NOW)

    assert verify_token(token, secret="other", now=NOW) is None


def test_tampered_email_rejected():
    data = dict(parse_qsl(sign_token("mona@example.com", secret="s3cret", auth_date=NOW)))
    data["email"] = "admin@example.com"

    assert verify_token(urlencode(data), secret="s3cret", now=NOW) is None


def test_expired_token_rejected():
    token = sign_token("mona@example.com", secret="s3cret", auth_date=NOW)

    assert verify_token(token, secret="s3cret", max_age_seconds=3600, now=NOW + 3601) is None


def test_missing_hash_rejected():
    assert verify_token(urlencode({"email": "a@b.c", "auth_date": NOW}), secret="s3cret") is None


def test_garbage_token_rejected():
    assert verify_token("not-a-token", secret="s3cret") is None


def test_non_numeric_auth_date_rejected():
    data = {"email": "mona@example.com", "auth_date": "yesterday"}
    token = sign_token("mona@example.com", secret="s3cret", auth_date=NOW)
    signed = dict(parse_qsl(token))
    data["hash"] = signed["hash"]

    assert verify_token(urlencode(data), secret="s3cret", now=NOW) is None


@pytest.mark.parametrize(
    "header,expected",
    [
        ("Bearer abc", "abc"),
        ("bearer   abc  ", "abc"),
        ("Basic abc", None),
        ("Bearer", None),
        ("", None),
        (None, None),
    ],
)
def test_extract_bearer_token(header, expected):
    assert extract_bearer_token(header) == expected


def test_require_admin():
    admin = Principal(id=1, email="a@example.com", display_name="A", role=UserRole.ADMIN)
    user = Principal(id=2, email="u@example.com", display_name="U", role=UserRole.USER)

    assert require_admin(admin) is admin
    with pytest.raises(PermissionDeniedError):
        require_admin(user)
