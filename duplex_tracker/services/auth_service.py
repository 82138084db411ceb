"""Bearer token verification and principal resolution.

Tokens are URL-encoded ``email=...&auth_date=...&hash=...`` strings. The
hash is an HMAC-SHA256 over the sorted ``key=value`` lines of the other
fields, keyed with a secret derived from ``AUTH_SECRET``.
"""

import hashlib
import hmac
import logging
import time
from dataclasses import dataclass
from urllib.parse import parse_qsl, urlencode

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from duplex_tracker.config import settings
from duplex_tracker.models.user import User, UserRole
from duplex_tracker.services.errors import AuthenticationError, PermissionDeniedError, store_errors

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Principal:
    """Authenticated identity every ledger write is attributed to."""

    id: int
    email: str
    display_name: str
    role: UserRole

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    @classmethod
    def from_user(cls, user: User) -> "Principal":
        return cls(id=user.id, email=user.email, display_name=user.full_name, role=user.role)


def _data_check_string(data: dict[str, str]) -> str:
    return "\n".join(f"{k}={v}" for k, v in sorted(data.items()))


def _signature(data: dict[str, str], secret: str) -> str:
    secret_key = hmac.new(key=b"DuplexTracker", msg=secret.encode(), digestmod=hashlib.sha256).digest()
    return hmac.new(
        key=secret_key, msg=_data_check_string(data).encode(), digestmod=hashlib.sha256
    ).hexdigest()


def sign_token(email: str, secret: str | None = None, auth_date: int | None = None) -> str:
    """Issue a token for ``email`` signed with ``secret`` (default: settings)."""
    data = {
        "email": email,
        "auth_date": str(int(auth_date if auth_date is not None else time.time())),
    }
    data["hash"] = _signature(data, secret or settings.auth_secret)
    return urlencode(data)


def verify_token(
    token: str,
    secret: str | None = None,
    max_age_seconds: int | None = None,
    now: float | None = None,
) -> str | None:
    """
    Verify a token's signature and age.

    Args:
        token: Raw token string
        secret: Signing secret (default: settings.auth_secret)
        max_age_seconds: Maximum auth_date age (default: settings value)
        now: Current unix time, for tests

    Returns:
        The email the token was issued for, or None if invalid or expired
    """
    data = dict(parse_qsl(token))
    received_hash = data.pop("hash", None)
    if not received_hash or "email" not in data or "auth_date" not in data:
        return None

    expected_hash = _signature(data, secret or settings.auth_secret)
    if not hmac.compare_digest(expected_hash, received_hash):
        return None

    try:
        auth_date = int(data["auth_date"])
    except ValueError:
        return None

    max_age = max_age_seconds if max_age_seconds is not None else settings.auth_token_max_age_seconds
    current = now if now is not None else time.time()
    if current - auth_date > max_age:
        return None

    return data["email"]


def extract_bearer_token(authorization: str | None) -> str | None:
    """Return the token part of an ``Authorization: Bearer <token>`` header."""
    if not authorization:
        return None
    scheme, _, token = authorization.strip().partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


async def get_principal_for_token(session: AsyncSession, token: str | None) -> Principal:
    """Resolve a bearer token to the principal of a registered user.

    Raises:
        AuthenticationError: token missing, invalid, expired, or user unknown
    """
    if not token:
        raise AuthenticationError("No token provided")

    email = verify_token(token)
    if email is None:
        logger.warning("Rejected invalid or expired token")
        raise AuthenticationError("Invalid token")

    with store_errors():
        result = await session.execute(select(User).where(User.email == email))
        user = result.scalar_one_or_none()

    if user is None:
        logger.warning("Token for unknown user: %s", email)
        raise AuthenticationError("User not found")

    return Principal.from_user(user)


def require_admin(principal: Principal) -> Principal:
    """Return ``principal`` if it holds the admin role.

    Raises:
        PermissionDeniedError: for non-admin principals
    """
    if not principal.is_admin:
        logger.warning("Non-admin attempted restricted access: user_id=%d", principal.id)
        raise PermissionDeniedError("Admin role required")
    return principal


__all__ = [
    "Principal",
    "sign_token",
    "verify_token",
    "extract_bearer_token",
    "get_principal_for_token",
    "require_admin",
]
