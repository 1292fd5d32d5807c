"""Security utilities for identity-provider access tokens and invite tokens."""

import secrets
from datetime import datetime, timedelta, timezone
from uuid import UUID

import jwt

from flowaborate.core.config import settings


# =============================================================================
# Access Token (JWT issued by the identity provider)
# =============================================================================

def create_access_token(user_id: UUID, expires_hours: int = 4) -> str:
    """
    Create signed access JWT.

    Production tokens come from the identity provider; this exists for
    local development and tests, signing with the current secret.
    """
    now = datetime.now(timezone.utc)
    payload: dict[str, object] = {
        "sub": str(user_id),
        "iat": now,
        "exp": now + timedelta(hours=expires_hours),
    }
    if settings.JWT_AUDIENCE:
        payload["aud"] = settings.JWT_AUDIENCE
    return jwt.encode(payload, settings.JWT_SECRET, algorithm="HS256")


def decode_access_token(token: str) -> dict:
    """
    Decode and verify access JWT.

    Tries current secret first, then previous (for rotation support).

    Raises:
        jwt.InvalidTokenError: If token invalid with all secrets
    """
    options = {"verify_aud": bool(settings.JWT_AUDIENCE)}
    audience = settings.JWT_AUDIENCE or None
    last_error = None
    for secret in settings.jwt_secrets:
        try:
            return jwt.decode(
                token, secret, algorithms=["HS256"], audience=audience, options=options
            )
        except jwt.InvalidTokenError as e:
            last_error = e
            continue
    raise last_error  # type: ignore


# =============================================================================
# Invite tokens
# =============================================================================

def generate_invite_token() -> str:
    """Generate an opaque, URL-safe invite token (32 bytes)."""
    return secrets.token_urlsafe(32)


def verify_secret(provided: str | None, expected: str | None) -> bool:
    """Constant-time comparison for shared secrets; empty expected never matches."""
    if not expected or not provided:
        return False
    return secrets.compare_digest(provided, expected)
