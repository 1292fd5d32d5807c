import uuid

import jwt
import pytest

from flowaborate.core.config import settings
from flowaborate.core.security import (
    create_access_token,
    decode_access_token,
    generate_invite_token,
    verify_secret,
)


def test_verify_secret():
    assert verify_secret("abc", "abc") is True
    assert verify_secret("abc", "def") is False
    assert verify_secret(None, "abc") is False
    assert verify_secret("abc", None) is False
    assert verify_secret("", "abc") is False
    assert verify_secret("", "") is False


def test_access_token_round_trip():
    user_id = uuid.uuid4()
    payload = decode_access_token(create_access_token(user_id))
    assert payload["sub"] == str(user_id)


def test_previous_secret_still_accepted(monkeypatch):
    user_id = uuid.uuid4()
    old_token = create_access_token(user_id)

    monkeypatch.setattr(settings, "JWT_SECRET_PREVIOUS", settings.JWT_SECRET)
    monkeypatch.setattr(settings, "JWT_SECRET", "rotated-secret")

    assert decode_access_token(old_token)["sub"] == str(user_id)


def test_unknown_secret_rejected(monkeypatch):
    token = create_access_token(uuid.uuid4())
    monkeypatch.setattr(settings, "JWT_SECRET", "rotated-secret")

    with pytest.raises(jwt.InvalidTokenError):
        decode_access_token(token)


def test_expired_token_rejected():
    token = create_access_token(uuid.uuid4(), expires_hours=-1)
    with pytest.raises(jwt.ExpiredSignatureError):
        decode_access_token(token)


def test_invite_tokens_are_unique_and_url_safe():
    tokens = {generate_invite_token() for _ in range(50)}
    assert len(tokens) == 50
    assert all("/" not in t and "+" not in t for t in tokens)
