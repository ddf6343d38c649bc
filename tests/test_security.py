from datetime import datetime, timedelta, timezone

import jwt
import pytest

from myflix_api.auth.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)


SECRET = "unit-test-secret-at-least-32-bytes-long"


def test_hash_is_salted_and_verifies():
    h1 = hash_password("secretpw")
    h2 = hash_password("secretpw")

    assert h1 != "secretpw"
    assert h1 != h2
    assert verify_password("secretpw", h1)
    assert verify_password("secretpw", h2)
    assert not verify_password("wrongpass", h1)


def test_verify_rejects_blank_and_unknown_hashes():
    assert not verify_password("", hash_password("secretpw"))
    assert not verify_password("secretpw", "")
    # A legacy plaintext value is not a recognizable hash.
    assert not verify_password("secretpw", "secretpw")


def test_verify_rejects_imported_bcrypt_hash():
    imported = "$2b$10$N9qo8uLOickgx2ZMRZoMyeIjZAgcfl7p92ldGxad68LJZdL17lhWy"
    assert not verify_password("secretpw", imported)


def test_hash_rejects_blank_password():
    with pytest.raises(ValueError):
        hash_password("")


def test_token_carries_subject_and_seven_day_expiry():
    now = datetime.now(timezone.utc).replace(microsecond=0)
    token = create_access_token(secret=SECRET, username="alice123", expires_minutes=10080, now=now)

    payload = decode_access_token(token=token, secret=SECRET)
    assert payload["sub"] == "alice123"
    assert payload["iat"] == int(now.timestamp())
    assert payload["exp"] - payload["iat"] == 7 * 24 * 3600


def test_expired_token_is_rejected():
    issued = datetime.now(timezone.utc) - timedelta(days=8)
    token = create_access_token(secret=SECRET, username="alice123", expires_minutes=10080, now=issued)

    with pytest.raises(jwt.ExpiredSignatureError):
        decode_access_token(token=token, secret=SECRET)


def test_token_signed_with_other_secret_is_rejected():
    token = create_access_token(secret="another-secret-of-thirty-two-bytes!", username="alice123", expires_minutes=60)

    with pytest.raises(jwt.InvalidSignatureError):
        decode_access_token(token=token, secret=SECRET)


def test_token_requires_secret():
    with pytest.raises(ValueError):
        create_access_token(secret="", username="alice123", expires_minutes=60)
