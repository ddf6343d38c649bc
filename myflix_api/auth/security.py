from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt
from passlib.context import CryptContext


# Stored in the user document's `Password` field; never the raw password.
_hasher = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")
_JWT_ALG = "HS256"


def hash_password(password: str) -> str:
    """Salted one-way hash. Two calls with the same input give different output."""
    if not password:
        raise ValueError("password_blank")
    return _hasher.hash(password)


def verify_password(password: str, stored: str) -> bool:
    """Check a login attempt against a user's stored `Password` value.

    Users imported from an older myFlix database may still carry a plaintext or
    bcrypt-era value that this context can't identify. Those never match; the
    account has to re-register or be reset through `PUT /users/{username}`.
    """
    if not password or not stored:
        return False
    try:
        return _hasher.verify(password, stored)
    except (ValueError, TypeError):
        return False


def create_access_token(
    *,
    secret: str,
    username: str,
    expires_minutes: int,
    now: Optional[datetime] = None,
) -> str:
    if not secret:
        raise ValueError("jwt_secret_blank")
    if not username:
        raise ValueError("username_blank")

    issued = now or datetime.now(timezone.utc)
    exp = issued + timedelta(minutes=max(1, int(expires_minutes)))

    payload: Dict[str, Any] = {
        "sub": username,
        "iat": int(issued.timestamp()),
        "exp": int(exp.timestamp()),
    }
    return jwt.encode(payload, secret, algorithm=_JWT_ALG)


def decode_access_token(*, token: str, secret: str) -> Dict[str, Any]:
    """Verify signature and expiry. Raises jwt.InvalidTokenError subclasses on failure."""
    if not token:
        raise ValueError("token_blank")
    if not secret:
        raise ValueError("jwt_secret_blank")
    return jwt.decode(token, secret, algorithms=[_JWT_ALG], options={"require": ["sub", "exp"]})
