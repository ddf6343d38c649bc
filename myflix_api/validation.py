"""Field validation for registration and profile updates.

Errors are collected (not raised one at a time) so the client gets the full list in
a single 422 response. Each entry looks like:

    {"location": "body", "param": "Username", "value": "ab", "msg": "Username is required"}
"""

from __future__ import annotations

import re
from datetime import date
from typing import Any, Dict, List, Optional

from pydantic import EmailStr, TypeAdapter, ValidationError

from myflix_api.errors import ValidationFailed
from myflix_api.models import UserPayload


USERNAME_MIN_LENGTH = 5
PASSWORD_MIN_LENGTH = 8

_ALNUM = re.compile(r"^[A-Za-z0-9]+$")
_email = TypeAdapter(EmailStr)


def _err(param: str, value: Any, msg: str) -> Dict[str, Any]:
    return {"location": "body", "param": param, "value": value, "msg": msg}


def is_valid_email(value: Optional[str]) -> bool:
    if not value:
        return False
    try:
        _email.validate_python(value)
    except ValidationError:
        return False
    return True


def normalize_birthday(value: Optional[str]) -> Optional[str]:
    """Return YYYY-MM-DD, or None when blank.

    Accepts a plain ISO date or a full ISO timestamp (browsers send the latter).
    Raises ValueError on anything else.
    """
    s = (value or "").strip()
    if not s:
        return None
    return date.fromisoformat(s[:10]).isoformat()


def validate_user_fields(payload: UserPayload) -> List[Dict[str, Any]]:
    errors: List[Dict[str, Any]] = []

    username = payload.Username or ""
    if len(username) < USERNAME_MIN_LENGTH:
        errors.append(_err("Username", payload.Username, "Username is required"))
    if not _ALNUM.match(username):
        errors.append(
            _err(
                "Username",
                payload.Username,
                "Username can only contain letters and numbers - no special characters allowed.",
            )
        )

    password = payload.Password or ""
    if not password:
        errors.append(_err("Password", payload.Password, "Password is required"))
    if len(password) < PASSWORD_MIN_LENGTH:
        errors.append(
            _err("Password", payload.Password, f"Password must be at least {PASSWORD_MIN_LENGTH} characters long")
        )

    if not is_valid_email(payload.Email):
        errors.append(_err("Email", payload.Email, "Valid email is required"))

    if payload.Birthday:
        try:
            normalize_birthday(payload.Birthday)
        except ValueError:
            errors.append(_err("Birthday", payload.Birthday, "Birthday must be a valid date"))

    return errors


def require_valid_user_fields(payload: UserPayload) -> None:
    errors = validate_user_fields(payload)
    if errors:
        raise ValidationFailed(errors)
