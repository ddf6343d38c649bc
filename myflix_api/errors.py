"""
Exception classes shared by the store helpers, auth strategies and route handlers.

Each error carries the HTTP status it maps to; the API registers one exception
handler per class (see `myflix_api.api.server`).
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional


class MyFlixError(Exception):
    """Base class for all application errors."""

    status_code = 500
    default_detail = "Something went wrong!"

    def __init__(self, detail: Optional[str] = None):
        self.detail = detail if detail is not None else self.default_detail
        super().__init__(self.detail)

    def __str__(self) -> str:
        return f"[{self.status_code}] {self.detail}"


class ValidationFailed(MyFlixError):
    """One or more request fields failed validation."""

    status_code = 422
    default_detail = "validation_failed"

    def __init__(self, errors: List[Dict[str, Any]]):
        self.errors = list(errors)
        super().__init__(self.default_detail)


class AuthenticationFailed(MyFlixError):
    # Same message for unknown usernames and wrong passwords.
    status_code = 400
    default_detail = "Something is not right"


class Unauthorized(MyFlixError):
    status_code = 401
    default_detail = "Unauthorized"


class Conflict(MyFlixError):
    status_code = 400
    default_detail = "already_exists"


class NotFound(MyFlixError):
    status_code = 404
    default_detail = "not_found"


class StoreError(MyFlixError):
    """A database operation failed. The raw driver message is kept in `detail`."""

    status_code = 500
