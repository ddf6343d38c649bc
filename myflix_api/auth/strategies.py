"""The two ways a request can prove who it is.

- `LocalStrategy`: username + password, checked against the stored hash. Used once,
  by the login route.
- `BearerStrategy`: a JWT minted at login, checked on every protected route.

Routes pick a strategy explicitly; there is no lookup by name.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict

import jwt
from pymongo.database import Database

from myflix_api.errors import AuthenticationFailed, Unauthorized

from .crud import get_user_by_username, verify_user_credentials
from .security import decode_access_token


class AuthStrategy(ABC):
    def __init__(self, db: Database):
        self.db = db

    @abstractmethod
    def authenticate(self, *credentials: str) -> Dict[str, Any]:
        """Return the resolved user document or raise."""


class LocalStrategy(AuthStrategy):
    def authenticate(self, *credentials: str) -> Dict[str, Any]:
        username, password = (list(credentials) + ["", ""])[:2]
        if not username or not password:
            raise AuthenticationFailed()
        user = verify_user_credentials(self.db, username, password)
        if user is None:
            raise AuthenticationFailed()
        return user


class BearerStrategy(AuthStrategy):
    def __init__(self, db: Database, *, secret: str):
        super().__init__(db)
        self.secret = secret

    def authenticate(self, *credentials: str) -> Dict[str, Any]:
        token = credentials[0] if credentials else ""
        if not token:
            raise Unauthorized("missing_token")

        try:
            payload = decode_access_token(token=token, secret=self.secret)
        except jwt.ExpiredSignatureError:
            raise Unauthorized("token_expired")
        except jwt.InvalidTokenError:
            raise Unauthorized("token_invalid")

        sub = payload.get("sub")
        if not sub or not isinstance(sub, str):
            raise Unauthorized("token_missing_sub")

        # Tokens outlive accounts; a deleted user's token must not resolve.
        user = get_user_by_username(self.db, sub)
        if user is None:
            raise Unauthorized("user_not_found")
        return user
