"""Authentication / authorization helpers.

Auth is intentionally lightweight:

- Users collection (username + password hash)
- JWT access tokens (HS256, 7 days by default), never stored server side

Login uses the local (username/password) strategy once; every other protected
route runs the bearer strategy through the `get_current_user` dependency.
"""

from .deps import get_current_user
from .crud import create_user
from .strategies import BearerStrategy, LocalStrategy

__all__ = [
    "get_current_user",
    "create_user",
    "BearerStrategy",
    "LocalStrategy",
]
