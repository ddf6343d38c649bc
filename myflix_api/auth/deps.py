from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pymongo.database import Database

from myflix_api.config import Config

from .strategies import BearerStrategy


_bearer = HTTPBearer(auto_error=False)


def get_cfg(request: Request) -> Config:
    cfg = getattr(request.app.state, "cfg", None)
    if cfg is None:
        raise HTTPException(status_code=500, detail="server_config_missing")
    return cfg


def get_db(request: Request) -> Database:
    """The database handle opened at startup (tests override this dependency)."""
    db = getattr(request.app.state, "db", None)
    if db is None:
        raise HTTPException(status_code=500, detail="database_unavailable")
    return db


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer),
    cfg: Config = Depends(get_cfg),
    db: Database = Depends(get_db),
) -> Dict[str, Any]:
    """Route gate: resolve `Authorization: Bearer <jwt>` to a user.

    Raises `Unauthorized`; the app's handler turns it into a 401 with a
    `WWW-Authenticate: Bearer` challenge, so the route body never runs.
    """

    token = credentials.credentials if credentials is not None else ""
    return BearerStrategy(db, secret=cfg.AUTH_JWT_SECRET).authenticate(token)
