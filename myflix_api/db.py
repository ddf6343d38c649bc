from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from pymongo import ASCENDING, MongoClient
from pymongo.database import Database
from pymongo.errors import PyMongoError

from myflix_api.config import Config
from myflix_api.errors import StoreError


USERS = "users"
MOVIES = "movies"


def _debug(msg: str) -> None:
    print(f"[db] {msg}")


def _redact(uri: str) -> str:
    """Hide the password part of a mongodb:// URI for log output."""
    s = (uri or "").strip()
    if "@" not in s or "://" not in s:
        return s
    scheme, rest = s.split("://", 1)
    creds, host = rest.rsplit("@", 1)
    user = creds.split(":", 1)[0]
    return f"{scheme}://{user}:***@{host}"


def create_client(cfg: Config) -> MongoClient:
    """Create the process-wide client.

    MongoClient is thread safe and pools connections, so one instance serves every
    request handler. Every operation is bounded by MONGO_TIMEOUT_MS.
    """
    timeout_ms = max(1, int(cfg.MONGO_TIMEOUT_MS))
    return MongoClient(
        cfg.MONGO_URI,
        serverSelectionTimeoutMS=timeout_ms,
        connectTimeoutMS=timeout_ms,
        socketTimeoutMS=timeout_ms,
        tz_aware=True,
    )


@contextmanager
def connect(cfg: Config) -> Iterator[Database]:
    """Short-lived connection for scripts. The API keeps one client on app.state."""
    client = create_client(cfg)
    try:
        yield client[cfg.MONGO_DB_NAME]
    finally:
        client.close()


def init_db(db: Database) -> None:
    """Create indexes. Safe to run repeatedly."""
    _debug(f"Ensuring indexes on database {db.name}")
    # Username is the identity key for login and every /users/<username> route.
    db[USERS].create_index([("Username", ASCENDING)], unique=True, name="uniq_username")
    db[MOVIES].create_index([("Title", ASCENDING)], name="movie_title")
    db[MOVIES].create_index([("Genre.Name", ASCENDING)], name="movie_genre_name")
    db[MOVIES].create_index([("Director.Name", ASCENDING)], name="movie_director_name")


def describe(cfg: Config) -> str:
    return f"{_redact(cfg.MONGO_URI)}/{cfg.MONGO_DB_NAME}"

@contextmanager
def store_call(op: str) -> Iterator[None]:
    """Turn driver failures into StoreError. No retries: the request fails."""
    try:
        yield
    except PyMongoError as e:
        _debug(f"{op} failed: {e}")
        raise StoreError(str(e)) from e
