import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

# Values already exported in the environment take precedence over .env.
load_dotenv()


_TRUTHY = frozenset({"1", "true", "yes", "y", "on"})
_FALSY = frozenset({"0", "false", "no", "n", "off"})


def _env_bool(name: str, default: Optional[bool] = None) -> Optional[bool]:
    """Read a flag such as FAVORITES_UNIQUE=1; anything unrecognized falls back to `default`."""
    raw = (os.environ.get(name) or "").strip().lower()
    if raw in _TRUTHY:
        return True
    if raw in _FALSY:
        return False
    return default


@dataclass(frozen=True)
class Config:
    """Settings for the API process and the scripts.

    Defaults are read from the environment once, at import. Set AUTH_JWT_SECRET and
    MYFLIX_MONGO_URI for any deployment; tests pass explicit values instead.
    """

    # -----------------
    # Database (MongoDB)
    # -----------------
    # CONNECTION_URI is the name the original Heroku deployment used.
    MONGO_URI: str = (
        os.environ.get("MYFLIX_MONGO_URI")
        or os.environ.get("CONNECTION_URI")
        or "mongodb://localhost:27017"
    )
    MONGO_DB_NAME: str = os.environ.get("MYFLIX_DB_NAME", "myFlixDB")

    # Upper bound for server selection / connect / socket I/O on every store call.
    MONGO_TIMEOUT_MS: int = int(os.environ.get("MONGO_TIMEOUT_MS", "5000"))

    # -----------------
    # Auth (JWT)
    # -----------------
    # NOTE: In dev, this defaults to a fixed string so you can get started.
    # In production, you MUST set AUTH_JWT_SECRET to a strong random value.
    AUTH_JWT_SECRET: str = os.environ.get("AUTH_JWT_SECRET", "dev_change_me")
    AUTH_TOKEN_EXPIRE_MINUTES: int = int(os.environ.get("AUTH_TOKEN_EXPIRE_MINUTES", "10080"))  # 7 days

    # -----------------
    # Favorites
    # -----------------
    # Off: adding the same movie twice stores it twice ($push).
    # On: favorites behave like a set ($addToSet).
    FAVORITES_UNIQUE: bool = _env_bool("FAVORITES_UNIQUE", False) is True

    # -----------------
    # HTTP
    # -----------------
    # Comma-separated list; "*" allows any origin (the original API was fully open).
    CORS_ALLOW_ORIGINS: str = os.environ.get("CORS_ALLOW_ORIGINS", "*")

    # Directory holding documentation.html and other static files.
    PUBLIC_DIR: str = os.environ.get(
        "MYFLIX_PUBLIC_DIR",
        os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "public"),
    )

    # One access-log line per request.
    REQUEST_LOG: bool = _env_bool("REQUEST_LOG", True) is True


def load_config() -> Config:
    return Config()
