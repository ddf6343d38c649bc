from __future__ import annotations

import os
import time
import traceback
from typing import Any, Dict, List, Optional

from fastapi import Depends, FastAPI, Form, Query, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse, PlainTextResponse
from fastapi.staticfiles import StaticFiles
from pymongo.database import Database
from pymongo.errors import PyMongoError

from myflix_api.config import Config, load_config
from myflix_api.db import create_client, describe, init_db
from myflix_api.errors import (
    AuthenticationFailed,
    Conflict,
    NotFound,
    StoreError,
    Unauthorized,
    ValidationFailed,
)
from myflix_api.models import UserPayload
from myflix_api.movies import (
    get_movie_by_director,
    get_movie_by_genre,
    get_movie_by_title,
    list_movies,
)
from myflix_api.validation import normalize_birthday, require_valid_user_fields

from myflix_api.auth import LocalStrategy, get_current_user
from myflix_api.auth.crud import (
    add_favorite,
    create_user,
    delete_user,
    get_user_by_username,
    list_users,
    remove_favorite,
    update_user,
)
from myflix_api.auth.deps import get_cfg, get_db
from myflix_api.auth.security import create_access_token


def _debug(msg: str) -> None:
    print(f"[api] {msg}")


app = FastAPI(title="myFlix API", version="0.1.0")
cfg: Config = load_config()
app.state.cfg = cfg

_cors_origins = [o.strip() for o in (cfg.CORS_ALLOW_ORIGINS or "").split(",") if o.strip()]
if _cors_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=_cors_origins,
        # Credentials can't be combined with a wildcard origin.
        allow_credentials="*" not in _cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )


@app.middleware("http")
async def _request_log(request: Request, call_next: Any) -> Any:
    started = time.perf_counter()
    response = await call_next(request)
    conf = getattr(request.app.state, "cfg", None)
    if conf is not None and conf.REQUEST_LOG:
        ms = (time.perf_counter() - started) * 1000.0
        client = request.client.host if request.client else "-"
        _debug(f'{client} "{request.method} {request.url.path}" {response.status_code} {ms:.1f}ms')
    return response


@app.on_event("startup")
def _on_startup() -> None:
    app.state.cfg = cfg

    client = create_client(cfg)
    app.state.mongo = client
    app.state.db = client[cfg.MONGO_DB_NAME]
    _debug(f"Using MongoDB at {describe(cfg)}")

    # A down database shouldn't keep the process from starting; requests will
    # surface store errors until it comes back.
    try:
        init_db(app.state.db)
    except PyMongoError as e:
        _debug(f"error connecting to MongoDB: {e}")


@app.on_event("shutdown")
def _on_shutdown() -> None:
    client = getattr(app.state, "mongo", None)
    if client is not None:
        client.close()


# -----------------------------
# Error mapping
# -----------------------------


@app.exception_handler(ValidationFailed)
def _validation_failed(request: Request, exc: ValidationFailed) -> JSONResponse:
    return JSONResponse(status_code=422, content={"errors": exc.errors})


@app.exception_handler(RequestValidationError)
def _request_invalid(request: Request, exc: RequestValidationError) -> JSONResponse:
    # Malformed bodies (not JSON, wrong types) get the same shape as field errors.
    errors: List[Dict[str, Any]] = []
    for e in exc.errors():
        loc = list(e.get("loc") or [])
        errors.append(
            {
                "location": str(loc[0]) if loc else "body",
                "param": str(loc[-1]) if len(loc) > 1 else "",
                "value": e.get("input"),
                "msg": str(e.get("msg") or "Invalid value"),
            }
        )
    return JSONResponse(status_code=422, content=jsonable_encoder({"errors": errors}))


@app.exception_handler(AuthenticationFailed)
def _authentication_failed(request: Request, exc: AuthenticationFailed) -> JSONResponse:
    return JSONResponse(status_code=400, content={"message": exc.detail, "user": False})


@app.exception_handler(Unauthorized)
def _unauthorized(request: Request, exc: Unauthorized) -> JSONResponse:
    return JSONResponse(
        status_code=401,
        content={"detail": exc.detail},
        headers={"WWW-Authenticate": "Bearer"},
    )


@app.exception_handler(Conflict)
def _conflict(request: Request, exc: Conflict) -> PlainTextResponse:
    return PlainTextResponse(exc.detail, status_code=400)


@app.exception_handler(NotFound)
def _not_found(request: Request, exc: NotFound) -> JSONResponse:
    return JSONResponse(status_code=404, content={"detail": exc.detail})


@app.exception_handler(StoreError)
def _store_error(request: Request, exc: StoreError) -> PlainTextResponse:
    return PlainTextResponse(f"Error: {exc.detail}", status_code=500)


@app.exception_handler(Exception)
def _unhandled(request: Request, exc: Exception) -> PlainTextResponse:
    _debug(f"Unhandled error on {request.method} {request.url.path}:\n{traceback.format_exc()}")
    return PlainTextResponse("Something went wrong!", status_code=500)


# -----------------------------
# Public
# -----------------------------


@app.get("/", response_class=PlainTextResponse)
def welcome() -> str:
    return "Welcome to myFlix Homepage"


@app.get("/health")
def health() -> Dict[str, Any]:
    return {"status": "ok"}


@app.get("/documentation")
def documentation(conf: Config = Depends(get_cfg)) -> FileResponse:
    path = os.path.join(conf.PUBLIC_DIR, "documentation.html")
    if not os.path.isfile(path):
        raise NotFound("documentation.html was not found")
    return FileResponse(path, media_type="text/html")


# -----------------------------
# Auth
# -----------------------------


@app.post("/login")
def login(
    username: Optional[str] = Query(default=None, alias="Username"),
    password: Optional[str] = Query(default=None, alias="Password"),
    form_username: Optional[str] = Form(default=None, alias="Username"),
    form_password: Optional[str] = Form(default=None, alias="Password"),
    conf: Config = Depends(get_cfg),
    db: Database = Depends(get_db),
) -> Dict[str, Any]:
    """Log in with `Username` / `Password` and receive a bearer token.

    Credentials come from a form-encoded body or the query string; body fields win
    when both are sent. A JSON body is not read.
    """
    user = LocalStrategy(db).authenticate(
        form_username or username or "",
        form_password or password or "",
    )
    token = create_access_token(
        secret=conf.AUTH_JWT_SECRET,
        username=str(user["Username"]),
        expires_minutes=int(conf.AUTH_TOKEN_EXPIRE_MINUTES),
    )
    return {"user": user, "token": token}


@app.post("/users", status_code=201)
def register_user(
    payload: Optional[UserPayload] = None,
    db: Database = Depends(get_db),
) -> Dict[str, Any]:
    """Create an account. Field errors → 422, taken username → 400."""
    body = payload or UserPayload()
    require_valid_user_fields(body)

    u = create_user(
        db,
        username=str(body.Username),
        password=str(body.Password),
        email=str(body.Email),
        birthday=normalize_birthday(body.Birthday),
    )
    _debug(f"Registered user {u['Username']}")
    return u


# -----------------------------
# Movies (protected)
# -----------------------------


@app.get("/movies")
def movies_all(
    _user: Dict[str, Any] = Depends(get_current_user),
    db: Database = Depends(get_db),
) -> List[Dict[str, Any]]:
    return list_movies(db)


@app.get("/movies/genre/{name}")
def movie_by_genre(
    name: str,
    _user: Dict[str, Any] = Depends(get_current_user),
    db: Database = Depends(get_db),
) -> Dict[str, Any]:
    return get_movie_by_genre(db, name)


@app.get("/movies/director/{name}")
def movie_by_director(
    name: str,
    _user: Dict[str, Any] = Depends(get_current_user),
    db: Database = Depends(get_db),
) -> Dict[str, Any]:
    return get_movie_by_director(db, name)


@app.get("/movies/{title}")
def movie_by_title(
    title: str,
    _user: Dict[str, Any] = Depends(get_current_user),
    db: Database = Depends(get_db),
) -> Dict[str, Any]:
    return get_movie_by_title(db, title)


# -----------------------------
# Users (protected)
# -----------------------------


@app.get("/users")
def users_all(
    _user: Dict[str, Any] = Depends(get_current_user),
    db: Database = Depends(get_db),
) -> List[Dict[str, Any]]:
    return list_users(db)


@app.get("/users/{username}")
def user_by_username(
    username: str,
    _user: Dict[str, Any] = Depends(get_current_user),
    db: Database = Depends(get_db),
) -> Dict[str, Any]:
    u = get_user_by_username(db, username)
    if u is None:
        raise NotFound(f"{username} was not found")
    return u


@app.put("/users/{username}")
def user_update(
    username: str,
    payload: Optional[UserPayload] = None,
    _user: Dict[str, Any] = Depends(get_current_user),
    db: Database = Depends(get_db),
) -> Dict[str, Any]:
    """Replace Username / Password / Email / Birthday. The password is re-hashed."""
    body = payload or UserPayload()
    require_valid_user_fields(body)

    return update_user(
        db,
        username,
        new_username=str(body.Username),
        password=str(body.Password),
        email=str(body.Email),
        birthday=normalize_birthday(body.Birthday),
    )


@app.post("/users/{username}/movies/{movie_id}")
def favorite_add(
    username: str,
    movie_id: str,
    _user: Dict[str, Any] = Depends(get_current_user),
    conf: Config = Depends(get_cfg),
    db: Database = Depends(get_db),
) -> Dict[str, Any]:
    return add_favorite(db, username, movie_id, unique=bool(conf.FAVORITES_UNIQUE))


@app.delete("/users/{username}/movies/{movie_id}")
def favorite_remove(
    username: str,
    movie_id: str,
    _user: Dict[str, Any] = Depends(get_current_user),
    db: Database = Depends(get_db),
) -> Dict[str, Any]:
    return remove_favorite(db, username, movie_id)


@app.delete("/users/{username}", response_class=PlainTextResponse)
def user_delete(
    username: str,
    _user: Dict[str, Any] = Depends(get_current_user),
    db: Database = Depends(get_db),
) -> str:
    delete_user(db, username)
    _debug(f"Deleted user {username}")
    return f"{username} was deleted."


# Static assets from PUBLIC_DIR live under /static so unmatched API paths keep
# the router's trailing-slash redirects and 404s.
if os.path.isdir(cfg.PUBLIC_DIR):
    app.mount("/static", StaticFiles(directory=cfg.PUBLIC_DIR, html=False), name="public")
