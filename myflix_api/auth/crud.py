from __future__ import annotations

from typing import Any, Dict, List, Optional

from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError

from myflix_api.db import USERS, store_call
from myflix_api.errors import Conflict, NotFound
from myflix_api.models import serialize_doc, serialize_docs

from .security import hash_password, verify_password


def _users(db: Database) -> Any:
    return db[USERS]


def movie_ref(movie_id: str) -> Any:
    """Favorites hold ObjectIds when the id looks like one, otherwise the raw string.

    Add and remove both go through here, so a value pushed can always be pulled.
    """
    s = (movie_id or "").strip()
    if ObjectId.is_valid(s):
        return ObjectId(s)
    return s


def get_user_by_username(db: Database, username: str) -> Optional[Dict[str, Any]]:
    if not username:
        return None
    with store_call("users.find_one"):
        doc = _users(db).find_one({"Username": username})
    return serialize_doc(doc)


def list_users(db: Database) -> List[Dict[str, Any]]:
    with store_call("users.find"):
        return serialize_docs(_users(db).find())


def verify_user_credentials(db: Database, username: str, password: str) -> Optional[Dict[str, Any]]:
    user = get_user_by_username(db, username)
    if user is None:
        return None
    if not verify_password(password, str(user.get("Password") or "")):
        return None
    return user


def create_user(
    db: Database,
    *,
    username: str,
    password: str,
    email: str,
    birthday: str | None = None,
) -> Dict[str, Any]:
    existing = get_user_by_username(db, username)
    if existing is not None:
        raise Conflict(f"{username} already exists")

    doc: Dict[str, Any] = {
        "Username": username,
        "Password": hash_password(password),
        "Email": email,
        "Birthday": birthday,
        "FavoriteMovies": [],
    }
    with store_call("users.insert_one"):
        try:
            res = _users(db).insert_one(doc)
        except DuplicateKeyError:
            # Lost a race with a concurrent registration of the same name.
            raise Conflict(f"{username} already exists")
    doc["_id"] = res.inserted_id
    return serialize_doc(doc)


def update_user(
    db: Database,
    username: str,
    *,
    new_username: str,
    password: str,
    email: str,
    birthday: str | None = None,
) -> Dict[str, Any]:
    if new_username != username and get_user_by_username(db, new_username) is not None:
        raise Conflict(f"{new_username} already exists")

    update = {
        "$set": {
            "Username": new_username,
            "Password": hash_password(password),
            "Email": email,
            "Birthday": birthday,
        }
    }
    with store_call("users.find_one_and_update"):
        try:
            doc = _users(db).find_one_and_update(
                {"Username": username},
                update,
                return_document=ReturnDocument.AFTER,
            )
        except DuplicateKeyError:
            raise Conflict(f"{new_username} already exists")
    if doc is None:
        raise NotFound(f"{username} was not found")
    return serialize_doc(doc)


def add_favorite(db: Database, username: str, movie_id: str, *, unique: bool = False) -> Dict[str, Any]:
    op = "$addToSet" if unique else "$push"
    with store_call("users.add_favorite"):
        doc = _users(db).find_one_and_update(
            {"Username": username},
            {op: {"FavoriteMovies": movie_ref(movie_id)}},
            return_document=ReturnDocument.AFTER,
        )
    if doc is None:
        raise NotFound(f"{username} was not found")
    return serialize_doc(doc)


def remove_favorite(db: Database, username: str, movie_id: str) -> Dict[str, Any]:
    with store_call("users.remove_favorite"):
        doc = _users(db).find_one_and_update(
            {"Username": username},
            {"$pull": {"FavoriteMovies": movie_ref(movie_id)}},
            return_document=ReturnDocument.AFTER,
        )
    if doc is None:
        raise NotFound(f"{username} was not found")
    return serialize_doc(doc)


def delete_user(db: Database, username: str) -> Dict[str, Any]:
    with store_call("users.find_one_and_delete"):
        doc = _users(db).find_one_and_delete({"Username": username})
    if doc is None:
        raise NotFound(f"{username} was not found")
    return serialize_doc(doc)
