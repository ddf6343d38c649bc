from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Iterable, List

from pymongo.database import Database

from myflix_api.db import MOVIES, store_call
from myflix_api.errors import NotFound
from myflix_api.models import Movie, serialize_doc, serialize_docs


def _movies(db: Database) -> Any:
    return db[MOVIES]


def list_movies(db: Database) -> List[Dict[str, Any]]:
    with store_call("movies.find"):
        return serialize_docs(_movies(db).find())


def _find_one(db: Database, query: Dict[str, Any], what: str) -> Dict[str, Any]:
    with store_call("movies.find_one"):
        doc = _movies(db).find_one(query)
    if doc is None:
        raise NotFound(f"{what} was not found")
    return serialize_doc(doc)


def get_movie_by_title(db: Database, title: str) -> Dict[str, Any]:
    return _find_one(db, {"Title": title}, f"Movie '{title}'")


def get_movie_by_genre(db: Database, name: str) -> Dict[str, Any]:
    return _find_one(db, {"Genre.Name": name}, f"Genre '{name}'")


def get_movie_by_director(db: Database, name: str) -> Dict[str, Any]:
    return _find_one(db, {"Director.Name": name}, f"Director '{name}'")


def upsert_movies(db: Database, movies: Iterable[Movie]) -> int:
    """Insert or replace movies keyed by Title. Returns the number written.

    Movies have no HTTP write routes; this is for provisioning scripts.
    """
    written = 0
    coll = _movies(db)
    with store_call("movies.update_one"):
        for m in movies:
            res = coll.update_one({"Title": m.Title}, {"$set": m.model_dump()}, upsert=True)
            if res.upserted_id is not None or res.modified_count:
                written += 1
    return written


def load_movies_file(path: Path) -> List[Movie]:
    """Parse a JSON array of movie documents. Invalid entries raise pydantic's ValidationError."""
    raw = json.loads(path.read_text(encoding="utf-8"))
    if isinstance(raw, dict):
        raw = [raw]
    return [Movie.model_validate(item) for item in raw]
