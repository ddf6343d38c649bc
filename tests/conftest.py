from typing import Any, Iterator

import mongomock
import pytest
from fastapi.testclient import TestClient

from myflix_api.api.server import app
from myflix_api.auth.deps import get_db
from myflix_api.config import Config
from myflix_api.db import MOVIES, init_db

from .helpers import SECRET


@pytest.fixture()
def cfg() -> Config:
    return Config(AUTH_JWT_SECRET=SECRET, REQUEST_LOG=False)


@pytest.fixture()
def db() -> Any:
    # mongomock stands in for a live MongoDB server.
    database = mongomock.MongoClient()["myflix_test"]
    init_db(database)
    return database


def make_client(db: Any, cfg: Config) -> TestClient:
    # No `with` block: startup would try to reach a real MongoDB.
    app.dependency_overrides[get_db] = lambda: db
    app.state.cfg = cfg
    return TestClient(app)


@pytest.fixture()
def client(db: Any, cfg: Config) -> Iterator[TestClient]:
    prev = app.state.cfg
    try:
        yield make_client(db, cfg)
    finally:
        app.dependency_overrides.clear()
        app.state.cfg = prev


@pytest.fixture()
def seeded_movies(db: Any) -> None:
    db[MOVIES].insert_many(
        [
            {
                "Title": "Inception",
                "Description": "A thief who steals secrets through dreams.",
                "Genre": {"Name": "Science Fiction", "Description": "Speculative futures."},
                "Director": {"Name": "Christopher Nolan", "Bio": "British-American filmmaker.", "BirthYear": 1970},
                "Year": 2010,
                "Rating": 8.8,
                "Actors": ["Leonardo DiCaprio", "Elliot Page"],
                "ImagePath": "inception.png",
                "Featured": True,
            },
            {
                "Title": "Amelie",
                "Description": "A shy waitress decides to change lives.",
                "Genre": {"Name": "Comedy", "Description": "Made to amuse."},
                "Director": {"Name": "Jean-Pierre Jeunet", "Bio": "French director.", "BirthYear": 1953},
                "Year": 2001,
                "Rating": 8.3,
                "Actors": ["Audrey Tautou"],
                "ImagePath": "amelie.png",
                "Featured": False,
            },
        ]
    )
