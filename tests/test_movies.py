import json

import pytest
from pydantic import ValidationError

from myflix_api.db import MOVIES
from myflix_api.errors import NotFound
from myflix_api.models import Movie
from myflix_api.movies import get_movie_by_genre, list_movies, load_movies_file, upsert_movies


CATALOG = [
    {
        "Title": "Inception",
        "Description": "A thief who steals secrets through dreams.",
        "Genre": {"Name": "Science Fiction", "Description": "Speculative futures."},
        "Director": {"Name": "Christopher Nolan", "Bio": "British-American filmmaker.", "BirthYear": 1970},
        "Year": 2010,
        "Actors": ["Leonardo DiCaprio"],
    },
    {"Title": "Amelie", "Description": "A shy waitress decides to change lives."},
]


def test_load_movies_file_applies_defaults(tmp_path):
    path = tmp_path / "movies.json"
    path.write_text(json.dumps(CATALOG), encoding="utf-8")

    movies = load_movies_file(path)
    assert [m.Title for m in movies] == ["Inception", "Amelie"]
    assert movies[1].Actors == []
    assert movies[1].Featured is False
    assert movies[0].Director.BirthYear == 1970


def test_load_movies_file_rejects_missing_description(tmp_path):
    path = tmp_path / "movies.json"
    path.write_text(json.dumps([{"Title": "Untitled"}]), encoding="utf-8")

    with pytest.raises(ValidationError):
        load_movies_file(path)


def test_upsert_movies_is_keyed_by_title(db, tmp_path):
    path = tmp_path / "movies.json"
    path.write_text(json.dumps(CATALOG), encoding="utf-8")
    movies = load_movies_file(path)

    assert upsert_movies(db, movies) == 2
    upsert_movies(db, movies)

    assert db[MOVIES].count_documents({}) == 2
    assert sorted(m["Title"] for m in list_movies(db)) == ["Amelie", "Inception"]
    assert get_movie_by_genre(db, "Science Fiction")["Title"] == "Inception"


def test_upsert_replaces_changed_movie(db):
    first = Movie(Title="Amelie", Description="Old blurb.")
    second = Movie(Title="Amelie", Description="A shy waitress decides to change lives.", Year=2001)

    upsert_movies(db, [first])
    assert upsert_movies(db, [second]) == 1

    doc = db[MOVIES].find_one({"Title": "Amelie"})
    assert doc["Description"] == "A shy waitress decides to change lives."
    assert doc["Year"] == 2001
    assert db[MOVIES].count_documents({}) == 1


def test_upsert_nothing(db):
    assert upsert_movies(db, []) == 0


def test_lookup_miss_raises_not_found(db):
    with pytest.raises(NotFound):
        get_movie_by_genre(db, "Western")
