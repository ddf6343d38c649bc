import pytest

from myflix_api.config import Config

from .helpers import SECRET, auth_headers, register


@pytest.fixture()
def cfg() -> Config:
    return Config(AUTH_JWT_SECRET=SECRET, REQUEST_LOG=False, FAVORITES_UNIQUE=True)


def test_adding_twice_keeps_one_entry(client):
    register(client)
    headers = auth_headers(client)

    client.post("/users/alice123/movies/64abc", headers=headers)
    res = client.post("/users/alice123/movies/64abc", headers=headers)
    assert res.status_code == 200
    assert res.json()["FavoriteMovies"] == ["64abc"]


def test_other_ids_still_append_in_order(client):
    register(client)
    headers = auth_headers(client)

    for movie_id in ("64abc", "64def", "64abc"):
        client.post(f"/users/alice123/movies/{movie_id}", headers=headers)

    res = client.get("/users/alice123", headers=headers)
    assert res.json()["FavoriteMovies"] == ["64abc", "64def"]
