from typing import Any, Dict

from fastapi.testclient import TestClient


SECRET = "test-secret-for-the-api-suite-0123456789"


def register(
    client: TestClient,
    username: str = "alice123",
    password: str = "secretpw",
    email: str = "a@b.com",
) -> Any:
    return client.post("/users", json={"Username": username, "Password": password, "Email": email})


def login(client: TestClient, username: str = "alice123", password: str = "secretpw") -> Any:
    return client.post("/login", params={"Username": username, "Password": password})


def auth_headers(client: TestClient, username: str = "alice123", password: str = "secretpw") -> Dict[str, str]:
    res = login(client, username, password)
    assert res.status_code == 200, res.text
    return {"Authorization": f"Bearer {res.json()['token']}"}
