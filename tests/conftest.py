import pytest
from fastapi.testclient import TestClient

from storefront.config import Settings
from storefront.main import create_app

PASSWORD = "password123"


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'storefront.db'}",
        jwt_secret="test-secret",
        create_schema=True,
    )


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def test_client(app):
    with TestClient(app) as client:
        yield client


def register_and_login(client: TestClient, email: str, name: str = "Alice") -> dict:
    r = client.post("/api/users/register", json={"name": name, "email": email, "password": PASSWORD})
    assert r.status_code == 201, r.text
    r = client.post("/api/users/login", json={"email": email, "password": PASSWORD})
    assert r.status_code == 200, r.text
    return {"Authorization": f"Bearer {r.json()['access_token']}"}


@pytest.fixture
def auth_headers(test_client) -> dict:
    return register_and_login(test_client, "alice@example.com")


@pytest.fixture
def other_headers(test_client) -> dict:
    return register_and_login(test_client, "bob@example.com", name="Bob")


@pytest.fixture
def create_product(test_client, auth_headers):
    def _create(name="Coffee beans", price=10.5, stock=10, description=None) -> dict:
        payload = {"name": name, "price": price, "stock": stock}
        if description is not None:
            payload["description"] = description
        r = test_client.post("/api/products", json=payload, headers=auth_headers)
        assert r.status_code == 201, r.text
        return r.json()

    return _create
