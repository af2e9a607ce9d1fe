from pathlib import Path

from alembic import command
from alembic.config import Config
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, inspect

from scripts.seed_demo import DEMO_PRODUCTS, seed

ROOT = Path(__file__).resolve().parent.parent


def test_root(test_client: TestClient):
    r = test_client.get("/")
    assert r.status_code == 200
    assert "running" in r.json()["message"]


def test_openapi_declares_bearer_scheme(test_client: TestClient):
    schema = test_client.get("/openapi.json").json()
    flows = schema["components"]["securitySchemes"]["OAuth2PasswordBearer"]["flows"]
    assert flows["password"]["tokenUrl"] == "/api/users/login"


def test_unknown_route_uses_message_body(test_client: TestClient):
    r = test_client.get("/api/nowhere")
    assert r.status_code == 404
    assert r.json() == {"message": "Not Found"}


def test_seed_demo_data(test_client: TestClient):
    result = seed(test_client)
    assert len(result["product_ids"]) == len(DEMO_PRODUCTS)

    names = {p["name"] for p in test_client.get("/api/products").json()}
    assert names == {p["name"] for p in DEMO_PRODUCTS}

    # second run logs the existing user in instead of failing
    again = seed(test_client)
    assert again["token"]

    headers = {"Authorization": f"Bearer {again['token']}"}
    r = test_client.post("/api/cart/add", json={"productId": result["product_ids"][0], "quantity": 1}, headers=headers)
    assert r.status_code == 200


def test_migrations_upgrade_and_downgrade(tmp_path, monkeypatch):
    db_path = tmp_path / "migrated.db"
    monkeypatch.setenv("DATABASE_URL", f"sqlite+aiosqlite:///{db_path}")
    cfg = Config(str(ROOT / "alembic.ini"))

    command.upgrade(cfg, "head")

    engine = create_engine(f"sqlite:///{db_path}")
    try:
        inspector = inspect(engine)
        assert {"users", "products", "carts"} <= set(inspector.get_table_names())
        cart_indexes = {ix["name"]: ix for ix in inspector.get_indexes("carts")}
        assert cart_indexes["ix_carts_user_id"]["unique"]
        assert {c["name"] for c in inspector.get_columns("products")} == {
            "id", "name", "description", "price", "stock",
        }

        command.downgrade(cfg, "base")
        assert set(inspect(engine).get_table_names()) <= {"alembic_version"}
    finally:
        engine.dispose()
