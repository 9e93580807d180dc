"""Unit tests for the application factory."""
import sqlite3

from fastapi.testclient import TestClient

from bistro.core.config import Settings
from bistro.main import create_app


class TestCreateApp:
    """Test that the app is built from the settings it is given."""

    def test_uses_configured_database(self, tmp_path, test_menu_path, clean_auth_sessions):
        db_path = tmp_path / "bistro.db"
        app = create_app(Settings(
            admin_password="testpass123",
            database_url=f"sqlite+aiosqlite:///{db_path}",
            menu_backend="sql",
            menu_seed_file=str(test_menu_path),
        ))

        with TestClient(app) as client:
            data = client.get("/api/menu").json()
            client.post("/api/cart/items", json={"item_id": "b"})
            assert client.post("/api/cart/checkout").status_code == 201

        assert [item["id"] for item in data["items"]] == ["a", "b", "c", "d", "e"]
        assert db_path.exists()

        conn = sqlite3.connect(db_path)
        try:
            tables = {row[0] for row in conn.execute("SELECT name FROM sqlite_master WHERE type='table'")}
            orders = conn.execute("SELECT COUNT(*) FROM orders").fetchone()[0]
            documents = conn.execute("SELECT COUNT(*) FROM documents WHERE collection = 'menu'").fetchone()[0]
        finally:
            conn.close()

        assert {"documents", "orders", "order_items"} <= tables
        assert orders == 1
        assert documents == 5

    def test_apps_do_not_share_databases(self, tmp_path, clean_auth_sessions):
        first = create_app(Settings(admin_password="x", database_url=f"sqlite+aiosqlite:///{tmp_path / 'one.db'}"))
        second = create_app(Settings(admin_password="x", database_url=f"sqlite+aiosqlite:///{tmp_path / 'two.db'}"))

        assert first.state.engine is not second.state.engine
        assert str(first.state.engine.url).endswith("one.db")
        assert str(second.state.engine.url).endswith("two.db")


class TestHealth:
    """Test the health endpoint."""

    def test_health(self, test_client):
        response = test_client.get("/health")

        assert response.status_code == 200
        assert response.json() == {
            "status": "healthy",
            "database": "ok",
            "restaurant": "Test Restaurant",
        }
