"""
Tests for app.py - meta routes, fallback handlers and configuration.
"""

import mongomock
import pytest

from app import create_app
from config import Config


class TestMetaRoutes:
    def test_index(self, client):
        body = client.get("/").get_json()

        assert body["success"] is True
        assert body["version"] == "1.0.0"
        assert body["endpoints"]["jobs"] == "/api/jobs"

    def test_health(self, client):
        body = client.get("/health").get_json()

        assert body["status"] == "healthy"
        assert body["uptime"] >= 0
        assert "timestamp" in body


class TestErrorHandlers:
    def test_unknown_route(self, client):
        resp = client.get("/nope")

        assert resp.status_code == 404
        assert resp.get_json() == {"success": False, "message": "Route not found", "path": "/nope"}

    @pytest.mark.parametrize("app_env, has_stack", [("development", True), ("production", False)])
    def test_unhandled_exception(self, app_env, has_stack, monkeypatch):
        app = create_app(Config(app_env=app_env, log_level="WARNING"), mongomock.MongoClient().db)

        def boom(*args, **kwargs):
            raise RuntimeError("kaput")

        monkeypatch.setattr(app.extensions["job_repository"], "get_stats", boom)

        resp = app.test_client().get("/api/jobs/stats/all")

        body = resp.get_json()
        assert resp.status_code == 500
        assert body["success"] is False
        assert body["message"] == "kaput"
        assert body["error"] == "kaput"
        assert ("stack" in body) is has_stack

    def test_method_not_allowed(self, client):
        resp = client.patch("/api/jobs/latest")

        assert resp.status_code == 405
        assert resp.get_json()["success"] is False


class TestConfig:
    def test_cors_origins_include_client_url(self):
        config = Config(client_url="https://market.example.com")

        assert config.cors_origins[0] == "https://market.example.com"
        assert "http://localhost:5173" in config.cors_origins

    def test_cors_origins_without_client_url(self):
        assert Config(client_url=None).cors_origins == [
            "http://localhost:5173",
            "http://localhost:5174",
            "http://localhost:3000",
        ]

    def test_cors_header_for_dev_origin(self, client):
        resp = client.get("/health", headers={"Origin": "http://localhost:3000"})

        assert resp.headers["Access-Control-Allow-Origin"] == "http://localhost:3000"

    def test_indexes_created_on_startup(self, app, database):
        assert "category_1" in database.jobs.index_information()
