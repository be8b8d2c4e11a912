# tests/test_app.py
from fastapi import APIRouter, FastAPI
from fastapi.testclient import TestClient

from upsc_prep.core.config import Config
from upsc_prep.core.errors import ConflictError, register_exception_handlers


def test_banner_and_health(client):
    banner = client.get("/api/")
    assert banner.status_code == 200
    assert banner.json()["message"] == "UPSC Backend API is running"
    assert "timestamp" in banner.json()

    health = client.get("/api/health").json()
    assert health["status"] == "healthy"
    assert health["uptime"] >= 0


def test_unknown_route(client):
    response = client.get("/api/nope")
    assert response.status_code == 404
    assert response.json() == {"status": "error", "message": "Route /api/nope not found"}


def test_malformed_body_is_bad_request(client, auth_headers):
    response = client.post("/api/mock-tests/generate", json={"questionCount": "many"}, headers=auth_headers)
    assert response.status_code == 400
    assert response.json()["status"] == "error"
    assert response.json()["message"].startswith("questionCount")


def test_cors_preflight(client):
    response = client.options("/api/health", headers={
        "Origin": "http://localhost:3000",
        "Access-Control-Request-Method": "GET",
    })
    assert response.headers["access-control-allow-origin"] == "http://localhost:3000"


def make_app():
    app = FastAPI()
    router = APIRouter()

    @router.get("/conflict")
    def conflict():
        raise ConflictError("Already there")

    @router.get("/value")
    def value():
        raise ValueError("Invalid date: tomorrow-ish")

    @router.get("/crash")
    def crash():
        raise RuntimeError("kaboom")

    app.include_router(router)
    register_exception_handlers(app)
    return app


def test_error_envelopes():
    client = TestClient(make_app(), raise_server_exceptions=False)

    conflict = client.get("/conflict")
    assert conflict.status_code == 409
    assert conflict.json() == {"status": "error", "message": "Already there"}

    value = client.get("/value")
    assert value.status_code == 400
    assert value.json()["message"] == "Invalid date: tomorrow-ish"

    crash = client.get("/crash")
    assert crash.status_code == 500
    assert crash.json()["message"] == "Internal server error"
    assert "stack" not in crash.json()


def test_config_validation():
    config = Config()
    result = config.validate()
    assert result["valid"] is True
    assert result["using_dummy_ai"] is True

    config.SUPABASE_URL = ""
    config.PORT = 0
    result = config.validate()
    assert result["valid"] is False
    assert result["issues"] == ["PORT must be between 1 and 65535"]
    assert len(result["warnings"]) == 1


def test_cors_origins_split():
    config = Config()
    config.CORS_ORIGIN = "http://a.test, http://b.test,"
    assert config.CORS_ORIGINS == ["http://a.test", "http://b.test"]
