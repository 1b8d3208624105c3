"""
Tests for request routing, CORS handling and the health endpoint
"""

import pytest
from fastapi.testclient import TestClient

import api.service
from api.service import create_app, is_api_path


CORS_EXPECTED = {
    "access-control-allow-origin": "https://example.dev",
    "access-control-allow-methods": "GET,POST,OPTIONS",
    "access-control-allow-headers": "Content-Type",
}


def assert_cors(response):
    for header, value in CORS_EXPECTED.items():
        assert response.headers[header] == value


class TestHealth:

    def test_health_reports_ok_and_storage(self, client, store):
        response = client.get("/api/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["storage"] == str(store.path)
        assert data["timestamp"].endswith("Z")
        assert_cors(response)

    def test_lifespan_creates_store(self, store, client):
        assert store.path.read_text(encoding="utf-8") == "[]"


class TestPreflight:

    @pytest.mark.parametrize("path", ["/api/contact", "/api/health", "/api/anything/else"])
    def test_options_on_api_path_is_204(self, client, path):
        response = client.options(path)

        assert response.status_code == 204
        assert response.content == b""
        assert_cors(response)

    def test_browser_preflight(self, client):
        response = client.options(
            "/api/contact",
            headers={
                "Origin": "https://example.dev",
                "Access-Control-Request-Method": "POST",
                "Access-Control-Request-Headers": "content-type",
            },
        )

        assert response.status_code == 204
        assert_cors(response)


class TestApiRouting:

    def test_unknown_api_endpoint_is_404(self, client):
        response = client.get("/api/unknown")

        assert response.status_code == 404
        assert response.json() == {"error": "Endpoint not found"}
        assert_cors(response)

    def test_wrong_method_on_contact_is_404(self, client):
        response = client.get("/api/contact")

        assert response.status_code == 404
        assert response.json() == {"error": "Endpoint not found"}

    def test_wrong_method_on_health_is_404(self, client):
        response = client.post("/api/health")

        assert response.status_code == 404

    def test_cors_on_validation_errors(self, client):
        response = client.post("/api/contact", json={})

        assert response.status_code == 400
        assert_cors(response)

    def test_cors_on_success(self, client, valid_payload):
        response = client.post("/api/contact", json=valid_payload)

        assert response.status_code == 201
        assert_cors(response)

    def test_default_origin_is_wildcard(self, settings, store):
        app = create_app(settings=settings.with_overrides(allowed_origin="*"), store=store)
        with TestClient(app) as client:
            response = client.get("/api/health")

        assert response.headers["access-control-allow-origin"] == "*"

    def test_api_prefix_requires_trailing_slash(self, client):
        # "/api" on its own is a static lookup
        response = client.get("/api")

        assert response.status_code == 404
        assert response.json() == {"error": "Not found"}
        assert "access-control-allow-origin" not in response.headers

    def test_docs_routes_are_not_exposed(self, client):
        assert client.get("/docs").status_code == 404
        assert client.get("/openapi.json").status_code == 404


class TestUnhandledErrors:

    def test_static_dispatch_failure_is_500(self, client, monkeypatch):
        async def explode(public_dir, url_path):
            raise RuntimeError("secret internals")

        monkeypatch.setattr(api.service, "serve_static", explode)

        response = client.get("/index.html")

        assert response.status_code == 500
        assert response.json() == {"error": "Unexpected server error"}
        assert "secret internals" not in response.text

    def test_api_dispatch_failure_is_500_with_cors(self, client, monkeypatch):
        def explode(**kwargs):
            raise RuntimeError("health model broke")

        monkeypatch.setattr("api.contact.HealthResponse", explode)

        response = client.get("/api/health")

        assert response.status_code == 500
        assert response.json() == {"error": "Unexpected server error"}
        assert_cors(response)


@pytest.mark.parametrize("path,expected", [
    ("/api/contact", True),
    ("/api/", True),
    ("/api", False),
    ("/apidocs", False),
    ("/", False),
])
def test_is_api_path(path, expected):
    assert is_api_path(path) is expected
