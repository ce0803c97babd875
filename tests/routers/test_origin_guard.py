"""
Origin Guard and Middleware Tests
=================================

Same-origin enforcement, body-size limit, security headers, health check and
rate-limit client identification.

Copyright 2024-2025 SKU Studio
All Rights Reserved
Proprietary License
"""
from unittest.mock import MagicMock

import pytest

from routers.api.helpers import get_client_identifier
from services.infrastructure.http.middleware import header_host


class TestHeaderHost:

    @pytest.mark.parametrize("value,expected", [
        ("https://Shop.Example", "shop.example"),
        ("https://shop.example:443/page", "shop.example"),
        ("http://shop.example:80", "shop.example"),
        ("http://localhost:3001/x?y=1", "localhost:3001"),
        ("https://shop.example:8443", "shop.example:8443"),
        ("http://[::1]:3001", "[::1]:3001"),
        ("null", None),
        ("", None),
        ("https://", None),
    ])
    def test_values(self, value, expected):
        assert header_host(value) == expected


class TestOriginGuard:

    def test_same_origin_allowed(self, client):
        response = client.post(
            "/api/remove-bg", json={"image_b64": "QUJD"}, headers={"origin": "http://testserver"}
        )
        assert response.status_code == 501

    def test_no_origin_or_referer_allowed(self, client):
        assert client.post("/api/remove-bg", json={"image_b64": "QUJD"}).status_code == 501

    @pytest.mark.parametrize("origin", [
        "https://evil.example",
        "http://testserver.evil.example",
        "http://testserver:8080",
        "null",
    ])
    def test_cross_origin_rejected(self, client, upstream, origin):
        response = client.post("/api/proxy-image", json={"url": "https://cdn.shop.example/a.png"}, headers={"origin": origin})
        assert response.status_code == 403
        assert response.json() == {"error": "Forbidden"}
        assert upstream.requests == []

    def test_referer_used_when_origin_absent(self, client):
        allowed = client.post(
            "/api/remove-bg", json={"image_b64": "QUJD"}, headers={"referer": "http://testserver/cards/12"}
        )
        blocked = client.post(
            "/api/remove-bg", json={"image_b64": "QUJD"}, headers={"referer": "https://evil.example/page"}
        )
        assert allowed.status_code == 501
        assert blocked.status_code == 403

    def test_origin_wins_over_referer(self, client):
        response = client.post(
            "/api/remove-bg",
            json={"image_b64": "QUJD"},
            headers={"origin": "https://evil.example", "referer": "http://testserver/"},
        )
        assert response.status_code == 403

    def test_get_requests_not_guarded(self, client):
        response = client.get("/health", headers={"origin": "https://evil.example"})
        assert response.status_code == 200

    def test_rejection_does_not_consume_rate_limit(self, client, set_env):
        set_env(RATE_LIMIT_REMOVE_BG=1)
        for _ in range(3):
            client.post("/api/remove-bg", json={"image_b64": "QUJD"}, headers={"origin": "https://evil.example"})
        assert client.post("/api/remove-bg", json={"image_b64": "QUJD"}).status_code == 501


class TestRequestBodyLimit:

    def test_declared_length_over_limit(self, client, set_env):
        set_env(MAX_REQUEST_BODY_MB=1)
        payload = b'{"image_b64": "' + b"A" * (1024 * 1024) + b'"}'
        response = client.post("/api/remove-bg", content=payload, headers={"content-type": "application/json"})
        assert response.status_code == 413
        assert response.json() == {"error": "Request body too large"}


class TestHealthAndHeaders:

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "ok"
        assert body["version"]
        assert body["uptime_seconds"] >= 0

    def test_security_headers(self, client):
        response = client.get("/health")
        assert response.headers["x-frame-options"] == "DENY"
        assert response.headers["x-content-type-options"] == "nosniff"
        assert response.headers["referrer-policy"] == "strict-origin-when-cross-origin"

    def test_unknown_route_uses_error_shape(self, client):
        response = client.get("/api/nope")
        assert response.status_code == 404
        assert "error" in response.json()


class TestClientIdentifier:

    @staticmethod
    def request_with(headers):
        request = MagicMock()
        request.headers = headers
        return request

    def test_first_forwarded_entry(self):
        request = self.request_with({"x-forwarded-for": " 203.0.113.9 , 10.0.0.1"})
        assert get_client_identifier(request) == "203.0.113.9"

    def test_cloudflare_header_fallback(self):
        request = self.request_with({"cf-connecting-ip": "198.51.100.2"})
        assert get_client_identifier(request) == "198.51.100.2"

    def test_empty_forwarded_falls_through(self):
        request = self.request_with({"x-forwarded-for": " , 10.0.0.1", "cf-connecting-ip": "198.51.100.2"})
        assert get_client_identifier(request) == "198.51.100.2"

    def test_unknown_bucket(self):
        assert get_client_identifier(self.request_with({})) == "unknown"
