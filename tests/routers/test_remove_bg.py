"""
Background Removal Endpoint Tests
=================================

Copyright 2024-2025 SKU Studio
All Rights Reserved
Proprietary License
"""
import json

import httpx
import pytest

REMOVEBG_HOST = "api.remove.bg"


def removebg_ok(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, json={"data": {"result_b64": "UE5HREFUQQ=="}})


@pytest.fixture
def configured(set_env):
    set_env(REMOVEBG_API_KEY="rb-test-key")


class TestRemoveBackground:

    def test_not_configured(self, client, upstream):
        response = client.post("/api/remove-bg", json={"image_b64": "QUJD"})
        assert response.status_code == 501
        assert response.json() == {"error": "Background removal not configured"}
        assert upstream.requests == []

    def test_success_returns_data_uri(self, client, upstream, configured):
        upstream.on(REMOVEBG_HOST, removebg_ok)

        response = client.post("/api/remove-bg", json={"image_b64": "data:image/jpeg;base64,QUJD"})

        assert response.status_code == 200
        assert response.json() == {"result_b64": "data:image/png;base64,UE5HREFUQQ=="}
        sent = json.loads(upstream.calls_to(REMOVEBG_HOST)[0].content)
        assert sent["image_file_b64"] == "QUJD"
        assert upstream.calls_to(REMOVEBG_HOST)[0].headers["x-api-key"] == "rb-test-key"

    @pytest.mark.parametrize("body", [{}, {"image_b64": ""}, {"image_b64": 123}])
    def test_missing_image(self, client, configured, body):
        response = client.post("/api/remove-bg", json=body)
        assert response.status_code == 400
        assert response.json() == {"error": "Missing image_b64"}

    def test_oversized_image_never_reaches_provider(self, client, upstream, configured):
        upstream.on(REMOVEBG_HOST, removebg_ok)
        oversized = "A" * 16_000_004

        response = client.post("/api/remove-bg", json={"image_b64": oversized})

        assert response.status_code == 413
        assert response.json() == {"error": "Image too large"}
        assert upstream.calls_to(REMOVEBG_HOST) == []

    def test_quota_exhausted(self, client, upstream, configured):
        upstream.on(REMOVEBG_HOST, lambda request: httpx.Response(
            402, json={"errors": [{"title": "Insufficient credits"}]}
        ))
        response = client.post("/api/remove-bg", json={"image_b64": "QUJD"})
        assert response.status_code == 402
        assert response.json() == {"error": "Monthly limit reached"}

    def test_provider_rate_limit_forwards_retry_after(self, client, upstream, configured):
        upstream.on(REMOVEBG_HOST, lambda request: httpx.Response(
            429, json={"errors": [{"title": "Rate limit exceeded"}]}, headers={"Retry-After": "12"}
        ))
        response = client.post("/api/remove-bg", json={"image_b64": "QUJD"})
        assert response.status_code == 429
        assert response.json() == {"error": "Rate limited, try again later"}
        assert response.headers["retry-after"] == "12"

    def test_provider_detail_relayed(self, client, upstream, configured):
        upstream.on(REMOVEBG_HOST, lambda request: httpx.Response(
            400, json={"errors": [{"title": "Unknown foreground", "detail": "Could not identify foreground in image."}]}
        ))
        response = client.post("/api/remove-bg", json={"image_b64": "QUJD"})
        assert response.status_code == 400
        assert response.json() == {"error": "Could not identify foreground in image."}

    def test_provider_server_error(self, client, upstream, configured):
        upstream.on(REMOVEBG_HOST, lambda request: httpx.Response(503, text="unavailable"))
        response = client.post("/api/remove-bg", json={"image_b64": "QUJD"})
        assert response.status_code == 502
        assert response.json() == {"error": "Background removal failed"}

    def test_missing_result(self, client, upstream, configured):
        upstream.on(REMOVEBG_HOST, lambda request: httpx.Response(200, json={"data": {}}))
        response = client.post("/api/remove-bg", json={"image_b64": "QUJD"})
        assert response.status_code == 502
        assert response.json() == {"error": "Background removal failed"}

    def test_provider_timeout(self, client, upstream, configured):
        def handler(request):
            raise httpx.ReadTimeout("slow", request=request)

        upstream.on(REMOVEBG_HOST, handler)
        response = client.post("/api/remove-bg", json={"image_b64": "QUJD"})
        assert response.status_code == 504
        assert response.json() == {"error": "Background removal timed out"}

    def test_sixth_call_in_window_is_limited(self, client, upstream, configured):
        upstream.on(REMOVEBG_HOST, removebg_ok)
        headers = {"x-forwarded-for": "198.51.100.4, 10.0.0.1"}

        responses = [client.post("/api/remove-bg", json={"image_b64": "QUJD"}, headers=headers) for _ in range(6)]

        assert [r.status_code for r in responses] == [200] * 5 + [429]
        assert responses[5].json() == {"error": "Too many requests"}
        assert int(responses[5].headers["retry-after"]) > 0
        assert len(upstream.calls_to(REMOVEBG_HOST)) == 5

    def test_limit_is_per_client(self, client, upstream, configured, set_env):
        set_env(RATE_LIMIT_REMOVE_BG=1)
        upstream.on(REMOVEBG_HOST, removebg_ok)

        first = client.post("/api/remove-bg", json={"image_b64": "QUJD"}, headers={"x-forwarded-for": "198.51.100.4"})
        other = client.post("/api/remove-bg", json={"image_b64": "QUJD"}, headers={"x-forwarded-for": "198.51.100.5"})
        again = client.post("/api/remove-bg", json={"image_b64": "QUJD"}, headers={"x-forwarded-for": "198.51.100.4"})

        assert (first.status_code, other.status_code, again.status_code) == (200, 200, 429)

    def test_rate_limit_checked_before_configuration(self, client, set_env):
        set_env(RATE_LIMIT_REMOVE_BG=1)
        assert client.post("/api/remove-bg", json={"image_b64": "QUJD"}).status_code == 501
        assert client.post("/api/remove-bg", json={"image_b64": "QUJD"}).status_code == 429
