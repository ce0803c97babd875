"""
Image Suggestion Endpoint Tests
===============================

Copyright 2024-2025 SKU Studio
All Rights Reserved
Proprietary License
"""
import base64
import json

import httpx
import pytest

SERPAPI_HOST = "serpapi.com"
THUMB_HOST = "encrypted-tbn0.gstatic.com"
PNG_BYTES = b"\x89PNG\r\n\x1a\nthumb"


def search_results(count: int):
    return {"images_results": [
        {
            "thumbnail": f"https://{THUMB_HOST}/images?q={i}",
            "original": f"https://shop.example/full/{i}.jpg",
            "title": f"Bond <b>Builder</b> No.{i} &amp; more",
        }
        for i in range(count)
    ]}


def thumbnails_ok(request: httpx.Request) -> httpx.Response:
    return httpx.Response(200, content=PNG_BYTES, headers={"content-type": "image/png"})


def ndjson_records(response):
    return [json.loads(line) for line in response.text.splitlines() if line.strip()]


@pytest.fixture
def configured(set_env):
    set_env(SERPAPI_KEY="serp-test-key")


class TestSuggestImages:

    def test_not_configured(self, client, upstream):
        response = client.post("/api/suggest-images", json={"query": "olaplex"})
        assert response.status_code == 501
        assert response.json() == {"error": "Image search not configured"}
        assert upstream.requests == []

    @pytest.mark.parametrize("query", ["ab", "   ab   ", "x" * 201])
    def test_query_length(self, client, upstream, configured, query):
        response = client.post("/api/suggest-images", json={"query": query})
        assert response.status_code == 400
        assert response.json() == {"error": "Query too short or too long"}
        assert upstream.requests == []

    @pytest.mark.parametrize("body", [{}, {"query": 5}, {"query": None}])
    def test_invalid_body(self, client, configured, body):
        response = client.post("/api/suggest-images", json=body)
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid request"}

    def test_streams_ndjson_records(self, client, upstream, configured):
        upstream.on(SERPAPI_HOST, lambda request: httpx.Response(200, json=search_results(4)))
        upstream.on(THUMB_HOST, thumbnails_ok)

        response = client.post("/api/suggest-images", json={"query": "  olaplex no 3  "})

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("application/x-ndjson")
        records = ndjson_records(response)
        assert len(records) == 4
        expected_data_url = "data:image/png;base64," + base64.b64encode(PNG_BYTES).decode("ascii")
        assert all(r["dataUrl"] == expected_data_url for r in records)
        assert {r["originalUrl"] for r in records} == {f"https://shop.example/full/{i}.jpg" for i in range(4)}
        assert all(r["title"].startswith("Bond Builder No.") and r["title"].endswith("& more") for r in records)
        assert upstream.calls_to(SERPAPI_HOST)[0].url.params["q"] == "olaplex no 3"

    def test_failed_thumbnails_are_skipped(self, client, upstream, configured):
        def thumbnails(request):
            if request.url.params["q"] in ("1", "3"):
                return httpx.Response(200, content=b"<html>", headers={"content-type": "text/html"})
            return thumbnails_ok(request)

        upstream.on(SERPAPI_HOST, lambda request: httpx.Response(200, json=search_results(5)))
        upstream.on(THUMB_HOST, thumbnails)

        records = ndjson_records(client.post("/api/suggest-images", json={"query": "olaplex"}))

        assert sorted(r["originalUrl"] for r in records) == [
            "https://shop.example/full/0.jpg",
            "https://shop.example/full/2.jpg",
            "https://shop.example/full/4.jpg",
        ]

    def test_blocked_thumbnail_urls_never_fetched(self, client, upstream, configured):
        upstream.on(SERPAPI_HOST, lambda request: httpx.Response(200, json={"images_results": [
            {"thumbnail": "http://plain.example/a.png", "original": "https://o.example/a"},
            {"thumbnail": "https://10.0.0.8/a.png", "original": "https://o.example/b"},
            {"thumbnail": f"https://{THUMB_HOST}/images?q=ok", "original": "https://o.example/c"},
        ]}))
        upstream.on(THUMB_HOST, thumbnails_ok)

        records = ndjson_records(client.post("/api/suggest-images", json={"query": "olaplex"}))

        assert [r["originalUrl"] for r in records] == ["https://o.example/c"]
        assert {r.url.host for r in upstream.requests} == {SERPAPI_HOST, THUMB_HOST}

    def test_unencodable_thumbnail_host_is_skipped(self, client, upstream, configured):
        results = [{"thumbnail": "https://xn--.com/bad.png", "original": "https://o.example/bad"}]
        results += search_results(5)["images_results"]
        upstream.on(SERPAPI_HOST, lambda request: httpx.Response(200, json={"images_results": results}))
        upstream.on(THUMB_HOST, thumbnails_ok)

        records = ndjson_records(client.post("/api/suggest-images", json={"query": "olaplex"}))

        assert len(records) == 5
        assert "https://o.example/bad" not in {r["originalUrl"] for r in records}

    def test_emits_at_most_fifteen(self, client, upstream, configured):
        upstream.on(SERPAPI_HOST, lambda request: httpx.Response(200, json=search_results(40)))
        upstream.on(THUMB_HOST, thumbnails_ok)

        records = ndjson_records(client.post("/api/suggest-images", json={"query": "olaplex"}))

        assert len(records) == 15
        assert len(upstream.calls_to(THUMB_HOST)) <= 20

    def test_original_falls_back_to_thumbnail(self, client, upstream, configured):
        upstream.on(SERPAPI_HOST, lambda request: httpx.Response(200, json={"images_results": [
            {"thumbnail": f"https://{THUMB_HOST}/images?q=solo"},
        ]}))
        upstream.on(THUMB_HOST, thumbnails_ok)

        records = ndjson_records(client.post("/api/suggest-images", json={"query": "olaplex"}))

        assert records == [{
            "dataUrl": records[0]["dataUrl"],
            "originalUrl": f"https://{THUMB_HOST}/images?q=solo",
            "title": "",
        }]

    def test_no_results_is_empty_stream(self, client, upstream, configured):
        upstream.on(SERPAPI_HOST, lambda request: httpx.Response(200, json={"search_metadata": {}}))
        response = client.post("/api/suggest-images", json={"query": "zzzzzz"})
        assert response.status_code == 200
        assert response.text == ""

    def test_search_failure(self, client, upstream, configured):
        upstream.on(SERPAPI_HOST, lambda request: httpx.Response(500, json={"error": "boom"}))
        response = client.post("/api/suggest-images", json={"query": "olaplex"})
        assert response.status_code == 502
        assert response.json() == {"error": "Search failed"}

    def test_search_timeout(self, client, upstream, configured):
        def handler(request):
            raise httpx.ReadTimeout("slow", request=request)

        upstream.on(SERPAPI_HOST, handler)
        response = client.post("/api/suggest-images", json={"query": "olaplex"})
        assert response.status_code == 504
        assert response.json() == {"error": "Search timed out"}
