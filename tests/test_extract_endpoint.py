import json

import pytest
from fastapi.exceptions import RequestValidationError
from fastapi.testclient import TestClient

from recipe_reality.app.api import deps
from recipe_reality.app.api.routes import transcript as transcript_routes
from recipe_reality.app.core.config import Settings
from recipe_reality.app.core.errors import RecipeCoreError
from recipe_reality.app.main import validation_exception_handler
from recipe_reality.app.services import recipe_extraction, video_transcript
from recipe_reality.app.services.ai_provider import TRANSCRIPT_SYSTEM_PROMPT

PANCAKES_PAGE = (
    '<html><head><script type="application/ld+json">'
    '{"@type":"Recipe","name":"Pancakes","recipeIngredient":["2 cups flour","1 egg"],'
    '"recipeInstructions":["Mix","Cook"]}'
    "</script></head></html>"
)


@pytest.fixture
def page(monkeypatch):
    async def fake_fetch_html(url):
        return PANCAKES_PAGE

    monkeypatch.setattr(recipe_extraction, "fetch_html", fake_fetch_html)


@pytest.fixture
def no_server_supadata_key(monkeypatch):
    settings = Settings(_env_file=None, SUPADATA_API_KEY=None)
    monkeypatch.setattr(transcript_routes, "get_settings", lambda: settings)


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_extract_web_page(client, page):
    resp = client.post("/api/extract", json={"url": "https://example.com/pancakes"})

    assert resp.status_code == 200
    body = resp.json()
    assert body["title"] == "Pancakes"
    assert body["sourceURL"] == "https://example.com/pancakes"
    assert body["sourceType"] == "url"
    assert body["prepTime"] == "10 minutes"
    assert body["ingredients"][0] == {
        "name": "flour",
        "quantity": "2",
        "unit": "cups",
        "category": "Pantry",
    }
    assert body["ingredients"][1]["category"] == "Dairy & Eggs"
    assert body["instructions"] == ["Mix", "Cook"]


def test_extract_transcript(client, fake_provider):
    resp = client.post(
        "/api/extract",
        json={
            "url": "https://youtu.be/abc123",
            "isTranscript": True,
            "transcript": "Mix the flour with the egg",
        },
    )

    assert resp.status_code == 200
    assert resp.json()["sourceType"] == "youtube"
    assert fake_provider.calls[0][0] == TRANSCRIPT_SYSTEM_PROMPT


def test_extract_transcript_requires_text(client):
    resp = client.post(
        "/api/extract", json={"url": "https://youtu.be/abc123", "isTranscript": True}
    )
    assert resp.status_code == 400
    assert resp.json() == {"error": "Missing required field: transcript"}


def test_extract_requires_url(client):
    resp = client.post("/api/extract", json={})
    assert resp.status_code == 400
    assert resp.json() == {"error": "Missing required field: url"}

    resp = client.post("/api/extract", json={"url": "  "})
    assert resp.status_code == 400


def test_extract_rejects_private_urls(client):
    resp = client.post("/api/extract", json={"url": "http://localhost:8000/secret"})
    assert resp.status_code == 400
    assert "private" in resp.json()["error"]


@pytest.mark.parametrize(
    "error,status",
    [
        (RecipeCoreError.credential("Anthropic", "Invalid API key"), 401),
        (RecipeCoreError.rate_limit("Rate limited. Try again later."), 429),
        (RecipeCoreError.server("Overloaded", status_code=529), 500),
        (RecipeCoreError.extraction("No recipe found"), 500),
    ],
)
def test_extract_maps_errors_to_status(app, client, page, fake_provider, error, status):
    fake_provider.error = error

    resp = client.post("/api/extract", json={"url": "https://example.com/pancakes"})

    assert resp.status_code == status
    assert resp.json() == {"error": error.message}


def test_extract_unexpected_error_is_json_500(app, page, fake_provider):
    fake_provider.error = RuntimeError("provider exploded")
    client = TestClient(app, raise_server_exceptions=False)

    resp = client.post("/api/extract", json={"url": "https://example.com/pancakes"})

    assert resp.status_code == 500
    assert resp.json() == {"error": "provider exploded"}


def test_extract_unknown_ai_provider_is_json_500(app, page, monkeypatch):
    app.dependency_overrides.clear()
    settings = Settings(_env_file=None, AI_PROVIDER="mystery")
    monkeypatch.setattr(deps, "get_settings", lambda: settings)
    client = TestClient(app, raise_server_exceptions=False)

    resp = client.post("/api/extract", json={"url": "https://example.com/pancakes"})

    assert resp.status_code == 500
    assert "mystery" in resp.json()["error"]


def test_extract_tolerates_infinite_servings(client, page, fake_provider):
    fake_provider.reply = '{"title": "Stew", "servings": 1e999, "ingredients": []}'

    resp = client.post("/api/extract", json={"url": "https://example.com/stew"})

    assert resp.status_code == 200
    assert resp.json()["title"] == "Stew"
    assert resp.json()["servings"] is None


def test_transcript_endpoint(client, monkeypatch):
    calls = []

    async def fake_fetch_transcript(url, platform=None, api_key=None):
        calls.append((url, platform.value, api_key))
        return "spoken words"

    monkeypatch.setattr(video_transcript, "fetch_transcript", fake_fetch_transcript)

    resp = client.post(
        "/api/transcript",
        json={
            "url": "https://www.tiktok.com/@chef/video/1",
            "platform": "tiktok",
            "thirdPartyApiKey": "key123",
        },
    )

    assert resp.status_code == 200
    assert resp.json() == {"transcript": "spoken words", "platform": "tiktok"}
    assert calls == [("https://www.tiktok.com/@chef/video/1", "tiktok", "key123")]


def test_transcript_endpoint_accepts_supadata_key_name(client, monkeypatch):
    seen = []

    async def fake_fetch_transcript(url, platform=None, api_key=None):
        seen.append(api_key)
        return "spoken words"

    monkeypatch.setattr(video_transcript, "fetch_transcript", fake_fetch_transcript)

    resp = client.post(
        "/api/transcript",
        json={
            "url": "https://www.instagram.com/reel/xyz/",
            "platform": "instagram",
            "supadataApiKey": "key456",
        },
    )
    assert resp.status_code == 200
    assert seen == ["key456"]


def test_transcript_endpoint_requires_key_for_tiktok(client, no_server_supadata_key):
    resp = client.post(
        "/api/transcript",
        json={"url": "https://www.tiktok.com/@chef/video/1", "platform": "tiktok"},
    )
    assert resp.status_code == 400
    assert resp.json() == {"error": "Supadata API key required for tiktok videos"}


def test_transcript_endpoint_requires_platform(client):
    resp = client.post("/api/transcript", json={"url": "https://youtu.be/abc123"})
    assert resp.status_code == 400
    assert resp.json() == {"error": "Missing required field: platform"}


@pytest.mark.parametrize("platform", ["unknown", "vimeo"])
def test_transcript_endpoint_rejects_unsupported_platform(client, platform):
    resp = client.post(
        "/api/transcript", json={"url": "https://example.com/video", "platform": platform}
    )
    assert resp.status_code == 400


def test_transcript_endpoint_failure_is_500(client, monkeypatch):
    async def no_captions(url, platform=None, api_key=None):
        raise RecipeCoreError.transcript("youtube", "No captions available for this video")

    monkeypatch.setattr(video_transcript, "fetch_transcript", no_captions)

    resp = client.post(
        "/api/transcript", json={"url": "https://youtu.be/abc123", "platform": "youtube"}
    )
    assert resp.status_code == 500
    assert resp.json() == {"error": "No captions available for this video"}


@pytest.mark.asyncio
async def test_validation_handler_formats_errors():
    exc = RequestValidationError(
        errors=[
            {"loc": ("body", "url"), "msg": "Field required", "type": "missing"},
            {"loc": ("body", "isTranscript"), "msg": "Input should be a valid boolean", "type": "bool_parsing"},
        ]
    )
    response = await validation_exception_handler(None, exc)
    assert response.status_code == 400
    body = json.loads(response.body)
    assert body == {
        "error": "Missing required field: url; isTranscript: Input should be a valid boolean"
    }


def test_error_bodies_are_documented(client):
    schema = client.get("/openapi.json").json()

    extract_responses = schema["paths"]["/api/extract"]["post"]["responses"]
    transcript_responses = schema["paths"]["/api/transcript"]["post"]["responses"]
    ref = extract_responses["429"]["content"]["application/json"]["schema"]["$ref"]
    assert ref.endswith("/ErrorResponse")
    assert "400" in transcript_responses
    assert schema["components"]["schemas"]["ErrorResponse"]["required"] == ["error"]
