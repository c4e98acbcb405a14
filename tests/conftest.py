import httpx
import pytest
from fastapi.testclient import TestClient

from recipe_reality.app.api.deps import get_ai_provider
from recipe_reality.app.main import create_app
from recipe_reality.app.services.ai_provider import AIProvider

PANCAKES_JSON = (
    '{"title": "Pancakes", "servings": 4, "prepTime": "10 minutes", "cookTime": "15 minutes",'
    ' "ingredients": [{"name": "flour", "quantity": "2", "unit": "cups", "category": "pantry"},'
    ' {"name": "egg", "quantity": "1", "unit": null, "category": "dairy"}],'
    ' "instructions": ["Mix", "Cook"]}'
)


class FakeProvider(AIProvider):
    name = "Fake"

    def __init__(self, reply: str = PANCAKES_JSON, error: Exception | None = None):
        self.reply = reply
        self.error = error
        self.calls = []

    async def complete(self, system_prompt: str, user_content: str) -> str:
        self.calls.append((system_prompt, user_content))
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def make_provider():
    return FakeProvider


@pytest.fixture
def fake_provider():
    return FakeProvider()


@pytest.fixture
def app(fake_provider):
    app = create_app()
    app.dependency_overrides[get_ai_provider] = lambda: fake_provider
    return app


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def patch_http(monkeypatch):
    """Route every httpx.AsyncClient created by the code under test through a handler."""
    real_client = httpx.AsyncClient

    def install(handler):
        transport = httpx.MockTransport(handler)

        def client_factory(*args, **kwargs):
            kwargs["transport"] = transport
            return real_client(*args, **kwargs)

        monkeypatch.setattr(httpx, "AsyncClient", client_factory)
        return transport

    return install
