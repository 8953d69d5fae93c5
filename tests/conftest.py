import json

import httpx
import pytest
from fastapi.testclient import TestClient

from storefront.config import settings
from storefront.dependencies import get_gemini_client, get_registry
from storefront.main import app
from storefront.services.gemini import GeminiClient
from storefront.services.sessions import SessionRegistry


def text_response(text: str) -> dict:
    return {"candidates": [{"content": {"role": "model", "parts": [{"text": text}]}}]}


class FakeGemini:
    """Stands in for the Gemini REST API. Queue replies, inspect requests."""

    def __init__(self):
        self.replies: list = []
        self.requests: list[httpx.Request] = []

    def reply_text(self, text: str):
        self.replies.append(httpx.Response(200, json=text_response(text)))

    def reply_json(self, payload, status_code: int = 200):
        self.replies.append(httpx.Response(status_code, json=payload))

    def reply_stream(self, *deltas: str):
        body = "".join(f"data: {json.dumps(text_response(d))}\r\n\r\n" for d in deltas)
        self.replies.append(httpx.Response(200, text=body, headers={"Content-Type": "text/event-stream"}))

    def fail(self):
        self.replies.append(httpx.ConnectError("connection refused"))

    def bodies(self) -> list[dict]:
        return [json.loads(r.content) for r in self.requests]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        reply = self.replies.pop(0) if self.replies else httpx.ConnectError("no reply queued")
        if isinstance(reply, Exception):
            raise reply
        return reply


@pytest.fixture
def fake_gemini() -> FakeGemini:
    return FakeGemini()


@pytest.fixture
def gemini_client(fake_gemini) -> GeminiClient:
    return GeminiClient(api_key="test-key", base_url="https://gemini.test/v1beta", transport=httpx.MockTransport(fake_gemini))


@pytest.fixture
def registry(gemini_client) -> SessionRegistry:
    return SessionRegistry(gemini_client, settings)


@pytest.fixture
def client(gemini_client, registry):
    app.dependency_overrides[get_gemini_client] = lambda: gemini_client
    app.dependency_overrides[get_registry] = lambda: registry
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def session_id(client) -> str:
    return client.post("/api/sessions").json()["session_id"]
