"""API tests for the chat, speech and knowledge endpoints."""
import json
from unittest.mock import AsyncMock

import httpx
import pytest
from fastapi.testclient import TestClient

from config import settings
from main import app
from routes import chat as chat_route
from services import ai_service, tts_service

from conftest import PERSONA


@pytest.fixture
def client(kb_file):
    return TestClient(app)


def test_health(client):
    resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok", "app": settings.APP_NAME, "version": settings.APP_VERSION}


def test_widget_page_is_served(client):
    resp = client.get("/")
    assert resp.status_code == 200
    assert "text/html" in resp.headers["content-type"]
    assert "/api/chat" in resp.text


def test_knowledge_listing(client):
    resp = client.get("/api/knowledge")
    assert resp.status_code == 200
    body = resp.json()
    assert body["count"] == len(PERSONA)
    assert body["snippets"][0] == PERSONA[0]


def test_chat_canned_answer(client):
    resp = client.post("/api/chat", json={"text": "What should we know about your life story?"})

    assert resp.status_code == 200
    assert resp.json() == {"answer": PERSONA[0]["text"], "confidence": "high", "sources": ["KB_LIFE"]}


@pytest.mark.parametrize("payload", [{"text": ""}, {"text": "   "}, {}, {"text": 12}, None])
def test_chat_rejects_missing_text(client, payload):
    resp = client.post("/api/chat", json=payload)
    assert resp.status_code == 400
    assert resp.json()["error"] == "No question text provided"


@pytest.mark.parametrize("payload", [{"text": ""}, {}, {"text": 12}, None])
def test_tts_rejects_missing_text(client, monkeypatch, payload):
    monkeypatch.setattr(settings, "ELEVENLABS_API_KEY", "xi-test")
    resp = client.post("/api/tts", json=payload)
    assert resp.status_code == 400
    assert resp.json()["error"] == "No text provided"


def test_chat_requires_post(client):
    resp = client.get("/api/chat")
    assert resp.status_code == 405
    assert resp.json() == {"error": "Method not allowed"}


def test_chat_without_model_config_returns_500(client):
    resp = client.post("/api/chat", json={"text": "Do you know React?"})

    assert resp.status_code == 500
    assert resp.json()["error"].startswith("Server not configured")


def test_chat_model_answer(client, monkeypatch, fake_upstream):
    monkeypatch.setattr(settings, "HF_API_TOKEN", "hf_test")
    answer = {"answer": "Yes, React daily.", "confidence": "high", "sources": ["KB_SKILLS"]}
    fake_upstream(ai_service, lambda request: httpx.Response(200, json=[{"generated_text": json.dumps(answer)}]))

    resp = client.post("/api/chat", json={"text": "Do you know React?"})

    assert resp.status_code == 200
    assert resp.json() == answer


def test_chat_upstream_failure_returns_502(client, monkeypatch, fake_upstream):
    monkeypatch.setattr(settings, "HF_API_TOKEN", "hf_test")
    fake_upstream(ai_service, lambda request: httpx.Response(500, text="boom upstream"))

    resp = client.post("/api/chat", json={"text": "Do you know React?"})

    assert resp.status_code == 502
    assert resp.json() == {"error": "Model inference failed", "details": "boom upstream"}


def test_chat_unhandled_exception_returns_500(client, monkeypatch):
    monkeypatch.setattr(chat_route, "generate_response", AsyncMock(side_effect=RuntimeError("kaboom")))

    resp = client.post("/api/chat", json={"text": "hello"})

    assert resp.status_code == 500
    assert resp.json() == {"error": "internal server error", "details": "kaboom"}


def test_tts_returns_audio(client, monkeypatch, fake_upstream):
    monkeypatch.setattr(settings, "ELEVENLABS_API_KEY", "xi-test")
    captured = fake_upstream(tts_service, lambda request: httpx.Response(200, content=b"ID3audio"))

    resp = client.post("/api/tts", json={"text": '{"answer": "Hello there"}'})

    assert resp.status_code == 200
    assert resp.headers["content-type"] == "audio/mpeg"
    assert resp.headers["content-length"] == str(len(b"ID3audio"))
    assert resp.content == b"ID3audio"
    assert json.loads(captured[0].content)["text"] == '"Hello there"'


def test_tts_rejects_empty_text(client, monkeypatch):
    monkeypatch.setattr(settings, "ELEVENLABS_API_KEY", "xi-test")
    assert client.post("/api/tts", json={"text": ""}).status_code == 400
    assert client.post("/api/tts", json={"text": "{}"}).status_code == 400
    assert client.get("/api/tts").status_code == 405


def test_tts_without_key_returns_500(client):
    resp = client.post("/api/tts", json={"text": "hello"})
    assert resp.status_code == 500
    assert resp.json() == {"error": "ELEVENLABS_API_KEY not set"}


def test_tts_upstream_failure_returns_502(client, monkeypatch, fake_upstream):
    monkeypatch.setattr(settings, "ELEVENLABS_API_KEY", "xi-test")
    fake_upstream(tts_service, lambda request: httpx.Response(401, text="invalid api key"))

    resp = client.post("/api/tts", json={"text": "hello"})

    assert resp.status_code == 502
    assert resp.json() == {"error": "TTS failed", "details": "invalid api key"}


def test_error_schema_is_documented(client):
    paths = client.get("/openapi.json").json()["paths"]
    for path in ("/api/chat", "/api/tts"):
        responses = paths[path]["post"]["responses"]
        for status in ("400", "500", "502"):
            schema = responses[status]["content"]["application/json"]["schema"]
            assert schema["$ref"].endswith("/ErrorResponse")
