import json
from typing import Callable, List

import httpx
import pytest

from config import settings
from models.schemas import Snippet
from services import knowledge_service

PERSONA = [
    {"id": "KB_LIFE", "text": "I'm a fourth-year engineering student from Bengaluru who blends design and code."},
    {"id": "KB_SUPERPOWER", "text": "My #1 superpower is creative problem-solving with design thinking and code."},
    {"id": "KB_GROW", "text": "I want to grow in backend systems, LLM tooling and system design."},
    {"id": "KB_MISCONCEPTION", "text": "Coworkers assume I prefer working alone; I do my best work in short collaborative sessions."},
    {"id": "KB_PUSH", "text": "I push my boundaries by shipping imperfect versions quickly and iterating fast."},
    {"id": "KB_SKILLS", "text": "Skills: HTML, CSS, JavaScript, React, Node.js; Figma and UI/UX design interest."},
    {"id": "KB_PERSONAL", "text": "Outside of work I sketch UI concepts and play badminton on weekends."},
]


@pytest.fixture(autouse=True)
def fresh_knowledge_base():
    knowledge_service.reset_knowledge_base()
    yield
    knowledge_service.reset_knowledge_base()


@pytest.fixture(autouse=True)
def offline_settings(monkeypatch):
    """Known defaults regardless of the developer's environment or .env file."""
    monkeypatch.setattr(settings, "DEMO_MODE", False)
    monkeypatch.setattr(settings, "MODEL_PROVIDER", "huggingface")
    monkeypatch.setattr(settings, "HF_API_TOKEN", "")
    monkeypatch.setattr(settings, "HF_MODEL", "org/persona-model")
    monkeypatch.setattr(settings, "OPENAI_API_KEY", "")
    monkeypatch.setattr(settings, "ELEVENLABS_API_KEY", "")
    monkeypatch.setattr(settings, "ELEVENLABS_VOICE_ID", "voice-123")
    monkeypatch.setattr(settings, "CONTEXT_MAX_CHUNKS", 5)
    monkeypatch.setattr(settings, "ANSWER_MAX_CHARS", 2000)


@pytest.fixture
def inline_snippets() -> List[Snippet]:
    return list(knowledge_service.INLINE_SNIPPETS)


@pytest.fixture
def persona_snippets() -> List[Snippet]:
    return [Snippet(**item) for item in PERSONA]


@pytest.fixture
def kb_file(tmp_path, monkeypatch):
    """Point the knowledge base at a temporary copy of the persona snippets."""
    path = tmp_path / "kb_vectors.json"
    path.write_text(json.dumps(PERSONA), encoding="utf-8")
    monkeypatch.setattr(settings, "KNOWLEDGE_BASE_PATH", str(path))
    return path


@pytest.fixture
def fake_upstream(monkeypatch):
    """
    Route a service module's outbound httpx calls to a handler.

    Returns the list of captured requests.
    """

    def install(module, handler: Callable[[httpx.Request], httpx.Response]) -> List[httpx.Request]:
        captured: List[httpx.Request] = []

        def record(request: httpx.Request) -> httpx.Response:
            captured.append(request)
            return handler(request)

        monkeypatch.setattr(
            module,
            "_http_client",
            lambda: httpx.AsyncClient(transport=httpx.MockTransport(record)),
        )
        return captured

    return install
