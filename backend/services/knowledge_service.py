"""
Static knowledge base of persona snippets, loaded once per process.
"""

import json
import threading
from typing import List, Optional
from pydantic import TypeAdapter, ValidationError
from config import settings
from loguru import logger

from models.schemas import Snippet

# Used when the snippet file is missing or unreadable
INLINE_SNIPPETS: List[Snippet] = [
    Snippet(id="KB_LIFE", text="I am a fourth-year engineering student from Bengaluru who blends design and code."),
    Snippet(id="KB_SUPERPOWER", text="Superpower: creative problem-solving; combines design thinking with code to ship prototypes fast."),
    Snippet(id="KB_GROW", text="Wants to grow in backend systems & deployments, advanced ML/LLM tooling and RAG, and system design."),
    Snippet(id="KB_SKILLS", text="Skills: HTML, CSS, JavaScript, React, Node.js; Figma and UI/UX design interest."),
    Snippet(id="KB_TRAITS", text="I am creative, a fast learner, and enjoy working in groups."),
    Snippet(id="KB_AI", text="I have been dabbling in AI/ML because it is interesting and opens new ways to build helpful tools."),
]

_snippet_list = TypeAdapter(List[Snippet])

# Process-wide cache, read-only once populated
_snippets: Optional[List[Snippet]] = None
_lock = threading.Lock()


def _read_snippets(path: str) -> List[Snippet]:
    with open(path, encoding="utf-8") as f:
        raw = json.load(f)
    snippets = _snippet_list.validate_python(raw)
    ids = [s.id for s in snippets]
    if len(ids) != len(set(ids)):
        raise ValueError("duplicate snippet ids")
    return snippets


def load_knowledge_base() -> List[Snippet]:
    """Return the cached snippets, reading the file on first use."""
    global _snippets

    if _snippets is not None:
        return _snippets

    with _lock:
        if _snippets is None:
            path = settings.KNOWLEDGE_BASE_PATH
            try:
                _snippets = _read_snippets(path)
                logger.info(f"Loaded {len(_snippets)} knowledge snippets from {path}")
            except (OSError, ValueError, ValidationError) as e:
                logger.warning(f"KB load failed, using inline fallback: {e}")
                _snippets = list(INLINE_SNIPPETS)
    return _snippets


def reset_knowledge_base():
    """Drop the cached snippets so the next call reloads them."""
    global _snippets
    with _lock:
        _snippets = None


def find_snippet(snippets: List[Snippet], snippet_id: str) -> Optional[Snippet]:
    for snippet in snippets:
        if snippet.id == snippet_id:
            return snippet
    return None
