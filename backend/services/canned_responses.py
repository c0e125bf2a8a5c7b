"""
Quick canned answers served straight from the knowledge base.

Rules are checked in order against the lowercased question; the first rule
whose pattern matches and whose snippet exists wins.
"""

import re
from typing import List, NamedTuple, Optional, Tuple

from loguru import logger
from models.schemas import ChatResponse, Snippet
from services.knowledge_service import find_snippet


class CannedRule(NamedTuple):
    name: str
    pattern: re.Pattern
    snippet_ids: Tuple[str, ...]  # first one present in the KB is used


CANNED_RULES: List[CannedRule] = [
    CannedRule(
        "life",
        re.compile(r"(what should we know|life story|who are you|bio|tell me about yourself)"),
        ("KB_LIFE",),
    ),
    CannedRule(
        "superpower",
        re.compile(r"(superpower|super power|strength|best skill)"),
        ("KB_SUPERPOWER",),
    ),
    CannedRule(
        "grow",
        re.compile(r"(top 3|areas to grow|grow|improve|where do you want to grow)"),
        ("KB_GROW",),
    ),
    CannedRule(
        "push",
        re.compile(r"(push your boundaries|push boundaries|challenge yourself|push your limits|stretch yourself)"),
        ("KB_PUSH",),
    ),
    CannedRule(
        "misconception",
        re.compile(r"(misconception|what do people get wrong|coworker|misread you)"),
        ("KB_MISCONCEPTION",),
    ),
    CannedRule(
        "interests",
        re.compile(r"(interests|hobbies|outside of work|what do you like)"),
        ("KB_PERSONAL", "KB_PERSONAL2"),
    ),
]


def _resolve(rule: CannedRule, snippets: List[Snippet]) -> Optional[Snippet]:
    for snippet_id in rule.snippet_ids:
        snippet = find_snippet(snippets, snippet_id)
        if snippet is not None:
            return snippet
    return None


def match_canned(
    question: str,
    snippets: List[Snippet],
    rules: List[CannedRule] = CANNED_RULES,
) -> Optional[ChatResponse]:
    """Return a high-confidence answer for the first matching rule, else None."""
    q = (question or "").lower()
    for rule in rules:
        if not rule.pattern.search(q):
            continue
        snippet = _resolve(rule, snippets)
        if snippet is None:
            continue
        logger.info(f"Canned answer '{rule.name}' -> {snippet.id}")
        return ChatResponse(answer=snippet.text, confidence="high", sources=[snippet.id])
    return None
