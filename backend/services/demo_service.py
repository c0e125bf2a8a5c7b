"""
Offline demo engine: answers from phrase and keyword tables, no model call.
Enabled with DEMO_MODE=true.
"""

import re
from typing import Dict, List, Optional

from loguru import logger
from models.schemas import ChatResponse, Snippet
from services.knowledge_service import find_snippet

NO_DEMO_ANSWER = "Sorry, I don't have a demo answer for that. Try the example quick prompts."

# topic -> snippet id
DEMO_TOPICS: Dict[str, str] = {
    "life": "KB_LIFE",
    "superpower": "KB_SUPERPOWER",
    "grow": "KB_GROW",
    "misconception": "KB_MISCONCEPTION",
    "push": "KB_PUSH",
}

_PHRASES: Dict[str, List[str]] = {
    "life": ["what should we know about", "what should we know", "tell us your life", "give a short bio",
             "who are you in a few sentences"],
    "superpower": ["superpower", "super power", "biggest strength", "number one strength",
                   "what is your strength", "what s your superpower"],
    "grow": ["top 3 areas", "top three areas", "areas you want to grow", "where do you want to improve",
             "what skills do you want to learn"],
    "misconception": ["misconception", "what do people get wrong", "what do coworkers get wrong",
                      "how do coworkers misread you"],
    "push": ["push your boundaries", "how do you push", "how do you challenge yourself", "push boundaries",
             "grow beyond your comfort"],
}

_KEYWORDS: Dict[str, List[str]] = {
    "life": ["life", "story", "bio", "about", "who", "background", "know"],
    "superpower": ["superpower", "super", "strength", "best", "skill"],
    "grow": ["grow", "areas", "improve", "learn", "top", "three", "3"],
    "misconception": ["misconception", "coworker", "people", "wrong", "assume", "think"],
    "push": ["push", "challenge", "boundary", "limits", "improve", "stretch"],
}


def normalize(text: str) -> str:
    text = re.sub(r"[^\w\s]", " ", (text or "").lower())
    return re.sub(r"\s+", " ", text).strip()


def _phrase_topic(q: str) -> Optional[str]:
    for topic, phrases in _PHRASES.items():
        if any(p in q for p in phrases):
            return topic
    return None


def _keyword_topic(q: str) -> Optional[str]:
    """Best keyword-set score, only if it has a hit and beats every other topic."""
    tokens = q.split()
    scores = {topic: sum(1 for kw in kws if kw in tokens) for topic, kws in _KEYWORDS.items()}
    ranked = sorted(scores.items(), key=lambda kv: kv[1], reverse=True)
    if ranked and ranked[0][1] > 0:
        if len(ranked) == 1 or ranked[0][1] > ranked[1][1]:
            return ranked[0][0]
    return None


def _question_topic(q: str) -> Optional[str]:
    if q.startswith(("what should", "what do", "what s")):
        if any(w in q for w in ("know", "about", "your", "life", "story")):
            return "life"
    return None


def demo_response(question: str, snippets: List[Snippet]) -> ChatResponse:
    q = normalize(question)
    topic = _phrase_topic(q) or _keyword_topic(q) or _question_topic(q)

    snippet = find_snippet(snippets, DEMO_TOPICS[topic]) if topic else None
    if snippet is None:
        logger.info(f"[DEMO] no answer for '{q[:40]}'")
        return ChatResponse(answer=NO_DEMO_ANSWER, confidence="low", sources=[])

    logger.info(f"[DEMO] '{q[:40]}' -> {snippet.id}")
    return ChatResponse(answer=snippet.text, confidence="high", sources=[snippet.id])
