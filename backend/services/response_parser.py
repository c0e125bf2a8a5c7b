"""
Parse the model's raw text into a chat answer.

The model is asked for a JSON object but nothing guarantees it, so the
result is either a validated envelope or a low-confidence fallback built
from the raw text.
"""

import json
import re
from typing import Any, List, Literal, Union

from loguru import logger
from pydantic import BaseModel, ValidationError, model_validator

from models.schemas import CONFIDENCE_LEVELS, ChatResponse, Confidence
from services.prompt_service import NO_INFO_ANSWER

DEFAULT_MAX_CHARS = 2000

_JSON_OBJECT = re.compile(r"\{.*\}", re.DOTALL)


def _as_text(value: Any) -> str:
    if isinstance(value, str):
        return value
    if not value:
        return ""
    return json.dumps(value)


class ModelEnvelope(BaseModel):
    """The {answer, confidence, sources} object as the model returned it, normalized."""

    answer: str
    confidence: Confidence
    sources: List[str]

    @model_validator(mode="before")
    @classmethod
    def _normalize(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            raise ValueError("model output is not a JSON object")

        raw_sources = data.get("sources")
        if isinstance(raw_sources, list):
            sources = [s if isinstance(s, str) else json.dumps(s) for s in raw_sources]
        elif raw_sources:
            sources = [_as_text(raw_sources)]
        else:
            sources = []

        confidence = data.get("confidence")
        if not sources:
            confidence = "low"
        elif confidence not in CONFIDENCE_LEVELS:
            confidence = "medium"

        return {"answer": _as_text(data.get("answer")), "confidence": confidence, "sources": sources}


class ParsedAnswer(BaseModel):
    kind: Literal["parsed"] = "parsed"
    response: ChatResponse


class FallbackAnswer(BaseModel):
    kind: Literal["fallback"] = "fallback"
    response: ChatResponse
    reason: str


ParseResult = Union[ParsedAnswer, FallbackAnswer]


def fallback_answer(raw: str, reason: str, max_chars: int = DEFAULT_MAX_CHARS) -> FallbackAnswer:
    text = (raw or "").strip()[:max_chars]
    return FallbackAnswer(
        response=ChatResponse(answer=text or NO_INFO_ANSWER, confidence="low", sources=[]),
        reason=reason,
    )


def parse_model_output(raw: str, max_chars: int = DEFAULT_MAX_CHARS) -> ParseResult:
    match = _JSON_OBJECT.search(raw or "")
    if not match:
        return fallback_answer(raw, "no JSON object in model output", max_chars)

    try:
        envelope = ModelEnvelope.model_validate(json.loads(match.group(0)))
    except (ValueError, ValidationError) as e:
        logger.error(f"JSON parse error from model output: {e}")
        return fallback_answer(raw, f"invalid JSON object: {e}", max_chars)

    return ParsedAnswer(
        response=ChatResponse(
            answer=envelope.answer[:max_chars],
            confidence=envelope.confidence,
            sources=envelope.sources,
        )
    )
