"""
Pydantic request / response schemas for the API.
"""

from pydantic import BaseModel, model_validator
from typing import List, Literal, Optional

Confidence = Literal["high", "medium", "low"]
CONFIDENCE_LEVELS = ("high", "medium", "low")


# ── Knowledge Base ───────────────────────────────────────
class Snippet(BaseModel):
    """A labeled fact used to ground answers. Immutable once loaded."""

    id: str
    text: str

    class Config:
        frozen = True
        extra = "ignore"


class KnowledgeListResponse(BaseModel):
    count: int
    snippets: List[Snippet]


class ContextSelection(BaseModel):
    context: str
    sources: List[str]

    @property
    def is_empty(self) -> bool:
        return not self.sources


# ── Chat ─────────────────────────────────────────────────
class ChatRequest(BaseModel):
    text: Optional[str] = None


class ChatResponse(BaseModel):
    answer: str
    confidence: Confidence
    sources: List[str] = []

    @model_validator(mode="after")
    def _low_without_sources(self):
        # An answer with no grounding sources is never more than low confidence
        if not self.sources and self.confidence != "low":
            self.confidence = "low"
        return self


# ── Speech ───────────────────────────────────────────────
class SpeechRequest(BaseModel):
    text: Optional[str] = None


# ── Errors / Health ──────────────────────────────────────
class ErrorResponse(BaseModel):
    error: str
    details: Optional[str] = None


class HealthResponse(BaseModel):
    status: str
    app: str
    version: str
