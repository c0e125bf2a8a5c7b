"""
Keyword retrieval over the knowledge base (RAG context selection).

Snippets are scored by how many distinct query tokens (longer than two
characters) occur as substrings of their lowercased text. The identity
anchors are always included ahead of the scored hits.
"""

import re
from typing import Iterable, List, Optional

from models.schemas import ContextSelection, Snippet

ANCHOR_IDS = ("KB_LIFE", "KB_SUPERPOWER")
MIN_TOKEN_LENGTH = 3

_SPLIT = re.compile(r"\W+")


def tokenize(query: str) -> List[str]:
    """Lowercase, split on non-word runs, drop empties and duplicates (first-seen order)."""
    tokens = _SPLIT.split((query or "").lower())
    return list(dict.fromkeys(t for t in tokens if t))


def score_snippet(snippet: Snippet, tokens: Iterable[str]) -> int:
    text = snippet.text.lower()
    return sum(1 for tok in tokens if len(tok) >= MIN_TOKEN_LENGTH and tok in text)


def select_context(
    query: str,
    snippets: List[Snippet],
    max_chunks: Optional[int] = 5,
    anchor_ids: Iterable[str] = ANCHOR_IDS,
) -> ContextSelection:
    """
    Pick the anchors plus the best-scoring snippets for a query.

    Ties keep knowledge-base order (sorted() is stable). A max_chunks of
    None or 0 keeps every scored hit. Returns an empty selection only when
    there are no anchors and nothing scored.
    """
    if max_chunks is not None and max_chunks < 0:
        raise ValueError(f"max_chunks must be >= 0, got {max_chunks}")

    tokens = tokenize(query)

    scored = []
    for snippet in snippets:
        score = score_snippet(snippet, tokens)
        if score > 0:
            scored.append((score, snippet))
    scored = sorted(scored, key=lambda pair: pair[0], reverse=True)
    hits = [snippet for _, snippet in scored]
    if max_chunks:
        hits = hits[:max_chunks]

    by_id = {s.id: s for s in snippets}
    anchors = [by_id[a] for a in anchor_ids if a in by_id]

    selected: List[Snippet] = []
    seen = set()
    for snippet in anchors + hits:
        if snippet.id in seen:
            continue
        seen.add(snippet.id)
        selected.append(snippet)

    return ContextSelection(
        context="\n\n".join(f"[{s.id}] {s.text}" for s in selected),
        sources=[s.id for s in selected],
    )
