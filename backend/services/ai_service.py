"""
Persona answer engine: canned rules, keyword RAG, then the language model.

The model backend is Hugging Face Inference (default) or OpenAI, picked by
MODEL_PROVIDER. The raw generation is parsed by services.response_parser.
"""

import json
from typing import Any, List, Optional
from urllib.parse import quote

import httpx
import openai
from config import settings
from loguru import logger

from models.schemas import ChatResponse, Snippet
from services.canned_responses import match_canned
from services.demo_service import demo_response
from services.errors import ConfigurationError, UpstreamError
from services.knowledge_service import load_knowledge_base
from services.prompt_service import NO_INFO_ANSWER, build_prompt
from services.response_parser import FallbackAnswer, parse_model_output
from services.retrieval_service import select_context

client = None


def _http_client() -> httpx.AsyncClient:
    return httpx.AsyncClient(timeout=settings.UPSTREAM_TIMEOUT_SECONDS)


def _get_openai_client():
    global client
    if client is None:
        client = openai.AsyncOpenAI(api_key=settings.OPENAI_API_KEY)
    return client


def check_model_config():
    """Raise ConfigurationError if the selected provider has no API key."""
    provider = settings.MODEL_PROVIDER.lower()
    if provider == "huggingface":
        if not settings.HF_API_TOKEN or not settings.HF_MODEL:
            raise ConfigurationError("Server not configured: set HF_API_TOKEN and HF_MODEL in env vars.")
    elif provider == "openai":
        if not settings.OPENAI_API_KEY:
            raise ConfigurationError("Server not configured: set OPENAI_API_KEY in env vars.")
    else:
        raise ConfigurationError(f"Server not configured: unknown MODEL_PROVIDER '{settings.MODEL_PROVIDER}'.")


def _as_text(value: Any) -> str:
    return value if isinstance(value, str) else json.dumps(value)


def extract_generated_text(data: Any) -> str:
    """Normalize the Inference API payload (list, dict or bare string) to text."""
    if isinstance(data, list) and data:
        data = data[0]
    if isinstance(data, dict):
        return _as_text(data.get("generated_text") or data.get("output") or data)
    return _as_text(data)


async def _generate_huggingface(prompt: str) -> str:
    url = f"{settings.HF_BASE_URL.rstrip('/')}/{quote(settings.HF_MODEL, safe='')}"
    headers = {
        "Authorization": f"Bearer {settings.HF_API_TOKEN}",
        "Content-Type": "application/json",
    }
    payload = {
        "inputs": prompt,
        "parameters": {
            "max_new_tokens": settings.MODEL_MAX_TOKENS,
            "temperature": settings.MODEL_TEMPERATURE,
        },
    }

    async with _http_client() as http:
        response = await http.post(url, headers=headers, json=payload)

    if response.is_error:
        logger.error(f"HF error {response.status_code}: {response.text}")
        raise UpstreamError("Model inference failed", response.text, response.status_code)

    try:
        data = response.json()
    except ValueError:
        data = response.text
    return extract_generated_text(data)


async def _generate_openai(prompt: str) -> str:
    ai_client = _get_openai_client()
    try:
        response = await ai_client.chat.completions.create(
            model=settings.OPENAI_MODEL,
            messages=[{"role": "user", "content": prompt}],
            temperature=settings.MODEL_TEMPERATURE,
            max_tokens=settings.MODEL_MAX_TOKENS,
        )
    except openai.APIStatusError as e:
        logger.error(f"OpenAI error {e.status_code}: {e.message}")
        raise UpstreamError("Model inference failed", e.message, e.status_code)
    return (response.choices[0].message.content or "").strip()


async def generate(prompt: str) -> str:
    """Send the assembled prompt to the configured model and return its raw text."""
    check_model_config()
    if settings.MODEL_PROVIDER.lower() == "openai":
        return await _generate_openai(prompt)
    return await _generate_huggingface(prompt)


async def generate_response(question: str, snippets: Optional[List[Snippet]] = None) -> ChatResponse:
    """
    Answer a question about the persona.

    1. Canned rules (no model call)
    2. Demo engine, if DEMO_MODE is on
    3. Keyword retrieval; no context means "cannot answer"
    4. Prompt the model and parse its JSON answer
    """
    if snippets is None:
        snippets = load_knowledge_base()

    canned = match_canned(question, snippets)
    if canned is not None:
        return canned

    if settings.DEMO_MODE:
        return demo_response(question, snippets)

    selection = select_context(question, snippets, max_chunks=settings.CONTEXT_MAX_CHUNKS)
    if selection.is_empty:
        return ChatResponse(answer=NO_INFO_ANSWER, confidence="low", sources=[])
    logger.info(f"KB sources used: {', '.join(selection.sources)}")

    prompt = build_prompt(selection.context, question)
    generated = await generate(prompt)

    result = parse_model_output(generated, max_chars=settings.ANSWER_MAX_CHARS)
    if isinstance(result, FallbackAnswer):
        logger.warning(f"Model output fell back to raw text: {result.reason}")
    return result.response
