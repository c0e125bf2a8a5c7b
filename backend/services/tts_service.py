"""
Text-to-speech service using ElevenLabs API.
"""

import re
import httpx
from config import settings
from loguru import logger

from services.errors import ConfigurationError, UpstreamError

# Removed in this order; repeated until nothing matches
_SPEECH_NOISE = [
    re.compile(r"```(?:json)?"),
    re.compile(r"[{}]"),
    re.compile(r'"answer"\s*:'),
    re.compile(r"Confidence: low"),
    re.compile(r"\\n"),
]


def clean_speech_text(text: str) -> str:
    """Strip JSON and markdown leftovers that should not be read aloud."""
    cleaned = text or ""
    while True:
        previous = cleaned
        for pattern in _SPEECH_NOISE:
            cleaned = pattern.sub("", cleaned)
        if cleaned == previous:
            break
    return cleaned.strip()


def _http_client() -> httpx.AsyncClient:
    return httpx.AsyncClient(timeout=settings.UPSTREAM_TIMEOUT_SECONDS)


async def synthesize_speech(text: str, voice_id: str = None) -> bytes:
    """
    Convert text to speech audio bytes using ElevenLabs.
    Returns MP3 audio bytes.
    """
    voice_id = voice_id or settings.ELEVENLABS_VOICE_ID

    if not settings.ELEVENLABS_API_KEY:
        raise ConfigurationError("ELEVENLABS_API_KEY not set")

    url = f"{settings.ELEVENLABS_BASE_URL.rstrip('/')}/{voice_id}"

    headers = {
        "xi-api-key": settings.ELEVENLABS_API_KEY,
        "Content-Type": "application/json",
        "Accept": "audio/mpeg",
    }

    payload = {
        "text": text,
        "voice_settings": {
            "stability": settings.ELEVENLABS_STABILITY,
            "similarity_boost": settings.ELEVENLABS_SIMILARITY_BOOST,
        },
        "model_id": settings.ELEVENLABS_MODEL_ID,
    }

    async with _http_client() as client:
        response = await client.post(url, headers=headers, json=payload)

    if response.is_error:
        logger.error(f"TTS error {response.status_code}: {response.text}")
        raise UpstreamError("TTS failed", response.text, response.status_code)

    logger.info(f"TTS synthesized {len(response.content)} bytes")
    return response.content
