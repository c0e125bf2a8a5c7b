"""
Speech synthesis endpoint: returns MP3 audio for an answer.
"""

from fastapi import APIRouter, Response

from models.schemas import ErrorResponse, SpeechRequest
from services.errors import InvalidRequestError
from services.tts_service import clean_speech_text, synthesize_speech

router = APIRouter(tags=["speech"])


@router.post(
    "/api/tts",
    response_class=Response,
    responses={
        200: {"content": {"audio/mpeg": {}}},
        400: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
    },
)
async def tts(req: SpeechRequest):
    if not req.text or not req.text.strip():
        raise InvalidRequestError("No text provided")

    text = clean_speech_text(req.text)
    if not text:
        raise InvalidRequestError("No text provided")

    audio = await synthesize_speech(text)
    return Response(content=audio, media_type="audio/mpeg")
