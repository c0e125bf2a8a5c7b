"""
Text chat endpoint: answers questions about the persona.
"""

from fastapi import APIRouter
from loguru import logger

from models.schemas import ChatRequest, ChatResponse, ErrorResponse
from services.ai_service import generate_response
from services.errors import InvalidRequestError

router = APIRouter(tags=["chat"])


@router.post(
    "/api/chat",
    response_model=ChatResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
)
async def chat(req: ChatRequest):
    """
    Ask a question. Canned topics answer straight from the knowledge base;
    everything else goes through keyword retrieval and the language model.
    """
    if not req.text or not req.text.strip():
        raise InvalidRequestError("No question text provided")

    response = await generate_response(req.text)
    logger.info(f"Chat: '{req.text[:50]}' -> [{response.confidence}] '{response.answer[:50]}'")
    return response
