"""
Read-only view of the loaded knowledge base.
"""

from fastapi import APIRouter

from models.schemas import KnowledgeListResponse
from services.knowledge_service import load_knowledge_base

router = APIRouter(prefix="/api/knowledge", tags=["knowledge"])


@router.get("", response_model=KnowledgeListResponse)
async def list_snippets():
    snippets = load_knowledge_base()
    return KnowledgeListResponse(count=len(snippets), snippets=snippets)
