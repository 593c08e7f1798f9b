"""Public chat endpoint — policy-filtered, retrieval-augmented answers."""

from fastapi import APIRouter, Depends, Response

from gateway.application.schemas import ChatRequest, ChatResponse, SourceSchema
from gateway.application.services import RagService
from gateway.infrastructure.dependencies import get_rag_service

router = APIRouter(tags=["Chat"])


@router.post("/chat", response_model=ChatResponse)
async def chat(
    request: ChatRequest,
    response: Response,
    service: RagService = Depends(get_rag_service),
) -> ChatResponse:
    """Answer a visitor's question from the public document index.

    Requests the content policy denies get a fixed refusal with no sources
    and never reach the model or the index.
    """
    result = await service.chat(request.message)
    response.headers["Cache-Control"] = "no-store"
    return ChatResponse(
        answer=result.answer,
        sources=[
            SourceSchema(
                ref=s.ref,
                title=s.title,
                doc_id=s.doc_id,
                chunk_index=s.chunk_index,
            )
            for s in result.sources
        ],
    )
