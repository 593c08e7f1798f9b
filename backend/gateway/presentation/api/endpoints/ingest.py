"""Admin ingestion endpoint — turns raw documents into retrievable chunks."""

import json

from fastapi import APIRouter, Depends, Request
from pydantic import ValidationError

from gateway.application.schemas import IngestRequest, IngestResponse
from gateway.application.services import RagService
from gateway.domain.entities import Document
from gateway.domain.exceptions import ClientError
from gateway.infrastructure.dependencies import get_rag_service, require_admin

router = APIRouter(prefix="/admin", tags=["Admin"])


async def _parse_ingest_request(request: Request) -> IngestRequest:
    """Parse the body only after the bearer token has been checked."""
    try:
        payload = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise ClientError("Invalid JSON")

    docs = payload.get("docs") if isinstance(payload, dict) else None
    if not isinstance(docs, list) or not docs:
        raise ClientError("No docs")
    try:
        return IngestRequest.model_validate({"docs": docs})
    except ValidationError:
        raise ClientError("Invalid docs")


@router.post(
    "/ingest",
    response_model=IngestResponse,
    dependencies=[Depends(require_admin)],
)
async def ingest(
    request: Request,
    service: RagService = Depends(get_rag_service),
) -> IngestResponse:
    """Chunk, embed and index a batch of public documents.

    Body: ``{"docs": [{"id", "title", "text"}, ...]}``. Chunk text is written
    to the blob store; the vector index receives pointers only.
    """
    body = await _parse_ingest_request(request)

    documents = [
        Document(
            id="" if d.id is None else str(d.id),
            title=d.title or "",
            text=d.text or "",
        )
        for d in body.docs or []
    ]
    result = await service.ingest(documents)
    return IngestResponse(
        stored_chunks=result.stored_chunks,
        upserted_vectors=result.upserted_vectors,
    )
