"""RAG orchestration — the ingest and chat use cases.

Ingest:  documents → chunks → embeddings → blob store + vector records → upsert
Chat:    message → policy → embed → retrieve → fetch snippets → prompt
         → generate → sanitize → answer + sources

Every external call is awaited in order; each step consumes the previous
step's output.
"""

import logging
import time

from gateway.application.interfaces import (
    BlobStore,
    ChatProvider,
    EmbeddingProvider,
    VectorIndex,
)
from gateway.application.services.content_policy import ContentPolicy
from gateway.application.services.prompts import (
    build_prompt,
    refusal_message,
    system_policy,
)
from gateway.application.services.text_chunker import TextChunker
from gateway.domain.entities import (
    ChatAnswer,
    ChatMessage,
    Chunk,
    Document,
    IngestResult,
    Snippet,
    SourceRef,
    VectorMatch,
    VectorRecord,
)
from gateway.domain.exceptions import ClientError, UpstreamServiceError
from gateway.infrastructure.logging.colored_logger import PipelineLogger, PipelineStage

logger = logging.getLogger(__name__)
plog = PipelineLogger("RagService")

_MAX_DOC_ID_LENGTH = 80
_MAX_TITLE_LENGTH = 160
_DEFAULT_SNIPPET_TITLE = "Public"


def _chunk_index(value: object) -> int:
    """Chunk index from match metadata; anything non-numeric counts as 0."""
    try:
        return int(value or 0)
    except (TypeError, ValueError):
        return 0


class RagService:
    """Application service — composes chunker, embeddings, index, blobs and generation."""

    def __init__(
        self,
        *,
        embedding_provider: EmbeddingProvider,
        vector_index: VectorIndex,
        blob_store: BlobStore,
        chat_provider: ChatProvider,
        text_model: str,
        policy: ContentPolicy | None = None,
        chunker: TextChunker | None = None,
        top_k: int = 6,
        max_input: int = 2000,
        max_output: int = 4500,
        snippet_max_chars: int = 1400,
        language: str = "ar",
    ):
        self._embeddings = embedding_provider
        self._index = vector_index
        self._blobs = blob_store
        self._chat = chat_provider
        self._text_model = text_model
        self._policy = policy or ContentPolicy()
        self._chunker = chunker or TextChunker()
        self._top_k = top_k
        self._max_input = max_input
        self._max_output = max_output
        self._snippet_max_chars = snippet_max_chars
        self._language = language

    # ── Ingest ──────────────────────────────────────────────────────

    async def ingest(self, documents: list[Document]) -> IngestResult:
        """Chunk, embed and index a batch of documents.

        Chunk text goes to the blob store; only pointer metadata goes to the
        vector index. All vector records are upserted in a single batch after
        every document has been processed. The first failure aborts the call.
        """
        if not documents:
            raise ClientError("No docs")

        start = time.monotonic()
        plog.step_start(PipelineStage.PIPELINE, "Ingesting documents", docs=len(documents))

        records: list[VectorRecord] = []
        stored_chunks = 0

        for document in documents:
            chunks = self._chunk_document(document)
            if not chunks:
                plog.detail(f"Skipping '{document.id}': no chunks above the length floor")
                continue

            with plog.timed_step(
                PipelineStage.EMBED, f"Embedding '{chunks[0].doc_id}'", chunks=len(chunks)
            ):
                vectors = await self._embeddings.generate_embeddings(
                    [c.text for c in chunks]
                )
            self._check_vectors(vectors, expected=len(chunks))

            with plog.timed_step(PipelineStage.BLOB, f"Storing chunk text for '{chunks[0].doc_id}'"):
                for chunk, vector in zip(chunks, vectors, strict=True):
                    await self._blobs.put_text(chunk.blob_key, chunk.text)
                    stored_chunks += 1
                    records.append(VectorRecord.from_chunk(chunk, vector))

        upserted = 0
        if records:
            with plog.timed_step(PipelineStage.UPSERT, "Upserting vectors", records=len(records)):
                upserted = await self._index.upsert(records)

        duration_ms = int((time.monotonic() - start) * 1000)
        plog.step_complete(PipelineStage.COMPLETE, "Ingestion finished")
        plog.stats(chunks=stored_chunks, vectors=upserted, duration_ms=duration_ms)

        return IngestResult(stored_chunks=stored_chunks, upserted_vectors=upserted)

    def _chunk_document(self, document: Document) -> list[Chunk]:
        doc_id = str(document.id or "doc")[:_MAX_DOC_ID_LENGTH]
        title = str(document.title or doc_id)[:_MAX_TITLE_LENGTH]
        texts = self._chunker.split(str(document.text or ""))
        return [
            Chunk(doc_id=doc_id, title=title, index=i, text=text)
            for i, text in enumerate(texts)
        ]

    def _check_vectors(self, vectors: list[list[float]], *, expected: int) -> None:
        """Reject embedding batches that cannot be paired with their chunks."""
        if len(vectors) != expected:
            raise UpstreamServiceError(
                provider="embeddings",
                status_code=500,
                message=f"Expected {expected} vectors, got {len(vectors)}",
            )
        dimensions = self._embeddings.dimensions
        for vector in vectors:
            if len(vector) != dimensions:
                raise UpstreamServiceError(
                    provider="embeddings",
                    status_code=500,
                    message=f"Expected {dimensions}-dimensional vectors, got {len(vector)}",
                )

    # ── Chat ────────────────────────────────────────────────────────

    async def chat(self, message: str) -> ChatAnswer:
        """Answer one question from retrieved public snippets."""
        question = str(message or "")[: self._max_input].strip()
        if not question:
            raise ClientError("Empty message")

        if self._policy.is_denied(question):
            plog.step_complete(PipelineStage.POLICY, "Request denied by content policy")
            return ChatAnswer(answer=refusal_message(self._language), refused=True)

        with plog.timed_step(PipelineStage.EMBED, "Embedding question"):
            query_vector = await self._embeddings.generate_query_embedding(question)

        with plog.timed_step(PipelineStage.RETRIEVE, "Querying vector index", top_k=self._top_k):
            matches = await self._index.query(query_vector, top_k=self._top_k)

        snippets = await self._load_snippets(matches[: self._top_k])
        plog.detail("Snippets resolved", matches=len(matches), snippets=len(snippets))

        prompt = build_prompt(question, snippets, self._language)
        with plog.timed_step(PipelineStage.GENERATE, "Generating answer", model=self._text_model):
            result = await self._chat.complete(
                messages=[
                    ChatMessage(role="system", content=system_policy(self._language)),
                    ChatMessage(role="user", content=prompt),
                ],
                model=self._text_model,
            )

        answer = self._policy.sanitize(result.content)[: self._max_output]
        sources = [
            SourceRef(
                ref=f"#{i}",
                title=s.title,
                doc_id=s.doc_id,
                chunk_index=s.chunk_index,
            )
            for i, s in enumerate(snippets, start=1)
        ]
        return ChatAnswer(answer=answer, sources=sources)

    async def _load_snippets(self, matches: list[VectorMatch]) -> list[Snippet]:
        """Fetch chunk text for each match; unresolvable matches are skipped."""
        snippets: list[Snippet] = []
        for match in matches:
            meta = match.metadata or {}
            blob_key = meta.get("blobKey")
            if not blob_key:
                continue

            try:
                text = await self._blobs.get_text(str(blob_key))
            except UpstreamServiceError as exc:
                logger.warning("Skipping match %s, blob fetch failed: %s", match.id, exc)
                continue
            if text is None:
                continue

            snippets.append(
                Snippet(
                    title=str(meta.get("title") or meta.get("docId") or _DEFAULT_SNIPPET_TITLE),
                    doc_id=str(meta.get("docId") or ""),
                    chunk_index=_chunk_index(meta.get("chunkIndex")),
                    text=text[: self._snippet_max_chars],
                )
            )
        return snippets
