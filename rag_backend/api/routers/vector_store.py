"""
Vector store API endpoints.

Routes:
- POST /vector-store/chunk - Save chunk with supplied embedding
- POST /vector-store/chunk/generate - Embed text, then save chunk
- POST /vector-store/chunks - Save a batch of chunks
- POST /vector-store/chunks/generate - Embed a batch of texts, then save successes
- DELETE /vector-store/document/{document_id} - Delete a document's chunks
- GET /vector-store/document/{document_id}/chunks-count - Count a document's chunks
- POST /vector-store/search - Thresholded search (pgvector, scan fallback)
- POST /vector-store/similarity-search - Unthresholded exact scan

Dependencies: rag_backend.boundary.vdb, rag_backend.boundary.embedding, rag_backend.models
System role: Vector store HTTP API
"""

import logging

from fastapi import APIRouter, Depends, Query

from rag_backend.api.deps import get_embedder, get_vector_store
from rag_backend.api.routers.error_handling import handle_service_errors
from rag_backend.boundary.embedding import EmbeddingProvider
from rag_backend.boundary.vdb import ChunkInput, PgVectorStore, VectorSearchResult
from rag_backend.models.chunk import (
    BatchChunkItem,
    ChunkCountResponse,
    ChunkResponse,
    FailedChunkResponse,
    GenerateChunkRequest,
    GenerateChunksRequest,
    GenerateChunksResponse,
    SaveChunkRequest,
    SearchRequest,
    with_filename,
)
from rag_backend.models.common import DeleteResponse
from rag_backend.observability.log_utils import log_with_context

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/vector-store", tags=["vector-store"])


@router.post("/chunk", response_model=ChunkResponse)
@handle_service_errors
async def save_chunk(
    request: SaveChunkRequest,
    vector_store: PgVectorStore = Depends(get_vector_store),
) -> ChunkResponse:
    """
    Save one chunk with a caller-supplied embedding.

    ``filename`` is stored on the chunk and folded into its metadata.

    Raises:
        HTTPException(400): Empty text, or missing/empty embedding
        HTTPException(500): Database failure
    """
    log_with_context(
        logger,
        logging.INFO,
        "Save chunk request",
        document_id=request.document_id,
        bot_id=request.bot_id,
        embedding=request.embedding,
    )
    chunk = await vector_store.save(
        request.bot_id,
        request.document_id,
        request.text,
        request.embedding,
        metadata=request.merged_metadata(),
        filename=request.filename,
    )
    return ChunkResponse.from_chunk(chunk)


@router.post("/chunk/generate", response_model=ChunkResponse)
@handle_service_errors
async def generate_and_save_chunk(
    request: GenerateChunkRequest,
    embedder: EmbeddingProvider = Depends(get_embedder),
    vector_store: PgVectorStore = Depends(get_vector_store),
) -> ChunkResponse:
    """
    Embed the chunk text, then save it.

    Raises:
        HTTPException(400): Empty text
        HTTPException(502): Embedding API failure
        HTTPException(503): Embedding provider not configured
    """
    log_with_context(
        logger,
        logging.INFO,
        "Generate-and-save chunk request",
        document_id=request.document_id,
        bot_id=request.bot_id,
        text_length=len(request.text),
    )
    embedding = await embedder.embed(request.text)
    chunk = await vector_store.save(
        request.bot_id,
        request.document_id,
        request.text,
        embedding,
        metadata=request.merged_metadata(),
        filename=request.filename,
    )
    return ChunkResponse.from_chunk(chunk)


@router.post("/chunks", response_model=list[ChunkResponse])
@handle_service_errors
async def save_batch_chunks(
    request: list[BatchChunkItem],
    vector_store: PgVectorStore = Depends(get_vector_store),
) -> list[ChunkResponse]:
    """
    Save a batch of chunks; one invalid item rejects the whole batch.

    Raises:
        HTTPException(400): Any item has empty text or a missing/empty embedding
    """
    chunks = await vector_store.save_batch([item.to_chunk_input() for item in request])
    return [ChunkResponse.from_chunk(chunk) for chunk in chunks]


@router.post("/chunks/generate", response_model=GenerateChunksResponse)
@handle_service_errors
async def generate_and_save_chunks(
    request: GenerateChunksRequest,
    embedder: EmbeddingProvider = Depends(get_embedder),
    vector_store: PgVectorStore = Depends(get_vector_store),
) -> GenerateChunksResponse:
    """
    Embed every text of a document and save the ones that succeeded.

    Items that fail to embed are reported in ``failed`` with their index;
    each saved chunk records its position as ``chunkIndex`` in metadata.

    Raises:
        HTTPException(502): No text could be embedded
        HTTPException(503): Embedding provider not configured
    """
    batch = await embedder.embed_batch(request.texts)

    failed_indexes = {item.index for item in batch.failed}
    succeeded_indexes = [i for i in range(len(request.texts)) if i not in failed_indexes]

    inputs = [
        ChunkInput(
            bot_id=request.bot_id,
            document_id=request.document_id,
            text=embedded.text,
            embedding=embedded.embedding,
            filename=request.filename,
            metadata={
                **with_filename(request.metadata, request.filename),
                "chunkIndex": index,
                "totalChunks": len(request.texts),
            },
        )
        for index, embedded in zip(succeeded_indexes, batch.succeeded)
    ]
    chunks = await vector_store.save_batch(inputs)

    return GenerateChunksResponse(
        chunks=[ChunkResponse.from_chunk(chunk) for chunk in chunks],
        failed=[
            FailedChunkResponse(index=item.index, text=item.text, error=item.error)
            for item in batch.failed
        ],
    )


@router.delete("/document/{document_id}", response_model=DeleteResponse)
@handle_service_errors
async def delete_document_chunks(
    document_id: str,
    bot_id: int | None = Query(default=None, alias="botId"),
    vector_store: PgVectorStore = Depends(get_vector_store),
) -> DeleteResponse:
    """Delete every chunk of a document, optionally scoped to one tenant."""
    deleted = await vector_store.delete_by_document_id(document_id, bot_id)
    return DeleteResponse(
        success=True,
        message=f"Deleted all chunks of document {document_id}",
        deleted=deleted,
    )


@router.get("/document/{document_id}/chunks-count", response_model=ChunkCountResponse)
@handle_service_errors
async def count_document_chunks(
    document_id: str,
    bot_id: int | None = Query(default=None, alias="botId"),
    vector_store: PgVectorStore = Depends(get_vector_store),
) -> ChunkCountResponse:
    """Count chunks of a document, optionally scoped to one tenant."""
    count = await vector_store.count_by_document_id(document_id, bot_id)
    return ChunkCountResponse(count=count, document_id=document_id, bot_id=bot_id)


@router.post("/search", response_model=list[VectorSearchResult])
@handle_service_errors
async def search(
    request: SearchRequest,
    vector_store: PgVectorStore = Depends(get_vector_store),
) -> list[VectorSearchResult]:
    """
    Thresholded similarity search.

    Uses the configured threshold when ``similarityThreshold`` is omitted.

    Raises:
        HTTPException(400): Missing or empty query embedding
    """
    return await vector_store.search(
        request.bot_id,
        request.query_embedding,
        request.k,
        request.similarity_threshold,
    )


@router.post("/similarity-search", response_model=list[VectorSearchResult])
@handle_service_errors
async def similarity_search(
    request: SearchRequest,
    vector_store: PgVectorStore = Depends(get_vector_store),
) -> list[VectorSearchResult]:
    """
    Unthresholded similarity search over every chunk of the tenant.

    Raises:
        HTTPException(400): Missing or empty query embedding
    """
    return await vector_store.similarity_search(
        request.bot_id,
        request.query_embedding,
        request.k,
    )
