"""Vector store: chunk persistence and similarity search."""

from rag_backend.boundary.vdb.pg_vector_store import PgVectorStore
from rag_backend.boundary.vdb.search_strategies import (
    BruteForceSearch,
    NativeOperatorSearch,
    SearchStrategySelector,
    SimilaritySearchStrategy,
)
from rag_backend.boundary.vdb.vector_schemas import ChunkInput, VectorSearchResult

__all__ = [
    "BruteForceSearch",
    "ChunkInput",
    "NativeOperatorSearch",
    "PgVectorStore",
    "SearchStrategySelector",
    "SimilaritySearchStrategy",
    "VectorSearchResult",
]
