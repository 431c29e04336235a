"""Application layer: orchestration over embedding and vector store boundaries."""
