from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from rag_backend.api.deps.dependencies import get_rag_service
from rag_backend.main import create_app
from rag_backend.models.rag import RagResponse, RagSource, RelevantDocumentsResponse


@pytest.fixture
def client():
    app = create_app()
    return TestClient(app)


@pytest.fixture
def mock_rag_service(client):
    service = AsyncMock()
    client.app.dependency_overrides[get_rag_service] = lambda: service
    yield service
    client.app.dependency_overrides.clear()


def test_query_rag(client, mock_rag_service):
    mock_rag_service.answer.return_value = RagResponse(
        query="q",
        answer="notice",
        context="[Chunk 1] body",
        sources=[
            RagSource(document_id="D1", source="a.pdf", similarity=0.9, text_preview="body")
        ],
    )

    response = client.post("/api/v1/rag/query", json={"botId": 1, "query": "q", "maxResults": 3})

    assert response.status_code == 200
    data = response.json()
    assert data["context"] == "[Chunk 1] body"
    assert data["sources"][0] == {
        "documentId": "D1",
        "source": "a.pdf",
        "similarity": 0.9,
        "textPreview": "body",
    }
    mock_rag_service.answer.assert_awaited_once_with(1, "q", 3)


def test_query_rag_recovery_is_still_200(client, mock_rag_service):
    mock_rag_service.answer.return_value = RagResponse(
        query="q", answer="cannot process", error="vector must have at least 1 dimension"
    )

    response = client.post("/api/v1/rag/query", json={"botId": 1, "query": "q"})

    assert response.status_code == 200
    assert response.json()["error"] == "vector must have at least 1 dimension"
    assert response.json()["sources"] == []


def test_relevant_documents_omits_missing_fields(client, mock_rag_service):
    mock_rag_service.retrieve_relevant_documents.return_value = RelevantDocumentsResponse(
        query="q", error="boom"
    )

    response = client.post("/api/v1/rag/context", json={"botId": 1, "query": "q"})

    assert response.status_code == 200
    assert response.json() == {"query": "q", "error": "boom"}
