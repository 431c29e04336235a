"""
Remote embedding providers.

Turns text into a fixed-dimension vector through an HTTP inference API.
Each call validates its input, posts a provider-specific payload, checks
the response shape and coerces the vector to floats. Transport errors,
non-2xx responses and malformed payloads are retried with exponential
backoff and surface as EmbeddingProviderError once attempts run out.

Providers:
- HuggingFaceEmbeddingProvider: feature-extraction pipeline, bearer token
- GoogleEmbeddingProvider: Generative Language embedContent, API key query param

Dependencies: httpx, tenacity (via rag_backend.core.retry), rag_backend.configs
System role: Embedding generation adapter
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

import httpx

from rag_backend.configs.embedding import EmbeddingSettings
from rag_backend.core.exceptions import (
    EmbeddingNotConfiguredError,
    EmbeddingProviderError,
    RagBackendException,
    ValidationError,
)
from rag_backend.core.retry import RetryPolicy
from rag_backend.core.vectors import coerce_vector
from rag_backend.observability.log_utils import preview_text

logger = logging.getLogger(__name__)


@dataclass
class EmbeddingRequest:
    """Provider-specific HTTP request for one text."""

    url: str
    json: dict[str, Any]
    headers: dict[str, str] = field(default_factory=dict)
    params: dict[str, str] = field(default_factory=dict)


@dataclass
class EmbeddedText:
    """A text and its embedding."""

    text: str
    embedding: list[float]


@dataclass
class FailedEmbedding:
    """A batch item that could not be embedded."""

    index: int
    text: str
    error: str


@dataclass
class BatchEmbeddingResult:
    """Outcome of embed_batch: successes in input order plus recorded failures."""

    succeeded: list[EmbeddedText] = field(default_factory=list)
    failed: list[FailedEmbedding] = field(default_factory=list)


class EmbeddingProvider(ABC):
    """
    Base class for HTTP embedding providers.

    Subclasses describe the wire format (build_request / extract_vector);
    validation, retries and batching live here.
    """

    name: str = "base"

    def __init__(
        self,
        settings: EmbeddingSettings,
        client: httpx.AsyncClient | None = None,
        retry_policy: RetryPolicy | None = None,
    ) -> None:
        """
        Initialize provider.

        Args:
            settings: Embedding configuration (endpoint, credentials, timeout, retry)
            client: Optional shared HTTP client; created from settings if None
            retry_policy: Optional retry policy; built from settings if None
        """
        self._settings = settings
        self._endpoint = settings.resolved_endpoint
        self._api_key = settings.api_key.get_secret_value() if settings.api_key else ""
        self._owns_client = client is None
        if client is None:
            if not settings.verify_ssl:
                logger.warning(
                    "TLS certificate verification is disabled for the embedding API",
                    extra={"provider": self.name, "endpoint": self._endpoint},
                )
            client = httpx.AsyncClient(timeout=settings.timeout, verify=settings.verify_ssl)
        self._client = client
        self._retry = retry_policy or RetryPolicy(
            max_attempts=settings.max_attempts,
            base_delay=settings.retry_base_delay,
            retry_on=(EmbeddingProviderError,),
        )

    @property
    def is_configured(self) -> bool:
        """Check if an API key/token is available."""
        return bool(self._api_key)

    @abstractmethod
    def build_request(self, text: str) -> EmbeddingRequest:
        """Build the provider-specific request for ``text``."""

    @abstractmethod
    def extract_vector(self, payload: Any) -> list[Any]:
        """
        Pull the raw vector out of a decoded response body.

        Raises:
            EmbeddingProviderError: If the payload does not hold a non-empty vector
        """

    def _ensure_configured(self) -> None:
        if not self.is_configured:
            raise EmbeddingNotConfiguredError(
                f"Embedding provider '{self.name}' is not configured: set EMBEDDING_API_KEY",
                provider=self.name,
            )

    async def embed(self, text: str) -> list[float]:
        """
        Generate the embedding for one text.

        Args:
            text: Text to embed; must be non-empty after stripping

        Returns:
            list[float]: Embedding vector

        Raises:
            ValidationError: Empty text or non-numeric vector element (no retry)
            EmbeddingNotConfiguredError: Missing API key (no network call)
            EmbeddingProviderError: API failure after all attempts
        """
        if text is None or not text.strip():
            raise ValidationError("Text to embed must not be empty", field="text")
        self._ensure_configured()

        logger.debug(
            f"Creating embedding for text: {preview_text(text, 50)!r}",
            extra={"provider": self.name, "text_length": len(text)},
        )
        return await self._retry.call(lambda: self._request_embedding(text))

    async def _request_embedding(self, text: str) -> list[float]:
        """Single HTTP attempt."""
        request = self.build_request(text)
        try:
            response = await self._client.post(
                request.url,
                json=request.json,
                headers=request.headers,
                params=request.params or None,
            )
        except httpx.HTTPError as e:
            raise EmbeddingProviderError(
                f"Embedding request failed: {type(e).__name__}: {e}",
                provider=self.name,
            ) from e

        if not response.is_success:
            logger.error(
                f"Embedding API returned HTTP {response.status_code}",
                extra={"provider": self.name, "body": response.text[:500]},
            )
            raise EmbeddingProviderError(
                f"Embedding API returned HTTP {response.status_code}",
                provider=self.name,
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise EmbeddingProviderError(
                "Embedding API returned a non-JSON body",
                provider=self.name,
            ) from e

        vector = coerce_vector(self.extract_vector(payload), policy="reject")
        logger.debug(
            f"Embedding created with {len(vector)} dimensions",
            extra={"provider": self.name},
        )
        return vector

    async def embed_batch(self, texts: list[str]) -> BatchEmbeddingResult:
        """
        Embed several texts, recording per-item failures.

        Items run sequentially unless batch_concurrency > 1, in which case at
        most that many requests are in flight. Successes keep input order.

        Args:
            texts: Texts to embed

        Returns:
            BatchEmbeddingResult: Successful pairs and failed items

        Raises:
            EmbeddingNotConfiguredError: Missing API key
            EmbeddingProviderError: If no item succeeded
        """
        logger.info(f"Creating embeddings for batch of {len(texts)} texts")
        self._ensure_configured()

        outcomes: list[EmbeddedText | FailedEmbedding] = []
        concurrency = self._settings.batch_concurrency

        if concurrency <= 1:
            for index, text in enumerate(texts):
                outcomes.append(await self._embed_item(index, text))
        else:
            semaphore = asyncio.Semaphore(concurrency)

            async def bounded(index: int, text: str) -> EmbeddedText | FailedEmbedding:
                async with semaphore:
                    return await self._embed_item(index, text)

            outcomes = list(
                await asyncio.gather(*(bounded(i, t) for i, t in enumerate(texts)))
            )

        result = BatchEmbeddingResult()
        for outcome in outcomes:
            if isinstance(outcome, EmbeddedText):
                result.succeeded.append(outcome)
            else:
                result.failed.append(outcome)

        if not result.succeeded:
            raise EmbeddingProviderError(
                "Batch produced no successful embeddings",
                provider=self.name,
                details={"failed": len(result.failed)},
            )

        if result.failed:
            logger.warning(
                f"Batch embedding finished with {len(result.failed)} failed item(s)",
                extra={"succeeded": len(result.succeeded), "failed": len(result.failed)},
            )
        return result

    async def _embed_item(self, index: int, text: str) -> EmbeddedText | FailedEmbedding:
        try:
            return EmbeddedText(text=text, embedding=await self.embed(text))
        except RagBackendException as e:
            logger.warning(
                f"Embedding failed for batch item {index}: {e.message}",
                extra={"index": index, "error_type": type(e).__name__},
            )
            return FailedEmbedding(index=index, text=text, error=e.message)

    async def aclose(self) -> None:
        """Close the HTTP client if this provider created it."""
        if self._owns_client and not self._client.is_closed:
            await self._client.aclose()


class HuggingFaceEmbeddingProvider(EmbeddingProvider):
    """Hugging Face Inference API feature-extraction pipeline."""

    name = "huggingface"

    def build_request(self, text: str) -> EmbeddingRequest:
        return EmbeddingRequest(
            url=f"{self._endpoint.rstrip('/')}/{self._settings.model}",
            json={"inputs": text},
            headers={
                "Authorization": f"Bearer {self._api_key}",
                "Content-Type": "application/json",
            },
        )

    def extract_vector(self, payload: Any) -> list[Any]:
        # 1-D [..] or 2-D [[..]] depending on the model
        if isinstance(payload, list) and payload:
            first = payload[0]
            if isinstance(first, list):
                if first:
                    return first
            else:
                return payload
        raise EmbeddingProviderError(
            "Invalid response format from Hugging Face API",
            provider=self.name,
        )


class GoogleEmbeddingProvider(EmbeddingProvider):
    """Google Generative Language embedContent endpoint."""

    name = "google"

    def build_request(self, text: str) -> EmbeddingRequest:
        return EmbeddingRequest(
            url=self._endpoint,
            json={"content": {"parts": [{"text": text}]}},
            headers={"Content-Type": "application/json"},
            params={"key": self._api_key},
        )

    def extract_vector(self, payload: Any) -> list[Any]:
        values = None
        if isinstance(payload, dict):
            embedding = payload.get("embedding")
            if isinstance(embedding, dict):
                values = embedding.get("values")
        if not isinstance(values, list) or not values:
            raise EmbeddingProviderError(
                "Invalid response format from Google Generative Language API",
                provider=self.name,
            )
        return values
