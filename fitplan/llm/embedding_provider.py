"""Embedding providers for generating vector embeddings from text.

One implementation per backend plus a null provider used when nothing is
configured. The provider is chosen once by ``build_embedding_provider`` and
injected; there is no module-level instance.
"""
import logging
from abc import ABC, abstractmethod
from typing import List, Optional

import httpx

from fitplan.config.settings import Settings

logger = logging.getLogger(__name__)


class EmbeddingProvider(ABC):
    """Interface every embedding backend implements."""

    name: str = "base"

    def __init__(self, model: str, dimensions: int):
        self.model = model
        self.dimensions = dimensions

    @property
    def available(self) -> bool:
        return True

    @abstractmethod
    async def embed(self, text: str) -> List[float]:
        """Generate the embedding vector for a single text."""

    async def embed_batch(self, texts: List[str]) -> List[List[float]]:
        embeddings = []
        for text in texts:
            embeddings.append(await self.embed(text))
        return embeddings

    async def close(self):
        pass


class HttpEmbeddingProvider(EmbeddingProvider):
    """Shared httpx client handling for HTTP-backed providers."""

    def __init__(
        self,
        base_url: str,
        model: str,
        dimensions: int,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(model, dimensions)
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    def _headers(self) -> dict:
        return {"Content-Type": "application/json"}

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create async HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=httpx.Timeout(self.timeout),
                headers=self._headers(),
                transport=self._transport,
            )
        return self._client

    async def close(self):
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    @staticmethod
    def _body(response: httpx.Response) -> dict:
        body = response.json()
        if not isinstance(body, dict):
            raise ValueError(f"Unexpected embedding response body: {type(body).__name__}")
        return body

    @staticmethod
    def _items(body: dict, key: str, expected: int) -> list:
        """The list under ``key``, which must hold exactly ``expected`` entries."""
        items = body.get(key)
        if not isinstance(items, list):
            raise ValueError(f"Embedding response has no '{key}' list")
        if len(items) != expected:
            raise ValueError(f"Expected {expected} embeddings, got {len(items)}")
        return items


def _vector(value) -> List[float]:
    if not isinstance(value, list) or not value:
        raise ValueError("Embedding is not a non-empty list")
    if not all(isinstance(x, (int, float)) and not isinstance(x, bool) for x in value):
        raise ValueError("Embedding contains non-numeric values")
    return value


class OpenAIEmbeddingProvider(HttpEmbeddingProvider):
    """
    OpenAI-compatible embeddings endpoint (``POST /embeddings``).

    Works with OpenAI and other services exposing the same API shape.
    """

    name = "openai"

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.openai.com/v1",
        model: str = "text-embedding-3-small",
        dimensions: int = 1536,
        **kwargs,
    ):
        self.api_key = api_key
        super().__init__(base_url, model, dimensions, **kwargs)

    def _headers(self) -> dict:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    async def embed(self, text: str) -> List[float]:
        embeddings = await self.embed_batch([text])
        return embeddings[0]

    async def embed_batch(self, texts: List[str]) -> List[List[float]]:
        """
        Embed several texts in one request.

        The API may return items out of order, so results are re-sorted by
        their ``index`` field.

        Raises:
            httpx.HTTPError: If the request fails
            ValueError: If the response carries no embeddings
        """
        if not texts:
            return []
        client = await self._get_client()
        response = await client.post("/embeddings", json={"model": self.model, "input": texts})
        response.raise_for_status()

        items = self._items(self._body(response), "data", len(texts))
        if not all(isinstance(item, dict) and isinstance(item.get("index"), int) for item in items):
            raise ValueError("Embedding items must be objects with an integer 'index'")
        return [_vector(item.get("embedding")) for item in sorted(items, key=lambda item: item["index"])]


class GeminiEmbeddingProvider(HttpEmbeddingProvider):
    name = "gemini"

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
        model: str = "text-embedding-004",
        dimensions: int = 768,
        **kwargs,
    ):
        self.api_key = api_key
        super().__init__(base_url, model, dimensions, **kwargs)

    def _headers(self) -> dict:
        return {
            "x-goog-api-key": self.api_key,
            "Content-Type": "application/json",
        }

    def _request(self, text: str) -> dict:
        return {"model": f"models/{self.model}", "content": {"parts": [{"text": text}]}}

    async def embed(self, text: str) -> List[float]:
        client = await self._get_client()
        response = await client.post(f"/models/{self.model}:embedContent", json=self._request(text))
        response.raise_for_status()

        embedding = self._body(response).get("embedding")
        if not isinstance(embedding, dict):
            raise ValueError(f"No embedding returned for text: {text[:50]}...")
        return _vector(embedding.get("values"))

    async def embed_batch(self, texts: List[str]) -> List[List[float]]:
        if not texts:
            return []
        client = await self._get_client()
        response = await client.post(
            f"/models/{self.model}:batchEmbedContents",
            json={"requests": [self._request(text) for text in texts]},
        )
        response.raise_for_status()

        embeddings = self._items(self._body(response), "embeddings", len(texts))
        return [_vector(item.get("values") if isinstance(item, dict) else None) for item in embeddings]


class OllamaEmbeddingProvider(HttpEmbeddingProvider):
    """
    Ollama embedding provider using the /api/embed endpoint.

    Runs locally, so it needs a base URL rather than an API key.
    """

    name = "ollama"

    async def embed(self, text: str) -> List[float]:
        embeddings = await self.embed_batch([text])
        return embeddings[0]

    async def embed_batch(self, texts: List[str]) -> List[List[float]]:
        if not texts:
            return []
        client = await self._get_client()
        response = await client.post("/api/embed", json={"model": self.model, "input": texts})
        response.raise_for_status()

        embeddings = self._items(self._body(response), "embeddings", len(texts))
        return [_vector(embedding) for embedding in embeddings]


class NullEmbeddingProvider(EmbeddingProvider):
    """Stands in when no provider is configured. Never produces vectors."""

    name = "none"

    def __init__(self):
        super().__init__(model="", dimensions=0)

    @property
    def available(self) -> bool:
        return False

    async def embed(self, text: str) -> List[float]:
        raise RuntimeError("No embedding provider configured")


def build_embedding_provider(
    settings: Settings,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> EmbeddingProvider:
    """
    Choose the embedding backend from settings.

    An explicit ``embedding_provider`` preference wins when its credentials
    are present; otherwise the first configured backend in the order
    openai, gemini, ollama is used. With nothing configured the null
    provider is returned.
    """
    builders = {
        "openai": (
            bool(settings.openai_api_key),
            lambda: OpenAIEmbeddingProvider(
                api_key=settings.openai_api_key,
                base_url=settings.openai_base_url,
                model=settings.openai_embedding_model,
                dimensions=settings.openai_embedding_dimensions,
                transport=transport,
            ),
        ),
        "gemini": (
            bool(settings.gemini_api_key),
            lambda: GeminiEmbeddingProvider(
                api_key=settings.gemini_api_key,
                base_url=settings.gemini_base_url,
                model=settings.gemini_embedding_model,
                dimensions=settings.gemini_embedding_dimensions,
                transport=transport,
            ),
        ),
        "ollama": (
            bool(settings.ollama_base_url),
            lambda: OllamaEmbeddingProvider(
                base_url=settings.ollama_base_url,
                model=settings.ollama_embedding_model,
                dimensions=settings.ollama_embedding_dimensions,
                transport=transport,
            ),
        ),
    }

    preferred = settings.embedding_provider
    if preferred:
        configured, build = builders[preferred]
        if configured:
            return build()
        logger.warning(f"Embedding provider '{preferred}' requested but not configured, trying others")

    for name, (configured, build) in builders.items():
        if configured:
            logger.info(f"Using {name} embedding provider")
            return build()

    logger.warning("No embedding provider configured. Semantic search will use lexical fallback.")
    return NullEmbeddingProvider()
