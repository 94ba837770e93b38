"""Single entry point for turning text into embedding vectors."""
import asyncio
from dataclasses import dataclass
from typing import List

import httpx

from fitplan.config.settings import Settings
from fitplan.core.exceptions import EmbeddingDimensionMismatchError, ProviderUnavailableError
from fitplan.core.logging import get_logger
from fitplan.llm.embedding_provider import EmbeddingProvider, build_embedding_provider

logger = get_logger(__name__)


@dataclass(frozen=True)
class ProviderInfo:
    name: str
    model: str
    dimensions: int
    available: bool


class EmbeddingGateway:
    """
    Wraps the chosen provider with a timeout and dimensionality checks.

    Every provider failure (HTTP error, timeout, malformed response) is
    reported as ``ProviderUnavailableError`` so callers have one thing to
    recover from. Vectors whose length differs from the provider's declared
    dimensionality raise ``EmbeddingDimensionMismatchError``.
    """

    def __init__(self, provider: EmbeddingProvider, timeout: float = 10.0):
        self._provider = provider
        self._timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> "EmbeddingGateway":
        return cls(build_embedding_provider(settings), timeout=settings.embedding_timeout_seconds)

    @property
    def dimensions(self) -> int:
        return self._provider.dimensions

    def is_available(self) -> bool:
        return self._provider.available

    def provider_info(self) -> ProviderInfo:
        return ProviderInfo(
            name=self._provider.name,
            model=self._provider.model,
            dimensions=self._provider.dimensions,
            available=self._provider.available,
        )

    async def embed(self, text: str) -> List[float]:
        vector = await self._guard(self._provider.embed(text))
        self.verify_dimensions(vector)
        return list(vector)

    async def embed_batch(self, texts: List[str]) -> List[List[float]]:
        if not texts:
            return []
        vectors = await self._guard(self._provider.embed_batch(texts))
        for vector in vectors:
            self.verify_dimensions(vector)
        return [list(vector) for vector in vectors]

    async def close(self):
        await self._provider.close()

    async def _guard(self, coro):
        if not self.is_available():
            coro.close()
            raise ProviderUnavailableError()

        try:
            return await asyncio.wait_for(coro, timeout=self._timeout)
        except asyncio.TimeoutError as e:
            logger.warning("embedding_timeout", provider=self._provider.name, timeout=self._timeout)
            raise ProviderUnavailableError(
                f"{self._provider.name} embedding timed out after {self._timeout}s"
            ) from e
        except (httpx.HTTPError, ValueError, KeyError) as e:
            logger.warning("embedding_failed", provider=self._provider.name, error=str(e))
            raise ProviderUnavailableError(
                f"{self._provider.name} embedding failed: {e}"
            ) from e

    def verify_dimensions(self, vector) -> None:
        if len(vector) != self._provider.dimensions:
            raise EmbeddingDimensionMismatchError(self._provider.dimensions, len(vector))
