"""Embedding adapter package."""
from fitplan.llm.embedding_gateway import EmbeddingGateway, ProviderInfo
from fitplan.llm.embedding_provider import (
    EmbeddingProvider,
    GeminiEmbeddingProvider,
    NullEmbeddingProvider,
    OllamaEmbeddingProvider,
    OpenAIEmbeddingProvider,
    build_embedding_provider,
)

__all__ = [
    "EmbeddingGateway",
    "EmbeddingProvider",
    "GeminiEmbeddingProvider",
    "NullEmbeddingProvider",
    "OllamaEmbeddingProvider",
    "OpenAIEmbeddingProvider",
    "ProviderInfo",
    "build_embedding_provider",
]
