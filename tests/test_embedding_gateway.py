"""Tests for embedding providers and the gateway wrapping them."""
import asyncio
import json

import httpx
import pytest

from fitplan.config.settings import Settings
from fitplan.core.exceptions import EmbeddingDimensionMismatchError, ProviderUnavailableError
from fitplan.llm.embedding_gateway import EmbeddingGateway
from fitplan.llm.embedding_provider import (
    EmbeddingProvider,
    GeminiEmbeddingProvider,
    NullEmbeddingProvider,
    OllamaEmbeddingProvider,
    OpenAIEmbeddingProvider,
    build_embedding_provider,
)
from tests.conftest import StaticEmbeddingProvider


def _settings(**overrides) -> Settings:
    fields = dict(
        _env_file=None,
        embedding_provider="",
        openai_api_key="",
        gemini_api_key="",
        ollama_base_url="",
    )
    fields.update(overrides)
    return Settings(**fields)


class SlowProvider(EmbeddingProvider):
    name = "slow"

    def __init__(self):
        super().__init__(model="slow", dimensions=3)

    async def embed(self, text):
        await asyncio.sleep(5)
        return [0.0, 0.0, 0.0]


class TestProviderSelection:

    def test_nothing_configured_gives_null_provider(self):
        provider = build_embedding_provider(_settings())
        assert isinstance(provider, NullEmbeddingProvider)
        assert not provider.available

    def test_first_configured_in_order(self):
        provider = build_embedding_provider(_settings(gemini_api_key="g", ollama_base_url="http://ollama:11434"))
        assert isinstance(provider, GeminiEmbeddingProvider)
        assert provider.dimensions == 768

    def test_preference_wins_when_configured(self):
        provider = build_embedding_provider(_settings(
            embedding_provider="ollama",
            openai_api_key="sk-test",
            ollama_base_url="http://ollama:11434",
        ))
        assert isinstance(provider, OllamaEmbeddingProvider)

    def test_unconfigured_preference_falls_back(self):
        provider = build_embedding_provider(_settings(embedding_provider="gemini", openai_api_key="sk-test"))
        assert isinstance(provider, OpenAIEmbeddingProvider)
        assert provider.dimensions == 1536


class TestHttpProviders:

    @pytest.mark.asyncio
    async def test_openai_batch_is_reordered_by_index(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["auth"] = request.headers["Authorization"]
            seen["path"] = request.url.path
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"data": [
                {"index": 1, "embedding": [0.0, 1.0]},
                {"index": 0, "embedding": [1.0, 0.0]},
            ]})

        provider = OpenAIEmbeddingProvider(
            api_key="sk-test", dimensions=2, transport=httpx.MockTransport(handler)
        )
        vectors = await provider.embed_batch(["first", "second"])
        await provider.close()

        assert vectors == [[1.0, 0.0], [0.0, 1.0]]
        assert seen["auth"] == "Bearer sk-test"
        assert seen["path"] == "/v1/embeddings"
        assert seen["body"] == {"model": "text-embedding-3-small", "input": ["first", "second"]}

    @pytest.mark.asyncio
    async def test_gemini_single_embedding(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.headers["x-goog-api-key"] == "g-key"
            assert request.url.path.endswith("/models/text-embedding-004:embedContent")
            return httpx.Response(200, json={"embedding": {"values": [0.5, 0.5, 0.5]}})

        provider = GeminiEmbeddingProvider(api_key="g-key", dimensions=3, transport=httpx.MockTransport(handler))
        assert await provider.embed("squat") == [0.5, 0.5, 0.5]
        await provider.close()

    @pytest.mark.asyncio
    async def test_ollama_missing_embeddings_is_an_error(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(200, json={"embeddings": []}))
        provider = OllamaEmbeddingProvider("http://ollama:11434", "nomic-embed-text", 768, transport=transport)

        with pytest.raises(ValueError):
            await provider.embed("plank")
        await provider.close()


class TestEmbeddingGateway:

    @pytest.mark.asyncio
    async def test_embed_returns_vector(self, static_gateway):
        assert await static_gateway.embed("push up") == [0.1, 0.1, 0.1]

    @pytest.mark.asyncio
    async def test_null_provider_is_unavailable(self, null_gateway):
        assert not null_gateway.is_available()
        assert null_gateway.provider_info().name == "none"

        with pytest.raises(ProviderUnavailableError):
            await null_gateway.embed("push up")

    @pytest.mark.asyncio
    async def test_wrong_dimensions_are_rejected(self):
        gateway = EmbeddingGateway(StaticEmbeddingProvider(vector=[0.1, 0.2], dimensions=3))

        with pytest.raises(EmbeddingDimensionMismatchError) as exc_info:
            await gateway.embed("push up")
        assert exc_info.value.expected == 3
        assert exc_info.value.actual == 2

    @pytest.mark.asyncio
    async def test_timeout_becomes_unavailable(self):
        gateway = EmbeddingGateway(SlowProvider(), timeout=0.01)

        with pytest.raises(ProviderUnavailableError):
            await gateway.embed("push up")

    @pytest.mark.asyncio
    async def test_http_error_becomes_unavailable(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(500, json={"error": "boom"}))
        provider = OpenAIEmbeddingProvider(api_key="sk-test", dimensions=2, transport=transport)
        gateway = EmbeddingGateway(provider)

        with pytest.raises(ProviderUnavailableError):
            await gateway.embed("push up")
        await gateway.close()

    @pytest.mark.asyncio
    async def test_batch_checks_every_vector(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(200, json={"data": [
            {"index": 0, "embedding": [1.0, 0.0]},
            {"index": 1, "embedding": [1.0]},
        ]}))
        gateway = EmbeddingGateway(OpenAIEmbeddingProvider(api_key="sk-test", dimensions=2, transport=transport))

        with pytest.raises(EmbeddingDimensionMismatchError):
            await gateway.embed_batch(["a", "b"])
        await gateway.close()

    @pytest.mark.asyncio
    async def test_empty_batch(self, null_gateway):
        assert await null_gateway.embed_batch([]) == []


def _openai(body, dimensions=2):
    transport = httpx.MockTransport(lambda request: httpx.Response(200, json=body))
    return OpenAIEmbeddingProvider(api_key="sk-test", dimensions=dimensions, transport=transport)


def _gemini(body, dimensions=2):
    transport = httpx.MockTransport(lambda request: httpx.Response(200, json=body))
    return GeminiEmbeddingProvider(api_key="g-key", dimensions=dimensions, transport=transport)


def _ollama(body, dimensions=2):
    transport = httpx.MockTransport(lambda request: httpx.Response(200, json=body))
    return OllamaEmbeddingProvider("http://ollama:11434", "nomic-embed-text", dimensions, transport=transport)


class TestMalformedResponses:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("build, body", [
        (_openai, {"data": None}),
        (_openai, []),
        (_openai, {"data": [None]}),
        (_openai, {"data": [{"embedding": [1.0, 0.0]}]}),
        (_openai, {"data": [{"index": 0, "embedding": None}]}),
        (_openai, {"data": [{"index": 0, "embedding": ["a", "b"]}]}),
        (_gemini, {"embedding": None}),
        (_gemini, {"embedding": {"values": "0.1,0.2"}}),
        (_gemini, "not an object"),
        (_ollama, {"embeddings": None}),
        (_ollama, {"embeddings": [None]}),
        (_ollama, {"embeddings": [{"values": [1.0, 0.0]}]}),
    ])
    async def test_unexpected_body_becomes_unavailable(self, build, body):
        gateway = EmbeddingGateway(build(body))

        with pytest.raises(ProviderUnavailableError):
            await gateway.embed("push up")
        await gateway.close()

    @pytest.mark.asyncio
    async def test_non_json_body_becomes_unavailable(self):
        transport = httpx.MockTransport(lambda request: httpx.Response(200, text="<html>gateway</html>"))
        gateway = EmbeddingGateway(OpenAIEmbeddingProvider(api_key="sk-test", dimensions=2, transport=transport))

        with pytest.raises(ProviderUnavailableError):
            await gateway.embed("push up")
        await gateway.close()

    @pytest.mark.asyncio
    async def test_gemini_batch_without_embeddings_list(self):
        gateway = EmbeddingGateway(_gemini({"embeddings": {"values": [1.0, 0.0]}}))

        with pytest.raises(ProviderUnavailableError):
            await gateway.embed_batch(["a", "b"])
        await gateway.close()
