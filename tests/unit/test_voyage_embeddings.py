"""Unit tests for the Voyage AI adapter, with the HTTP layer replaced by 'httpx.MockTransport'."""

import json

import httpx
import numpy as np
import pytest

from conversation_memory.embeddings.voyage import VoyageEmbeddings
from conversation_memory.errors import EmbeddingError

URL = "https://api.voyageai.com/v1/embeddings"


def make_embeddings(handler, embedding_size=3):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return VoyageEmbeddings(api_key="test-key", embedding_size=embedding_size, base_url=URL, client=client)


class TestVoyageEmbeddings:
    def test_missing_api_key_raises(self):
        with pytest.raises(EmbeddingError):
            VoyageEmbeddings(api_key="")

    @pytest.mark.asyncio
    async def test_sends_single_input_and_parses_vector(self):
        seen = {}

        def handler(request):
            seen["body"] = json.loads(request.content)
            seen["auth"] = request.headers["Authorization"]
            return httpx.Response(200, json={"data": [{"embedding": [0.1, 0.2, 0.3], "index": 0}]})

        vector = await make_embeddings(handler).embed("user: hi")

        assert seen["body"] == {"input": ["user: hi"], "model": "voyage-3-large"}
        assert seen["auth"] == "Bearer test-key"
        assert vector.dtype == np.float64
        assert np.allclose(vector, [0.1, 0.2, 0.3])

    @pytest.mark.asyncio
    async def test_empty_text_is_rejected_without_request(self):
        def handler(request):
            raise AssertionError("no request expected")

        with pytest.raises(EmbeddingError):
            await make_embeddings(handler).embed("   ")

    @pytest.mark.asyncio
    async def test_http_error_status(self):
        def handler(request):
            return httpx.Response(429, json={"detail": "rate limited"})

        with pytest.raises(EmbeddingError) as exc_info:
            await make_embeddings(handler).embed("hi")

        assert exc_info.value.status_code == 429

    @pytest.mark.asyncio
    async def test_transport_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(EmbeddingError):
            await make_embeddings(handler).embed("hi")

    @pytest.mark.asyncio
    async def test_missing_embedding_in_response(self):
        def handler(request):
            return httpx.Response(200, json={"data": []})

        with pytest.raises(EmbeddingError):
            await make_embeddings(handler).embed("hi")

    @pytest.mark.asyncio
    async def test_dimension_mismatch(self):
        def handler(request):
            return httpx.Response(200, json={"data": [{"embedding": [0.1, 0.2]}]})

        with pytest.raises(EmbeddingError) as exc_info:
            await make_embeddings(handler).embed("hi")

        assert exc_info.value.details == {"expected": 3, "actual": 2}

    @pytest.mark.asyncio
    async def test_invalid_json(self):
        def handler(request):
            return httpx.Response(200, content=b"not json")

        with pytest.raises(EmbeddingError):
            await make_embeddings(handler).embed("hi")

    @pytest.mark.asyncio
    async def test_non_numeric_embedding(self):
        def handler(request):
            return httpx.Response(200, json={"data": [{"embedding": ["a", "b", "c"]}]})

        with pytest.raises(EmbeddingError, match="non-numeric"):
            await make_embeddings(handler).embed("hi")

    @pytest.mark.asyncio
    async def test_aclose_closes_http_client(self):
        client = httpx.AsyncClient(transport=httpx.MockTransport(lambda request: httpx.Response(200)))
        embeddings = VoyageEmbeddings(api_key="test-key", base_url=URL, client=client)

        await embeddings.aclose()

        assert client.is_closed
