"""
Voyage AI embeddings over the public REST API.

Requests go through an 'httpx.AsyncClient' so the event loop keeps serving
other work while a transcript is being embedded. Each call embeds exactly one
text; the worker never batches because it processes one conversation at a
time. Transport errors, non-2xx responses and malformed bodies are all turned
into 'EmbeddingError' and propagate; there is no retry here.
"""

import httpx
import numpy as np
from loguru import logger
from numpy.typing import NDArray

from conversation_memory.config import DEFAULT_EMBEDDING_DIMENSION, DEFAULT_VOYAGE_BASE_URL, DEFAULT_VOYAGE_MODEL
from conversation_memory.embeddings.base import EmbeddingsModel
from conversation_memory.errors import EmbeddingError


class VoyageEmbeddings(EmbeddingsModel):
    """
    'EmbeddingsModel' backed by the Voyage AI embeddings endpoint.

    Attributes:
        model_name: Voyage model, e.g. 'voyage-3-large'.
        embedding_size: Expected vector length; responses of any other length are rejected.
        base_url: Full URL of the embeddings endpoint.
    """

    def __init__(
        self,
        api_key: str,
        model_name: str = DEFAULT_VOYAGE_MODEL,
        embedding_size: int = DEFAULT_EMBEDDING_DIMENSION,
        base_url: str = DEFAULT_VOYAGE_BASE_URL,
        timeout: float = 60.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        if not api_key:
            raise EmbeddingError("VOYAGE_API_KEY is not set.")
        self.api_key = api_key
        self.model_name = model_name
        self.embedding_size = embedding_size
        self.base_url = base_url
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def embed(self, text: str) -> NDArray[np.float64]:
        if not text or not text.strip():
            raise EmbeddingError("Cannot embed empty text.")

        payload = {"input": [text], "model": self.model_name}
        headers = {"Authorization": f"Bearer {self.api_key}", "Content-Type": "application/json"}

        try:
            response = await self._client.post(self.base_url, json=payload, headers=headers)
        except httpx.HTTPError as exc:
            raise EmbeddingError(f"Embedding request failed: {exc}") from exc

        if response.is_error:
            raise EmbeddingError(
                f"Embedding request failed: {response.status_code} {response.reason_phrase} - {response.text}",
                status_code=response.status_code,
            )

        try:
            body = response.json()
        except ValueError as exc:
            raise EmbeddingError("Embedding response was not valid JSON.") from exc

        data = body.get("data") if isinstance(body, dict) else None
        if not isinstance(data, list) or not data:
            raise EmbeddingError("Failed to generate embeddings: response missing data.")

        embedding = data[0].get("embedding") if isinstance(data[0], dict) else None
        if not isinstance(embedding, list) or not embedding:
            raise EmbeddingError("Failed to generate embeddings: response missing embedding.")

        if len(embedding) != self.embedding_size:
            raise EmbeddingError(
                f"Embedding dimension mismatch: expected {self.embedding_size}, got {len(embedding)}.",
                details={"expected": self.embedding_size, "actual": len(embedding)},
            )

        try:
            vector = np.asarray(embedding, dtype=np.float64)
        except (TypeError, ValueError) as exc:
            raise EmbeddingError("Failed to generate embeddings: non-numeric embedding.") from exc

        logger.debug(f"Embedded {len(text)} chars with {self.model_name}")
        return vector
