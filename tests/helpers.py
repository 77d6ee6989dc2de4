"""
Test doubles and payload builders.

'FakeEmbeddings' is a deterministic stand-in for the remote provider: texts
registered in 'vectors' map to fixed vectors, anything else gets a vector
derived from its SHA-256 digest. Every call is recorded in 'calls'.
"""

import hashlib
from typing import Any

import numpy as np
from numpy.typing import NDArray

from conversation_memory.embeddings.base import EmbeddingsModel
from conversation_memory.errors import EmbeddingError

DIMENSION = 8


class FakeEmbeddings(EmbeddingsModel):
    def __init__(self, embedding_size: int = DIMENSION) -> None:
        self.model_name = "fake"
        self.embedding_size = embedding_size
        self.vectors: dict[str, list[float]] = {}
        self.calls: list[str] = []

    async def embed(self, text: str) -> NDArray[np.float64]:
        self.calls.append(text)
        if not text:
            raise EmbeddingError("Cannot embed empty text.")
        if text in self.vectors:
            return np.asarray(self.vectors[text], dtype=np.float64)
        digest = np.frombuffer(hashlib.sha256(text.encode("utf-8")).digest(), dtype=np.uint8)
        return digest[: self.embedding_size].astype(np.float64) + 1.0


def make_conversation(
    external_id: str = "c1",
    contents: list[str] | None = None,
    title: str | None = "T",
    created_at: str = "2024-01-15T00:00:00Z",
) -> dict[str, Any]:
    """Build an ingest payload dict; roles alternate user/assistant starting with user."""
    contents = ["hi", "hello"] if contents is None else contents
    return {
        "id": external_id,
        "title": title,
        "created_at": created_at,
        "messages": [
            {
                "role": "user" if index % 2 == 0 else "assistant",
                "content": content,
                "timestamp": f"2024-01-15T00:00:{index:02d}Z",
            }
            for index, content in enumerate(contents)
        ],
    }


def unit_vector(angle_degrees: float, dimension: int = DIMENSION) -> list[float]:
    """A vector in the first two axes at 'angle_degrees' from the x axis, zero elsewhere."""
    radians = np.deg2rad(angle_degrees)
    return [float(np.cos(radians)), float(np.sin(radians))] + [0.0] * (dimension - 2)
