"""
Vector store abstractions and embedding data models.

'EmbeddingRecord' is the stored unit: exactly one vector per conversation,
replaced wholesale whenever the conversation is re-embedded. 'EmbeddingMatch'
extends it with the cosine distance returned by a nearest-neighbour search, so
the retrieval service can keep the ranking without a second data structure.

Concrete implementations: 'InMemoryVectorStore'.
"""

from abc import ABC, abstractmethod
from datetime import datetime

import numpy as np
from numpy.typing import NDArray
from pydantic import BaseModel


class EmbeddingRecord(BaseModel):
    """The embedding of one conversation as it exists in the store."""

    conversation_id: str
    embedding: list[float]
    timestamp: datetime


class EmbeddingMatch(EmbeddingRecord):
    """An 'EmbeddingRecord' returned from a similarity search, with its cosine distance to the query."""

    distance: float


class VectorStore(ABC):
    """
    Abstract base class for vector store backends.

    'conversation_id' is unique: 'upsert' inserts a row when none exists and
    otherwise replaces the vector and timestamp. 'find_nearest' ranks by cosine
    distance, smallest first, and must raise 'EmptyIndexError' when the store
    holds no embeddings at all.

    Attributes:
        dimension: Length every stored and queried vector must have.
    """

    dimension: int

    @abstractmethod
    async def upsert(self, conversation_id: str, embedding: NDArray[np.float64]) -> EmbeddingRecord:
        pass

    @abstractmethod
    async def find_nearest(self, query_embedding: NDArray[np.float64], k: int) -> list[EmbeddingMatch]:
        """Return the 'k' embeddings closest to 'query_embedding', nearest first."""
        pass

    @abstractmethod
    async def get_by_conversation_id(self, conversation_id: str) -> EmbeddingRecord | None:
        pass

    @abstractmethod
    async def delete(self, conversation_id: str) -> bool:
        pass

    @abstractmethod
    async def count(self) -> int:
        pass
