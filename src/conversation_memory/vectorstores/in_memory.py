"""
Exact nearest-neighbour vector store held in process memory.

Vectors are kept in a dict keyed by conversation ID and ranked with a single
numpy matrix product per query. This stands in for a database's native
cosine-distance operator in tests and single-process tools; it is not an
approximate index and holds nothing across restarts.
"""

import numpy as np
from loguru import logger
from numpy.typing import NDArray

from conversation_memory.errors import EmptyIndexError
from conversation_memory.utils.time import get_current_timestamp
from conversation_memory.vectorstores.base import EmbeddingMatch, EmbeddingRecord, VectorStore


def cosine_distances(matrix: NDArray[np.float64], query: NDArray[np.float64]) -> NDArray[np.float64]:
    """Cosine distance ('1 - cosine similarity') between each row of 'matrix' and 'query'.

    Zero vectors have no direction; they are treated as orthogonal to everything (distance 1).
    """
    row_norms = np.linalg.norm(matrix, axis=1)
    query_norm = np.linalg.norm(query)
    denominator = row_norms * query_norm
    similarities = np.divide(matrix @ query, denominator, out=np.zeros(len(matrix)), where=denominator > 0)
    return 1.0 - np.clip(similarities, -1.0, 1.0)


class InMemoryVectorStore(VectorStore):
    """
    'VectorStore' backed by a dict of numpy arrays.

    Ties in distance are broken by conversation ID so rankings are
    deterministic.
    """

    def __init__(self, dimension: int) -> None:
        self.dimension = dimension
        self._records: dict[str, EmbeddingRecord] = {}
        self._vectors: dict[str, NDArray[np.float64]] = {}

    def _validate(self, embedding: NDArray[np.float64]) -> NDArray[np.float64]:
        vector = np.asarray(embedding, dtype=np.float64)
        if vector.ndim != 1 or vector.shape[0] != self.dimension:
            raise ValueError(f"Expected a vector of dimension {self.dimension}, got shape {vector.shape}")
        return vector

    async def upsert(self, conversation_id: str, embedding: NDArray[np.float64]) -> EmbeddingRecord:
        vector = self._validate(embedding)
        record = EmbeddingRecord(
            conversation_id=conversation_id,
            embedding=vector.tolist(),
            timestamp=get_current_timestamp(),
        )
        replaced = conversation_id in self._records
        self._records[conversation_id] = record
        self._vectors[conversation_id] = vector
        logger.debug(f"{'Replaced' if replaced else 'Inserted'} embedding for conversation {conversation_id}")
        return record

    async def find_nearest(self, query_embedding: NDArray[np.float64], k: int) -> list[EmbeddingMatch]:
        if not self._vectors:
            raise EmptyIndexError()
        query = self._validate(query_embedding)

        ids = sorted(self._vectors)
        distances = cosine_distances(np.vstack([self._vectors[i] for i in ids]), query)
        # lexsort sorts by the last key first: distance, then conversation ID (already sorted)
        order = np.lexsort((np.arange(len(ids)), distances))[: max(k, 0)]
        return [
            EmbeddingMatch(
                conversation_id=ids[i],
                embedding=self._records[ids[i]].embedding,
                timestamp=self._records[ids[i]].timestamp,
                distance=float(distances[i]),
            )
            for i in order
        ]

    async def get_by_conversation_id(self, conversation_id: str) -> EmbeddingRecord | None:
        return self._records.get(conversation_id)

    async def delete(self, conversation_id: str) -> bool:
        self._vectors.pop(conversation_id, None)
        return self._records.pop(conversation_id, None) is not None

    async def count(self) -> int:
        return len(self._records)
