"""
Embeddings model abstractions.

The core treats the embedding provider as a black box 'text -> vector'. The
same model embeds both conversation transcripts (in the worker) and raw search
queries (in the retrieval service), so both land in the same vector space.

Concrete implementations: 'VoyageEmbeddings'.
"""

from abc import ABC, abstractmethod

import numpy as np
from numpy.typing import NDArray


class EmbeddingsModel(ABC):
    """
    Abstract base class for text embedding models.

    Attributes:
        model_name: Identifier of the underlying model.
        embedding_size: Dimensionality of the returned embedding vectors.
    """

    model_name: str
    embedding_size: int

    @abstractmethod
    async def embed(self, text: str) -> NDArray[np.float64]:
        """Embed a single text and return a float64 array of shape '(embedding_size,)'.

        Raise 'EmbeddingError' for empty input or any provider-side failure.
        """
        pass

    async def aclose(self) -> None:
        """Release network resources held by the model. Models without any keep this no-op."""
