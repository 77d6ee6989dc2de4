"""
Embedding worker: turns queued conversation IDs into stored vectors.

'process_next' handles at most one conversation per call and is meant to be
driven by an outside scheduler (a timer task, a CLI loop, a test). It
concatenates the full message history into one text, embeds it, and upserts
the vector. Provider and store errors propagate; whoever drives the worker
decides whether to retry, skip or stop.
"""

import numpy as np
from loguru import logger
from numpy.typing import NDArray

from conversation_memory.conversation_database.data_models.message import Message, MessageDatabase
from conversation_memory.embeddings.base import EmbeddingsModel
from conversation_memory.errors import EmptyConversationError
from conversation_memory.pipeline.embedding_queue import EmbeddingQueue
from conversation_memory.vectorstores.base import VectorStore


def build_conversation_text(messages: list[Message]) -> str:
    """Render messages as 'role: content' lines in the order given."""
    return "\n".join(f"{message.role.value}: {message.content}" for message in messages)


class EmbeddingWorker:
    def __init__(
        self,
        message_db: MessageDatabase,
        vector_store: VectorStore,
        embeddings_model: EmbeddingsModel,
        queue: EmbeddingQueue,
    ) -> None:
        self.message_db = message_db
        self.vector_store = vector_store
        self.embeddings_model = embeddings_model
        self.queue = queue

    async def process_next(self) -> str | None:
        """Embed the next queued conversation. Returns its ID, or None when there was nothing to claim."""
        conversation_id = self.queue.claim_next()
        if conversation_id is None:
            return None

        messages = await self.message_db.find_by_conversation_id(conversation_id)
        if not messages:
            raise EmptyConversationError(conversation_id)

        embedding: NDArray[np.float64] = await self.embeddings_model.embed(build_conversation_text(messages))
        await self.vector_store.upsert(conversation_id, embedding)
        logger.info(f"Stored embedding for conversation {conversation_id} ({len(messages)} messages)")
        return conversation_id

    async def drain(self, max_items: int | None = None) -> int:
        """Call 'process_next' until the queue is empty or 'max_items' conversations were embedded."""
        processed = 0
        while max_items is None or processed < max_items:
            if await self.process_next() is None:
                break
            processed += 1
        return processed
