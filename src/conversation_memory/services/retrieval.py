"""
Retrieval service: semantic search, date-range lookup and queue reconciliation.

Both read paths end in the same hydration step: fetch conversation metadata
and messages for a list of IDs in two queries and join them here by
conversation ID. Search results keep the vector store's ranking (nearest
first); date-range results keep the store's chronological order.
"""

from collections import defaultdict
from datetime import datetime

from loguru import logger

from conversation_memory.conversation_database.data_models.conversation import (
    Conversation,
    ConversationDatabase,
    ConversationWithMessages,
)
from conversation_memory.conversation_database.data_models.message import Message, MessageDatabase
from conversation_memory.embeddings.base import EmbeddingsModel
from conversation_memory.errors import InvalidRangeError
from conversation_memory.pipeline.embedding_queue import EmbeddingQueue
from conversation_memory.vectorstores.base import VectorStore

SEARCH_TOP_K = 5


class RetrievalService:
    def __init__(
        self,
        conversation_db: ConversationDatabase,
        message_db: MessageDatabase,
        vector_store: VectorStore,
        embeddings_model: EmbeddingsModel,
        queue: EmbeddingQueue,
    ) -> None:
        self.conversation_db = conversation_db
        self.message_db = message_db
        self.vector_store = vector_store
        self.embeddings_model = embeddings_model
        self.queue = queue

    async def search(self, query: str) -> list[ConversationWithMessages]:
        """Return up to 'SEARCH_TOP_K' conversations closest to 'query', nearest first.

        Raises 'EmptyIndexError' (from the vector store) if nothing has been embedded yet.
        """
        query_embedding = await self.embeddings_model.embed(query)
        matches = await self.vector_store.find_nearest(query_embedding, SEARCH_TOP_K)
        for match in matches:
            logger.debug(f"Search hit {match.conversation_id} distance={match.distance:.4f}")

        conversations = await self.conversation_db.find_by_ids([m.conversation_id for m in matches])
        by_id = {conversation.id: conversation for conversation in conversations}
        ranked = [by_id[m.conversation_id] for m in matches if m.conversation_id in by_id]
        return await self._hydrate(ranked)

    async def get_by_date_range(
        self, from_: datetime | None = None, to: datetime | None = None
    ) -> list[ConversationWithMessages]:
        """Conversations created within '[from_, to]' (inclusive). At least one bound is required."""
        if from_ is None and to is None:
            raise InvalidRangeError()
        conversations = await self.conversation_db.find_by_date_range(from_, to)
        return await self._hydrate(conversations)

    async def reload_queue(self) -> int:
        """Enqueue every conversation without an embedding and return how many were queued."""
        missing = await self.conversation_db.find_ids_missing_embedding()
        for conversation_id in missing:
            self.queue.enqueue(conversation_id)
        logger.info(f"Reloaded embedding queue with {len(missing)} conversations (pending={self.queue.size()})")
        return len(missing)

    async def _hydrate(self, conversations: list[Conversation]) -> list[ConversationWithMessages]:
        if not conversations:
            return []
        messages = await self.message_db.find_by_conversation_ids([c.id for c in conversations])
        grouped: dict[str, list[Message]] = defaultdict(list)
        for message in messages:
            grouped[message.conversation_id].append(message)

        return [
            ConversationWithMessages(
                **conversation.model_dump(),
                messages=sorted(grouped[conversation.id], key=lambda m: m.sequence_number),
            )
            for conversation in conversations
        ]
