"""
Conversation upsert service.

Reconciles a batch of ingested conversations with what is stored, keyed on the
external conversation ID:

    unknown ID                  -> create conversation, write messages, enqueue
    known ID, same message count -> no-op (not counted)
    known ID, new message count  -> update conversation, rewrite messages, enqueue

Change detection compares message counts only. An edit that keeps the count
(e.g. a regenerated reply) is not picked up and does not trigger re-embedding.

Conversations are handled strictly in array order and nothing spans the batch:
if a store write fails, the error propagates and conversations earlier in the
batch stay committed.
"""

from collections.abc import Sequence

from loguru import logger

from conversation_memory.conversation_database.data_models.conversation import ConversationDatabase
from conversation_memory.conversation_database.data_models.message import MessageDatabase, NewMessage
from conversation_memory.pipeline.embedding_queue import EmbeddingQueue
from conversation_memory.schemas import ConversationPayload, UpsertMetrics


def to_new_messages(conversation_id: str, payload: ConversationPayload) -> list[NewMessage]:
    """Number the payload's messages 0..n-1 in array order."""
    return [
        NewMessage(
            conversation_id=conversation_id,
            role=message.role,
            content=message.content,
            timestamp=message.timestamp,
            sequence_number=index,
        )
        for index, message in enumerate(payload.messages)
    ]


class ConversationUpsertService:
    def __init__(
        self,
        conversation_db: ConversationDatabase,
        message_db: MessageDatabase,
        queue: EmbeddingQueue,
    ) -> None:
        self.conversation_db = conversation_db
        self.message_db = message_db
        self.queue = queue

    async def upsert(self, conversations: Sequence[ConversationPayload]) -> UpsertMetrics:
        metrics = UpsertMetrics()

        for payload in conversations:
            existing = await self.conversation_db.find_by_external_id(payload.id)
            message_count = len(payload.messages)

            if existing is None:
                conversation = await self.conversation_db.create(
                    external_id=payload.id,
                    title=payload.title,
                    created_at=payload.created_at,
                    message_count=message_count,
                )
                await self.message_db.upsert_many(to_new_messages(conversation.id, payload))
                self.queue.enqueue(conversation.id)
                metrics.created += 1
                metrics.processed += 1
                logger.info(f"Created conversation {conversation.id} for {payload.id!r} ({message_count} messages)")
                continue

            if existing.message_count == message_count:
                logger.debug(f"Skipping unchanged conversation {payload.id!r} ({message_count} messages)")
                continue

            await self.conversation_db.update(existing.id, title=payload.title, message_count=message_count)
            await self.message_db.upsert_many(to_new_messages(existing.id, payload))
            self.queue.enqueue(existing.id)
            metrics.updated += 1
            metrics.processed += 1
            logger.info(
                f"Updated conversation {existing.id} for {payload.id!r} "
                f"({existing.message_count} -> {message_count} messages)"
            )

        logger.info(
            f"Upsert batch of {len(conversations)}: processed={metrics.processed}, "
            f"created={metrics.created}, updated={metrics.updated}"
        )
        return metrics
