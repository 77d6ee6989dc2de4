"""
In-memory conversation and message repositories.

Both repositories keep plain dicts and enforce the same constraints a
relational schema would: unique external IDs, unique '(conversation_id,
sequence_number)' pairs, and cascade deletion from a conversation to its
messages and embedding. The conversation repository is handed the message
repository and vector store it cascades into; they also back the anti-join in
'find_ids_missing_embedding'.
"""

from datetime import datetime

from loguru import logger

from conversation_memory.conversation_database.data_models.conversation import (
    DEFAULT_CONVERSATION_TITLE,
    Conversation,
    ConversationDatabase,
)
from conversation_memory.conversation_database.data_models.message import Message, MessageDatabase, NewMessage
from conversation_memory.errors import DuplicateKeyError, InvalidRangeError, NotFoundError
from conversation_memory.utils.database import generate_uid
from conversation_memory.utils.time import ensure_utc, get_current_timestamp
from conversation_memory.vectorstores.base import VectorStore


class InMemoryMessageDatabase(MessageDatabase):
    def __init__(self) -> None:
        self._messages: dict[tuple[str, int], Message] = {}

    async def upsert_many(self, messages: list[NewMessage]) -> None:
        keys = [(m.conversation_id, m.sequence_number) for m in messages]
        if len(set(keys)) != len(keys):
            raise DuplicateKeyError(
                "Duplicate (conversation_id, sequence_number) in a single write",
                {"keys": sorted({k for k in keys if keys.count(k) > 1})},
            )

        for new_message, key in zip(messages, keys):
            existing = self._messages.get(key)
            self._messages[key] = Message(
                id=existing.id if existing else generate_uid(),
                conversation_id=new_message.conversation_id,
                role=existing.role if existing else new_message.role,
                content=new_message.content,
                timestamp=ensure_utc(new_message.timestamp),
                sequence_number=new_message.sequence_number,
            )

    async def find_by_conversation_id(self, conversation_id: str) -> list[Message]:
        return await self.find_by_conversation_ids([conversation_id])

    async def find_by_conversation_ids(self, conversation_ids: list[str]) -> list[Message]:
        wanted = set(conversation_ids)
        return [self._messages[key] for key in sorted(self._messages) if key[0] in wanted]

    async def delete_by_conversation_id(self, conversation_id: str) -> int:
        keys = [key for key in self._messages if key[0] == conversation_id]
        for key in keys:
            del self._messages[key]
        return len(keys)


class InMemoryConversationDatabase(ConversationDatabase):
    def __init__(self, message_db: MessageDatabase, vector_store: VectorStore) -> None:
        self.message_db = message_db
        self.vector_store = vector_store
        self._conversations: dict[str, Conversation] = {}
        self._ids_by_external_id: dict[str, str] = {}

    async def find_by_external_id(self, external_id: str) -> Conversation | None:
        conversation_id = self._ids_by_external_id.get(external_id)
        return self._conversations[conversation_id] if conversation_id else None

    async def create(
        self, external_id: str, title: str | None, created_at: datetime, message_count: int
    ) -> Conversation:
        if external_id in self._ids_by_external_id:
            raise DuplicateKeyError(
                f"Conversation with external ID {external_id} already exists", {"external_id": external_id}
            )
        conversation = Conversation(
            id=generate_uid(),
            external_id=external_id,
            title=title or DEFAULT_CONVERSATION_TITLE,
            created_at=ensure_utc(created_at),
            updated_at=get_current_timestamp(),
            message_count=message_count,
        )
        self._conversations[conversation.id] = conversation
        self._ids_by_external_id[external_id] = conversation.id
        return conversation

    async def update(self, conversation_id: str, title: str | None, message_count: int) -> Conversation:
        existing = self._conversations.get(conversation_id)
        if existing is None:
            raise NotFoundError(
                f"Conversation with id {conversation_id} not found", {"conversation_id": conversation_id}
            )
        updated = existing.model_copy(
            update={
                "title": title or DEFAULT_CONVERSATION_TITLE,
                "message_count": message_count,
                "updated_at": get_current_timestamp(),
            }
        )
        self._conversations[conversation_id] = updated
        return updated

    async def find_by_ids(self, conversation_ids: list[str]) -> list[Conversation]:
        return [self._conversations[i] for i in dict.fromkeys(conversation_ids) if i in self._conversations]

    async def find_by_date_range(self, from_: datetime | None, to: datetime | None) -> list[Conversation]:
        if from_ is None and to is None:
            raise InvalidRangeError()
        lower = ensure_utc(from_) if from_ is not None else None
        upper = ensure_utc(to) if to is not None else None
        matches = [
            c
            for c in self._conversations.values()
            if (lower is None or c.created_at >= lower) and (upper is None or c.created_at <= upper)
        ]
        return sorted(matches, key=lambda c: c.created_at)

    async def find_ids_missing_embedding(self) -> list[str]:
        return [
            conversation_id
            for conversation_id in self._conversations
            if await self.vector_store.get_by_conversation_id(conversation_id) is None
        ]

    async def delete(self, conversation_id: str) -> bool:
        conversation = self._conversations.pop(conversation_id, None)
        if conversation is None:
            return False
        del self._ids_by_external_id[conversation.external_id]
        removed = await self.message_db.delete_by_conversation_id(conversation_id)
        await self.vector_store.delete(conversation_id)
        logger.info(f"Deleted conversation {conversation_id} with {removed} messages")
        return True
