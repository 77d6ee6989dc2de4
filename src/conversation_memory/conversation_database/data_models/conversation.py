"""
Conversation data model and storage interface.

A conversation has two identities: 'id' is generated by the store and never
changes, 'external_id' is the stable identifier supplied by the source system
and is the idempotency key for upserts. 'message_count' is a cached copy of the
number of stored messages and is what the upsert service compares to decide
whether an ingest changed anything.

The 'ConversationDatabase' ABC is the pluggable storage backend. Concrete
implementations: 'InMemoryConversationDatabase'.
"""

from abc import ABC, abstractmethod
from datetime import datetime

from pydantic import BaseModel

from conversation_memory.conversation_database.data_models.message import Message

DEFAULT_CONVERSATION_TITLE = "Untitled Conversation"


class Conversation(BaseModel):
    """A stored conversation without its messages."""

    id: str
    external_id: str
    title: str = DEFAULT_CONVERSATION_TITLE
    created_at: datetime
    updated_at: datetime
    message_count: int = 0


class ConversationWithMessages(Conversation):
    """A 'Conversation' hydrated with its messages in sequence order."""

    messages: list[Message]


class ConversationDatabase(ABC):
    """
    Abstract repository for 'Conversation' records.

    Implementations must enforce uniqueness of 'external_id' (raise
    'DuplicateKeyError') and must cascade 'delete' to the conversation's
    messages and embedding.
    """

    @abstractmethod
    async def find_by_external_id(self, external_id: str) -> Conversation | None:
        pass

    @abstractmethod
    async def create(
        self, external_id: str, title: str | None, created_at: datetime, message_count: int
    ) -> Conversation:
        """Insert a new conversation. 'updated_at' is set to the insertion time."""
        pass

    @abstractmethod
    async def update(self, conversation_id: str, title: str | None, message_count: int) -> Conversation:
        """Overwrite title and message count and bump 'updated_at'. Raise 'NotFoundError' for unknown IDs."""
        pass

    @abstractmethod
    async def find_by_ids(self, conversation_ids: list[str]) -> list[Conversation]:
        """Return the conversations that exist among 'conversation_ids', in no particular order."""
        pass

    @abstractmethod
    async def find_by_date_range(self, from_: datetime | None, to: datetime | None) -> list[Conversation]:
        """Conversations whose 'created_at' lies within the inclusive bounds, oldest first.

        Raise 'InvalidRangeError' when both bounds are None.
        """
        pass

    @abstractmethod
    async def find_ids_missing_embedding(self) -> list[str]:
        """IDs of conversations that have no embedding row."""
        pass

    @abstractmethod
    async def delete(self, conversation_id: str) -> bool:
        pass
