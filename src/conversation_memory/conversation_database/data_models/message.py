"""
Message data model and storage interface.

Messages are ordered by 'sequence_number', which the upsert service derives
from the position of the message in the ingested array; callers never supply
it. '(conversation_id, sequence_number)' is unique and is the key used by
'upsert_many': re-ingesting a conversation overwrites rows in place instead of
appending duplicates.

Concrete implementations: 'InMemoryMessageDatabase'.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from enum import StrEnum

from pydantic import BaseModel, Field


class Roles(StrEnum):
    """Author of a transcript message."""

    USER = "user"
    ASSISTANT = "assistant"


class Message(BaseModel):
    """A single message within a conversation."""

    id: str
    conversation_id: str
    role: Roles
    content: str = Field(min_length=1)
    timestamp: datetime
    sequence_number: int = Field(ge=0)


class NewMessage(BaseModel):
    """A message row to be written; the store assigns 'id' on first insert."""

    conversation_id: str
    role: Roles
    content: str = Field(min_length=1)
    timestamp: datetime
    sequence_number: int = Field(ge=0)


class MessageDatabase(ABC):
    """Abstract repository for 'Message' records."""

    @abstractmethod
    async def upsert_many(self, messages: list[NewMessage]) -> None:
        """Insert or overwrite rows keyed on '(conversation_id, sequence_number)'.

        An existing row keeps its 'id' and 'role' and gets content and timestamp
        replaced. Raise 'DuplicateKeyError' if one call repeats a key.
        """
        pass

    @abstractmethod
    async def find_by_conversation_id(self, conversation_id: str) -> list[Message]:
        """All messages of one conversation ordered by 'sequence_number'."""
        pass

    @abstractmethod
    async def find_by_conversation_ids(self, conversation_ids: list[str]) -> list[Message]:
        """All messages of the given conversations, each conversation ordered by 'sequence_number'."""
        pass

    @abstractmethod
    async def delete_by_conversation_id(self, conversation_id: str) -> int:
        """Remove every message of a conversation and return how many were removed."""
        pass
