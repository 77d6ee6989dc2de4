"""
Exception hierarchy for the conversation memory core.

Every error raised by the core derives from 'ConversationMemoryError' and
carries a stable 'code' plus a 'details' dict, so an outer transport layer can
serialise it with 'to_dict()' without knowing the concrete class.

Nothing in the core catches these errors. The only silent paths are the
documented no-ops: an unchanged message count on upsert and an empty queue on
claim.
"""

from typing import Any


class ConversationMemoryError(Exception):
    """Base class for all conversation memory errors."""

    code = "CONVERSATION_MEMORY_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.code, "message": self.message, "details": self.details}


class StoreError(ConversationMemoryError):
    """A storage collaborator rejected a read or write."""

    code = "STORE_ERROR"


class DuplicateKeyError(StoreError):
    """
    A uniqueness constraint was violated.

    Raised for a second conversation with the same external ID, a second
    embedding row for one conversation, or the same '(conversation_id,
    sequence_number)' pair appearing twice in a single message write.
    """

    code = "DUPLICATE_KEY"


class NotFoundError(StoreError):
    code = "NOT_FOUND"


class EmptyConversationError(ConversationMemoryError):
    """
    A queued conversation has no stored messages.

    Only conversations with at least one message are ever enqueued, so this
    points at an upstream consistency bug and is never retried automatically.
    """

    code = "EMPTY_CONVERSATION"

    def __init__(self, conversation_id: str) -> None:
        super().__init__(
            f"No messages found for conversation ID: {conversation_id}",
            {"conversation_id": conversation_id},
        )
        self.conversation_id = conversation_id


class InvalidRangeError(ConversationMemoryError):
    """Neither bound of a date range was supplied."""

    code = "INVALID_RANGE"

    def __init__(self, message: str = "At least one date bound is required") -> None:
        super().__init__(message)


class EmptyIndexError(ConversationMemoryError):
    """Nearest-neighbour lookup on a vector store that holds no embeddings."""

    code = "EMPTY_INDEX"

    def __init__(self, message: str = "The vector store holds no embeddings") -> None:
        super().__init__(message)


class EmbeddingError(ConversationMemoryError):
    """The embedding provider failed or was given unusable input."""

    code = "EMBEDDING_ERROR"

    def __init__(self, message: str, status_code: int | None = None, details: dict[str, Any] | None = None) -> None:
        super().__init__(message, details)
        self.status_code = status_code
