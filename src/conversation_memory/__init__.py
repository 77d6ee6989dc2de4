"""
Conversation memory: idempotent transcript ingestion, asynchronous
per-conversation embeddings, and semantic / date-range retrieval.

    from conversation_memory import ConversationMemoryController
"""

from conversation_memory.controller import ConversationMemoryController
from conversation_memory.errors import (
    ConversationMemoryError,
    DuplicateKeyError,
    EmbeddingError,
    EmptyConversationError,
    EmptyIndexError,
    InvalidRangeError,
    NotFoundError,
    StoreError,
)
from conversation_memory.schemas import ConversationPayload, IngestRequest, MessagePayload, UpsertMetrics

__all__ = [
    "ConversationMemoryController",
    "ConversationMemoryError",
    "ConversationPayload",
    "DuplicateKeyError",
    "EmbeddingError",
    "EmptyConversationError",
    "EmptyIndexError",
    "IngestRequest",
    "InvalidRangeError",
    "MessagePayload",
    "NotFoundError",
    "StoreError",
    "UpsertMetrics",
]
