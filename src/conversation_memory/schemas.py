"""
Ingestion payload models.

These mirror what a transcript exporter sends: an external conversation ID, an
optional title, the authoritative creation time, and the full message array in
display order. Sequence numbers are not part of the payload; they come from the
array position when the upsert service writes the messages.
"""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from conversation_memory.conversation_database.data_models.message import Roles
from conversation_memory.utils.time import ensure_utc


class MessagePayload(BaseModel):
    role: Roles
    content: str = Field(min_length=1)
    timestamp: datetime

    @field_validator("timestamp")
    @classmethod
    def _to_utc(cls, value: datetime) -> datetime:
        return ensure_utc(value)


class ConversationPayload(BaseModel):
    id: str = Field(min_length=1)
    title: str | None = None
    created_at: datetime
    messages: list[MessagePayload] = Field(min_length=1)

    @field_validator("created_at")
    @classmethod
    def _to_utc(cls, value: datetime) -> datetime:
        return ensure_utc(value)


class IngestRequest(BaseModel):
    conversations: list[ConversationPayload]


class UpsertMetrics(BaseModel):
    """Counts returned by an upsert batch. Unchanged conversations are not counted at all."""

    processed: int = 0
    created: int = 0
    updated: int = 0
