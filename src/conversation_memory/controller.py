"""
Conversation memory controller (Facade) and composition root.

'ConversationMemoryController' is the single entry point an outer layer (HTTP
routes, an MCP server, a script) talks to. It owns the one 'EmbeddingQueue'
of the process and hands it to the upsert service, the embedding worker and
the retrieval service, so there is no hidden global state.

Public surface:

    'upsert_conversations'   - ingest a batch, returns created/updated counts.
    'search'                 - semantic search, top 5 conversations with messages.
    'get_by_date_range'      - conversations created within inclusive bounds.
    'process_next_embedding' - embed one queued conversation (driven externally).
    'reload_queue'           - enqueue every conversation that lacks an embedding.
    'delete_conversation'    - administrative delete, cascades to messages and embedding.

Two factories build a fully wired instance: 'in_memory' for tests and local
tools, 'from_settings' for the Voyage embeddings provider. The controller is an
async context manager; leaving it (or 'aclose') closes the provider's HTTP
client. Log sinks are left to the host application ('configure_logging').
"""

from collections.abc import Mapping, Sequence
from datetime import datetime
from typing import Any

from pydantic import TypeAdapter

from conversation_memory.config import Settings
from conversation_memory.conversation_database.data_models.conversation import (
    ConversationDatabase,
    ConversationWithMessages,
)
from conversation_memory.conversation_database.data_models.message import MessageDatabase
from conversation_memory.conversation_database.in_memory import InMemoryConversationDatabase, InMemoryMessageDatabase
from conversation_memory.embeddings.base import EmbeddingsModel
from conversation_memory.embeddings.voyage import VoyageEmbeddings
from conversation_memory.pipeline.embedding_queue import EmbeddingQueue
from conversation_memory.pipeline.embedding_worker import EmbeddingWorker
from conversation_memory.schemas import ConversationPayload, IngestRequest, UpsertMetrics
from conversation_memory.services.retrieval import RetrievalService
from conversation_memory.services.upsert import ConversationUpsertService
from conversation_memory.vectorstores.base import VectorStore
from conversation_memory.vectorstores.in_memory import InMemoryVectorStore

_payloads = TypeAdapter(list[ConversationPayload])


class ConversationMemoryController:
    def __init__(
        self,
        conversation_db: ConversationDatabase,
        message_db: MessageDatabase,
        vector_store: VectorStore,
        embeddings_model: EmbeddingsModel,
        queue: EmbeddingQueue | None = None,
    ):
        self.conversation_db = conversation_db
        self.message_db = message_db
        self.vector_store = vector_store
        self.embeddings_model = embeddings_model
        self.queue = queue or EmbeddingQueue()

        self.upsert_service = ConversationUpsertService(conversation_db, message_db, self.queue)
        self.worker = EmbeddingWorker(message_db, vector_store, embeddings_model, self.queue)
        self.retrieval = RetrievalService(conversation_db, message_db, vector_store, embeddings_model, self.queue)

    @classmethod
    def in_memory(cls, embeddings_model: EmbeddingsModel, dimension: int | None = None) -> "ConversationMemoryController":
        vector_store = InMemoryVectorStore(dimension or embeddings_model.embedding_size)
        message_db = InMemoryMessageDatabase()
        conversation_db = InMemoryConversationDatabase(message_db, vector_store)
        return cls(conversation_db, message_db, vector_store, embeddings_model)

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "ConversationMemoryController":
        settings = settings or Settings.from_env()
        embeddings_model = VoyageEmbeddings(
            api_key=settings.voyage_api_key,
            model_name=settings.voyage_model,
            embedding_size=settings.embedding_dimension,
            base_url=settings.voyage_base_url,
            timeout=settings.embedding_timeout,
        )
        return cls.in_memory(embeddings_model, settings.embedding_dimension)

    async def aclose(self) -> None:
        """Release resources held by the embeddings model (e.g. its HTTP client)."""
        await self.embeddings_model.aclose()

    async def __aenter__(self) -> "ConversationMemoryController":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def upsert_conversations(
        self, batch: IngestRequest | Sequence[ConversationPayload | Mapping[str, Any]]
    ) -> UpsertMetrics:
        """Ingest a batch. Plain dicts are validated into 'ConversationPayload' first."""
        if isinstance(batch, IngestRequest):
            conversations = batch.conversations
        else:
            conversations = _payloads.validate_python(
                [item.model_dump() if isinstance(item, ConversationPayload) else item for item in batch]
            )
        return await self.upsert_service.upsert(conversations)

    async def search(self, query: str) -> list[ConversationWithMessages]:
        return await self.retrieval.search(query)

    async def get_by_date_range(
        self, from_: datetime | None = None, to: datetime | None = None
    ) -> list[ConversationWithMessages]:
        return await self.retrieval.get_by_date_range(from_, to)

    async def process_next_embedding(self) -> str | None:
        return await self.worker.process_next()

    async def reload_queue(self) -> int:
        return await self.retrieval.reload_queue()

    async def delete_conversation(self, conversation_id: str) -> bool:
        return await self.conversation_db.delete(conversation_id)

    def queue_size(self) -> int:
        return self.queue.size()
