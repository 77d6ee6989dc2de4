"""
In-process FIFO of conversation IDs waiting to be embedded.

One queue is constructed by the composition root and shared by the upsert
service (producer), the retrieval service's reconciliation sweep (producer)
and the embedding worker (consumer). Nothing is persisted; entries lost on a
restart are recovered by 'RetrievalService.reload_queue'.

No method awaits, so under asyncio every mutation completes without
interleaving. The single-claim flag is kept as a guard for callers that might
one day claim from another thread.
"""

from collections import deque

from loguru import logger


class EmbeddingQueue:
    """
    Ordered list of pending conversation IDs.

    Duplicates are allowed: enqueuing the same ID twice only causes a
    redundant recomputation of an identical embedding.
    """

    def __init__(self) -> None:
        self._pending: deque[str] = deque()
        self._claim_in_flight = False

    def enqueue(self, conversation_id: str) -> None:
        self._pending.append(conversation_id)
        logger.debug(f"Queued conversation {conversation_id} for embedding (pending={len(self._pending)})")

    def claim_next(self) -> str | None:
        """Pop and return the oldest pending ID, or None if the queue is empty or a claim is in flight."""
        if self._claim_in_flight or not self._pending:
            return None
        self._claim_in_flight = True
        try:
            return self._pending.popleft()
        finally:
            self._claim_in_flight = False

    def size(self) -> int:
        return len(self._pending)

    def is_empty(self) -> bool:
        return not self._pending

    def __len__(self) -> int:
        return len(self._pending)
