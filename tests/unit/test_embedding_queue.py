"""Unit tests for the in-process embedding queue."""

from conversation_memory.pipeline.embedding_queue import EmbeddingQueue


class TestEnqueue:
    def test_new_queue_is_empty(self):
        queue = EmbeddingQueue()
        assert queue.is_empty()
        assert queue.size() == 0
        assert len(queue) == 0

    def test_enqueue_appends_in_order(self):
        queue = EmbeddingQueue()
        for conversation_id in ("conv-1", "conv-2", "conv-3"):
            queue.enqueue(conversation_id)

        assert queue.size() == 3
        assert [queue.claim_next() for _ in range(3)] == ["conv-1", "conv-2", "conv-3"]

    def test_duplicates_are_kept(self):
        """The same conversation may be queued twice; both entries are claimed."""
        queue = EmbeddingQueue()
        queue.enqueue("conv-1")
        queue.enqueue("conv-1")

        assert queue.size() == 2
        assert queue.claim_next() == "conv-1"
        assert queue.claim_next() == "conv-1"


class TestClaimNext:
    def test_returns_none_when_empty(self):
        assert EmbeddingQueue().claim_next() is None

    def test_removes_head(self):
        queue = EmbeddingQueue()
        queue.enqueue("conv-1")
        queue.enqueue("conv-2")

        assert queue.claim_next() == "conv-1"
        assert queue.size() == 1
        assert not queue.is_empty()

    def test_returns_none_while_claim_in_flight(self):
        queue = EmbeddingQueue()
        queue.enqueue("conv-1")
        queue._claim_in_flight = True

        assert queue.claim_next() is None
        assert queue.size() == 1

    def test_guard_is_released_after_claim(self):
        queue = EmbeddingQueue()
        queue.enqueue("conv-1")
        queue.enqueue("conv-2")

        queue.claim_next()

        assert queue._claim_in_flight is False
        assert queue.claim_next() == "conv-2"

    def test_interleaved_enqueue_and_claim(self):
        queue = EmbeddingQueue()
        queue.enqueue("conv-1")
        assert queue.claim_next() == "conv-1"

        queue.enqueue("conv-2")
        queue.enqueue("conv-3")
        assert queue.claim_next() == "conv-2"

        queue.enqueue("conv-4")
        assert queue.size() == 2
        assert queue.claim_next() == "conv-3"
        assert queue.claim_next() == "conv-4"
        assert queue.claim_next() is None
        assert queue.is_empty()
