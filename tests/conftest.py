import pytest

from conversation_memory.controller import ConversationMemoryController
from tests.helpers import FakeEmbeddings


@pytest.fixture
def fake_embeddings() -> FakeEmbeddings:
    return FakeEmbeddings()


@pytest.fixture
def controller(fake_embeddings: FakeEmbeddings) -> ConversationMemoryController:
    return ConversationMemoryController.in_memory(fake_embeddings)
