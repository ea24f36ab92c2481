from typing import Any, Dict, List, Optional, Tuple
from unittest.mock import AsyncMock, MagicMock

import pytest

from wwah_search.db.vector_store import Document, VectorStore
from wwah_search.search.accessor import VectorStoreAccessor
from wwah_search.search.cache import HandleCache


def make_candidates(*scored: Tuple[str, float], **metadata: Any) -> List[Tuple[Document, float]]:
    """Build (Document, score) pairs as returned by a similarity search."""
    return [
        (Document(page_content=text, metadata=dict(metadata)), score)
        for text, score in scored
    ]


def make_handle(
    candidates: Optional[List[Tuple[Document, float]]] = None,
    error: Optional[BaseException] = None,
    count: int = 0,
) -> AsyncMock:
    handle = AsyncMock(spec=VectorStore)
    if error is not None:
        handle.similarity_search_with_score.side_effect = error
        handle.count_documents.side_effect = error
    else:
        handle.similarity_search_with_score.return_value = candidates or []
        handle.count_documents.return_value = count
    return handle


@pytest.fixture
def mock_database():
    database = MagicMock()
    database.connect = AsyncMock(return_value=MagicMock(name="session_factory"))
    return database


@pytest.fixture
def mock_embedder():
    embedder = AsyncMock()
    embedder.embed_query.return_value = [0.1] * 8
    return embedder


@pytest.fixture
def accessor(mock_database, mock_embedder):
    return VectorStoreAccessor(mock_database, mock_embedder, cache=HandleCache())


@pytest.fixture
def handle_accessor():
    """
    Accessor stand-in whose domain handles come from a dict set by the test.
    """
    handles: Dict[str, AsyncMock] = {}
    fake = MagicMock(spec=VectorStoreAccessor)
    fake.handles = handles

    async def _get_domain_handle(domain):
        return handles[getattr(domain, "value", domain)]

    fake.get_domain_handle = AsyncMock(side_effect=_get_domain_handle)
    fake.get_user_handle = AsyncMock(return_value=None)
    return fake
