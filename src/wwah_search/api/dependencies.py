from functools import lru_cache

from fastapi import Depends

from ..db.session import database
from ..embeddings.embedder import Embedder
from ..search.accessor import VectorStoreAccessor
from ..search.facade import SearchService
from ..search.stats import StatsService


@lru_cache
def get_embedder() -> Embedder:
    return Embedder()


# One accessor (and so one handle cache) per process
@lru_cache
def get_accessor() -> VectorStoreAccessor:
    return VectorStoreAccessor(database, get_embedder())


def get_search_service(
    accessor: VectorStoreAccessor = Depends(get_accessor),
) -> SearchService:
    return SearchService(accessor)


def get_stats_service(
    accessor: VectorStoreAccessor = Depends(get_accessor),
) -> StatsService:
    return StatsService(accessor)
