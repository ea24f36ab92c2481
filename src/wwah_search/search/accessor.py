"""
Vector Store Accessor

Hands out memoized ``VectorStore`` handles per domain and per user.

A handle is built on first request from the domain's descriptor and the
shared database connection, then reused until one of the ``clear_*``
operations drops it. Rebuilding a handle is idempotent, so concurrent first
requests for the same key are harmless: the last one simply wins.
"""

from __future__ import annotations

import asyncio
import logging
from typing import List, Optional, Tuple, Union

from ..db.models import COLLECTION_TABLES
from ..db.session import Database
from ..db.vector_store import VectorStore
from ..domains import (
    Domain,
    DomainDescriptor,
    USER_COLLECTION_NAME,
    USER_INDEX_NAME,
    all_domains,
    get_domain_descriptor,
)
from ..embeddings.embedder import Embedder
from .cache import DOMAIN_PREFIX, USER_PREFIX, HandleCache, domain_key, user_key

logger = logging.getLogger("wwah.search")


class VectorStoreAccessor:
    """
    Builds and caches vector store handles.

    Parameters
    ----------
    database : Database
        Shared, lazily connected database.
    embedder : Embedder
        Embedding client given to every handle.
    cache : Optional[HandleCache]
        Cache to use; a fresh one is created when omitted.
    """

    def __init__(
        self,
        database: Database,
        embedder: Embedder,
        cache: Optional[HandleCache] = None,
    ) -> None:
        self._database = database
        self._embedder = embedder
        self.cache = cache if cache is not None else HandleCache()

    # ------------------------------------------------------------------
    # Handles
    # ------------------------------------------------------------------

    async def get_domain_handle(self, domain: Union[Domain, str]) -> VectorStore:
        """
        Return the handle for a domain, building it on first use.

        Raises
        ------
        UnknownDomainError
            If the domain is not registered.
        ConnectivityError
            If the database cannot be reached while building the handle.
        """
        descriptor = get_domain_descriptor(domain)
        key = domain_key(descriptor.domain.value)

        handle = self.cache.get(key)
        if handle is not None:
            return handle

        session_factory = await self._database.connect()
        handle = VectorStore(
            session_factory,
            self._embedder,
            COLLECTION_TABLES[descriptor.collection_name],
            descriptor.index_name,
        )
        self.cache.set(key, handle)
        logger.debug("Built vector store handle for %s", descriptor.domain.value)
        return handle

    async def get_user_handle(self, user_id: Optional[str]) -> Optional[VectorStore]:
        """
        Return the handle over one user's embeddings.

        Returns None for an empty user id: callers skip personalized search.
        """
        if not user_id:
            return None

        key = user_key(user_id)
        handle = self.cache.get(key)
        if handle is not None:
            return handle

        session_factory = await self._database.connect()
        handle = VectorStore(
            session_factory,
            self._embedder,
            COLLECTION_TABLES[USER_COLLECTION_NAME],
            USER_INDEX_NAME,
            user_id=user_id,
        )
        self.cache.set(key, handle)
        return handle

    async def get_all_domain_handles(
        self,
    ) -> List[Tuple[Domain, VectorStore, DomainDescriptor]]:
        """
        Return ``(domain, handle, descriptor)`` for every registered domain.
        """
        domains = all_domains()
        handles = await asyncio.gather(
            *(self.get_domain_handle(domain) for domain in domains)
        )
        return [
            (domain, handle, get_domain_descriptor(domain))
            for domain, handle in zip(domains, handles)
        ]

    # ------------------------------------------------------------------
    # Invalidation
    # ------------------------------------------------------------------

    def clear_domain_cache(self, domain: Optional[Union[Domain, str]] = None) -> int:
        """
        Drop one domain's handle, or every domain handle when ``domain`` is None.

        Returns the number of dropped handles.
        """
        if domain is None:
            return self.cache.clear(prefix=DOMAIN_PREFIX)
        descriptor = get_domain_descriptor(domain)
        return int(self.cache.delete(domain_key(descriptor.domain.value)))

    def clear_user_cache(self, user_id: Optional[str] = None) -> int:
        if user_id:
            return int(self.cache.delete(user_key(user_id)))
        return self.cache.clear(prefix=USER_PREFIX)

    def clear_all_caches(self) -> int:
        return self.cache.clear()
